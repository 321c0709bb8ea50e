from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence

from mcp_worklog_sync.core.config import LOG_LEVEL_ENV, SyncConfig, resolve_config
from mcp_worklog_sync.core.loader import load_document_text
from mcp_worklog_sync.core.mappings import resolve_mappings
from mcp_worklog_sync.core.models import (
    ProcessingOutcome,
    ProgressEvent,
    ProgressStatus,
    Timeline,
    ValidationResult,
)
from mcp_worklog_sync.core.remote import open_client
from mcp_worklog_sync.core.validation import validate
from mcp_worklog_sync.core.workflow import prepare_timelines, submit_timelines, summarize
from mcp_worklog_sync.tools.worklog import check_connection_impl


def _parse_start(s: str) -> tuple[str, int]:
    """Parse DATE=HOUR (e.g., nov-23-2025=9)."""
    date, sep, hour = s.partition("=")
    if not sep or not date.strip():
        raise argparse.ArgumentTypeError("start must look like DATE=HOUR (e.g., nov-23-2025=9)")
    try:
        value = int(hour)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid start hour: {hour!r}") from e
    if not 0 <= value <= 23:
        raise argparse.ArgumentTypeError("Start hour must be between 0 and 23")
    return date.strip(), value


def _hour(s: str) -> int:
    try:
        value = int(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid hour: {s!r}") from e
    if not 0 <= value <= 23:
        raise argparse.ArgumentTypeError("Hour must be between 0 and 23")
    return value


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def _load(path: str, cfg: SyncConfig) -> ValidationResult:
    text = await load_document_text(path)
    return validate(text, resolve_mappings(cfg))


def _print_validation(result: ValidationResult) -> None:
    summary = summarize(result)
    if result.is_valid:
        print(
            f"Valid: {len(summary.dates)} date(s), {summary.total_entries} entries, "
            f"{summary.total_hours:g}h total."
        )
    else:
        print(f"Found {len(result.errors)} validation error(s):")
        for err in result.errors:
            print(f"  - {err}")

    if result.cross_date_duplicates:
        print("\nSubjects logged on more than one date (review only):")
        for dup in result.cross_date_duplicates:
            dates = ", ".join(f"{d.date} ({d.hours:g}h)" for d in dup.dates)
            print(f"  - [{dup.project}] {dup.subject}: {dates}; {dup.total_hours:g}h total")


def _print_timeline(timeline: Timeline) -> None:
    print(f"\n{timeline.date} ({timeline.iso_date}) - {timeline.total_hours:g}h")
    for s in timeline.entries:
        tag = " [SCRUM]" if s.entry.is_scrum else ""
        print(
            f"  {s.start_time_formatted:>8} - {s.end_time_formatted:>8}  "
            f"{s.entry.project} / {s.entry.activity}: {s.entry.subject}{tag}"
        )


def _print_progress(event: ProgressEvent) -> None:
    if event.status is ProgressStatus.PROCESSING:
        return
    mark = "ok" if event.status is ProgressStatus.COMPLETED else "FAILED"
    suffix = f" ({event.error})" if event.error else ""
    print(f"  [{event.current}/{event.total}] {mark}: {event.entry.subject}{suffix}")


def _print_outcome(timeline: Timeline, outcome: ProcessingOutcome) -> None:
    print(
        f"{timeline.iso_date}: {outcome.created_count} created, "
        f"{outcome.skipped_count} skipped, {len(outcome.failed)} failed"
    )


def _confirm(prompt: str) -> bool:
    try:
        answer = input(prompt)
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


async def _run(args: argparse.Namespace) -> int:
    cfg = resolve_config()

    if args.command == "whoami":
        out = await check_connection_impl(cfg=cfg)
        if not out["success"]:
            print(f"Connection failed: {out['error']}", file=sys.stderr)
            return 1
        print(f"Connected as {out['user']} (id {out['user_id']})")
        return 0

    result = await _load(args.file, cfg)
    _print_validation(result)
    if not result.is_valid:
        return 1
    if args.command == "validate":
        return 0

    default_start = args.start_hour if args.start_hour is not None else cfg.default_start_hour
    timelines = prepare_timelines(
        result,
        dict(args.start or []),
        default_start_hour=default_start,
        dates=args.date,
    )
    for timeline in timelines:
        _print_timeline(timeline)
    if args.command == "timeline":
        return 0

    if not args.yes and not _confirm(f"\nSubmit {len(timelines)} date(s) to OpenProject? [y/N] "):
        print("Aborted.")
        return 1

    async with open_client(cfg) as client:
        outcomes = await submit_timelines(client, timelines, on_progress=_print_progress)

    print()
    failed = 0
    for timeline, outcome in outcomes:
        _print_outcome(timeline, outcome)
        failed += len(outcome.failed)
    return 1 if failed else 0


def _add_schedule_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("file", help="Work-log JSON file")
    p.add_argument(
        "--start",
        type=_parse_start,
        action="append",
        metavar="DATE=HOUR",
        help="Start hour for one date (repeatable), e.g. nov-23-2025=9",
    )
    p.add_argument(
        "--start-hour",
        type=_hour,
        default=None,
        help="Start hour for dates without --start (default: WORKLOG_SYNC_START_HOUR or 11)",
    )
    p.add_argument("--date", action="append", help="Only this date (repeatable)")


def main(argv: Sequence[str] | None = None) -> None:
    p = argparse.ArgumentParser(
        prog="worklog-sync",
        description="Validate daily work logs and log them to OpenProject.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    sub = p.add_subparsers(dest="command", required=True)

    pv = sub.add_parser("validate", help="Validate a work-log file")
    pv.add_argument("file", help="Work-log JSON file")

    _add_schedule_args(sub.add_parser("timeline", help="Show the computed schedule"))

    ps = sub.add_parser("submit", help="Submit time entries to OpenProject")
    _add_schedule_args(ps)
    ps.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    sub.add_parser("whoami", help="Check the OpenProject connection")

    args = p.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        code = asyncio.run(_run(args))
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    raise SystemExit(code)


if __name__ == "__main__":
    main()
