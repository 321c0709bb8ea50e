"""Upload -> review -> submit flow over validated documents."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from .models import DailyLog, ProcessingOutcome, Timeline, ValidationResult
from .reconcile import ProgressCallback, reconcile
from .remote.client import OpenProjectClient
from .timeline import DEFAULT_START_HOUR, build_timeline

logger = logging.getLogger(__name__)


class InvalidWorkLogError(ValueError):
    """Raised when a document with validation errors is asked to proceed."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = list(errors)
        super().__init__(
            f"Work log has {len(self.errors)} validation error(s): " + "; ".join(self.errors)
        )


@dataclass(frozen=True, slots=True)
class WorkLogSummary:
    dates: tuple[str, ...]
    total_entries: int
    total_hours: float


def summarize(result: ValidationResult) -> WorkLogSummary:
    return WorkLogSummary(
        dates=tuple(log.date for log in result.logs),
        total_entries=sum(len(log.entries) for log in result.logs),
        total_hours=sum(e.duration_hours for log in result.logs for e in log.entries),
    )


def _check_hour(value: int, date: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 23:
        raise ValueError(f"Start hour for {date} must be an integer between 0 and 23")
    return value


def resolve_start_hours(
    logs: Sequence[DailyLog],
    overrides: Mapping[str, int] | None = None,
    default_start_hour: int = DEFAULT_START_HOUR,
) -> dict[str, int]:
    """Return one start hour per date.

    Overrides may be keyed by the raw date token or by the ISO date.
    """
    _check_hour(default_start_hour, "default")
    overrides = dict(overrides or {})
    known = {log.date for log in logs} | {log.iso_date for log in logs}
    unknown = sorted(k for k in overrides if k not in known)
    if unknown:
        raise ValueError(f"Start hour given for unknown date(s): {', '.join(unknown)}")

    hours: dict[str, int] = {}
    for log in logs:
        value = overrides.get(log.date, overrides.get(log.iso_date, default_start_hour))
        hours[log.date] = _check_hour(value, log.date)
    return hours


def prepare_timelines(
    result: ValidationResult,
    start_hours: Mapping[str, int] | None = None,
    *,
    default_start_hour: int = DEFAULT_START_HOUR,
    dates: Sequence[str] | None = None,
) -> list[Timeline]:
    """Build one timeline per log of a valid result.

    ``dates`` restricts the output to the given raw or ISO dates.
    """
    if not result.is_valid:
        raise InvalidWorkLogError(result.errors)

    hours = resolve_start_hours(result.logs, start_hours, default_start_hour)
    logs = list(result.logs)
    if dates:
        wanted = set(dates)
        logs = [log for log in logs if log.date in wanted or log.iso_date in wanted]
        if not logs:
            raise ValueError(f"No logs match date(s): {', '.join(dates)}")

    return [build_timeline(log, hours[log.date]) for log in logs]


async def submit_timelines(
    client: OpenProjectClient,
    timelines: Sequence[Timeline],
    on_progress: ProgressCallback | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> list[tuple[Timeline, ProcessingOutcome]]:
    """Reconcile timelines one after another, in order.

    Returns one (timeline, outcome) pair per submitted timeline; a document may
    hold several logs for the same date.

    ``should_stop`` is consulted between timelines only.
    """
    outcomes: list[tuple[Timeline, ProcessingOutcome]] = []
    for timeline in timelines:
        if should_stop is not None and should_stop():
            logger.info("Submission stopped before %s", timeline.iso_date)
            break
        logger.info(
            "Submitting %d entr%s for %s",
            len(timeline.entries),
            "y" if len(timeline.entries) == 1 else "ies",
            timeline.iso_date,
        )
        outcomes.append((timeline, await reconcile(client, timeline, on_progress)))
    return outcomes
