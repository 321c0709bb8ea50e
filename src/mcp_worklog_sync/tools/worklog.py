"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any

from pydantic import ValidationError

from mcp_worklog_sync.core.config import SyncConfig, resolve_config
from mcp_worklog_sync.core.errors import RemoteError
from mcp_worklog_sync.core.loader import load_document_text
from mcp_worklog_sync.core.mappings import Mappings, resolve_mappings
from mcp_worklog_sync.core.models import (
    CrossDateDuplicate,
    ProcessingOutcome,
    ScheduledEntry,
    Timeline,
    ValidationResult,
    WorkEntry,
)
from mcp_worklog_sync.core.remote import OpenProjectClient, open_client
from mcp_worklog_sync.core.validation import validate
from mcp_worklog_sync.core.workflow import prepare_timelines, submit_timelines, summarize


def _entry_to_dict(entry: WorkEntry) -> dict[str, Any]:
    return {
        "project": entry.project,
        "project_id": entry.project_id,
        "subject": entry.subject,
        "duration_hours": entry.duration_hours,
        "activity": entry.activity,
        "activity_id": entry.activity_id,
        "is_scrum": entry.is_scrum,
        "break_hours": entry.break_hours,
        "work_package_id": entry.work_package_id,
    }


def _scheduled_to_dict(scheduled: ScheduledEntry) -> dict[str, Any]:
    d = _entry_to_dict(scheduled.entry)
    d.update(
        {
            "start_time": scheduled.start_time,
            "end_time": scheduled.end_time,
            "start_time_formatted": scheduled.start_time_formatted,
            "end_time_formatted": scheduled.end_time_formatted,
        }
    )
    return d


def timeline_to_dict(timeline: Timeline) -> dict[str, Any]:
    return {
        "date": timeline.date,
        "iso_date": timeline.iso_date,
        "total_hours": timeline.total_hours,
        "entries": [_scheduled_to_dict(s) for s in timeline.entries],
    }


def _cross_to_dict(dup: CrossDateDuplicate) -> dict[str, Any]:
    return {
        "project": dup.project,
        "subject": dup.subject,
        "dates": [{"date": d.date, "hours": d.hours} for d in dup.dates],
        "total_hours": dup.total_hours,
    }


def result_to_dict(result: ValidationResult) -> dict[str, Any]:
    summary = summarize(result)
    return {
        "is_valid": result.is_valid,
        "errors": list(result.errors),
        "dates": [
            {
                "date": log.date,
                "iso_date": log.iso_date,
                "entries": len(log.entries),
                "hours": sum(e.duration_hours for e in log.entries),
            }
            for log in result.logs
        ],
        "total_entries": summary.total_entries,
        "total_hours": summary.total_hours,
        "cross_date_duplicates": [_cross_to_dict(d) for d in result.cross_date_duplicates],
    }


def outcome_to_dict(timeline: Timeline, outcome: ProcessingOutcome) -> dict[str, Any]:
    return {
        "date": timeline.date,
        "iso_date": timeline.iso_date,
        "created": outcome.created_count,
        "skipped": outcome.skipped_count,
        "failed_count": len(outcome.failed),
        "success": [
            {
                "subject": s.entry.subject,
                "work_package_id": s.work_package_id,
                "time_entry_id": s.time_entry_id,
                "action": s.action.value,
                "work_package_created": s.work_package_created,
            }
            for s in outcome.success
        ],
        "failed": [{"subject": f.entry.subject, "error": f.error} for f in outcome.failed],
    }


async def _load_and_validate(
    *,
    log_path: str | None,
    content: str | None,
    mappings: Mappings | None,
    cfg: SyncConfig,
) -> ValidationResult:
    if (log_path is None) == (content is None):
        raise ValueError("Provide exactly one of log_path or content.")
    text = content if content is not None else await load_document_text(log_path)
    return validate(text, mappings if mappings is not None else resolve_mappings(cfg))


@asynccontextmanager
async def _client_scope(
    client: OpenProjectClient | None, cfg: SyncConfig
) -> AsyncIterator[OpenProjectClient]:
    if client is not None:
        yield client
        return
    async with open_client(cfg) as c:
        yield c


async def validate_worklog_impl(
    *,
    log_path: str | None = None,
    content: str | None = None,
    mappings: Mappings | None = None,
    cfg: SyncConfig | None = None,
) -> dict[str, Any]:
    """Implementation for the `validate_worklog` MCP tool."""
    cfg = resolve_config(cfg)
    result = await _load_and_validate(
        log_path=log_path, content=content, mappings=mappings, cfg=cfg
    )
    return result_to_dict(result)


async def preview_timelines_impl(
    *,
    log_path: str | None = None,
    content: str | None = None,
    start_hours: Mapping[str, int] | None = None,
    default_start_hour: int | None = None,
    dates: Sequence[str] | None = None,
    mappings: Mappings | None = None,
    cfg: SyncConfig | None = None,
) -> dict[str, Any]:
    """Implementation for the `preview_timelines` MCP tool.

    Invalid documents return their errors and no timelines.
    """
    cfg = resolve_config(cfg)
    result = await _load_and_validate(
        log_path=log_path, content=content, mappings=mappings, cfg=cfg
    )
    if not result.is_valid:
        return {"is_valid": False, "errors": list(result.errors), "timelines": []}

    timelines = prepare_timelines(
        result,
        start_hours,
        default_start_hour=(
            default_start_hour if default_start_hour is not None else cfg.default_start_hour
        ),
        dates=dates,
    )
    return {
        "is_valid": True,
        "errors": [],
        "timelines": [timeline_to_dict(t) for t in timelines],
        "cross_date_duplicates": [_cross_to_dict(d) for d in result.cross_date_duplicates],
    }


async def submit_worklog_impl(
    *,
    log_path: str | None = None,
    content: str | None = None,
    start_hours: Mapping[str, int] | None = None,
    default_start_hour: int | None = None,
    dates: Sequence[str] | None = None,
    client: OpenProjectClient | None = None,
    mappings: Mappings | None = None,
    cfg: SyncConfig | None = None,
) -> dict[str, Any]:
    """Implementation for the `submit_worklog` MCP tool.

    Nothing is sent to OpenProject unless the whole document validates.
    """
    cfg = resolve_config(cfg)
    result = await _load_and_validate(
        log_path=log_path, content=content, mappings=mappings, cfg=cfg
    )
    if not result.is_valid:
        return {"submitted": False, "is_valid": False, "errors": list(result.errors), "results": []}

    timelines = prepare_timelines(
        result,
        start_hours,
        default_start_hour=(
            default_start_hour if default_start_hour is not None else cfg.default_start_hour
        ),
        dates=dates,
    )

    async with _client_scope(client, cfg) as c:
        outcomes = await submit_timelines(c, timelines)

    results = [outcome_to_dict(t, outcome) for t, outcome in outcomes]
    return {
        "submitted": True,
        "is_valid": True,
        "errors": [],
        "results": results,
        "totals": {
            "created": sum(r["created"] for r in results),
            "skipped": sum(r["skipped"] for r in results),
            "failed": sum(r["failed_count"] for r in results),
        },
    }


async def check_connection_impl(
    *, client: OpenProjectClient | None = None, cfg: SyncConfig | None = None
) -> dict[str, Any]:
    """Implementation for the `check_connection` MCP tool."""
    cfg = resolve_config(cfg)
    async with _client_scope(client, cfg) as c:
        try:
            user = await c.get_current_user()
        except (RemoteError, ValidationError) as e:
            return {"success": False, "error": str(e)}
    return {"success": True, "user": user.name, "user_id": user.id}


async def list_remote_projects_impl(
    *,
    client: OpenProjectClient | None = None,
    mappings: Mappings | None = None,
    cfg: SyncConfig | None = None,
) -> dict[str, Any]:
    """Implementation for the `list_remote_projects` MCP tool.

    Each project is flagged with whether the local project mapping knows its id.
    """
    cfg = resolve_config(cfg)
    mappings = mappings if mappings is not None else resolve_mappings(cfg)
    mapped_ids = {mappings.projects.resolve(name) for name in mappings.projects.names()}
    async with _client_scope(client, cfg) as c:
        projects = await c.get_projects()
    return {
        "count": len(projects),
        "projects": [
            {
                "id": p.id,
                "identifier": p.identifier,
                "name": p.name,
                "mapped": p.id in mapped_ids,
            }
            for p in projects
        ],
    }


async def list_remote_statuses_impl(
    *, client: OpenProjectClient | None = None, cfg: SyncConfig | None = None
) -> dict[str, Any]:
    """Implementation for the `list_remote_statuses` MCP tool."""
    cfg = resolve_config(cfg)
    async with _client_scope(client, cfg) as c:
        statuses = await c.get_statuses()
    return {
        "default_status_id": cfg.default_status_id,
        "statuses": [
            {"id": s.id, "name": s.name, "is_default": s.is_default, "is_closed": s.is_closed}
            for s in statuses
        ],
    }
