"""Idempotent submission of a timeline to OpenProject.

Entries are processed strictly one after another. For each entry the pipeline
reads remote state before writing, so a repeated run skips bookings that
already exist instead of creating them twice. A failing entry is recorded and
the batch moves on.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .models import (
    ProcessingOutcome,
    ProgressEvent,
    ProgressStatus,
    ReconcileFailure,
    ReconcileSuccess,
    ScheduledEntry,
    SyncAction,
    Timeline,
)
from .remote.client import OpenProjectClient
from .timeline import build_comment

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]


async def _resolve_work_package(
    client: OpenProjectClient, scheduled: ScheduledEntry
) -> tuple[int, bool]:
    """Return (work package id, created?) for an entry."""
    entry = scheduled.entry
    if entry.work_package_id is not None:
        return entry.work_package_id, False

    existing = await client.find_work_package_by_subject(entry.project_id, entry.subject)
    if existing is not None:
        return existing.id, False

    created = await client.create_work_package(entry.project_id, entry.subject)
    logger.info("Created work package #%s for %r", created.id, entry.subject)
    return created.id, True


async def _reconcile_entry(
    client: OpenProjectClient, scheduled: ScheduledEntry, iso_date: str
) -> ReconcileSuccess:
    entry = scheduled.entry
    if entry.project_id is None or entry.activity_id is None:
        raise ValueError(f"Entry {entry.subject!r} has no resolved project/activity id")

    wp_id, wp_created = await _resolve_work_package(client, scheduled)

    existing = await client.find_time_entries(wp_id, iso_date)
    if existing:
        logger.info("Time entry #%s already exists for #%s on %s", existing[0].id, wp_id, iso_date)
        return ReconcileSuccess(
            entry=scheduled,
            work_package_id=wp_id,
            time_entry_id=existing[0].id,
            action=SyncAction.SKIPPED,
            work_package_created=wp_created,
        )

    time_entry = await client.create_time_entry(
        wp_id,
        entry.project_id,
        entry.duration_hours,
        entry.activity_id,
        build_comment(scheduled),
        iso_date,
    )
    logger.info(
        "Logged %sh on #%s for %s (time entry #%s)",
        entry.duration_hours,
        wp_id,
        iso_date,
        time_entry.id,
    )
    return ReconcileSuccess(
        entry=scheduled,
        work_package_id=wp_id,
        time_entry_id=time_entry.id,
        action=SyncAction.CREATED,
        work_package_created=wp_created,
    )


async def reconcile(
    client: OpenProjectClient,
    timeline: Timeline,
    on_progress: ProgressCallback | None = None,
) -> ProcessingOutcome:
    """Submit every entry of a timeline and report per-entry outcomes."""
    outcome = ProcessingOutcome()
    total = len(timeline.entries)
    processed = 0

    for scheduled in timeline.entries:
        if on_progress is not None:
            on_progress(
                ProgressEvent(
                    current=processed + 1,
                    total=total,
                    entry=scheduled,
                    status=ProgressStatus.PROCESSING,
                )
            )

        try:
            result = await _reconcile_entry(client, scheduled, timeline.iso_date)
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            logger.warning(
                "Failed to log %r on %s: %s", scheduled.subject, timeline.iso_date, message
            )
            outcome.failed.append(ReconcileFailure(entry=scheduled, error=message))
            processed += 1
            if on_progress is not None:
                on_progress(
                    ProgressEvent(
                        current=processed,
                        total=total,
                        entry=scheduled,
                        status=ProgressStatus.FAILED,
                        error=message,
                    )
                )
            continue

        outcome.success.append(result)
        processed += 1
        if on_progress is not None:
            on_progress(
                ProgressEvent(
                    current=processed,
                    total=total,
                    entry=scheduled,
                    status=ProgressStatus.COMPLETED,
                )
            )

    return outcome
