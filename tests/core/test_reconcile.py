from __future__ import annotations

import pytest

from mcp_worklog_sync.core.models import (
    DailyLog,
    ProgressEvent,
    ProgressStatus,
    SyncAction,
    Timeline,
    WorkEntry,
)
from mcp_worklog_sync.core.reconcile import reconcile
from mcp_worklog_sync.core.remote import OpenProjectClient
from mcp_worklog_sync.core.timeline import build_timeline


def _entry(subject: str, hours: float = 1.0, **kw) -> WorkEntry:
    fields = {
        "project": "IDCOL",
        "subject": subject,
        "duration_hours": hours,
        "activity": "Development",
        "is_scrum": False,
        "project_id": 64,
        "activity_id": 1,
    }
    fields.update(kw)
    return WorkEntry(**fields)


def _timeline(*entries: WorkEntry, start_hour: int = 9) -> Timeline:
    return build_timeline(DailyLog("nov-23-2025", "2025-11-23", tuple(entries)), start_hour)


@pytest.mark.asyncio
async def test_creates_work_package_and_time_entry(
    client: OpenProjectClient, fake_openproject
) -> None:
    outcome = await reconcile(client, _timeline(_entry("Fix login", 1.5)))

    (success,) = outcome.success
    assert outcome.failed == []
    assert success.action is SyncAction.CREATED
    assert success.work_package_created
    wp = fake_openproject.work_packages[success.work_package_id]
    assert wp["subject"] == "Fix login"
    assert wp["status"] == "/api/v3/statuses/7"
    te = fake_openproject.time_entries[success.time_entry_id]
    assert te["hours"] == "PT1.5H"
    assert te["spentOn"] == "2025-11-23"
    assert te["comment"] == "[9:00 AM - 10:30 AM] Fix login"
    assert te["activity"] == "/api/v3/time_entries/activities/1"


@pytest.mark.asyncio
async def test_reuses_work_package_found_by_subject(
    client: OpenProjectClient, fake_openproject
) -> None:
    wp_id = fake_openproject.add_work_package(64, "fix LOGIN")

    outcome = await reconcile(client, _timeline(_entry("Fix login")))

    (success,) = outcome.success
    assert success.work_package_id == wp_id
    assert not success.work_package_created
    assert len(fake_openproject.work_packages) == 1


@pytest.mark.asyncio
async def test_explicit_work_package_id_skips_lookup(
    client: OpenProjectClient, fake_openproject
) -> None:
    outcome = await reconcile(client, _timeline(_entry("Fix", work_package_id=4242)))

    (success,) = outcome.success
    assert success.work_package_id == 4242
    paths = [endpoint.split("?")[0] for _, endpoint, _ in fake_openproject.calls]
    assert "/work_packages" not in paths
    assert paths == ["/time_entries", "/time_entries"]


@pytest.mark.asyncio
async def test_second_run_skips_everything(client: OpenProjectClient, fake_openproject) -> None:
    timeline = _timeline(_entry("A"), _entry("B", 2))

    first = await reconcile(client, timeline)
    writes_after_first = len(fake_openproject.writes())
    second = await reconcile(client, timeline)

    assert first.created_count == 2
    assert second.created_count == 0
    assert second.skipped_count == 2
    assert [s.time_entry_id for s in second.success] == [s.time_entry_id for s in first.success]
    assert len(fake_openproject.writes()) == writes_after_first
    assert all(not s.work_package_created for s in second.success)


@pytest.mark.asyncio
async def test_failure_is_isolated(client: OpenProjectClient, fake_openproject) -> None:
    fake_openproject.failing_subjects.add("Broken")

    outcome = await reconcile(client, _timeline(_entry("A"), _entry("Broken"), _entry("C")))

    assert [s.entry.subject for s in outcome.success] == ["A", "C"]
    (failure,) = outcome.failed
    assert failure.entry.subject == "Broken"
    assert failure.error == "Activity is not active"


@pytest.mark.asyncio
async def test_missing_ids_fail_the_entry(client: OpenProjectClient, fake_openproject) -> None:
    outcome = await reconcile(client, _timeline(_entry("No ids", project_id=None)))

    assert outcome.success == []
    assert "no resolved project/activity id" in outcome.failed[0].error
    assert fake_openproject.calls == []


@pytest.mark.asyncio
async def test_progress_events(client: OpenProjectClient, fake_openproject) -> None:
    fake_openproject.failing_subjects.add("B")
    events: list[ProgressEvent] = []

    await reconcile(client, _timeline(_entry("A"), _entry("B")), on_progress=events.append)

    assert [(e.current, e.total, e.status, e.entry.subject) for e in events] == [
        (1, 2, ProgressStatus.PROCESSING, "A"),
        (1, 2, ProgressStatus.COMPLETED, "A"),
        (2, 2, ProgressStatus.PROCESSING, "B"),
        (2, 2, ProgressStatus.FAILED, "B"),
    ]
    assert events[-1].error == "Activity is not active"
    assert events[1].error is None


@pytest.mark.asyncio
async def test_empty_timeline(client: OpenProjectClient) -> None:
    outcome = await reconcile(client, Timeline("nov-23-2025", "2025-11-23", (), 0.0))
    assert outcome.success == [] and outcome.failed == []
