"""Duplicate subject detection.

Same-date duplicates block submission (the remote side would book the same
work twice). Cross-date duplicates are normal for ongoing tasks and are only
surfaced for review.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .models import CrossDateDuplicate, DailyLog, DateHours, SameDateDuplicate, WorkEntry


def _get(entry: WorkEntry | Mapping[str, Any], name: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


def _norm(value: Any) -> str:
    return str(value if value is not None else "").strip().lower()


def detect_same_date(
    entries: Sequence[WorkEntry | Mapping[str, Any]],
) -> list[SameDateDuplicate]:
    """Return one record per repeated project + subject within a single date.

    The first occurrence of a key is the baseline; each later occurrence points
    back at it.
    """
    seen: dict[str, int] = {}
    out: list[SameDateDuplicate] = []

    for index, entry in enumerate(entries):
        project = _get(entry, "project")
        subject = _get(entry, "subject")
        key = f"{_norm(project)}|{_norm(subject)}"
        if key in seen:
            out.append(
                SameDateDuplicate(
                    index1=seen[key],
                    index2=index,
                    project=str(project),
                    subject=str(subject),
                )
            )
        else:
            seen[key] = index

    return out


def detect_cross_date(logs: Sequence[DailyLog]) -> list[CrossDateDuplicate]:
    """Aggregate project + subject pairs across dates; keep those on 2+ dates."""
    groups: dict[str, dict[str, Any]] = {}

    for log in logs:
        for entry in log.entries:
            key = f"{entry.project_id}|{entry.subject}".lower()
            group = groups.get(key)
            if group is None:
                group = {
                    "project": entry.project,
                    "subject": entry.subject,
                    "dates": [],
                    "total_hours": 0.0,
                }
                groups[key] = group
            group["dates"].append(DateHours(date=log.date, hours=entry.duration_hours))
            group["total_hours"] += entry.duration_hours

    return [
        CrossDateDuplicate(
            project=g["project"],
            subject=g["subject"],
            dates=tuple(g["dates"]),
            total_hours=g["total_hours"],
        )
        for g in groups.values()
        if len(g["dates"]) > 1
    ]
