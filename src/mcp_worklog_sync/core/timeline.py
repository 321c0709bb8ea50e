"""Timeline construction for one day of work.

SCRUM entries sit in a fixed 10:00 slot. Everything else is chained from the
chosen start hour: each entry starts where the previous one ended, plus its
``break_hours`` (never before the first entry of the chain).
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from .models import DailyLog, ScheduledEntry, Timeline, WorkEntry

SCRUM_START_HOUR = 10
DEFAULT_START_HOUR = 11


def format_time_12h(hours: float, minutes: int | None = None) -> str:
    """Format an hour-of-day value as ``h:mm AM/PM``.

    Minutes come from the fractional part unless given explicitly.
    """
    h = math.floor(hours)
    m = minutes if minutes is not None else round((hours - h) * 60)
    if m >= 60:
        h += m // 60
        m %= 60
    period = "PM" if h >= 12 else "AM"
    h12 = h % 12 or 12
    return f"{h12}:{m:02d} {period}"


def _schedule(entry: WorkEntry, start: float) -> ScheduledEntry:
    end = start + entry.duration_hours
    return ScheduledEntry(
        entry=entry,
        start_time=start,
        end_time=end,
        start_time_formatted=format_time_12h(start),
        end_time_formatted=format_time_12h(end),
    )


def calculate_time_chain(
    entries: Sequence[WorkEntry], start_hour: float = DEFAULT_START_HOUR
) -> list[ScheduledEntry]:
    """Place entries back to back starting at ``start_hour``."""
    current = float(start_hour)
    out: list[ScheduledEntry] = []
    for index, entry in enumerate(entries):
        if index > 0 and entry.break_hours:
            current += entry.break_hours
        scheduled = _schedule(entry, current)
        current = scheduled.end_time
        out.append(scheduled)
    return out


def build_timeline(log: DailyLog, start_hour: float = DEFAULT_START_HOUR) -> Timeline:
    """Build the schedule for a validated log.

    Output order is all SCRUM entries, then the chained entries, each group in
    document order.
    """
    if not 0 <= start_hour <= 23:
        raise ValueError("start_hour must be between 0 and 23")

    scrum = [e for e in log.entries if e.is_scrum]
    regular = [e for e in log.entries if not e.is_scrum]

    scheduled = [_schedule(e, SCRUM_START_HOUR) for e in scrum]
    scheduled.extend(calculate_time_chain(regular, start_hour))

    return Timeline(
        date=log.date,
        iso_date=log.iso_date,
        entries=tuple(scheduled),
        total_hours=sum(s.entry.duration_hours for s in scheduled),
    )


def build_comment(scheduled: ScheduledEntry) -> str:
    """Comment stored on the remote time entry."""
    return (
        f"[{scheduled.start_time_formatted} - {scheduled.end_time_formatted}] "
        f"{scheduled.entry.subject}"
    )
