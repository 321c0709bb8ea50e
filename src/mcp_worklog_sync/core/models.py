"""Core data models for work-log sync."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class SyncAction(str, Enum):
    """What the reconciliation pipeline did for a time entry."""

    CREATED = "created"
    SKIPPED = "skipped"


class ProgressStatus(str, Enum):
    """Per-entry status reported through the progress hook."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class WorkEntry:
    """One unit of work to log for a date."""

    project: str
    subject: str
    duration_hours: float
    activity: str
    is_scrum: bool
    break_hours: float | None = None
    work_package_id: int | None = None
    project_id: int | None = None  # filled by enrichment
    activity_id: int | None = None  # filled by enrichment


@dataclass(frozen=True, slots=True)
class DailyLog:
    """Validated entries for a single calendar date."""

    date: str  # raw "mon-dd-yyyy" token
    iso_date: str  # yyyy-mm-dd
    entries: tuple[WorkEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class SameDateDuplicate:
    """Two entries of one date sharing project + subject (0-based indices)."""

    index1: int
    index2: int
    project: str
    subject: str


@dataclass(frozen=True, slots=True)
class DateHours:
    date: str
    hours: float


@dataclass(frozen=True, slots=True)
class CrossDateDuplicate:
    """A project + subject pair that appears on more than one date."""

    project: str
    subject: str
    dates: tuple[DateHours, ...]
    total_hours: float


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validating a work-log document.

    Same-date duplicates are folded into ``errors``; cross-date duplicates are
    informational and never affect ``is_valid``.
    """

    logs: tuple[DailyLog, ...] = ()
    errors: tuple[str, ...] = ()
    cross_date_duplicates: tuple[CrossDateDuplicate, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True, slots=True)
class ScheduledEntry:
    """A work entry placed on the clock."""

    entry: WorkEntry
    start_time: float
    end_time: float
    start_time_formatted: str
    end_time_formatted: str

    @property
    def subject(self) -> str:
        return self.entry.subject

    @property
    def duration_hours(self) -> float:
        return self.entry.duration_hours


@dataclass(frozen=True, slots=True)
class Timeline:
    """Time-ordered schedule for one date."""

    date: str
    iso_date: str
    entries: tuple[ScheduledEntry, ...]
    total_hours: float


@dataclass(frozen=True, slots=True)
class ReconcileSuccess:
    entry: ScheduledEntry
    work_package_id: int
    time_entry_id: int
    action: SyncAction
    work_package_created: bool = False


@dataclass(frozen=True, slots=True)
class ReconcileFailure:
    entry: ScheduledEntry
    error: str


@dataclass(slots=True)
class ProcessingOutcome:
    """Append-only accumulator filled by one reconciliation run."""

    success: list[ReconcileSuccess] = field(default_factory=list)
    failed: list[ReconcileFailure] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return sum(1 for s in self.success if s.action is SyncAction.CREATED)

    @property
    def skipped_count(self) -> int:
        return sum(1 for s in self.success if s.action is SyncAction.SKIPPED)


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """Progress notification emitted around each entry."""

    current: int
    total: int
    entry: ScheduledEntry
    status: ProgressStatus
    error: str | None = None
