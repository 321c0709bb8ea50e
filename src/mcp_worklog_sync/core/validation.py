"""Work-log document validation.

Validation never raises for bad input: every problem becomes a message in
``ValidationResult.errors`` so the caller sees the full list at once.

Check order is fixed:
    structure -> per-entry fields -> same-date duplicates -> cross-date aggregation.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any

from .dates import is_date_token, to_iso_date
from .duplicates import detect_cross_date, detect_same_date
from .errors import DateParseError
from .mappings import Mappings, default_mappings
from .models import DailyLog, ValidationResult, WorkEntry

REQUIRED_FIELDS = ("project", "subject", "duration_hours", "activity", "is_scrum")

NO_LOGS_ARRAY = 'JSON must have a "logs" array'
EMPTY_LOGS = 'No log entries found in "logs" array'


def parse_document(text: str | bytes | bytearray) -> Any:
    """Decode JSON text, normalizing the error message."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValueError(f"Invalid JSON: {e}") from e


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _validate_entry(
    data: Any, index: int, mappings: Mappings
) -> tuple[list[str], WorkEntry | None]:
    """Validate one raw entry; return (errors, enriched entry or None)."""
    prefix = f"Entry {index + 1}: "
    if not isinstance(data, Mapping):
        return [f"{prefix}must be an object"], None

    errors: list[str] = []
    for name in REQUIRED_FIELDS:
        if name not in data:
            errors.append(f"{prefix}Missing required field '{name}'")
        elif data[name] is None:
            errors.append(f"{prefix}Field '{name}' cannot be null")

    project = data.get("project")
    project_id: int | None = None
    if project is not None:
        if not _is_text(project):
            errors.append(f"{prefix}Field 'project' must be a non-empty string")
        else:
            project_id = mappings.projects.resolve(project)
            if project_id is None:
                errors.append(f'{prefix}Unknown project "{project}"')

    subject = data.get("subject")
    if subject is not None and not _is_text(subject):
        errors.append(f"{prefix}Field 'subject' must be a non-empty string")

    duration = data.get("duration_hours")
    if duration is not None and (not _is_number(duration) or duration <= 0):
        errors.append(f"{prefix}Field 'duration_hours' must be a positive number")

    activity = data.get("activity")
    activity_id: int | None = None
    if activity is not None:
        if not _is_text(activity):
            errors.append(f"{prefix}Field 'activity' must be a non-empty string")
        else:
            activity_id = mappings.activities.resolve(activity)
            if activity_id is None:
                errors.append(f'{prefix}Unknown activity "{activity}"')

    is_scrum = data.get("is_scrum")
    if is_scrum is not None and not isinstance(is_scrum, bool):
        errors.append(f"{prefix}Field 'is_scrum' must be a boolean (true or false)")

    break_hours = data.get("break_hours")
    if break_hours is not None:
        if not _is_number(break_hours):
            errors.append(f"{prefix}Field 'break_hours' must be a number or null")
        elif break_hours < 0:
            errors.append(f"{prefix}Field 'break_hours' must be 0 or greater")

    wp_id = data.get("work_package_id")
    if wp_id is not None:
        if isinstance(wp_id, float) and wp_id.is_integer():
            wp_id = int(wp_id)
        if isinstance(wp_id, bool) or not isinstance(wp_id, int) or wp_id <= 0:
            errors.append(f"{prefix}Field 'work_package_id' must be a positive integer or null")

    if errors:
        return errors, None

    return [], WorkEntry(
        project=project,
        subject=subject,
        duration_hours=float(duration),
        activity=activity,
        is_scrum=is_scrum,
        break_hours=float(break_hours) if break_hours is not None else None,
        work_package_id=wp_id,
        project_id=project_id,
        activity_id=activity_id,
    )


def _same_date_errors(date_token: str, entries: list[Any]) -> list[str]:
    # Only entries with a usable subject take part; indices stay document-relative.
    candidates = [
        (i, e)
        for i, e in enumerate(entries)
        if isinstance(e, Mapping) and _is_text(e.get("subject"))
    ]
    dups = detect_same_date([e for _, e in candidates])
    return [
        f'{date_token}: Duplicate subject "{d.subject}" '
        f"(entries {candidates[d.index1][0] + 1} and {candidates[d.index2][0] + 1})"
        for d in dups
    ]


def validate(raw: Any, mappings: Mappings | None = None) -> ValidationResult:
    """Validate a work-log document (JSON text or decoded object)."""
    if mappings is None:
        mappings = default_mappings()

    if isinstance(raw, (str, bytes, bytearray)):
        try:
            data = parse_document(raw)
        except ValueError as e:
            return ValidationResult(errors=(str(e),))
    else:
        data = raw

    if not isinstance(data, Mapping) or not isinstance(data.get("logs"), list):
        return ValidationResult(errors=(NO_LOGS_ARRAY,))
    logs = data["logs"]
    if not logs:
        return ValidationResult(errors=(EMPTY_LOGS,))

    errors: list[str] = []
    parsed: list[DailyLog] = []

    for log_index, log in enumerate(logs):
        label = f"Log {log_index + 1}"
        if not isinstance(log, Mapping):
            errors.append(f"{label}: must be an object")
            continue

        date_token = log.get("date")
        if not date_token:
            errors.append(f"{label}: missing date field")
            continue
        if not isinstance(date_token, str) or not is_date_token(date_token):
            errors.append(
                f'{label}: date "{date_token}" must look like <month>-<day>-<year> '
                "(e.g., nov-23-2025)"
            )
            continue
        try:
            iso_date = to_iso_date(date_token)
        except DateParseError as e:
            errors.append(f"{label}: {e}")
            continue

        entries = log.get("entries")
        if not isinstance(entries, list):
            errors.append(f"Log for {date_token}: missing entries array")
            continue

        enriched: list[WorkEntry] = []
        for index, item in enumerate(entries):
            entry_errors, entry = _validate_entry(item, index, mappings)
            errors.extend(f"{date_token}: {msg}" for msg in entry_errors)
            if entry is not None:
                enriched.append(entry)

        errors.extend(_same_date_errors(date_token, entries))

        parsed.append(DailyLog(date=date_token, iso_date=iso_date, entries=tuple(enriched)))

    return ValidationResult(
        logs=tuple(parsed),
        errors=tuple(errors),
        cross_date_duplicates=tuple(detect_cross_date(parsed)),
    )
