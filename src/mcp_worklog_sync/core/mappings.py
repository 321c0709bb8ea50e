"""Project and activity name lookups.

Work logs refer to projects and activities by name; the remote service wants
numeric IDs. Lookups are injected so callers (and tests) can swap the tables.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .config import SyncConfig

DEFAULT_PROJECT_MAPPINGS: dict[str, int] = {
    "BD-TICKET": 151,
    "COMMON-SLASH-LEARNING-AND-UPSKILLING": 141,
    "COMMON-SLASH-RFS-AND-DEMO-SUPPORT": 140,
    "COMMON-SLASH-RESEARCH-AND-DEVELOPMENT-R-AND-D": 138,
    "COMMON-SLASH-GENERAL-PURPOSE-AND-MEETINGS-HR-ACTIVITY": 132,
    "ELEARNING": 130,
    "INFO360-1": 129,
    "GENERAL-PROJECT-TASKS-MEETING-AND-SCRUM": 115,
    "ROBI-HR4U": 68,
    "JBL": 67,
    "CBL": 66,
    "SEBL": 65,
    "IDCOL": 64,
    "HRIS": 63,
    "NEXT-GENERATION-PROVISING-SYSTEM-NGPS": 41,
    "IOT-AND-FWA": 21,
}

DEFAULT_ACTIVITY_MAPPINGS: dict[str, int] = {
    "Development": 1,
    "Support": 2,
    "Meeting": 3,
    "Testing": 4,
    "Specification": 5,
    "Management": 6,
    "Change Request": 7,
    "Other": 8,
}


class NameLookup(Protocol):
    """Lookup interface: return the numeric ID for a name, else None."""

    def resolve(self, name: str) -> int | None:
        """Resolve a display name to its remote identifier."""
        ...

    def names(self) -> list[str]:
        """Return the known names (for error messages and listings)."""
        ...


@dataclass(frozen=True)
class MappingLookup:
    """Dictionary-backed lookup.

    When ``case_sensitive`` is False, keys are stored and matched upper-cased.
    """

    table: Mapping[str, int]
    case_sensitive: bool = True
    _index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.case_sensitive:
            index = dict(self.table)
        else:
            index = {k.upper(): v for k, v in self.table.items()}
        object.__setattr__(self, "_index", index)

    def resolve(self, name: str) -> int | None:
        if not isinstance(name, str):
            return None
        key = name if self.case_sensitive else name.upper()
        return self._index.get(key)

    def names(self) -> list[str]:
        return list(self.table.keys())


@dataclass(frozen=True)
class Mappings:
    projects: NameLookup
    activities: NameLookup


def default_mappings() -> Mappings:
    """Built-in tables: projects match case-insensitively, activities exactly."""
    return Mappings(
        projects=MappingLookup(DEFAULT_PROJECT_MAPPINGS, case_sensitive=False),
        activities=MappingLookup(DEFAULT_ACTIVITY_MAPPINGS),
    )


def _coerce_table(raw: object, key: str) -> dict[str, int]:
    if not isinstance(raw, dict):
        raise ValueError(f"Mappings file: '{key}' must be an object of name -> id")
    out: dict[str, int] = {}
    for name, value in raw.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Mappings file: '{key}.{name}' must be an integer id")
        out[str(name)] = value
    return out


def load_mappings(path: str | Path) -> Mappings:
    """Load ``{"projects": {...}, "activities": {...}}`` from a JSON file.

    A missing section falls back to the built-in table.
    """
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Mappings file not found: {p}")
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Mappings file is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Mappings file must contain a JSON object")

    projects = DEFAULT_PROJECT_MAPPINGS
    if "projects" in data:
        projects = _coerce_table(data["projects"], "projects")
    activities = DEFAULT_ACTIVITY_MAPPINGS
    if "activities" in data:
        activities = _coerce_table(data["activities"], "activities")

    return Mappings(
        projects=MappingLookup(projects, case_sensitive=False),
        activities=MappingLookup(activities),
    )


def resolve_mappings(cfg: SyncConfig) -> Mappings:
    """Return mappings from the configured file, or the built-in tables."""
    if cfg.mappings_path:
        return load_mappings(cfg.mappings_path)
    return default_mappings()
