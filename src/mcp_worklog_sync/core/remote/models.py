"""Typed views over OpenProject API v3 payloads.

Only the fields the sync pipeline reads are declared; everything else in the
HAL documents is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Resource(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class WorkPackage(_Resource):
    id: int
    subject: str = ""


class TimeEntry(_Resource):
    id: int
    spent_on: str | None = Field(default=None, alias="spentOn")
    hours: str | None = None


class Project(_Resource):
    id: int
    identifier: str = ""
    name: str = ""


class Status(_Resource):
    id: int
    name: str = ""
    is_default: bool = Field(default=False, alias="isDefault")
    is_closed: bool = Field(default=False, alias="isClosed")


class User(_Resource):
    id: int
    name: str = ""
    login: str | None = None


@dataclass(frozen=True, slots=True)
class ApiResult:
    """Result of one remote call: either ``data`` or an ``error`` message."""

    success: bool
    data: Any = None
    error: str | None = None
    status_code: int | None = None


def embedded_elements(data: Any) -> list[dict[str, Any]]:
    """Return ``_embedded.elements`` of a HAL collection (empty when absent)."""
    if not isinstance(data, dict):
        return []
    embedded = data.get("_embedded")
    if not isinstance(embedded, dict):
        return []
    elements = embedded.get("elements")
    if not isinstance(elements, list):
        return []
    return [e for e in elements if isinstance(e, dict)]
