"""OpenProject client used by the reconciliation pipeline.

Every method raises :class:`RemoteError` when the underlying request fails.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote

from ..errors import RemoteError
from .models import Project, Status, TimeEntry, User, WorkPackage, embedded_elements
from .transport import API_PREFIX, ApiRequest

SUBJECT_FILTER_LENGTH = 50
DEFAULT_STATUS_ID = 7


def encode_filters(*clauses: tuple[str, str, list[str]]) -> str:
    """Encode ``(field, operator, values)`` clauses as an URL-safe JSON filter."""
    payload = [{name: {"operator": op, "values": values}} for name, op, values in clauses]
    return quote(json.dumps(payload, separators=(",", ":")), safe="")


def iso_hours(hours: float) -> str:
    """Encode hours as an ISO-8601 duration (``3`` -> ``PT3H``, ``1.5`` -> ``PT1.5H``).

    Up to 15 significant digits are kept; exponent notation is never emitted.
    """
    text = format(hours, ".15g")
    if "e" in text:
        text = format(hours, ".15f").rstrip("0").rstrip(".")
    return f"PT{text}H"


class OpenProjectClient:
    def __init__(self, api_request: ApiRequest, *, default_status_id: int = DEFAULT_STATUS_ID):
        self._api = api_request
        self.default_status_id = default_status_id

    async def _call(
        self, method: str, endpoint: str, body: dict[str, Any] | None = None
    ) -> Any:
        result = await self._api(method, endpoint, body)
        if not result.success:
            raise RemoteError(
                result.error or "Remote request failed", status_code=result.status_code
            )
        return result.data

    async def get_projects(self) -> list[Project]:
        data = await self._call("GET", "/projects?pageSize=100")
        return [Project.model_validate(e) for e in embedded_elements(data)]

    async def get_statuses(self) -> list[Status]:
        data = await self._call("GET", "/statuses")
        return [Status.model_validate(e) for e in embedded_elements(data)]

    async def get_current_user(self) -> User:
        data = await self._call("GET", "/users/me")
        return User.model_validate(data)

    async def find_work_package_by_subject(
        self, project_id: int, subject: str
    ) -> WorkPackage | None:
        """Return the project's work package whose subject matches case-insensitively."""
        filters = encode_filters(
            ("project", "=", [str(project_id)]),
            ("subject", "~", [subject[:SUBJECT_FILTER_LENGTH]]),
        )
        data = await self._call("GET", f"/work_packages?filters={filters}&pageSize=10")
        wanted = subject.lower()
        for element in embedded_elements(data):
            wp = WorkPackage.model_validate(element)
            if wp.subject.lower() == wanted:
                return wp
        return None

    async def create_work_package(
        self, project_id: int, subject: str, status_id: int | None = None
    ) -> WorkPackage:
        status = status_id if status_id is not None else self.default_status_id
        data = await self._call(
            "POST",
            f"/projects/{project_id}/work_packages",
            {
                "subject": subject,
                "_links": {"status": {"href": f"{API_PREFIX}/statuses/{status}"}},
            },
        )
        return WorkPackage.model_validate(data)

    async def find_time_entries(self, work_package_id: int, spent_on: str) -> list[TimeEntry]:
        filters = encode_filters(
            ("work_package", "=", [str(work_package_id)]),
            ("spent_on", "=d", [spent_on]),
        )
        data = await self._call("GET", f"/time_entries?filters={filters}")
        return [TimeEntry.model_validate(e) for e in embedded_elements(data)]

    async def create_time_entry(
        self,
        work_package_id: int,
        project_id: int,
        hours: float,
        activity_id: int,
        comment: str,
        spent_on: str,
    ) -> TimeEntry:
        data = await self._call(
            "POST",
            "/time_entries",
            {
                "hours": iso_hours(hours),
                "spentOn": spent_on,
                "_links": {
                    "workPackage": {"href": f"{API_PREFIX}/work_packages/{work_package_id}"},
                    "project": {"href": f"{API_PREFIX}/projects/{project_id}"},
                    "activity": {"href": f"{API_PREFIX}/time_entries/activities/{activity_id}"},
                },
                "comment": {"raw": comment},
            },
        )
        return TimeEntry.model_validate(data)
