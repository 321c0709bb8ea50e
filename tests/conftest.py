from __future__ import annotations

import itertools
import json
import re
from collections.abc import Callable
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs, urlsplit

import pytest

from mcp_worklog_sync.core.remote import ApiResult, OpenProjectClient

_WP_CREATE_RE = re.compile(r"^/projects/(?P<pid>\d+)/work_packages$")


class FakeOpenProject:
    """In-memory OpenProject speaking the api_request(method, endpoint, body) contract."""

    def __init__(self) -> None:
        self.work_packages: dict[int, dict[str, Any]] = {}
        self.time_entries: dict[int, dict[str, Any]] = {}
        self.projects: list[dict[str, Any]] = [
            {"id": 64, "identifier": "idcol", "name": "IDCOL"},
            {"id": 63, "identifier": "hris", "name": "HRIS"},
            {"id": 999, "identifier": "unmapped", "name": "Unmapped"},
        ]
        self.statuses: list[dict[str, Any]] = [
            {"id": 1, "name": "New", "isDefault": True, "isClosed": False},
            {"id": 7, "name": "In progress", "isDefault": False, "isClosed": False},
        ]
        self.current_user: dict[str, Any] = {"id": 5, "name": "Jane Doe", "login": "jane"}
        self.calls: list[tuple[str, str, dict[str, Any] | None]] = []
        self.failures: dict[tuple[str, str], str] = {}
        self.failing_subjects: set[str] = set()
        self._ids = itertools.count(1000)

    # -- helpers for tests ---------------------------------------------------

    def fail_on(self, method: str, path: str, error: str = "Internal error") -> None:
        self.failures[(method, path)] = error

    def add_work_package(self, project_id: int, subject: str) -> int:
        wp_id = next(self._ids)
        self.work_packages[wp_id] = {"id": wp_id, "subject": subject, "project_id": project_id}
        return wp_id

    def add_time_entry(self, work_package_id: int, spent_on: str) -> int:
        te_id = next(self._ids)
        self.time_entries[te_id] = {
            "id": te_id,
            "work_package_id": work_package_id,
            "spentOn": spent_on,
            "hours": "PT1H",
        }
        return te_id

    def writes(self) -> list[tuple[str, str, dict[str, Any] | None]]:
        return [c for c in self.calls if c[0] == "POST"]

    # -- api_request ---------------------------------------------------------

    @staticmethod
    def _ok(data: Any) -> ApiResult:
        return ApiResult(success=True, data=data, status_code=200)

    @staticmethod
    def _collection(elements: list[dict[str, Any]]) -> dict[str, Any]:
        return {"_type": "Collection", "total": len(elements), "_embedded": {"elements": elements}}

    async def __call__(
        self, method: str, endpoint: str, body: dict[str, Any] | None = None
    ) -> ApiResult:
        self.calls.append((method, endpoint, body))
        parts = urlsplit(endpoint)
        path = parts.path
        query = parse_qs(parts.query)

        error = self.failures.get((method, path))
        if error is not None:
            return ApiResult(success=False, error=error, status_code=500)

        filters: dict[str, Any] = {}
        if "filters" in query:
            for clause in json.loads(query["filters"][0]):
                filters.update(clause)

        if method == "GET" and path == "/users/me":
            return self._ok(self.current_user)
        if method == "GET" and path == "/projects":
            return self._ok(self._collection(self.projects))
        if method == "GET" and path == "/statuses":
            return self._ok(self._collection(self.statuses))

        if method == "GET" and path == "/work_packages":
            pid = filters["project"]["values"][0]
            needle = filters["subject"]["values"][0].lower()
            found = [
                wp
                for wp in self.work_packages.values()
                if str(wp["project_id"]) == pid and needle in wp["subject"].lower()
            ]
            return self._ok(self._collection(found))

        m = _WP_CREATE_RE.match(path)
        if method == "POST" and m:
            wp_id = self.add_work_package(int(m.group("pid")), body["subject"])
            self.work_packages[wp_id]["status"] = body["_links"]["status"]["href"]
            return self._ok(self.work_packages[wp_id])

        if method == "GET" and path == "/time_entries":
            wp = filters["work_package"]["values"][0]
            spent_on = filters["spent_on"]["values"][0]
            found = [
                te
                for te in self.time_entries.values()
                if str(te["work_package_id"]) == wp and te["spentOn"] == spent_on
            ]
            return self._ok(self._collection(found))

        if method == "POST" and path == "/time_entries":
            comment = body["comment"]["raw"]
            if any(s in comment for s in self.failing_subjects):
                return ApiResult(success=False, error="Activity is not active", status_code=422)
            links = body["_links"]
            wp_id = int(links["workPackage"]["href"].rsplit("/", 1)[-1])
            te_id = self.add_time_entry(wp_id, body["spentOn"])
            self.time_entries[te_id].update(
                {
                    "hours": body["hours"],
                    "comment": comment,
                    "project": links["project"]["href"],
                    "activity": links["activity"]["href"],
                }
            )
            return self._ok(self.time_entries[te_id])

        return ApiResult(success=False, error=f"Not found: {path}", status_code=404)


@pytest.fixture
def fake_openproject() -> FakeOpenProject:
    return FakeOpenProject()


@pytest.fixture
def client(fake_openproject: FakeOpenProject) -> OpenProjectClient:
    return OpenProjectClient(fake_openproject)


@pytest.fixture
def make_entry() -> Callable[..., dict[str, Any]]:
    def _make(**overrides: Any) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "project": "IDCOL",
            "subject": "Fix bug",
            "duration_hours": 2,
            "activity": "Support",
            "is_scrum": False,
            "break_hours": None,
            "work_package_id": None,
        }
        entry.update(overrides)
        return entry

    return _make


@pytest.fixture
def write_worklog() -> Callable[[Path, dict[str, Any]], None]:
    def _write(path: Path, doc: dict[str, Any]) -> None:
        path.write_text(json.dumps(doc, indent=2) + "\n", encoding="utf-8")

    return _write
