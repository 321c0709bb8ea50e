"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_worklog_sync.core.config import resolve_config
from mcp_worklog_sync.core.dates import MONTHS
from mcp_worklog_sync.core.mappings import resolve_mappings
from mcp_worklog_sync.core.schema import SAMPLE_WORKLOG, WorkLogDocument


def _mapping_table(kind: str) -> dict[str, int | None]:
    mappings = resolve_mappings(resolve_config())
    lookup = mappings.projects if kind == "projects" else mappings.activities
    return {name: lookup.resolve(name) for name in lookup.names()}


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://worklog-sync/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        months = ", ".join(sorted(MONTHS))
        return (
            "Resources:\n"
            "- app://worklog-sync/help\n"
            "- app://worklog-sync/mappings/projects\n"
            "- app://worklog-sync/mappings/activities\n"
            "- app://worklog-sync/schemas/worklog-document\n"
            "- app://worklog-sync/examples/sample-worklog\n"
            f"\nAccepted month tokens: {months}\n"
        )

    @mcp.resource("app://worklog-sync/mappings/projects")
    def project_mappings() -> dict[str, int | None]:
        """Return the project name -> OpenProject id table."""
        return _mapping_table("projects")

    @mcp.resource("app://worklog-sync/mappings/activities")
    def activity_mappings() -> dict[str, int | None]:
        """Return the activity name -> OpenProject id table."""
        return _mapping_table("activities")

    @mcp.resource("app://worklog-sync/schemas/worklog-document")
    def worklog_schema() -> dict[str, Any]:
        """Return the JSON schema for work-log documents."""
        return WorkLogDocument.model_json_schema()

    @mcp.resource("app://worklog-sync/examples/sample-worklog")
    def sample_worklog() -> str:
        """Return a small valid work-log document."""
        return SAMPLE_WORKLOG
