"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: validate, preview and submit work logs; probe the OpenProject instance
- Resources: mappings, the input schema and a sample document
- Prompts: a review template for a work-log file

Run locally (stdio):
    python -m mcp_worklog_sync.server.worklog_server
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_worklog_sync.core.config import LOG_LEVEL_ENV
from mcp_worklog_sync.prompts.registry import register_prompts
from mcp_worklog_sync.resources.registry import register_resources
from mcp_worklog_sync.tools.worklog import (
    check_connection_impl,
    list_remote_projects_impl,
    list_remote_statuses_impl,
    preview_timelines_impl,
    submit_worklog_impl,
    validate_worklog_impl,
)

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure logging on stderr; stdout carries the stdio transport."""
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("worklog-sync", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
async def validate_worklog(
    log_path: str | None = None,
    content: str | None = None,
) -> dict[str, Any]:
    """Validate a work-log document without touching OpenProject.

    Parameters
    ----------
    log_path:
        Path to a local .json work-log file.
    content:
        The JSON document itself (use instead of log_path).

    Returns
    -------
    dict:
        {"is_valid", "errors", "dates", "total_entries", "total_hours",
         "cross_date_duplicates"}
    """
    return await validate_worklog_impl(log_path=log_path, content=content)


@mcp.tool()
async def preview_timelines(
    log_path: str | None = None,
    content: str | None = None,
    start_hours: dict[str, int] | None = None,
    default_start_hour: int | None = None,
    dates: Sequence[str] | None = None,
) -> dict[str, Any]:
    """Show the computed schedule for each date.

    Parameters
    ----------
    start_hours:
        Start hour (0-23) per date, keyed by the date token ("nov-23-2025") or
        ISO date ("2025-11-23"). Dates without an entry use default_start_hour.
    default_start_hour:
        Fallback start hour; defaults to WORKLOG_SYNC_START_HOUR or 11.
    dates:
        Restrict the preview to these dates.
    """
    return await preview_timelines_impl(
        log_path=log_path,
        content=content,
        start_hours=start_hours,
        default_start_hour=default_start_hour,
        dates=dates,
    )


@mcp.tool()
async def submit_worklog(
    log_path: str | None = None,
    content: str | None = None,
    start_hours: dict[str, int] | None = None,
    default_start_hour: int | None = None,
    dates: Sequence[str] | None = None,
) -> dict[str, Any]:
    """Log the work to OpenProject.

    Work packages are reused when a package with the same subject exists in the
    project, otherwise created. Time entries that already exist for the work
    package and date are skipped, so re-running a submission is safe.
    Call preview_timelines first and confirm the start hours with the user.
    """
    return await submit_worklog_impl(
        log_path=log_path,
        content=content,
        start_hours=start_hours,
        default_start_hour=default_start_hour,
        dates=dates,
    )


@mcp.tool()
async def check_connection() -> dict[str, Any]:
    """Verify the configured URL and API token by fetching the current user."""
    return await check_connection_impl()


@mcp.tool()
async def list_remote_projects() -> dict[str, Any]:
    """List OpenProject projects and whether each one is mapped locally."""
    return await list_remote_projects_impl()


@mcp.tool()
async def list_remote_statuses() -> dict[str, Any]:
    """List work package statuses (new work packages use the default status id)."""
    return await list_remote_statuses_impl()


def main() -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
