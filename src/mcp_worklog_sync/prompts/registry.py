"""MCP prompt registry.

Prompts are predefined conversation/workflow templates that the client can invoke explicitly.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from mcp.server.fastmcp import FastMCP


def _format_start_hours(start_hours: Mapping[str, int] | None) -> str:
    """Return per-date start hours as prompt lines."""
    if not start_hours:
        return "- (none given; ask the user, default is 11)"
    return "\n".join(f"- {date}: {hour}:00" for date, hour in sorted(start_hours.items()))


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def review_worklog(
        log_path: str,
        start_hours: dict[str, int] | None = None,
    ) -> list[dict[str, Any]]:
        """Build a prompt that walks a work log from validation to submission."""
        return [
            {
                "role": "system",
                "content": (
                    "You help an engineer log their daily work to OpenProject. Never submit "
                    "before the document validates and the user has confirmed the start hour "
                    "for every date. Report errors verbatim; do not guess fixes for project or "
                    "activity names, list the allowed names instead."
                ),
            },
            {
                "role": "user",
                "content": (
                    f"Work log: {log_path}\n"
                    "Steps:\n"
                    "1) Call validate_worklog. If invalid, show every error and stop.\n"
                    "2) Mention cross-date duplicates (same subject on several dates) for review.\n"
                    "3) Call preview_timelines with the start hours below and show each day's "
                    "schedule.\n"
                    "4) After the user confirms, call submit_worklog with the same start hours.\n"
                    "5) Summarize created, skipped and failed entries per date.\n"
                    "Start hours:\n"
                    f"{_format_start_hours(start_hours)}\n"
                ),
            },
        ]
