"""OpenProject remote access."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from ..config import SyncConfig
from .client import OpenProjectClient, encode_filters, iso_hours
from .models import ApiResult, Project, Status, TimeEntry, User, WorkPackage
from .transport import ApiRequest, HttpxTransport


@asynccontextmanager
async def open_client(cfg: SyncConfig) -> AsyncIterator[OpenProjectClient]:
    """Yield a client over an httpx transport; the transport is closed on exit."""
    if not cfg.api_token:
        raise ValueError("Missing API token. Set WORKLOG_SYNC_API_TOKEN.")
    async with HttpxTransport(cfg.base_url, cfg.api_token, timeout=cfg.timeout) as transport:
        yield OpenProjectClient(transport, default_status_id=cfg.default_status_id)


__all__ = [
    "ApiRequest",
    "ApiResult",
    "HttpxTransport",
    "OpenProjectClient",
    "Project",
    "Status",
    "TimeEntry",
    "User",
    "WorkPackage",
    "encode_filters",
    "iso_hours",
    "open_client",
]
