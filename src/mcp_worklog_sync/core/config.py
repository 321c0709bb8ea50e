"""Runtime configuration with environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

BASE_URL_ENV = "WORKLOG_SYNC_BASE_URL"
API_TOKEN_ENV = "WORKLOG_SYNC_API_TOKEN"
START_HOUR_ENV = "WORKLOG_SYNC_START_HOUR"
STATUS_ID_ENV = "WORKLOG_SYNC_STATUS_ID"
TIMEOUT_ENV = "WORKLOG_SYNC_TIMEOUT"
MAPPINGS_PATH_ENV = "WORKLOG_SYNC_MAPPINGS_PATH"
LOG_LEVEL_ENV = "WORKLOG_SYNC_LOG_LEVEL"


@dataclass(frozen=True, slots=True)
class SyncConfig:
    base_url: str = "https://openproject.example.com"
    api_token: str = ""
    default_start_hour: int = 11
    default_status_id: int = 7
    timeout: float = 30.0
    mappings_path: str | None = None


def _env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def _env_int(name: str, *, low: int, high: int | None = None) -> int | None:
    raw = _env(name)
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < low:
        raise ValueError(f"{name} must be >= {low}")
    if high is not None and value > high:
        raise ValueError(f"{name} must be <= {high}")
    return value


def _env_float(name: str) -> float | None:
    raw = _env(name)
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc
    if value <= 0:
        raise ValueError(f"{name} must be > 0")
    return value


def resolve_config(cfg: SyncConfig | None = None) -> SyncConfig:
    """Return config with optional env overrides applied."""
    if cfg is None:
        cfg = SyncConfig()

    changes: dict[str, object] = {}

    base_url = _env(BASE_URL_ENV)
    if base_url is not None:
        changes["base_url"] = base_url.rstrip("/")

    token = _env(API_TOKEN_ENV)
    if token is not None:
        changes["api_token"] = token

    start_hour = _env_int(START_HOUR_ENV, low=0, high=23)
    if start_hour is not None:
        changes["default_start_hour"] = start_hour

    status_id = _env_int(STATUS_ID_ENV, low=1)
    if status_id is not None:
        changes["default_status_id"] = status_id

    timeout = _env_float(TIMEOUT_ENV)
    if timeout is not None:
        changes["timeout"] = timeout

    mappings_path = _env(MAPPINGS_PATH_ENV)
    if mappings_path is not None:
        changes["mappings_path"] = mappings_path

    if not changes:
        return cfg
    return replace(cfg, **changes)
