from __future__ import annotations

import pytest

from mcp_worklog_sync.core.config import (
    API_TOKEN_ENV,
    BASE_URL_ENV,
    MAPPINGS_PATH_ENV,
    START_HOUR_ENV,
    STATUS_ID_ENV,
    TIMEOUT_ENV,
    SyncConfig,
    resolve_config,
)

_ALL_ENV = (
    API_TOKEN_ENV,
    BASE_URL_ENV,
    MAPPINGS_PATH_ENV,
    START_HOUR_ENV,
    STATUS_ID_ENV,
    TIMEOUT_ENV,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ALL_ENV:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_env() -> None:
    cfg = resolve_config()
    assert cfg == SyncConfig()
    assert cfg.default_start_hour == 11
    assert cfg.default_status_id == 7


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(BASE_URL_ENV, "https://op.example.org/")
    monkeypatch.setenv(API_TOKEN_ENV, "secret")
    monkeypatch.setenv(START_HOUR_ENV, "9")
    monkeypatch.setenv(STATUS_ID_ENV, "3")
    monkeypatch.setenv(TIMEOUT_ENV, "12.5")
    monkeypatch.setenv(MAPPINGS_PATH_ENV, "/tmp/mappings.json")

    cfg = resolve_config()

    assert cfg.base_url == "https://op.example.org"
    assert cfg.api_token == "secret"
    assert cfg.default_start_hour == 9
    assert cfg.default_status_id == 3
    assert cfg.timeout == 12.5
    assert cfg.mappings_path == "/tmp/mappings.json"


def test_blank_env_is_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(START_HOUR_ENV, "   ")
    assert resolve_config().default_start_hour == 11


def test_explicit_config_is_kept_without_env() -> None:
    cfg = SyncConfig(api_token="abc", default_start_hour=8)
    assert resolve_config(cfg) is cfg


@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        (START_HOUR_ENV, "nine", "must be an integer"),
        (START_HOUR_ENV, "24", "must be <= 23"),
        (STATUS_ID_ENV, "0", "must be >= 1"),
        (TIMEOUT_ENV, "fast", "must be a number"),
        (TIMEOUT_ENV, "0", "must be > 0"),
    ],
)
def test_invalid_env_names_the_variable(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str, message: str
) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=f"{name} {message}"):
        resolve_config()
