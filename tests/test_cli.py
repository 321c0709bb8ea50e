from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from mcp_worklog_sync.cli import _parse_start, main
from mcp_worklog_sync.core.config import MAPPINGS_PATH_ENV, START_HOUR_ENV
from mcp_worklog_sync.core.schema import SAMPLE_WORKLOG


@pytest.fixture(autouse=True)
def _no_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(START_HOUR_ENV, raising=False)
    monkeypatch.delenv(MAPPINGS_PATH_ENV, raising=False)


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    p = tmp_path / "worklog.json"
    p.write_text(SAMPLE_WORKLOG, encoding="utf-8")
    return p


def test_parse_start() -> None:
    assert _parse_start("nov-23-2025=9") == ("nov-23-2025", 9)
    with pytest.raises(argparse.ArgumentTypeError):
        _parse_start("nov-23-2025")
    with pytest.raises(argparse.ArgumentTypeError):
        _parse_start("nov-23-2025=25")


def test_validate_command(sample_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as info:
        main(["validate", str(sample_file)])

    assert info.value.code == 0
    assert "Valid: 1 date(s), 3 entries, 4h total." in capsys.readouterr().out


def test_validate_command_invalid(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = tmp_path / "bad.json"
    p.write_text('{"logs": []}', encoding="utf-8")

    with pytest.raises(SystemExit) as info:
        main(["validate", str(p)])

    assert info.value.code == 1
    assert 'No log entries found in "logs" array' in capsys.readouterr().out


def test_timeline_command(sample_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as info:
        main(["timeline", str(sample_file), "--start", "nov-23-2025=9"])

    assert info.value.code == 0
    out = capsys.readouterr().out
    assert "nov-23-2025 (2025-11-23) - 4h" in out
    assert "12:00 PM -  1:30 PM" in out


def test_missing_file_exits_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as info:
        main(["validate", str(tmp_path / "missing.json")])

    assert info.value.code == 2
    assert "Work log file not found" in capsys.readouterr().err


def test_submit_without_token_exits_2(
    sample_file: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.delenv("WORKLOG_SYNC_API_TOKEN", raising=False)

    with pytest.raises(SystemExit) as info:
        main(["submit", str(sample_file), "--yes"])

    assert info.value.code == 2
    assert "Missing API token" in capsys.readouterr().err
