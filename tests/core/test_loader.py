from __future__ import annotations

from pathlib import Path

import pytest

from mcp_worklog_sync.core.loader import load_document_text


@pytest.mark.asyncio
async def test_reads_json_file(tmp_path: Path) -> None:
    p = tmp_path / "log.JSON"
    p.write_text('{"logs": []}', encoding="utf-8")
    assert await load_document_text(p) == '{"logs": []}'


@pytest.mark.asyncio
async def test_rejects_other_suffixes(tmp_path: Path) -> None:
    p = tmp_path / "log.txt"
    p.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError, match=r"\.json work log file"):
        await load_document_text(p)


@pytest.mark.asyncio
async def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Work log file not found"):
        await load_document_text(tmp_path / "missing.json")
