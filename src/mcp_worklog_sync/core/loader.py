"""Work-log file loading."""

from __future__ import annotations

from pathlib import Path

import aiofiles

WORKLOG_SUFFIX = ".json"


async def load_document_text(path: str | Path, *, encoding: str = "utf-8") -> str:
    """Read a JSON work-log file as text."""
    p = Path(path).expanduser()
    if p.suffix.lower() != WORKLOG_SUFFIX:
        raise ValueError("Please provide a .json work log file")
    if not p.is_file():
        raise FileNotFoundError(f"Work log file not found: {p}")
    async with aiofiles.open(p, encoding=encoding) as f:
        return await f.read()
