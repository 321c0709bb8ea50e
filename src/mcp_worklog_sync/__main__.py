"""Module entrypoint.

Allows:
    python -m mcp_worklog_sync
"""

from __future__ import annotations

from mcp_worklog_sync.server.worklog_server import main

if __name__ == "__main__":
    main()
