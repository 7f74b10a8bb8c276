"""Module entrypoint.

Allows:
    python -m mcp_oom_analyzer
"""

from __future__ import annotations

from mcp_oom_analyzer.server.log_server import main

if __name__ == "__main__":
    main()
