"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: callable actions (e.g., analyze an OOM kill report)
- Resources: addressable data blobs (e.g., a log file via URI)
- Prompts: reusable conversation templates that clients can invoke

Run locally (stdio):
    python -m mcp_oom_analyzer.server.log_server
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_oom_analyzer.prompts.registry import register_prompts
from mcp_oom_analyzer.resources.registry import register_resources
from mcp_oom_analyzer.tools.analyze import (
    analyze_oom_log_impl,
    analyze_oom_text_impl,
    detect_oom_log_impl,
)

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure a reasonable default logging setup.

    The MCP client typically captures stderr; keeping logs concise makes them easier to consume.
    """
    level_name = os.getenv("OOM_ANALYZER_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("oom-analyzer", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
async def analyze_oom_log(
    log_path: str,
    include_raw: bool = False,
    include_summary: bool = True,
) -> dict[str, Any]:
    """Parse a kernel OOM kill report stored in a file.

    Parameters
    ----------
    log_path:
        Path to a dmesg/journal excerpt, relative to OOM_ANALYZER_BASE_DIR.
        Supports .log/.txt and their .gz variants.
    include_raw:
        Whether to echo the input text back in data.raw_log.
    include_summary:
        Whether to add derived figures (memory overview, process groups).

    Returns
    -------
    dict:
        {"success": bool, "errors": list[str], "data": dict | None,
         "summary": dict, "log_path": str}
    """
    return await analyze_oom_log_impl(
        log_path=log_path,
        include_raw=include_raw,
        include_summary=include_summary,
    )


@mcp.tool()
def analyze_oom_text(
    text: str,
    include_raw: bool = False,
    include_summary: bool = True,
) -> dict[str, Any]:
    """Parse a kernel OOM kill report passed inline.

    Same result shape as analyze_oom_log, without "log_path".
    """
    return analyze_oom_text_impl(
        text=text,
        include_raw=include_raw,
        include_summary=include_summary,
    )


@mcp.tool()
def detect_oom_log(text: str) -> dict[str, Any]:
    """Tell whether a text looks like an OOM kill report."""
    return detect_oom_log_impl(text=text)


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
