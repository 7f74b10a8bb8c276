"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_oom_analyzer.core.log_service import read_log_text
from mcp_oom_analyzer.core.serialization import parse_outcome_json_schema
from mcp_oom_analyzer.tools.analyze import (
    ALLOWED_FILE_SUFFIXES,
    BASE_DIR_ENV,
    base_dir,
    resolve_log_path,
)

SAMPLE_OOM_LOG = "\n".join(
    [
        "[ 8123.456789] java invoked oom-killer: gfp_mask=0x140cca(GFP_HIGHUSER_MOVABLE|__GFP_COMP), order=0, oom_score_adj=0",
        "[ 8123.456801] CPU: 2 PID: 4242 Comm: java Not tainted 6.1.0-18-amd64 #1 Debian 6.1.76-1",
        "[ 8123.456806] Hardware name: QEMU Standard PC (i440FX + PIIX, 1996), BIOS 1.16.2-debian-1.16.2-1 04/01/2014",
        "[ 8123.456810] Call Trace:",
        "[ 8123.456812]  <TASK>",
        "[ 8123.456815]  dump_stack_lvl+0x44/0x5c",
        "[ 8123.456820]  dump_header+0x4a/0x211",
        "[ 8123.456824]  out_of_memory+0xed/0x2e0",
        "[ 8123.456830]  </TASK>",
        "[ 8123.456832] Mem-Info:",
        "[ 8123.456835] active_anon:480123 inactive_anon:12034 isolated_anon:0",
        "                active_file:120 inactive_file:88 isolated_file:0",
        "                free:13021 free_pcp:12 free_cma:0",
        "[ 8123.456850] Node 0 active_anon:1920492kB inactive_anon:48136kB active_file:480kB inactive_file:352kB unevictable:0kB isolated(anon):0kB isolated(file):0kB mapped:2048kB dirty:0kB writeback:0kB shmem:4096kB all_unreclaimable? yes",
        "[ 8123.456870] 0 pages in swap cache",
        "[ 8123.456871] Free swap  = 0kB",
        "[ 8123.456872] Total swap = 0kB",
        "[ 8123.456873] 524158 pages RAM",
        "[ 8123.456880] Tasks state (memory values in pages):",
        "[ 8123.456881] [  pid  ]   uid  tgid total_vm      rss pgtables_bytes swapents oom_score_adj name",
        "[ 8123.456890] [    512]     0   512    10563     1220   110592        0         -1000 systemd-udevd",
        "[ 8123.456895] [   4242]  1000  4242  1204880   478812  4263936        0             0 java",
        "[ 8123.456900] oom-kill:constraint=CONSTRAINT_NONE,nodemask=(null),cpuset=/,mems_allowed=0,global_oom,task_memcg=/user.slice/user-1000.slice,task=java,pid=4242,uid=1000",
        "[ 8123.456910] Out of memory: Killed process 4242 (java) total-vm:4819520kB, anon-rss:1915248kB, file-rss:0kB, shmem-rss:0kB, UID:1000 pgtables:4164kB oom_score_adj:0",
    ]
)


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://oom-analyzer/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        return (
            "Resources:\n"
            "- app://oom-analyzer/help\n"
            "- app://oom-analyzer/examples/sample-log\n"
            "- app://oom-analyzer/schemas/parse-outcome\n"
            f"- file://{{path}} (restricted to {BASE_DIR_ENV}; allowed: {allowed}, .gz)\n"
            f"\nBase directory: {base_dir()}\n"
        )

    @mcp.resource("app://oom-analyzer/examples/sample-log")
    def sample_log() -> str:
        """Return a small OOM kill report for demos and tests."""
        return SAMPLE_OOM_LOG + "\n"

    @mcp.resource("app://oom-analyzer/schemas/parse-outcome")
    def parse_outcome_schema() -> dict[str, Any]:
        """Return the JSON schema of the parse result."""
        return parse_outcome_json_schema()

    @mcp.resource("file://{path}")
    async def read_file(path: str) -> str:
        """Read a kernel log file from within OOM_ANALYZER_BASE_DIR."""
        return await read_log_text(resolve_log_path(path))
