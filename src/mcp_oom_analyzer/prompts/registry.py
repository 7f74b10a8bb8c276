"""MCP prompt registry.

Prompts are predefined conversation/workflow templates that the client can invoke explicitly.
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.prompts.base import AssistantMessage, Message, UserMessage

EXPERT_PREAMBLE = (
    "You are a Linux kernel memory expert. Explain OOM killer reports using only "
    "the parsed fields and the raw log. Do not invent details; if a section is "
    "missing, say so."
)

REPORT_STRUCTURE = (
    "Return this structure:\n"
    "1) What was killed and why (1-3 bullets: victim pid/name, RSS, trigger process, "
    "gfp_mask/order, constraint)\n"
    "2) Memory state (free vs watermarks, anon/file/shmem, swap)\n"
    "3) Top consumers (process groups by RSS, mark the killed one)\n"
    "4) Suspected root cause (1-2 sentences; say 'Unknown' if unclear)\n"
    "5) Next actions (2-4 bullets)\n"
)


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def explain_oom_event(log_path: str) -> list[Message]:
        """Build a prompt that explains a single OOM kill report."""
        return [
            AssistantMessage(EXPERT_PREAMBLE),
            UserMessage(
                "Explain the OOM event in the log file. Follow this workflow:\n"
                "- Always call analyze_oom_log first with include_summary=true.\n"
                "- If success is false, list the reported errors and state which "
                "sections could not be read.\n"
                "- Memory values in the process table are pages; the summary "
                "already converts them to kB.\n"
                "- Keep the response concise.\n\n"
                "Call analyze_oom_log with:\n"
                f"- log_path: {log_path}\n"
                "- include_summary: true\n\n"
                f"{REPORT_STRUCTURE}"
            ),
            UserMessage(
                f"Optional: if you need raw context, read the resource file://{log_path}"
            ),
        ]

    @mcp.prompt()
    def compare_oom_events(first_log_path: str, second_log_path: str) -> list[Message]:
        """Build a prompt that compares two OOM kill reports."""
        return [
            AssistantMessage(EXPERT_PREAMBLE),
            UserMessage(
                "Call analyze_oom_log on both files with include_summary=true:\n"
                f"- first: {first_log_path}\n"
                f"- second: {second_log_path}\n\n"
                "Then return a Markdown table comparing: killed process, trigger "
                "process, constraint, free memory vs min watermark, swap usage and "
                "the top 3 process groups. Finish with whether both events share a "
                "cause and what to change first.\n"
            ),
        ]
