from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import replace
from pathlib import Path

from mcp_oom_analyzer.core.config import resolve_analyzer_config
from mcp_oom_analyzer.core.log_service import read_log_text
from mcp_oom_analyzer.core.models import ParsedOOMLog
from mcp_oom_analyzer.core.parser import is_oom_log, parse
from mcp_oom_analyzer.core.serialization import outcome_to_dict, summary_to_dict
from mcp_oom_analyzer.core.summary import OOMSummary, format_kb, summarize


def _positive_int(s: str) -> int:
    try:
        value = int(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError("must be an integer") from e
    if value < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return value


def render_report(parsed: ParsedOOMLog, summary: OOMSummary) -> list[str]:
    """Render the human readable report lines."""
    t = parsed.trigger
    s = parsed.system_info
    c = parsed.oom_constraint
    k = summary.killed
    m = summary.memory

    out = [
        f"Trigger:  {t.trigger_process or '-'} (gfp_mask={t.gfp_mask or '-'}, order={t.order}, "
        f"oom_score_adj={t.oom_score_adj})",
        f"Time:     {t.timestamp or '-'}",
        f"Kernel:   {s.kernel_version or '-'}{' (tainted)' if s.tainted else ''}",
        f"Hardware: {' '.join(x for x in (s.hardware_vendor, s.hardware_model) if x) or '-'}",
        f"Killed:   {k.name or '-'} (pid {k.pid}) rss={format_kb(k.rss_kb)} "
        f"total-vm={format_kb(k.total_vm_kb)}",
        f"Policy:   {c.constraint or '-'}{' global_oom' if c.global_oom else ''} "
        f"memcg={c.task_memcg or '-'}",
        "",
        f"Memory:   total={format_kb(m.total_ram_kb)} free={format_kb(m.free_kb)} "
        f"anon={format_kb(m.anon_kb)} file={format_kb(m.file_kb)} shmem={format_kb(m.shmem_kb)}",
        f"Swap:     used={format_kb(m.swap_used_kb)} of {format_kb(m.swap_total_kb)}",
        "",
        f"Processes: {summary.process_count} (rss total {format_kb(summary.total_rss_kb)})",
    ]
    for g in summary.groups:
        mark = " *killed*" if g.contains_killed else ""
        out.append(
            f"  {g.name:<24} x{g.count:<4} rss={format_kb(g.total_rss_kb):>10} "
            f"({g.percent_of_total_rss:5.1f}%){mark}"
        )
    return out


def main() -> None:
    p = argparse.ArgumentParser(description="Linux OOM killer report analyzer.")
    p.add_argument("log_path")
    p.add_argument("--json", dest="as_json", action="store_true", help="Print the full result as JSON")
    p.add_argument("--raw", dest="include_raw", action="store_true", help="Include raw_log in JSON output")
    p.add_argument("--top", type=_positive_int, default=None, help="Number of process groups/processes to show")
    p.add_argument("--check", action="store_true", help="Only tell whether the file is an OOM report")

    args = p.parse_args()
    path = Path(args.log_path)

    try:
        config = resolve_analyzer_config()
        if args.top is not None:
            config = replace(config, top_groups=args.top, top_processes=args.top)
        text = asyncio.run(read_log_text(path))
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    if args.check:
        found = is_oom_log(text)
        print("OOM report detected." if found else "No OOM report found.")
        raise SystemExit(0 if found else 1)

    outcome = parse(text)
    for err in outcome.errors:
        print(f"warning: {err}", file=sys.stderr)
    if outcome.data is None:
        raise SystemExit(1)

    summary = summarize(outcome.data, config=config)
    if args.as_json:
        payload = outcome_to_dict(outcome, include_raw=args.include_raw)
        payload["summary"] = summary_to_dict(summary)
        print(json.dumps(payload, indent=2))
        return

    for line in render_report(outcome.data, summary):
        print(line)


if __name__ == "__main__":
    main()
