from __future__ import annotations

import pytest

from mcp_oom_analyzer.core.config import AnalyzerConfig
from mcp_oom_analyzer.core.models import ParsedOOMLog, ProcessInfo
from mcp_oom_analyzer.core.parser import parse
from mcp_oom_analyzer.core.summary import (
    format_kb,
    group_processes,
    killed_process_memory,
    memory_overview,
    summarize,
)


@pytest.fixture
def parsed(oom_text: str) -> ParsedOOMLog:
    outcome = parse(oom_text)
    assert outcome.data is not None
    return outcome.data


@pytest.mark.parametrize(
    ("kb", "expected"),
    [
        (0, "0 KB"),
        (512, "512 KB"),
        (1536, "1.50 MB"),
        (1048576, "1.00 GB"),
        (16776224, "16.00 GB"),
    ],
)
def test_format_kb(kb: int, expected: str) -> None:
    assert format_kb(kb) == expected


def test_memory_overview(parsed: ParsedOOMLog) -> None:
    m = memory_overview(parsed, page_size_kb=4)

    assert m.total_ram_kb == 4194056 * 4
    assert m.free_kb == 33077 * 4
    assert m.used_kb == (4194056 - 33077) * 4
    assert m.anon_kb == (675488 + 3104512) * 4
    assert m.file_kb == (238 + 142) * 4
    assert m.shmem_kb == 4510396
    assert m.slab_kb == (75026 + 36644) * 4
    assert m.swap_total_kb == 2097148
    assert m.swap_used_kb == 2097148 - 1694460


def test_killed_process_memory(parsed: ParsedOOMLog) -> None:
    k = killed_process_memory(parsed)

    assert k.pid == 3499662
    assert k.name == "postmaster"
    assert k.rss_kb == 854636 + 3445804
    assert k.total_vm_kb == 5083036
    assert k.rss_percent_of_vm == pytest.approx(4300440 / 5083036 * 100)


def test_group_processes(parsed: ParsedOOMLog) -> None:
    groups = group_processes(parsed.processes, killed_pid=3499662, page_size_kb=4)

    assert [g.name for g in groups] == ["postmaster", "java", "Web Content", "haveged", "sshd"]
    pg = groups[0]
    assert pg.count == 5
    assert pg.total_rss_kb == 1924140 * 4
    assert pg.max_rss_kb == 1075110 * 4
    assert pg.contains_killed is True
    assert pg.percent_of_total_rss == pytest.approx(1924140 / 2251498 * 100)
    assert not any(g.contains_killed for g in groups[1:])
    assert sum(g.percent_of_total_rss for g in groups) == pytest.approx(100.0)


def test_group_processes_ties_sorted_by_name() -> None:
    procs = (
        ProcessInfo(pid=1, uid=0, tgid=1, total_vm=10, rss=5, pgtables_bytes=0, swapents=0, oom_score_adj=0, name="b"),
        ProcessInfo(pid=2, uid=0, tgid=2, total_vm=10, rss=5, pgtables_bytes=0, swapents=0, oom_score_adj=0, name="a"),
    )
    groups = group_processes(procs, killed_pid=0, page_size_kb=4)
    assert [g.name for g in groups] == ["a", "b"]


def test_group_processes_empty() -> None:
    assert group_processes((), killed_pid=0, page_size_kb=4) == []


def test_summarize_limits(parsed: ParsedOOMLog) -> None:
    summary = summarize(parsed, config=AnalyzerConfig(top_groups=2, top_processes=3))

    assert summary.process_count == 9
    assert summary.total_rss_kb == 2251498 * 4
    assert [g.name for g in summary.groups] == ["postmaster", "java"]
    assert [p.pid for p in summary.top_processes] == [3499662, 3240780, 3494435]
    assert summary.killed.pid == 3499662


def test_summarize_page_size(parsed: ParsedOOMLog) -> None:
    summary = summarize(parsed, config=AnalyzerConfig(page_size_kb=64))
    assert summary.memory.total_ram_kb == 4194056 * 64
    assert summary.total_rss_kb == 2251498 * 64


def test_summarize_report_without_sections(plain_syslog_text: str) -> None:
    outcome = parse(plain_syslog_text)
    assert outcome.data is not None

    summary = summarize(outcome.data)

    assert summary.process_count == 0
    assert summary.groups == ()
    assert summary.killed.rss_percent_of_vm == 0.0
    assert summary.memory.used_kb == 0
