"""Derived figures for a parsed OOM report (memory overview, process groups)."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

from .config import AnalyzerConfig
from .models import ParsedOOMLog, ProcessInfo


@dataclass(frozen=True, slots=True)
class MemoryOverview:
    total_ram_kb: int
    free_kb: int
    used_kb: int
    anon_kb: int
    file_kb: int
    shmem_kb: int
    slab_kb: int
    swap_total_kb: int
    swap_used_kb: int


@dataclass(frozen=True, slots=True)
class KilledProcessMemory:
    pid: int
    name: str
    rss_kb: int  # anon + file + shmem
    total_vm_kb: int
    rss_percent_of_vm: float


@dataclass(frozen=True, slots=True)
class ProcessGroup:
    """Processes sharing a name.

    `max_rss_kb` is the largest member RSS; it estimates the group's footprint
    when members share most of their memory (forked workers, shmem).
    """

    name: str
    count: int
    total_rss_kb: int
    total_vm_kb: int
    max_rss_kb: int
    percent_of_total_rss: float
    contains_killed: bool


@dataclass(frozen=True, slots=True)
class OOMSummary:
    memory: MemoryOverview
    killed: KilledProcessMemory
    process_count: int
    total_rss_kb: int
    groups: tuple[ProcessGroup, ...]
    top_processes: tuple[ProcessInfo, ...]


def format_kb(kb: int) -> str:
    """Human readable size of a kB figure."""
    if kb >= 1024 * 1024:
        return f"{kb / (1024 * 1024):.2f} GB"
    if kb >= 1024:
        return f"{kb / 1024:.2f} MB"
    return f"{kb} KB"


def _percent(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


def memory_overview(parsed: ParsedOOMLog, *, page_size_kb: int) -> MemoryOverview:
    pages = parsed.memory_info.mem_info_pages
    swap = parsed.memory_info.swap_info
    total = parsed.memory_info.page_cache_info.pages_ram * page_size_kb
    free = pages.free * page_size_kb
    return MemoryOverview(
        total_ram_kb=total,
        free_kb=free,
        used_kb=max(total - free, 0),
        anon_kb=(pages.active_anon + pages.inactive_anon) * page_size_kb,
        file_kb=(pages.active_file + pages.inactive_file) * page_size_kb,
        shmem_kb=pages.shmem * page_size_kb,
        slab_kb=(pages.slab_reclaimable + pages.slab_unreclaimable) * page_size_kb,
        swap_total_kb=swap.total_swap,
        swap_used_kb=max(swap.total_swap - swap.free_swap, 0),
    )


def killed_process_memory(parsed: ParsedOOMLog) -> KilledProcessMemory:
    k = parsed.killed_process
    rss = k.anon_rss_kb + k.file_rss_kb + k.shmem_rss_kb
    return KilledProcessMemory(
        pid=k.pid,
        name=k.name,
        rss_kb=rss,
        total_vm_kb=k.total_vm_kb,
        rss_percent_of_vm=_percent(rss, k.total_vm_kb),
    )


def group_processes(
    processes: tuple[ProcessInfo, ...],
    *,
    killed_pid: int,
    page_size_kb: int,
) -> list[ProcessGroup]:
    """Group processes by name, largest total RSS first."""
    by_name: dict[str, list[ProcessInfo]] = defaultdict(list)
    for p in processes:
        by_name[p.name].append(p)

    total_rss = sum(p.rss for p in processes)
    groups = [
        ProcessGroup(
            name=name,
            count=len(procs),
            total_rss_kb=sum(p.rss for p in procs) * page_size_kb,
            total_vm_kb=sum(p.total_vm for p in procs) * page_size_kb,
            max_rss_kb=max(p.rss for p in procs) * page_size_kb,
            percent_of_total_rss=_percent(sum(p.rss for p in procs), total_rss),
            contains_killed=any(p.pid == killed_pid for p in procs),
        )
        for name, procs in by_name.items()
    ]
    groups.sort(key=lambda g: (-g.total_rss_kb, g.name))
    return groups


def summarize(parsed: ParsedOOMLog, *, config: AnalyzerConfig | None = None) -> OOMSummary:
    """Compute the derived summary of a parsed report."""
    cfg = config or AnalyzerConfig()
    groups = group_processes(
        parsed.processes,
        killed_pid=parsed.killed_process.pid,
        page_size_kb=cfg.page_size_kb,
    )
    top = sorted(parsed.processes, key=lambda p: (-p.rss, p.pid))[: cfg.top_processes]
    return OOMSummary(
        memory=memory_overview(parsed, page_size_kb=cfg.page_size_kb),
        killed=killed_process_memory(parsed),
        process_count=len(parsed.processes),
        total_rss_kb=sum(p.rss for p in parsed.processes) * cfg.page_size_kb,
        groups=tuple(groups[: cfg.top_groups]),
        top_processes=tuple(top),
    )
