"""Core data models for OOM kill reports.

All records are immutable and fully defaulted, so a record built from an
empty or foreign log is still valid (zeros, empty strings, empty tuples).
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class OOMTrigger:
    """The `<proc> invoked oom-killer: gfp_mask=...` header line."""

    timestamp: str = ""  # raw, format depends on dmesg/journald/syslog
    trigger_process: str = ""
    gfp_mask: str = ""
    gfp_flags: tuple[str, ...] = ()
    order: int = 0
    oom_score_adj: int = 0


@dataclass(frozen=True, slots=True)
class SystemInfo:
    """CPU/PID banner plus the `Hardware name:` line."""

    cpu: int = 0
    pid: int = 0
    comm: str = ""
    kdump: str = ""
    tainted: bool = False
    kernel_version: str = ""
    hardware_vendor: str = ""
    hardware_model: str = ""
    hardware_platform: str = ""
    bios: str = ""


@dataclass(frozen=True, slots=True)
class StackFrame:
    function: str
    offset: str
    size: str


@dataclass(frozen=True, slots=True)
class RegisterState:
    """x86_64 register dump; registers never printed stay empty."""

    rip: str = ""
    rsp: str = ""
    eflags: str = ""
    rax: str = ""
    rbx: str = ""
    rcx: str = ""
    rdx: str = ""
    rsi: str = ""
    rdi: str = ""
    rbp: str = ""
    r08: str = ""
    r09: str = ""
    r10: str = ""
    r11: str = ""
    r12: str = ""
    r13: str = ""
    r14: str = ""
    r15: str = ""


@dataclass(frozen=True, slots=True)
class CallStack:
    frames: tuple[StackFrame, ...] = ()
    registers: RegisterState | None = None  # None when no register line was seen
    code_note: str | None = None


@dataclass(frozen=True, slots=True)
class MemInfoPages:
    """Global counters printed after `Mem-Info:` (unit: pages)."""

    active_anon: int = 0
    inactive_anon: int = 0
    isolated_anon: int = 0
    active_file: int = 0
    inactive_file: int = 0
    isolated_file: int = 0
    unevictable: int = 0
    dirty: int = 0
    writeback: int = 0
    slab_reclaimable: int = 0
    slab_unreclaimable: int = 0
    mapped: int = 0
    shmem: int = 0
    pagetables: int = 0
    sec_pagetables: int = 0
    bounce: int = 0
    kernel_misc_reclaimable: int = 0
    free: int = 0
    free_pcp: int = 0
    free_cma: int = 0


@dataclass(frozen=True, slots=True)
class NodeMemory:
    """Per NUMA node summary (unit: kB)."""

    node: int = 0
    active_anon: int = 0
    inactive_anon: int = 0
    active_file: int = 0
    inactive_file: int = 0
    unevictable: int = 0
    isolated_anon: int = 0
    isolated_file: int = 0
    mapped: int = 0
    dirty: int = 0
    writeback: int = 0
    shmem: int = 0
    shmem_thp: int = 0
    shmem_pmdmapped: int = 0
    anon_thp: int = 0
    writeback_tmp: int = 0
    kernel_stack: int = 0
    pagetables: int = 0
    sec_pagetables: int = 0
    all_unreclaimable: bool = False


@dataclass(frozen=True, slots=True)
class ZoneInfo:
    """Per (node, zone) row including the min/low/high watermarks (unit: kB)."""

    node: int = 0
    zone: str = ""
    free: int = 0
    boost: int = 0
    min: int = 0
    low: int = 0
    high: int = 0
    reserved_highatomic: int = 0
    active_anon: int = 0
    inactive_anon: int = 0
    active_file: int = 0
    inactive_file: int = 0
    unevictable: int = 0
    writepending: int = 0
    present: int = 0
    managed: int = 0
    mlocked: int = 0
    bounce: int = 0
    free_pcp: int = 0
    local_pcp: int = 0
    free_cma: int = 0


@dataclass(frozen=True, slots=True)
class BuddyBlock:
    count: int
    size: int  # kB
    flags: str


@dataclass(frozen=True, slots=True)
class BuddyInfo:
    node: int
    zone: str
    blocks: tuple[BuddyBlock, ...]
    total: int  # kB


@dataclass(frozen=True, slots=True)
class HugepagesInfo:
    node: int
    size: int  # kB
    total: int
    free: int
    surp: int


@dataclass(frozen=True, slots=True)
class SwapInfo:
    free_swap: int = 0  # kB
    total_swap: int = 0  # kB
    pages_in_swap_cache: int = 0


@dataclass(frozen=True, slots=True)
class PageCacheInfo:
    total_pagecache_pages: int = 0
    pages_ram: int = 0
    pages_highmem_movable_only: int = 0
    pages_reserved: int = 0
    pages_cma_reserved: int = 0
    pages_hwpoisoned: int = 0


@dataclass(frozen=True, slots=True)
class MemoryInfo:
    mem_info_pages: MemInfoPages = field(default_factory=MemInfoPages)
    node_memory: tuple[NodeMemory, ...] = ()
    zones: tuple[ZoneInfo, ...] = ()
    buddy_info: tuple[BuddyInfo, ...] = ()
    hugepages: tuple[HugepagesInfo, ...] = ()
    swap_info: SwapInfo = field(default_factory=SwapInfo)
    page_cache_info: PageCacheInfo = field(default_factory=PageCacheInfo)
    lowmem_reserve: tuple[tuple[int, ...], ...] = ()


@dataclass(frozen=True, slots=True)
class ProcessInfo:
    """One row of the `Tasks state` table (total_vm/rss in pages)."""

    pid: int
    uid: int
    tgid: int
    total_vm: int
    rss: int
    pgtables_bytes: int
    swapents: int
    oom_score_adj: int
    name: str


@dataclass(frozen=True, slots=True)
class OOMConstraint:
    constraint: str = ""
    nodemask: str | None = None  # `(null)` in the log
    cpuset: str = ""
    mems_allowed: str = ""
    global_oom: bool = False
    task_memcg: str = ""
    task: str = ""
    pid: int = 0
    uid: int = 0


@dataclass(frozen=True, slots=True)
class KilledProcess:
    pid: int = 0
    name: str = ""
    total_vm_kb: int = 0
    anon_rss_kb: int = 0
    file_rss_kb: int = 0
    shmem_rss_kb: int = 0
    uid: int = 0
    pgtables_kb: int = 0
    oom_score_adj: int = 0


@dataclass(frozen=True, slots=True)
class ParsedOOMLog:
    """Root record of one parsed OOM report."""

    trigger: OOMTrigger
    system_info: SystemInfo
    call_stack: CallStack
    memory_info: MemoryInfo
    processes: tuple[ProcessInfo, ...]
    oom_constraint: OOMConstraint
    killed_process: KilledProcess
    raw_log: str  # verbatim input
    parse_errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ParseOutcome:
    """Result of `parse`.

    `success` only means no anchor line was missing. `data` is None only
    after an internal failure; consumers should render `data` whenever it is
    present and show `errors` as warnings.
    """

    success: bool
    data: ParsedOOMLog | None
    errors: tuple[str, ...] = ()
