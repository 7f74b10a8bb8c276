"""Memory state extractor.

Eight independent best-effort scans, one per MemoryInfo slice:

- Mem-Info page counters (pages), ended by the first `Node ` line
- per node summaries (kB)
- per zone rows with watermarks (kB)
- buddy allocator free lists
- hugepage pools
- swap figures
- page cache / RAM totals
- lowmem_reserve arrays

Zone and buddy rows only recognize `DMA32` and `Normal`: the zone alternative
is `DMA32?`, which needs the `3`, so a bare `DMA` zone is not reported.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..models import (
    BuddyBlock,
    BuddyInfo,
    HugepagesInfo,
    MemInfoPages,
    MemoryInfo,
    NodeMemory,
    PageCacheInfo,
    SwapInfo,
    ZoneInfo,
)
from .base import (
    compile_labels,
    extract_fields,
    label_int_pattern,
    label_kb_pattern,
    search_int,
    strip_bracket_prefix,
)

PAGE_COUNTER_LABELS = {
    "active_anon": "active_anon",
    "inactive_anon": "inactive_anon",
    "isolated_anon": "isolated_anon",
    "active_file": "active_file",
    "inactive_file": "inactive_file",
    "isolated_file": "isolated_file",
    "unevictable": "unevictable",
    "dirty": "dirty",
    "writeback": "writeback",
    "slab_reclaimable": "slab_reclaimable",
    "slab_unreclaimable": "slab_unreclaimable",
    "mapped": "mapped",
    "shmem": "shmem",
    "pagetables": "pagetables",
    "sec_pagetables": "sec_pagetables",
    "bounce": "bounce",
    "kernel_misc_reclaimable": "kernel_misc_reclaimable",
    "free": "free",
    "free_pcp": "free_pcp",
    "free_cma": "free_cma",
}

NODE_LABELS = {
    "active_anon": "active_anon",
    "inactive_anon": "inactive_anon",
    "active_file": "active_file",
    "inactive_file": "inactive_file",
    "unevictable": "unevictable",
    "isolated_anon": "isolated(anon)",
    "isolated_file": "isolated(file)",
    "mapped": "mapped",
    "dirty": "dirty",
    "writeback": "writeback",
    "shmem": "shmem",
    "shmem_thp": "shmem_thp",
    "shmem_pmdmapped": "shmem_pmdmapped",
    "anon_thp": "anon_thp",
    "writeback_tmp": "writeback_tmp",
    "kernel_stack": "kernel_stack",
    "pagetables": "pagetables",
    "sec_pagetables": "sec_pagetables",
}

ZONE_LABELS = {
    "boost": "boost",
    "min": "min",
    "low": "low",
    "high": "high",
    "reserved_highatomic": "reserved_highatomic",
    "active_anon": "active_anon",
    "inactive_anon": "inactive_anon",
    "active_file": "active_file",
    "inactive_file": "inactive_file",
    "unevictable": "unevictable",
    "writepending": "writepending",
    "present": "present",
    "managed": "managed",
    "mlocked": "mlocked",
    "bounce": "bounce",
    "free_pcp": "free_pcp",
    "local_pcp": "local_pcp",
    "free_cma": "free_cma",
}

_PAGE_COUNTER_RE = compile_labels(PAGE_COUNTER_LABELS, label_int_pattern)
_NODE_RE = compile_labels(NODE_LABELS, label_kb_pattern)
_ZONE_RE = compile_labels(ZONE_LABELS, label_kb_pattern)


@dataclass(frozen=True, slots=True)
class MemoryExtractor:
    """Build MemoryInfo from the Mem-Info dump; never diagnoses."""

    _node = re.compile(r"Node\s+(\d+)")
    _zone = re.compile(r"Node\s+(\d+)\s+(DMA32?|Normal)\s+free:(\d+)kB")
    _buddy = re.compile(r"Node\s+(\d+)\s+(DMA32?|Normal):\s+(.+?)\s*=\s*(\d+)kB")
    _buddy_block = re.compile(r"(\d+)\*(\d+)kB\s*\(([^)]*)\)")
    _hugepages = re.compile(
        r"Node\s+(\d+)\s+hugepages_total=(\d+)\s+hugepages_free=(\d+)\s+"
        r"hugepages_surp=(\d+)\s+hugepages_size=(\d+)kB"
    )
    _free_swap = re.compile(r"Free swap\s*=\s*(\d+)kB")
    _total_swap = re.compile(r"Total swap\s*=\s*(\d+)kB")
    _swap_cache = re.compile(r"(\d+)\s+pages in swap cache")
    _pagecache = re.compile(r"(\d+)\s+total pagecache pages")
    _pages_ram = re.compile(r"(\d+)\s+pages RAM")
    _pages_highmem = re.compile(r"(\d+)\s+pages HighMem")
    _pages_reserved = re.compile(r"(\d+)\s+pages reserved")
    _pages_cma = re.compile(r"(\d+)\s+pages cma reserved")
    _pages_hwpoisoned = re.compile(r"(\d+)\s+pages hwpoisoned")
    _lowmem_reserve = re.compile(r"lowmem_reserve\[\]:\s*([\d\s]+)")

    def mem_info_pages(self, lines: Sequence[str]) -> MemInfoPages:
        """Page counters between `Mem-Info:` and the first `Node ` line.

        Lines are matched one after another and a later match overwrites an
        earlier one (`sec_pagetables:0` also satisfies `pagetables:`).
        """
        values: dict[str, int] = {}
        inside = False
        for line in lines:
            if "Mem-Info:" in line:
                inside = True
                continue
            if not inside:
                continue
            if "Node " in line:
                break
            values.update(extract_fields(_PAGE_COUNTER_RE, strip_bracket_prefix(line)))
        return MemInfoPages(**values)

    def node_memory(self, lines: Sequence[str]) -> tuple[NodeMemory, ...]:
        """Every `Node N ... active_anon:...kB` row, in log order."""
        nodes: list[NodeMemory] = []
        for line in lines:
            if "Node " not in line or "active_anon:" not in line or "kB" not in line:
                continue
            m = self._node.search(line)
            if not m:
                continue
            fields = {name: search_int(pattern, line) for name, pattern in _NODE_RE.items()}
            nodes.append(
                NodeMemory(
                    node=int(m.group(1)),
                    all_unreclaimable="all_unreclaimable? yes" in line,
                    **fields,
                )
            )
        return tuple(nodes)

    def zones(self, lines: Sequence[str]) -> tuple[ZoneInfo, ...]:
        zones: list[ZoneInfo] = []
        for line in lines:
            m = self._zone.search(line)
            if not m:
                continue
            fields = {name: search_int(pattern, line) for name, pattern in _ZONE_RE.items()}
            zones.append(
                ZoneInfo(node=int(m.group(1)), zone=m.group(2), free=int(m.group(3)), **fields)
            )
        return tuple(zones)

    def buddy_info(self, lines: Sequence[str]) -> tuple[BuddyInfo, ...]:
        """`Node N Zone: c*SkB (FLAGS) ... = TkB`; blocks without flags are skipped."""
        out: list[BuddyInfo] = []
        for line in lines:
            m = self._buddy.search(line)
            if not m:
                continue
            blocks = tuple(
                BuddyBlock(count=int(b.group(1)), size=int(b.group(2)), flags=b.group(3))
                for b in self._buddy_block.finditer(m.group(3))
            )
            out.append(
                BuddyInfo(node=int(m.group(1)), zone=m.group(2), blocks=blocks, total=int(m.group(4)))
            )
        return tuple(out)

    def hugepages(self, lines: Sequence[str]) -> tuple[HugepagesInfo, ...]:
        out: list[HugepagesInfo] = []
        for line in lines:
            m = self._hugepages.search(line)
            if m:
                out.append(
                    HugepagesInfo(
                        node=int(m.group(1)),
                        total=int(m.group(2)),
                        free=int(m.group(3)),
                        surp=int(m.group(4)),
                        size=int(m.group(5)),
                    )
                )
        return tuple(out)

    def _last_int(self, pattern: re.Pattern[str], lines: Sequence[str]) -> int:
        # Each figure is printed once; if repeated, the last one wins.
        value = 0
        for line in lines:
            m = pattern.search(line)
            if m:
                value = int(m.group(1))
        return value

    def swap_info(self, lines: Sequence[str]) -> SwapInfo:
        return SwapInfo(
            free_swap=self._last_int(self._free_swap, lines),
            total_swap=self._last_int(self._total_swap, lines),
            pages_in_swap_cache=self._last_int(self._swap_cache, lines),
        )

    def page_cache_info(self, lines: Sequence[str]) -> PageCacheInfo:
        return PageCacheInfo(
            total_pagecache_pages=self._last_int(self._pagecache, lines),
            pages_ram=self._last_int(self._pages_ram, lines),
            pages_highmem_movable_only=self._last_int(self._pages_highmem, lines),
            pages_reserved=self._last_int(self._pages_reserved, lines),
            pages_cma_reserved=self._last_int(self._pages_cma, lines),
            pages_hwpoisoned=self._last_int(self._pages_hwpoisoned, lines),
        )

    def lowmem_reserve(self, lines: Sequence[str]) -> tuple[tuple[int, ...], ...]:
        out: list[tuple[int, ...]] = []
        for line in lines:
            m = self._lowmem_reserve.search(line)
            if m:
                out.append(tuple(int(v) for v in m.group(1).split()))
        return tuple(out)

    def extract(self, lines: Sequence[str], errors: list[str]) -> MemoryInfo:
        """Run all memory scans over the same lines."""
        return MemoryInfo(
            mem_info_pages=self.mem_info_pages(lines),
            node_memory=self.node_memory(lines),
            zones=self.zones(lines),
            buddy_info=self.buddy_info(lines),
            hugepages=self.hugepages(lines),
            swap_info=self.swap_info(lines),
            page_cache_info=self.page_cache_info(lines),
            lowmem_reserve=self.lowmem_reserve(lines),
        )
