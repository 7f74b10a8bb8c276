from __future__ import annotations

from mcp_oom_analyzer.core.extractors import MemoryExtractor
from mcp_oom_analyzer.core.models import BuddyBlock, HugepagesInfo, MemInfoPages, MemoryInfo


def test_mem_info_page_counters(oom_lines: list[str]) -> None:
    pages = MemoryExtractor().mem_info_pages(oom_lines)

    assert pages.active_anon == 675488
    assert pages.inactive_anon == 3104512
    assert pages.active_file == 238
    assert pages.inactive_file == 142
    assert pages.slab_reclaimable == 75026
    assert pages.slab_unreclaimable == 36644
    assert pages.mapped == 942802
    assert pages.shmem == 1127599
    assert pages.free == 33077
    assert pages.free_pcp == 65
    assert pages.sec_pagetables == 0


def test_mem_info_pagetables_overwritten_by_sec_pagetables(oom_lines: list[str]) -> None:
    # `pagetables:42642` is followed by a `sec_pagetables:0` line.
    assert MemoryExtractor().mem_info_pages(oom_lines).pagetables == 0


def test_mem_info_stops_at_first_node_line() -> None:
    lines = [
        "Mem-Info:",
        "active_anon:10 free:5",
        "Node 0 active_anon:40kB",
        "free:999",
    ]
    assert MemoryExtractor().mem_info_pages(lines) == MemInfoPages(active_anon=10, free=5)


def test_node_memory_counts_zone_rows(oom_lines: list[str]) -> None:
    nodes = MemoryExtractor().node_memory(oom_lines)

    # Node summary plus the DMA, DMA32 and Normal zone rows.
    assert len(nodes) == 4
    summary = nodes[0]
    assert summary.node == 0
    assert summary.active_anon == 2701952
    assert summary.inactive_anon == 12418048
    assert summary.shmem == 4510396
    assert summary.shmem_thp == 0
    assert summary.kernel_stack == 7584
    assert summary.pagetables == 170568
    assert summary.all_unreclaimable is True
    assert nodes[2].active_anon == 264
    assert nodes[2].all_unreclaimable is False


def test_zones_skip_bare_dma(oom_lines: list[str]) -> None:
    zones = MemoryExtractor().zones(oom_lines)

    assert [z.zone for z in zones] == ["DMA32", "Normal"]
    dma32, normal = zones
    assert (dma32.free, dma32.min, dma32.low, dma32.high) == (64760, 11660, 14572, 17484)
    assert dma32.present == 3129216
    assert dma32.managed == 2801364
    assert normal.free == 55812
    assert normal.min == 55852
    assert normal.free < normal.min
    assert normal.free_pcp == 260


def test_buddy_info_blocks_need_flags(oom_lines: list[str]) -> None:
    buddy = MemoryExtractor().buddy_info(oom_lines)

    assert [(b.zone, b.total) for b in buddy] == [("DMA32", 64760), ("Normal", 57620)]
    assert len(buddy[0].blocks) == 11
    assert buddy[0].blocks[0] == BuddyBlock(count=10, size=4, flags="UME")
    # `0*1024kB` carries no flag group.
    assert len(buddy[1].blocks) == 10
    assert 1024 not in [b.size for b in buddy[1].blocks]
    assert buddy[1].blocks[-1] == BuddyBlock(count=2, size=4096, flags="M")


def test_hugepages(oom_lines: list[str]) -> None:
    assert MemoryExtractor().hugepages(oom_lines) == (
        HugepagesInfo(node=0, size=1048576, total=0, free=0, surp=0),
        HugepagesInfo(node=0, size=2048, total=0, free=0, surp=0),
    )


def test_swap_and_page_cache(oom_lines: list[str]) -> None:
    extractor = MemoryExtractor()
    swap = extractor.swap_info(oom_lines)
    cache = extractor.page_cache_info(oom_lines)

    assert swap.free_swap == 1694460
    assert swap.total_swap == 2097148
    assert swap.pages_in_swap_cache == 24111
    assert cache.total_pagecache_pages == 1152741
    assert cache.pages_ram == 4194056
    assert cache.pages_highmem_movable_only == 0
    assert cache.pages_reserved == 176424
    assert cache.pages_cma_reserved == 0
    assert cache.pages_hwpoisoned == 0


def test_lowmem_reserve(oom_lines: list[str]) -> None:
    assert MemoryExtractor().lowmem_reserve(oom_lines) == (
        (0, 2701, 15638, 15638, 15638),
        (0, 0, 12937, 12937, 12937),
        (0, 0, 0, 0, 0),
    )


def test_empty_input_gives_defaults() -> None:
    errors: list[str] = []
    assert MemoryExtractor().extract([""], errors) == MemoryInfo()
    assert errors == []
