"""Section extractors for kernel OOM reports.

Each extractor reads the full, shared line sequence and returns one section
record of the parsed report.
"""

from __future__ import annotations

from .base import Region, SectionExtractor, find_line_containing, strip_bracket_prefix
from .callstack import CallStackExtractor
from .decision import ConstraintExtractor, KilledProcessExtractor
from .memory import MemoryExtractor
from .processes import ProcessTableExtractor
from .system import SystemInfoExtractor
from .trigger import TriggerExtractor

__all__ = [
    "CallStackExtractor",
    "ConstraintExtractor",
    "KilledProcessExtractor",
    "MemoryExtractor",
    "ProcessTableExtractor",
    "Region",
    "SectionExtractor",
    "SystemInfoExtractor",
    "TriggerExtractor",
    "find_line_containing",
    "strip_bracket_prefix",
]
