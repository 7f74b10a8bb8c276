"""CPU banner and hardware identification extractor (best effort, no diagnostics)."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..models import SystemInfo
from .base import find_line_containing, search_int, search_str


@dataclass(frozen=True, slots=True)
class SystemInfoExtractor:
    """Parse `CPU: 7 PID: 1 Comm: x Kdump: loaded Not tainted <ver>` and `Hardware name:`."""

    _cpu = re.compile(r"CPU:\s*(\d+)")
    _pid = re.compile(r"PID:\s*(\d+)")
    _comm = re.compile(r"Comm:\s*(\S+)")
    _kdump = re.compile(r"Kdump:\s*(\S+)")
    _kernel = re.compile(r"(?:tainted|Not tainted)\s+(\S+)")
    # Tainted: G        W  OE      6.8.0-45-generic #45-Ubuntu
    _tainted_kernel = re.compile(r"Tainted:.*?\s(\d+\.\d+\S*)")

    _hardware = re.compile(r"Hardware name:\s*([^,]+),\s*([^/]+)/([^,]+),\s*BIOS\s*(.+)$")
    _hardware_short = re.compile(r"Hardware name:\s*(.+?),\s*BIOS\s*(.+)$")

    def _kernel_version(self, line: str) -> str:
        version = search_str(self._kernel, line)
        if not version:
            version = search_str(self._tainted_kernel, line)
        return version

    def _hardware_fields(self, line: str | None) -> dict[str, str]:
        if line is None:
            return {}
        m = self._hardware.search(line)
        if m:
            return {
                "hardware_vendor": m.group(1).strip(),
                "hardware_model": m.group(2).strip(),
                "hardware_platform": m.group(3).strip(),
                "bios": m.group(4).strip(),
            }
        m = self._hardware_short.search(line)
        if m:
            return {"hardware_vendor": m.group(1).strip(), "bios": m.group(2).strip()}
        return {}

    def extract(self, lines: Sequence[str], errors: list[str]) -> SystemInfo:
        """Extract system info; missing lines simply leave defaults."""
        hardware = self._hardware_fields(find_line_containing(lines, "Hardware name:"))

        cpu_line = find_line_containing(lines, "CPU:")
        if cpu_line is None:
            return SystemInfo(**hardware)

        return SystemInfo(
            cpu=search_int(self._cpu, cpu_line),
            pid=search_int(self._pid, cpu_line),
            comm=search_str(self._comm, cpu_line),
            kdump=search_str(self._kdump, cpu_line),
            tainted="Not tainted" not in cpu_line,
            kernel_version=self._kernel_version(cpu_line),
            **hardware,
        )
