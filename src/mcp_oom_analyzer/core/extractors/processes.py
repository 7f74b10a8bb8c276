"""`Tasks state` process table extractor."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..models import ProcessInfo
from .base import Region

TABLE_START = "Tasks state (memory values in pages)"
TABLE_END = "oom-kill:"
TABLE_HEADER = "[  pid  ]"


@dataclass(frozen=True, slots=True)
class ProcessTableExtractor:
    """Parse rows like `[    302]     0   302     2111      642    49152      894             0 haveged`.

    Rows that do not fit the nine columns are skipped silently.
    """

    _row = re.compile(
        r"\[\s*(\d+)\]\s+(\d+)\s+(\d+)\s+(\d+)\s+(\d+)\s+(\d+)\s+(\d+)\s+(-?\d+)\s+(.+)$"
    )

    def parse_row(self, line: str) -> ProcessInfo | None:
        """Parse one table row into a ProcessInfo if it matches."""
        m = self._row.search(line)
        if not m:
            return None
        return ProcessInfo(
            pid=int(m.group(1)),
            uid=int(m.group(2)),
            tgid=int(m.group(3)),
            total_vm=int(m.group(4)),
            rss=int(m.group(5)),
            pgtables_bytes=int(m.group(6)),
            swapents=int(m.group(7)),
            oom_score_adj=int(m.group(8)),
            name=m.group(9).strip(),
        )

    def extract(self, lines: Sequence[str], errors: list[str]) -> tuple[ProcessInfo, ...]:
        """Collect rows between the table banner and the `oom-kill:` line."""
        processes: list[ProcessInfo] = []
        region = Region.BEFORE

        for line in lines:
            if TABLE_START in line:
                region = Region.INSIDE
                continue
            if TABLE_END in line:
                region = Region.AFTER
                continue
            if region is not Region.INSIDE or TABLE_HEADER in line:
                continue

            proc = self.parse_row(line)
            if proc is not None:
                processes.append(proc)

        return tuple(processes)
