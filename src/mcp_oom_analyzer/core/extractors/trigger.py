"""OOM trigger line extractor."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..models import OOMTrigger
from .base import find_line_containing, search_group, search_int, search_str

TRIGGER_ANCHOR = "invoked oom-killer"
MISSING_TRIGGER = "Could not find OOM trigger line"


@dataclass(frozen=True, slots=True)
class TriggerExtractor:
    """Parse `[ts] <proc> invoked oom-killer: gfp_mask=..., order=N, oom_score_adj=N`."""

    _bracket_ts = re.compile(r"^\[(.*?)\]")
    # journalctl -o short-iso: 2025-11-28T07:26:44+0100 host kernel: ...
    _iso_ts = re.compile(r"^(\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2}(?:[.,]\d+)?(?:Z|[+-]\d{2}:?\d{2})?)")
    # syslog / journalctl default: Nov 28 07:26:44 host kernel: ...
    _rfc3164_ts = re.compile(r"^([A-Z][a-z]{2}\s+\d{1,2}\s+\d{2}:\d{2}:\d{2})")

    _process = re.compile(r"(\S+)\s+invoked\s+oom-killer")
    _gfp = re.compile(r"gfp_mask=([^(,\s]+)\(([^)]*)\)")
    _gfp_bare = re.compile(r"gfp_mask=([^(,\s]+)")
    _order = re.compile(r"order=(\d+)")
    _score = re.compile(r"oom_score_adj=(-?\d+)")

    def _timestamp(self, line: str) -> str:
        for pattern in (self._bracket_ts, self._iso_ts, self._rfc3164_ts):
            value = search_group(pattern, line)
            if value is not None:
                return value.strip()
        return ""

    def _gfp_fields(self, line: str) -> tuple[str, tuple[str, ...]]:
        m = self._gfp.search(line)
        if m:
            flags = tuple(f.strip() for f in m.group(2).split("|") if f.strip())
            return m.group(1).strip(), flags
        return search_str(self._gfp_bare, line), ()

    def extract(self, lines: Sequence[str], errors: list[str]) -> OOMTrigger:
        """Extract the trigger record, diagnosing a missing trigger line."""
        line = find_line_containing(lines, TRIGGER_ANCHOR)
        if line is None:
            errors.append(MISSING_TRIGGER)
            return OOMTrigger()

        gfp_mask, gfp_flags = self._gfp_fields(line)
        return OOMTrigger(
            timestamp=self._timestamp(line),
            trigger_process=search_str(self._process, line),
            gfp_mask=gfp_mask,
            gfp_flags=gfp_flags,
            order=search_int(self._order, line),
            oom_score_adj=search_int(self._score, line),
        )
