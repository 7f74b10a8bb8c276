"""Kill decision extractors: the `oom-kill:` constraint line and `Killed process` line."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..models import KilledProcess, OOMConstraint
from .base import find_line_containing, search_group, search_int, search_str

CONSTRAINT_ANCHOR = "oom-kill:"
KILLED_ANCHOR = "Out of memory: Killed process"
MISSING_CONSTRAINT = "Could not find oom-kill constraint line"
MISSING_KILLED = "Could not find killed process line"


@dataclass(frozen=True, slots=True)
class ConstraintExtractor:
    """Parse `oom-kill:constraint=...,nodemask=...,cpuset=...,global_oom,task_memcg=...,task=...,pid=...,uid=...`."""

    _constraint = re.compile(r"constraint=(\w+)")
    _nodemask = re.compile(r"nodemask=([^,]+)")
    _cpuset = re.compile(r"cpuset=([^,]+)")
    _mems_allowed = re.compile(r"mems_allowed=([^,]+)")
    _task_memcg = re.compile(r"task_memcg=([^,]+)")
    _task = re.compile(r"task=([^,]+)")
    _pid = re.compile(r"pid=(\d+)")
    _uid = re.compile(r"uid=(\d+)")

    def _nodemask_value(self, line: str) -> str | None:
        value = search_group(self._nodemask, line)
        if value is None:
            return None
        value = value.strip()
        return None if value == "(null)" else value

    def extract(self, lines: Sequence[str], errors: list[str]) -> OOMConstraint:
        """Extract the constraint record, diagnosing a missing `oom-kill:` line."""
        line = find_line_containing(lines, CONSTRAINT_ANCHOR)
        if line is None:
            errors.append(MISSING_CONSTRAINT)
            return OOMConstraint()

        return OOMConstraint(
            constraint=search_str(self._constraint, line),
            nodemask=self._nodemask_value(line),
            cpuset=search_str(self._cpuset, line),
            mems_allowed=search_str(self._mems_allowed, line),
            global_oom="global_oom" in line,
            task_memcg=search_str(self._task_memcg, line),
            task=search_str(self._task, line),
            pid=search_int(self._pid, line),
            uid=search_int(self._uid, line),
        )


@dataclass(frozen=True, slots=True)
class KilledProcessExtractor:
    """Parse `Out of memory: Killed process <pid> (<name>) total-vm:...kB, ...`."""

    _pid = re.compile(r"Killed process (\d+)")
    _name = re.compile(r"Killed process \d+ \(([^)]+)\)")
    _total_vm = re.compile(r"total-vm:(\d+)kB")
    _anon_rss = re.compile(r"anon-rss:(\d+)kB")
    _file_rss = re.compile(r"file-rss:(\d+)kB")
    _shmem_rss = re.compile(r"shmem-rss:(\d+)kB")
    _uid = re.compile(r"UID:(\d+)")
    _pgtables = re.compile(r"pgtables:(\d+)kB")
    _score = re.compile(r"oom_score_adj:(-?\d+)")

    def extract(self, lines: Sequence[str], errors: list[str]) -> KilledProcess:
        """Extract the killed process record, diagnosing a missing kill line."""
        line = find_line_containing(lines, KILLED_ANCHOR)
        if line is None:
            errors.append(MISSING_KILLED)
            return KilledProcess()

        return KilledProcess(
            pid=search_int(self._pid, line),
            name=search_str(self._name, line),
            total_vm_kb=search_int(self._total_vm, line),
            anon_rss_kb=search_int(self._anon_rss, line),
            file_rss_kb=search_int(self._file_rss, line),
            shmem_rss_kb=search_int(self._shmem_rss, line),
            uid=search_int(self._uid, line),
            pgtables_kb=search_int(self._pgtables, line),
            oom_score_adj=search_int(self._score, line),
        )
