"""OOM report detection and parsing.

`parse` is the main entry point: it splits the text once and hands the same
line sequence and a per-call diagnostics list to every section extractor.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .extractors import (
    CallStackExtractor,
    ConstraintExtractor,
    KilledProcessExtractor,
    MemoryExtractor,
    ProcessTableExtractor,
    SectionExtractor,
    SystemInfoExtractor,
    TriggerExtractor,
)
from .models import (
    CallStack,
    KilledProcess,
    MemoryInfo,
    OOMConstraint,
    OOMTrigger,
    ParsedOOMLog,
    ParseOutcome,
    ProcessInfo,
    SystemInfo,
)

logger = logging.getLogger(__name__)

OOM_MARKERS: Sequence[str] = ("invoked oom-killer", "Out of memory:", "oom-kill:")

_TRIGGER: SectionExtractor[OOMTrigger] = TriggerExtractor()
_SYSTEM: SectionExtractor[SystemInfo] = SystemInfoExtractor()
_CALL_STACK: SectionExtractor[CallStack] = CallStackExtractor()
_MEMORY: SectionExtractor[MemoryInfo] = MemoryExtractor()
_PROCESSES: SectionExtractor[tuple[ProcessInfo, ...]] = ProcessTableExtractor()
_CONSTRAINT: SectionExtractor[OOMConstraint] = ConstraintExtractor()
_KILLED: SectionExtractor[KilledProcess] = KilledProcessExtractor()


def is_oom_log(text: str) -> bool:
    """Return True if `text` contains any OOM killer marker."""
    return any(marker in text for marker in OOM_MARKERS)


def split_lines(text: str) -> list[str]:
    """Split on newlines after normalizing CRLF/CR line endings."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def _parse_sections(text: str) -> ParsedOOMLog:
    lines = split_lines(text)
    errors: list[str] = []

    trigger = _TRIGGER.extract(lines, errors)
    system_info = _SYSTEM.extract(lines, errors)
    call_stack = _CALL_STACK.extract(lines, errors)
    memory_info = _MEMORY.extract(lines, errors)
    processes = _PROCESSES.extract(lines, errors)
    oom_constraint = _CONSTRAINT.extract(lines, errors)
    killed_process = _KILLED.extract(lines, errors)

    return ParsedOOMLog(
        trigger=trigger,
        system_info=system_info,
        call_stack=call_stack,
        memory_info=memory_info,
        processes=processes,
        oom_constraint=oom_constraint,
        killed_process=killed_process,
        raw_log=text,
        parse_errors=tuple(errors),
    )


def parse(text: str) -> ParseOutcome:
    """Parse a raw OOM kill report.

    Never raises: missing anchor lines are reported in `errors` (and make
    `success` False) while `data` is still returned; an internal failure
    returns `data=None` with a single "Fatal parsing error" message.
    """
    try:
        parsed = _parse_sections(text)
    except Exception as exc:
        logger.exception("OOM report parsing failed")
        return ParseOutcome(success=False, data=None, errors=(f"Fatal parsing error: {exc}",))

    if parsed.parse_errors:
        logger.debug("OOM report parsed with diagnostics: %s", "; ".join(parsed.parse_errors))
    return ParseOutcome(success=not parsed.parse_errors, data=parsed, errors=parsed.parse_errors)
