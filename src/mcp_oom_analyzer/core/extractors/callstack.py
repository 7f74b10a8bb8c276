"""Call trace, register dump and code note extractor."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..models import CallStack, RegisterState, StackFrame
from .base import Region, search_group

# Label that triggers a line scan -> registers printed on that line.
REGISTER_LINES: dict[str, tuple[str, ...]] = {
    "RIP:": ("rip",),
    "RSP:": ("rsp",),
    "EFLAGS:": ("eflags",),
    "RAX:": ("rax", "rbx", "rcx"),
    "RDX:": ("rdx", "rsi", "rdi"),
    "RBP:": ("rbp", "r08", "r09"),
    "R10:": ("r10", "r11", "r12"),
    "R13:": ("r13", "r14", "r15"),
}


def _register_pattern(name: str) -> re.Pattern[str]:
    # RIP/RSP keep the segment selector (`0033:...`). The class stops at `x`,
    # so `RIP: 0033:0x65c2a5` yields `0033:0`.
    value = "[0-9a-f:]+" if name in ("rip", "rsp") else "[0-9a-f]+"
    return re.compile(rf"{name.upper()}:\s*({value})", re.IGNORECASE)


_REGISTER_RE = {
    name: _register_pattern(name) for names in REGISTER_LINES.values() for name in names
}


@dataclass(frozen=True, slots=True)
class CallStackExtractor:
    """Collect `func+0xOFF/0xSIZE` frames between `Call Trace:` and `</TASK>`."""

    _frame = re.compile(r"([\w.]+)\+0x([0-9a-f]+)/0x([0-9a-f]+)", re.IGNORECASE)
    _code = re.compile(r"Code:\s*(.+)")

    def _registers(self, line: str, found: dict[str, str]) -> None:
        for label, names in REGISTER_LINES.items():
            if label not in line:
                continue
            for name in names:
                value = search_group(_REGISTER_RE[name], line)
                if value is not None:
                    found[name] = value

    def extract(self, lines: Sequence[str], errors: list[str]) -> CallStack:
        """Extract frames, registers and the opcode note; never diagnoses."""
        frames: list[StackFrame] = []
        registers: dict[str, str] = {}
        code_note: str | None = None
        region = Region.BEFORE

        for line in lines:
            if "Call Trace:" in line:
                region = Region.INSIDE
                continue
            if "</TASK>" in line:
                region = Region.AFTER
                continue

            if region is Region.INSIDE:
                m = self._frame.search(line)
                if m:
                    frames.append(
                        StackFrame(function=m.group(1), offset=f"0x{m.group(2)}", size=f"0x{m.group(3)}")
                    )

            self._registers(line, registers)

            if "Code:" in line and "Unable to access" in line:
                note = search_group(self._code, line)
                if note is not None:
                    code_note = note

        return CallStack(
            frames=tuple(frames),
            registers=RegisterState(**registers) if registers else None,
            code_note=code_note,
        )
