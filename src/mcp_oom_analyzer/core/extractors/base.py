"""Extractor interface and shared field helpers.

Every helper is non-throwing: a pattern that does not match yields None (or
the caller's default), never an exception.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from typing import Protocol, TypeVar

T_co = TypeVar("T_co", covariant=True)

_BRACKET_PREFIX_RE = re.compile(r"^\[.*?\]\s*")


class SectionExtractor(Protocol[T_co]):
    """Extractor interface: build one section record from all log lines.

    Extractors append human-readable diagnostics to `errors` only when a whole
    section cannot be located.
    """

    def extract(self, lines: Sequence[str], errors: list[str]) -> T_co:
        """Extract the section from the log lines."""
        ...


class Region(str, Enum):
    """Position of a forward scan relative to a delimited log section."""

    BEFORE = "before"
    INSIDE = "inside"
    AFTER = "after"


def find_line_containing(lines: Iterable[str], needle: str) -> str | None:
    """Return the first line containing `needle`."""
    for line in lines:
        if needle in line:
            return line
    return None


def strip_bracket_prefix(line: str) -> str:
    """Drop a leading `[...]` timestamp (dmesg style) and following spaces."""
    return _BRACKET_PREFIX_RE.sub("", line, count=1)


def search_group(pattern: re.Pattern[str], text: str, group: int | str = 1) -> str | None:
    """Return a group of the first match of `pattern` in `text`."""
    m = pattern.search(text)
    if not m:
        return None
    return m.group(group)


def search_int(pattern: re.Pattern[str], text: str, default: int = 0) -> int:
    """Return the first group of `pattern` in `text` as int, else `default`."""
    value = search_group(pattern, text)
    if value is None:
        return default
    return int(value)


def search_str(pattern: re.Pattern[str], text: str, default: str = "") -> str:
    """Return the first group of `pattern` in `text`, else `default`."""
    value = search_group(pattern, text)
    return default if value is None else value


def label_int_pattern(label: str) -> re.Pattern[str]:
    """Pattern for `label:<int>` (page counters)."""
    return re.compile(rf"{re.escape(label)}:(\d+)")


def label_kb_pattern(label: str) -> re.Pattern[str]:
    """Pattern for `label:<int>kB`, tolerant of spaces and `KB` casing."""
    return re.compile(rf"{re.escape(label)}[:\s]*(-?\d+)kB", re.IGNORECASE)


def compile_labels(
    labels: Mapping[str, str], factory
) -> dict[str, re.Pattern[str]]:
    """Compile one pattern per `field -> log label` entry."""
    return {name: factory(label) for name, label in labels.items()}


def extract_fields(patterns: Mapping[str, re.Pattern[str]], text: str) -> dict[str, int]:
    """Return `{field: int}` for every pattern that matches `text`."""
    out: dict[str, int] = {}
    for name, pattern in patterns.items():
        value = search_group(pattern, text)
        if value is not None:
            out[name] = int(value)
    return out
