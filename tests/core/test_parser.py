from __future__ import annotations

from collections.abc import Sequence

import pytest

from mcp_oom_analyzer.core import parser
from mcp_oom_analyzer.core.extractors.decision import MISSING_CONSTRAINT, MISSING_KILLED
from mcp_oom_analyzer.core.extractors.trigger import MISSING_TRIGGER
from mcp_oom_analyzer.core.parser import is_oom_log, parse, split_lines


@pytest.mark.parametrize(
    "text",
    [
        "foo invoked oom-killer: gfp_mask=0x0",
        "Out of memory: Killed process 1 (a)",
        "oom-kill:constraint=CONSTRAINT_NONE",
    ],
)
def test_is_oom_log_markers(text: str) -> None:
    assert is_oom_log(text) is True


def test_is_oom_log_negative(plain_syslog_text: str) -> None:
    assert is_oom_log(plain_syslog_text) is False
    assert is_oom_log("") is False
    assert is_oom_log("out of memory") is False


def test_split_lines_normalizes_endings() -> None:
    assert split_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]


def test_parse_full_report(oom_text: str) -> None:
    outcome = parse(oom_text)

    assert outcome.success is True
    assert outcome.errors == ()
    data = outcome.data
    assert data is not None
    assert data.parse_errors == ()
    assert data.trigger.trigger_process == "postmaster"
    assert data.system_info.comm == "postmaster"
    assert len(data.call_stack.frames) == 16
    assert data.memory_info.mem_info_pages.pagetables == 0
    assert [z.zone for z in data.memory_info.zones] == ["DMA32", "Normal"]
    assert len(data.processes) == 9
    assert data.oom_constraint.global_oom is True
    assert data.killed_process.pid == 3499662
    assert data.raw_log == oom_text


def test_parse_journal_report(journal_oom_text: str) -> None:
    outcome = parse(journal_oom_text)
    assert outcome.success is True
    assert outcome.data is not None
    assert outcome.data.oom_constraint.constraint == "CONSTRAINT_MEMCG"
    assert outcome.data.memory_info.zones == ()


def test_parse_non_oom_text_reports_three_sections(plain_syslog_text: str) -> None:
    outcome = parse(plain_syslog_text)

    assert outcome.success is False
    assert outcome.errors == (MISSING_TRIGGER, MISSING_CONSTRAINT, MISSING_KILLED)
    assert outcome.data is not None
    assert outcome.data.parse_errors == outcome.errors
    assert outcome.data.processes == ()
    assert outcome.data.raw_log == plain_syslog_text


def test_parse_empty_text() -> None:
    outcome = parse("")
    assert outcome.success is False
    assert len(outcome.errors) == 3
    assert outcome.data is not None
    assert outcome.data.raw_log == ""


def test_parse_partial_report(oom_text: str) -> None:
    text = "\n".join(line for line in oom_text.split("\n") if "Killed process" not in line)
    outcome = parse(text)
    assert outcome.success is False
    assert outcome.errors == (MISSING_KILLED,)
    assert outcome.data is not None
    assert outcome.data.killed_process.pid == 0
    assert outcome.data.trigger.trigger_process == "postmaster"


def test_parse_crlf_matches_lf(oom_text: str) -> None:
    crlf = oom_text.replace("\n", "\r\n")
    lf_outcome = parse(oom_text)
    crlf_outcome = parse(crlf)

    assert crlf_outcome.data is not None
    assert lf_outcome.data is not None
    assert crlf_outcome.data.raw_log == crlf
    assert crlf_outcome.data.processes == lf_outcome.data.processes
    assert crlf_outcome.data.call_stack == lf_outcome.data.call_stack
    assert crlf_outcome.data.memory_info == lf_outcome.data.memory_info
    assert crlf_outcome.data.killed_process == lf_outcome.data.killed_process


def test_parse_is_idempotent(oom_text: str) -> None:
    assert parse(oom_text) == parse(oom_text)


class _ExplodingExtractor:
    def extract(self, lines: Sequence[str], errors: list[str]):
        raise RuntimeError("boom")


def test_parse_fatal_error(monkeypatch: pytest.MonkeyPatch, oom_text: str) -> None:
    monkeypatch.setattr(parser, "_MEMORY", _ExplodingExtractor())

    outcome = parse(oom_text)

    assert outcome.success is False
    assert outcome.data is None
    assert outcome.errors == ("Fatal parsing error: boom",)


def test_parse_non_string_input_is_fatal() -> None:
    outcome = parse(None)  # type: ignore[arg-type]
    assert outcome.success is False
    assert outcome.data is None
    assert len(outcome.errors) == 1
    assert outcome.errors[0].startswith("Fatal parsing error:")
