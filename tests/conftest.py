from __future__ import annotations

import gzip
from collections.abc import Callable
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def oom_text() -> str:
    """dmesg -T excerpt of a global OOM kill (postgres on a VMware guest)."""
    return (FIXTURES / "example_oomkill.txt").read_text(encoding="utf-8")


@pytest.fixture
def journal_oom_text() -> str:
    """journalctl excerpt of a memcg OOM kill on a tainted kernel."""
    return (FIXTURES / "journal_oomkill.log").read_text(encoding="utf-8")


@pytest.fixture
def plain_syslog_text() -> str:
    return (FIXTURES / "syslog_no_oom.log").read_text(encoding="utf-8")


@pytest.fixture
def oom_lines(oom_text: str) -> list[str]:
    return oom_text.split("\n")


@pytest.fixture
def write_log() -> Callable[[Path, str], None]:
    def _write(path: Path, text: str) -> None:
        path.write_text(text, encoding="utf-8", newline="")

    return _write


@pytest.fixture
def write_gz() -> Callable[[Path, str], None]:
    def _write(path: Path, text: str) -> None:
        with gzip.open(path, "wt", encoding="utf-8", newline="") as f:
            f.write(text)

    return _write
