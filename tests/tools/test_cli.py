from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from mcp_oom_analyzer import cli


def _run(monkeypatch: pytest.MonkeyPatch, *args: str) -> None:
    monkeypatch.setattr(sys, "argv", ["oom-analyzer", *args])
    cli.main()


def test_cli_report(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], fixtures_dir: Path
) -> None:
    _run(monkeypatch, str(fixtures_dir / "example_oomkill.txt"), "--top", "2")

    out = capsys.readouterr().out
    assert "Killed:   postmaster (pid 3499662)" in out
    assert "Kernel:   5.14.0-362.8.1.el9_3.x86_64" in out
    assert "Processes: 9" in out
    assert "*killed*" in out
    assert "haveged" not in out


def test_cli_json(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], fixtures_dir: Path
) -> None:
    _run(monkeypatch, str(fixtures_dir / "journal_oomkill.log"), "--json")

    payload = json.loads(capsys.readouterr().out)
    assert payload["success"] is True
    assert "raw_log" not in payload["data"]
    assert payload["summary"]["killed"]["name"] == "python3"


def test_cli_warnings_go_to_stderr(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], fixtures_dir: Path
) -> None:
    _run(monkeypatch, str(fixtures_dir / "syslog_no_oom.log"))

    err = capsys.readouterr().err
    assert "warning: Could not find OOM trigger line" in err


@pytest.mark.parametrize(("name", "code"), [("example_oomkill.txt", 0), ("syslog_no_oom.log", 1)])
def test_cli_check(
    monkeypatch: pytest.MonkeyPatch, fixtures_dir: Path, name: str, code: int
) -> None:
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, str(fixtures_dir / name), "--check")
    assert exc.value.code == code


def test_cli_missing_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, str(tmp_path / "missing.log"))
    assert exc.value.code == 2


def test_cli_bad_top(monkeypatch: pytest.MonkeyPatch, fixtures_dir: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, str(fixtures_dir / "example_oomkill.txt"), "--top", "0")
    assert exc.value.code == 2
