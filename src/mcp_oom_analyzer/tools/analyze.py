"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from mcp_oom_analyzer.core.config import AnalyzerConfig, resolve_analyzer_config
from mcp_oom_analyzer.core.log_service import read_log_text
from mcp_oom_analyzer.core.models import ParseOutcome
from mcp_oom_analyzer.core.parser import is_oom_log, parse
from mcp_oom_analyzer.core.serialization import outcome_to_dict, summary_to_dict
from mcp_oom_analyzer.core.summary import summarize

BASE_DIR_ENV = "OOM_ANALYZER_BASE_DIR"
ALLOWED_FILE_SUFFIXES = {".log", ".txt"}


def base_dir() -> Path:
    """Return the resolved base directory for file access."""
    raw = os.getenv(BASE_DIR_ENV, os.getcwd())
    return Path(raw).resolve()


def safe_resolve(path: str) -> Path:
    """Resolve a path under the configured base directory."""
    base = base_dir()
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = base / p
    p = p.resolve()
    if base not in p.parents and p != base:
        raise ValueError("Path escapes base dir")
    return p


def ensure_allowed_suffix(path: Path) -> None:
    """Validate the file suffix against the allowlist (`.gz` wraps an allowed suffix)."""
    suffix = path.suffix.lower()
    if suffix == ".gz":
        suffix = path.with_suffix("").suffix.lower()
    if suffix not in ALLOWED_FILE_SUFFIXES:
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        raise ValueError(f"File type not allowed. Allowed: {allowed} (optionally .gz).")


def resolve_log_path(path: str) -> Path:
    """Resolve and validate a log file path."""
    resolved = safe_resolve(path)
    if not resolved.is_file():
        raise FileNotFoundError(f"File not found: {resolved}")
    ensure_allowed_suffix(resolved)
    return resolved


def _outcome_payload(
    outcome: ParseOutcome,
    *,
    include_raw: bool,
    include_summary: bool,
    config: AnalyzerConfig | None,
) -> dict[str, Any]:
    payload = outcome_to_dict(outcome, include_raw=include_raw)
    if include_summary and outcome.data is not None:
        cfg = resolve_analyzer_config(config)
        payload["summary"] = summary_to_dict(summarize(outcome.data, config=cfg))
    return payload


def analyze_oom_text_impl(
    *,
    text: str,
    include_raw: bool = False,
    include_summary: bool = True,
    config: AnalyzerConfig | None = None,
) -> dict[str, Any]:
    """Implementation for the `analyze_oom_text` MCP tool."""
    outcome = parse(text)
    return _outcome_payload(
        outcome, include_raw=include_raw, include_summary=include_summary, config=config
    )


async def analyze_oom_log_impl(
    *,
    log_path: str,
    include_raw: bool = False,
    include_summary: bool = True,
    config: AnalyzerConfig | None = None,
) -> dict[str, Any]:
    """Implementation for the `analyze_oom_log` MCP tool.

    Notes
    -----
    - log_path is resolved under OOM_ANALYZER_BASE_DIR (default: cwd)
    - .log/.txt files, optionally gzip-compressed
    - parse warnings are returned in "errors"; "data" is None only on an
      internal parser failure
    """
    path = resolve_log_path(log_path)
    text = await read_log_text(path)
    payload = _outcome_payload(
        parse(text), include_raw=include_raw, include_summary=include_summary, config=config
    )
    payload["log_path"] = str(path)
    return payload


def detect_oom_log_impl(*, text: str) -> dict[str, Any]:
    """Implementation for the `detect_oom_log` MCP tool."""
    return {"is_oom_log": is_oom_log(text)}
