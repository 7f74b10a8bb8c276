"""Analyzer configuration and environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

PAGE_SIZE_ENV = "OOM_ANALYZER_PAGE_SIZE_KB"
TOP_GROUPS_ENV = "OOM_ANALYZER_TOP_GROUPS"
TOP_PROCESSES_ENV = "OOM_ANALYZER_TOP_PROCESSES"


@dataclass(frozen=True, slots=True)
class AnalyzerConfig:
    # Process table and Mem-Info counters are in pages.
    page_size_kb: int = 4
    top_groups: int = 10
    top_processes: int = 10


def _env_positive_int(name: str) -> int | None:
    env = os.getenv(name)
    if env is None or env == "":
        return None
    try:
        value = int(env)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < 1:
        raise ValueError(f"{name} must be >= 1")
    return value


def resolve_analyzer_config(cfg: AnalyzerConfig | None = None) -> AnalyzerConfig:
    """Return config with optional env overrides applied."""
    if cfg is None:
        cfg = AnalyzerConfig()

    overrides: dict[str, int] = {}
    for field_name, env_name in (
        ("page_size_kb", PAGE_SIZE_ENV),
        ("top_groups", TOP_GROUPS_ENV),
        ("top_processes", TOP_PROCESSES_ENV),
    ):
        value = _env_positive_int(env_name)
        if value is not None and value != getattr(cfg, field_name):
            overrides[field_name] = value

    if not overrides:
        return cfg
    return replace(cfg, **overrides)
