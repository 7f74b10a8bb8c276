"""JSON-ready views and schemas of the parse results."""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter

from .models import ParsedOOMLog, ParseOutcome
from .summary import OOMSummary

_OUTCOME = TypeAdapter(ParseOutcome)
_PARSED = TypeAdapter(ParsedOOMLog)
_SUMMARY = TypeAdapter(OOMSummary)


def parsed_log_to_dict(parsed: ParsedOOMLog, *, include_raw: bool = True) -> dict[str, Any]:
    """Convert a ParsedOOMLog into a JSON-serializable dict."""
    d: dict[str, Any] = _PARSED.dump_python(parsed, mode="json")
    if not include_raw:
        d.pop("raw_log", None)
    return d


def outcome_to_dict(outcome: ParseOutcome, *, include_raw: bool = True) -> dict[str, Any]:
    """Convert a ParseOutcome into a JSON-serializable dict."""
    return {
        "success": outcome.success,
        "errors": list(outcome.errors),
        "data": (
            parsed_log_to_dict(outcome.data, include_raw=include_raw)
            if outcome.data is not None
            else None
        ),
    }


def summary_to_dict(summary: OOMSummary) -> dict[str, Any]:
    return _SUMMARY.dump_python(summary, mode="json")


def parse_outcome_json_schema() -> dict[str, Any]:
    """Return the JSON schema of a ParseOutcome."""
    return _OUTCOME.json_schema()
