"""Log loading utilities.

Reads kernel log excerpts (plain or gzip) and hands them to the parser.
"""

from __future__ import annotations

import gzip
import logging
from contextlib import asynccontextmanager
from pathlib import Path

import aiofiles
from aiofiles.threadpool import wrap

from .models import ParseOutcome
from .parser import parse

logger = logging.getLogger(__name__)

TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "replace"


@asynccontextmanager
async def _open_text(path: Path, *, encoding: str, decode_errors: str):
    """Open a log file for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors, newline="")
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors=decode_errors, newline="") as f:
            yield f


async def read_log_text(
    log_path: str | Path,
    *,
    encoding: str = TEXT_ENCODING,
    decode_errors: str = TEXT_ERRORS,
) -> str:
    """Read a whole log file as text, line endings untouched."""
    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")

    async with _open_text(path, encoding=encoding, decode_errors=decode_errors) as f:
        text = await f.read()
    logger.debug("Read %d characters from %s", len(text), path)
    return text


async def parse_log_file(log_path: str | Path, **read_kwargs) -> ParseOutcome:
    """Read a log file and parse it as an OOM report."""
    text = await read_log_text(log_path, **read_kwargs)
    return parse(text)
