"""Log file reading (sync, and async in chunks for large files)."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import aiofiles

from logpeek.parser import parse_line

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from logpeek.models import LogLine

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 50_000


def read_file(path: Path) -> list[LogLine]:
    """Read all log lines from a file (synchronous)."""
    lines: list[LogLine] = []
    with path.open(encoding="utf-8", errors="replace") as f:
        for i, raw_line in enumerate(f, start=1):
            lines.append(parse_line(i, raw_line.rstrip("\n")))
    logger.debug("read %d lines from %s", len(lines), path)
    return lines


def read_file_initial(path: Path, count: int = 10_000) -> list[LogLine]:
    """Read the first ``count`` lines of a file so the UI can show something immediately."""
    lines: list[LogLine] = []
    with path.open(encoding="utf-8", errors="replace") as f:
        for i, raw_line in enumerate(f, start=1):
            if i > count:
                break
            lines.append(parse_line(i, raw_line.rstrip("\n")))
    return lines


def is_pipe() -> bool:
    """Check if stdin is a pipe (not a terminal)."""
    return not sys.stdin.isatty()


def read_stdin() -> list[LogLine]:
    """Read all log lines from stdin (synchronous)."""
    lines = [parse_line(i, raw_line.rstrip("\n")) for i, raw_line in enumerate(sys.stdin, start=1)]
    logger.debug("read %d lines from stdin", len(lines))
    return lines


async def read_file_remaining_async(
    path: Path, skip: int = 0, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> AsyncIterator[list[LogLine]]:
    """Yield the lines after the first ``skip`` in chunks of at most ``chunk_size``."""
    line_number = 0
    chunk: list[LogLine] = []
    async with aiofiles.open(path, encoding="utf-8", errors="replace") as f:
        async for raw_line in f:
            line_number += 1
            if line_number <= skip:
                continue
            chunk.append(parse_line(line_number, raw_line.rstrip("\n")))
            if len(chunk) >= chunk_size:
                yield chunk
                chunk = []
    if chunk:
        yield chunk
    logger.debug("async read of %s finished after %d lines", path, line_number)
