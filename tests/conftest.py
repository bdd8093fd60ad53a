"""Shared test fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from logpeek.models import ContentType, LogLine

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

SAMPLE_LINES = [
    '2024-01-15T10:30:00Z {"log_level": "info", "message": "Server started", "port": 8080}',
    "2024-01-15T10:30:01Z INFO Connection established from 192.168.1.1",
    '2024-01-15 10:30:02.123 {"log_level": "error", "message": "Failed to connect", "code": 500}',
    "Jan 15 10:30:03 myhost syslogd: restart",
    "2024-01-15T10:30:04Z ERROR request 42 timed out",
    "2024/01/15 10:30:05 Simple slash-date log entry",
    "No timestamp here, just plain text",
    '{"orphan_json": true, "no_timestamp": "indeed"}',
    "",
    "2024-01-15T10:30:06+02:00 WARN disk almost full",
]


def make_line(line_number: int, raw: str) -> LogLine:
    return LogLine(line_number=line_number, raw=raw, content_type=ContentType.TEXT)


@pytest.fixture
def sample_log_file(tmp_path: Path) -> Path:
    """Create a temporary log file with sample content."""
    log_file = tmp_path / "test.log"
    log_file.write_text("\n".join(SAMPLE_LINES) + "\n")
    return log_file


@pytest.fixture
def make_lines() -> Callable[[int], list[LogLine]]:
    """Factory for ``n`` plain lines whose text is ``line <index>``."""

    def _make(n: int) -> list[LogLine]:
        return [make_line(i + 1, f"line {i}") for i in range(n)]

    return _make


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep tests away from the user's real config."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("LOGPEEK_CONFIG_DIR", str(config_dir))
    return config_dir
