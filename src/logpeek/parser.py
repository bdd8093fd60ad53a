"""Log line parsing: timestamp extraction, content classification and level detection."""

from __future__ import annotations

import json
import re
from datetime import UTC, datetime
from typing import Any

from logpeek.models import ContentType, LogLevel, LogLine

_MONTH_MAP: dict[str, int] = {
    "Jan": 1,
    "Feb": 2,
    "Mar": 3,
    "Apr": 4,
    "May": 5,
    "Jun": 6,
    "Jul": 7,
    "Aug": 8,
    "Sep": 9,
    "Oct": 10,
    "Nov": 11,
    "Dec": 12,
}

# ISO 8601: "2024-01-15T10:30:00.123456Z" or "2024-01-15 10:30:00"
_ISO_RE = re.compile(r"^(?P<dt>\d{4}-\d{2}-\d{2}[\sT]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:?\d{2})?)\s+")

# Syslog: "Jan 15 10:30:00" or "Jan  5 10:30:00"
_SYSLOG_RE = re.compile(
    r"^(?P<month>Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+(?P<day>\d{1,2})\s+(?P<hour>\d{2}):(?P<min>\d{2}):(?P<sec>\d{2})\s+"
)

# Slash date: "2024/01/15 10:30:00"
_SLASH_DATE_RE = re.compile(
    r"^(?P<year>\d{4})/(?P<month>\d{2})/(?P<day>\d{2})\s+(?P<hour>\d{2}):(?P<min>\d{2}):(?P<sec>\d{2})\s+"
)

_LEVEL_MAP: dict[str, LogLevel] = {
    "trace": LogLevel.TRACE,
    "debug": LogLevel.DEBUG,
    "dbg": LogLevel.DEBUG,
    "info": LogLevel.INFO,
    "information": LogLevel.INFO,
    "warn": LogLevel.WARN,
    "warning": LogLevel.WARN,
    "error": LogLevel.ERROR,
    "err": LogLevel.ERROR,
    "fatal": LogLevel.FATAL,
    "critical": LogLevel.FATAL,
    "crit": LogLevel.FATAL,
    "panic": LogLevel.FATAL,
}

_LEVEL_JSON_KEYS = ("log_level", "level", "severity", "loglevel", "lvl")

_LEVEL_BRACKET_RE = re.compile(
    r"\[(?P<level>TRACE|DEBUG|DBG|INFO|WARN|WARNING|ERROR|ERR|FATAL|CRITICAL|CRIT|PANIC)\]",
    re.IGNORECASE,
)
_LEVEL_WORD_RE = re.compile(
    r"(?:^|\s)(?P<level>TRACE|DEBUG|DBG|INFO|WARN|WARNING|ERROR|ERR|FATAL|CRITICAL)\s",
    re.IGNORECASE,
)
_LEVEL_KV_RE = re.compile(r"(?:level|severity)=(?P<level>\w+)", re.IGNORECASE)

# Leading level word right after the timestamp: "INFO ", "WARN  "
_LEADING_LEVEL_RE = re.compile(r"^(?:TRACE|DEBUG|INFO|WARN|WARNING|ERROR|FATAL|CRITICAL)\s+", re.IGNORECASE)


def _try_iso(raw: str) -> tuple[datetime | None, int]:
    m = _ISO_RE.match(raw)
    if m is None:
        return None, 0
    try:
        ts = datetime.fromisoformat(m.group("dt"))
    except ValueError:
        return None, 0
    return ts, m.end()


def _try_syslog(raw: str) -> tuple[datetime | None, int]:
    m = _SYSLOG_RE.match(raw)
    if m is None:
        return None, 0
    now = datetime.now(tz=UTC)
    try:
        ts = datetime(
            year=now.year,
            month=_MONTH_MAP[m.group("month")],
            day=int(m.group("day")),
            hour=int(m.group("hour")),
            minute=int(m.group("min")),
            second=int(m.group("sec")),
        )
    except ValueError:
        return None, 0
    return ts, m.end()


def _try_slash_date(raw: str) -> tuple[datetime | None, int]:
    m = _SLASH_DATE_RE.match(raw)
    if m is None:
        return None, 0
    try:
        ts = datetime(
            year=int(m.group("year")),
            month=int(m.group("month")),
            day=int(m.group("day")),
            hour=int(m.group("hour")),
            minute=int(m.group("min")),
            second=int(m.group("sec")),
        )
    except ValueError:
        return None, 0
    return ts, m.end()


def extract_timestamp(raw: str) -> tuple[datetime | None, int]:
    """Extract a timestamp from the start of a log line.

    Returns (timestamp, content_offset) where content_offset is where the
    content after the timestamp begins. Without a timestamp returns (None, 0).
    """
    for parser in (_try_iso, _try_syslog, _try_slash_date):
        ts, offset = parser(raw)
        if ts is not None:
            return ts, offset
    return None, 0


def classify_content(content: str) -> tuple[ContentType, dict[str, Any] | None]:
    """Classify content as JSON or plain text."""
    stripped = content.strip()
    if stripped.startswith("{"):
        try:
            parsed = json.loads(stripped)
        except (json.JSONDecodeError, ValueError):
            return ContentType.TEXT, None
        if isinstance(parsed, dict):
            return ContentType.JSON, parsed
    return ContentType.TEXT, None


def extract_log_level(content: str, parsed_json: dict[str, Any] | None) -> LogLevel | None:
    """Extract log level from JSON fields first, then text patterns."""
    if parsed_json is not None:
        for key in _LEVEL_JSON_KEYS:
            if key in parsed_json:
                value = str(parsed_json[key]).lower().strip()
                if value in _LEVEL_MAP:
                    return _LEVEL_MAP[value]

    for pattern in (_LEVEL_BRACKET_RE, _LEVEL_KV_RE, _LEVEL_WORD_RE):
        m = pattern.search(content)
        if m:
            value = m.group("level").lower().strip()
            if value in _LEVEL_MAP:
                return _LEVEL_MAP[value]

    return None


def parse_line(line_number: int, raw: str) -> LogLine:
    """Parse a raw log line into a LogLine model."""
    timestamp, offset = extract_timestamp(raw)
    content = raw[offset:]
    content_type, parsed_json = classify_content(content)
    return LogLine(
        line_number=line_number,
        raw=raw,
        timestamp=timestamp,
        content_type=content_type,
        content_offset=offset,
        parsed_json=parsed_json,
        log_level=extract_log_level(content, parsed_json),
    )


def display_text(line: LogLine, *, strip_prefix: bool = True) -> str:
    """Text to show for a line, optionally without its timestamp and leading level word."""
    if not strip_prefix:
        return line.raw
    content = line.content
    if line.timestamp is not None:
        content = _LEADING_LEVEL_RE.sub("", content, count=1)
    return content
