"""Data models for logpeek."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime  # noqa: TC003 - Pydantic needs this at runtime for model field resolution
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, computed_field


class ContentType(StrEnum):
    """Type of content in a log line."""

    JSON = "json"
    TEXT = "text"


class LogLevel(StrEnum):
    """Log severity level."""

    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class LogLine(BaseModel):
    """A single parsed log line."""

    line_number: int
    raw: str
    timestamp: datetime | None = None
    content_type: ContentType
    content_offset: int = 0
    parsed_json: dict[str, Any] | None = None
    log_level: LogLevel | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def content(self) -> str:
        """Content portion of the line (raw without timestamp prefix)."""
        return self.raw[self.content_offset :]


class FilterType(StrEnum):
    """Type of filter rule."""

    INCLUDE = "include"
    EXCLUDE = "exclude"


class FilterRule(BaseModel):
    """A single filter rule."""

    filter_type: FilterType
    pattern: str
    enabled: bool = True
    is_regex: bool = False
    case_sensitive: bool = False


class SearchQuery(BaseModel):
    """A highlight search query with options."""

    pattern: str
    case_sensitive: bool = False
    is_regex: bool = False


class AppConfig(BaseModel):
    """Application configuration persisted to disk."""

    theme: str = "textual-dark"
    expand_step: int = 10
    context_lines: int = 0
    case_sensitive: bool = False
    strip_prefix: bool = True


class GapDirection(StrEnum):
    """Side of an anchor line a gap sits on."""

    UP = "up"
    DOWN = "down"


class ExpandMode(StrEnum):
    """Named gap expansion modes. A plain ``int`` requests a fixed line count."""

    ALL = "all"
    NEXT_MATCH = "next-match"
    PREV_MATCH = "prev-match"


@dataclass(frozen=True, slots=True)
class ForcedRange:
    """Half-open ``[start, end)`` run of line indices that is always displayed."""

    start: int
    end: int

    def __len__(self) -> int:
        return max(0, self.end - self.start)


@dataclass(frozen=True, slots=True)
class LineSpan:
    """Half-open ``[start, end)`` span of a neighbouring semantic unit (e.g. a request's lines)."""

    start: int
    end: int


@dataclass(frozen=True, slots=True)
class GapInfo:
    """Hidden lines next to a displayed anchor line.

    ``gap_size`` and ``remaining_gap`` are always equal: gaps are recomputed
    from displayed neighbours on every build.
    """

    gap_id: str
    gap_size: int
    remaining_gap: int
    is_first: bool = False
    is_last: bool = False


@dataclass(slots=True)
class DisplayItem:
    """One renderable row."""

    line: Any
    index: int
    gap_above: GapInfo | None = None
    gap_below: GapInfo | None = None


@dataclass(frozen=True, slots=True)
class LineGaps:
    """Gap information for a single displayed line."""

    up: GapInfo | None = None
    down: GapInfo | None = None
