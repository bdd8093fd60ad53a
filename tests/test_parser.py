"""Tests for the log line parser."""

from __future__ import annotations

from datetime import UTC, datetime

from logpeek.models import ContentType, LogLevel
from logpeek.parser import classify_content, display_text, extract_log_level, extract_timestamp, parse_line


class TestExtractTimestamp:
    def test_iso_utc(self) -> None:
        ts, offset = extract_timestamp("2024-01-15T10:30:00Z hello")
        assert ts == datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
        assert offset == len("2024-01-15T10:30:00Z ")

    def test_iso_with_space_and_fraction(self) -> None:
        ts, offset = extract_timestamp("2024-01-15 10:30:02.123 rest")
        assert ts is not None
        assert ts.microsecond == 123000
        assert "2024-01-15 10:30:02.123 rest"[offset:] == "rest"

    def test_syslog(self) -> None:
        ts, offset = extract_timestamp("Jan  5 10:30:03 myhost syslogd: restart")
        assert ts is not None
        assert (ts.month, ts.day, ts.hour) == (1, 5, 10)
        assert "Jan  5 10:30:03 myhost syslogd: restart"[offset:] == "myhost syslogd: restart"

    def test_slash_date(self) -> None:
        ts, _ = extract_timestamp("2024/01/15 10:30:05 entry")
        assert ts == datetime(2024, 1, 15, 10, 30, 5)  # noqa: DTZ001

    def test_invalid_date_ignored(self) -> None:
        assert extract_timestamp("2024/13/45 10:30:05 entry") == (None, 0)

    def test_no_timestamp(self) -> None:
        assert extract_timestamp("plain text") == (None, 0)


class TestClassifyContent:
    def test_json_object(self) -> None:
        content_type, parsed = classify_content('{"a": 1}')
        assert content_type == ContentType.JSON
        assert parsed == {"a": 1}

    def test_invalid_json_is_text(self) -> None:
        assert classify_content("{not json") == (ContentType.TEXT, None)

    def test_json_array_is_text(self) -> None:
        assert classify_content("[1, 2]") == (ContentType.TEXT, None)


class TestExtractLogLevel:
    def test_json_level_key(self) -> None:
        assert extract_log_level("", {"severity": "Warning"}) == LogLevel.WARN

    def test_bracketed(self) -> None:
        assert extract_log_level("[ERROR] boom", None) == LogLevel.ERROR

    def test_key_value(self) -> None:
        assert extract_log_level("msg=x level=debug", None) == LogLevel.DEBUG

    def test_leading_word(self) -> None:
        assert extract_log_level("CRITICAL disk gone", None) == LogLevel.FATAL

    def test_none(self) -> None:
        assert extract_log_level("nothing to see", None) is None


class TestParseLine:
    def test_json_line(self) -> None:
        line = parse_line(3, '2024-01-15T10:30:00Z {"log_level": "error", "message": "x"}')
        assert line.line_number == 3
        assert line.content_type == ContentType.JSON
        assert line.log_level == LogLevel.ERROR
        assert line.content.startswith("{")

    def test_empty_line(self) -> None:
        line = parse_line(1, "")
        assert line.content_type == ContentType.TEXT
        assert line.timestamp is None
        assert line.content == ""


class TestDisplayText:
    def test_strips_timestamp_and_level(self) -> None:
        line = parse_line(1, "2024-01-15T10:30:01Z INFO Connection established")
        assert display_text(line) == "Connection established"

    def test_keeps_raw_when_disabled(self) -> None:
        raw = "2024-01-15T10:30:01Z INFO Connection established"
        assert display_text(parse_line(1, raw), strip_prefix=False) == raw

    def test_level_word_kept_without_timestamp(self) -> None:
        line = parse_line(1, "INFO no timestamp")
        assert display_text(line) == "INFO no timestamp"

    def test_display_text_is_suffix_of_raw(self) -> None:
        for raw in ("2024-01-15 10:30:02 WARN low disk", "Jan 15 10:30:03 host ERROR x", "plain"):
            assert raw.endswith(display_text(parse_line(1, raw)))
