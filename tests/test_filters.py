"""Tests for the filter engine."""

from __future__ import annotations

from logpeek.filters import apply_filters, expand_with_context, has_active_rules
from logpeek.models import ContentType, FilterRule, FilterType, LogLine


def make_line(line_number: int, raw: str) -> LogLine:
    return LogLine(line_number=line_number, raw=raw, content_type=ContentType.TEXT)


SAMPLE_LINES = [
    make_line(1, "2024-01-15 ERROR: Connection failed"),
    make_line(2, "2024-01-15 INFO: Server started"),
    make_line(3, "2024-01-15 DEBUG: Processing request"),
    make_line(4, "2024-01-15 ERROR: Timeout occurred"),
    make_line(5, "2024-01-15 INFO: Request completed"),
    make_line(6, "2024-01-15 WARN: High memory usage"),
]


class TestApplyFilters:
    def test_no_filters_returns_all(self) -> None:
        assert apply_filters(SAMPLE_LINES, []) == [0, 1, 2, 3, 4, 5]

    def test_include_filter(self) -> None:
        rules = [FilterRule(filter_type=FilterType.INCLUDE, pattern="ERROR")]
        assert apply_filters(SAMPLE_LINES, rules) == [0, 3]

    def test_exclude_filter(self) -> None:
        rules = [FilterRule(filter_type=FilterType.EXCLUDE, pattern="ERROR")]
        assert apply_filters(SAMPLE_LINES, rules) == [1, 2, 4, 5]

    def test_include_case_insensitive(self) -> None:
        rules = [FilterRule(filter_type=FilterType.INCLUDE, pattern="error")]
        assert apply_filters(SAMPLE_LINES, rules) == [0, 3]

    def test_include_case_sensitive(self) -> None:
        rules = [FilterRule(filter_type=FilterType.INCLUDE, pattern="error", case_sensitive=True)]
        assert apply_filters(SAMPLE_LINES, rules) == []

    def test_multiple_includes_or_logic(self) -> None:
        rules = [
            FilterRule(filter_type=FilterType.INCLUDE, pattern="ERROR"),
            FilterRule(filter_type=FilterType.INCLUDE, pattern="WARN"),
        ]
        assert apply_filters(SAMPLE_LINES, rules) == [0, 3, 5]

    def test_include_plus_exclude(self) -> None:
        rules = [
            FilterRule(filter_type=FilterType.INCLUDE, pattern="ERROR"),
            FilterRule(filter_type=FilterType.EXCLUDE, pattern="Timeout"),
        ]
        assert apply_filters(SAMPLE_LINES, rules) == [0]

    def test_disabled_filter_ignored(self) -> None:
        rules = [FilterRule(filter_type=FilterType.INCLUDE, pattern="ERROR", enabled=False)]
        assert apply_filters(SAMPLE_LINES, rules) == [0, 1, 2, 3, 4, 5]

    def test_regex(self) -> None:
        rules = [FilterRule(filter_type=FilterType.INCLUDE, pattern=r"(WARN|DEBUG):", is_regex=True)]
        assert apply_filters(SAMPLE_LINES, rules) == [2, 5]

    def test_invalid_regex_matches_nothing(self) -> None:
        rules = [FilterRule(filter_type=FilterType.INCLUDE, pattern="(unclosed", is_regex=True)]
        assert apply_filters(SAMPLE_LINES, rules) == []

    def test_exclude_all_returns_empty(self) -> None:
        rules = [FilterRule(filter_type=FilterType.EXCLUDE, pattern="2024")]
        assert apply_filters(SAMPLE_LINES, rules) == []


class TestHasActiveRules:
    def test_active(self) -> None:
        assert not has_active_rules([])
        assert not has_active_rules([FilterRule(filter_type=FilterType.INCLUDE, pattern="x", enabled=False)])
        assert has_active_rules([FilterRule(filter_type=FilterType.EXCLUDE, pattern="x")])


class TestExpandWithContext:
    def test_zero_context_is_sorted_matches(self) -> None:
        assert expand_with_context({5, 1}, 10, 0) == [1, 5]

    def test_widens_and_clamps(self) -> None:
        assert expand_with_context([0, 9], 10, 2) == [0, 1, 2, 7, 8, 9]

    def test_overlapping_windows_deduplicated(self) -> None:
        assert expand_with_context([3, 5], 20, 2) == [1, 2, 3, 4, 5, 6, 7]
