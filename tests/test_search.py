"""Tests for search highlighting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from logpeek.display import build_display_items
from logpeek.models import SearchQuery
from logpeek.parser import parse_line
from logpeek.search import find_in_text, find_matches

if TYPE_CHECKING:
    from collections.abc import Callable

    from logpeek.models import LogLine


class TestFindInText:
    def test_substring_case_insensitive(self) -> None:
        assert find_in_text("Error then error", SearchQuery(pattern="ERROR")) == [(0, 5), (11, 16)]

    def test_substring_case_sensitive(self) -> None:
        assert find_in_text("Error then error", SearchQuery(pattern="error", case_sensitive=True)) == [(11, 16)]

    def test_overlapping_occurrences(self) -> None:
        assert find_in_text("aaa", SearchQuery(pattern="aa")) == [(0, 2), (1, 3)]

    def test_regex(self) -> None:
        assert find_in_text("id=12 id=345", SearchQuery(pattern=r"\d+", is_regex=True)) == [(3, 5), (9, 12)]

    def test_invalid_regex(self) -> None:
        assert find_in_text("anything", SearchQuery(pattern="[", is_regex=True)) == []

    def test_empty_regex_matches_skipped(self) -> None:
        assert find_in_text("abc", SearchQuery(pattern="x*", is_regex=True)) == []


class TestFindMatches:
    def test_keyed_by_line_index(self, make_lines: Callable[[int], list[LogLine]]) -> None:
        lines = make_lines(20)
        items = build_display_items([1, 10, 12], lines, [])
        matches = find_matches(items, SearchQuery(pattern="line 1"))
        assert matches == {1: [(0, 6)], 10: [(0, 6)], 12: [(0, 6)]}

    def test_hidden_lines_not_searched(self, make_lines: Callable[[int], list[LogLine]]) -> None:
        items = build_display_items([2], make_lines(20), [])
        assert find_matches(items, SearchQuery(pattern="line 15")) == {}

    def test_prefix_hits_dropped_when_stripped(self) -> None:
        lines = [
            parse_line(1, "2024-01-15T10:30:01Z INFO Connection established"),
            parse_line(2, "2024-01-15T10:30:02Z WARN INFO cache cold"),
        ]
        items = build_display_items([0, 1], lines, [])
        query = SearchQuery(pattern="info")
        assert find_matches(items, query) == {0: [(21, 25)], 1: [(26, 30)]}
        assert find_matches(items, query, strip_prefix=True) == {1: [(26, 30)]}
        assert find_matches(items, SearchQuery(pattern="2024"), strip_prefix=True) == {}
