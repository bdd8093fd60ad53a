"""Tests for forced range normalization and merging."""

from __future__ import annotations

import random

from logpeek.models import ForcedRange
from logpeek.ranges import covered_count, merge_ranges, normalize_range, normalize_ranges


def _pairs(ranges: list[ForcedRange]) -> list[tuple[int, int]]:
    return [(r.start, r.end) for r in ranges]


class TestNormalizeRange:
    def test_inside_file_unchanged(self) -> None:
        r = ForcedRange(5, 10)
        assert normalize_range(r, 100) is r

    def test_clamps_start_below_zero(self) -> None:
        assert normalize_range(ForcedRange(-5, 3), 100) == ForcedRange(0, 3)

    def test_clamps_end_past_file(self) -> None:
        assert normalize_range(ForcedRange(95, 120), 100) == ForcedRange(95, 100)

    def test_empty_after_clamp_dropped(self) -> None:
        assert normalize_range(ForcedRange(100, 110), 100) is None
        assert normalize_range(ForcedRange(-10, -1), 100) is None

    def test_degenerate_dropped(self) -> None:
        assert normalize_range(ForcedRange(7, 7), 100) is None
        assert normalize_range(ForcedRange(9, 4), 100) is None

    def test_empty_file(self) -> None:
        assert normalize_range(ForcedRange(0, 5), 0) is None


class TestMergeRanges:
    def test_overlapping_and_separate(self) -> None:
        merged = merge_ranges([ForcedRange(5, 10), ForcedRange(8, 12), ForcedRange(15, 20)])
        assert _pairs(merged) == [(5, 12), (15, 20)]

    def test_touching_ranges_merge(self) -> None:
        assert _pairs(merge_ranges([ForcedRange(0, 5), ForcedRange(5, 9)])) == [(0, 9)]

    def test_unsorted_input(self) -> None:
        merged = merge_ranges([ForcedRange(30, 40), ForcedRange(0, 2), ForcedRange(1, 3)])
        assert _pairs(merged) == [(0, 3), (30, 40)]

    def test_contained_range_absorbed(self) -> None:
        assert _pairs(merge_ranges([ForcedRange(0, 50), ForcedRange(10, 20)])) == [(0, 50)]

    def test_empty(self) -> None:
        assert merge_ranges([]) == []

    def test_idempotent_on_random_input(self) -> None:
        rng = random.Random(1234)
        for _ in range(200):
            ranges = []
            for _ in range(rng.randint(0, 12)):
                start = rng.randint(0, 100)
                ranges.append(ForcedRange(start, start + rng.randint(1, 15)))
            merged = merge_ranges(ranges)
            assert merge_ranges(merged) == merged
            for left, right in zip(merged, merged[1:], strict=False):
                assert left.end < right.start

    def test_coverage_preserved(self) -> None:
        rng = random.Random(99)
        for _ in range(100):
            ranges = []
            for _ in range(rng.randint(1, 8)):
                start = rng.randint(0, 60)
                ranges.append(ForcedRange(start, start + rng.randint(1, 10)))
            expected = {i for r in ranges for i in range(r.start, r.end)}
            merged = merge_ranges(ranges)
            assert {i for r in merged for i in range(r.start, r.end)} == expected
            assert covered_count(merged) == len(expected)


class TestNormalizeRanges:
    def test_clamps_drops_and_merges(self) -> None:
        ranges = [ForcedRange(-3, 2), ForcedRange(2, 4), ForcedRange(50, 60), ForcedRange(8, 9)]
        assert _pairs(normalize_ranges(ranges, 20)) == [(0, 4), (8, 9)]
