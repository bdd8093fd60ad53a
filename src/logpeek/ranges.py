"""Forced range normalization and merging."""

from __future__ import annotations

import operator
from typing import TYPE_CHECKING

from logpeek.models import ForcedRange

if TYPE_CHECKING:
    from collections.abc import Iterable


def normalize_range(forced: ForcedRange, total_lines: int) -> ForcedRange | None:
    """Clamp a range into ``[0, total_lines]``, returning None if nothing is left."""
    start = min(max(forced.start, 0), total_lines)
    end = min(max(forced.end, 0), total_lines)
    if end <= start:
        return None
    if start == forced.start and end == forced.end:
        return forced
    return ForcedRange(start, end)


def merge_ranges(ranges: Iterable[ForcedRange]) -> list[ForcedRange]:
    """Merge ranges into a sorted list where no two ranges overlap or touch.

    Ranges are sorted by (start, end) and folded left: a range whose start is
    at or before the end of the last merged range extends it.
    """
    ordered = sorted(ranges, key=operator.attrgetter("start", "end"))
    merged: list[ForcedRange] = []
    for current in ordered:
        if merged and current.start <= merged[-1].end:
            last = merged[-1]
            if current.end > last.end:
                merged[-1] = ForcedRange(last.start, current.end)
        else:
            merged.append(current)
    return merged


def normalize_ranges(ranges: Iterable[ForcedRange], total_lines: int) -> list[ForcedRange]:
    """Clamp every range to the file, drop empty ones and merge the rest."""
    clamped = (normalize_range(r, total_lines) for r in ranges)
    return merge_ranges(r for r in clamped if r is not None)


def covered_count(merged: Iterable[ForcedRange]) -> int:
    """Total number of line indices covered by merged ranges."""
    return sum(len(r) for r in merged)
