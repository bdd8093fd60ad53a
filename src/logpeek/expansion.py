"""Gap expansion: turn an expand request into an updated forced range list."""

from __future__ import annotations

import bisect
import re
from typing import TYPE_CHECKING

from logpeek.models import ExpandMode, ForcedRange, GapDirection
from logpeek.ranges import merge_ranges, normalize_range

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from logpeek.models import LineSpan

# ASCII digits only, matched against the whole id
_GAP_ID_RE = re.compile(r"(up|down)-([0-9]+)")


def parse_gap_id(gap_id: str) -> tuple[GapDirection, int] | None:
    """Split a gap id like ``down-76`` into (direction, anchor), or None if malformed."""
    m = _GAP_ID_RE.fullmatch(gap_id)
    if m is None:
        return None
    return GapDirection(m.group(1)), int(m.group(2))


def _sorted_matches(matching_indices: Collection[int] | None) -> Sequence[int]:
    """Matches as an ascending sequence. Only a ``range`` is used as-is."""
    if not matching_indices:
        return ()
    if isinstance(matching_indices, range) and matching_indices.step > 0:
        return matching_indices
    return sorted(matching_indices)


def _first_match_between(matches: Sequence[int], low: int, high: int) -> int | None:
    """Smallest match strictly inside (low, high)."""
    pos = bisect.bisect_right(matches, low)
    if pos < len(matches) and matches[pos] < high:
        return matches[pos]
    return None


def _last_match_between(matches: Sequence[int], low: int, high: int) -> int | None:
    """Largest match strictly inside (low, high)."""
    pos = bisect.bisect_left(matches, high) - 1
    if pos >= 0 and matches[pos] > low:
        return matches[pos]
    return None


def _requested_range(  # noqa: PLR0913, PLR0917
    direction: GapDirection,
    anchor: int,
    mode: int | str,
    gap_start: int,
    gap_end: int,
    matching_indices: Collection[int] | None,
    prev_boundary: LineSpan | None,
    next_boundary: LineSpan | None,
) -> ForcedRange | None:
    """Resolve the range an expand mode carves out of the gap bounded by gap_start/gap_end."""
    total_gap = gap_end - gap_start - 1

    if isinstance(mode, int) and not isinstance(mode, bool):
        count = min(max(mode, 0), total_gap)
        if count <= 0:
            return None
        if direction == GapDirection.UP:
            return ForcedRange(anchor - count, anchor)
        return ForcedRange(anchor + 1, anchor + 1 + count)

    if mode == ExpandMode.NEXT_MATCH and direction == GapDirection.DOWN:
        target: int | None = None
        # A boundary may sit on the next displayed line itself
        if next_boundary is not None and anchor < next_boundary.start <= gap_end:
            target = next_boundary.start
        else:
            target = _first_match_between(_sorted_matches(matching_indices), anchor, gap_end)
        if target is not None:
            return ForcedRange(anchor + 1, target + 1)

    elif mode == ExpandMode.PREV_MATCH and direction == GapDirection.UP:
        target = None
        if prev_boundary is not None and gap_start <= prev_boundary.end < anchor:
            target = prev_boundary.end
        else:
            target = _last_match_between(_sorted_matches(matching_indices), gap_start, anchor)
        if target is not None:
            return ForcedRange(target, anchor)

    return ForcedRange(gap_start + 1, gap_end)


def calculate_gap_expansion(  # noqa: PLR0913, PLR0917
    gap_id: str,
    mode: int | str,
    displayed_indices: Sequence[int],
    total_lines: int,
    current_forced_ranges: list[ForcedRange],
    matching_indices: Collection[int] | None = None,
    prev_boundary: LineSpan | None = None,
    next_boundary: LineSpan | None = None,
) -> list[ForcedRange]:
    """Expand the gap addressed by ``gap_id`` and return the new forced range list.

    ``mode`` is a line count, ``"all"``, ``"next-match"`` (down gaps) or
    ``"prev-match"`` (up gaps); a named mode used on the wrong side behaves
    like ``"all"``. ``displayed_indices`` must be ascending.

    Whenever the request changes nothing (malformed or stale gap id, empty
    gap, zero-line request, or a range that is already forced) the exact
    ``current_forced_ranges`` object is returned, so callers can compare by
    identity to skip a re-render.
    """
    parsed = parse_gap_id(gap_id)
    if parsed is None:
        return current_forced_ranges
    direction, anchor = parsed

    pos = bisect.bisect_left(displayed_indices, anchor)
    if pos >= len(displayed_indices) or displayed_indices[pos] != anchor:
        return current_forced_ranges

    if direction == GapDirection.UP:
        gap_start = displayed_indices[pos - 1] if pos > 0 else -1
        gap_end = anchor
    else:
        gap_start = anchor
        gap_end = displayed_indices[pos + 1] if pos < len(displayed_indices) - 1 else total_lines

    if gap_end - gap_start - 1 <= 0:
        return current_forced_ranges

    requested = _requested_range(
        direction, anchor, mode, gap_start, gap_end, matching_indices, prev_boundary, next_boundary
    )
    if requested is None:
        return current_forced_ranges
    normalized = normalize_range(requested, total_lines)
    if normalized is None:
        return current_forced_ranges

    merged = merge_ranges([*current_forced_ranges, normalized])
    if merged == list(current_forced_ranges):
        return current_forced_ranges
    return merged
