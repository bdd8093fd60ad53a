"""Display list construction: filtered lines plus forced ranges, annotated with gaps."""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from logpeek.models import DisplayItem, GapDirection, GapInfo, LineGaps
from logpeek.ranges import normalize_ranges

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Sequence

    from logpeek.models import ForcedRange


def gap_id_for(direction: GapDirection, anchor: int) -> str:
    """Build the gap id addressing the hidden run on one side of an anchor line."""
    return f"{direction}-{anchor}"


def _gap_above(current: int, prev: int | None) -> GapInfo | None:
    size = current if prev is None else current - prev - 1
    if size <= 0:
        return None
    return GapInfo(
        gap_id=gap_id_for(GapDirection.UP, current),
        gap_size=size,
        remaining_gap=size,
        is_first=prev is None,
    )


def _gap_below(current: int, nxt: int | None, total_lines: int) -> GapInfo | None:
    size = total_lines - 1 - current if nxt is None else nxt - current - 1
    if size <= 0:
        return None
    return GapInfo(
        gap_id=gap_id_for(GapDirection.DOWN, current),
        gap_size=size,
        remaining_gap=size,
        is_last=nxt is None,
    )


def compute_display_indices(
    matching_indices: Collection[int],
    total_lines: int,
    forced_ranges: Iterable[ForcedRange],
) -> list[int]:
    """Ascending union of matching indices and forced ranges, restricted to the file.

    An empty matching set yields an empty result: forced ranges alone never
    bring back a view the filter emptied.
    """
    if not matching_indices:
        return []
    shown = {i for i in matching_indices if 0 <= i < total_lines}
    for forced in normalize_ranges(forced_ranges, total_lines):
        shown.update(range(forced.start, forced.end))
    return sorted(shown)


def build_display_items(
    matching_indices: Collection[int],
    all_lines: Sequence[Any],
    forced_ranges: Iterable[ForcedRange],
) -> list[DisplayItem]:
    """Build the ordered display items with gap annotations."""
    total_lines = len(all_lines)
    indices = compute_display_indices(matching_indices, total_lines, forced_ranges)
    items: list[DisplayItem] = []
    last = len(indices) - 1
    for pos, current in enumerate(indices):
        prev = indices[pos - 1] if pos > 0 else None
        nxt = indices[pos + 1] if pos < last else None
        items.append(
            DisplayItem(
                line=all_lines[current],
                index=current,
                gap_above=_gap_above(current, prev),
                gap_below=_gap_below(current, nxt, total_lines),
            )
        )
    return items


def display_indices(items: Iterable[DisplayItem]) -> list[int]:
    """Line indices of display items, in display order."""
    return [item.index for item in items]


def get_gap_info_for_line(line_index: int, displayed_indices: Sequence[int], total_lines: int) -> LineGaps:
    """Recompute the gaps around a single displayed line.

    ``displayed_indices`` must be ascending, as produced by the builder.
    Returns an empty LineGaps when the line is not displayed.
    """
    pos = bisect.bisect_left(displayed_indices, line_index)
    if pos >= len(displayed_indices) or displayed_indices[pos] != line_index:
        return LineGaps()
    prev = displayed_indices[pos - 1] if pos > 0 else None
    nxt = displayed_indices[pos + 1] if pos < len(displayed_indices) - 1 else None
    return LineGaps(
        up=_gap_above(line_index, prev),
        down=_gap_below(line_index, nxt, total_lines),
    )


@dataclass(slots=True)
class DisplayList:
    """Display items with the parallel index list a virtualized renderer needs."""

    items: list[DisplayItem] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)
    total_lines: int = 0

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, row: int) -> DisplayItem:
        return self.items[row]

    @property
    def hidden_count(self) -> int:
        return self.total_lines - len(self.items)

    def position_of(self, line_index: int) -> int | None:
        """Row holding a line index, or None if the line is hidden."""
        pos = bisect.bisect_left(self.indices, line_index)
        if pos < len(self.indices) and self.indices[pos] == line_index:
            return pos
        return None

    def nearest_position(self, line_index: int) -> int:
        """Row of the first displayed line at or after a line index (last row if past the end)."""
        if not self.indices:
            return 0
        pos = bisect.bisect_left(self.indices, line_index)
        return min(pos, len(self.indices) - 1)

    def gaps_for(self, line_index: int) -> LineGaps:
        return get_gap_info_for_line(line_index, self.indices, self.total_lines)


def build_display_list(
    matching_indices: Collection[int],
    all_lines: Sequence[Any],
    forced_ranges: Iterable[ForcedRange],
) -> DisplayList:
    """Build display items together with their index list."""
    items = build_display_items(matching_indices, all_lines, forced_ranges)
    return DisplayList(items=items, indices=display_indices(items), total_lines=len(all_lines))
