"""View state: the owner of lines, filters and forced ranges behind a log view."""

from __future__ import annotations

import bisect
import logging
from typing import TYPE_CHECKING

from logpeek.display import DisplayList, build_display_list
from logpeek.expansion import calculate_gap_expansion
from logpeek.filters import apply_filters, expand_with_context, has_active_rules
from logpeek.ranges import covered_count

if TYPE_CHECKING:
    from logpeek.models import FilterRule, ForcedRange, LineSpan, LogLine

logger = logging.getLogger(__name__)


class ViewState:
    """Holds the inputs of display reconciliation and memoizes the display list.

    Forced ranges start empty, only grow through :meth:`expand`, and are
    cleared whenever the filter rules or the underlying lines are replaced.
    The display list is rebuilt only when one of its inputs is a different
    object than at the last build.
    """

    def __init__(
        self,
        lines: list[LogLine] | None = None,
        *,
        context_lines: int = 0,
        prev_boundary: LineSpan | None = None,
        next_boundary: LineSpan | None = None,
    ) -> None:
        self._lines: list[LogLine] = list(lines) if lines else []
        self._max_line_width = max((len(line.raw) for line in self._lines), default=0)
        self._rules: list[FilterRule] = []
        self._context_lines = max(0, context_lines)
        self._forced_ranges: list[ForcedRange] = []
        self.prev_boundary = prev_boundary
        self.next_boundary = next_boundary
        self._matching: list[int] = []
        self._visible: list[int] = []
        self._display: DisplayList | None = None
        self._display_inputs: tuple[list[int], list[LogLine], list[ForcedRange]] | None = None
        self._recompute_matches()

    @property
    def lines(self) -> list[LogLine]:
        return self._lines

    @property
    def max_line_width(self) -> int:
        """Length of the longest raw line loaded so far."""
        return self._max_line_width

    @property
    def total_count(self) -> int:
        return len(self._lines)

    @property
    def rules(self) -> list[FilterRule]:
        return self._rules

    @property
    def has_filters(self) -> bool:
        return has_active_rules(self._rules)

    @property
    def context_lines(self) -> int:
        return self._context_lines

    @property
    def forced_ranges(self) -> list[ForcedRange]:
        return self._forced_ranges

    @property
    def matching_indices(self) -> list[int]:
        """Ascending indices of lines passing the filter rules (no context)."""
        return self._matching

    def is_match(self, index: int) -> bool:
        """Whether a line passes the filter rules, as opposed to being shown by context or expansion."""
        pos = bisect.bisect_left(self._matching, index)
        return pos < len(self._matching) and self._matching[pos] == index

    @property
    def forced_line_count(self) -> int:
        return covered_count(self._forced_ranges)

    @property
    def display(self) -> DisplayList:
        """The current display list, rebuilt only when its inputs changed."""
        inputs = (self._visible, self._lines, self._forced_ranges)
        cached = self._display_inputs
        if self._display is None or cached is None or any(a is not b for a, b in zip(inputs, cached, strict=True)):
            self._display = build_display_list(self._visible, self._lines, self._forced_ranges)
            self._display_inputs = inputs
        return self._display

    def set_lines(self, lines: list[LogLine]) -> None:
        """Replace all lines. Clears forced ranges."""
        self._lines = list(lines)
        self._max_line_width = max((len(line.raw) for line in self._lines), default=0)
        self._reset_forced_ranges("lines replaced")
        self._recompute_matches()

    def append_lines(self, lines: list[LogLine]) -> None:
        """Append a chunk of lines (chunked loading). Forced ranges stay valid and are kept."""
        if not lines:
            return
        offset = len(self._lines)
        self._lines.extend(lines)
        widest = max(len(line.raw) for line in lines)
        self._max_line_width = max(self._max_line_width, widest)
        if self.has_filters:
            self._matching.extend(offset + i for i in apply_filters(lines, self._rules))
        else:
            self._matching.extend(range(offset, len(self._lines)))
        if self.has_filters and self._context_lines:
            self._extend_visible(offset)
        # The lists grew in place, so the identity memo cannot see the change
        self._display = None

    def clear(self) -> None:
        self.set_lines([])

    def set_filters(self, rules: list[FilterRule]) -> None:
        """Replace the filter rules. A change of rules clears forced ranges."""
        if rules == self._rules:
            return
        self._rules = list(rules)
        self._reset_forced_ranges("filters changed")
        self._recompute_matches()

    def set_context_lines(self, context_lines: int) -> None:
        context_lines = max(0, context_lines)
        if context_lines == self._context_lines:
            return
        self._context_lines = context_lines
        self._recompute_visible()

    def expand(self, gap_id: str, mode: int | str) -> bool:
        """Expand a gap of the current display. Returns False when nothing changed."""
        display = self.display
        updated = calculate_gap_expansion(
            gap_id,
            mode,
            display.indices,
            self.total_count,
            self._forced_ranges,
            self._matching if self.has_filters else None,
            self.prev_boundary,
            self.next_boundary,
        )
        if updated is self._forced_ranges:
            logger.debug("expand %s by %r: no change", gap_id, mode)
            return False
        logger.debug("expand %s by %r: %d forced ranges", gap_id, mode, len(updated))
        self._forced_ranges = updated
        return True

    def reset_expansions(self) -> bool:
        """Forget all forced ranges. Returns False if there were none."""
        if not self._forced_ranges:
            return False
        self._reset_forced_ranges("reset requested")
        return True

    def _reset_forced_ranges(self, reason: str) -> None:
        if self._forced_ranges:
            logger.debug("clearing %d forced ranges: %s", len(self._forced_ranges), reason)
        self._forced_ranges = []

    def _recompute_matches(self) -> None:
        if self.has_filters:
            self._matching = apply_filters(self._lines, self._rules)
        else:
            self._matching = list(range(len(self._lines)))
        self._recompute_visible()

    def _extend_visible(self, offset: int) -> None:
        """Widen only the matches whose context can reach lines at or after ``offset``."""
        context = self._context_lines
        first = bisect.bisect_left(self._matching, offset - context)
        tail = expand_with_context(self._matching[first:], len(self._lines), context)
        if not tail:
            return
        cut = bisect.bisect_left(self._visible, tail[0])
        self._visible[cut:] = sorted({*self._visible[cut:], *tail})

    def _recompute_visible(self) -> None:
        if self.has_filters and self._context_lines:
            self._visible = expand_with_context(self._matching, len(self._lines), self._context_lines)
        else:
            self._visible = self._matching
