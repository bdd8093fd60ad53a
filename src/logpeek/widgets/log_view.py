"""Main scrollable log display widget with expandable hidden-line gaps."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from rich.segment import Segment
from rich.style import Style
from textual.binding import Binding, BindingType
from textual.geometry import Size
from textual.message import Message
from textual.reactive import reactive
from textual.scroll_view import ScrollView
from textual.strip import Strip

from logpeek.models import DisplayItem, ExpandMode, GapDirection, GapInfo, LogLevel
from logpeek.parser import display_text
from logpeek.search import find_matches
from logpeek.state import ViewState

if TYPE_CHECKING:
    from logpeek.display import DisplayList
    from logpeek.models import FilterRule, LogLine, SearchQuery

_BADGE_CHARS: dict[LogLevel, str] = {
    LogLevel.FATAL: "F",
    LogLevel.ERROR: "E",
    LogLevel.WARN: "W",
    LogLevel.INFO: "I",
    LogLevel.DEBUG: "D",
    LogLevel.TRACE: "T",
}

_LEVEL_CLASSES: dict[LogLevel, str] = {
    LogLevel.FATAL: "logview--level-fatal",
    LogLevel.ERROR: "logview--level-error",
    LogLevel.WARN: "logview--level-warn",
    LogLevel.DEBUG: "logview--level-debug",
}

_SEARCH_STYLE = Style(bgcolor="#6e5600", color="#ffffff")
_SEARCH_CURRENT_STYLE = Style(bgcolor="#9e7c00", color="#ffffff", bold=True)


def gap_marker(item: DisplayItem) -> str:
    """Gutter glyph for a row: which sides have hidden lines."""
    if item.gap_above is not None and item.gap_below is not None:
        return "↕"
    if item.gap_above is not None:
        return "↑"
    if item.gap_below is not None:
        return "↓"
    return " "


class LogView(ScrollView, can_focus=True):
    """Virtualized log viewer: one row per display item, rendered with the Line API."""

    DEFAULT_CSS = """
    LogView {
        background: $surface;
        height: 1fr;
    }

    LogView > .logview--highlight {
        background: $primary-darken-2;
        color: $text;
    }

    LogView > .logview--forced {
        color: $text-muted;
    }

    LogView > .logview--gap {
        color: $warning;
        text-style: bold;
    }

    LogView > .logview--line-number {
        color: $text-disabled;
    }

    LogView > .logview--level-error {
        background: #3d1518;
    }

    LogView > .logview--level-warn {
        background: #3d2e0a;
    }

    LogView > .logview--level-debug {
        color: $text-disabled;
    }

    LogView > .logview--level-fatal {
        background: #5c1015;
        text-style: bold;
    }
    """

    COMPONENT_CLASSES: ClassVar[set[str]] = {
        "logview--highlight",
        "logview--forced",
        "logview--gap",
        "logview--line-number",
        "logview--level-error",
        "logview--level-warn",
        "logview--level-debug",
        "logview--level-fatal",
    }

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("up", "cursor_up", "Up", show=False),
        Binding("down", "cursor_down", "Down", show=False),
        Binding("pageup", "page_up", "Page Up", show=False),
        Binding("pagedown", "page_down", "Page Down", show=False),
        Binding("home", "scroll_home", "Home", show=False),
        Binding("end", "scroll_end", "End", show=False),
        Binding("left_square_bracket", "expand_step('up')", "+N above"),
        Binding("right_square_bracket", "expand_step('down')", "+N below"),
        Binding("left_curly_bracket", "expand_all('up')", "All above", show=False),
        Binding("right_curly_bracket", "expand_all('down')", "All below", show=False),
        Binding("less_than_sign", "expand_prev_match", "To prev match", show=False),
        Binding("greater_than_sign", "expand_next_match", "To next match", show=False),
        Binding("r", "reset_expansions", "Re-hide"),
        Binding("n", "next_match", "Next", show=False),
        Binding("N", "prev_match", "Prev", show=False),
        Binding("number_sign", "toggle_line_numbers", "Lines#", show=False),
    ]

    cursor_line: reactive[int] = reactive(0)

    class DisplayChanged(Message):
        """Posted when the set of displayed rows or the cursor's gaps changed."""

    def __init__(
        self,
        state: ViewState | None = None,
        *,
        expand_step: int = 10,
        strip_prefix: bool = True,
        **kwargs: Any,  # noqa: ANN401
    ) -> None:
        super().__init__(**kwargs)
        self._state = state or ViewState()
        self._expand_step = expand_step
        self._strip_prefix = strip_prefix
        self._show_line_numbers: bool = True
        self._search: SearchQuery | None = None
        self._search_matches: dict[int, list[tuple[int, int]]] = {}
        self._search_rows: list[int] = []
        self._search_current: int = -1

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def display_list(self) -> DisplayList:
        return self._state.display

    @property
    def line_count(self) -> int:
        return len(self._state.display)

    @property
    def has_search(self) -> bool:
        return self._search is not None

    @property
    def search_match_count(self) -> int:
        return len(self._search_rows)

    @property
    def search_current_index(self) -> int:
        return self._search_current

    def current_item(self) -> DisplayItem | None:
        display = self._state.display
        if not display.items:
            return None
        return display[min(self.cursor_line, len(display) - 1)]

    def on_mount(self) -> None:
        self._refresh_display()

    # --- State changes ---

    def set_lines(self, lines: list[LogLine]) -> None:
        """Replace all log lines and refresh display."""
        self._state.set_lines(lines)
        self.cursor_line = 0
        self._refresh_display()

    def append_lines(self, lines: list[LogLine]) -> None:
        """Append a chunk of lines (chunked loading) without moving the cursor."""
        orig_idx = self._cursor_line_index()
        self._state.append_lines(lines)
        self._refresh_display(restore=orig_idx)

    def set_filters(self, rules: list[FilterRule]) -> None:
        """Apply filter rules, keeping the cursor near the same log line."""
        orig_idx = self._cursor_line_index()
        self._state.set_filters(rules)
        self._refresh_display(restore=orig_idx, center=True)

    def set_context_lines(self, context_lines: int) -> None:
        orig_idx = self._cursor_line_index()
        self._state.set_context_lines(context_lines)
        self._refresh_display(restore=orig_idx)

    def set_search(self, query: SearchQuery | None) -> None:
        """Highlight a search query among displayed lines and jump to the nearest hit."""
        self._search = query
        self._compute_search_matches()
        if self._search_rows:
            self._search_current = next(
                (i for i, row in enumerate(self._search_rows) if row >= self.cursor_line),
                0,
            )
            self.cursor_line = self._search_rows[self._search_current]
        self.refresh()

    def expand(self, direction: GapDirection, mode: int | str) -> bool:
        """Expand the gap on one side of the cursor line. Returns False if nothing changed."""
        item = self.current_item()
        if item is None:
            return False
        gap = item.gap_above if direction == GapDirection.UP else item.gap_below
        if gap is None:
            return False
        return self._expand_gap(gap, mode, item.index)

    def _expand_gap(self, gap: GapInfo, mode: int | str, anchor: int) -> bool:
        if not self._state.expand(gap.gap_id, mode):
            return False
        self._refresh_display(restore=anchor)
        return True

    def _cursor_line_index(self) -> int | None:
        item = self.current_item()
        return item.index if item is not None else None

    def _refresh_display(self, restore: int | None = None, *, center: bool = False) -> None:
        """Rebuild row geometry after the display list changed."""
        display = self._state.display
        self.virtual_size = Size(self._state.max_line_width + 16, len(display))
        if self._search is not None:
            self._compute_search_matches()
        if restore is not None and display.items:
            self.cursor_line = display.nearest_position(restore)
            if center:
                self.call_after_refresh(self._scroll_cursor_into_view, center=True)
            else:
                self._scroll_cursor_into_view()
        elif self.cursor_line >= len(display):
            self.cursor_line = max(0, len(display) - 1)
        self.post_message(self.DisplayChanged())
        self.refresh()

    def _compute_search_matches(self) -> None:
        if self._search is None:
            self._search_matches = {}
            self._search_rows = []
            self._search_current = -1
            return
        display = self._state.display
        self._search_matches = find_matches(display.items, self._search, strip_prefix=self._strip_prefix)
        rows = (display.position_of(index) for index in self._search_matches)
        self._search_rows = sorted(row for row in rows if row is not None)
        self._search_current = -1

    # --- Rendering ---

    def render_line(self, y: int) -> Strip:
        scroll_x, scroll_y = self.scroll_offset
        row = scroll_y + y
        content_width = self.scrollable_content_region.width
        display = self._state.display

        if content_width <= 0:
            return Strip.blank(self.size.width, self.rich_style)
        if row < 0 or row >= len(display):
            return Strip.blank(content_width, self.rich_style)

        item = display[row]
        line: LogLine = item.line
        if row == self.cursor_line:
            bg_style = self.get_component_rich_style("logview--highlight")
        elif line.log_level in _LEVEL_CLASSES:
            bg_style = self.get_component_rich_style(_LEVEL_CLASSES[line.log_level])
        else:
            bg_style = Style()

        segments = [Segment(f"{gap_marker(item)} ", self.get_component_rich_style("logview--gap") + bg_style)]
        if self._show_line_numbers:
            lineno_style = self.get_component_rich_style("logview--line-number")
            segments.append(Segment(f"{line.line_number:>7} ", lineno_style + bg_style))
        if line.log_level is not None:
            segments.append(Segment(f"{_BADGE_CHARS[line.log_level]} ", Style(bold=True) + bg_style))

        forced = self._state.has_filters and not self._state.is_match(item.index)
        text_style = self.get_component_rich_style("logview--forced") if forced else Style()
        segments.extend(self._render_text(item, text_style + bg_style, row))

        strip = Strip(segments).crop(scroll_x, scroll_x + content_width)
        if bg_style != Style():
            return strip.extend_cell_length(content_width, Style(bgcolor=bg_style.bgcolor))
        return strip.extend_cell_length(content_width).apply_style(self.rich_style)

    def _render_text(self, item: DisplayItem, style: Style, row: int) -> list[Segment]:
        line: LogLine = item.line
        text = display_text(line, strip_prefix=self._strip_prefix)
        spans = self._search_matches.get(item.index)
        if not spans:
            return [Segment(text, style)]

        # Match offsets are relative to the raw line
        offset = len(line.raw) - len(text)
        is_current = 0 <= self._search_current < len(self._search_rows) and self._search_rows[self._search_current] == row
        match_style = _SEARCH_CURRENT_STYLE if is_current else _SEARCH_STYLE
        segments: list[Segment] = []
        pos = 0
        for raw_start, raw_end in spans:
            start = max(raw_start - offset, pos)
            end = raw_end - offset
            if end <= start:
                continue
            if start > pos:
                segments.append(Segment(text[pos:start], style))
            segments.append(Segment(text[start:end], match_style))
            pos = end
        if pos < len(text):
            segments.append(Segment(text[pos:], style))
        return segments

    # --- Cursor ---

    def watch_cursor_line(self, _old_value: int, _new_value: int) -> None:
        self._scroll_cursor_into_view()
        self.post_message(self.DisplayChanged())
        self.refresh()

    def _scroll_cursor_into_view(self, *, center: bool = False) -> None:
        region_height = self.scrollable_content_region.height
        if region_height <= 0 or not self._state.display.items:
            return
        cursor = self.cursor_line
        scroll_y = self.scroll_offset.y
        if center:
            self.scroll_to(y=max(0, cursor - region_height // 2), animate=False)
        elif cursor < scroll_y:
            self.scroll_to(y=cursor, animate=False)
        elif cursor >= scroll_y + region_height:
            self.scroll_to(y=cursor - region_height + 1, animate=False)

    # --- Actions ---

    def action_cursor_up(self) -> None:
        if self.cursor_line > 0:
            self.cursor_line -= 1

    def action_cursor_down(self) -> None:
        if self.cursor_line < self.line_count - 1:
            self.cursor_line += 1

    def action_page_up(self) -> None:
        page_size = max(1, self.scrollable_content_region.height - 1)
        self.cursor_line = max(0, self.cursor_line - page_size)

    def action_page_down(self) -> None:
        page_size = max(1, self.scrollable_content_region.height - 1)
        self.cursor_line = max(0, min(self.cursor_line + page_size, self.line_count - 1))

    def action_scroll_home(self) -> None:
        self.cursor_line = 0

    def action_scroll_end(self) -> None:
        if self.line_count:
            self.cursor_line = self.line_count - 1

    def action_expand_step(self, direction: str) -> None:
        self.expand(GapDirection(direction), self._expand_step)

    def action_expand_all(self, direction: str) -> None:
        self.expand(GapDirection(direction), ExpandMode.ALL)

    def action_expand_prev_match(self) -> None:
        self.expand(GapDirection.UP, ExpandMode.PREV_MATCH)

    def action_expand_next_match(self) -> None:
        self.expand(GapDirection.DOWN, ExpandMode.NEXT_MATCH)

    def action_reset_expansions(self) -> None:
        orig_idx = self._cursor_line_index()
        if self._state.reset_expansions():
            self._refresh_display(restore=orig_idx)

    def action_next_match(self) -> None:
        if not self._search_rows:
            return
        self._search_current = (self._search_current + 1) % len(self._search_rows)
        self.cursor_line = self._search_rows[self._search_current]
        self.refresh()

    def action_prev_match(self) -> None:
        if not self._search_rows:
            return
        self._search_current = (self._search_current - 1) % len(self._search_rows)
        self.cursor_line = self._search_rows[self._search_current]
        self.refresh()

    def action_toggle_line_numbers(self) -> None:
        self._show_line_numbers = not self._show_line_numbers
        self.refresh()
