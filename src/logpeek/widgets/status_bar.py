"""Bottom status bar."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text
from textual.widget import Widget

if TYPE_CHECKING:
    from logpeek.models import LineGaps

_MILLION = 1_000_000
_TEN_THOUSAND = 10_000
_THOUSAND = 1_000


def format_count(n: int) -> str:
    """Format a line count compactly: 1234 -> '1,234', 1234567 -> '1.2M'."""
    if n >= _MILLION:
        return f"{n / _MILLION:.1f}M"
    if n >= _TEN_THOUSAND:
        return f"{n / _THOUSAND:.0f}K"
    return f"{n:,}"


class StatusBar(Widget):
    """Bottom status bar showing line counts, gaps at the cursor, and source."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        background: $primary;
        color: $text;
        padding: 0 1;
    }
    """

    def __init__(self, source: str = "", id: str | None = None) -> None:  # noqa: A002
        super().__init__(id=id)
        self._source = source
        self._total: int = 0
        self._shown: int = 0
        self._forced: int = 0
        self._gaps: LineGaps | None = None
        self._search_current: int | None = None
        self._search_total: int | None = None
        self._loading_loaded: int | None = None

    def update_counts(self, total: int, shown: int, forced: int = 0) -> None:
        """Update total, displayed and force-shown line counts."""
        self._total = total
        self._shown = shown
        self._forced = forced
        self.refresh()

    def set_cursor_gaps(self, gaps: LineGaps | None) -> None:
        """Show the hidden-line counts around the cursor line."""
        self._gaps = gaps
        self.refresh()

    def set_search_info(self, current: int, total: int) -> None:
        self._search_current = current
        self._search_total = total
        self.refresh()

    def clear_search_info(self) -> None:
        self._search_current = None
        self._search_total = None
        self.refresh()

    def set_loading_progress(self, loaded: int) -> None:
        """Set loading progress (for chunked file loading)."""
        self._loading_loaded = loaded
        self.refresh()

    def clear_loading_progress(self) -> None:
        self._loading_loaded = None
        self.refresh()

    def render(self) -> Text:
        text = Text()

        if self._shown < self._total:
            text.append(f"{format_count(self._shown)} of {format_count(self._total)} lines")
        else:
            text.append(f"{format_count(self._total)} lines")

        if self._forced:
            text.append(f"  +{format_count(self._forced)} unhidden", style="italic")

        if self._gaps is not None:
            if self._gaps.up is not None:
                text.append(f"  ↑{format_count(self._gaps.up.remaining_gap)}", style="bold")
            if self._gaps.down is not None:
                text.append(f"  ↓{format_count(self._gaps.down.remaining_gap)}", style="bold")

        if self._search_total is not None:
            if self._search_total == 0:
                text.append("  No matches", style="bold italic")
            else:
                text.append(f"  [{self._search_current}/{self._search_total}]", style="bold")

        if self._loading_loaded is not None:
            text.append(f"  Loading: {format_count(self._loading_loaded)}...", style="bold italic")

        if self._source:
            used = len(text.plain)
            padding = max(1, self.size.width - used - len(self._source))
            text.append(" " * padding)
            text.append(self._source)

        return text
