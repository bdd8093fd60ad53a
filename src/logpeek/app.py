"""Textual application for logpeek."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar

from textual.app import App, ComposeResult
from textual.binding import Binding, BindingType
from textual.widgets import Footer
from textual.worker import get_current_worker

from logpeek.config import load_config, update_config
from logpeek.models import FilterRule, SearchQuery
from logpeek.reader import read_file_remaining_async
from logpeek.state import ViewState
from logpeek.widgets.help_screen import HelpScreen
from logpeek.widgets.log_view import LogView
from logpeek.widgets.query_dialog import QueryDialog, QueryKind
from logpeek.widgets.status_bar import StatusBar

if TYPE_CHECKING:
    from pathlib import Path

    from logpeek.models import AppConfig, LineSpan, LogLine

logger = logging.getLogger(__name__)

_THEMES = ("textual-dark", "textual-light")


class LogPeekApp(App[None]):
    """Log viewer TUI: filtered lines with expandable hidden-line gaps."""

    ENABLE_COMMAND_PALETTE = False

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("f", "filter_in", "Filter in"),
        Binding("F", "filter_out", "Filter out", show=False),
        Binding("x", "clear_filters", "Clear filters", show=False),
        Binding("slash", "search", "Search", show=False),
        Binding("plus", "context(1)", "More context", show=False),
        Binding("minus", "context(-1)", "Less context", show=False),
        Binding("t", "toggle_theme", "Theme", show=False),
        Binding("h", "show_help", "Help"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(  # noqa: PLR0913
        self,
        lines: list[LogLine] | None = None,
        source: str = "",
        *,
        rules: list[FilterRule] | None = None,
        context_lines: int | None = None,
        prev_boundary: LineSpan | None = None,
        next_boundary: LineSpan | None = None,
        file_path: Path | None = None,
        config: AppConfig | None = None,
    ) -> None:
        super().__init__()
        self._config = config or load_config()
        self._lines = lines or []
        self._source = source
        self._filter_rules: list[FilterRule] = list(rules or [])
        self._file_path = file_path
        self._state = ViewState(
            context_lines=self._config.context_lines if context_lines is None else context_lines,
            prev_boundary=prev_boundary,
            next_boundary=next_boundary,
        )
        self.theme = self._config.theme

    @property
    def state(self) -> ViewState:
        return self._state

    def compose(self) -> ComposeResult:
        yield LogView(
            self._state,
            expand_step=self._config.expand_step,
            strip_prefix=self._config.strip_prefix,
            id="log-view",
        )
        yield StatusBar(source=self._source, id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        log_view = self.query_one("#log-view", LogView)
        if self._lines:
            log_view.set_lines(self._lines)
        if self._filter_rules:
            log_view.set_filters(self._filter_rules)
        log_view.focus()

        if self._file_path is not None:
            self.run_worker(self._load_remaining(self._file_path, skip=len(self._lines)), exclusive=True)

        self._update_status_bar()

    async def _load_remaining(self, path: Path, skip: int) -> None:
        """Append the rest of a large file chunk by chunk."""
        log_view = self.query_one("#log-view", LogView)
        status_bar = self.query_one("#status-bar", StatusBar)
        worker = get_current_worker()
        status_bar.set_loading_progress(skip)
        async for chunk in read_file_remaining_async(path, skip=skip):
            if worker.is_cancelled:
                break
            log_view.append_lines(chunk)
            status_bar.set_loading_progress(self._state.total_count)
        status_bar.clear_loading_progress()
        logger.debug("finished loading %s: %d lines", path, self._state.total_count)

    def on_log_view_display_changed(self, _event: LogView.DisplayChanged) -> None:
        self._update_status_bar()

    def _update_status_bar(self) -> None:
        log_view = self.query_one("#log-view", LogView)
        status_bar = self.query_one("#status-bar", StatusBar)
        state = self._state
        status_bar.update_counts(state.total_count, log_view.line_count, state.forced_line_count)
        item = log_view.current_item()
        status_bar.set_cursor_gaps(log_view.display_list.gaps_for(item.index) if item is not None else None)
        self.update_search_status()

    def update_search_status(self) -> None:
        """Update status bar with current search match info."""
        log_view = self.query_one("#log-view", LogView)
        status_bar = self.query_one("#status-bar", StatusBar)
        if log_view.search_match_count > 0:
            status_bar.set_search_info(log_view.search_current_index + 1, log_view.search_match_count)
        elif log_view.has_search:
            status_bar.set_search_info(0, 0)
        else:
            status_bar.clear_search_info()

    # --- Filter actions ---

    def _apply_filters(self) -> None:
        log_view = self.query_one("#log-view", LogView)
        log_view.set_filters(self._filter_rules)
        self._update_status_bar()

    def action_filter_in(self) -> None:
        self.push_screen(
            QueryDialog(QueryKind.FILTER_IN, case_sensitive=self._config.case_sensitive),
            callback=self._on_query_result,
        )

    def action_filter_out(self) -> None:
        self.push_screen(
            QueryDialog(QueryKind.FILTER_OUT, case_sensitive=self._config.case_sensitive),
            callback=self._on_query_result,
        )

    def action_search(self) -> None:
        self.push_screen(
            QueryDialog(QueryKind.SEARCH, case_sensitive=self._config.case_sensitive),
            callback=self._on_query_result,
        )

    def _on_query_result(self, result: FilterRule | SearchQuery | None) -> None:
        if isinstance(result, FilterRule):
            self._filter_rules.append(result)
            self._apply_filters()
        elif isinstance(result, SearchQuery):
            self.query_one("#log-view", LogView).set_search(result)
            self.update_search_status()

    def action_clear_filters(self) -> None:
        if not self._filter_rules:
            return
        self._filter_rules = []
        self._apply_filters()
        self.notify("Filters cleared")

    def action_context(self, delta: int) -> None:
        """Grow or shrink the context shown around matching lines."""
        if not self._state.has_filters:
            self.notify("Context lines apply only while filtering", severity="warning")
            return
        context = max(0, self._state.context_lines + delta)
        self.query_one("#log-view", LogView).set_context_lines(context)
        self._update_status_bar()
        self.notify(f"Context: {context} line(s)")

    # --- Theme ---

    def action_toggle_theme(self) -> None:
        theme = _THEMES[(_THEMES.index(self.theme) + 1) % len(_THEMES)] if self.theme in _THEMES else _THEMES[0]
        self.theme = theme
        self._config = update_config(self._config, theme=theme)

    # --- Help ---

    def action_show_help(self) -> None:
        self.push_screen(HelpScreen())
