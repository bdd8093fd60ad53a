"""Modal dialog for entering a filter or search pattern with options."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar

from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Checkbox, Input, Label

if TYPE_CHECKING:
    from textual.app import ComposeResult
    from textual.binding import BindingType
    from textual.events import Key

from logpeek.models import FilterRule, FilterType, SearchQuery


class QueryKind(StrEnum):
    """What the entered pattern is used for."""

    FILTER_IN = "filter-in"
    FILTER_OUT = "filter-out"
    SEARCH = "search"


_TITLES: dict[QueryKind, str] = {
    QueryKind.FILTER_IN: "Show only lines matching (f)",
    QueryKind.FILTER_OUT: "Hide lines matching (F)",
    QueryKind.SEARCH: "Highlight (/)",
}


class QueryDialog(ModalScreen[FilterRule | SearchQuery | None]):
    """Modal dialog returning a FilterRule (filter kinds) or a SearchQuery (search)."""

    DEFAULT_CSS = """
    QueryDialog {
        align: center middle;
    }

    QueryDialog > Vertical {
        width: 70;
        height: auto;
        background: $surface;
        border: tall $accent;
        padding: 1 2;
    }

    QueryDialog > Vertical > .title {
        margin-bottom: 1;
        text-style: bold;
    }

    QueryDialog > Vertical > Input {
        width: 100%;
    }

    QueryDialog > Vertical > Horizontal {
        height: auto;
        margin-top: 1;
    }

    QueryDialog > Vertical > Horizontal > Checkbox {
        margin-right: 3;
    }

    QueryDialog > Vertical > .hint {
        color: $text-muted;
        margin-top: 1;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, kind: QueryKind, *, case_sensitive: bool = False) -> None:
        super().__init__()
        self._kind = kind
        self._case_sensitive = case_sensitive

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(_TITLES[self._kind], classes="title")
            yield Input(placeholder="pattern...", id="query-input")
            with Horizontal():
                yield Checkbox("Case sensitive", self._case_sensitive, id="case-sensitive")
                yield Checkbox("Regex", False, id="regex")  # noqa: FBT003
            yield Label("Enter to apply, Space to toggle options, Escape to cancel", classes="hint")

    def on_key(self, event: Key) -> None:
        """Intercept Enter on checkboxes to submit instead of toggling."""
        if event.key == "enter" and isinstance(self.focused, Checkbox):
            event.prevent_default()
            event.stop()
            self._submit()

    def on_input_submitted(self, _event: Input.Submitted) -> None:
        self._submit()

    def _submit(self) -> None:
        pattern = self.query_one("#query-input", Input).value.strip()
        if not pattern:
            self.dismiss(None)
            return

        case_sensitive = self.query_one("#case-sensitive", Checkbox).value
        is_regex = self.query_one("#regex", Checkbox).value
        if self._kind == QueryKind.SEARCH:
            self.dismiss(SearchQuery(pattern=pattern, case_sensitive=case_sensitive, is_regex=is_regex))
            return

        filter_type = FilterType.INCLUDE if self._kind == QueryKind.FILTER_IN else FilterType.EXCLUDE
        self.dismiss(
            FilterRule(
                filter_type=filter_type,
                pattern=pattern,
                case_sensitive=case_sensitive,
                is_regex=is_regex,
            )
        )

    def action_cancel(self) -> None:
        self.dismiss(None)
