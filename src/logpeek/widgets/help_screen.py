"""Help screen showing all keyboard shortcuts."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from typing_extensions import override

from textual.containers import VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Static

if TYPE_CHECKING:
    from textual.app import ComposeResult
    from textual.binding import BindingType

HELP_TEXT = """\
[bold]Navigation[/bold]
  Up/Down                               Move between displayed lines
  PgUp/PgDn                             Page up/down
  Home/End                              Jump to first/last displayed line

[bold]Hidden lines[/bold]
  Gutter arrows (↑ ↓ ↕) mark lines with hidden lines above/below.
  \\[                                     Show N more hidden lines above
  ]                                     Show N more hidden lines below
  {                                     Show all hidden lines above
  }                                     Show all hidden lines below
  <                                     Show lines up to the previous match
  >                                     Show lines up to the next match
  r                                     Hide unhidden lines again

  N is the expand_step setting (default 10).

[bold]Filtering[/bold]
  f                                     Show only lines matching a pattern
  F                                     Hide lines matching a pattern
  x                                     Clear all filters
  +/-                                   More/fewer context lines around matches

  Changing filters hides previously unhidden lines again.

[bold]Search[/bold]
  /                                     Highlight a pattern in displayed lines
  n                                     Next highlighted line
  N                                     Previous highlighted line

[bold]General[/bold]
  #                                     Toggle line numbers
  t                                     Toggle light/dark theme
  h                                     Show this help
  q                                     Quit
"""


class HelpScreen(ModalScreen[None]):
    """Modal help screen with keyboard shortcuts."""

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }

    HelpScreen > VerticalScroll {
        width: 60%;
        height: 90%;
        max-height: 35;
        background: $surface;
        border: tall $accent;
        padding: 1 2;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        ("escape", "dismiss_help", "Close"),
        ("h", "dismiss_help", "Close"),
        ("q", "dismiss_help", "Close"),
    ]

    @override
    def compose(self) -> ComposeResult:
        with VerticalScroll():
            yield Static(HELP_TEXT, markup=True)

    def action_dismiss_help(self) -> None:
        self.dismiss(None)
