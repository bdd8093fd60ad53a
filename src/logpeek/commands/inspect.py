"""Inspect command - view filtered log lines with expandable hidden-line gaps."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path  # noqa: TC003 - typer needs this at runtime for argument parsing
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from logpeek.config import load_config
from logpeek.export import ExportFormat, export_lines, hidden_marker
from logpeek.models import ExpandMode, FilterRule, FilterType, LineSpan
from logpeek.parser import display_text
from logpeek.reader import is_pipe, read_file, read_file_initial, read_stdin
from logpeek.state import ViewState
from logpeek.widgets.log_view import gap_marker

if TYPE_CHECKING:
    from logpeek.models import AppConfig, LogLine

logger = logging.getLogger(__name__)

_CHUNKED_THRESHOLD = 5_000_000  # 5MB


def _setup_logging(*, verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def parse_span(value: str) -> LineSpan:
    """Parse ``START:END`` (zero-based, half-open) into a LineSpan."""
    start, sep, end = value.partition(":")
    if not sep:
        msg = f"expected START:END, got '{value}'"
        raise ValueError(msg)
    span = LineSpan(int(start), int(end))
    if span.start < 0 or span.end < span.start:
        msg = f"invalid line span '{value}'"
        raise ValueError(msg)
    return span


def parse_expansion(value: str) -> tuple[str, int | ExpandMode]:
    """Parse ``GAP_ID:MODE`` where MODE is a line count, all, next-match or prev-match."""
    gap_id, sep, mode = value.rpartition(":")
    if not sep or not gap_id:
        msg = f"expected GAP_ID:MODE, got '{value}'"
        raise ValueError(msg)
    if mode.isdigit():
        return gap_id, int(mode)
    return gap_id, ExpandMode(mode)


def _span_option(value: str | None, name: str) -> LineSpan | None:
    if value is None:
        return None
    try:
        return parse_span(value)
    except ValueError as e:
        typer.echo(f"Error: {name}: {e}")
        raise typer.Exit(1)  # noqa: B904


def _build_rules(
    includes: list[str] | None, excludes: list[str] | None, *, regex: bool, case_sensitive: bool
) -> list[FilterRule]:
    rules = [
        FilterRule(filter_type=FilterType.INCLUDE, pattern=p, is_regex=regex, case_sensitive=case_sensitive)
        for p in includes or []
    ]
    rules.extend(
        FilterRule(filter_type=FilterType.EXCLUDE, pattern=p, is_regex=regex, case_sensitive=case_sensitive)
        for p in excludes or []
    )
    return rules


def _reattach_tty() -> None:
    """Point fd 0 back at the terminal after stdin was consumed, for Textual keyboard input."""
    tty_fd = os.open("/dev/tty", os.O_RDONLY)
    os.dup2(tty_fd, sys.stdin.fileno())
    os.close(tty_fd)
    sys.stdin = os.fdopen(0)


def _apply_expansions(state: ViewState, expansions: list[str]) -> None:
    for value in expansions:
        try:
            gap_id, mode = parse_expansion(value)
        except ValueError as e:
            typer.echo(f"Error: --expand: {e}")
            raise typer.Exit(1)  # noqa: B904
        if not state.expand(gap_id, mode):
            logger.info("expansion %s had no effect", value)


def _print_display(state: ViewState, *, strip_prefix: bool) -> None:
    """Render the display list to the terminal with hidden-line markers."""
    console = Console(highlight=False)
    display = state.display
    for item in display.items:
        if item.gap_above is not None and item.gap_above.is_first:
            console.print(Text(f"  {hidden_marker(item.gap_above.remaining_gap)}", style="yellow"))
        line = Text(f"{gap_marker(item)} ", style="bold yellow")
        line.append(f"{item.line.line_number:>7} ", style="dim")
        forced = state.has_filters and not state.is_match(item.index)
        line.append(display_text(item.line, strip_prefix=strip_prefix), style="dim" if forced else "")
        console.print(line, overflow="ignore", crop=False, soft_wrap=True)
        if item.gap_below is not None:
            console.print(Text(f"  {hidden_marker(item.gap_below.remaining_gap)}", style="yellow"))
    logger.debug("printed %d of %d lines", len(display), display.total_lines)


def _run_batch(  # noqa: PLR0913
    lines: list[LogLine],
    rules: list[FilterRule],
    config: AppConfig,
    expansions: list[str],
    output: Path | None,
    fmt: str,
    *,
    prev_boundary: LineSpan | None,
    next_boundary: LineSpan | None,
    strip_prefix: bool,
) -> None:
    """Print or export the display list without the TUI."""
    state = ViewState(
        lines,
        context_lines=config.context_lines,
        prev_boundary=prev_boundary,
        next_boundary=next_boundary,
    )
    state.set_filters(rules)
    _apply_expansions(state, expansions)

    if output is None:
        _print_display(state, strip_prefix=strip_prefix)
        return

    try:
        export_fmt = ExportFormat(fmt)
    except ValueError:
        typer.echo(f"Error: unknown format '{fmt}'. Use: {', '.join(ExportFormat)}")
        raise typer.Exit(1)  # noqa: B904

    try:
        count = export_lines(state.display, export_fmt, output)
    except NotImplementedError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(1)  # noqa: B904
    typer.echo(f"Exported {count} lines to {output}")


def inspect(  # noqa: C901, PLR0912, PLR0913, PLR0917
    file: Annotated[Path | None, typer.Argument(help="Log file to view (default: stdin)")] = None,
    include: Annotated[
        list[str] | None, typer.Option("--filter", "-f", help="Show only lines matching (repeatable, OR)")
    ] = None,
    exclude: Annotated[list[str] | None, typer.Option("--exclude", "-x", help="Hide lines matching (repeatable)")] = None,
    regex: Annotated[bool, typer.Option("--regex", help="Treat filter patterns as regular expressions")] = False,  # noqa: FBT002
    case_sensitive: Annotated[bool, typer.Option("--case-sensitive", help="Match filter patterns case-sensitively")] = False,  # noqa: FBT002
    context: Annotated[
        int | None, typer.Option("--context", "-C", min=0, help="Context lines around each match")
    ] = None,
    prev_boundary: Annotated[
        str | None, typer.Option("--prev-boundary", help="Line span START:END that prev-match expansion stops at")
    ] = None,
    next_boundary: Annotated[
        str | None, typer.Option("--next-boundary", help="Line span START:END that next-match expansion stops at")
    ] = None,
    expand: Annotated[
        list[str] | None,
        typer.Option("--expand", "-e", help="Expand a gap before printing, as GAP_ID:MODE (e.g. down-76:next-match)"),
    ] = None,
    print_: Annotated[bool, typer.Option("--print", "-p", help="Print the display list instead of the TUI")] = False,  # noqa: FBT002
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Export displayed lines to file (no TUI)")] = None,
    fmt: Annotated[str, typer.Option("--format", help="Export format: raw, annotated")] = "raw",
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr")] = False,  # noqa: FBT002
) -> None:
    """View log lines, filter them, and reveal hidden lines around matches."""
    _setup_logging(verbose=verbose)

    if file is not None and not file.is_file():
        typer.echo(f"Error: {file} is not a file")
        raise typer.Exit(1)

    prev_span = _span_option(prev_boundary, "--prev-boundary")
    next_span = _span_option(next_boundary, "--next-boundary")

    config = load_config()
    overrides: dict[str, object] = {}
    if context is not None:
        overrides["context_lines"] = context
    if case_sensitive:
        overrides["case_sensitive"] = case_sensitive
    if overrides:
        config = config.model_copy(update=overrides)
    rules = _build_rules(include, exclude, regex=regex, case_sensitive=config.case_sensitive)

    pipe = file is None and is_pipe()
    if file is None and not pipe:
        typer.echo("Error: provide a file or pipe input")
        raise typer.Exit(1)

    batch = print_ or output is not None or bool(expand)
    if batch:
        lines = read_file(file) if file is not None else read_stdin()
        _run_batch(
            lines,
            rules,
            config,
            expand or [],
            output,
            fmt,
            prev_boundary=prev_span,
            next_boundary=next_span,
            strip_prefix=config.strip_prefix,
        )
        return

    chunked_path: Path | None = None
    if file is not None:
        if file.stat().st_size > _CHUNKED_THRESHOLD:
            lines = read_file_initial(file)
            chunked_path = file
        else:
            lines = read_file(file)
        source = str(file)
    else:
        lines = read_stdin()
        _reattach_tty()
        source = "stdin"

    from logpeek.app import LogPeekApp  # noqa: PLC0415

    log_app = LogPeekApp(
        lines=lines,
        source=source,
        rules=rules,
        prev_boundary=prev_span,
        next_boundary=next_span,
        file_path=chunked_path,
        config=config,
    )
    log_app.run(mouse=False)
