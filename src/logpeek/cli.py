"""CLI entry point for logpeek."""

from __future__ import annotations

import typer

from logpeek.commands.inspect import inspect

app = typer.Typer(add_completion=False)
app.command()(inspect)


def main() -> None:
    """Entry point for the CLI."""
    app()
