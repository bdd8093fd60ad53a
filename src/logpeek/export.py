"""Export displayed log lines to files."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from logpeek.display import DisplayList


class ExportFormat(StrEnum):
    """Supported export formats."""

    RAW = "raw"
    ANNOTATED = "annotated"


def hidden_marker(count: int) -> str:
    noun = "line" if count == 1 else "lines"
    return f"... {count} hidden {noun} ..."


def annotated_lines(display: DisplayList) -> Iterator[str]:
    """Yield displayed raw lines with a marker line wherever lines are hidden."""
    for item in display.items:
        if item.gap_above is not None and item.gap_above.is_first:
            yield hidden_marker(item.gap_above.remaining_gap)
        yield item.line.raw
        if item.gap_below is not None:
            yield hidden_marker(item.gap_below.remaining_gap)


def _export_raw(display: DisplayList, output_path: Path) -> int:
    """Export displayed lines as raw text, one per line."""
    output_path.write_text("".join(f"{item.line.raw}\n" for item in display.items), encoding="utf-8")
    return len(display)


def _export_annotated(display: DisplayList, output_path: Path) -> int:
    """Export displayed lines with hidden-line markers between them."""
    output_path.write_text("".join(f"{text}\n" for text in annotated_lines(display)), encoding="utf-8")
    return len(display)


_EXPORTERS: dict[ExportFormat, Callable[[DisplayList, Path], int]] = {
    ExportFormat.RAW: _export_raw,
    ExportFormat.ANNOTATED: _export_annotated,
}


def export_lines(display: DisplayList, fmt: ExportFormat, output_path: Path) -> int:
    """Export displayed lines in the specified format. Returns the number of log lines written."""
    exporter = _EXPORTERS.get(fmt)
    if exporter is None:
        msg = f"Export format '{fmt}' not yet implemented"
        raise NotImplementedError(msg)
    return exporter(display, output_path)
