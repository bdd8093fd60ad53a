"""Tests for exporting displayed lines."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from logpeek.display import build_display_list
from logpeek.export import ExportFormat, annotated_lines, export_lines, hidden_marker
from logpeek.models import ForcedRange

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from logpeek.models import LogLine


class TestHiddenMarker:
    def test_singular_and_plural(self) -> None:
        assert hidden_marker(1) == "... 1 hidden line ..."
        assert hidden_marker(42) == "... 42 hidden lines ..."


class TestAnnotatedLines:
    def test_markers_around_gaps(self, make_lines: Callable[[int], list[LogLine]]) -> None:
        display = build_display_list([2, 3, 7], make_lines(10), [])
        assert list(annotated_lines(display)) == [
            "... 2 hidden lines ...",
            "line 2",
            "line 3",
            "... 3 hidden lines ...",
            "line 7",
            "... 2 hidden lines ...",
        ]

    def test_no_markers_when_nothing_hidden(self, make_lines: Callable[[int], list[LogLine]]) -> None:
        display = build_display_list([0], make_lines(3), [ForcedRange(1, 3)])
        assert list(annotated_lines(display)) == ["line 0", "line 1", "line 2"]


class TestExportLines:
    def test_raw(self, tmp_path: Path, make_lines: Callable[[int], list[LogLine]]) -> None:
        display = build_display_list([1, 4], make_lines(6), [])
        out = tmp_path / "out.log"
        assert export_lines(display, ExportFormat.RAW, out) == 2
        assert out.read_text() == "line 1\nline 4\n"

    def test_annotated(self, tmp_path: Path, make_lines: Callable[[int], list[LogLine]]) -> None:
        display = build_display_list([1, 4], make_lines(6), [])
        out = tmp_path / "out.log"
        assert export_lines(display, ExportFormat.ANNOTATED, out) == 2
        assert out.read_text().splitlines() == [
            "... 1 hidden line ...",
            "line 1",
            "... 2 hidden lines ...",
            "line 4",
            "... 1 hidden line ...",
        ]

    def test_unknown_format(self, tmp_path: Path, make_lines: Callable[[int], list[LogLine]]) -> None:
        display = build_display_list([0], make_lines(1), [])
        with pytest.raises(NotImplementedError):
            export_lines(display, "csv", tmp_path / "out.csv")  # type: ignore[arg-type]
