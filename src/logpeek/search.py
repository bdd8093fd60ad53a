"""Search engine for highlighting text matches in displayed log lines."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from logpeek.parser import display_text

if TYPE_CHECKING:
    from collections.abc import Iterable

    from logpeek.models import DisplayItem, SearchQuery


def find_in_text(text: str, query: SearchQuery) -> list[tuple[int, int]]:
    """Find all (start, end) match offsets of a query in one string."""
    if query.is_regex:
        flags = 0 if query.case_sensitive else re.IGNORECASE
        try:
            pattern = re.compile(query.pattern, flags)
        except re.error:
            return []
        return [(m.start(), m.end()) for m in pattern.finditer(text) if m.end() > m.start()]

    needle = query.pattern if query.case_sensitive else query.pattern.lower()
    if not needle:
        return []
    haystack = text if query.case_sensitive else text.lower()
    results: list[tuple[int, int]] = []
    start = 0
    while True:
        pos = haystack.find(needle, start)
        if pos == -1:
            break
        results.append((pos, pos + len(needle)))
        start = pos + 1
    return results


def find_matches(
    items: Iterable[DisplayItem], query: SearchQuery, *, strip_prefix: bool = False
) -> dict[int, list[tuple[int, int]]]:
    """Find matches in display items, keyed by line index.

    Offsets are relative to each line's raw text. With ``strip_prefix``, hits
    that lie wholly inside the hidden timestamp/level prefix are dropped.
    Lines without matches are omitted.
    """
    results: dict[int, list[tuple[int, int]]] = {}
    for item in items:
        raw = item.line.raw
        spans = find_in_text(raw, query)
        if strip_prefix and spans:
            prefix = len(raw) - len(display_text(item.line))
            spans = [(start, end) for start, end in spans if end > prefix]
        if spans:
            results[item.index] = spans
    return results
