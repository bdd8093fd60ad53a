"""Filter engine: which log lines pass the active rules."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from logpeek.models import FilterType

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Sequence

    from logpeek.models import FilterRule, LogLine


def apply_filters(lines: Sequence[LogLine], rules: list[FilterRule]) -> list[int]:
    """Apply filter rules to log lines, returning ascending indices of matching lines.

    Include filters use OR logic (match any include).
    Exclude filters use AND logic (excluded if matches any exclude).
    No active rules means every line matches.
    """
    includes = [_compile(r) for r in rules if r.enabled and r.filter_type == FilterType.INCLUDE]
    excludes = [_compile(r) for r in rules if r.enabled and r.filter_type == FilterType.EXCLUDE]

    if not includes and not excludes:
        return list(range(len(lines)))

    result: list[int] = []
    for i, line in enumerate(lines):
        if includes and not any(m(line.raw) for m in includes):
            continue
        if any(m(line.raw) for m in excludes):
            continue
        result.append(i)
    return result


def has_active_rules(rules: list[FilterRule]) -> bool:
    return any(r.enabled for r in rules)


def _compile(rule: FilterRule) -> Callable[[str], bool]:
    """Build a matcher for one rule. Invalid regex patterns match nothing."""
    if rule.is_regex:
        flags = 0 if rule.case_sensitive else re.IGNORECASE
        try:
            pattern = re.compile(rule.pattern, flags)
        except re.error:
            return lambda _text: False
        return lambda text: pattern.search(text) is not None

    if rule.case_sensitive:
        needle = rule.pattern
        return lambda text: needle in text
    needle = rule.pattern.lower()
    return lambda text: needle in text.lower()


def expand_with_context(matching_indices: Collection[int], total_count: int, context_lines: int) -> list[int]:
    """Widen each match to include ``context_lines`` lines before and after it.

    Returns ascending indices clamped to ``[0, total_count)``.
    """
    if context_lines <= 0:
        return sorted(matching_indices)

    widened: set[int] = set()
    for match in matching_indices:
        start = max(0, match - context_lines)
        end = min(total_count, match + context_lines + 1)
        widened.update(range(start, end))
    return sorted(widened)
