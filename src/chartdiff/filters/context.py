"""Context-line trimming for per-resource change groups."""

from __future__ import annotations

from dataclasses import replace
from typing import List

from chartdiff.diff.lines import is_change, is_identifier_line
from chartdiff.diff.models import ResourceChange

SEPARATOR = "..."


def trim_lines(lines: List[str], context_lines: int) -> List[str]:
    """Keep changed lines plus up to *context_lines* of context on each side.

    A ``...`` line marks every gap between kept ranges. Lines without any
    change, and negative context counts, leave *lines* as they are. The
    identifier header on the first line is always kept.
    """
    if context_lines < 0:
        return list(lines)
    changed = [i for i, line in enumerate(lines) if is_change(line)]
    if not changed:
        return list(lines)

    keep = set()
    for i in changed:
        keep.update(range(max(0, i - context_lines), min(len(lines), i + context_lines + 1)))
    if lines and is_identifier_line(lines[0]):
        keep.add(0)

    trimmed: List[str] = []
    previous = -1
    for i in sorted(keep):
        if trimmed and i != previous + 1:
            trimmed.append(SEPARATOR)
        trimmed.append(lines[i])
        previous = i
    return trimmed


def trim_context(changes: List[ResourceChange], context_lines: int) -> List[ResourceChange]:
    """Return copies of *changes* with their lines trimmed to context."""
    return [replace(c, lines=trim_lines(c.lines, context_lines)) for c in changes]
