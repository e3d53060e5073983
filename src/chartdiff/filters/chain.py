"""Text-level filter chain — metadata, kind, and regex suppression.

Each step takes and returns the diff as a list of lines so filtered-out
content never reaches segmentation, display, or statistics. Steps run in
a fixed order: metadata, kinds, regex, secrets.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Iterable, List, Optional, Set

from chartdiff.config.schema import FilterOptions
from chartdiff.diff.lines import match_identifier
from chartdiff.diff.models import ResourceChange
from chartdiff.filters.secrets import apply_secret_handling

_log = logging.getLogger(__name__)


class _BlockState(Enum):
    KEEPING = "keeping"
    SKIPPING = "skipping"


def _is_metadata_header(line: str) -> bool:
    hit = match_identifier(line)
    if hit is None:
        return False
    path, ident = hit
    return "metadata." in path and ident.parts >= 3


def suppress_metadata(lines: List[str]) -> List[str]:
    """Drop every ``metadata.*`` block, its identifier line included.

    A block runs until the next identifier line that is not itself a
    metadata block, or the end of the text.
    """
    kept: List[str] = []
    state = _BlockState.KEEPING
    for line in lines:
        if _is_metadata_header(line):
            state = _BlockState.SKIPPING
            continue
        if state is _BlockState.SKIPPING:
            if match_identifier(line) is None:
                continue
            state = _BlockState.KEEPING
        kept.append(line)
    return kept


def _kind_set(kinds: Iterable[str]) -> Set[str]:
    return {k.strip().lower() for k in kinds if k.strip()}


def suppress_kinds(lines: List[str], kinds: Iterable[str]) -> List[str]:
    """Drop every block whose resource kind is in *kinds* (case-insensitive)."""
    suppressed = _kind_set(kinds)
    if not suppressed:
        return list(lines)
    kept: List[str] = []
    state = _BlockState.KEEPING
    for line in lines:
        hit = match_identifier(line)
        if hit is not None:
            state = (
                _BlockState.SKIPPING
                if hit[1].kind.lower() in suppressed
                else _BlockState.KEEPING
            )
        if state is _BlockState.KEEPING:
            kept.append(line)
    return kept


def exclude_kinds(changes: List[ResourceChange], kinds: Iterable[str]) -> List[ResourceChange]:
    """Drop segmented groups whose kind is in *kinds* (case-insensitive).

    Covers groups the text step cannot see: ``---`` sections identified by
    their ``kind:`` field and the synthetic unified-diff group.
    """
    suppressed = _kind_set(kinds)
    if not suppressed:
        return list(changes)
    return [c for c in changes if c.kind.lower() not in suppressed]


def compile_regex(pattern: Optional[str]) -> Optional["re.Pattern[str]"]:
    """Compile a suppression regex; invalid patterns are logged and ignored."""
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        _log.warning("Ignoring invalid suppression regex %r: %s", pattern, exc)
        return None


def suppress_regex(lines: List[str], pattern: Optional["re.Pattern[str]"]) -> List[str]:
    """Drop any line matching *pattern*."""
    if pattern is None:
        return list(lines)
    return [line for line in lines if pattern.search(line) is None]


def filter_lines(lines: List[str], options: FilterOptions) -> List[str]:
    """Run the text-level steps of the chain over *lines*."""
    if options.ignore_labels:
        lines = suppress_metadata(lines)
    if options.suppress_kinds:
        lines = suppress_kinds(lines, options.suppress_kinds)
    lines = suppress_regex(lines, compile_regex(options.suppress_regex))
    return apply_secret_handling(lines, options.secret_handling)


def filter_text(raw_text: str, options: FilterOptions) -> str:
    """Return *raw_text* with every text-level exclusion applied."""
    return "\n".join(filter_lines(raw_text.split("\n"), options))
