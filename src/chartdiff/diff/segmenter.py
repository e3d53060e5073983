"""Resource segmenter — split raw structural-diff text into per-resource groups.

Two input shapes are recognised without being told which one arrived:

* path-oriented output (one field path per block, tagged with a
  ``(kind/namespace/name)`` or ``(apiVersion/kind/namespace/name)``
  identifier), optionally wrapping a traditional unified diff;
* line-oriented YAML diffs whose documents are separated by ``---``.

Strategies are tried in that order; when neither yields a group the whole
text becomes a single catch-all group.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable, List, Optional

from chartdiff.diff.categorizer import ALL_CHANGES, categorize
from chartdiff.diff.lines import (
    is_unified_header,
    is_yaml_separator,
    match_identifier,
)
from chartdiff.diff.models import ResourceChange

_KIND_RE = re.compile(r"^[+-]?\s*kind:\s*(.+)$", re.IGNORECASE)
_NAME_RE = re.compile(r"^[+-]?\s*name:\s*(.+)$", re.IGNORECASE)
_NAMESPACE_RE = re.compile(r"^[+-]?\s*namespace:\s*(.+)$", re.IGNORECASE)


class _ScanState(Enum):
    IDLE = "idle"
    IN_GROUP = "in_group"


def _field_value(match: "re.Match[str]") -> str:
    return match.group(1).strip().replace('"', "").replace("'", "")


class ResourceSegmenter:
    """Split diff text into ``ResourceChange`` groups.

    Usage::

        changes = ResourceSegmenter(raw_text).segment()
    """

    def __init__(self, raw_text: str) -> None:
        self._raw = raw_text
        self._lines = raw_text.split("\n")

    def segment(self) -> List[ResourceChange]:
        strategies: List[Callable[[], List[ResourceChange]]] = [
            self.segment_by_identifier,
            self.segment_by_document,
        ]
        for strategy in strategies:
            changes = strategy()
            if changes:
                return changes
        return [self.catch_all()]

    # ---- path-oriented ----

    def segment_by_identifier(self) -> List[ResourceChange]:
        """Group lines under the identifier line that precedes them.

        Blank lines are held back until the next non-blank line decides where
        they go: dropped when it opens a new group, kept otherwise.
        """
        changes: List[ResourceChange] = []
        state = _ScanState.IDLE
        current: Optional[ResourceChange] = None
        pending_blank: List[str] = []

        for line in self._lines:
            hit = match_identifier(line)

            if hit is not None:
                if current is not None:
                    changes.append(current)
                pending_blank.clear()
                path, ident = hit
                current = ResourceChange(
                    kind=ident.kind,
                    name=ident.name,
                    namespace=ident.namespace,
                    path=path,
                    lines=[line],
                )
                state = _ScanState.IN_GROUP
                continue

            if state is _ScanState.IDLE:
                if is_unified_header(line):
                    current = ResourceChange(
                        kind="Unknown",
                        name="all",
                        category=ALL_CHANGES,
                        lines=[line],
                    )
                    state = _ScanState.IN_GROUP
                continue

            if current is None:
                continue
            if not line.strip():
                pending_blank.append(line)
                continue
            current.lines.extend(pending_blank)
            pending_blank.clear()
            current.lines.append(line)

        if current is not None:
            current.lines.extend(pending_blank)
            changes.append(current)
        return changes

    # ---- line-oriented fallback ----

    def segment_by_document(self) -> List[ResourceChange]:
        """Split on ``---`` separators and read kind/name/namespace fields."""
        sections: List[List[str]] = [[]]
        for line in self._lines:
            if is_yaml_separator(line):
                sections.append([])
            else:
                sections[-1].append(line)

        changes: List[ResourceChange] = []
        for section in sections:
            if not any(line.strip() for line in section):
                continue
            kind: Optional[str] = None
            name: Optional[str] = None
            namespace: Optional[str] = None
            for line in section:
                trimmed = line.strip()
                if kind is None and (m := _KIND_RE.match(trimmed)):
                    kind = _field_value(m)
                elif kind is not None and name is None and (m := _NAME_RE.match(trimmed)):
                    name = _field_value(m)
                if namespace is None and (m := _NAMESPACE_RE.match(trimmed)):
                    namespace = _field_value(m)
            if not kind:
                continue
            changes.append(
                ResourceChange(
                    kind=kind,
                    name=name or "unknown",
                    namespace=None if namespace in (None, "", "default") else namespace,
                    category=categorize("", kind),
                    lines=list(section),
                )
            )
        return changes

    # ---- catch-all ----

    def catch_all(self) -> ResourceChange:
        return ResourceChange(
            kind="All Resources",
            name="all",
            category=ALL_CHANGES,
            lines=list(self._lines),
        )


def segment(raw_text: str) -> List[ResourceChange]:
    """Split *raw_text* into ordered per-resource change groups."""
    return ResourceSegmenter(raw_text).segment()
