"""Statistics aggregation over filtered resource changes.

A pure fold: every call starts from zero, nothing is cached between calls.
Added/removed/modified is decided per change group; a resource's pre- and
post-image are never correlated.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence

from chartdiff.diff.lines import classify_line
from chartdiff.diff.models import LineKind, ResourceChange
from chartdiff.stats.models import (
    BreakingChange,
    CategoryStats,
    CriticalChange,
    Impact,
    KindStats,
    LineStats,
    Statistics,
    Summary,
)

MAX_REPORTED_CHANGES = 10
_CRITICAL_TRIGGER = 5  # more critical changes than this → high impact

_REQUIRED_MARKERS = ("required:", "requiredFields:")


# A field path may start the line, follow a diff marker, or follow a dot.
_REPLICAS_RE = re.compile(r"(?:^|[\s.+\-])spec\.replicas")
_CONTAINERS_RE = re.compile(r"(?:^|[\s.+\-])spec\.template\.spec\.containers")
_RESOURCES_RE = re.compile(r"(?:^|[\s.+\-])spec\.resources")


def detect_critical(line: str) -> Optional[str]:
    """Return the critical field a line touches, if any."""
    if _REPLICAS_RE.search(line):
        return "replicas"
    if _CONTAINERS_RE.search(line) and "image:" in line:
        return "image"
    if _RESOURCES_RE.search(line):
        return "resources"
    return None


def detect_breaking(line: str) -> bool:
    """True for a removed line that drops a required field."""
    if classify_line(line) is not LineKind.REMOVAL:
        return False
    return any(marker in line for marker in _REQUIRED_MARKERS)


def impact_level(summary: Summary, critical: int, breaking: int) -> str:
    if summary.resources_removed or breaking or critical > _CRITICAL_TRIGGER:
        return "high"
    if summary.resources_modified or critical:
        return "medium"
    return "low"


def aggregate(changes: Sequence[ResourceChange], filtered_text: str) -> Statistics:
    """Compute a Statistics snapshot over *changes*.

    *filtered_text* supplies the overall line total, counted independently
    of the per-group scan.
    """
    summary = Summary(total_changes=len(changes))
    by_kind: Dict[str, KindStats] = {}
    by_category: Dict[str, CategoryStats] = {}
    line_stats = LineStats()
    critical: List[CriticalChange] = []
    breaking: List[BreakingChange] = []
    seen: set[str] = set()

    for change in changes:
        key = change.resource_key
        if key not in seen:
            seen.add(key)
            summary.total_resources += 1

        kind_stats = by_kind.setdefault(change.kind, KindStats(kind=change.kind))
        kind_stats.count += 1
        by_category.setdefault(
            change.category, CategoryStats(category=change.category)
        ).resources.add(key)

        has_additions = False
        has_removals = False
        for line in change.lines:
            line_kind = classify_line(line)
            if line_kind is LineKind.ADDITION:
                line_stats.added += 1
                has_additions = True
            elif line_kind is LineKind.REMOVAL:
                line_stats.removed += 1
                has_removals = True
            elif line_kind is LineKind.CONTEXT and line.strip():
                line_stats.unchanged += 1

            field = detect_critical(line)
            if field is not None:
                critical.append(
                    CriticalChange(resource=key, kind=change.kind, field=field, line=line.strip())
                )
            if detect_breaking(line):
                breaking.append(
                    BreakingChange(resource=key, kind=change.kind, field=change.path, line=line.strip())
                )

        if has_additions and has_removals:
            summary.resources_modified += 1
            kind_stats.modified += 1
        elif has_additions:
            summary.resources_added += 1
            kind_stats.added += 1
        elif has_removals:
            summary.resources_removed += 1
            kind_stats.removed += 1
        else:
            summary.resources_unchanged += 1
            kind_stats.unchanged += 1

    line_stats.total = len(filtered_text.splitlines())

    return Statistics(
        summary=summary,
        by_kind=sorted(by_kind.values(), key=lambda k: -k.count),
        by_category=sorted(by_category.values(), key=lambda c: -c.count),
        lines=line_stats,
        impact=Impact(
            level=impact_level(summary, len(critical), len(breaking)),
            critical_changes=critical[:MAX_REPORTED_CHANGES],
            breaking_changes=breaking[:MAX_REPORTED_CHANGES],
        ),
    )
