"""Plain-text export of an analysis result."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from chartdiff.analysis.engine import AnalysisResult
from chartdiff.stats.models import Statistics

TOP_KINDS = 10


def timestamp(now: Optional[datetime] = None) -> str:
    """Return an ISO-8601 UTC timestamp for report headers."""
    moment = now or datetime.now(timezone.utc)
    return moment.isoformat(timespec="seconds")


def _stats_lines(stats: Statistics) -> List[str]:
    s = stats.summary
    lines = [
        "STATISTICS",
        "-" * 40,
        f"Total resources:   {s.total_resources}",
        f"Added:             {s.resources_added}",
        f"Removed:           {s.resources_removed}",
        f"Modified:          {s.resources_modified}",
        f"Unchanged:         {s.resources_unchanged}",
        f"Change groups:     {s.total_changes}",
        f"Impact level:      {stats.impact.level.upper()}",
        f"Lines:             +{stats.lines.added} -{stats.lines.removed} "
        f"~{stats.lines.unchanged} (total {stats.lines.total})",
    ]
    if stats.by_kind:
        lines += ["", "Changes by kind:"]
        lines += [f"  {k.kind}: {k.count}" for k in stats.by_kind[:TOP_KINDS]]
    if stats.impact.critical_changes:
        lines += ["", "Critical changes:"]
        lines += [f"  - {c.resource}: {c.field}" for c in stats.impact.critical_changes]
    if stats.impact.breaking_changes:
        lines += ["", "Breaking changes:"]
        lines += [
            f"  - {b.resource}: {b.field or '(unknown path)'} [{b.severity}]"
            for b in stats.impact.breaking_changes
        ]
    return lines


def render(
    result: AnalysisResult,
    *,
    include_stats: bool = True,
    now: Optional[datetime] = None,
) -> str:
    """Return the report as plain text."""
    lines = [
        "HELM CHART DIFF REPORT",
        "=" * 40,
        f"Generated: {timestamp(now)}",
        f"Version 1: {result.version1}",
        f"Version 2: {result.version2}",
        "",
    ]
    if include_stats and result.has_diff:
        lines += _stats_lines(result.statistics)
        lines.append("")
    lines += ["DIFF", "-" * 40]
    lines.append(result.filtered_text if result.has_diff else "No differences found between versions.")
    return "\n".join(lines) + "\n"
