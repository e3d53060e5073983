"""Markdown export of an analysis result."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from chartdiff.analysis.engine import AnalysisResult
from chartdiff.output.text_report import TOP_KINDS, timestamp
from chartdiff.stats.models import Statistics


def _escape(cell: str) -> str:
    return cell.replace("|", "\\|")


def _stats_section(stats: Statistics) -> List[str]:
    s = stats.summary
    out = [
        "## Statistics",
        "",
        "| Metric | Count |",
        "| --- | ---: |",
        f"| Total resources | {s.total_resources} |",
        f"| Added | {s.resources_added} |",
        f"| Removed | {s.resources_removed} |",
        f"| Modified | {s.resources_modified} |",
        f"| Unchanged | {s.resources_unchanged} |",
        f"| Change groups | {s.total_changes} |",
        "",
        f"**Impact level:** {stats.impact.level.upper()}",
        "",
        f"**Lines:** +{stats.lines.added} / -{stats.lines.removed} / "
        f"{stats.lines.unchanged} unchanged ({stats.lines.total} total)",
        "",
    ]
    if stats.by_kind:
        out += ["### Changes by kind", "", "| Kind | Count |", "| --- | ---: |"]
        out += [f"| {_escape(k.kind)} | {k.count} |" for k in stats.by_kind[:TOP_KINDS]]
        out.append("")
    if stats.impact.critical_changes:
        out += ["### Critical changes", ""]
        out += [f"- `{c.resource}`: {c.field}" for c in stats.impact.critical_changes]
        out.append("")
    if stats.impact.breaking_changes:
        out += ["### Breaking changes", ""]
        out += [
            f"- `{b.resource}`: `{b.field or '(unknown path)'}` ({b.severity})"
            for b in stats.impact.breaking_changes
        ]
        out.append("")
    return out


def render(
    result: AnalysisResult,
    *,
    include_stats: bool = True,
    now: Optional[datetime] = None,
) -> str:
    """Return the report as Markdown."""
    out = [
        "# Helm Chart Diff Report",
        "",
        f"- **Generated:** {timestamp(now)}",
        f"- **Version 1:** `{result.version1}`",
        f"- **Version 2:** `{result.version2}`",
        "",
    ]
    if include_stats and result.has_diff:
        out += _stats_section(result.statistics)
    out += ["## Diff", ""]
    if result.has_diff:
        out += ["```diff", result.filtered_text, "```"]
    else:
        out.append("No differences found between versions.")
    return "\n".join(out) + "\n"
