"""JSON reporter for pipelines and other tooling."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Dict, List

from chartdiff.analysis.engine import AnalysisResult
from chartdiff.helm.adapter import VersionListing


def to_dict(result: AnalysisResult) -> Dict[str, Any]:
    """Convert an AnalysisResult to a JSON-serialisable dict."""
    stats = result.statistics
    categories: List[Dict[str, Any]] = []
    for category, changes in result.grouped():
        categories.append({
            "category": category,
            "resources": [
                {
                    "kind": c.kind,
                    "name": c.name,
                    **({"namespace": c.namespace} if c.namespace else {}),
                    "path": c.path,
                    "lines": c.lines,
                }
                for c in changes
            ],
        })

    return {
        "version": "1.0",
        "version1": result.version1,
        "version2": result.version2,
        "has_diff": result.has_diff,
        "summary": asdict(stats.summary),
        "by_kind": [asdict(k) for k in stats.by_kind],
        "by_category": [
            {"category": c.category, "count": c.count, "resources": sorted(c.resources)}
            for c in stats.by_category
        ],
        "lines": asdict(stats.lines),
        "impact": asdict(stats.impact),
        "categories": categories,
    }


def render(result: AnalysisResult) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2)


def render_versions(listing: VersionListing) -> str:
    """Return a repository's tags and branches as JSON."""
    return json.dumps({"tags": listing.tags, "branches": listing.branches}, indent=2)
