"""Analysis engine — orchestrates the full diff pipeline.

raw text → text filters → segmentation → categorization → statistics
→ context trimming. Every stage is pure, so running the engine twice on
the same input and options yields identical results.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from chartdiff.config.schema import FilterOptions
from chartdiff.diff.categorizer import categorize_all, group_by_category
from chartdiff.diff.models import ResourceChange
from chartdiff.diff.segmenter import segment
from chartdiff.filters.chain import exclude_kinds, filter_text
from chartdiff.filters.context import trim_context
from chartdiff.stats.aggregator import aggregate
from chartdiff.stats.models import Statistics

_log = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Complete result of one comparison analysis."""

    raw_text: str = ""
    filtered_text: str = ""
    changes: List[ResourceChange] = field(default_factory=list)  # trimmed for display
    statistics: Statistics = field(default_factory=Statistics)
    version1: str = ""
    version2: str = ""

    @property
    def has_diff(self) -> bool:
        return bool(self.raw_text.strip())

    @property
    def kinds(self) -> List[str]:
        return sorted({c.kind for c in self.changes})

    def grouped(self) -> List[Tuple[str, List[ResourceChange]]]:
        """Changes grouped by category, categories in rank order."""
        return group_by_category(self.changes)


def analyze(
    raw_text: str,
    options: Optional[FilterOptions] = None,
    *,
    version1: str = "",
    version2: str = "",
) -> AnalysisResult:
    """Run the full pipeline on *raw_text* and return an AnalysisResult."""
    options = options or FilterOptions()

    if not raw_text.strip():
        _log.debug("empty diff; nothing to analyze")
        return AnalysisResult(raw_text=raw_text, version1=version1, version2=version2)

    filtered = filter_text(raw_text, options)
    changes = categorize_all(segment(filtered)) if filtered.strip() else []
    changes = exclude_kinds(changes, options.suppress_kinds)
    statistics = aggregate(changes, filtered)
    display = trim_context(changes, options.context_lines)

    _log.info(
        "analyzed %d change group(s) across %d resource(s); impact %s",
        statistics.summary.total_changes,
        statistics.summary.total_resources,
        statistics.impact.level,
    )

    return AnalysisResult(
        raw_text=raw_text,
        filtered_text=filtered,
        changes=display,
        statistics=statistics,
        version1=version1,
        version2=version2,
    )
