"""Analysis engine — the end-to-end diff pipeline."""

from chartdiff.analysis.engine import AnalysisResult, analyze

__all__ = ["AnalysisResult", "analyze"]
