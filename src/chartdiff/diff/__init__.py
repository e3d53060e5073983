"""Diff segmentation, line classification, and categorization."""

from chartdiff.diff.categorizer import (
    categorize,
    categorize_all,
    category_sort_key,
    group_by_category,
)
from chartdiff.diff.lines import classify_line, match_identifier, parse_identifier
from chartdiff.diff.models import LineKind, ResourceChange, ResourceIdentifier
from chartdiff.diff.segmenter import ResourceSegmenter, segment

__all__ = [
    "LineKind",
    "ResourceChange",
    "ResourceIdentifier",
    "ResourceSegmenter",
    "categorize",
    "categorize_all",
    "category_sort_key",
    "classify_line",
    "group_by_category",
    "match_identifier",
    "parse_identifier",
    "segment",
]
