"""Thin adapters over git, helm and dyff."""

from chartdiff.helm.adapter import (
    CompareRequest,
    ComparisonResult,
    HelmError,
    VersionListing,
    compare_versions,
    diff_manifests,
    list_versions,
    parse_chart_repositories,
    render_chart,
    validate_repository_url,
)

__all__ = [
    "CompareRequest",
    "ComparisonResult",
    "HelmError",
    "VersionListing",
    "compare_versions",
    "diff_manifests",
    "list_versions",
    "parse_chart_repositories",
    "render_chart",
    "validate_repository_url",
]
