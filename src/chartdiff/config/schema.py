"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

SecretHandling = Literal["suppress", "show", "decode"]
ImpactLevel = Literal["low", "medium", "high"]
OutputFormat = Literal["terminal", "text", "markdown", "json"]

SECRET_MODES = ("suppress", "show", "decode")
OUTPUT_FORMATS = ("terminal", "text", "markdown", "json")
FAIL_ON_LEVELS = ("none", "low", "medium", "high")

IMPACT_ORDER: dict[str, int] = {
    "low": 0,
    "medium": 1,
    "high": 2,
}


def impact_at_or_above(level: str, threshold: str) -> bool:
    """Return True if impact *level* is at or above *threshold*.

    A threshold of ``"none"`` never trips.
    """
    if threshold not in IMPACT_ORDER:
        return False
    return IMPACT_ORDER.get(level, 0) >= IMPACT_ORDER[threshold]


@dataclass
class FilterOptions:
    """User-selected exclusions applied before display and statistics."""

    ignore_labels: bool = False
    secret_handling: SecretHandling = "suppress"
    context_lines: int = 3  # negative = no trimming
    suppress_kinds: List[str] = field(default_factory=list)
    suppress_regex: Optional[str] = None


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_stats: bool = True
    fail_on: str = "none"  # none | low | medium | high


@dataclass
class HelmConfig:
    release_name: str = "diff-comparison"
    timeout: int = 60  # seconds per helm/dyff invocation
    use_dyff: bool = True


@dataclass
class ChartDiffConfig:
    version: str = "1.0"
    filters: FilterOptions = field(default_factory=FilterOptions)
    output: OutputConfig = field(default_factory=OutputConfig)
    helm: HelmConfig = field(default_factory=HelmConfig)
