"""Statistics data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Set


@dataclass
class Summary:
    total_resources: int = 0
    resources_added: int = 0
    resources_removed: int = 0
    resources_modified: int = 0
    resources_unchanged: int = 0
    total_changes: int = 0  # change groups, not distinct resources


@dataclass
class KindStats:
    kind: str
    count: int = 0
    added: int = 0
    removed: int = 0
    modified: int = 0
    unchanged: int = 0


@dataclass
class CategoryStats:
    category: str
    resources: Set[str] = field(default_factory=set)

    @property
    def count(self) -> int:
        return len(self.resources)


@dataclass
class LineStats:
    added: int = 0
    removed: int = 0
    unchanged: int = 0
    total: int = 0


@dataclass
class CriticalChange:
    """A field change likely to affect runtime behaviour."""

    resource: str  # kind/name[/namespace]
    kind: str
    field: str  # replicas | image | resources
    line: str


@dataclass
class BreakingChange:
    """Removal of a required field."""

    resource: str
    kind: str
    field: str  # the change group's path
    line: str
    severity: str = "high"


@dataclass
class Impact:
    level: str = "low"  # high | medium | low
    critical_changes: List[CriticalChange] = field(default_factory=list)
    breaking_changes: List[BreakingChange] = field(default_factory=list)


@dataclass
class Statistics:
    """Read-only snapshot over one filtered comparison."""

    summary: Summary = field(default_factory=Summary)
    by_kind: List[KindStats] = field(default_factory=list)
    by_category: List[CategoryStats] = field(default_factory=list)
    lines: LineStats = field(default_factory=LineStats)
    impact: Impact = field(default_factory=Impact)
