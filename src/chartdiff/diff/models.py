"""Data models for segmented chart diffs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class LineKind(str, Enum):
    HEADER = "header"
    ADDITION = "addition"
    REMOVAL = "removal"
    CONTEXT = "context"


@dataclass
class ResourceIdentifier:
    """Parsed ``kind/namespace/name`` or ``apiVersion/kind/namespace/name``."""

    kind: str = "Unknown"
    name: str = "unknown"
    namespace: Optional[str] = None  # None when "default" or empty
    parts: int = 0  # slash-separated part count seen in the source


@dataclass
class ResourceChange:
    """All lines of a diff that belong to one resource identifier."""

    kind: str = "Unknown"
    name: str = "unknown"
    namespace: Optional[str] = None
    path: str = ""  # field path preceding the identifier, "" if unknown
    category: str = ""  # filled in by the categorizer
    lines: List[str] = field(default_factory=list)  # header line included

    @property
    def resource_key(self) -> str:
        """``kind/name`` plus ``/namespace`` when one is set."""
        key = f"{self.kind}/{self.name}"
        if self.namespace:
            key += f"/{self.namespace}"
        return key

    @property
    def text(self) -> str:
        return "\n".join(self.lines)
