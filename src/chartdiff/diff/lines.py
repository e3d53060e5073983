"""Line classification and resource-identifier parsing.

Every stage of the pipeline interprets diff lines through these helpers so
the segmenter, the filter chain and the statistics agree on what a header,
an addition or a removal is.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from chartdiff.diff.models import LineKind, ResourceIdentifier

# "(v1/ServiceAccount/default/sa)": no whitespace, at least one slash
_IDENTIFIER_RE = re.compile(r"\(([^()\s]*/[^()\s]*)\)")
# "--- a/file" or "+++ b/file"; a bare "---" is a YAML document separator
_UNIFIED_HEADER_RE = re.compile(r"^(?:\+\+\+|---)\s+\S")


def classify_line(line: str) -> LineKind:
    """Tag a raw diff line as header, addition, removal or context."""
    if line.startswith("+++") or line.startswith("---"):
        return LineKind.HEADER
    if line.startswith("+"):
        return LineKind.ADDITION
    if line.startswith("-"):
        return LineKind.REMOVAL
    return LineKind.CONTEXT


def is_change(line: str) -> bool:
    return classify_line(line) in (LineKind.ADDITION, LineKind.REMOVAL)


def is_unified_header(line: str) -> bool:
    return _UNIFIED_HEADER_RE.match(line.strip()) is not None


def is_yaml_separator(line: str) -> bool:
    return line.strip() == "---"


def _normalise_namespace(namespace: Optional[str]) -> Optional[str]:
    if not namespace or namespace == "default":
        return None
    return namespace


def parse_identifier(raw: str) -> ResourceIdentifier:
    """Parse the slash-separated content of a parenthesized identifier.

    Never raises: anything unexpected degrades to ``Unknown``/``unknown``.
    """
    parts = raw.split("/")
    if len(parts) == 3:
        kind, namespace, name = parts
    elif len(parts) == 4:
        _api_version, kind, namespace, name = parts
    elif len(parts) == 5:
        # group/version/kind/namespace/name, e.g. apps/v1/Deployment/ns/web
        _group, _version, kind, namespace, name = parts
    else:
        kind = parts[0]
        name = parts[-1] if len(parts) > 1 else ""
        namespace = parts[1] if len(parts) > 2 else None
    return ResourceIdentifier(
        kind=kind or "Unknown",
        name=name or "unknown",
        namespace=_normalise_namespace(namespace),
        parts=len(parts),
    )


def match_identifier(line: str) -> Optional[Tuple[str, ResourceIdentifier]]:
    """Return ``(path, identifier)`` if *line* carries a resource identifier."""
    stripped = line.strip()
    m = _IDENTIFIER_RE.search(stripped)
    if m is None:
        return None
    path = stripped[: m.start()].strip()
    return path, parse_identifier(m.group(1))


def is_identifier_line(line: str) -> bool:
    return _IDENTIFIER_RE.search(line) is not None
