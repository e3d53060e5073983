"""Filter chain: suppression, secret handling and context trimming."""

from chartdiff.filters.chain import (
    compile_regex,
    exclude_kinds,
    filter_lines,
    filter_text,
    suppress_kinds,
    suppress_metadata,
    suppress_regex,
)
from chartdiff.filters.context import trim_context, trim_lines
from chartdiff.filters.secrets import apply_secret_handling, decode_line, redact_line

__all__ = [
    "apply_secret_handling",
    "compile_regex",
    "exclude_kinds",
    "decode_line",
    "filter_lines",
    "filter_text",
    "redact_line",
    "suppress_kinds",
    "suppress_metadata",
    "suppress_regex",
    "trim_context",
    "trim_lines",
]
