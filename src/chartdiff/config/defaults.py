"""Starter .chartdiff.toml template."""

CONFIG_FILENAME = ".chartdiff.toml"

DEFAULT_TOML = """\
# chartdiff configuration
version = "1.0"

[filters]
ignore_labels = false         # drop every metadata.* change block
secret_handling = "suppress"  # suppress | show | decode
context_lines = 3             # unchanged lines kept around each change
suppress_kinds = []           # e.g. ["ConfigMap", "Secret"]
# suppress_regex = "helm.sh/chart"

[output]
format = "terminal"           # terminal | text | markdown | json
show_stats = true
fail_on = "none"              # none | low | medium | high; exit 1 at or above this impact

[helm]
release_name = "diff-comparison"
timeout = 60
use_dyff = true               # fall back to a line diff when dyff is missing
"""
