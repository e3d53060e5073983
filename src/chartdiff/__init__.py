"""chartdiff — compare two versions of a Helm chart and categorize what changed."""

__version__ = "0.1.0"
