"""Configuration loading, schema, and defaults."""

from chartdiff.config.loader import ConfigError, load_config, validate
from chartdiff.config.schema import (
    ChartDiffConfig,
    FilterOptions,
    HelmConfig,
    OutputConfig,
    impact_at_or_above,
)

__all__ = [
    "ChartDiffConfig",
    "ConfigError",
    "FilterOptions",
    "HelmConfig",
    "OutputConfig",
    "impact_at_or_above",
    "load_config",
    "validate",
]
