"""Load and merge configuration from .chartdiff.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from chartdiff.config.defaults import CONFIG_FILENAME
from chartdiff.config.schema import (
    FAIL_ON_LEVELS,
    OUTPUT_FORMATS,
    SECRET_MODES,
    ChartDiffConfig,
    FilterOptions,
    HelmConfig,
    OutputConfig,
)

_TRUTHY = ("1", "true", "yes", "on")


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(base_dir: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = base_dir / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.get(section, {}).items() if k in valid_fields}
    return cls(**filtered)


def _merge_env_overrides(cfg: ChartDiffConfig) -> None:
    """Apply CHARTDIFF_* environment variable overrides."""
    if val := os.environ.get("CHARTDIFF_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("CHARTDIFF_FAIL_ON"):
        if val in FAIL_ON_LEVELS:
            cfg.output.fail_on = val
    if val := os.environ.get("CHARTDIFF_SECRET_HANDLING"):
        if val in SECRET_MODES:
            cfg.filters.secret_handling = val  # type: ignore[assignment]
    if val := os.environ.get("CHARTDIFF_CONTEXT_LINES"):
        try:
            lines = int(val)
        except ValueError:
            pass
        else:
            if lines >= 0:
                cfg.filters.context_lines = lines
    if val := os.environ.get("CHARTDIFF_SUPPRESS_KINDS"):
        cfg.filters.suppress_kinds.extend(k.strip() for k in val.split(",") if k.strip())
    if val := os.environ.get("CHARTDIFF_IGNORE_LABELS"):
        cfg.filters.ignore_labels = val.lower() in _TRUTHY


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate(cfg: ChartDiffConfig) -> None:
    """Reject values the pipeline cannot honour. Raises ConfigError."""
    filters = cfg.filters
    for section, key in (("filters", "ignore_labels"), ("output", "show_stats"), ("helm", "use_dyff")):
        if not isinstance(getattr(getattr(cfg, section), key), bool):
            raise ConfigError(f"{section}.{key} must be true or false")
    if filters.secret_handling not in SECRET_MODES:
        raise ConfigError(
            f"Invalid secret_handling {filters.secret_handling!r} "
            f"(expected one of: {', '.join(SECRET_MODES)})"
        )
    if not _is_int(filters.context_lines) or filters.context_lines < 0:
        raise ConfigError(f"context_lines must be a non-negative integer, got {filters.context_lines!r}")
    if not isinstance(filters.suppress_kinds, list) or not all(
        isinstance(k, str) for k in filters.suppress_kinds
    ):
        raise ConfigError("suppress_kinds must be a list of kind names")
    if filters.suppress_regex is not None and not isinstance(filters.suppress_regex, str):
        raise ConfigError(f"suppress_regex must be a string, got {filters.suppress_regex!r}")
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid output format {cfg.output.format!r}")
    if cfg.output.fail_on not in FAIL_ON_LEVELS:
        raise ConfigError(f"Invalid fail_on level {cfg.output.fail_on!r}")
    if not isinstance(cfg.helm.release_name, str) or not cfg.helm.release_name:
        raise ConfigError("helm.release_name must be a non-empty string")
    if not _is_int(cfg.helm.timeout) or cfg.helm.timeout <= 0:
        raise ConfigError(f"helm.timeout must be a positive integer, got {cfg.helm.timeout!r}")


def load_config(
    base_dir: Path,
    config_override: Optional[str] = None,
) -> ChartDiffConfig:
    """Load, validate, and return a ChartDiffConfig."""
    config_path = find_config_file(base_dir, config_override)

    if config_path is None:
        cfg = ChartDiffConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = ChartDiffConfig(
                version=raw.get("version", "1.0"),
                filters=_build_section(raw, FilterOptions, "filters"),
                output=_build_section(raw, OutputConfig, "output"),
                helm=_build_section(raw, HelmConfig, "helm"),
            )
        except (TypeError, AttributeError) as exc:
            raise ConfigError(f"Malformed section in {config_path}: {exc}") from exc
        # An empty string in TOML means "no regex"
        if not cfg.filters.suppress_regex:
            cfg.filters.suppress_regex = None

        validate(cfg)

    _merge_env_overrides(cfg)
    validate(cfg)
    return cfg
