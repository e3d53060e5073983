"""Tests for config loading, validation, and env var overrides."""

from pathlib import Path

import pytest

from chartdiff.config.defaults import DEFAULT_TOML
from chartdiff.config.loader import ConfigError, load_config, validate
from chartdiff.config.schema import ChartDiffConfig, impact_at_or_above


class TestImpactComparison:
    def test_at_or_above(self):
        assert impact_at_or_above("high", "medium") is True
        assert impact_at_or_above("medium", "medium") is True
        assert impact_at_or_above("low", "medium") is False

    def test_none_never_trips(self):
        assert impact_at_or_above("high", "none") is False


class TestConfigLoading:
    def test_default_config(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.filters.secret_handling == "suppress"
        assert cfg.filters.context_lines == 3
        assert cfg.filters.ignore_labels is False
        assert cfg.output.format == "terminal"
        assert cfg.output.fail_on == "none"
        assert cfg.helm.use_dyff is True

    def test_starter_template_loads(self, tmp_path: Path):
        (tmp_path / ".chartdiff.toml").write_text(DEFAULT_TOML)
        cfg = load_config(tmp_path)
        assert cfg == ChartDiffConfig()

    def test_custom_toml(self, tmp_path: Path):
        (tmp_path / ".chartdiff.toml").write_text(
            'version = "1.0"\n'
            "[filters]\n"
            "ignore_labels = true\n"
            'secret_handling = "decode"\n'
            'suppress_kinds = ["Secret"]\n'
            'suppress_regex = ""\n'
            "[output]\n"
            'format = "json"\n'
            "[helm]\n"
            "timeout = 30\n"
            "unknown_key = 1\n"
        )
        cfg = load_config(tmp_path)
        assert cfg.filters.ignore_labels is True
        assert cfg.filters.secret_handling == "decode"
        assert cfg.filters.suppress_kinds == ["Secret"]
        assert cfg.filters.suppress_regex is None
        assert cfg.output.format == "json"
        assert cfg.helm.timeout == 30

    def test_config_override_path(self, tmp_path: Path):
        custom = tmp_path / "custom.toml"
        custom.write_text('[output]\nfail_on = "high"\n')
        cfg = load_config(tmp_path, config_override=str(custom))
        assert cfg.output.fail_on == "high"

    def test_missing_override_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, config_override="/nonexistent/config.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        (tmp_path / ".chartdiff.toml").write_text("this is not valid [toml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_malformed_section_raises(self, tmp_path: Path):
        (tmp_path / ".chartdiff.toml").write_text('filters = "oops"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestValidation:
    @pytest.mark.parametrize(
        "section, key, value",
        [
            ("filters", "secret_handling", "reveal"),
            ("filters", "context_lines", -1),
            ("filters", "suppress_kinds", "Secret"),
            ("output", "format", "html"),
            ("output", "fail_on", "critical"),
            ("helm", "timeout", 0),
            ("helm", "timeout", "60"),
            ("helm", "timeout", True),
            ("helm", "use_dyff", "no"),
            ("helm", "release_name", ""),
            ("filters", "suppress_kinds", [1, 2]),
            ("filters", "suppress_regex", 5),
            ("filters", "ignore_labels", "yes"),
            ("filters", "context_lines", True),
            ("output", "show_stats", 1),
        ],
    )
    def test_rejects(self, section, key, value):
        cfg = ChartDiffConfig()
        setattr(getattr(cfg, section), key, value)
        with pytest.raises(ConfigError):
            validate(cfg)

    def test_invalid_value_in_file(self, tmp_path: Path):
        (tmp_path / ".chartdiff.toml").write_text('[filters]\nsecret_handling = "plain"\n')
        with pytest.raises(ConfigError, match="secret_handling"):
            load_config(tmp_path)

    @pytest.mark.parametrize(
        "body, key",
        [
            ('[helm]\ntimeout = "60"\n', "timeout"),
            ("[filters]\nsuppress_kinds = [1, 2]\n", "suppress_kinds"),
            ("[filters]\nsuppress_regex = 5\n", "suppress_regex"),
        ],
    )
    def test_wrong_type_in_file(self, tmp_path: Path, body, key):
        (tmp_path / ".chartdiff.toml").write_text(body)
        with pytest.raises(ConfigError, match=key):
            load_config(tmp_path)


class TestEnvVarOverrides:
    def test_format_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CHARTDIFF_FORMAT", "markdown")
        assert load_config(tmp_path).output.format == "markdown"

    def test_fail_on_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CHARTDIFF_FAIL_ON", "medium")
        assert load_config(tmp_path).output.fail_on == "medium"

    def test_secret_handling_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CHARTDIFF_SECRET_HANDLING", "show")
        assert load_config(tmp_path).filters.secret_handling == "show"

    def test_context_lines_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CHARTDIFF_CONTEXT_LINES", "0")
        assert load_config(tmp_path).filters.context_lines == 0

    def test_suppress_kinds_extend_file(self, tmp_path: Path, monkeypatch):
        (tmp_path / ".chartdiff.toml").write_text('[filters]\nsuppress_kinds = ["Secret"]\n')
        monkeypatch.setenv("CHARTDIFF_SUPPRESS_KINDS", "ConfigMap, Job,")
        assert load_config(tmp_path).filters.suppress_kinds == ["Secret", "ConfigMap", "Job"]

    def test_ignore_labels_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CHARTDIFF_IGNORE_LABELS", "yes")
        assert load_config(tmp_path).filters.ignore_labels is True

    def test_invalid_values_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CHARTDIFF_FORMAT", "html")
        monkeypatch.setenv("CHARTDIFF_CONTEXT_LINES", "many")
        cfg = load_config(tmp_path)
        assert cfg.output.format == "terminal"
        assert cfg.filters.context_lines == 3
