"""Tests for the filter chain: metadata, kinds, regex, secrets, and context trimming."""

import logging

from chartdiff.config.schema import FilterOptions
from chartdiff.diff.models import ResourceChange
from chartdiff.filters.chain import (
    compile_regex,
    exclude_kinds,
    filter_text,
    suppress_kinds,
    suppress_metadata,
    suppress_regex,
)
from chartdiff.filters.context import SEPARATOR, trim_lines
from chartdiff.filters.secrets import (
    REDACTED,
    apply_secret_handling,
    decode_base64,
    decode_line,
    looks_secret,
    redact_line,
)


class TestMetadataSuppression:
    def test_drops_metadata_block(self, sample_dyff_diff):
        kept = suppress_metadata(sample_dyff_diff.split("\n"))
        assert kept == ["spec.replicas  (v1/Deployment/ns1/my-app)", "- 1", "+ 3"]

    def test_consecutive_metadata_blocks(self, sample_metadata_heavy_diff):
        kept = suppress_metadata(sample_metadata_heavy_diff.split("\n"))
        assert kept[0] == "spec.replicas  (apps/v1/Deployment/ns/web)"
        assert "- app-1.0.0" not in kept
        assert "- 10" not in kept

    def test_short_identifier_not_treated_as_metadata(self):
        lines = ["metadata.labels.x  (ConfigMap/cfg)", "- a"]
        assert suppress_metadata(lines) == lines


class TestKindSuppression:
    def test_case_insensitive(self, sample_dyff_diff):
        kept = suppress_kinds(sample_dyff_diff.split("\n"), ["serviceaccount"])
        assert kept == ["spec.replicas  (v1/Deployment/ns1/my-app)", "- 1", "+ 3"]

    def test_block_ends_at_next_identifier(self):
        lines = [
            "spec.a  (v1/ConfigMap/ns/one)",
            "- x",
            "spec.b  (v1/Service/ns/two)",
            "+ y",
            "spec.c  (v1/ConfigMap/ns/three)",
            "+ z",
        ]
        assert suppress_kinds(lines, ["ConfigMap"]) == ["spec.b  (v1/Service/ns/two)", "+ y"]

    def test_empty_kind_list_is_noop(self, sample_dyff_diff):
        lines = sample_dyff_diff.split("\n")
        assert suppress_kinds(lines, ["", "  "]) == lines

    def test_excludes_segmented_groups(self):
        changes = [ResourceChange(kind="Service"), ResourceChange(kind="Deployment"), ResourceChange()]
        kept = exclude_kinds(changes, ["SERVICE", "unknown"])
        assert [c.kind for c in kept] == ["Deployment"]

    def test_exclude_without_kinds_keeps_all(self):
        changes = [ResourceChange(kind="Service")]
        assert exclude_kinds(changes, [" "]) == changes


class TestRegexSuppression:
    def test_drops_matching_lines(self):
        lines = ["+ helm.sh/chart: app-1.1.0", "+ replicas: 3"]
        assert suppress_regex(lines, compile_regex(r"helm\.sh/chart")) == ["+ replicas: 3"]

    def test_invalid_pattern_logged_and_ignored(self, caplog):
        with caplog.at_level(logging.WARNING, logger="chartdiff.filters.chain"):
            pattern = compile_regex("([")
        assert pattern is None
        assert "Ignoring invalid suppression regex" in caplog.text
        assert suppress_regex(["a", "b"], pattern) == ["a", "b"]

    def test_empty_pattern(self):
        assert compile_regex("") is None
        assert compile_regex(None) is None


class TestSecrets:
    def test_looks_secret(self):
        assert looks_secret("data", "user:pass")
        assert not looks_secret("data", "plain")
        assert looks_secret("value", "c2VjcmV0")
        assert looks_secret("value", "this value has more than twenty chars")
        assert not looks_secret("value", "short one")
        assert not looks_secret("value", REDACTED)

    def test_redact(self):
        assert redact_line("  value: QWxhZGRpbjpvcGVuc2VzYW1l") == f"  value: {REDACTED}"
        assert redact_line("-     value: c2VjcmV0") == f"-     value: {REDACTED}"
        assert redact_line("data: a:b") == f"data: {REDACTED}"
        assert redact_line("  name: DB_PASSWORD") == "  name: DB_PASSWORD"

    def test_redact_dotted_path_prefix(self):
        line = "+ env.0.value: supersecretvalue1234567890"
        assert redact_line(line) == f"+ env.0.value: {REDACTED}"

    def test_decode(self):
        assert decode_line("value: QWxhZGRpbjpvcGVuc2VzYW1l") == (
            "value: Aladdin:opensesame (decoded from base64)"
        )

    def test_decode_leaves_invalid_payload(self):
        assert decode_line("value: not base64!") == "value: not base64!"
        assert decode_base64("////") is None  # decodes to non-UTF-8 bytes
        assert decode_base64("abc") is None  # bad padding

    def test_decode_ignores_data_key(self):
        assert decode_line("data: QWxhZGRpbjpvcGVuc2VzYW1l") == "data: QWxhZGRpbjpvcGVuc2VzYW1l"

    def test_show_mode_untouched(self, sample_secret_diff):
        lines = sample_secret_diff.split("\n")
        assert apply_secret_handling(lines, "show") == lines

    def test_modes_over_fixture(self, sample_secret_diff):
        lines = sample_secret_diff.split("\n")
        suppressed = apply_secret_handling(lines, "suppress")
        assert suppressed[3] == f"-     value: {REDACTED}"
        assert suppressed[4] == f"+     value: {REDACTED}"

        decoded = apply_secret_handling(lines, "decode")
        assert decoded[3] == "-     value: Aladdin:opensesame (decoded from base64)"
        assert decoded[4] == "+     value: secret-password-2 (decoded from base64)"


class TestFilterText:
    def test_chain_order(self, sample_dyff_diff):
        options = FilterOptions(ignore_labels=True, suppress_regex=r"^\+ 3$")
        assert filter_text(sample_dyff_diff, options) == (
            "spec.replicas  (v1/Deployment/ns1/my-app)\n- 1"
        )

    def test_default_options_keep_everything(self, sample_dyff_diff):
        assert filter_text(sample_dyff_diff, FilterOptions()) == sample_dyff_diff


class TestContextTrimming:
    LINES = [
        "spec.x  (v1/ConfigMap/ns/cfg)",
        " a", " b", " c", " d",
        "-old", "+new",
        " e", " f", " g",
    ]

    def test_one_line_of_context(self):
        assert trim_lines(self.LINES, 1) == [
            "spec.x  (v1/ConfigMap/ns/cfg)", SEPARATOR, " d", "-old", "+new", " e",
        ]

    def test_zero_context(self):
        assert trim_lines(self.LINES, 0) == [
            "spec.x  (v1/ConfigMap/ns/cfg)", SEPARATOR, "-old", "+new",
        ]

    def test_wide_context_keeps_everything(self):
        assert trim_lines(self.LINES, 10) == self.LINES

    def test_negative_context_disables_trimming(self):
        assert trim_lines(self.LINES, -1) == self.LINES

    def test_no_changes_untouched(self):
        lines = ["spec.x  (v1/ConfigMap/ns/cfg)", " a", " b"]
        assert trim_lines(lines, 0) == lines

    def test_separate_ranges(self):
        lines = ["+one", " a", " b", " c", "-two"]
        assert trim_lines(lines, 0) == ["+one", SEPARATOR, "-two"]
