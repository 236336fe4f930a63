"""Tests for configuration models, loading and environment substitution."""

import pytest
from pydantic import ValidationError

from buildgate.config import (
    AuditConfig,
    AuditRuleConfig,
    EnvironmentSubstitutionError,
    GateConfig,
    StepConfig,
    StepKind,
    default_config,
    find_config_file,
    load_config,
    resolve_config,
    substitute_environment_variables,
)
from buildgate.config.harness import HarnessConfig
from buildgate.errors import ConfigError

from .fixtures.config_builders import StepBuilder


class TestStepConfig:
    def test_command_step_requires_command(self):
        with pytest.raises(ValidationError, match="needs a command"):
            StepConfig(name="Lint", kind="lint")

    def test_browser_step_gets_default_harness(self):
        step = StepConfig(name="E2E", kind="browser_test")
        assert isinstance(step.harness, HarnessConfig)
        assert step.command == []

    def test_harness_only_on_browser_steps(self):
        with pytest.raises(ValidationError, match="only valid for browser_test"):
            StepConfig(name="Lint", kind="lint", command=["lint"], harness={})

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            StepConfig(name="Deploy", kind="deploy", command=["deploy"])

    def test_required_defaults_true(self):
        assert StepConfig(name="x", kind="command", command=["true"]).required


class TestAuditConfig:
    def test_duplicate_rule_ids_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate audit rule ids: a"):
            AuditConfig(rules=[{"id": "a", "pattern": "x"}, {"id": "a", "pattern": "y"}])

    def test_invalid_regex_rejected(self):
        with pytest.raises(ValidationError, match="invalid regex"):
            AuditRuleConfig(id="bad", pattern="(", regex=True)

    def test_literal_pattern_is_not_compiled(self):
        rule = AuditRuleConfig(id="paren", pattern="(")
        assert rule.pattern == "("

    def test_rule_id_charset(self):
        with pytest.raises(ValidationError):
            AuditRuleConfig(id="has space", pattern="x")

    def test_strict_mode_is_opt_in(self):
        assert AuditConfig().fail_on_findings is False


class TestGateConfig:
    def test_requires_at_least_one_step(self):
        with pytest.raises(ValidationError):
            GateConfig(steps=[])

    def test_step_names_unique(self):
        step = {"name": "dup", "kind": "command", "command": ["true"]}
        with pytest.raises(ValidationError, match="unique"):
            GateConfig(steps=[step, step])

    def test_total_stages_counts_audit(self, config_builder):
        config = config_builder.minimal().build_model()
        assert config.total_stages == 2

        config = config_builder.with_audit(enabled=False).build_model()
        assert config.total_stages == 1


class TestDefaults:
    def test_default_pipeline_has_six_stages(self):
        config = default_config()
        assert config.total_stages == 6
        assert [s.kind for s in config.steps] == [
            StepKind.TOOLCHAIN,
            StepKind.FORMAT,
            StepKind.LINT,
            StepKind.UNIT_TEST,
            StepKind.INTEGRATION_TEST,
        ]
        assert config.steps[0].command == ["rustc", "--version"]
        assert config.steps[1].command == ["cargo", "fmt", "--", "--check"]

    def test_default_audit_rules(self):
        rules = default_config().audit.rules
        assert [(r.id, r.pattern) for r in rules] == [
            ("unsafe-code", "unsafe"),
            ("unchecked-unwrap", ".unwrap()"),
        ]

    def test_defaults_are_fresh_copies(self):
        first = default_config()
        first.audit.rules[0].message = "changed"
        assert default_config().audit.rules[0].message != "changed"


class TestEnvironmentSubstitution:
    def test_simple_variable(self):
        assert substitute_environment_variables("${NAME}", {"NAME": "qms"}) == "qms"

    def test_variable_in_string(self):
        result = substitute_environment_variables("http://${HOST}:8080", {"HOST": "db"})
        assert result == "http://db:8080"

    @pytest.mark.parametrize("expression", ["${MISSING:-fallback}", "${MISSING:fallback}"])
    def test_default_when_unset(self, expression):
        assert substitute_environment_variables(expression, {}) == "fallback"

    def test_set_variable_wins_over_default(self):
        result = substitute_environment_variables("${SET:-fallback}", {"SET": "value"})
        assert result == "value"

    def test_unset_plain_variable_left_untouched(self):
        assert substitute_environment_variables("${MISSING}", {}) == "${MISSING}"

    def test_required_variable_missing(self):
        with pytest.raises(EnvironmentSubstitutionError, match="token needed"):
            substitute_environment_variables("${TOKEN:?token needed}", {})

    def test_nested_structures(self):
        data = {"a": ["${X}", {"b": "${Y:-2}"}], "n": 3, "flag": True}
        result = substitute_environment_variables(data, {"X": "1"})
        assert result == {"a": ["1", {"b": "2"}], "n": 3, "flag": True}

    def test_substitution_error_is_config_error(self):
        assert issubclass(EnvironmentSubstitutionError, ConfigError)


class TestLoader:
    def test_load_valid_config(self, tmp_path, config_builder):
        path = config_builder.minimal().write(tmp_path)
        config = load_config(path)

        assert config.title == "Test Pipeline"
        assert config.steps[0].name == "Say hello"
        assert len(config.audit.rules) == 2

    def test_environment_is_substituted(self, tmp_path, config_builder, monkeypatch):
        monkeypatch.setenv("GATE_TITLE", "From env")
        path = config_builder.minimal().with_params(title="${GATE_TITLE}").write(tmp_path)
        assert load_config(path).title == "From env"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "absent.yaml")

    def test_wrong_extension(self, tmp_path):
        path = tmp_path / "buildgate.json"
        path.write_text("{}")
        with pytest.raises(ConfigError, match="Invalid file extension"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "buildgate.yaml"
        path.write_text("steps: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping_root(self, tmp_path):
        path = tmp_path / "buildgate.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="must be a mapping"):
            load_config(path)

    def test_schema_violation(self, tmp_path, config_builder):
        path = config_builder.with_step(StepBuilder("No command", kind="lint")).write(
            tmp_path
        )
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(path)


class TestResolveConfig:
    def test_discovers_yml(self, tmp_path, config_builder):
        config_builder.minimal().write(tmp_path, "buildgate.yml")
        assert find_config_file(tmp_path) == tmp_path / "buildgate.yml"
        assert resolve_config(None, tmp_path).title == "Test Pipeline"

    def test_yaml_preferred_over_yml(self, tmp_path, config_builder):
        config_builder.minimal().write(tmp_path, "buildgate.yml")
        config_builder.minimal().write(tmp_path, "buildgate.yaml")
        assert find_config_file(tmp_path) == tmp_path / "buildgate.yaml"

    def test_explicit_path_wins(self, tmp_path, config_builder):
        config_builder.minimal().write(tmp_path)
        other = config_builder.with_params(title="Explicit").write(tmp_path, "other.yaml")
        assert resolve_config(other, tmp_path).title == "Explicit"

    def test_falls_back_to_builtin_pipeline(self, tmp_path):
        config = resolve_config(None, tmp_path)
        assert config.title == default_config().title
        assert config.total_stages == 6
