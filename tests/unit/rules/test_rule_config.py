"""Unit tests for code_style.rules.config module."""

import json

import pytest

from code_style.errors import ConfigurationError
from code_style.rules.base import Severity
from code_style.rules.config import (
    CategoryConfig,
    DriverConfig,
    RuleConfig,
    RuleEngineConfig,
    RuleEngineConfigLoader,
    merge_config_dicts,
)


class TestRuleEngineConfig:
    """Parsing, enablement and merging."""

    def test_defaults(self):
        config = RuleEngineConfig()
        assert config.enabled
        assert config.fail_on_severity == Severity.MEDIUM
        assert config.driver.max_iterations == 10

    def test_from_dict_round_trip(self):
        data = {
            "enabled": True,
            "failOnSeverity": "high",
            "continueOnError": False,
            "driver": {"maxIterations": 4, "parallelFiles": False, "maxWorkers": 2},
            "categories": {"formatting": {"enabled": False}},
            "rules": {
                "NAMING.PROP_NAMING": {
                    "severity": "low",
                    "options": {"callbackPrefix": "handle"},
                }
            },
        }
        config = RuleEngineConfig.from_dict(data)
        assert config.fail_on_severity == Severity.HIGH
        assert config.driver == DriverConfig(max_iterations=4, parallel_files=False, max_workers=2)
        assert config.get_rule_config("NAMING.PROP_NAMING").options == {"callbackPrefix": "handle"}
        assert RuleEngineConfig.from_dict(config.to_dict()).to_dict() == config.to_dict()

    def test_invalid_severity(self):
        with pytest.raises(ConfigurationError):
            RuleEngineConfig.from_dict({"failOnSeverity": "urgent"})
        with pytest.raises(ConfigurationError):
            RuleConfig.from_dict({"severity": "urgent"})

    def test_invalid_iteration_cap(self):
        with pytest.raises(ConfigurationError):
            DriverConfig.from_dict({"maxIterations": 0})

    def test_rule_enablement(self):
        config = RuleEngineConfig(
            categories={"formatting": CategoryConfig(enabled=False)},
            rules={"NAMING.X": RuleConfig(enabled=False)},
        )
        assert not config.is_rule_enabled("NAMING.X", "naming")
        assert not config.is_rule_enabled("FORMATTING.Y", "formatting")
        assert config.is_rule_enabled("NAMING.Z", "naming")
        assert not RuleEngineConfig(enabled=False).is_rule_enabled("NAMING.Z")

    def test_invalid_category_severity(self):
        with pytest.raises(ConfigurationError):
            CategoryConfig.from_dict({"defaultSeverity": "urgent"})
        assert CategoryConfig.from_dict({"defaultSeverity": "HIGH"}).default_severity == "high"


class TestMergeConfigDicts:
    """Merging raw configuration layers."""

    def test_only_keys_set_by_the_override_change(self):
        base = {
            "failOnSeverity": "low",
            "driver": {"maxIterations": 3, "maxWorkers": 2},
            "rules": {"A": {"enabled": False, "options": {"x": 1, "y": 2}}, "B": {}},
        }
        override = {"driver": {"maxWorkers": 8}, "rules": {"A": {"options": {"y": 3}}}}

        merged = merge_config_dicts(base, override)

        assert merged == {
            "failOnSeverity": "low",
            "driver": {"maxIterations": 3, "maxWorkers": 8},
            "rules": {"A": {"enabled": False, "options": {"x": 1, "y": 3}}, "B": {}},
        }
        assert base["driver"] == {"maxIterations": 3, "maxWorkers": 2}

    def test_non_dict_values_replace(self):
        merged = merge_config_dicts({"rules": {"A": {}}}, {"rules": None})
        assert merged == {"rules": None}


class TestRuleEngineConfigLoader:
    """Hierarchical loading from disk."""

    def write(self, path, data):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data) if not isinstance(data, str) else data)

    def test_layers_merge_in_order(self, tmp_path):
        project, home = tmp_path / "project", tmp_path / "home"
        self.write(home / "code-style.config.json", {"driver": {"maxIterations": 7}})
        self.write(project / "code-style.config.json", {"failOnSeverity": "high"})
        self.write(project / "code-style.config.local.json", {"failOnSeverity": "low"})

        config = RuleEngineConfigLoader(project, global_dir=home).load()
        assert config.fail_on_severity == Severity.LOW
        assert config.driver.max_iterations == 7

    def test_local_layer_keeps_project_settings(self, tmp_path):
        """A local file that only touches one rule leaves the rest alone."""
        project = tmp_path / "project"
        self.write(
            project / "code-style.config.json",
            {"failOnSeverity": "low", "driver": {"maxIterations": 3}},
        )
        self.write(
            project / "code-style.config.local.json",
            {"rules": {"NAMING.PROP_NAMING": {"enabled": False}}},
        )

        config = RuleEngineConfigLoader(project, global_dir=tmp_path / "none").load()

        assert config.fail_on_severity == Severity.LOW
        assert config.driver.max_iterations == 3
        assert not config.is_rule_enabled("NAMING.PROP_NAMING")

    def test_invalid_value_skips_only_that_layer(self, tmp_path, caplog):
        project = tmp_path / "project"
        self.write(project / "code-style.config.json", {"failOnSeverity": "high"})
        self.write(project / "code-style.config.local.json", {"failOnSeverity": "urgent"})
        config = RuleEngineConfigLoader(project, global_dir=tmp_path / "none").load()
        assert config.fail_on_severity == Severity.HIGH
        assert "Could not load config" in caplog.text

    def test_invalid_implicit_layer_is_skipped(self, tmp_path, caplog):
        project = tmp_path / "project"
        self.write(project / "code-style.config.json", "{not json")
        config = RuleEngineConfigLoader(project, global_dir=tmp_path / "none").load()
        assert config.fail_on_severity == Severity.MEDIUM
        assert "Could not load config" in caplog.text

    def test_invalid_explicit_file_raises(self, tmp_path):
        explicit = tmp_path / "custom.json"
        self.write(explicit, "[1, 2]")
        loader = RuleEngineConfigLoader(tmp_path, global_dir=tmp_path / "none")
        with pytest.raises(ConfigurationError):
            loader.load(explicit)

    def test_explicit_file_wins(self, tmp_path):
        explicit = tmp_path / "custom.json"
        self.write(explicit, {"failOnSeverity": "critical"})
        loader = RuleEngineConfigLoader(tmp_path, global_dir=tmp_path / "none")
        assert loader.load(explicit).fail_on_severity == Severity.CRITICAL

    def test_save(self, tmp_path):
        loader = RuleEngineConfigLoader(tmp_path, global_dir=tmp_path / "none")
        path = loader.save(RuleEngineConfig(fail_on_severity=Severity.HIGH))
        assert json.loads(path.read_text())["failOnSeverity"] == "high"
        assert loader.load().fail_on_severity == Severity.HIGH
