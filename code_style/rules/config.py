"""
Configuration system for the style rule engine.

This module provides configuration dataclasses and loaders for
managing rule engine settings, including per-rule overrides and
options, category settings, driver iteration limits and hierarchical
configuration merging.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..errors import ConfigurationError
from .base import Severity

logger = logging.getLogger(__name__)


def _parse_severity(value: str, source: str) -> Severity:
    try:
        return Severity(value.lower())
    except (ValueError, AttributeError) as e:
        choices = ", ".join(s.value for s in Severity)
        raise ConfigurationError(
            f"Invalid severity '{value}' in {source}",
            suggestion=f"Use one of: {choices}",
        ) from e


@dataclass
class RuleConfig:
    """Configuration for a single rule."""

    enabled: bool = True
    severity_override: str | None = None
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuleConfig":
        """Create RuleConfig from dictionary."""
        severity = data.get("severity")
        if severity is not None:
            severity = _parse_severity(severity, "rule configuration").value
        return cls(
            enabled=data.get("enabled", True),
            severity_override=severity,
            options=data.get("options", {}),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"enabled": self.enabled}
        if self.severity_override:
            result["severity"] = self.severity_override
        if self.options:
            result["options"] = self.options
        return result


@dataclass
class CategoryConfig:
    """Configuration for a rule category."""

    enabled: bool = True
    default_severity: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CategoryConfig":
        """Create CategoryConfig from dictionary."""
        severity = data.get("defaultSeverity")
        if severity is not None:
            severity = _parse_severity(severity, "category configuration").value
        return cls(
            enabled=data.get("enabled", True),
            default_severity=severity,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"enabled": self.enabled}
        if self.default_severity:
            result["defaultSeverity"] = self.default_severity
        return result


@dataclass
class DriverConfig:
    """Iteration and file-level parallelism settings."""

    max_iterations: int = 10
    parallel_files: bool = True
    max_workers: int = 4

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DriverConfig":
        """Create DriverConfig from dictionary."""
        config = cls(
            max_iterations=data.get("maxIterations", 10),
            parallel_files=data.get("parallelFiles", True),
            max_workers=data.get("maxWorkers", 4),
        )
        if config.max_iterations < 1:
            raise ConfigurationError(
                f"maxIterations must be at least 1, got {config.max_iterations}"
            )
        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "maxIterations": self.max_iterations,
            "parallelFiles": self.parallel_files,
            "maxWorkers": self.max_workers,
        }


@dataclass
class RuleEngineConfig:
    """Configuration for the rule engine."""

    # Global settings
    enabled: bool = True
    fail_on_severity: Severity = field(default=Severity.MEDIUM)
    continue_on_error: bool = True

    # Fix loop settings
    driver: DriverConfig = field(default_factory=DriverConfig)

    # Per-category settings
    categories: dict[str, CategoryConfig] = field(default_factory=dict)

    # Per-rule settings
    rules: dict[str, RuleConfig] = field(default_factory=dict)

    def is_rule_enabled(self, rule_id: str, category: str | None = None) -> bool:
        """Check if a rule is enabled.

        Args:
            rule_id: The rule identifier
            category: The rule's category (optional)

        Returns:
            True if the rule is enabled, False otherwise
        """
        if not self.enabled:
            return False

        if category and category in self.categories:
            if not self.categories[category].enabled:
                return False

        if rule_id in self.rules:
            return self.rules[rule_id].enabled

        return True

    def get_rule_config(self, rule_id: str) -> RuleConfig:
        """Get configuration for a specific rule (default if not configured)."""
        return self.rules.get(rule_id, RuleConfig())

    def get_category_config(self, category: str) -> CategoryConfig | None:
        return self.categories.get(category)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuleEngineConfig":
        """Create RuleEngineConfig from dictionary."""
        config = cls(
            enabled=data.get("enabled", True),
            continue_on_error=data.get("continueOnError", True),
        )

        config.fail_on_severity = _parse_severity(
            data.get("failOnSeverity", Severity.MEDIUM.value), "failOnSeverity"
        )

        if "driver" in data:
            config.driver = DriverConfig.from_dict(data["driver"])

        if "categories" in data:
            for cat_name, cat_data in data["categories"].items():
                config.categories[cat_name] = CategoryConfig.from_dict(cat_data)

        if "rules" in data:
            for rule_id, rule_data in data["rules"].items():
                config.rules[rule_id] = RuleConfig.from_dict(rule_data)

        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "enabled": self.enabled,
            "failOnSeverity": self.fail_on_severity.value,
            "continueOnError": self.continue_on_error,
            "driver": self.driver.to_dict(),
            "categories": {k: v.to_dict() for k, v in self.categories.items()},
            "rules": {k: v.to_dict() for k, v in self.rules.items()},
        }


def merge_config_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge two raw configuration layers (override takes precedence).

    Only keys a layer actually sets replace earlier values. Nested
    sections (``driver``, ``categories``, each category and rule, and a
    rule's ``options``) are merged key by key.

    Returns:
        A new dictionary; neither input is modified.
    """
    result = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = merge_config_dicts(current, value)
        else:
            result[key] = value
    return result


class RuleEngineConfigLoader:
    """Loads rule engine configuration from code-style.config.json files."""

    CONFIG_FILENAME = "code-style.config.json"
    LOCAL_CONFIG_FILENAME = "code-style.config.local.json"
    GLOBAL_CONFIG_DIR = Path.home() / ".code-style"

    def __init__(self, project_path: Path | None = None, global_dir: Path | None = None):
        """Initialize the config loader.

        Args:
            project_path: Path to the project root (defaults to CWD)
            global_dir: Override for the user-level config directory
        """
        self.project_path = project_path or Path.cwd()
        self.global_dir = global_dir or self.GLOBAL_CONFIG_DIR

    def load(self, explicit_file: Path | None = None) -> RuleEngineConfig:
        """Load configuration with hierarchical merging.

        Load order (later overrides earlier):
        1. Built-in defaults
        2. Global config (~/.code-style/code-style.config.json)
        3. Project config (<project>/code-style.config.json)
        4. Local config (<project>/code-style.config.local.json)
        5. An explicit file passed on the command line

        Returns:
            Merged RuleEngineConfig

        Raises:
            ConfigurationError: If the explicit file cannot be loaded.
        """
        data: dict[str, Any] = {}

        for path in (
            self.global_dir / self.CONFIG_FILENAME,
            self.project_path / self.CONFIG_FILENAME,
            self.project_path / self.LOCAL_CONFIG_FILENAME,
        ):
            if path.exists():
                layer = self._read_implicit_layer(path)
                if layer:
                    data = merge_config_dicts(data, layer)

        if explicit_file is not None:
            data = merge_config_dicts(data, self.read_layer(explicit_file))

        return RuleEngineConfig.from_dict(data)

    def load_file(self, path: Path) -> RuleEngineConfig:
        """Load one configuration file on its own, raising on any problem."""
        return RuleEngineConfig.from_dict(self.read_layer(path))

    def read_layer(self, path: Path) -> dict[str, Any]:
        """Read and validate one layer, returning its raw settings.

        Raises:
            ConfigurationError: If the file is unreadable, not a JSON
                object, or holds invalid values.
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in {path}: {e}", config_file=str(path)
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read configuration file {path}: {e}", config_file=str(path)
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration in {path} must be a JSON object", config_file=str(path)
            )
        try:
            RuleEngineConfig.from_dict(data)
        except ConfigurationError as e:
            raise ConfigurationError(
                f"{e.message} ({path})", config_file=str(path), suggestion=e.suggestion
            ) from e
        return data

    def _read_implicit_layer(self, path: Path) -> dict[str, Any] | None:
        """Read an implicit layer; problems are logged and the layer skipped."""
        try:
            return self.read_layer(path)
        except ConfigurationError as e:
            logger.warning(f"Could not load config from {path}: {e.message}")
            return None

    def save(self, config: RuleEngineConfig, local: bool = False) -> Path:
        """Save configuration to the project (or local override) file."""
        filename = self.LOCAL_CONFIG_FILENAME if local else self.CONFIG_FILENAME
        config_path = self.project_path / filename

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)

        return config_path
