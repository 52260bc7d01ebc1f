"""
Rule engine coordinator for executing style rules.

This module provides the RuleEngine class that registers rules,
validates their options, and runs them over one file in a single
depth-first traversal: every named node is dispatched to the handlers
registered for its type, then per-file checks run once. A handler that
raises disables only its own rule for the rest of that file.
"""

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel

from .base import BaseRule, Finding, NodeHandler, RuleContext, Severity
from .config import RuleEngineConfig, RuleEngineConfigLoader
from .discovery import RuleDiscovery

logger = logging.getLogger(__name__)


@dataclass
class RuleError:
    """Error that occurred during rule execution."""

    rule_id: str
    error_message: str
    exception_type: str | None = None
    file_path: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "rule_id": self.rule_id,
            "error_message": self.error_message,
            "exception_type": self.exception_type,
            "file_path": self.file_path,
        }


@dataclass
class RuleExecutionResult:
    """Result of executing a single rule over one file."""

    rule_id: str
    findings: list[Finding] = field(default_factory=list)
    execution_time_ms: float = 0.0
    error: RuleError | None = None

    @property
    def success(self) -> bool:
        """Check if the rule executed successfully."""
        return self.error is None

    @property
    def finding_count(self) -> int:
        return len(self.findings)


@dataclass
class RuleEngineResult:
    """Result of rule engine execution."""

    findings: list[Finding] = field(default_factory=list)
    errors: list[RuleError] = field(default_factory=list)
    execution_time_ms: float = 0.0
    rules_executed: int = 0
    rules_skipped: int = 0
    rule_results: dict[str, RuleExecutionResult] = field(default_factory=dict)

    def should_block(self, severity_threshold: Severity = Severity.MEDIUM) -> bool:
        """Check if any findings meet or exceed the threshold."""
        return any(f.severity >= severity_threshold for f in self.findings)

    @property
    def critical_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.CRITICAL)

    @property
    def high_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.HIGH)

    @property
    def medium_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.MEDIUM)

    @property
    def low_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.LOW)

    def get_findings_by_severity(self, severity: Severity) -> list[Finding]:
        return [f for f in self.findings if f.severity == severity]

    def get_findings_by_rule(self, rule_id: str) -> list[Finding]:
        return [f for f in self.findings if f.rule_id == rule_id]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "findings": [f.to_dict() for f in self.findings],
            "errors": [e.to_dict() for e in self.errors],
            "execution_time_ms": self.execution_time_ms,
            "rules_executed": self.rules_executed,
            "rules_skipped": self.rules_skipped,
            "summary": {
                "total_findings": len(self.findings),
                "critical": self.critical_count,
                "high": self.high_count,
                "medium": self.medium_count,
                "low": self.low_count,
            },
        }


class RuleEngine:
    """Engine for executing style rules.

    Example usage:
        engine = RuleEngine()
        engine.load_rules()  # Auto-discover rules

        context = RuleContext.from_text(text, Path("src/app.tsx"))
        result = engine.run(context)

        for finding in result.findings:
            print(finding.summary)
    """

    def __init__(
        self,
        config: RuleEngineConfig | None = None,
        config_loader: RuleEngineConfigLoader | None = None,
    ):
        """Initialize the rule engine.

        Args:
            config: Optional pre-loaded configuration
            config_loader: Optional config loader for loading from files
        """
        if config:
            self.config = config
        elif config_loader:
            self.config = config_loader.load()
        else:
            self.config = RuleEngineConfig()

        self._rules: dict[str, BaseRule] = {}
        self._rule_classes: dict[str, type[BaseRule]] = {}
        self._rules_by_category: dict[str, list[BaseRule]] = {}
        self._options: dict[str, BaseModel] = {}

    def load_rules(self, discovery: RuleDiscovery | None = None) -> int:
        """Load rules using discovery.

        Raises:
            RuleOptionsError: If a rule's configured options are invalid.

        Returns:
            Number of rules loaded
        """
        if discovery is None:
            discovery = RuleDiscovery()

        loaded = 0
        for rule_id, rule_class in discovery.discover_all().items():
            if not self.config.is_rule_enabled(rule_id):
                continue
            try:
                rule = rule_class()
            except Exception as e:
                logger.warning(f"Could not instantiate rule {rule_id}: {e}")
                continue
            if self.register(rule):
                self._rule_classes[rule_id] = rule_class
                loaded += 1

        logger.info(f"Loaded {loaded} rules")
        return loaded

    def register(self, rule: BaseRule) -> bool:
        """Register a rule, validating its configured options.

        Returns:
            True if registered, False if disabled in config.
        """
        rule_id = rule.rule_id

        if not self.config.is_rule_enabled(rule_id, rule.category):
            logger.debug(f"Rule {rule_id} is disabled in config, skipping")
            return False

        self._add(rule, rule.get_options(self.config.get_rule_config(rule_id)))
        logger.debug(f"Registered rule: {rule_id}")
        return True

    def _add(self, rule: BaseRule, options: BaseModel) -> None:
        self._options[rule.rule_id] = options
        self._rules[rule.rule_id] = rule
        self._rules_by_category.setdefault(rule.category, []).append(rule)

    def fork(self) -> "RuleEngine":
        """A new engine with the same config and rules for another file.

        Discovered rules are instantiated afresh; options validated at
        registration are reused, so no discovery or validation runs again.
        """
        engine = RuleEngine(config=self.config)
        for rule_id, rule in self._rules.items():
            rule_class = self._rule_classes.get(rule_id)
            if rule_class is not None:
                rule = rule_class()
                engine._rule_classes[rule_id] = rule_class
            engine._add(rule, self._options[rule_id])
        return engine

    def unregister(self, rule_id: str) -> bool:
        """Unregister a rule from the engine."""
        rule = self._rules.pop(rule_id, None)
        if rule is None:
            return False
        self._options.pop(rule_id, None)
        self._rule_classes.pop(rule_id, None)
        self._rules_by_category[rule.category] = [
            r for r in self._rules_by_category.get(rule.category, []) if r.rule_id != rule_id
        ]
        return True

    def get_rule(self, rule_id: str) -> BaseRule | None:
        return self._rules.get(rule_id)

    def get_rules_by_category(self, category: str) -> list[BaseRule]:
        return self._rules_by_category.get(category, []).copy()

    def get_all_rules(self) -> list[BaseRule]:
        return list(self._rules.values())

    def _select_rules(
        self,
        language: str,
        rule_ids: Iterable[str] | None,
        categories: Iterable[str] | None,
    ) -> tuple[list[BaseRule], int]:
        if rule_ids:
            rules = [self._rules[rid] for rid in rule_ids if rid in self._rules]
        elif categories:
            rules = [r for cat in categories for r in self.get_rules_by_category(cat)]
        else:
            rules = self.get_all_rules()

        selected = [
            r for r in rules if r.supported_languages is None or language in r.supported_languages
        ]
        return selected, len(rules) - len(selected)

    def run(
        self,
        context: RuleContext,
        rule_ids: Iterable[str] | None = None,
        categories: Iterable[str] | None = None,
    ) -> RuleEngineResult:
        """Run rules over one file and collect findings.

        Args:
            context: RuleContext with the parsed source and scope index
            rule_ids: Optional list of specific rule IDs to run
            categories: Optional list of categories to run

        Returns:
            RuleEngineResult with findings and execution info
        """
        start_time = time.perf_counter()
        rules, skipped = self._select_rules(context.language, rule_ids, categories)

        if context.config is None:
            context.config = self.config
        for rule in rules:
            context.options.setdefault(rule.rule_id, self._options[rule.rule_id])

        results = {rule.rule_id: RuleExecutionResult(rule_id=rule.rule_id) for rule in rules}
        dispatch: dict[str, list[tuple[BaseRule, NodeHandler]]] = {}
        for rule in rules:
            for node_type, handler in rule.visitors().items():
                dispatch.setdefault(node_type, []).append((rule, handler))

        aborted = False
        if dispatch:
            for node in context.source.walk():
                for rule, handler in dispatch.get(node.type, ()):
                    result = results[rule.rule_id]
                    if result.error is None:
                        self._invoke(rule, result, context, handler, node)
                        if result.error and not self.config.continue_on_error:
                            aborted = True
                            break
                if aborted:
                    break

        if not aborted:
            for rule in rules:
                result = results[rule.rule_id]
                if result.error is None:
                    self._invoke(rule, result, context, None, None)
                    if result.error and not self.config.continue_on_error:
                        break

        findings = [f for r in results.values() for f in r.findings]
        findings.sort(key=lambda f: (f.start if f.start is not None else -1, f.rule_id))

        return RuleEngineResult(
            findings=findings,
            errors=[r.error for r in results.values() if r.error is not None],
            execution_time_ms=(time.perf_counter() - start_time) * 1000,
            rules_executed=len(rules),
            rules_skipped=skipped,
            rule_results=results,
        )

    def _invoke(
        self,
        rule: BaseRule,
        result: RuleExecutionResult,
        context: RuleContext,
        handler: NodeHandler | None,
        node,
    ) -> None:
        """Call one handler (or the per-file check), isolating failures."""
        start_time = time.perf_counter()
        try:
            found = rule.check(context) if handler is None else handler(node, context)
            if found:
                result.findings.extend(found)
        except Exception as e:
            # The check is aborted for this file, earlier findings included
            result.findings.clear()
            result.error = RuleError(
                rule_id=rule.rule_id,
                error_message=str(e),
                exception_type=type(e).__name__,
                file_path=str(context.file_path),
            )
            logger.warning(
                f"Rule {rule.rule_id} failed on {context.file_path}: {e}; "
                f"skipping it for the rest of this file",
                extra={"rule_id": rule.rule_id, "file_path": str(context.file_path)},
            )
        finally:
            result.execution_time_ms += (time.perf_counter() - start_time) * 1000


def create_rule_engine(
    config: RuleEngineConfig | None = None,
    project_path: Path | None = None,
    auto_load: bool = True,
) -> RuleEngine:
    """Factory function to create and configure a rule engine.

    Args:
        config: Optional pre-loaded configuration
        project_path: Optional project path for config loading
        auto_load: Whether to auto-load rules

    Returns:
        Configured RuleEngine instance
    """
    if config is None and project_path:
        engine = RuleEngine(config_loader=RuleEngineConfigLoader(project_path))
    else:
        engine = RuleEngine(config=config)

    if auto_load:
        engine.load_rules()

    return engine
