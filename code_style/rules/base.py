"""
Base classes and types for the style rule engine.

This module provides the check contract shared by every rule:
severity levels, findings, the per-file context handed to handlers
and the BaseRule abstraction (metadata, options schema, node-type
handler table and per-file hook).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel as camel_alias
from tree_sitter import Node

from ..analysis.scope import ScopeIndex
from ..analysis.source import SourceModel
from ..errors import RuleOptionsError
from ..fs import FileSystem, LocalFileSystem
from ..tailwind import ClassOrderer, TailwindClassOrder

if TYPE_CHECKING:
    from .config import CategoryConfig, RuleConfig, RuleEngineConfig
    from .fix import FixBuilder

# Receives a FixBuilder bound to the current iteration's scope index
FixProducer = Callable[["FixBuilder"], None]


class Severity(Enum):
    """Severity levels for style findings."""

    CRITICAL = "critical"  # Must fix immediately
    HIGH = "high"  # Should fix before merge
    MEDIUM = "medium"  # Convention violation
    LOW = "low"  # Cosmetic

    def __lt__(self, other: Severity) -> bool:
        order = [Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL]
        return order.index(self) < order.index(other)

    def __le__(self, other: Severity) -> bool:
        return self == other or self < other

    def __gt__(self, other: Severity) -> bool:
        return not self <= other

    def __ge__(self, other: Severity) -> bool:
        return not self < other


@dataclass
class Evidence:
    """Evidence supporting a finding."""

    description: str
    line_number: int | None = None
    code_snippet: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "description": self.description,
            "line_number": self.line_number,
            "code_snippet": self.code_snippet,
            "data": self.data,
        }


@dataclass
class Finding:
    """A reported style violation, anchored to a character range."""

    rule_id: str
    severity: Severity
    summary: str
    file_path: str
    line_number: int | None = None
    column: int | None = None
    end_line: int | None = None
    start: int | None = None
    end: int | None = None
    evidence: list[Evidence] = field(default_factory=list)
    remediation_hints: list[str] = field(default_factory=list)
    fix: FixProducer | None = field(default=None, repr=False, compare=False)

    @property
    def anchor(self) -> tuple[int, int] | None:
        if self.start is None or self.end is None:
            return None
        return self.start, self.end

    @property
    def can_auto_fix(self) -> bool:
        return self.fix is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "rule_id": self.rule_id,
            "severity": self.severity.value,
            "summary": self.summary,
            "file_path": self.file_path,
            "line_number": self.line_number,
            "column": self.column,
            "end_line": self.end_line,
            "start": self.start,
            "end": self.end,
            "evidence": [e.to_dict() for e in self.evidence],
            "remediation_hints": self.remediation_hints,
            "can_auto_fix": self.can_auto_fix,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Finding:
        """Create Finding from dictionary (fix producers are not serialized)."""
        return cls(
            rule_id=data["rule_id"],
            severity=Severity(data["severity"]),
            summary=data["summary"],
            file_path=data["file_path"],
            line_number=data.get("line_number"),
            column=data.get("column"),
            end_line=data.get("end_line"),
            start=data.get("start"),
            end=data.get("end"),
            evidence=[
                Evidence(
                    description=e["description"],
                    line_number=e.get("line_number"),
                    code_snippet=e.get("code_snippet"),
                    data=e.get("data", {}),
                )
                for e in data.get("evidence", [])
            ],
            remediation_hints=data.get("remediation_hints", []),
        )


@dataclass
class RuleContext:
    """Read-only view of one file handed to rule handlers."""

    source: SourceModel
    scope: ScopeIndex

    # Configuration
    config: RuleEngineConfig | None = field(default=None, repr=False)
    options: dict[str, BaseModel] = field(default_factory=dict, repr=False)

    # Collaborators
    file_system: FileSystem = field(default_factory=LocalFileSystem, repr=False)
    class_orderer: ClassOrderer = field(default_factory=TailwindClassOrder, repr=False)

    @classmethod
    def from_text(cls, text: str, file_path: Path | str, **kwargs: Any) -> RuleContext:
        """Parse text and build its scope index in one step."""
        source = SourceModel.parse(text, file_path)
        return cls(source=source, scope=ScopeIndex.build(source), **kwargs)

    @property
    def file_path(self) -> Path:
        return self.source.file_path

    @property
    def content(self) -> str:
        return self.source.text

    @property
    def language(self) -> str:
        return self.source.language

    @property
    def lines(self) -> list[str]:
        return self.source.lines

    def get_line_content(self, line_number: int) -> str | None:
        """Get content of a specific line (1-indexed)."""
        return self.source.line_text(line_number)


class RuleOptions(BaseModel):
    """Options schema base.

    Keys are accepted in camelCase (as written in JSON config) or
    snake_case; unknown keys are rejected.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, alias_generator=camel_alias)


NodeHandler = Callable[[Node, RuleContext], list[Finding]]


class BaseRule(ABC):
    """Abstract base class for all style rules.

    A rule either registers per-node handlers through ``visitors()``,
    which the engine calls during its single traversal, or overrides
    ``check()`` to run once per file after the traversal. Handlers
    never mutate the tree; fixes are deferred through Finding.fix.
    """

    options_model: type[BaseModel] = RuleOptions

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Unique rule identifier (e.g., 'NAMING.VARIABLE_NAMING').

        Format: CATEGORY.RULE_NAME where CATEGORY is uppercase and
        RULE_NAME uses UPPER_SNAKE_CASE.
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable rule name."""

    @property
    @abstractmethod
    def category(self) -> str:
        """Rule category: naming, structure, formatting."""

    @property
    @abstractmethod
    def default_severity(self) -> Severity:
        """Default severity level for findings from this rule."""

    @property
    def supported_languages(self) -> list[str] | None:
        """Languages this rule supports. None = all languages."""
        return None

    @property
    def description(self) -> str:
        """Detailed description of what this rule checks."""
        return f"Rule {self.rule_id}: {self.name}"

    def visitors(self) -> dict[str, NodeHandler]:
        """Node type -> handler table for the shared traversal."""
        return {}

    def check(self, context: RuleContext) -> list[Finding]:
        """Per-file hook, run once after the traversal."""
        return []

    def can_auto_fix(self) -> bool:
        """Whether this rule supports automatic fixes."""
        return False

    def get_severity(
        self, config: RuleConfig | None, category_config: CategoryConfig | None = None
    ) -> Severity:
        """Rule override, then the category default, then the rule's own default."""
        if config and config.severity_override:
            return Severity(config.severity_override)
        if category_config and category_config.default_severity:
            return Severity(category_config.default_severity)
        return self.default_severity

    def get_options(self, config: RuleConfig | None) -> BaseModel:
        """Validate configured options against the rule's schema.

        Raises:
            RuleOptionsError: If the options block does not validate.
        """
        raw = config.options if config else {}
        try:
            return self.options_model.model_validate(raw or {})
        except ValidationError as e:
            raise RuleOptionsError(self.rule_id, str(e)) from e

    def options(self, context: RuleContext) -> Any:
        """Options resolved by the engine for this run."""
        resolved = context.options.get(self.rule_id)
        if resolved is None:
            rule_config = context.config.get_rule_config(self.rule_id) if context.config else None
            resolved = self.get_options(rule_config)
            context.options[self.rule_id] = resolved
        return resolved

    def _create_finding(
        self,
        summary: str,
        context: RuleContext,
        node: Node | None = None,
        start: int | None = None,
        end: int | None = None,
        fix: FixProducer | None = None,
        evidence: list[Evidence] | None = None,
        remediation_hints: list[str] | None = None,
    ) -> Finding:
        """Helper to create a Finding with this rule's ID and severity.

        The anchor is the node's range, or the explicit start/end
        character offsets; with neither the finding is file-level.
        """
        source = context.source
        if node is not None:
            start, end = source.range_of(node)

        line_number = column = end_line = None
        if start is not None:
            line_number, column = source.line_col(start)
            end_line = source.line_col(end if end is not None else start)[0]

        rule_config = category_config = None
        if context.config:
            rule_config = context.config.get_rule_config(self.rule_id)
            category_config = context.config.get_category_config(self.category)
        return Finding(
            rule_id=self.rule_id,
            severity=self.get_severity(rule_config, category_config),
            summary=summary,
            file_path=str(source.file_path),
            line_number=line_number,
            column=column,
            end_line=end_line,
            start=start,
            end=end,
            evidence=evidence or [],
            remediation_hints=remediation_hints or [],
            fix=fix,
        )
