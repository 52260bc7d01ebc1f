"""
Variable naming rule.

Variables, destructured names and parameters must be camelCase. React
components, styled components, hooks, data tables and ``_``-prefixed
names are exempt. The fix renames the binding and every reference.
"""

import re

from pydantic import Field
from tree_sitter import Node

from ...analysis.source import SourceModel, unwrap_parentheses
from ...naming.cases import CaseFamily, classify, is_camel, is_pascal, to_camel
from ..base import BaseRule, Evidence, Finding, NodeHandler, RuleContext, RuleOptions, Severity
from ._shared import FUNCTION_VALUE_NODES, bound_identifiers, callee_name


class VariableNamingOptions(RuleOptions):
    ignore: list[str] = Field(default_factory=list)


class VariableNamingRule(BaseRule):
    """Enforce camelCase variable names."""

    options_model = VariableNamingOptions

    # Calls whose result is a component or context
    COMPONENT_WRAPPERS = frozenset({"memo", "forwardRef", "lazy", "createContext"})

    COMPONENT_SUFFIXES = (
        "Component",
        "Icon",
        "Layout",
        "Wrapper",
        "Container",
        "Provider",
        "View",
        "Screen",
        "Page",
    )

    DATA_NAME = re.compile(r"(?:Data|Config)$|^Routes$")
    DATA_VALUES = frozenset({"array", "object", "call_expression"})

    @property
    def rule_id(self) -> str:
        return "NAMING.VARIABLE_NAMING"

    @property
    def name(self) -> str:
        return "Variable Naming"

    @property
    def category(self) -> str:
        return "naming"

    @property
    def default_severity(self) -> Severity:
        return Severity.MEDIUM

    @property
    def description(self) -> str:
        return (
            "Variables, destructured names and parameters must be camelCase. "
            "Components, styled components, hooks and _-prefixed names are exempt."
        )

    def can_auto_fix(self) -> bool:
        return True

    def visitors(self) -> dict[str, NodeHandler]:
        return {
            "variable_declarator": self._check_declarator,
            "formal_parameters": self._check_parameters,
            "arrow_function": self._check_arrow_parameter,
        }

    def _check_declarator(self, node: Node, context: RuleContext) -> list[Finding]:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return []
        if name_node.type != "identifier":
            return self._check_pattern(name_node, context)

        name = context.source.text_of(name_node)
        value = unwrap_parentheses(node.child_by_field_name("value"))
        if is_camel(name) or self._is_exempt(name, value, context):
            return []
        return self._report(name_node, name, "Variable", context)

    def _check_parameters(self, node: Node, context: RuleContext) -> list[Finding]:
        findings = []
        for param in node.named_children:
            if param.type != "comment":
                findings.extend(self._check_pattern(param, context))
        return findings

    def _check_arrow_parameter(self, node: Node, context: RuleContext) -> list[Finding]:
        param = node.child_by_field_name("parameter")
        return self._check_pattern(param, context) if param is not None else []

    def _check_pattern(self, pattern: Node, context: RuleContext) -> list[Finding]:
        """Destructured names and parameters: constants and components pass."""
        options = self.options(context)
        findings = []
        for ident in bound_identifiers(pattern):
            name = context.source.text_of(ident)
            if name.startswith("_") or name in options.ignore:
                continue
            if classify(name) in (CaseFamily.CAMEL, CaseFamily.PASCAL, CaseFamily.UPPER_SNAKE):
                continue
            findings.extend(self._report(ident, name, "Destructured name", context))
        return findings

    def _is_exempt(self, name: str, value: Node | None, context: RuleContext) -> bool:
        if name.startswith("_") or name in self.options(context).ignore:
            return True
        if value is not None and self._is_styled(value, context.source):
            return True
        if not is_pascal(name):
            return False
        if name.endswith(self.COMPONENT_SUFFIXES):
            return True
        if value is None:
            return False
        if value.type in FUNCTION_VALUE_NODES or value.type == "class":
            return True
        if callee_name(value, context.source) in self.COMPONENT_WRAPPERS:
            return True
        return bool(self.DATA_NAME.search(name)) and value.type in self.DATA_VALUES

    @staticmethod
    def _is_styled(value: Node, source: SourceModel) -> bool:
        """``styled.div`...``` and ``styled(Button)`...```."""
        node: Node | None = value
        while node is not None and node.type in ("call_expression", "member_expression"):
            field_name = "function" if node.type == "call_expression" else "object"
            node = node.child_by_field_name(field_name)
        return node is not None and node.type == "identifier" and source.text_of(node) == "styled"

    def _report(
        self, name_node: Node, name: str, label: str, context: RuleContext
    ) -> list[Finding]:
        suggested = to_camel(name)
        fix = None
        if suggested != name and is_camel(suggested):
            def fix(builder):
                builder.rename_identifier(name_node, suggested)

        return [
            self._create_finding(
                summary=f'{label} "{name}" should be camelCase ("{suggested}")',
                context=context,
                node=name_node,
                fix=fix,
                evidence=[
                    Evidence(
                        description=f"{name} is {classify(name).value}",
                        line_number=context.source.line_col(context.source.start_of(name_node))[0],
                        data={"name": name, "suggested": suggested},
                    )
                ],
                remediation_hints=[f"Rename {name} to {suggested}"],
            )
        ]
