"""className spaces rule: no repeated, leading or trailing spaces in class strings."""

import re

from tree_sitter import Node

from ..base import BaseRule, Finding, NodeHandler, RuleContext, Severity
from ._class_strings import ClassString, attribute_class_strings, variable_class_strings

REPEATED_SPACES = re.compile(r" {2,}")


class ClassNameSpacesRule(BaseRule):
    """Collapse extra whitespace inside class strings."""

    @property
    def rule_id(self) -> str:
        return "FORMATTING.CLASS_NAME_SPACES"

    @property
    def name(self) -> str:
        return "className No Extra Spaces"

    @property
    def category(self) -> str:
        return "formatting"

    @property
    def default_severity(self) -> Severity:
        return Severity.LOW

    def can_auto_fix(self) -> bool:
        return True

    def visitors(self) -> dict[str, NodeHandler]:
        return {
            "jsx_attribute": self._check_attribute,
            "variable_declarator": self._check_variable,
        }

    def _check_attribute(self, node: Node, context: RuleContext) -> list[Finding]:
        return self._check_strings(attribute_class_strings(node, context), context)

    def _check_variable(self, node: Node, context: RuleContext) -> list[Finding]:
        return self._check_strings(variable_class_strings(node, context), context)

    def _check_strings(self, strings: list[ClassString], context: RuleContext) -> list[Finding]:
        findings = []
        for class_string in strings:
            # Multiline class lists are laid out deliberately
            if "\n" in class_string.text:
                continue
            fixed = REPEATED_SPACES.sub(" ", class_string.text).strip(" ")
            if fixed == class_string.text:
                continue
            findings.append(
                self._create_finding(
                    summary="Class string should not have extra spaces",
                    context=context,
                    node=class_string.node,
                    fix=self._replace(class_string, fixed),
                )
            )
        return findings

    @staticmethod
    def _replace(class_string: ClassString, fixed: str):
        def fix(builder):
            builder.replace_range(class_string.start, class_string.end, fixed)

        return fix
