"""
className order rule.

Utility classes in ``className`` attributes and class-like variables
are reordered through the class orderer collaborator. Whitespace
between classes is left as written so that spacing stays a separate
concern.
"""

import re

from tree_sitter import Node

from ..base import BaseRule, Finding, NodeHandler, RuleContext, Severity
from ._class_strings import ClassString, attribute_class_strings, variable_class_strings


def reorder_preserving_spacing(text: str, ordered: list[str]) -> str:
    """Put ordered classes into the original class slots."""
    pieces = re.split(r"(\s+)", text)
    tokens = iter(ordered)
    return "".join(piece if not piece or piece.isspace() else next(tokens) for piece in pieces)


class ClassNameOrderRule(BaseRule):
    """Sort utility classes by the configured ordering policy."""

    @property
    def rule_id(self) -> str:
        return "FORMATTING.CLASS_NAME_ORDER"

    @property
    def name(self) -> str:
        return "className Order"

    @property
    def category(self) -> str:
        return "formatting"

    @property
    def default_severity(self) -> Severity:
        return Severity.LOW

    @property
    def description(self) -> str:
        return (
            "Utility classes should follow the recommended order: layout, sizing, "
            "spacing, typography, colors, effects, then state variants."
        )

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
        orderer = context.class_orderer
        for class_string in strings:
            if "\n" in class_string.text:
                continue
            classes = class_string.text.split()
            ordered = orderer.sort(" ".join(classes)).split()
            if len(classes) < 2 or ordered == classes:
                continue
            fixed = reorder_preserving_spacing(class_string.text, ordered)
            findings.append(
                self._create_finding(
                    summary=f'Classes should be ordered as "{" ".join(ordered)}"',
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
