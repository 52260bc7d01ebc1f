"""Enum member naming rule: members must be UPPER_SNAKE_CASE."""

import re

from tree_sitter import Node

from ...naming.cases import to_upper_snake
from ..base import BaseRule, Finding, NodeHandler, RuleContext, Severity


class EnumMemberNamingRule(BaseRule):
    """Enforce UPPER_SNAKE_CASE enum members."""

    UPPER_SNAKE = re.compile(r"^[A-Z][A-Z0-9_]*$")

    @property
    def rule_id(self) -> str:
        return "NAMING.ENUM_MEMBER_NAMING"

    @property
    def name(self) -> str:
        return "Enum Member Naming"

    @property
    def category(self) -> str:
        return "naming"

    @property
    def default_severity(self) -> Severity:
        return Severity.MEDIUM

    @property
    def supported_languages(self) -> list[str] | None:
        return ["typescript", "tsx"]

    def can_auto_fix(self) -> bool:
        return True

    def visitors(self) -> dict[str, NodeHandler]:
        return {"enum_body": self._check_body}

    def _check_body(self, node: Node, context: RuleContext) -> list[Finding]:
        findings = []
        for member in node.named_children:
            if member.type == "enum_assignment":
                name_node = member.child_by_field_name("name")
            elif member.type == "property_identifier":
                name_node = member
            else:
                continue
            if name_node is None or name_node.type != "property_identifier":
                continue

            name = context.source.text_of(name_node)
            if self.UPPER_SNAKE.match(name):
                continue
            suggested = to_upper_snake(name)
            if suggested == name or not self.UPPER_SNAKE.match(suggested):
                continue

            findings.append(
                self._create_finding(
                    summary=f'Enum member "{name}" should be UPPER_SNAKE_CASE ("{suggested}")',
                    context=context,
                    node=name_node,
                    fix=self._replace(name_node, suggested),
                )
            )
        return findings

    @staticmethod
    def _replace(name_node: Node, suggested: str):
        def fix(builder):
            builder.replace(name_node, suggested)

        return fix
