"""
Hook function naming rule.

An exported hook in a ``hooks/`` file must be named after the file:
``hooks/users/use-create-user.ts`` exports ``useCreateUser``.
"""

from tree_sitter import Node

from ...naming.cases import is_hook_name
from ...naming.paths import NameKind, derive_expected_name, split_path
from ..base import BaseRule, Finding, NodeHandler, RuleContext, Severity
from ._shared import function_value


class HookFunctionNamingRule(BaseRule):
    """Exported hooks match their file name."""

    @property
    def rule_id(self) -> str:
        return "NAMING.HOOK_FUNCTION_NAMING"

    @property
    def name(self) -> str:
        return "Hook Function Naming"

    @property
    def category(self) -> str:
        return "naming"

    @property
    def default_severity(self) -> Severity:
        return Severity.MEDIUM

    @property
    def description(self) -> str:
        return "Exported hooks must be the camelCase form of their use-* file name."

    def can_auto_fix(self) -> bool:
        return True

    def visitors(self) -> dict[str, NodeHandler]:
        return {
            "function_declaration": self._check_function,
            "variable_declarator": self._check_declarator,
        }

    def _expected_name(self, context: RuleContext) -> str | None:
        parts = split_path(context.file_path)
        if "hooks" not in parts[:-1]:
            return None
        return derive_expected_name(context.file_path, NameKind.HOOK)

    def _check_function(self, node: Node, context: RuleContext) -> list[Finding]:
        if node.parent is None or node.parent.type != "export_statement":
            return []
        name_node = node.child_by_field_name("name")
        return self._check(name_node, context) if name_node is not None else []

    def _check_declarator(self, node: Node, context: RuleContext) -> list[Finding]:
        statement = node.parent
        if statement is None or statement.parent is None:
            return []
        if statement.parent.type != "export_statement":
            return []
        name_node = node.child_by_field_name("name")
        if name_node is None or name_node.type != "identifier":
            return []
        if function_value(node.child_by_field_name("value")) is None:
            return []
        return self._check(name_node, context)

    def _check(self, name_node: Node, context: RuleContext) -> list[Finding]:
        name = context.source.text_of(name_node)
        if not (is_hook_name(name) or name == "use"):
            return []
        expected = self._expected_name(context)
        if expected is None or expected == name:
            return []

        def fix(builder):
            builder.rename_identifier(name_node, expected)

        return [
            self._create_finding(
                summary=(
                    f'Hook "{name}" should be named "{expected}" to match its file '
                    f'"{context.file_path.name}"'
                ),
                context=context,
                node=name_node,
                fix=fix,
            )
        ]
