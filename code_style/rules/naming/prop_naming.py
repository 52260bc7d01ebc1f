"""
Prop type naming rule.

Members of named interfaces and object type aliases typed as boolean
need a boolean prefix (``loading: boolean`` -> ``isLoading``) and
members typed as callbacks need the callback prefix (``click: () =>
void`` -> ``onClick``). Nested object types are checked too. The fix
rewrites the member key only.
"""

from tree_sitter import Node

from ...naming.cases import is_camel
from ...naming.semantics import boolean_name, callback_name
from ..base import BaseRule, Finding, NodeHandler, RuleContext, Severity
from ._shared import (
    PropNamingOptions,
    is_boolean_type,
    is_callback_type,
    member_name,
    member_type,
    type_members,
)


class PropNamingRule(BaseRule):
    """Boolean and callback members of prop types."""

    options_model = PropNamingOptions

    @property
    def rule_id(self) -> str:
        return "NAMING.PROP_NAMING"

    @property
    def name(self) -> str:
        return "Prop Type Naming"

    @property
    def category(self) -> str:
        return "naming"

    @property
    def default_severity(self) -> Severity:
        return Severity.MEDIUM

    @property
    def supported_languages(self) -> list[str] | None:
        return ["typescript", "tsx"]

    @property
    def description(self) -> str:
        return (
            "Boolean members of interfaces and type aliases need an is/has prefix; "
            "callback members need the on prefix."
        )

    def can_auto_fix(self) -> bool:
        return True

    def visitors(self) -> dict[str, NodeHandler]:
        return {
            "interface_declaration": self._check_interface,
            "type_alias_declaration": self._check_type_alias,
        }

    def _check_interface(self, node: Node, context: RuleContext) -> list[Finding]:
        body = node.child_by_field_name("body")
        return self._check_members(body, context) if body is not None else []

    def _check_type_alias(self, node: Node, context: RuleContext) -> list[Finding]:
        value = node.child_by_field_name("value")
        findings: list[Finding] = []
        for object_type in self._object_types(value):
            findings.extend(self._check_members(object_type, context))
        return findings

    def _object_types(self, node: Node | None) -> list[Node]:
        """Object literals of ``{...}``, ``A & {...}`` and ``({...})``."""
        if node is None:
            return []
        if node.type == "object_type":
            return [node]
        if node.type in ("intersection_type", "parenthesized_type"):
            return [t for child in node.named_children for t in self._object_types(child)]
        return []

    def _check_members(self, type_node: Node, context: RuleContext) -> list[Finding]:
        source = context.source
        options = self.options(context)
        findings: list[Finding] = []

        for member in type_members(type_node):
            value_type = member_type(member)
            if value_type is None:
                continue
            if value_type.type == "object_type":
                findings.extend(self._check_members(value_type, context))
                continue

            name_node = member_name(member)
            if name_node is None:
                continue
            name = source.text_of(name_node)
            if name.startswith("_") or not is_camel(name):
                continue

            if is_boolean_type(value_type, source):
                if options.is_valid_boolean(name):
                    continue
                suggested = boolean_name(name)
                summary = (
                    f'Boolean prop "{name}" should start with one of: '
                    f'{", ".join(options.prefixes)} ("{suggested}")'
                )
            elif is_callback_type(value_type, source):
                if options.is_valid_callback(name):
                    continue
                suggested = callback_name(name, options.callback_prefix)
                summary = (
                    f'Callback prop "{name}" should start with "{options.callback_prefix}" '
                    f'("{suggested}")'
                )
            else:
                continue

            findings.append(
                self._create_finding(
                    summary=summary,
                    context=context,
                    node=name_node,
                    fix=self._replace_key(name_node, suggested),
                    remediation_hints=[f"Rename {name} to {suggested} and update its users"],
                )
            )

        return findings

    @staticmethod
    def _replace_key(name_node: Node, suggested: str):
        def fix(builder):
            builder.replace(name_node, suggested)

        return fix
