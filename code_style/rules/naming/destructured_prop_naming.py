"""
Destructured prop naming rule.

Props destructured in a parameter list are checked against their
inline type literal (``({ copied }: { copied: boolean })``) or their
boolean default (``({ copied = false })``). The fix renames only the
local binding: shorthand properties expand to ``{ copied: isCopied }``
and every reference in the function body follows.
"""

from tree_sitter import Node

from ...naming.cases import is_camel
from ...naming.semantics import boolean_name, callback_name
from ..base import BaseRule, Finding, NodeHandler, RuleContext, Severity
from ._shared import (
    BOOLEAN_LITERALS,
    PropNamingOptions,
    annotation_type,
    destructured_properties,
    is_boolean_type,
    is_callback_type,
    member_name,
    member_type,
    type_members,
)


class DestructuredPropNamingRule(BaseRule):
    """Boolean and callback names for destructured props."""

    options_model = PropNamingOptions

    @property
    def rule_id(self) -> str:
        return "NAMING.DESTRUCTURED_PROP_NAMING"

    @property
    def name(self) -> str:
        return "Destructured Prop Naming"

    @property
    def category(self) -> str:
        return "naming"

    @property
    def default_severity(self) -> Severity:
        return Severity.MEDIUM

    @property
    def description(self) -> str:
        return (
            "Destructured boolean props need an is/has name and callback props an "
            "on name; only the local binding is renamed."
        )

    def can_auto_fix(self) -> bool:
        return True

    def visitors(self) -> dict[str, NodeHandler]:
        return {"formal_parameters": self._check_parameters}

    def _check_parameters(self, node: Node, context: RuleContext) -> list[Finding]:
        findings: list[Finding] = []
        for param in node.named_children:
            pattern, type_node = param, None
            if param.type in ("required_parameter", "optional_parameter"):
                pattern = param.child_by_field_name("pattern")
                type_node = annotation_type(param.child_by_field_name("type"))
            if pattern is not None and pattern.type == "assignment_pattern":
                pattern = pattern.child_by_field_name("left")
            if pattern is None or pattern.type != "object_pattern":
                continue
            findings.extend(self._check_pattern(pattern, type_node, context))
        return findings

    def _check_pattern(
        self, pattern: Node, type_node: Node | None, context: RuleContext
    ) -> list[Finding]:
        source = context.source
        options = self.options(context)

        member_types: dict[str, Node | None] = {}
        if type_node is not None and type_node.type == "object_type":
            for member in type_members(type_node):
                name_node = member_name(member)
                if name_node is not None:
                    member_types[source.text_of(name_node)] = member_type(member)

        findings: list[Finding] = []
        for key, local_node, default in destructured_properties(pattern, source):
            local = source.text_of(local_node)
            if local.startswith("_") or not is_camel(local):
                continue

            declared = member_types.get(key)
            is_boolean = is_boolean_type(declared, source) or (
                default is not None and default.type in BOOLEAN_LITERALS
            )
            if is_boolean:
                if options.is_valid_boolean(local):
                    continue
                suggested = boolean_name(local)
                kind = "Boolean"
            elif is_callback_type(declared, source):
                if options.is_valid_callback(local):
                    continue
                suggested = callback_name(local, options.callback_prefix)
                kind = "Callback"
            else:
                continue

            findings.append(
                self._create_finding(
                    summary=f'{kind} prop "{key}" should be destructured as "{suggested}"',
                    context=context,
                    node=local_node,
                    fix=self._rename_local(local_node, suggested),
                )
            )
        return findings

    @staticmethod
    def _rename_local(local_node: Node, suggested: str):
        def fix(builder):
            builder.rename_identifier(local_node, suggested)

        return fix
