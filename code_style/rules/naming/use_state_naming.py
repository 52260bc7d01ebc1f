"""
useState boolean naming rule.

A ``useState`` pair holding a boolean (``useState(false)`` or
``useState<boolean>(...)``) must use a boolean prefix for the state
and ``set`` + state for the setter. Both bindings are renamed.
"""

from tree_sitter import Node

from ...analysis.source import SourceModel
from ...naming.cases import is_camel
from ...naming.semantics import boolean_name, setter_name
from ..base import BaseRule, Finding, NodeHandler, RuleContext, Severity
from ._shared import BOOLEAN_LITERALS, BooleanNamingOptions, callee_name, is_boolean_type


class UseStateNamingRule(BaseRule):
    """Boolean useState values need is/has names."""

    options_model = BooleanNamingOptions

    @property
    def rule_id(self) -> str:
        return "NAMING.USE_STATE_NAMING"

    @property
    def name(self) -> str:
        return "useState Boolean Naming"

    @property
    def category(self) -> str:
        return "naming"

    @property
    def default_severity(self) -> Severity:
        return Severity.MEDIUM

    @property
    def description(self) -> str:
        return (
            "Boolean useState values must start with a boolean prefix "
            "(is, has, with, without) and their setter must be set + state name."
        )

    def can_auto_fix(self) -> bool:
        return True

    def visitors(self) -> dict[str, NodeHandler]:
        return {"call_expression": self._check_call}

    def _check_call(self, node: Node, context: RuleContext) -> list[Finding]:
        source = context.source
        if callee_name(node, source) != "useState":
            return []

        declarator = node.parent
        if declarator is None or declarator.type != "variable_declarator":
            return []
        pattern = declarator.child_by_field_name("name")
        if pattern is None or pattern.type != "array_pattern":
            return []

        elements = [c for c in pattern.named_children if c.type != "comment"]
        if not elements or elements[0].type != "identifier":
            return []
        if not self._is_boolean_state(node, source):
            return []

        state_node = elements[0]
        setter_node = elements[1] if len(elements) > 1 and elements[1].type == "identifier" else None
        state = source.text_of(state_node)

        options = self.options(context)
        # Non-camel names are left to the variable naming rule
        if state.startswith("_") or not is_camel(state) or options.is_valid_boolean(state):
            return []

        suggested = boolean_name(state)
        suggested_setter = setter_name(suggested)

        def fix(builder):
            builder.rename_identifier(state_node, suggested)
            if setter_node is not None:
                builder.rename_identifier(setter_node, suggested_setter)

        prefixes = ", ".join(options.prefixes)
        return [
            self._create_finding(
                summary=(
                    f'Boolean state "{state}" should start with one of: {prefixes} '
                    f'("{suggested}", "{suggested_setter}")'
                ),
                context=context,
                node=state_node,
                fix=fix,
                remediation_hints=[f"Rename to [{suggested}, {suggested_setter}]"],
            )
        ]

    @staticmethod
    def _is_boolean_state(call: Node, source: SourceModel) -> bool:
        type_args = call.child_by_field_name("type_arguments")
        if type_args is not None:
            types = [c for c in type_args.named_children if c.type != "comment"]
            if types and is_boolean_type(types[0], source):
                return True

        args = call.child_by_field_name("arguments")
        if args is None:
            return False
        values = [c for c in args.named_children if c.type != "comment"]
        return bool(values) and values[0].type in BOOLEAN_LITERALS
