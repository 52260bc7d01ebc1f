"""
Tree-shape helpers and option models shared by the naming rules.
"""

from collections.abc import Iterator

from pydantic import Field
from tree_sitter import Node

from ...analysis.scope import Binding
from ...analysis.source import SourceModel, unwrap_parentheses
from ...naming.semantics import (
    CALLBACK_TYPE_NAMES,
    DEFAULT_CALLBACK_PREFIX,
    boolean_prefixes,
    is_valid_boolean_name,
    is_valid_callback_name,
)
from ..base import RuleOptions

FUNCTION_VALUE_NODES = frozenset(
    {"arrow_function", "function_expression", "function", "generator_function"}
)

JSX_NODES = frozenset({"jsx_element", "jsx_self_closing_element", "jsx_fragment"})

BOOLEAN_LITERALS = frozenset({"true", "false"})


class BooleanNamingOptions(RuleOptions):
    """Options shared by rules that validate boolean names."""

    boolean_prefixes: list[str] | None = None
    extend_boolean_prefixes: list[str] = Field(default_factory=list)
    allow_past_verb_boolean: bool = False
    allow_continuous_verb_boolean: bool = False

    @property
    def prefixes(self) -> list[str]:
        return boolean_prefixes(self.boolean_prefixes, self.extend_boolean_prefixes)

    def is_valid_boolean(self, name: str) -> bool:
        return is_valid_boolean_name(
            name,
            self.prefixes,
            allow_past_verb=self.allow_past_verb_boolean,
            allow_continuous_verb=self.allow_continuous_verb_boolean,
        )


class PropNamingOptions(BooleanNamingOptions):
    """Boolean options plus callback naming."""

    callback_prefix: str = DEFAULT_CALLBACK_PREFIX
    allow_action_suffix: bool = False

    def is_valid_callback(self, name: str) -> bool:
        return is_valid_callback_name(name, self.callback_prefix, self.allow_action_suffix)


# -- types -------------------------------------------------------------------


def annotation_type(node: Node | None) -> Node | None:
    """The type inside a ``: T`` annotation."""
    if node is None:
        return None
    if node.type == "type_annotation":
        inner = [c for c in node.named_children if c.type != "comment"]
        return inner[0] if inner else None
    return node


def union_members(type_node: Node) -> Iterator[Node]:
    """Flatten ``A | (B | C)`` into its member types."""
    if type_node.type in ("union_type", "parenthesized_type"):
        for child in type_node.named_children:
            if child.type != "comment":
                yield from union_members(child)
    else:
        yield type_node


def type_name(type_node: Node, source: SourceModel) -> str | None:
    """Last segment of a named type (``React.MouseEventHandler<T>`` -> ``MouseEventHandler``)."""
    if type_node.type == "generic_type":
        name = type_node.child_by_field_name("name") or type_node.named_children[0]
        return type_name(name, source)
    if type_node.type in ("type_identifier", "nested_type_identifier"):
        return source.text_of(type_node).rsplit(".", 1)[-1]
    return None


def is_boolean_type(type_node: Node | None, source: SourceModel) -> bool:
    """``boolean`` or a union containing it."""
    if type_node is None:
        return False
    return any(
        member.type == "predefined_type" and source.text_of(member) == "boolean"
        for member in union_members(type_node)
    )


def is_callback_type(type_node: Node | None, source: SourceModel) -> bool:
    """Function types, ``Function``/``VoidFunction`` and React event handler types."""
    if type_node is None:
        return False
    for member in union_members(type_node):
        if member.type == "function_type":
            return True
        if type_name(member, source) in CALLBACK_TYPE_NAMES:
            return True
    return False


def type_members(type_node: Node) -> list[Node]:
    """Property signatures of an object type or interface body."""
    return [c for c in type_node.named_children if c.type == "property_signature"]


def member_name(member: Node) -> Node | None:
    name = member.child_by_field_name("name")
    if name is not None and name.type == "property_identifier":
        return name
    return None


def member_type(member: Node) -> Node | None:
    return annotation_type(member.child_by_field_name("type"))


# -- patterns ----------------------------------------------------------------


def bound_identifiers(pattern: Node | None) -> Iterator[Node]:
    """Every identifier a binding pattern declares, in source order."""
    if pattern is None:
        return
    node_type = pattern.type
    if node_type in ("identifier", "shorthand_property_identifier_pattern"):
        yield pattern
    elif node_type in ("object_pattern", "array_pattern"):
        for child in pattern.named_children:
            if child.type == "pair_pattern":
                yield from bound_identifiers(child.child_by_field_name("value"))
            elif child.type != "comment":
                yield from bound_identifiers(child)
    elif node_type in ("object_assignment_pattern", "assignment_pattern"):
        yield from bound_identifiers(pattern.child_by_field_name("left"))
    elif node_type == "rest_pattern":
        for child in pattern.named_children:
            yield from bound_identifiers(child)
    elif node_type in ("required_parameter", "optional_parameter"):
        yield from bound_identifiers(pattern.child_by_field_name("pattern"))


def destructured_properties(
    pattern: Node, source: SourceModel
) -> Iterator[tuple[str, Node, Node | None]]:
    """(source key, local identifier, default value) for each simple property.

    Nested patterns and rest elements are skipped.
    """
    for child in pattern.named_children:
        if child.type == "shorthand_property_identifier_pattern":
            yield source.text_of(child), child, None
        elif child.type == "object_assignment_pattern":
            left = child.child_by_field_name("left")
            if left is not None and left.type == "shorthand_property_identifier_pattern":
                yield source.text_of(left), left, child.child_by_field_name("right")
        elif child.type == "pair_pattern":
            key = child.child_by_field_name("key")
            value = child.child_by_field_name("value")
            if key is None or key.type != "property_identifier" or value is None:
                continue
            if value.type == "identifier":
                yield source.text_of(key), value, None
            elif value.type == "assignment_pattern":
                left = value.child_by_field_name("left")
                if left is not None and left.type == "identifier":
                    yield source.text_of(key), left, value.child_by_field_name("right")


# -- functions and exports ---------------------------------------------------


def function_value(value: Node | None) -> Node | None:
    """The function a declarator is initialized with, if any."""
    value = unwrap_parentheses(value)
    if value is not None and value.type in FUNCTION_VALUE_NODES:
        return value
    return None


def callee_name(call: Node | None, source: SourceModel) -> str | None:
    """``useState`` for both ``useState(...)`` and ``React.useState(...)``."""
    if call is None or call.type != "call_expression":
        return None
    callee = call.child_by_field_name("function")
    if callee is None:
        return None
    if callee.type == "identifier":
        return source.text_of(callee)
    if callee.type == "member_expression":
        prop = callee.child_by_field_name("property")
        return source.text_of(prop) if prop is not None else None
    return None


def _is_jsx(node: Node | None) -> bool:
    node = unwrap_parentheses(node)
    return node is not None and node.type in JSX_NODES


def returns_jsx(function: Node) -> bool:
    """Expression body is JSX, or a top-level return statement returns JSX."""
    body = function.child_by_field_name("body")
    if body is None:
        return False
    if body.type != "statement_block":
        return _is_jsx(body)
    for statement in body.named_children:
        if statement.type == "return_statement":
            values = [c for c in statement.named_children if c.type != "comment"]
            if values and _is_jsx(values[0]):
                return True
    return False


def is_module_level(statement: Node) -> bool:
    parent = statement.parent
    if parent is not None and parent.type == "export_statement":
        parent = parent.parent
    return parent is not None and parent.type == "program"


def is_exported(statement: Node, binding: Binding | None) -> bool:
    """Declared inside ``export``, or named by ``export default x`` / ``export { x }``."""
    if statement.parent is not None and statement.parent.type == "export_statement":
        return True
    if binding is None:
        return False
    return any(
        ref.node.parent is not None
        and ref.node.parent.type in ("export_statement", "export_specifier")
        for ref in binding.uses
    )
