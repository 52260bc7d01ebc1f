"""Locating utility-class strings: className attributes and class variables."""

import re
from dataclasses import dataclass

from tree_sitter import Node

from ..base import RuleContext

CLASS_ATTRIBUTES = frozenset({"className", "class"})

CLASS_VARIABLE = re.compile(r"class", re.IGNORECASE)


@dataclass(frozen=True)
class ClassString:
    """The unquoted contents of a string literal holding classes."""

    node: Node
    start: int
    end: int
    text: str


def _class_string(node: Node | None, context: RuleContext) -> ClassString | None:
    if node is None or node.type != "string":
        return None
    if any(child.type == "escape_sequence" for child in node.named_children):
        return None
    start, end = context.source.range_of(node)
    if end - start < 2:
        return None
    return ClassString(node=node, start=start + 1, end=end - 1, text=context.source.text[start + 1 : end - 1])


def attribute_class_strings(node: Node, context: RuleContext) -> list[ClassString]:
    """``className="..."`` and ``className={"..."}``."""
    children = [c for c in node.named_children if c.type != "comment"]
    if len(children) < 2 or children[0].type != "property_identifier":
        return []
    if context.source.text_of(children[0]) not in CLASS_ATTRIBUTES:
        return []
    value = children[1]
    if value.type == "jsx_expression":
        inner = [c for c in value.named_children if c.type != "comment"]
        value = inner[0] if inner else None
    found = _class_string(value, context)
    return [found] if found is not None else []


def variable_class_strings(node: Node, context: RuleContext) -> list[ClassString]:
    """String values of class-like variables and their object properties.

    A variable qualifies when its name mentions "class" or the string
    looks like a utility list to the class orderer.
    """
    name = node.child_by_field_name("name")
    value = node.child_by_field_name("value")
    if name is None or name.type != "identifier" or value is None:
        return []
    named_like_classes = bool(CLASS_VARIABLE.search(context.source.text_of(name)))

    if value.type == "string":
        candidates = [value]
    elif value.type == "object":
        candidates = [
            pair.child_by_field_name("value")
            for pair in value.named_children
            if pair.type == "pair"
        ]
    else:
        return []

    found = []
    for candidate in candidates:
        class_string = _class_string(candidate, context)
        if class_string is None:
            continue
        if named_like_classes or context.class_orderer.looks_like_utility_list(class_string.text):
            found.append(class_string)
    return found
