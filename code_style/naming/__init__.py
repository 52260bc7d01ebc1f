"""Convention classifier: case families, path-derived names and semantic names."""

from .cases import CaseFamily, classify, to_camel, to_pascal, to_upper_snake
from .paths import NameKind, derive_expected_name, module_info, singularize
from .semantics import boolean_name, callback_name, setter_name

__all__ = [
    "CaseFamily",
    "NameKind",
    "boolean_name",
    "callback_name",
    "classify",
    "derive_expected_name",
    "module_info",
    "setter_name",
    "singularize",
    "to_camel",
    "to_pascal",
    "to_upper_snake",
]
