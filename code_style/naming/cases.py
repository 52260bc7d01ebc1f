"""
Case-family classification and case conversion for identifiers.

All functions here are pure string functions with no program knowledge.
"""

import re
from enum import Enum


class CaseFamily(Enum):
    """Identifier case families."""

    CAMEL = "camel"
    PASCAL = "pascal"
    UPPER_SNAKE = "upper_snake"
    SNAKE = "snake"
    KEBAB = "kebab"
    UNKNOWN = "unknown"


# Checked in order, most specific first: "ID" is upper snake, not pascal
CASE_PATTERNS: list[tuple[CaseFamily, re.Pattern]] = [
    (CaseFamily.UPPER_SNAKE, re.compile(r"^[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)*$")),
    (CaseFamily.SNAKE, re.compile(r"^[a-z][a-z0-9]*(?:_[a-z0-9]+)+$")),
    (CaseFamily.KEBAB, re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)+$")),
    (CaseFamily.CAMEL, re.compile(r"^[a-z][a-zA-Z0-9]*$")),
    (CaseFamily.PASCAL, re.compile(r"^[A-Z][a-zA-Z0-9]*$")),
]

HOOK_PATTERN = re.compile(r"^use[A-Z][a-zA-Z0-9]*$")


def classify(identifier: str) -> CaseFamily:
    """Return the case family of identifier, UNKNOWN if none matches."""
    for family, pattern in CASE_PATTERNS:
        if pattern.match(identifier):
            return family
    return CaseFamily.UNKNOWN


def is_camel(identifier: str) -> bool:
    return classify(identifier) == CaseFamily.CAMEL


def is_pascal(identifier: str) -> bool:
    return classify(identifier) == CaseFamily.PASCAL


def is_hook_name(identifier: str) -> bool:
    """True for ``useSomething`` style names."""
    return bool(HOOK_PATTERN.match(identifier))


def capitalize_first(word: str) -> str:
    return word[:1].upper() + word[1:]


def lower_first(word: str) -> str:
    return word[:1].lower() + word[1:]


def _split_leading_underscores(name: str) -> tuple[str, str]:
    body = name.lstrip("_")
    return name[: len(name) - len(body)], body


def to_camel(identifier: str) -> str:
    """Convert snake, SCREAMING_SNAKE, kebab or Pascal names to camelCase.

    Separator-based names are lowercased before joining, so
    ``CODE_LENGTH`` becomes ``codeLength``. Names without separators
    only get their first letter lowered. Leading underscores survive.

    Example:
        >>> to_camel("user_name")
        'userName'
        >>> to_camel("UserName")
        'userName'
    """
    leading, body = _split_leading_underscores(identifier)
    if not body:
        return identifier

    if "_" in body or "-" in body:
        parts = [part for part in re.split(r"[_-]+", body.lower()) if part]
        if not parts:
            return identifier
        return leading + parts[0] + "".join(capitalize_first(p) for p in parts[1:])

    if body.isupper():
        return leading + body.lower()

    return leading + lower_first(body)


def to_pascal(identifier: str) -> str:
    """Convert a name to PascalCase (``super-admins`` -> ``SuperAdmins``)."""
    _, body = _split_leading_underscores(identifier)
    return capitalize_first(to_camel(body))


def to_upper_snake(identifier: str) -> str:
    """Convert camel/Pascal/kebab names to UPPER_SNAKE_CASE.

    Underscores go at lower-to-upper transitions and before the last
    capital of an acronym run (``ABCWord`` -> ``ABC_WORD``). Names that
    are already free of lowercase letters are returned unchanged apart
    from dashes, which keeps the conversion idempotent.
    """
    name = identifier.replace("-", "_")
    if not re.search(r"[a-z]", name):
        return name
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    return name.upper()


def split_words(identifier: str) -> list[str]:
    """Split any-case identifier into lowercase words."""
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", identifier)
    spaced = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1 \2", spaced)
    return [w.lower() for w in re.split(r"[\s_\-]+", spaced) if w]


def to_kebab(identifier: str) -> str:
    """``useCreateUser`` -> ``use-create-user``."""
    return "-".join(split_words(identifier))
