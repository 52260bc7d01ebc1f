"""
Semantic name synthesis: boolean, callback and setter names.
"""

import re
from collections.abc import Sequence

from .cases import capitalize_first

DEFAULT_BOOLEAN_PREFIXES = ("is", "has", "with", "without")
DEFAULT_CALLBACK_PREFIX = "on"

# Names containing one of these read better with "has"
HAS_KEYWORDS = (
    "children",
    "content",
    "data",
    "error",
    "errors",
    "items",
    "permission",
    "permissions",
    "value",
    "values",
)

PAST_VERB = re.compile(r"^[a-z]+ed$")
CONTINUOUS_VERB = re.compile(r"^[a-z]+ing$")

REACT_EVENT_HANDLER_TYPES = frozenset(
    {
        "MouseEventHandler",
        "ChangeEventHandler",
        "FormEventHandler",
        "KeyboardEventHandler",
        "FocusEventHandler",
        "TouchEventHandler",
        "PointerEventHandler",
        "DragEventHandler",
        "WheelEventHandler",
        "AnimationEventHandler",
        "TransitionEventHandler",
        "ClipboardEventHandler",
        "CompositionEventHandler",
        "UIEventHandler",
        "ScrollEventHandler",
        "EventHandler",
    }
)

CALLBACK_TYPE_NAMES = REACT_EVENT_HANDLER_TYPES | {"Function", "VoidFunction"}


def boolean_prefixes(
    replace: Sequence[str] | None = None, extend: Sequence[str] = ()
) -> list[str]:
    """Effective prefix list: a full replacement, or the defaults plus extras."""
    if replace:
        return list(replace)
    return [*DEFAULT_BOOLEAN_PREFIXES, *extend]


def boolean_name(name: str) -> str:
    """``loading`` -> ``isLoading``, ``error`` -> ``hasError``."""
    if not name:
        return name
    lower = name.lower()
    prefix = "has" if any(keyword in lower for keyword in HAS_KEYWORDS) else "is"
    return prefix + capitalize_first(name)


def callback_name(name: str, prefix: str = DEFAULT_CALLBACK_PREFIX) -> str:
    """``handleSubmit``/``submitHandler``/``submit`` -> ``onSubmit``."""
    if name.startswith("handle") and len(name) > 6:
        return prefix + capitalize_first(name[6:])
    if name.endswith("Handler") and len(name) > 7:
        return prefix + capitalize_first(name[:-7])
    return prefix + capitalize_first(name)


def setter_name(state_name: str) -> str:
    return "set" + capitalize_first(state_name)


def is_valid_boolean_name(
    name: str,
    prefixes: Sequence[str] = DEFAULT_BOOLEAN_PREFIXES,
    allow_past_verb: bool = False,
    allow_continuous_verb: bool = False,
) -> bool:
    """Prefix followed by a capital, or an allowed verb form."""
    if any(
        name.startswith(prefix) and name[len(prefix) : len(prefix) + 1].isupper()
        for prefix in prefixes
    ):
        return True
    if allow_past_verb and PAST_VERB.match(name):
        return True
    return bool(allow_continuous_verb and CONTINUOUS_VERB.match(name))


def is_valid_callback_name(
    name: str,
    prefix: str = DEFAULT_CALLBACK_PREFIX,
    allow_action_suffix: bool = False,
) -> bool:
    if name.startswith(prefix) and name[len(prefix) : len(prefix) + 1].isupper():
        return True
    return allow_action_suffix and name.endswith("Action") and len(name) > 6
