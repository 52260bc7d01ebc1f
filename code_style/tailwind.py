"""Utility-class ordering collaborator.

Checks that reorder ``className`` strings only depend on the narrow
ClassOrderer contract; TailwindClassOrder is the default policy, based
on Tailwind's recommended class order.
"""

import re
from typing import Protocol

# Priority by exact class or "prefix-" (lower sorts earlier); first prefix wins
TAILWIND_ORDER: dict[str, int] = {
    # Layout
    **dict.fromkeys(
        [
            "absolute", "block", "contents", "fixed", "flex", "grid", "hidden", "inline",
            "inline-block", "inline-flex", "inline-grid", "relative", "static", "sticky",
        ],
        10,
    ),
    # Positioning
    **dict.fromkeys(["bottom-", "inset-", "left-", "right-", "top-"], 20),
    "z-": 25,
    # Flexbox/Grid container
    **dict.fromkeys(["basis-", "flex-", "grid-cols-", "grid-rows-"], 30),
    # Flexbox/Grid alignment
    **dict.fromkeys(["content-", "items-", "justify-", "place-", "self-"], 40),
    # Flexbox/Grid children
    **dict.fromkeys(["col-", "grow", "order-", "row-", "shrink"], 45),
    "gap-": 50,
    # Margin
    **dict.fromkeys(
        ["-m-", "-mx-", "-my-", "m-", "mb-", "ml-", "mr-", "mt-", "mx-", "my-"], 60
    ),
    # Padding
    **dict.fromkeys(["p-", "pb-", "pl-", "pr-", "pt-", "px-", "py-"], 70),
    # Sizing
    **dict.fromkeys(["h-", "max-h-", "max-w-", "min-h-", "min-w-", "size-", "w-"], 80),
    # Typography
    **dict.fromkeys(
        [
            "align-", "antialiased", "break-", "capitalize", "decoration-", "font-",
            "hyphens-", "italic", "leading-", "line-clamp-", "list-", "lowercase",
            "normal-case", "not-italic", "ordinal", "text-", "tracking-", "truncate",
            "underline", "uppercase", "whitespace-",
        ],
        90,
    ),
    "bg-": 100,
    # Borders
    **dict.fromkeys(
        ["border", "border-", "divide-", "outline-", "ring-", "rounded", "rounded-"], 110
    ),
    # Effects
    **dict.fromkeys(
        [
            "blur", "blur-", "brightness-", "contrast-", "drop-shadow", "grayscale",
            "hue-rotate-", "invert", "opacity-", "saturate-", "sepia", "shadow", "shadow-",
        ],
        120,
    ),
    # Transitions
    **dict.fromkeys(
        ["animate-", "delay-", "duration-", "ease-", "transition", "transition-"], 130
    ),
    # Transforms
    **dict.fromkeys(
        [
            "-rotate-", "-scale-", "-skew-", "-translate-", "origin-", "rotate-",
            "scale-", "skew-", "transform", "translate-",
        ],
        140,
    ),
    # Interactivity
    **dict.fromkeys(
        [
            "accent-", "appearance-", "caret-", "cursor-", "pointer-events-", "resize",
            "scroll-", "select-", "snap-", "touch-", "will-change-",
        ],
        150,
    ),
    **dict.fromkeys(["fill-", "stroke-"], 160),
    "sr-only": 170,
}

UNKNOWN_ORDER = 180

VARIANT_ORDERS = [
    (re.compile(r"^(sm|md|lg|xl|2xl):"), 200),
    (re.compile(r"^(hover|focus|active|disabled|visited|first|last|odd|even|group-):"), 210),
    (re.compile(r"^dark:"), 220),
]

TAILWIND_PATTERNS = [
    re.compile(pattern)
    for pattern in (
        r"^(flex|grid|block|inline|hidden|absolute|relative|fixed|sticky)$",
        r"^(items|justify|content|self|place)-(start|end|center|between|around|evenly|stretch|baseline)$",
        r"^(flex|grid)-(row|col|wrap|nowrap|grow|shrink)",
        r"^(col|row)-span-",
        r"^gap-",
        r"^order-",
        r"^-?[mp][xytblr]?-\d",
        r"^-?[mp][xytblr]?-\[",
        r"^[wh]-",
        r"^(min|max)-[wh]-",
        r"^size-",
        r"^text-(xs|sm|base|lg|xl|2xl|3xl|4xl|5xl|6xl|7xl|8xl|9xl)$",
        r"^text-(left|center|right|justify)$",
        r"^text-\w+-\d{2,3}$",
        r"^font-(thin|extralight|light|normal|medium|semibold|bold|extrabold|black)$",
        r"^font-(sans|serif|mono)$",
        r"^leading-",
        r"^tracking-",
        r"^(uppercase|lowercase|capitalize|normal-case)$",
        r"^(truncate|line-clamp-)",
        r"^(bg|text|border|ring|divide|outline|fill|stroke)-(transparent|current|inherit)$",
        r"^(bg|text|border|ring|divide|outline|fill|stroke)-\w+-\d{2,3}$",
        r"^(bg|text|border|ring|divide|outline|fill|stroke)-(white|black)$",
        r"^rounded(-|$)",
        r"^border(-|$)",
        r"^ring(-|$)",
        r"^outline(-|$)",
        r"^shadow(-|$)",
        r"^opacity-",
        r"^blur(-|$)",
        r"^transition(-|$)",
        r"^duration-",
        r"^ease-",
        r"^delay-",
        r"^animate-",
        r"^-?(rotate|scale|skew|translate)-",
        r"^origin-",
        r"^transform$",
        r"^(grayscale|sepia|invert|brightness|contrast|saturate|hue-rotate)(-|$)",
        r"^cursor-",
        r"^select-",
        r"^pointer-events-",
        r"^(sm|md|lg|xl|2xl):",
        r"^(hover|focus|active|disabled|group-hover):",
        r"^(dark|light):",
    )
]

# Minimum Tailwind-looking classes before a string counts as a class list
MIN_TAILWIND_MATCHES = 2


class ClassOrderer(Protocol):
    """Contract consumed by the class-name checks."""

    def classify(self, token: str) -> int: ...

    def looks_like_utility_list(self, text: str) -> bool: ...

    def sort(self, text: str) -> str: ...


class TailwindClassOrder:
    """Default ordering policy for Tailwind utility classes."""

    def classify(self, token: str) -> int:
        """Order priority of one class (lower sorts earlier)."""
        for pattern, order in VARIANT_ORDERS:
            if pattern.match(token):
                return order
        if token in TAILWIND_ORDER:
            return TAILWIND_ORDER[token]
        for prefix, order in TAILWIND_ORDER.items():
            if prefix.endswith("-") and token.startswith(prefix):
                return order
        return UNKNOWN_ORDER

    def _matches(self, token: str) -> int:
        count = 0
        if any(pattern.match(token) for pattern in TAILWIND_PATTERNS):
            count += 1
        if any(token == prefix.replace("-", "", 1) or token.startswith(prefix) for prefix in TAILWIND_ORDER):
            count += 1
        return count

    def looks_like_utility_list(self, text: str) -> bool:
        """Heuristic: does text look like a list of utility classes?"""
        classes = text.split()
        if not classes:
            return False
        matches = sum(self._matches(token) for token in classes)
        return matches >= MIN_TAILWIND_MATCHES or matches / len(classes) > 0.5

    def sort(self, text: str) -> str:
        """Classes reordered by priority, ties alphabetical, single-spaced."""
        classes = text.split()
        if len(classes) <= 1:
            return text
        return " ".join(sorted(classes, key=lambda token: (self.classify(token), token)))

    def needs_reordering(self, text: str) -> bool:
        normalized = " ".join(text.split())
        return normalized != self.sort(normalized)
