"""Identifier case styles: recognition, conversion, and lookup from rule text."""

from __future__ import annotations

import re
from typing import Literal, Optional

CaseStyle = Literal["screaming_snake", "pascal", "camel", "snake", "kebab"]

PASCAL_CASE = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
CAMEL_CASE = re.compile(r"^[a-z][a-zA-Z0-9]*$")
SCREAMING_SNAKE = re.compile(r"^[A-Z][A-Z0-9_]*$")
SNAKE_CASE = re.compile(r"^[a-z][a-z0-9]*(?:_[a-z0-9]+)*$")
KEBAB_CASE = re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)*$")
HOOK_PREFIX = re.compile(r"^use[A-Z]")

_STYLE_PATTERNS: dict[str, re.Pattern[str]] = {
    "screaming_snake": SCREAMING_SNAKE,
    "pascal": PASCAL_CASE,
    "camel": CAMEL_CASE,
    "snake": SNAKE_CASE,
    "kebab": KEBAB_CASE,
}

# Order matters: the first style named in a rule wins.
_RULE_MARKERS: list[tuple[CaseStyle, re.Pattern[str]]] = [
    ("screaming_snake", re.compile(r"screaming[_ -]?snake", re.IGNORECASE)),
    ("pascal", re.compile(r"pascal[_ -]?case", re.IGNORECASE)),
    ("camel", re.compile(r"camel[_ -]?case", re.IGNORECASE)),
    ("snake", re.compile(r"snake[_ -]?case", re.IGNORECASE)),
    ("kebab", re.compile(r"kebab[_ -]?case", re.IGNORECASE)),
]

_WORD_BOUNDARY = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")


def matches_style(name: str, style: CaseStyle) -> bool:
    return bool(_STYLE_PATTERNS[style].match(name))


def style_in_rule(rule: str) -> Optional[CaseStyle]:
    """The case style a rule text names, checking styles in a fixed order."""
    for style, marker in _RULE_MARKERS:
        if marker.search(rule):
            return style
    return None


def split_words(name: str) -> list[str]:
    """``auth_helper`` -> [auth, helper]; ``APIClient`` -> [API, Client]."""
    words: list[str] = []
    for chunk in re.split(r"[^A-Za-z0-9]+", name):
        words.extend(_WORD_BOUNDARY.findall(chunk))
    return words


def to_camel(name: str) -> str:
    words = split_words(name)
    if not words:
        return name
    return words[0].lower() + "".join(w[:1].upper() + w[1:].lower() for w in words[1:])


def to_pascal(name: str) -> str:
    words = split_words(name)
    if not words:
        return name
    return "".join(w[:1].upper() + w[1:].lower() for w in words)


def convert(name: str, style: CaseStyle) -> str:
    """Convert ``name`` to ``style``; only camel and Pascal produce renames."""
    if style == "camel":
        return to_camel(name)
    if style == "pascal":
        return to_pascal(name)
    return name
