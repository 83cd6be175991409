"""Dimension-specific drift heuristics over one diff hunk.

Each matcher takes a hunk and a confirmed convention and returns a
:class:`MatchResult` or None when nothing looks off. New dimensions register
an entry in :data:`MATCHERS`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Callable, Optional

from ..analysis.casing import PASCAL_CASE, SCREAMING_SNAKE, matches_style, style_in_rule
from ..models import Classification, Convention, DiffHunk

STRUCTURE_EXPORT_CONFIDENCE = 0.8
STRUCTURE_LOCATION_CONFIDENCE = 0.5
TYPE_IMPORT_CONFIDENCE = 0.55
DEEP_IMPORT_CONFIDENCE = 0.6
UNGUARDED_AWAIT_CONFIDENCE = 0.6


@dataclass(frozen=True)
class MatchResult:
    classification: Classification
    confidence: float
    detail: str


Matcher = Callable[[DiffHunk, Convention], Optional[MatchResult]]

_DECLARATION = re.compile(r"\b(function|const|let|var|class|interface|type|enum)\s+([A-Za-z_$][\w$]*)")
_CONST_LITERAL = re.compile(r"\bconst\s+([A-Za-z_$][\w$]*)\s*(?::[^=]+)?=\s*(?:['\"`]|-?\d)")
_TYPE_KEYWORDS = frozenset({"class", "interface", "type", "enum"})

_STYLE_LABELS = {
    "screaming_snake": "SCREAMING_SNAKE_CASE",
    "pascal": "PascalCase",
    "camel": "camelCase",
    "snake": "snake_case",
    "kebab": "kebab-case",
}


def _naming_candidates(hunk: DiffHunk, style: str) -> list[str]:
    """Identifiers a rule of ``style`` speaks about.

    PascalCase rules cover type-like declarations; SCREAMING_SNAKE rules cover
    literal constants; kebab-case can only describe the file name. Other
    styles cover values, where PascalCase components and SCREAMING constants
    follow their own conventions.
    """
    added = hunk.added_text
    if style == "kebab":
        return [PurePosixPath(hunk.file).stem]
    if style == "screaming_snake":
        return _CONST_LITERAL.findall(added)
    declared = _DECLARATION.findall(added)
    if style == "pascal":
        return [name for keyword, name in declared if keyword in _TYPE_KEYWORDS]
    return [
        name
        for keyword, name in declared
        if keyword not in _TYPE_KEYWORDS
        and not PASCAL_CASE.match(_bare(name))
        and not SCREAMING_SNAKE.match(_bare(name))
    ] + [
        # A lower-case class or type name is a value-style name either way.
        name
        for keyword, name in declared
        if keyword in _TYPE_KEYWORDS and not PASCAL_CASE.match(name)
    ]


def _bare(name: str) -> str:
    """``name`` without one leading ``_`` or ``$`` (private or framework marker)."""
    return name[1:] if name[:1] in ("_", "$") else name


def match_naming(hunk: DiffHunk, convention: Convention) -> Optional[MatchResult]:
    style = style_in_rule(convention.rule)
    if style is None:
        return None
    distinct = list(dict.fromkeys(_naming_candidates(hunk, style)))
    if not distinct:
        return None
    violating = [name for name in distinct if _bare(name) and not matches_style(_bare(name), style)]
    if not violating:
        return None
    ratio = len(violating) / len(distinct)
    return MatchResult(
        classification="drifting" if ratio > 0.5 else "ambiguous",
        confidence=round(ratio, 2),
        detail=(
            f"{len(violating)}/{len(distinct)} new identifiers are not {_STYLE_LABELS[style]}: "
            + ", ".join(violating[:5])
        ),
    )


_DEFAULT_EXPORT = re.compile(r"^\s*export\s+default\b", re.MULTILINE)
_NAMED_EXPORT = re.compile(r"^\s*export\s+(?!default\b)", re.MULTILINE)


def _directory_segments(path: str) -> set[str]:
    parts = [p for p in path.strip("/").split("/") if p]
    if parts and "." in parts[-1]:
        parts = parts[:-1]
    return set(parts)


def match_structure(hunk: DiffHunk, convention: Convention) -> Optional[MatchResult]:
    rule = convention.rule.lower()
    added = hunk.added_text

    expects = None
    if "named export" in rule:
        expects = "named"
    elif "default export" in rule:
        expects = "default"
    if expects == "named" and _DEFAULT_EXPORT.search(added):
        return MatchResult("drifting", STRUCTURE_EXPORT_CONFIDENCE, "Adds a default export where named exports are expected")
    if expects == "default" and _NAMED_EXPORT.search(added) and not _DEFAULT_EXPORT.search(added):
        return MatchResult("drifting", STRUCTURE_EXPORT_CONFIDENCE, "Adds named exports where a default export is expected")

    if ("directory" in rule or "folder" in rule) and convention.examples:
        expected_dirs: set[str] = set()
        for example in convention.examples:
            expected_dirs |= _directory_segments(example)
        changed_dirs = _directory_segments(hunk.file)
        if expected_dirs and not (changed_dirs & expected_dirs):
            return MatchResult(
                "ambiguous",
                STRUCTURE_LOCATION_CONFIDENCE,
                f"{hunk.file} is outside the directories this convention was seen in",
            )
    return None


_IMPORT_LINE = re.compile(r"^\s*import\s", re.MULTILINE)
_TYPE_ONLY_IMPORT = re.compile(r"\bimport\s+type\b|[{,]\s*type\s+[A-Za-z_$]")
_DEEP_RELATIVE = re.compile(r"""(?:from\s+|require\(\s*|import\(\s*)['"](\.\./\.\./[^'"]*)['"]""")


def match_imports(hunk: DiffHunk, convention: Convention) -> Optional[MatchResult]:
    rule = convention.rule.lower()
    added = hunk.added_text

    if "type" in rule and _IMPORT_LINE.search(added):
        if re.search(r"type", added, re.IGNORECASE) and not _TYPE_ONLY_IMPORT.search(added):
            return MatchResult(
                "ambiguous",
                TYPE_IMPORT_CONFIDENCE,
                "References types without a type-only import",
            )

    if "barrel" in rule or "index" in rule:
        deep = _DEEP_RELATIVE.findall(added)
        if deep:
            return MatchResult(
                "ambiguous",
                DEEP_IMPORT_CONFIDENCE,
                f"Deep relative import instead of a barrel: {deep[0]}",
            )
    return None


_ASYNC = re.compile(r"\basync\b")
_AWAIT = re.compile(r"\bawait\b")
_TRY = re.compile(r"\btry\s*\{")


def match_error_handling(hunk: DiffHunk, convention: Convention) -> Optional[MatchResult]:
    added = hunk.added_text
    if _ASYNC.search(added) and _AWAIT.search(added) and not _TRY.search(added):
        return MatchResult(
            "ambiguous",
            UNGUARDED_AWAIT_CONFIDENCE,
            "Adds an async function that awaits without try/catch",
        )
    return None


MATCHERS: dict[str, Matcher] = {
    "naming": match_naming,
    "structure": match_structure,
    "imports": match_imports,
    "error-handling": match_error_handling,
}
