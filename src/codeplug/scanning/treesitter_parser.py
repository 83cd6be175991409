"""Tree-sitter parser wrapper for TypeScript / JavaScript sources.

Usage:
    parser = TreeSitterParser()
    tree = parser.parse(code_bytes, "src/components/UserProfile.tsx")

Parsing is recoverable: tree-sitter always returns a tree, marking the
unparseable regions with ERROR nodes, so visitors see a partial tree
rather than an exception.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Any, Optional

import tree_sitter
import tree_sitter_typescript

# Extension -> grammar. TSX is a superset that also accepts plain JS/JSX;
# plain .ts keeps the TypeScript grammar so ``<T>value`` casts parse.
GRAMMAR_BY_EXTENSION: dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "tsx",
    ".jsx": "tsx",
    ".mjs": "tsx",
    ".cjs": "tsx",
}

SUPPORTED_EXTENSIONS = frozenset(GRAMMAR_BY_EXTENSION)

_LANGUAGES: dict[str, Any] = {
    "typescript": tree_sitter.Language(tree_sitter_typescript.language_typescript()),
    "tsx": tree_sitter.Language(tree_sitter_typescript.language_tsx()),
}


def grammar_for(path: str) -> Optional[str]:
    """Return the grammar name for a file path, or None if unsupported."""
    return GRAMMAR_BY_EXTENSION.get(PurePosixPath(path).suffix.lower())


class TreeSitterParser:
    """Parses TS/JS source into tree-sitter trees.

    A fresh ``tree_sitter.Parser`` is created per call so files in one batch
    can be parsed from worker threads without sharing parser state.
    """

    def parse(self, code: bytes, path: str) -> Optional[Any]:
        """Parse code and return a syntax tree.

        Args:
            code: Source code as bytes
            path: File path (used to pick the grammar)

        Returns:
            Tree object, or None if the extension is not a supported source type
        """
        grammar = grammar_for(path)
        if grammar is None:
            return None
        parser = tree_sitter.Parser(_LANGUAGES[grammar])
        return parser.parse(code)

    def is_supported(self, path: str) -> bool:
        return grammar_for(path) is not None
