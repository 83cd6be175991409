"""Source discovery and tree-sitter parsing for TypeScript/JavaScript projects."""

from .analyzer import AstAnalyzer, build_folder_tree, read_and_parse
from .discovery import discover_source_files, glob_match
from .treesitter_parser import SUPPORTED_EXTENSIONS, TreeSitterParser, grammar_for

__all__ = [
    "AstAnalyzer",
    "build_folder_tree",
    "read_and_parse",
    "discover_source_files",
    "glob_match",
    "SUPPORTED_EXTENSIONS",
    "TreeSitterParser",
    "grammar_for",
]
