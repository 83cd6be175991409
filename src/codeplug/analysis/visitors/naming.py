"""File-name and constant naming conventions."""

from __future__ import annotations

from typing import Any, Optional

from ...config import NamingConfig
from ...models import Finding, ParsedFile
from ...scanning import syntax
from ..casing import CAMEL_CASE, HOOK_PREFIX, PASCAL_CASE, SCREAMING_SNAKE
from .base import file_ext, file_stem, is_test_file

COMPONENT_FILES = "React components use PascalCase file names"
HOOK_FILES = 'Hooks use "use" prefix with camelCase'
CLASS_FILES = "Class/service files use PascalCase"
UTILITY_FILES = "Utility files use camelCase"
CONSTANTS = "Constants use SCREAMING_SNAKE_CASE"

FILE_NAME_PATTERNS = frozenset({COMPONENT_FILES, HOOK_FILES, CLASS_FILES, UTILITY_FILES})

_LITERAL_TYPES = frozenset({"string", "number"})
_MODULE_EXTENSIONS = frozenset({".ts", ".js", ".mts", ".cts", ".mjs", ".cjs"})


class NamingVisitor:
    """File names by role (component, hook, class, utility) and literal constants.

    For a component file that breaks the convention, the primary export's
    name is attached so the fix can rename the file after it. For a
    PascalCase module whose exported class is named differently, the class
    and file names are reported as a mismatch.
    """

    def __init__(self, config: Optional[NamingConfig] = None):
        self.config = config or NamingConfig()

    def visit(self, file: ParsedFile) -> list[Finding]:
        findings: list[Finding] = []
        finding = self._file_name_finding(file)
        if finding is not None:
            findings.append(finding)
        constants = self._constants_finding(file)
        if constants is not None:
            findings.append(constants)
        return findings

    def _file_name_finding(self, file: ParsedFile) -> Optional[Finding]:
        path = file.path
        stem = file_stem(path)
        ext = file_ext(path)
        # Dotted stems (vite.config, Button.stories) are named for their tooling.
        if stem == "index" or "." in stem or is_test_file(path):
            return None

        if ext in self.config.component_extensions:
            primary = syntax.primary_export(file)
            conforming = bool(PASCAL_CASE.match(stem))
            hint = None
            if (
                not conforming
                and primary is not None
                and primary.kind in ("component", "class")
                and primary.name
                and PASCAL_CASE.match(primary.name)
            ):
                hint = primary.name
            return Finding(
                dimension="naming",
                pattern=COMPONENT_FILES,
                count=int(conforming),
                total=1,
                example=path,
                export_name=hint,
                export_kind=primary.kind if primary else None,
            )

        if ext not in _MODULE_EXTENSIONS:
            return None

        if HOOK_PREFIX.match(stem):
            return Finding(
                dimension="naming",
                pattern=HOOK_FILES,
                count=int(bool(CAMEL_CASE.match(stem))),
                total=1,
                example=path,
            )

        if PASCAL_CASE.match(stem):
            primary = syntax.primary_export(file)
            if primary is not None and primary.kind == "class" and primary.name != stem:
                return Finding(
                    dimension="naming",
                    pattern=CLASS_FILES,
                    count=0,
                    total=1,
                    example=path,
                    expected=stem,
                    found=primary.name,
                    export_kind="class",
                )
            return Finding(
                dimension="naming",
                pattern=CLASS_FILES,
                count=1,
                total=1,
                example=path,
                export_kind=primary.kind if primary else None,
            )

        return Finding(
            dimension="naming",
            pattern=UTILITY_FILES,
            count=int(bool(CAMEL_CASE.match(stem))),
            total=1,
            example=path,
        )

    def _constants_finding(self, file: ParsedFile) -> Optional[Finding]:
        """Top-level ``const`` declarations initialized with a string or number literal."""
        source = file.source_bytes
        total = screaming = 0
        for stmt in file.root.named_children:
            decl: Any = stmt
            if stmt.type == "export_statement":
                decl = stmt.child_by_field_name("declaration")
            if decl is None or decl.type != "lexical_declaration" or not syntax.has_token(decl, "const"):
                continue
            for declarator in decl.named_children:
                if declarator.type != "variable_declarator":
                    continue
                name = declarator.child_by_field_name("name")
                value = syntax.unwrap(declarator.child_by_field_name("value"))
                if name is None or name.type != "identifier" or value is None:
                    continue
                if value.type not in _LITERAL_TYPES:
                    continue
                total += 1
                if SCREAMING_SNAKE.match(syntax.text(name, source)):
                    screaming += 1
        if total == 0:
            return None
        return Finding(
            dimension="naming",
            pattern=CONSTANTS,
            count=screaming,
            total=total,
            example=file.path,
        )
