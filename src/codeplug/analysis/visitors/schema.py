"""Decorator-driven schema naming (TypeORM ``@Entity`` classes)."""

from __future__ import annotations

from ...models import Finding, ParsedFile
from ...scanning import syntax
from ..casing import PASCAL_CASE
from .base import file_ext

ENTITY_NAMES = "TypeORM entity names use PascalCase"

_SCHEMA_EXTENSIONS = frozenset({".ts", ".tsx", ".mts", ".cts"})


class SchemaVisitor:
    def visit(self, file: ParsedFile) -> list[Finding]:
        if file_ext(file.path) not in _SCHEMA_EXTENSIONS:
            return []

        source = file.source_bytes
        entities = pascal = 0
        for node in syntax.walk(file.root):
            if node.type not in syntax.CLASS_TYPES:
                continue
            decorators = syntax.decorator_names(node, source)
            # `@Entity() export class X` hangs the decorator on the export statement.
            if node.parent is not None and node.parent.type == "export_statement":
                decorators += syntax.decorator_names(node.parent, source)
            if "Entity" not in decorators:
                continue
            name = node.child_by_field_name("name")
            if name is None:
                continue
            entities += 1
            if PASCAL_CASE.match(syntax.text(name, source)):
                pascal += 1

        if not entities:
            return []
        return [
            Finding(dimension="naming", pattern=ENTITY_NAMES, count=pascal, total=entities, example=file.path)
        ]
