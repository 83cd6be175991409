"""Import style: named vs default, barrel (index) imports."""

from __future__ import annotations

import re
from pathlib import PurePosixPath

from ...models import Finding, ParsedFile
from ...scanning import syntax

NAMED_PREFERRED = "Prefer named imports over default imports"
DEFAULT_PREVALENT = "Default imports prevalent"
BARREL = "Barrel imports (index re-exports)"

_SIBLING = re.compile(r"^\.\.?/[^/]+$")


def is_barrel_source(src: str) -> bool:
    """``./components`` or ``../lib/index``: a directory import resolved through an index file."""
    if not (src.endswith("/index") or _SIBLING.match(src)):
        return False
    base = PurePosixPath(src).name
    return base == "index" or "." not in base


class ImportVisitor:
    def visit(self, file: ParsedFile) -> list[Finding]:
        source = file.source_bytes
        total = named = default = barrel = 0

        for stmt in file.root.named_children:
            if stmt.type != "import_statement":
                continue
            total += 1
            for clause in stmt.named_children:
                if clause.type != "import_clause":
                    continue
                for part in clause.named_children:
                    if part.type == "identifier":
                        default += 1
                    elif part.type == "named_imports":
                        named += 1
            if is_barrel_source(syntax.import_source(stmt, source)):
                barrel += 1

        if total == 0:
            return []

        findings = []
        if named > default:
            findings.append(
                Finding(dimension="imports", pattern=NAMED_PREFERRED, count=named, total=total, example=file.path)
            )
        elif default:
            findings.append(
                Finding(dimension="imports", pattern=DEFAULT_PREVALENT, count=default, total=total, example=file.path)
            )
        if barrel:
            findings.append(
                Finding(dimension="imports", pattern=BARREL, count=barrel, total=total, example=file.path)
            )
        return findings
