"""Per-file directory placement (``useAuth`` belongs under ``hooks/``)."""

from __future__ import annotations

import re
from typing import Optional

from ...config import DirectoryPlacementRule, StructureConfig
from ...models import Finding, ParsedFile
from .base import file_stem


def placement_findings(path: str, rules: list[DirectoryPlacementRule]) -> list[Finding]:
    """One sample per rule whose file pattern matches the stem of ``path``."""
    stem = file_stem(path)
    dirs = path.split("/")[:-1]
    findings = []
    for rule in rules:
        if not re.search(rule.file_pattern, stem):
            continue
        findings.append(
            Finding(
                dimension="structure",
                pattern=rule.pattern_name,
                count=int(rule.dir in dirs),
                total=1,
                example=path,
                expected=f"{rule.dir}/",
                found="/".join(dirs) + "/" if dirs else "./",
            )
        )
    return findings


class StructureVisitor:
    """Directory placement for one file.

    Project-wide structure (architecture style, ``src/`` root) needs the
    whole tree and is derived by the aggregator instead.
    """

    def __init__(self, config: Optional[StructureConfig] = None):
        self.config = config or StructureConfig()

    def visit(self, file: ParsedFile) -> list[Finding]:
        return placement_findings(file.path, self.config.directory_placement)
