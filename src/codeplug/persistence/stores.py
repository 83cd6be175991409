"""Stores for conventions, violations and custom rules.

Each store reads its file wholesale at the start of an operation and
writes it wholesale at the end.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..config import CONVENTIONS_FILE, RULES_FILE, VIOLATIONS_FILE
from ..models import Convention, CustomRule, Severity, Violation
from .json_store import read_validated, state_dir, write_json
from .schema import (
    ConventionModel,
    ConventionsFileModel,
    DecisionsFileModel,
    RulesFileModel,
    ViolationModel,
    ViolationsFileModel,
)

CONVENTIONS_VERSION = "1.0"


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ConventionStore:
    """``.codeplug/conventions.json``: the confirmed convention list."""

    def __init__(self, project_root: Path):
        self.path = state_dir(project_root) / CONVENTIONS_FILE

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> list[Convention]:
        """Stored conventions in saved order; empty if nothing was saved yet."""
        if not self.exists():
            return []
        parsed = read_validated(self.path, ConventionsFileModel)
        return [Convention(**c.model_dump()) for c in parsed.conventions]

    def save(self, conventions: list[Convention]) -> None:
        """Replace the stored list. ``created`` survives re-saves."""
        now = utc_now()
        created = now
        if self.exists():
            created = read_validated(self.path, ConventionsFileModel).created
        document = ConventionsFileModel(
            version=CONVENTIONS_VERSION,
            created=created,
            updated=now,
            conventions=[ConventionModel(**asdict(c)) for c in conventions],
        )
        write_json(self.path, document.model_dump(by_alias=True))


class ViolationStore:
    """``.codeplug/violations.json``: the result of the latest audit."""

    def __init__(self, project_root: Path):
        self.path = state_dir(project_root) / VIOLATIONS_FILE

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> list[Violation]:
        if not self.exists():
            return []
        parsed = read_validated(self.path, ViolationsFileModel)
        return [Violation(**v.model_dump()) for v in parsed.root]

    def save(self, violations: list[Violation]) -> None:
        payload = [
            ViolationModel(**asdict(v)).model_dump(by_alias=True, exclude_none=True) for v in violations
        ]
        write_json(self.path, payload)


class CustomRuleStore:
    """``.codeplug/rules.json``: user-authored regex rules. Read-only here."""

    def __init__(self, project_root: Path):
        self.path = state_dir(project_root) / RULES_FILE

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> list[CustomRule]:
        if not self.exists():
            return []
        parsed = read_validated(self.path, RulesFileModel)
        return [CustomRule(**r.model_dump()) for r in parsed.rules]


def read_decisions(path: Path) -> dict[str, Optional[Severity]]:
    """Accepted candidate ids mapped to an optional severity override.

    Raises:
        SchemaValidationError: The file is missing fields or malformed
    """
    parsed = read_validated(Path(path), DecisionsFileModel)
    return {d.id: d.severity for d in parsed.decisions if d.accept}
