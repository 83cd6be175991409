"""Auto-fixer: applies file renames proposed by auto-fixable violations.

Only file names change. Violations that would need a code edit are left in
place and reported as manual.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Literal, Optional

from ..logging_config import get_logger
from ..models import Violation
from ..persistence import ViolationStore

logger = get_logger(__name__)

FixStatus = Literal["fixed", "skipped", "manual"]


@dataclass(frozen=True)
class RenameAction:
    violation_id: str
    source: str  # project-relative
    target: str


@dataclass
class FixOutcome:
    violation_id: str
    status: FixStatus
    detail: str


@dataclass
class FixReport:
    outcomes: list[FixOutcome] = field(default_factory=list)

    def by_status(self, status: FixStatus) -> list[FixOutcome]:
        return [o for o in self.outcomes if o.status == status]

    @property
    def fixed(self) -> list[FixOutcome]:
        return self.by_status("fixed")


def rename_action(violation: Violation) -> Optional[RenameAction]:
    """The rename a violation proposes, if it is a same-directory file rename."""
    if not violation.auto_fixable:
        return None
    source = PurePosixPath(violation.file)
    expected = violation.expected
    if violation.found != source.name or "/" in expected or not expected.endswith(source.suffix):
        return None
    if expected == source.name:
        return None
    return RenameAction(violation.id, str(source), str(source.with_name(expected)))


class AutoFixer:
    def __init__(self, project_root: Path, store: Optional[ViolationStore] = None):
        self.project_root = Path(project_root)
        self.store = store or ViolationStore(self.project_root)

    def plan(self, violations: list[Violation]) -> list[RenameAction]:
        return [a for a in (rename_action(v) for v in violations) if a is not None]

    def _apply(self, violation: Violation) -> FixOutcome:
        action = rename_action(violation)
        if action is None:
            return FixOutcome(violation.id, "manual", f"{violation.file}: not a file rename")

        source = self.project_root / action.source
        target = self.project_root / action.target
        if not source.exists():
            return FixOutcome(violation.id, "skipped", f"{action.source} no longer exists")
        if target.exists() and not os.path.samefile(source, target):
            return FixOutcome(violation.id, "skipped", f"{action.target} already exists")

        if target.exists():
            # Case-only rename on a case-insensitive filesystem.
            interim = source.with_name(f".{source.name}.codeplug-rename")
            source.rename(interim)
            interim.rename(target)
        else:
            source.rename(target)
        logger.info("Renamed %s -> %s", action.source, action.target)
        return FixOutcome(violation.id, "fixed", f"{action.source} -> {action.target}")

    def _run(self, selected: list[Violation], all_violations: list[Violation]) -> FixReport:
        report = FixReport()
        for violation in selected:
            try:
                report.outcomes.append(self._apply(violation))
            except OSError as e:
                report.outcomes.append(FixOutcome(violation.id, "skipped", str(e)))

        fixed_ids = {o.violation_id for o in report.fixed}
        if fixed_ids:
            self.store.save([v for v in all_violations if v.id not in fixed_ids])
        return report

    def fix_by_id(self, violation_id: str) -> FixReport:
        violations = self.store.load()
        selected = [v for v in violations if v.id == violation_id]
        if not selected:
            return FixReport([FixOutcome(violation_id, "skipped", "no such violation")])
        return self._run(selected, violations)

    def fix_all(self) -> FixReport:
        """Apply every auto-fixable violation; non-rename ones are reported as manual."""
        violations = self.store.load()
        return self._run([v for v in violations if v.auto_fixable], violations)
