"""Violation detection against confirmed conventions and custom rules."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Literal, Optional

from ..analysis.casing import convert, style_in_rule
from ..analysis.semantic import detect_semantic_violations, find_semantic_convention
from ..analysis.visitors import Visitor, default_visitors, run_visitors
from ..analysis.visitors.naming import FILE_NAME_PATTERNS
from ..config import CodePlugSettings, default_settings
from ..exceptions import FileAccessError, ModelBackendError, ParsingError, SourceControlError
from ..inference import ModelManager
from ..logging_config import get_logger
from ..models import Convention, CustomRule, Finding, ParsedFile, Violation
from ..persistence import ViolationStore
from ..scanning import TreeSitterParser, discover_source_files, read_and_parse
from ..temporal.git import GitIntegration

logger = get_logger(__name__)

SemanticStatus = Literal["ran", "skipped", "not_applicable"]

MIN_SEMANTIC_TARGETS = 3
CUSTOM_RULE_SEVERITY = "medium"


@dataclass
class AuditResult:
    violations: list[Violation] = field(default_factory=list)
    target_files: list[str] = field(default_factory=list)
    semantic_status: SemanticStatus = "not_applicable"
    semantic_error: Optional[str] = None
    source_control_error: Optional[str] = None

    @property
    def aborted(self) -> bool:
        """True when the since-window could not be resolved from history."""
        return self.source_control_error is not None


def _new_id() -> str:
    return str(uuid.uuid4())


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


class ViolationDetector:
    """Re-runs the visitor pipeline over target files and reports non-conforming findings.

    Usage::

        detector = ViolationDetector(Path("."), settings)
        result = detector.audit(conventions, since="1 week ago", custom_rules=rules)
    """

    def __init__(
        self,
        project_root: Path,
        settings: Optional[CodePlugSettings] = None,
        git: Optional[GitIntegration] = None,
        models: Optional[ModelManager] = None,
        visitors: Optional[list[Visitor]] = None,
    ):
        self.project_root = Path(project_root)
        self.settings = settings or default_settings
        self.git = git or GitIntegration(str(self.project_root))
        self.models = models
        self.visitors = visitors if visitors is not None else default_visitors(self.settings)
        self.parser = TreeSitterParser()

    # ── target files ──────────────────────────────────────────────

    def resolve_targets(self, since: Optional[str] = None) -> list[str]:
        """All source files, or only those touched by commits after ``since``.

        Raises:
            SourceControlError: History could not be read for a since-window
        """
        files = discover_source_files(self.project_root, self.settings.analysis, self.git)
        if since is None:
            return files
        changed = set(self.git.files_changed_since(since))
        return [f for f in files if f in changed]

    # ── custom rules ──────────────────────────────────────────────

    def check_custom_rules(self, files: list[str], rules: list[CustomRule]) -> list[Violation]:
        """One violation per (rule, file) whose regex matches the rule's scope."""
        violations: list[Violation] = []
        for rule in rules:
            try:
                regex = re.compile(rule.pattern)
            except re.error as e:
                logger.warning("Skipping custom rule %s: invalid pattern (%s)", rule.id, e)
                continue
            for rel in files:
                if rule.scope == "filename":
                    subject = PurePosixPath(rel).name
                elif rule.scope == "path":
                    subject = rel
                else:
                    try:
                        subject = (self.project_root / rel).read_text(encoding="utf-8")
                    except (OSError, UnicodeDecodeError) as e:
                        logger.debug("Custom rule %s cannot read %s: %s", rule.id, rel, e)
                        continue
                match = regex.search(subject)
                if match is None:
                    continue
                violations.append(
                    Violation(
                        id=_new_id(),
                        convention_id=f"custom:{rule.id}",
                        severity=rule.severity or CUSTOM_RULE_SEVERITY,
                        file=rel,
                        line=_line_of(subject, match.start()) if rule.scope == "content" else None,
                        message=rule.message,
                        expected=f"No match for /{rule.pattern}/ in {rule.scope}",
                        found=match.group(0)[:120],
                        auto_fixable=False,
                    )
                )
        return violations

    # ── visitor findings ──────────────────────────────────────────

    def violation_for(self, finding: Finding, convention: Convention, path: str) -> Violation:
        """Build the violation for a non-conforming finding on ``path``."""
        name = PurePosixPath(path).name
        stem, ext = PurePosixPath(path).stem, PurePosixPath(path).suffix
        auto_fixable = False

        if finding.expected is not None and finding.found is not None:
            expected, found = finding.expected, finding.found
        elif finding.total == 1 and finding.pattern in FILE_NAME_PATTERNS:
            found = name
            if finding.export_name:
                expected = f"{finding.export_name}{ext}"
                auto_fixable = expected != name
            else:
                style = style_in_rule(convention.rule)
                renamed = convert(stem, style) if style else stem
                if renamed != stem:
                    expected = f"{renamed}{ext}"
                    auto_fixable = True
                else:
                    expected = convention.rule
        else:
            expected = convention.rule
            found = f"{finding.count}/{finding.total} conforming"

        return Violation(
            id=_new_id(),
            convention_id=convention.id,
            severity=convention.severity,
            file=path,
            message=f"Violates: {convention.rule}",
            expected=expected,
            found=found,
            auto_fixable=auto_fixable,
        )

    def check_file(self, file: ParsedFile, conventions: dict[tuple[str, str], Convention]) -> list[Violation]:
        violations = []
        for finding in run_visitors(file, self.visitors):
            if finding.count >= finding.total:
                continue
            convention = conventions.get(finding.key)
            if convention is not None:
                violations.append(self.violation_for(finding, convention, file.path))
        return violations

    # ── entry points ──────────────────────────────────────────────

    def detect(
        self,
        conventions: list[Convention],
        since: Optional[str] = None,
        custom_rules: Optional[list[CustomRule]] = None,
    ) -> AuditResult:
        """Find violations without persisting them."""
        result = AuditResult()
        try:
            result.target_files = self.resolve_targets(since)
        except SourceControlError as e:
            logger.warning("Cannot resolve files changed since %s: %s", since, e)
            result.source_control_error = str(e)
            return result

        targets = result.target_files
        result.violations.extend(self.check_custom_rules(targets, custom_rules or []))

        confirmed = {(c.dimension, c.rule): c for c in conventions if c.confirmed}
        for rel in targets:
            try:
                parsed = read_and_parse(self.project_root, rel, self.parser)
            except (FileAccessError, ParsingError) as e:
                logger.debug("Skipping %s: %s", rel, e)
                continue
            result.violations.extend(self.check_file(parsed, confirmed))

        self._semantic_pass(conventions, result)
        logger.info("%d violations across %d files", len(result.violations), len(targets))
        return result

    def _semantic_pass(self, conventions: list[Convention], result: AuditResult) -> None:
        config = self.settings.convention
        convention = find_semantic_convention(conventions)
        if (
            convention is None
            or not config.enable_semantic_coherence
            or len(result.target_files) < MIN_SEMANTIC_TARGETS
        ):
            return
        models = self.models or ModelManager(self.settings.models)
        try:
            found = detect_semantic_violations(
                self.project_root,
                result.target_files,
                convention,
                models,
                threshold=config.semantic_fit_threshold,
            )
        except ModelBackendError as e:
            logger.warning("Semantic coherence check skipped: %s", e)
            result.semantic_status = "skipped"
            result.semantic_error = str(e)
            return
        result.semantic_status = "ran"
        result.violations.extend(found)

    def audit(
        self,
        conventions: list[Convention],
        since: Optional[str] = None,
        custom_rules: Optional[list[CustomRule]] = None,
        store: Optional[ViolationStore] = None,
    ) -> AuditResult:
        """Detect and replace the persisted violation list.

        Nothing is written when the since-window could not be resolved.

        Raises:
            StoreWriteError: violations.json could not be written
        """
        result = self.detect(conventions, since, custom_rules)
        if result.aborted:
            return result
        (store or ViolationStore(self.project_root)).save(result.violations)
        return result
