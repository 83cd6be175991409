"""Drift classification of source-control diffs against confirmed conventions."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Optional

from rich.console import Console
from rich.markup import escape

from ..config import CodePlugSettings, default_settings
from ..exceptions import SourceControlError
from ..logging_config import get_logger
from ..models import CommitInfo, Convention, DriftResult
from ..scanning import SUPPORTED_EXTENSIONS
from ..temporal.git import SourceControl, GitIntegration
from .diff_parser import parse_diff
from .gate import ConfidenceGate
from .matchers import MATCHERS, Matcher

logger = get_logger(__name__)

CLASSIFICATION_STYLES = {"drifting": "red", "ambiguous": "yellow", "following": "green"}


@dataclass
class CommitDrift:
    commit: CommitInfo
    results: list[DriftResult] = field(default_factory=list)


@dataclass
class DriftScan:
    """Outcome of a commit or staged scan.

    ``error`` is set when history could not be read; ``commits`` is then
    empty so no partial report is produced.
    """

    commits: list[CommitDrift] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def results(self) -> list[DriftResult]:
        return [r for c in self.commits for r in c.results]


class DriftClassifier:
    """Runs the dimension matchers over each hunk of a diff.

    Usage::

        classifier = DriftClassifier(Path("."), settings)
        scan = classifier.check_recent_commits(conventions)
        render_drift_report(scan, Console())
    """

    def __init__(
        self,
        project_root: Path = Path("."),
        settings: Optional[CodePlugSettings] = None,
        git: Optional[SourceControl] = None,
        matchers: Optional[dict[str, Matcher]] = None,
    ):
        self.settings = settings or default_settings
        self.git = git or GitIntegration(str(project_root))
        self.matchers = matchers if matchers is not None else MATCHERS
        self.gate = ConfidenceGate(self.settings.drift.confidence_threshold)

    def classify_diff(self, diff: str, conventions: list[Convention]) -> list[DriftResult]:
        """At most one result per (changed file, confirmed convention)."""
        confirmed = [c for c in conventions if c.confirmed]
        if not diff.strip() or not confirmed:
            return []

        results = []
        for hunk in parse_diff(diff):
            if hunk.binary or PurePosixPath(hunk.file).suffix.lower() not in SUPPORTED_EXTENSIONS:
                continue
            for convention in confirmed:
                matcher = self.matchers.get(convention.dimension)
                if matcher is None:
                    continue
                match = matcher(hunk, convention)
                if match is None:
                    continue
                gated = self.gate.gate(match.classification, match.confidence)
                results.append(
                    DriftResult(
                        file=hunk.file,
                        convention_id=convention.id,
                        dimension=convention.dimension,
                        rule=convention.rule,
                        classification=gated.classification,
                        confidence=gated.confidence,
                        detail=match.detail,
                        needs_review=gated.needs_review,
                    )
                )
        return results

    def check_recent_commits(
        self, conventions: list[Convention], count: Optional[int] = None
    ) -> DriftScan:
        count = count or self.settings.drift.commit_count
        scan = DriftScan()
        try:
            commits = self.git.recent_commits(count)
            diffs = [(c, self.git.diff_for_commit(c.hash)) for c in commits]
        except SourceControlError as e:
            logger.warning("Drift scan aborted: %s", e)
            return DriftScan(error=str(e))

        for commit, diff in diffs:
            scan.commits.append(CommitDrift(commit, self.classify_diff(diff, conventions)))
        logger.info("Drift scan over %d commits: %d results", len(commits), len(scan.results))
        return scan

    def check_staged(self, conventions: list[Convention]) -> DriftScan:
        """Classify the staged changes, reported as a single pseudo-commit."""
        try:
            diff = self.git.staged_diff()
        except SourceControlError as e:
            logger.warning("Staged drift check aborted: %s", e)
            return DriftScan(error=str(e))
        staged = CommitInfo(hash="staged", date="", message="Staged changes", author="")
        return DriftScan(commits=[CommitDrift(staged, self.classify_diff(diff, conventions))])


def render_drift_report(scan: DriftScan, console: Console) -> None:
    """Print results per commit, drifting before ambiguous."""
    if scan.error is not None:
        console.print(f"[red]Could not read history:[/red] {escape(scan.error)}")
        return

    results = scan.results
    if not results:
        console.print("[green]No drift detected.[/green]")
        return

    for classification in ("drifting", "ambiguous"):
        style = CLASSIFICATION_STYLES[classification]
        for entry in scan.commits:
            group = [r for r in entry.results if r.classification == classification]
            if not group:
                continue
            short = entry.commit.hash[:7]
            console.print(
                f"\n[{style}]{classification.upper()}[/{style}] "
                f"[bold]{escape(short)}[/bold] {escape(entry.commit.message)}"
            )
            for r in group:
                review = " [dim](needs review)[/dim]" if r.needs_review else ""
                console.print(
                    f"  {escape(r.file)} [dim]{r.dimension}[/dim] {r.confidence:.0%}{review}",
                    highlight=False,
                )
                console.print(f"    [dim]{escape(r.rule)}: {escape(r.detail)}[/dim]", highlight=False)

    drifting = sum(1 for r in results if r.classification == "drifting")
    ambiguous = sum(1 for r in results if r.classification == "ambiguous")
    console.print(f"\n{drifting} drifting, {ambiguous} ambiguous\n")
