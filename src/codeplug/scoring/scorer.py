"""Severity-weighted compliance scoring."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from ..config import SEVERITY_NAMES, ScoringConfig
from ..logging_config import get_logger
from ..models import ComplianceScore, ScoreRecord, Violation
from ..persistence import ScoreStore, project_hash
from .trend import TrendTracker

logger = get_logger(__name__)

SEVERITY_STYLES = {
    "critical": "bold red",
    "high": "red",
    "medium": "yellow",
    "low": "blue",
}
TREND_ICONS = {"improving": "↗", "stable": "→", "declining": "↘"}


class ComplianceScorer:
    """Scores a violation list: 100 minus a per-severity weight per violation, floored at 0.

    Example:
        >>> scorer = ComplianceScorer()
        >>> scorer.calculate([]).total
        100
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def calculate(self, violations: list[Violation]) -> ComplianceScore:
        breakdown = {severity: 0 for severity in SEVERITY_NAMES}
        deduction = 0
        for v in violations:
            breakdown[v.severity] += 1
            deduction += self.config.weights[v.severity]
        return ComplianceScore(
            total=max(0, 100 - deduction),
            breakdown=breakdown,
            violation_count=len(violations),
            threshold=self.config.threshold,
        )

    def score_and_persist(
        self,
        violations: list[Violation],
        project_root: Path,
        store: Optional[ScoreStore] = None,
    ) -> ComplianceScore:
        """Score, append a :class:`ScoreRecord`, and attach the trend over the window.

        Raises:
            StoreWriteError: The record could not be written
            SchemaValidationError: Stored history is malformed
        """
        score = self.calculate(violations)
        record = ScoreRecord(
            id=str(uuid.uuid4()),
            project_hash=project_hash(project_root),
            score=score.total,
            breakdown=dict(score.breakdown),
            created_at=datetime.now(timezone.utc).isoformat(),
        )

        owned = store is None
        store = store or ScoreStore(project_root)
        if owned:
            store.connect()
        try:
            store.save(record)
            history = store.history(limit=self.config.trend_window, project=record.project_hash)
        finally:
            if owned:
                store.close()

        score.trend = TrendTracker(self.config.trend_window).compute_trend(history)
        logger.debug("Score %d (%s) over %d records", score.total, score.trend, len(history))
        return score


def render_report(score: ComplianceScore, violations: list[Violation], console: Console) -> None:
    """Print the compliance report grouped by severity, critical first."""
    icon = TREND_ICONS.get(score.trend or "", "")
    console.print(f"\n[bold]Compliance Score: {score.total}/100[/bold] {icon}\n")

    if not violations:
        console.print("[green]No violations found.[/green]\n")
    for severity in SEVERITY_NAMES:
        group = [v for v in violations if v.severity == severity]
        if not group:
            continue
        style = SEVERITY_STYLES[severity]
        console.print(f"[{style}]{severity.upper()}[/{style}] ({len(group)}):")
        for v in group:
            location = f"{v.file}:{v.line}" if v.line else v.file
            console.print(f"  [red]{escape(location)}[/red]", highlight=False)
            console.print(f"    [dim]{escape(v.message)}[/dim]", highlight=False)
            console.print(f"    [dim]Expected: {escape(v.expected)}[/dim]", highlight=False)
            console.print(f"    [dim]Found:    {escape(v.found)}[/dim]", highlight=False)
            if v.auto_fixable:
                console.print(f"    [cyan]Auto-fixable: codeplug fix --id {v.id}[/cyan]")
        console.print()

    verdict = "[green]PASS[/green]" if score.passed else "[red]FAIL[/red]"
    console.print(
        f"{verdict} Threshold: {score.threshold} | Score: {score.total} | Issues: {score.violation_count}\n"
    )
