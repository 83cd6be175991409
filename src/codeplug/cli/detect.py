"""Detect CLI command -- infer convention candidates and confirm them."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..analysis import ConventionDetector, detect_semantic_pattern
from ..exceptions import CodePlugError, ModelBackendError
from ..inference import ModelManager
from ..logging_config import get_logger
from ..models import AnalysisResult, Convention, ConventionCandidate
from ..persistence import ConventionStore, read_decisions
from ..scanning import AstAnalyzer
from . import app
from ._common import console, fail, project_root, resolve_settings

logger = get_logger(__name__)


@app.command()
def detect(
    ctx: typer.Context,
    accept_all: bool = typer.Option(
        False, "--accept-all", help="Confirm every candidate as a convention"
    ),
    decisions: Optional[Path] = typer.Option(
        None,
        "--decisions",
        help="JSON file of accept/reject decisions per candidate id",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    semantic: bool = typer.Option(
        False, "--semantic", help="Also run the model-backed semantic coherence phase"
    ),
    force: bool = typer.Option(
        False, "--force", help="Overwrite previously confirmed conventions"
    ),
):
    """
    Analyze the project and propose conventions.

    Without [bold]--accept-all[/bold] or [bold]--decisions[/bold] the
    candidates are only listed.

    [bold cyan]Examples:[/bold cyan]

      codeplug detect

      codeplug detect --accept-all

      codeplug detect --decisions decisions.json --force
    """
    root = project_root(ctx)
    overrides = {"convention": {"enable_semantic_coherence": True}} if semantic else {}
    settings = resolve_settings(ctx, **overrides)
    store = ConventionStore(root)
    confirming = accept_all or decisions is not None

    if confirming and store.exists() and not force:
        console.print(
            "[yellow]Conventions already exist.[/yellow] Re-run with [bold]--force[/bold] to replace them."
        )
        raise typer.Exit(1)

    try:
        with console.status("Analyzing project..."):
            analysis = AstAnalyzer(root, settings).analyze()
        if semantic:
            _add_semantic_pattern(root, analysis, ModelManager(settings.models))
        candidates = ConventionDetector(settings).detect(analysis)
        console.print(
            f"Analyzed [bold]{analysis.file_count}[/bold] files in {analysis.duration_ms} ms"
        )
        _print_candidates(candidates)

        if not confirming:
            return
        if accept_all:
            accepted = [Convention.from_candidate(c) for c in candidates]
        else:
            chosen = read_decisions(decisions)
            accepted = [
                Convention.from_candidate(c, chosen[c.id]) for c in candidates if c.id in chosen
            ]
        store.save(accepted)
    except CodePlugError as e:
        fail(e)

    console.print(f"[green]Saved {len(accepted)} conventions[/green] to {store.path}")


def _add_semantic_pattern(root: Path, analysis: AnalysisResult, models: ModelManager) -> None:
    try:
        pattern = detect_semantic_pattern(root, analysis.file_paths, models)
    except ModelBackendError as e:
        logger.warning("Semantic pattern detection skipped: %s", e)
        console.print(f"[yellow]Semantic phase skipped:[/yellow] {e}")
        return
    if pattern is not None:
        analysis.patterns.append(pattern)
        analysis.patterns.sort(key=lambda p: p.confidence, reverse=True)


def _print_candidates(candidates: list[ConventionCandidate]) -> None:
    if not candidates:
        console.print("[yellow]No convention candidates found.[/yellow]")
        return
    table = Table(title="Convention candidates", show_lines=False)
    table.add_column("ID", style="dim")
    table.add_column("Dimension")
    table.add_column("Rule")
    table.add_column("Confidence", justify="right")
    table.add_column("Severity")
    for c in candidates:
        table.add_row(c.id, c.dimension, c.rule, f"{c.confidence}%", c.severity)
    console.print(table)
