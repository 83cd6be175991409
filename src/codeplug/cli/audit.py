"""Audit CLI command -- find violations and score compliance."""

from typing import Optional

import typer

from ..exceptions import CodePlugError
from ..persistence import ConventionStore, CustomRuleStore
from ..scoring import ComplianceScorer, ViolationDetector, render_report
from . import app
from ._common import console, fail, project_root, resolve_settings


@app.command()
def audit(
    ctx: typer.Context,
    since: Optional[str] = typer.Option(
        None,
        "--since",
        help="Only audit files changed in commits after this date (e.g. '1 week ago')",
    ),
):
    """
    Audit the project against its confirmed conventions and custom rules.

    Exits 1 when the compliance score is below the configured threshold.

    [bold cyan]Examples:[/bold cyan]

      codeplug audit

      codeplug audit --since "2 days ago"
    """
    root = project_root(ctx)
    settings = resolve_settings(ctx)

    try:
        conventions = ConventionStore(root).load()
        if not conventions:
            console.print(
                "[yellow]No conventions found.[/yellow] "
                "Run [bold]codeplug detect --accept-all[/bold] first."
            )
            raise typer.Exit(1)
        rules = CustomRuleStore(root).load()

        with console.status("Auditing..."):
            result = ViolationDetector(root, settings).audit(conventions, since, rules)
        if result.aborted:
            console.print(f"[red]Could not read history:[/red] {result.source_control_error}")
            raise typer.Exit(1)
        if result.semantic_status == "skipped":
            console.print(f"[yellow]Semantic check skipped:[/yellow] {result.semantic_error}")

        score = ComplianceScorer(settings.scoring).score_and_persist(result.violations, root)
    except CodePlugError as e:
        fail(e)

    render_report(score, result.violations, console)
    if not score.passed:
        raise typer.Exit(1)
