"""Drift CLI command -- classify recent commits or staged changes."""

from typing import Optional

import typer

from ..drift import DriftClassifier, render_drift_report
from ..exceptions import CodePlugError
from ..persistence import ConventionStore
from . import app
from ._common import console, fail, project_root, resolve_settings


@app.command()
def drift(
    ctx: typer.Context,
    count: Optional[int] = typer.Option(
        None, "--count", "-n", help="Number of recent commits to scan", min=1, max=500
    ),
    staged: bool = typer.Option(False, "--staged", help="Check staged changes instead of commits"),
):
    """
    Check recent commits for drift away from confirmed conventions.

    [bold cyan]Examples:[/bold cyan]

      codeplug drift

      codeplug drift --count 20

      codeplug drift --staged
    """
    root = project_root(ctx)
    settings = resolve_settings(ctx)
    try:
        conventions = ConventionStore(root).load()
    except CodePlugError as e:
        fail(e)
    if not any(c.confirmed for c in conventions):
        console.print("[yellow]No confirmed conventions.[/yellow] Nothing to check.")
        raise typer.Exit(0)

    classifier = DriftClassifier(root, settings)
    if staged:
        scan = classifier.check_staged(conventions)
    else:
        scan = classifier.check_recent_commits(conventions, count)

    render_drift_report(scan, console)
    if scan.error is not None:
        raise typer.Exit(1)
