"""Score CLI command -- show the latest score and its history."""

import typer

from ..exceptions import CodePlugError
from ..persistence import ScoreStore, project_hash
from ..scoring import TrendTracker
from ..scoring.scorer import TREND_ICONS
from . import app
from ._common import console, fail, project_root, resolve_settings


@app.command()
def score(
    ctx: typer.Context,
    limit: int = typer.Option(12, "--limit", "-n", help="History entries to chart", min=1, max=1000),
):
    """
    Show the latest compliance score with its trend chart.

    [bold cyan]Examples:[/bold cyan]

      codeplug score

      codeplug score --limit 30
    """
    root = project_root(ctx)
    settings = resolve_settings(ctx)
    project = project_hash(root)

    try:
        with ScoreStore(root) as store:
            latest = store.latest(project)
            history = store.history(limit=max(limit, settings.scoring.trend_window), project=project)
    except CodePlugError as e:
        fail(e)

    if latest is None:
        console.print(
            "[yellow]No scores recorded yet.[/yellow] Run [bold]codeplug audit[/bold] first."
        )
        raise typer.Exit(0)

    tracker = TrendTracker(settings.scoring.trend_window)
    trend = tracker.compute_trend(history[-settings.scoring.trend_window :])
    console.print(
        f"\n[bold]Latest score: {latest.score}/100[/bold] {TREND_ICONS[trend]} {trend}\n"
    )
    console.print(tracker.render_trend_chart(history[-limit:]), highlight=False)
