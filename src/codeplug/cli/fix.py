"""Fix CLI command -- apply auto-fixable file renames."""

from typing import Optional

import typer
from rich.markup import escape

from ..exceptions import CodePlugError
from ..scoring import AutoFixer
from . import app
from ._common import console, fail, project_root

STATUS_STYLES = {"fixed": "green", "skipped": "yellow", "manual": "dim"}


@app.command()
def fix(
    ctx: typer.Context,
    violation_id: Optional[str] = typer.Option(None, "--id", help="Fix one violation by id"),
    fix_all: bool = typer.Option(False, "--all", help="Fix every auto-fixable violation"),
):
    """
    Rename files flagged by auto-fixable violations from the last audit.

    [bold cyan]Examples:[/bold cyan]

      codeplug fix --id 3f2a...

      codeplug fix --all
    """
    if (violation_id is None) == (not fix_all):
        console.print("[red]Error:[/red] pass exactly one of --id or --all")
        raise typer.Exit(2)

    fixer = AutoFixer(project_root(ctx))
    try:
        report = fixer.fix_by_id(violation_id) if violation_id else fixer.fix_all()
    except CodePlugError as e:
        fail(e)

    if not report.outcomes:
        console.print("[green]Nothing to fix.[/green]")
        return
    for outcome in report.outcomes:
        style = STATUS_STYLES[outcome.status]
        console.print(f"[{style}]{outcome.status:>7}[/{style}] {escape(outcome.detail)}", highlight=False)
    console.print(f"\n{len(report.fixed)} fixed")
