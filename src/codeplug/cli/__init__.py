"""CLI entry point: registers all subcommands."""

from pathlib import Path
from typing import Optional

import typer

from ..logging_config import setup_logging
from ._common import console

app = typer.Typer(
    name="codeplug",
    help="CodePlug - Infer, audit and track a codebase's own conventions",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def root(
    ctx: typer.Context,
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Project root (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write logs to this file"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
):
    """
    Infer a project's conventions, audit against them, and detect drift.

    [bold cyan]Examples:[/bold cyan]

      codeplug detect --accept-all

      codeplug audit --since "1 week ago"

      codeplug drift --count 10
    """
    if version:
        from .. import __version__

        console.print(f"[bold cyan]CodePlug[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)
    ctx.ensure_object(dict)
    ctx.obj["path"] = (path or Path.cwd()).resolve()
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


# Import subcommands to register them
from .detect import detect as _detect  # noqa: F401, E402
from .audit import audit as _audit  # noqa: F401, E402
from .drift import drift as _drift  # noqa: F401, E402
from .score import score as _score  # noqa: F401, E402
from .fix import fix as _fix  # noqa: F401, E402


def main() -> None:
    app()
