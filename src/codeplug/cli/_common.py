"""Shared CLI helpers."""

from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from rich.console import Console

from ..config import CodePlugSettings, load_settings
from ..exceptions import CodePlugError
from ..logging_config import get_logger

console = Console()
logger = get_logger(__name__)


def project_root(ctx: typer.Context) -> Path:
    return (ctx.obj or {}).get("path", Path.cwd().resolve())


def resolve_settings(ctx: typer.Context, **overrides: dict[str, Any]) -> CodePlugSettings:
    """Build settings for the project in ``ctx`` from config files plus CLI options."""
    config: Optional[Path] = (ctx.obj or {}).get("config")
    try:
        return load_settings(project_root(ctx), config_file=config, **overrides)
    except CodePlugError as e:
        fail(e)


def fail(error: Exception, code: int = 1) -> NoReturn:
    """Report a core error and exit."""
    logger.debug("Command failed", exc_info=error)
    console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(code)
