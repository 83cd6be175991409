"""
Logging configuration for CodePlug.

Terminal output goes through rich; the model stack pulled in by the
``semantic`` extra is held at WARNING so its download and cache chatter
does not drown out audit and drift messages.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

# Third-party loggers that report at INFO/DEBUG during model loads.
NOISY_LOGGERS = (
    "transformers",
    "sentence_transformers",
    "huggingface_hub",
    "filelock",
    "urllib3",
    "torch",
)


def _level_for(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def quiet_third_party(level: int = logging.WARNING) -> None:
    """Raise the third-party model loggers to at least ``level``."""
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the ``codeplug`` logger hierarchy.

    Args:
        verbose: DEBUG output, with source paths and locals in tracebacks
        quiet: ERROR output only
        log_file: Also append plain-text records to this file

    Returns:
        The root ``codeplug`` logger
    """
    level = _level_for(verbose, quiet)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers)
    quiet_third_party(level)

    logger = logging.getLogger("codeplug")
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``codeplug`` hierarchy; bare module names are prefixed."""
    if name is None:
        return logging.getLogger("codeplug")
    if not name.startswith("codeplug"):
        name = f"codeplug.{name}"
    return logging.getLogger(name)
