"""Logging configuration for solana-auditor runs."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "solana_auditor"


def resolve_log_level(verbose: bool = False, quiet: bool = False) -> int:
    """Verbose wins over quiet; the default hides INFO records."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def configure_logging(verbose: bool = False, quiet: bool = False, no_color: bool = False) -> None:
    """Attach a Rich handler on stderr to the package logger.

    Safe to call more than once: any handler installed by a previous call is
    replaced so records are never emitted twice.
    """
    logger = logging.getLogger(LOGGER_NAME)
    level = resolve_log_level(verbose, quiet)

    for handler in list(logger.handlers):
        if getattr(handler, "_solaudit", False):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True, no_color=no_color),
        show_time=False,
        show_path=verbose,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler._solaudit = True
    handler.setLevel(level)

    logger.addHandler(handler)
    logger.setLevel(level)
