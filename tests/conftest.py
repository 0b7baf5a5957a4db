"""Shared test configuration and fixtures."""

import io
import logging
from pathlib import Path

import pytest
from rich.console import Console

from solana_auditor.context import RunContext
from solana_auditor.logging_config import LOGGER_NAME

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _make_console() -> Console:
    return Console(file=io.StringIO(), width=200, no_color=True, highlight=False, emoji=False)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """CLI tests configure the package logger; undo it between tests."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def program_dir():
    return FIXTURES_DIR / "vulnerable_program"


@pytest.fixture
def templates_dir():
    return FIXTURES_DIR / "templates"


@pytest.fixture
def console():
    return _make_console()


@pytest.fixture
def run_ctx():
    return RunContext(console=_make_console(), err_console=_make_console())
