from __future__ import annotations

import logging
from io import StringIO

import pytest
from rich.console import Console

DIAGNOSTIC_LOGGER = "tests.request_log_tail"


@pytest.fixture
def record_console() -> Console:
    """Recording Rich console wide enough that no summary line wraps."""

    return Console(file=StringIO(), record=True, width=200, color_system=None)


@pytest.fixture
def diagnostic_logger(caplog: pytest.LogCaptureFixture) -> logging.Logger:
    """Diagnostic logger whose DEBUG records are captured by ``caplog``."""

    caplog.set_level(logging.DEBUG, logger=DIAGNOSTIC_LOGGER)
    logger = logging.getLogger(DIAGNOSTIC_LOGGER)
    logger.propagate = True
    return logger
