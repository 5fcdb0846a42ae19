"""
Unit tests for setup_logging: application, ops event and engine logger levels.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

import pytest

from core.config import Settings
from core.logging import resolve_level, setup_logging
from ops.ops_events import OPS_LOGGER_NAME

LOGGER_NAMES = ("uvicorn", "uvicorn.error", "uvicorn.access", OPS_LOGGER_NAME, "sqlalchemy.engine")


@pytest.fixture
def restore_levels():
    saved = {name: logging.getLogger(name).level for name in LOGGER_NAMES}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_resolve_level() -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" Warning ") == logging.WARNING
    assert resolve_level("chatty") == logging.INFO
    assert resolve_level("", logging.ERROR) == logging.ERROR


def test_ops_events_follow_their_own_level(restore_levels) -> None:
    setup_logging(Settings(log_level="WARNING", ops_log_level="DEBUG"))
    assert logging.getLogger("uvicorn.access").level == logging.WARNING
    assert logging.getLogger(OPS_LOGGER_NAME).level == logging.DEBUG
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_unknown_ops_level_falls_back_to_application_level(restore_levels) -> None:
    setup_logging(Settings(log_level="ERROR", ops_log_level="loud"))
    assert logging.getLogger(OPS_LOGGER_NAME).level == logging.ERROR
    assert logging.getLogger("sqlalchemy.engine").level == logging.ERROR
