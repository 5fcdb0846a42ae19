"""
Tests for ops events: structured events are emitted (captured logs).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

import pytest

from ops.ops_events import (
    OPS_LOGGER_NAME,
    log_cache_lookup,
    log_cache_read_failed,
    log_cache_write,
    log_query_finished,
    log_query_submitted,
    log_replay_request_end,
    log_replay_request_start,
)


def test_ops_logger_name() -> None:
    """Ops events use a dedicated logger name."""
    assert OPS_LOGGER_NAME == "ops_events"


def test_replay_request_start_returns_float_and_emits(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger=OPS_LOGGER_NAME)
    t = log_replay_request_start("M1", 10, 12)
    assert isinstance(t, float)
    assert "ops_event=replay_request_start" in caplog.text
    assert "frame_end=12 frame_start=10 match_id='M1'" in caplog.text


def test_replay_request_end_with_and_without_error(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger=OPS_LOGGER_NAME)
    log_replay_request_end("M1", 10, 12, 0.123456)
    assert "duration_seconds=0.1235" in caplog.text
    assert "error=" not in caplog.text
    log_replay_request_end("M1", 10, 12, 0.5, error="QueryTimeoutError")
    assert "error='QueryTimeoutError'" in caplog.text


def test_query_events_levels(caplog: pytest.LogCaptureFixture) -> None:
    """SUCCEEDED is INFO with row_count; any other terminal state is WARNING."""
    caplog.set_level(logging.INFO, logger=OPS_LOGGER_NAME)
    assert isinstance(log_query_submitted("frames", "exec-1"), float)
    log_query_finished("frames", "exec-1", "SUCCEEDED", 3, 1.0, row_count=42)
    log_query_finished("items", "exec-2", "FAILED", 1, 0.2)
    finished = [r for r in caplog.records if "ops_event=query_finished" in r.getMessage()]
    assert [r.levelno for r in finished] == [logging.INFO, logging.WARNING]
    assert "row_count=42" in finished[0].getMessage()
    assert "row_count" not in finished[1].getMessage()


def test_cache_events(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger=OPS_LOGGER_NAME)
    log_cache_lookup("replays/M1-0-1.json", "hit")
    log_cache_read_failed("replays/M1-0-1.json", "timeout")
    log_cache_write("replays/M1-0-1.json", 2048, 0.01)
    messages = [r.getMessage() for r in caplog.records]
    assert messages[0].startswith("ops_event=cache_lookup ")
    assert "result='hit'" in messages[0]
    assert caplog.records[1].levelno == logging.WARNING
    assert "size_bytes=2048" in messages[2]
    assert caplog.records[2].ops_event_type == "cache_write"
