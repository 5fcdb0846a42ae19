"""
Structured ops events for replay reconstruction milestones.
Log-level + structured event dict; deterministic keys (no random ids).
Timestamps only in log output, never in the replay document.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict

OPS_LOGGER_NAME = "ops_events"


def _logger() -> logging.Logger:
    return logging.getLogger(OPS_LOGGER_NAME)


def _event(event_type: str, level: int = logging.INFO, **kwargs: Any) -> None:
    """Emit a structured ops event (deterministic keys; no random ids)."""
    msg = f"ops_event={event_type} " + " ".join(f"{k}={v!r}" for k, v in sorted(kwargs.items()))
    _logger().log(level, msg, extra={"ops_event_type": event_type, "ops_event": {**kwargs}})


def log_replay_request_start(match_id: str, frame_start: int, frame_end: int) -> float:
    """Log replay request start; return start time for duration calculation."""
    _event("replay_request_start", match_id=match_id, frame_start=frame_start, frame_end=frame_end)
    return time.perf_counter()


def log_replay_request_end(
    match_id: str,
    frame_start: int,
    frame_end: int,
    duration_seconds: float,
    error: str | None = None,
) -> None:
    """Log replay request end with duration; error is the error class name when it failed."""
    payload: Dict[str, Any] = {
        "match_id": match_id,
        "frame_start": frame_start,
        "frame_end": frame_end,
        "duration_seconds": round(duration_seconds, 4),
    }
    if error:
        payload["error"] = error
    _event("replay_request_end", **payload)


def log_query_submitted(query_name: str, execution_id: str) -> float:
    """Log query submission; return start time for wait duration."""
    _event("query_submitted", query_name=query_name, execution_id=execution_id)
    return time.perf_counter()


def log_query_finished(
    query_name: str,
    execution_id: str,
    state: str,
    polls: int,
    duration_seconds: float,
    row_count: int | None = None,
) -> None:
    """Log the terminal state reached by a query (or TIMEOUT when the wait bound was hit)."""
    payload: Dict[str, Any] = {
        "query_name": query_name,
        "execution_id": execution_id,
        "state": state,
        "polls": polls,
        "duration_seconds": round(duration_seconds, 4),
    }
    if row_count is not None:
        payload["row_count"] = row_count
    level = logging.INFO if state == "SUCCEEDED" else logging.WARNING
    _event("query_finished", level=level, **payload)


def log_cache_lookup(key: str, result: str) -> None:
    """Log cache lookup outcome. result is 'hit' or 'miss'."""
    _event("cache_lookup", key=key, result=result)


def log_cache_read_failed(key: str, detail: str) -> None:
    """Log a cache read failure that was treated as a miss."""
    _event("cache_read_failed", level=logging.WARNING, key=key, detail=detail)


def log_cache_write(key: str, size_bytes: int, duration_seconds: float) -> None:
    """Log a completed cache write."""
    _event(
        "cache_write",
        key=key,
        size_bytes=size_bytes,
        duration_seconds=round(duration_seconds, 4),
    )
