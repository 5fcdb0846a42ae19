"""Operational logging: structured ops events."""

from .ops_events import (
    log_cache_lookup,
    log_cache_read_failed,
    log_cache_write,
    log_query_finished,
    log_query_submitted,
    log_replay_request_end,
    log_replay_request_start,
)

__all__ = [
    "log_cache_lookup",
    "log_cache_read_failed",
    "log_cache_write",
    "log_query_finished",
    "log_query_submitted",
    "log_replay_request_end",
    "log_replay_request_start",
]
