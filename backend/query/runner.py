"""
Bounded wait-for-terminal-state loop around a QueryExecutionService.

submit -> sleep/poll with multiplicative backoff (capped) -> fetch. The total
wait is bounded by PollPolicy.timeout_seconds; exceeding it raises
QueryTimeoutError. FAILED and CANCELLED raise QueryExecutionError with the
engine-supplied reason. Nothing is retried. An execution that is never
fetched is cancelled on the service.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Mapping

from core.config import Settings
from ops.ops_events import log_query_finished, log_query_submitted
from replay.errors import QueryExecutionError, QueryTimeoutError
from .types import QueryExecutionService, QueryResult, QueryState, Statement


@dataclass(frozen=True)
class PollPolicy:
    """How often and for how long to wait on a query execution."""

    interval_seconds: float = 1.0
    backoff: float = 1.5
    max_interval_seconds: float = 5.0
    timeout_seconds: float = 120.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "PollPolicy":
        return cls(
            interval_seconds=settings.query_poll_interval_seconds,
            backoff=settings.query_poll_backoff,
            max_interval_seconds=max(
                settings.query_max_poll_interval_seconds, settings.query_poll_interval_seconds
            ),
            timeout_seconds=settings.query_timeout_seconds,
        )

    def next_interval(self, current: float) -> float:
        return min(current * self.backoff, self.max_interval_seconds)


async def run_query(
    service: QueryExecutionService,
    statement: Statement,
    parameters: Mapping[str, Any],
    *,
    name: str,
    database: str,
    output_location: str,
    policy: PollPolicy,
) -> QueryResult:
    """Submit statement, wait for a terminal state within policy bounds, and return its results."""
    execution_id = await service.submit(
        statement,
        parameters,
        database=database,
        output_location=output_location,
    )
    started = log_query_submitted(name, execution_id)
    deadline = time.monotonic() + policy.timeout_seconds
    interval = policy.interval_seconds
    polls = 0
    fetched = False

    try:
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                log_query_finished(name, execution_id, "TIMEOUT", polls, time.perf_counter() - started)
                raise QueryTimeoutError(
                    f"Query {name} did not finish within {policy.timeout_seconds:g}s"
                )
            await asyncio.sleep(min(interval, remaining))
            status = await service.poll_status(execution_id)
            polls += 1
            state = QueryState(status.state)
            if state is QueryState.SUCCEEDED:
                break
            if state.is_terminal:
                log_query_finished(name, execution_id, state.value, polls, time.perf_counter() - started)
                raise QueryExecutionError(
                    f"Query {state.value.lower()}: {status.failure_reason or 'no reason given'}",
                    state=state.value,
                    reason=status.failure_reason,
                )
            interval = policy.next_interval(interval)

        result = await service.fetch_results(execution_id)
        fetched = True
    finally:
        # Executions that are never fetched are released on the service.
        if not fetched:
            await service.cancel(execution_id)

    log_query_finished(
        name,
        execution_id,
        QueryState.SUCCEEDED.value,
        polls,
        time.perf_counter() - started,
        row_count=len(result.rows),
    )
    return result
