"""
Query execution service backed by the SQLAlchemy async engine.

Statements run in background tasks so callers follow the same
submit / poll / fetch protocol as a remote query engine. Result cells are
rendered as strings the way a remote engine returns them: NULL as an empty
string and booleans as ``"true"`` / ``"false"``.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Set

from sqlalchemy import text

from core.database import DatabaseManager
from replay.errors import QueryExecutionError
from .types import QueryResult, QueryState, QueryStatus, Statement

logger = logging.getLogger(__name__)


def render_cell(value: Any) -> str:
    """Render one result cell as the string a remote query engine would return."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class _Execution:
    execution_id: str
    database: str
    output_location: str
    state: QueryState = QueryState.QUEUED
    failure_reason: Optional[str] = None
    result: Optional[QueryResult] = None
    task: Optional[asyncio.Task] = None


class SqlQueryExecutionService:
    """QueryExecutionService running statements on a DatabaseManager engine."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db
        self._executions: Dict[str, _Execution] = {}
        self._tasks: Set[asyncio.Task] = set()

    async def submit(
        self,
        statement: Statement,
        parameters: Mapping[str, Any],
        *,
        database: str,
        output_location: str,
    ) -> str:
        execution = _Execution(
            execution_id=uuid.uuid4().hex,
            database=database,
            output_location=output_location,
        )
        self._executions[execution.execution_id] = execution
        task = asyncio.create_task(self._run(execution, statement, dict(parameters)))
        execution.task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug(
            "Submitted execution %s (database=%s output_location=%s)",
            execution.execution_id,
            database,
            output_location or "-",
        )
        return execution.execution_id

    async def _run(self, execution: _Execution, statement: Statement, parameters: Dict[str, Any]) -> None:
        execution.state = QueryState.RUNNING
        stmt = text(statement) if isinstance(statement, str) else statement
        try:
            async with self._db.session() as session:
                result = await session.execute(stmt, parameters)
                header = [str(key) for key in result.keys()]
                rows = [[render_cell(value) for value in row] for row in result.all()]
        except asyncio.CancelledError:
            execution.state = QueryState.CANCELLED
            execution.failure_reason = "Execution cancelled"
            raise
        except Exception as e:
            logger.warning("Execution %s failed: %s", execution.execution_id, e)
            execution.state = QueryState.FAILED
            execution.failure_reason = str(e)
            return
        execution.result = QueryResult(header=header, rows=rows)
        execution.state = QueryState.SUCCEEDED

    def _get(self, execution_id: str) -> _Execution:
        execution = self._executions.get(execution_id)
        if execution is None:
            raise QueryExecutionError(f"Unknown execution id: {execution_id}")
        return execution

    async def poll_status(self, execution_id: str) -> QueryStatus:
        execution = self._get(execution_id)
        if execution.state in (QueryState.FAILED, QueryState.CANCELLED):
            # Failed executions are reported once, then forgotten.
            self._executions.pop(execution_id, None)
        return QueryStatus(state=execution.state, failure_reason=execution.failure_reason)

    async def fetch_results(self, execution_id: str) -> QueryResult:
        execution = self._get(execution_id)
        if execution.state is not QueryState.SUCCEEDED or execution.result is None:
            raise QueryExecutionError(
                f"Results requested for execution in state {execution.state.value}",
                state=execution.state.value,
                reason=execution.failure_reason,
            )
        self._executions.pop(execution_id, None)
        return execution.result

    async def cancel(self, execution_id: str) -> None:
        execution = self._executions.pop(execution_id, None)
        if execution is None:
            return
        if execution.task is not None and not execution.task.done():
            execution.task.cancel()
        logger.debug("Cancelled execution %s in state %s", execution_id, execution.state.value)

    @property
    def pending_executions(self) -> int:
        """Executions submitted but not yet fetched, reported failed or cancelled."""
        return len(self._executions)
