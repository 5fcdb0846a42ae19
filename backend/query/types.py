from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Protocol, Union

from sqlalchemy.sql.expression import Executable


class QueryState(str, Enum):
    """Lifecycle states reported by the query execution service."""

    QUEUED = "QUEUED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (QueryState.SUCCEEDED, QueryState.FAILED, QueryState.CANCELLED)


@dataclass(frozen=True)
class QueryStatus:
    """Result of one status poll."""

    state: QueryState
    failure_reason: Optional[str] = None


@dataclass
class QueryResult:
    """Tabular query output. Every cell is a string regardless of its logical type."""

    header: List[str]
    rows: List[List[str]] = field(default_factory=list)


Statement = Union[str, Executable]


class QueryExecutionService(Protocol):
    """Asynchronous query engine: submit, poll until terminal, then fetch."""

    async def submit(
        self,
        statement: Statement,
        parameters: Mapping[str, Any],
        *,
        database: str,
        output_location: str,
    ) -> str:
        """Start executing statement; return the execution id."""
        ...

    async def poll_status(self, execution_id: str) -> QueryStatus:
        """Return the current state of an execution."""
        ...

    async def fetch_results(self, execution_id: str) -> QueryResult:
        """Return the results of a SUCCEEDED execution."""
        ...

    async def cancel(self, execution_id: str) -> None:
        """Stop an execution if it is still running and forget it. Unknown ids are ignored."""
        ...