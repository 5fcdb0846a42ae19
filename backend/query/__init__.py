"""Query execution: service protocol, SQL-backed implementation, bounded poll runner."""

from .runner import PollPolicy, run_query
from .sql_service import SqlQueryExecutionService
from .types import QueryExecutionService, QueryResult, QueryState, QueryStatus

__all__ = [
    "PollPolicy",
    "QueryExecutionService",
    "QueryResult",
    "QueryState",
    "QueryStatus",
    "SqlQueryExecutionService",
    "run_query",
]
