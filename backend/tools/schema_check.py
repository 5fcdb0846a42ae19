"""
Detect SQLite schema mismatch (a stale table missing columns the models declare).
Used by create_schema to warn and exit non-zero instead of failing later in a query.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple

from sqlalchemy import inspect

from models.base import Base

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine


def check_sqlite_schema_mismatch(bind: "Engine | Connection") -> Tuple[bool, str]:
    """
    Compare every existing table against its model.
    Returns (has_mismatch, message). Tables that do not exist yet are not a mismatch.
    """
    inspector = inspect(bind)
    problems: List[str] = []
    for table_name, table in sorted(Base.metadata.tables.items()):
        if not inspector.has_table(table_name):
            continue
        current_columns = {c["name"] for c in inspector.get_columns(table_name)}
        missing = set(table.columns.keys()) - current_columns
        if missing:
            problems.append(f"{table_name!r} is missing column(s): {sorted(missing)}")
    if problems:
        return True, "; ".join(problems) + ". Delete the local SQLite file and rerun create_schema."
    return False, ""
