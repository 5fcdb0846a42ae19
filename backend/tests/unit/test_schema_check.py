"""
Test schema mismatch detection: a stale frames table (missing columns) is detected.
"""

from __future__ import annotations

import sys
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

import models  # noqa: F401 - register replay tables on Base.metadata
from models.base import Base
from tools.schema_check import check_sqlite_schema_mismatch


def test_schema_mismatch_detected_when_column_missing(tmp_path: Path) -> None:
    # File DB so multiple connections see the same schema (in-memory is per-connection)
    engine: Engine = create_engine(f"sqlite:///{tmp_path / 'stale.db'}")
    with engine.connect() as conn:
        conn.execute(text("""
            CREATE TABLE frames (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                match_id VARCHAR NOT NULL,
                frame_number INTEGER NOT NULL,
                player_index INTEGER NOT NULL
            )
        """))
        conn.commit()

    has_mismatch, message = check_sqlite_schema_mismatch(engine)
    assert has_mismatch is True
    assert "'frames'" in message
    assert "buttons" in message
    engine.dispose()


def test_no_mismatch_for_fresh_or_empty_database(tmp_path: Path) -> None:
    engine: Engine = create_engine(f"sqlite:///{tmp_path / 'fresh.db'}")
    assert check_sqlite_schema_mismatch(engine) == (False, "")
    Base.metadata.create_all(engine)
    assert check_sqlite_schema_mismatch(engine) == (False, "")
    engine.dispose()
