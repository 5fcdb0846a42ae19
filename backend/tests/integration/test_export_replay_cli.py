"""
Integration tests: export CLI writes the replay JSON for a seeded SQLite file.
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

import pytest

from core.config import get_settings
from core.database import DatabaseManager
from seed.seed_sample_match import SAMPLE_MATCH_ID, seed_sample_match
from tools.export_replay import main as export_main


@pytest.fixture
def sample_database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    url = f"sqlite+aiosqlite:///{tmp_path / 'export.db'}"

    async def _seed() -> None:
        db = DatabaseManager(url)
        await db.init()
        await db.create_all()
        async with db.session() as session:
            await seed_sample_match(session, frame_count=20)
        await db.dispose()

    asyncio.run(_seed())
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setenv("CACHE_BACKEND", "file")
    monkeypatch.setenv("CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("QUERY_POLL_INTERVAL_SECONDS", "0.01")
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


def test_export_writes_document_and_caches(sample_database: Path) -> None:
    out = sample_database / "replay.json"
    code = export_main([
        "--match-id", SAMPLE_MATCH_ID,
        "--frame-start", "0",
        "--frame-end", "4",
        "--out", str(out),
    ])
    assert code == 0
    document = json.loads(out.read_bytes())
    assert [f["frameNumber"] for f in document["frames"]] == [0, 1, 2, 3, 4]
    assert (sample_database / "cache" / "replays" / f"{SAMPLE_MATCH_ID}-0-4.json").is_file()


def test_export_no_cache_and_unknown_match(sample_database: Path, capsys: pytest.CaptureFixture) -> None:
    out = sample_database / "replay.json"
    code = export_main([
        "--match-id", SAMPLE_MATCH_ID,
        "--frame-start", "3",
        "--frame-end", "3",
        "--out", str(out),
        "--no-cache",
    ])
    assert code == 0
    assert not (sample_database / "cache").exists()

    code = export_main(["--match-id", "nope", "--frame-start", "0", "--frame-end", "1", "--no-cache"])
    assert code == 1
    assert "ReplayNotFoundError" in capsys.readouterr().err
