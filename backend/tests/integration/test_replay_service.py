"""
Integration tests: ReplayService end to end on a seeded SQLite file (queries, assembly, cache).
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

from core.config import Settings
from query.runner import PollPolicy
from query.sql_service import SqlQueryExecutionService
from query.types import QueryStatus, QueryState
from replay.cache import ReplayCache, cache_key
from replay.errors import QueryExecutionError, ReplayNotFoundError
from replay.request import ReplayRequest
from replay.schema import serialize_snapshot
from replay.service import ReplayService, build_replay_service
from seed.seed_sample_match import SAMPLE_MATCH_ID
from storage.blob_store import FileBlobStore
from storage.sql_blob_store import SqlBlobStore

FAST = PollPolicy(interval_seconds=0.005, backoff=1.5, max_interval_seconds=0.02, timeout_seconds=10.0)


class CountingQueryService(SqlQueryExecutionService):
    def __init__(self, db) -> None:
        super().__init__(db)
        self.submissions = 0

    async def submit(self, statement, parameters, *, database, output_location) -> str:
        self.submissions += 1
        return await super().submit(
            statement, parameters, database=database, output_location=output_location
        )


class FailingItemsService(CountingQueryService):
    """Reports FAILED for the items statement; other statements run normally."""

    def __init__(self, db) -> None:
        super().__init__(db)
        self._failing = set()

    async def submit(self, statement, parameters, *, database, output_location) -> str:
        execution_id = await super().submit(
            statement, parameters, database=database, output_location=output_location
        )
        if "FROM items" in str(statement):
            self._failing.add(execution_id)
        return execution_id

    async def poll_status(self, execution_id: str) -> QueryStatus:
        if execution_id in self._failing:
            return QueryStatus(state=QueryState.FAILED, failure_reason="items table unavailable")
        return await super().poll_status(execution_id)


def _service(db, queries=None, store=None) -> ReplayService:
    return ReplayService(
        queries or CountingQueryService(db),
        ReplayCache(store or SqlBlobStore(db)),
        policy=FAST,
    )


@pytest.mark.asyncio
async def test_reconstructs_sample_window(seeded_db) -> None:
    service = _service(seeded_db)
    snapshot = await service.get_replay(ReplayRequest(SAMPLE_MATCH_ID, 28, 32))

    assert [f.frame_number for f in snapshot.frames] == [28, 29, 30, 31, 32]
    for frame in snapshot.frames:
        assert [p.player_index for p in frame.players] == [0, 1]
        assert [p.player_index for p in frame.followers] == [1]
        # left changed at 10 (20.0), right at 40: before the window only the left has an event
        assert frame.stage.fod_left_platform_height == 20.0
        assert frame.stage.fod_right_platform_height == 28.0
    items = {f.frame_number: len(f.items) for f in snapshot.frames}
    assert items == {28: 0, 29: 0, 30: 1, 31: 1, 32: 1}
    assert snapshot.settings["stageId"] == 2
    assert [p["connectCode"] for p in snapshot.settings["playerSettings"]] == ["FOX#001", "ICE#002"]


@pytest.mark.asyncio
async def test_window_after_platform_changes(seeded_db) -> None:
    service = _service(seeded_db)
    snapshot = await service.get_replay(ReplayRequest(SAMPLE_MATCH_ID, 59, 61))
    stages = [(f.stage.fod_left_platform_height, f.stage.fod_right_platform_height) for f in snapshot.frames]
    assert stages == [(20.0, 26.5), (22.25, 26.5), (22.25, 26.5)]


@pytest.mark.asyncio
async def test_second_identical_request_served_from_cache(seeded_db) -> None:
    queries = CountingQueryService(seeded_db)
    await SqlBlobStore(seeded_db).ensure_table()
    service = _service(seeded_db, queries=queries)
    request = ReplayRequest(SAMPLE_MATCH_ID, 0, 0)

    first = await service.get_replay(request)
    assert queries.submissions == 5
    second = await service.get_replay(request)
    assert queries.submissions == 5
    assert serialize_snapshot(first) == serialize_snapshot(second)

    stored = await SqlBlobStore(seeded_db).get(cache_key(SAMPLE_MATCH_ID, 0, 0))
    assert stored == serialize_snapshot(first)


@pytest.mark.asyncio
async def test_frame_start_zero_and_file_cache(seeded_db, tmp_path: Path) -> None:
    service = _service(seeded_db, store=FileBlobStore(tmp_path / "cache"))
    snapshot = await service.get_replay(ReplayRequest(SAMPLE_MATCH_ID, 0, 2))
    assert [f.frame_number for f in snapshot.frames] == [0, 1, 2]
    body = (tmp_path / "cache" / "replays" / f"{SAMPLE_MATCH_ID}-0-2.json").read_bytes()
    assert json.loads(body)["frames"][0]["frameNumber"] == 0


@pytest.mark.asyncio
async def test_unknown_match_is_not_found(seeded_db) -> None:
    service = _service(seeded_db)
    with pytest.raises(ReplayNotFoundError):
        await service.get_replay(ReplayRequest("no-such-match", 0, 10))


@pytest.mark.asyncio
async def test_query_failure_propagates_unwrapped_and_nothing_cached(seeded_db, tmp_path: Path) -> None:
    store = FileBlobStore(tmp_path / "cache")
    service = _service(seeded_db, queries=FailingItemsService(seeded_db), store=store)
    with pytest.raises(QueryExecutionError, match="items table unavailable"):
        await service.get_replay(ReplayRequest(SAMPLE_MATCH_ID, 0, 10))
    assert not (tmp_path / "cache" / "replays").exists()


@pytest.mark.asyncio
async def test_reconstruct_bypasses_cache(seeded_db, tmp_path: Path) -> None:
    store = FileBlobStore(tmp_path / "cache")
    service = _service(seeded_db, store=store)
    snapshot = await service.reconstruct(ReplayRequest(SAMPLE_MATCH_ID, 5, 6))
    assert len(snapshot.frames) == 2
    assert not (tmp_path / "cache").exists()


@pytest.mark.asyncio
async def test_concurrent_identical_requests_agree(seeded_db) -> None:
    await SqlBlobStore(seeded_db).ensure_table()
    service = _service(seeded_db)
    request = ReplayRequest(SAMPLE_MATCH_ID, 40, 45)
    first, second = await asyncio.gather(service.get_replay(request), service.get_replay(request))
    assert serialize_snapshot(first) == serialize_snapshot(second)


@pytest.mark.asyncio
async def test_build_replay_service_selects_blob_store(seeded_db, tmp_path: Path) -> None:
    sql_service = build_replay_service(Settings(cache_backend="sql"), seeded_db)
    assert isinstance(sql_service.cache.blob_store, SqlBlobStore)
    file_service = build_replay_service(Settings(cache_backend="file", cache_dir=str(tmp_path)), seeded_db)
    assert isinstance(file_service.cache.blob_store, FileBlobStore)
    assert file_service.cache.blob_store.root == tmp_path.resolve()
