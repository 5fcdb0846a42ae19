"""
Unit tests for the replay cache: hit, miss, fail-open reads, fail-closed writes.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Dict

_backend = Path(__file__).resolve().parent.parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

import pytest

from ops.ops_events import OPS_LOGGER_NAME
from replay.cache import ReplayCache, cache_key
from replay.errors import CacheWriteError
from replay.schema import ReplaySnapshot, serialize_snapshot
from storage.blob_store import BlobNotFoundError, FileBlobStore


class MemoryBlobStore:
    def __init__(self) -> None:
        self.blobs: Dict[str, bytes] = {}
        self.content_types: Dict[str, str] = {}
        self.gets = 0
        self.puts = 0

    async def get(self, key: str) -> bytes:
        self.gets += 1
        try:
            return self.blobs[key]
        except KeyError:
            raise BlobNotFoundError(key) from None

    async def put(self, key: str, body: bytes, content_type: str) -> None:
        self.puts += 1
        self.blobs[key] = body
        self.content_types[key] = content_type


class BrokenReadStore(MemoryBlobStore):
    async def get(self, key: str) -> bytes:
        raise ConnectionError("store unreachable")


class BrokenWriteStore(MemoryBlobStore):
    async def put(self, key: str, body: bytes, content_type: str) -> None:
        raise PermissionError("access denied")


def _snapshot(marker: int = 1) -> ReplaySnapshot:
    return ReplaySnapshot(settings={"stageId": marker}, frames=[], ending={"gameEndMethod": "GAME!"})


class Counter:
    def __init__(self, marker: int = 1) -> None:
        self.calls = 0
        self.marker = marker

    async def __call__(self) -> ReplaySnapshot:
        self.calls += 1
        return _snapshot(self.marker)


def test_cache_key_format() -> None:
    assert cache_key("M1", 10, 12) == "replays/M1-10-12.json"
    assert cache_key("M1", 0, 0) == "replays/M1-0-0.json"


@pytest.mark.asyncio
async def test_miss_computes_and_stores_then_hit_skips_compute() -> None:
    store = MemoryBlobStore()
    cache = ReplayCache(store)
    compute = Counter()

    first = await cache.get_or_compute("M1", 10, 12, compute)
    second = await cache.get_or_compute("M1", 10, 12, compute)

    assert compute.calls == 1
    assert store.puts == 1
    assert store.content_types["replays/M1-10-12.json"] == "application/json"
    assert serialize_snapshot(first) == serialize_snapshot(second)
    assert store.blobs["replays/M1-10-12.json"] == serialize_snapshot(first)


@pytest.mark.asyncio
async def test_distinct_ranges_are_distinct_entries() -> None:
    store = MemoryBlobStore()
    cache = ReplayCache(store)
    compute = Counter()
    await cache.get_or_compute("M1", 10, 12, compute)
    await cache.get_or_compute("M1", 10, 13, compute)
    assert compute.calls == 2
    assert sorted(store.blobs) == ["replays/M1-10-12.json", "replays/M1-10-13.json"]


@pytest.mark.asyncio
async def test_read_failure_is_treated_as_miss(caplog: pytest.LogCaptureFixture) -> None:
    cache = ReplayCache(BrokenReadStore())
    compute = Counter(marker=7)
    with caplog.at_level(logging.WARNING, logger=OPS_LOGGER_NAME):
        snapshot = await cache.get_or_compute("M1", 10, 12, compute)
    assert compute.calls == 1
    assert snapshot.settings == {"stageId": 7}
    assert any("ops_event=cache_read_failed" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_undecodable_cached_body_is_treated_as_miss() -> None:
    store = MemoryBlobStore()
    store.blobs["replays/M1-10-12.json"] = b"{not json"
    cache = ReplayCache(store)
    compute = Counter()
    snapshot = await cache.get_or_compute("M1", 10, 12, compute)
    assert compute.calls == 1
    assert store.blobs["replays/M1-10-12.json"] == serialize_snapshot(snapshot)


@pytest.mark.asyncio
async def test_write_failure_fails_the_request() -> None:
    cache = ReplayCache(BrokenWriteStore())
    compute = Counter()
    with pytest.raises(CacheWriteError, match="access denied"):
        await cache.get_or_compute("M1", 10, 12, compute)
    assert compute.calls == 1


@pytest.mark.asyncio
async def test_file_blob_store_round_trip(tmp_path: Path) -> None:
    store = FileBlobStore(tmp_path)
    cache = ReplayCache(store)
    compute = Counter()
    await cache.get_or_compute("M1", 0, 5, compute)
    assert (tmp_path / "replays" / "M1-0-5.json").is_file()
    await cache.get_or_compute("M1", 0, 5, compute)
    assert compute.calls == 1


@pytest.mark.asyncio
async def test_file_blob_store_missing_key_and_escape(tmp_path: Path) -> None:
    store = FileBlobStore(tmp_path)
    with pytest.raises(BlobNotFoundError):
        await store.get("replays/absent.json")
    with pytest.raises(ValueError):
        store.path_for("../outside.json")
    with pytest.raises(ValueError):
        store.path_for("/etc/passwd")


@pytest.mark.asyncio
async def test_file_blob_store_concurrent_puts_same_key(tmp_path: Path) -> None:
    store = FileBlobStore(tmp_path)
    key = "replays/M1-0-1.json"
    bodies = [bytes([ord("a") + i]) * 1_000_000 for i in range(8)]
    await asyncio.gather(*(store.put(key, body, "application/json") for body in bodies))
    assert await store.get(key) in bodies
    assert [p.name for p in (tmp_path / "replays").iterdir()] == ["M1-0-1.json"]
