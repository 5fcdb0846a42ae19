"""
Memoization of reconstructed replays in a blob store.

Reads fail open: a not-found key is a miss and any other read problem
(including a body that no longer decodes) is logged and treated as a miss.
Writes fail closed: a computed replay that cannot be stored is an error.
"""

from __future__ import annotations

import logging
import time
from typing import Awaitable, Callable, Optional

from ops.ops_events import log_cache_lookup, log_cache_read_failed, log_cache_write
from storage.blob_store import BlobNotFoundError, BlobStore
from .errors import CacheReadError, CacheWriteError
from .schema import ReplaySnapshot, deserialize_snapshot, serialize_snapshot

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

Compute = Callable[[], Awaitable[ReplaySnapshot]]


def cache_key(match_id: str, frame_start: int, frame_end: int) -> str:
    return f"replays/{match_id}-{frame_start}-{frame_end}.json"


class ReplayCache:
    def __init__(self, store: BlobStore, content_type: str = JSON_CONTENT_TYPE) -> None:
        self._store = store
        self._content_type = content_type

    @property
    def blob_store(self) -> BlobStore:
        return self._store

    async def lookup(self, key: str) -> Optional[ReplaySnapshot]:
        """Cached snapshot for key, or None on a miss. Raises CacheReadError on any other failure."""
        try:
            body = await self._store.get(key)
        except BlobNotFoundError:
            log_cache_lookup(key, "miss")
            return None
        except Exception as exc:
            raise CacheReadError(f"Cache read failed for {key}: {exc}") from exc
        try:
            snapshot = deserialize_snapshot(body)
        except ValueError as exc:
            raise CacheReadError(f"Cached body for {key} does not decode: {exc}") from exc
        log_cache_lookup(key, "hit")
        return snapshot

    async def store(self, key: str, snapshot: ReplaySnapshot) -> None:
        """Persist snapshot under key. Raises CacheWriteError on failure."""
        body = serialize_snapshot(snapshot)
        started = time.perf_counter()
        try:
            await self._store.put(key, body, self._content_type)
        except Exception as exc:
            raise CacheWriteError(f"Failed to cache replay {key}: {exc}") from exc
        log_cache_write(key, len(body), time.perf_counter() - started)

    async def get_or_compute(
        self,
        match_id: str,
        frame_start: int,
        frame_end: int,
        compute: Compute,
    ) -> ReplaySnapshot:
        """Return the cached replay for the range, computing and storing it on a miss."""
        key = cache_key(match_id, frame_start, frame_end)
        try:
            cached = await self.lookup(key)
        except CacheReadError as exc:
            log_cache_read_failed(key, str(exc))
            logger.warning("Treating cache read failure as a miss: %s", exc)
            cached = None
        if cached is not None:
            return cached

        snapshot = await compute()
        await self.store(key, snapshot)
        return snapshot
