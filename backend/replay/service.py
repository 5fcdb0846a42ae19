"""
Request orchestration: cache lookup, concurrent source queries, assembly.

The five source queries are independent and run concurrently in one
TaskGroup; the first failure cancels the rest and is re-raised as-is.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, Optional

from core.config import Settings
from core.database import DatabaseManager
from ops.ops_events import log_replay_request_end, log_replay_request_start
from query.runner import PollPolicy, run_query
from query.sql_service import SqlQueryExecutionService
from query.statements import REPLAY_STATEMENTS
from query.types import QueryExecutionService, QueryResult
from storage.blob_store import BlobStore, FileBlobStore
from storage.sql_blob_store import SqlBlobStore
from .assembler import assemble
from .cache import ReplayCache
from .platforms import PlatformFallbacks
from .request import ReplayRequest
from .schema import ReplaySnapshot

logger = logging.getLogger(__name__)


class ReplayService:
    def __init__(
        self,
        queries: QueryExecutionService,
        cache: ReplayCache,
        *,
        policy: Optional[PollPolicy] = None,
        database: str = "replays",
        output_location: str = "",
        fallbacks: Optional[PlatformFallbacks] = None,
    ) -> None:
        self._queries = queries
        self._cache = cache
        self._policy = policy or PollPolicy()
        self._database = database
        self._output_location = output_location
        self._fallbacks = fallbacks or PlatformFallbacks()

    @property
    def cache(self) -> ReplayCache:
        return self._cache

    async def get_replay(self, request: ReplayRequest) -> ReplaySnapshot:
        """Cached replay for the request, reconstructing it on a miss."""
        started = log_replay_request_start(request.match_id, request.frame_start, request.frame_end)
        error: Optional[str] = None
        try:
            return await self._cache.get_or_compute(
                request.match_id,
                request.frame_start,
                request.frame_end,
                lambda: self.reconstruct(request),
            )
        except Exception as exc:
            error = type(exc).__name__
            raise
        finally:
            log_replay_request_end(
                request.match_id,
                request.frame_start,
                request.frame_end,
                time.perf_counter() - started,
                error=error,
            )

    async def fetch_sources(self, request: ReplayRequest) -> Dict[str, QueryResult]:
        """Run every source statement concurrently and return results by name."""
        parameters = {
            "match_id": request.match_id,
            "frame_start": request.frame_start,
            "frame_end": request.frame_end,
        }
        try:
            async with asyncio.TaskGroup() as tg:
                tasks = {
                    name: tg.create_task(
                        run_query(
                            self._queries,
                            statement,
                            parameters,
                            name=name,
                            database=self._database,
                            output_location=self._output_location,
                            policy=self._policy,
                        )
                    )
                    for name, statement in REPLAY_STATEMENTS.items()
                }
        except ExceptionGroup as eg:
            raise eg.exceptions[0] from None
        return {name: task.result() for name, task in tasks.items()}

    async def reconstruct(self, request: ReplayRequest) -> ReplaySnapshot:
        """Query the sources and assemble the replay, bypassing the cache."""
        sources = await self.fetch_sources(request)
        return assemble(
            sources["match_settings"],
            sources["player_settings"],
            sources["frames"],
            sources["items"],
            sources["platforms"],
            request.frame_start,
            request.frame_end,
            fallbacks=self._fallbacks,
            match_id=request.match_id,
        )


def build_blob_store(settings: Settings, db: DatabaseManager) -> BlobStore:
    if settings.cache_backend == "file":
        return FileBlobStore(settings.cache_dir)
    if settings.cache_backend != "sql":
        logger.warning("Unknown CACHE_BACKEND %r; using sql", settings.cache_backend)
    return SqlBlobStore(db)


def build_replay_service(settings: Settings, db: DatabaseManager) -> ReplayService:
    """Wire the process-wide ReplayService from settings."""
    return ReplayService(
        SqlQueryExecutionService(db),
        ReplayCache(build_blob_store(settings, db)),
        policy=PollPolicy.from_settings(settings),
        database=settings.query_database,
        output_location=settings.query_output_location,
        fallbacks=PlatformFallbacks.from_settings(settings),
    )
