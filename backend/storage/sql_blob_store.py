from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from core.database import DatabaseManager
from models.replay_blob import ReplayBlob
from repositories.replay_blob_repo import ReplayBlobRepository
from .blob_store import BlobNotFoundError


class SqlBlobStore:
    """BlobStore backed by the ``replay_blobs`` table. One session per call."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def ensure_table(self) -> None:
        """Create ``replay_blobs`` if it does not exist. Source tables are left alone."""
        if self._db.engine is None:
            raise RuntimeError("DatabaseManager is not initialized. Call init() first.")
        async with self._db.engine.begin() as conn:
            await conn.run_sync(ReplayBlob.__table__.create, checkfirst=True)

    async def get(self, key: str) -> bytes:
        async with self._db.session() as session:
            row = await ReplayBlobRepository(session).get_by_key(key)
            if row is None:
                raise BlobNotFoundError(key)
            return bytes(row.body)

    async def _upsert(self, key: str, body: bytes, content_type: str) -> None:
        async with self._db.session() as session:
            await ReplayBlobRepository(session).upsert(key, body, content_type)

    async def put(self, key: str, body: bytes, content_type: str) -> None:
        try:
            await self._upsert(key, body, content_type)
        except IntegrityError:
            # A concurrent writer inserted the key first; last write wins.
            await self._upsert(key, body, content_type)
