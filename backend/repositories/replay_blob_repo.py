from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from models.replay_blob import ReplayBlob
from .base import BaseRepository


class ReplayBlobRepository(BaseRepository[ReplayBlob]):
    """Repository for serialized replay documents."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_key(self, key: str) -> Optional[ReplayBlob]:
        return await self.get_by_id(ReplayBlob, key)

    async def upsert(self, key: str, body: bytes, content_type: str) -> ReplayBlob:
        """Insert or replace the blob stored under key (latest write wins)."""
        now = datetime.now(timezone.utc)
        existing = await self.get_by_key(key)
        if existing is not None:
            existing.body = body
            existing.content_type = content_type
            existing.stored_at_utc = now
            return existing
        blob = ReplayBlob(
            key=key,
            body=body,
            content_type=content_type,
            stored_at_utc=now,
        )
        await self.add(blob)
        return blob
