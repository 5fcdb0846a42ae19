from __future__ import annotations

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from models.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository with common helpers.

    No commits are performed here - commit responsibility is left to the
    caller owning the session.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with an async session."""
        self.session = session

    async def add(self, entity: T) -> T:
        """Add an entity to the session (not committed)."""
        self.session.add(entity)
        return entity

    async def get_by_id(
        self, model: Type[T], id_value: str | int
    ) -> Optional[T]:
        """Get an entity by its primary key."""
        result = await self.session.get(model, id_value)
        return result
