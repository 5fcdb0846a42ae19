"""Repository layer for DB access only.

Repositories accept an AsyncSession explicitly and use the DatabaseManager from
core/database.py (no new engines created).
"""

from .base import BaseRepository
from .replay_blob_repo import ReplayBlobRepository

__all__ = [
    "BaseRepository",
    "ReplayBlobRepository",
]
