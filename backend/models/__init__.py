"""SQLAlchemy models: recorded match source tables and the replay blob cache."""

from .base import Base
from .match_data import (
    FrameRow,
    ItemRow,
    MatchSettingsRow,
    PlatformChangeRow,
    PlayerSettingsRow,
)
from .replay_blob import ReplayBlob

__all__ = [
    "Base",
    "FrameRow",
    "ItemRow",
    "MatchSettingsRow",
    "PlatformChangeRow",
    "PlayerSettingsRow",
    "ReplayBlob",
]
