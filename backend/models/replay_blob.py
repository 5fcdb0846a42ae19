from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class ReplayBlob(Base):
    """Serialized replay document keyed by cache key (latest write wins)."""

    __tablename__ = "replay_blobs"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    body: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    stored_at_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
