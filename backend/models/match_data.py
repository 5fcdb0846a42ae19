"""
Relational source tables for recorded matches.

One table per event category. Rows are written once by the ingestion side and
only read here; the replay statements in ``query/statements.py`` select these
columns by name.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, Boolean, Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class MatchSettingsRow(Base):
    """Per-match configuration (one row per match)."""

    __tablename__ = "match_settings"

    match_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    slippi_version: Mapped[str] = mapped_column(String(32), nullable=False)
    stage: Mapped[int] = mapped_column(Integer, nullable=False)
    timer: Mapped[int] = mapped_column(Integer, nullable=False)
    frame_count: Mapped[int] = mapped_column(Integer, nullable=False)


class PlayerSettingsRow(Base):
    """Per-seat configuration (up to four rows per match)."""

    __tablename__ = "player_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    match_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    player_index: Mapped[int] = mapped_column(Integer, nullable=False)
    port: Mapped[int] = mapped_column(Integer, nullable=False)
    ext_char: Mapped[int] = mapped_column(Integer, nullable=False)
    player_type: Mapped[int] = mapped_column(Integer, nullable=False)
    player_tag: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    slippi_code: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)


class FrameRow(Base):
    """Pre-frame inputs and post-frame state for one player on one frame."""

    __tablename__ = "frames"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    match_id: Mapped[str] = mapped_column(String(64), nullable=False)
    frame_number: Mapped[int] = mapped_column(Integer, nullable=False)
    player_index: Mapped[int] = mapped_column(Integer, nullable=False)
    follower: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    seed: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    # inputs
    buttons: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    phys_l: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    phys_r: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    joy_x: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    joy_y: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    c_x: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    c_y: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # post-frame state
    char_id: Mapped[int] = mapped_column(Integer, nullable=False)
    action_post: Mapped[int] = mapped_column(Integer, nullable=False)
    pos_x_post: Mapped[float] = mapped_column(Float, nullable=False)
    pos_y_post: Mapped[float] = mapped_column(Float, nullable=False)
    face_dir_post: Mapped[float] = mapped_column(Float, nullable=False)
    percent_post: Mapped[float] = mapped_column(Float, nullable=False)
    shield: Mapped[float] = mapped_column(Float, nullable=False)
    hit_with: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    combo: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hurt_by: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    stocks: Mapped[int] = mapped_column(Integer, nullable=False)
    action_fc: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    hitstun: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    airborne: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ground_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    jumps: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    l_cancel: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hurtbox: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    self_air_x: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    self_air_y: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    attack_x: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    attack_y: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    self_grd_x: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    hitlag: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    alive: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (Index("ix_frames_match_frame", "match_id", "frame_number"),)


class ItemRow(Base):
    """One active item instance on one frame."""

    __tablename__ = "items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    match_id: Mapped[str] = mapped_column(String(64), nullable=False)
    frame: Mapped[int] = mapped_column(Integer, nullable=False)
    item_type: Mapped[int] = mapped_column(Integer, nullable=False)
    state: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    face_dir: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    xvel: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    yvel: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    xpos: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    ypos: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    spawn_id: Mapped[int] = mapped_column(Integer, nullable=False)
    missile_type: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    turnip_face: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_launched: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    charged_power: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    owner: Mapped[int] = mapped_column(Integer, nullable=False, default=-1)

    __table_args__ = (Index("ix_items_match_frame", "match_id", "frame"),)


class PlatformChangeRow(Base):
    """Sparse platform height change; only written when a height changes.

    ``platform`` is 1 for the left platform and 0 for the right one.
    """

    __tablename__ = "platforms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    match_id: Mapped[str] = mapped_column(String(64), nullable=False)
    frame: Mapped[int] = mapped_column(Integer, nullable=False)
    platform: Mapped[int] = mapped_column(Integer, nullable=False)
    platform_height: Mapped[float] = mapped_column(Float, nullable=False)

    __table_args__ = (Index("ix_platforms_match_side_frame", "match_id", "platform", "frame"),)
