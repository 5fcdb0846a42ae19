"""
Deterministic synthetic match for the replay source tables.
Idempotent: existing rows for the match id are replaced. No network calls.

The sample is a Fountain of Dreams match between Fox (seat 0) and Ice Climbers
(seat 1, with Nana as follower rows) with a few platform changes and one item.
"""
from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from models.match_data import (
    FrameRow,
    ItemRow,
    MatchSettingsRow,
    PlatformChangeRow,
    PlayerSettingsRow,
)

SAMPLE_MATCH_ID = "2024-01-06T21:04:12Z"
SAMPLE_FRAME_COUNT = 120
FOUNTAIN_OF_DREAMS = 2

# (player_index, port, ext_char, char_id, tag, code)
PLAYERS: List[Dict[str, Any]] = [
    {"player_index": 0, "port": 1, "ext_char": 2, "char_id": 1, "tag": "FOX", "code": "FOX#001"},
    {"player_index": 1, "port": 2, "ext_char": 14, "char_id": 10, "tag": "ICS", "code": "ICE#002"},
]
NANA_CHAR_ID = 11

# (frame, platform, height): platform 1 is left, 0 is right
PLATFORM_CHANGES: List[tuple] = [
    (10, 1, 20.0),
    (40, 0, 26.5),
    (60, 1, 22.25),
    (90, 0, 24.0),
]

# Samus missile owned by seat 0 between frames 30 and 35
ITEM_FRAMES = range(30, 36)


def _frame_row(match_id: str, frame: int, player: Dict[str, Any], *, follower: bool) -> FrameRow:
    direction = 1.0 if frame % 40 < 20 else -1.0
    return FrameRow(
        match_id=match_id,
        frame_number=frame,
        player_index=player["player_index"],
        follower=follower,
        seed=1_000_003 * (frame + 1) % 4_294_967_296,
        # A on even frames, B + Z every tenth frame
        buttons=(0x0100 if frame % 2 == 0 else 0) | (0x0210 if frame % 10 == 0 else 0),
        phys_l=0.0,
        phys_r=0.35 if frame % 30 == 0 else 0.0,
        joy_x=direction,
        joy_y=0.0,
        c_x=0.0,
        c_y=0.0,
        char_id=NANA_CHAR_ID if follower else player["char_id"],
        action_post=14,
        pos_x_post=direction * frame * 0.5 + (4.0 if follower else 0.0),
        pos_y_post=0.0,
        face_dir_post=direction,
        percent_post=float(frame // 10),
        shield=60.0,
        stocks=4,
        action_fc=float(frame % 20),
        hitstun=0.0,
        airborne=frame % 25 > 20,
        ground_id=1,
        jumps=2,
        alive=True,
    )


async def seed_sample_match(
    session: AsyncSession,
    match_id: str = SAMPLE_MATCH_ID,
    frame_count: int = SAMPLE_FRAME_COUNT,
) -> Dict[str, int]:
    """
    Replace every row of match_id with the synthetic sample.
    Returns counts: frames_inserted, items_inserted, platforms_inserted, players_inserted.
    """
    for model in (MatchSettingsRow, PlayerSettingsRow, FrameRow, ItemRow, PlatformChangeRow):
        await session.execute(delete(model).where(model.match_id == match_id))

    counts = {
        "players_inserted": 0,
        "frames_inserted": 0,
        "items_inserted": 0,
        "platforms_inserted": 0,
    }

    session.add(MatchSettingsRow(
        match_id=match_id,
        slippi_version="3.16.0",
        stage=FOUNTAIN_OF_DREAMS,
        timer=8,
        frame_count=frame_count,
    ))

    for player in PLAYERS:
        session.add(PlayerSettingsRow(
            match_id=match_id,
            player_index=player["player_index"],
            port=player["port"],
            ext_char=player["ext_char"],
            player_type=0,
            player_tag=player["tag"],
            slippi_code=player["code"],
        ))
        counts["players_inserted"] += 1

    for frame in range(frame_count):
        for player in PLAYERS:
            session.add(_frame_row(match_id, frame, player, follower=False))
            counts["frames_inserted"] += 1
        # Nana follows seat 1
        session.add(_frame_row(match_id, frame, PLAYERS[1], follower=True))
        counts["frames_inserted"] += 1

    for frame in ITEM_FRAMES:
        if frame >= frame_count:
            break
        session.add(ItemRow(
            match_id=match_id,
            frame=frame,
            item_type=0x34,
            state=1,
            face_dir=1.0,
            xvel=2.5,
            xpos=10.0 + 2.5 * (frame - ITEM_FRAMES.start),
            ypos=8.0,
            spawn_id=1,
            missile_type=1,
            owner=0,
        ))
        counts["items_inserted"] += 1

    for frame, platform, height in PLATFORM_CHANGES:
        if frame >= frame_count:
            continue
        session.add(PlatformChangeRow(
            match_id=match_id,
            frame=frame,
            platform=platform,
            platform_height=height,
        ))
        counts["platforms_inserted"] += 1

    await session.flush()
    return counts
