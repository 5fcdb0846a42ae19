"""
Snapshot assembly: five normalized sources in, one ReplaySnapshot out.

Frame rows are grouped by frame number; every row becomes a PlayerFrame with
decoded controller inputs and defaulted state. Items are indexed by frame once,
platform events are split per side and sorted once, then each frame resolves
its stage state by carry-forward. Output frames are ascending by number.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from query.types import QueryResult
from .controller import AnalogInputs, decode_buttons
from .defaults import (
    GAME_ENDING,
    ITEM_STATE_DEFAULTS,
    MATCH_SETTINGS_DEFAULTS,
    PLAYER_SETTINGS_DEFAULTS,
    PLAYER_SETTINGS_KEY,
    PLAYER_STATE_DEFAULTS,
    with_defaults,
)
from .errors import ReplayDataError, ReplayNotFoundError
from .grouping import group_by_frame
from .normalizer import Coercion, normalize_rows
from .platforms import (
    PlatformFallbacks,
    PlatformSide,
    events_for_side,
    platform_changes,
    resolve_stage_heights,
)
from .schema import (
    ItemState,
    MatchSettings,
    PlayerFrame,
    PlayerInputs,
    PlayerSettings,
    PlayerState,
    ReplayFrame,
    ReplaySnapshot,
    StageState,
)

logger = logging.getLogger(__name__)

I = Coercion.INTEGER
N = Coercion.NUMBER
B = Coercion.BOOLEAN

MATCH_SETTINGS_SCHEMA: Dict[str, Coercion] = {
    "stage_id": I,
    "timer_start": I,
    "frame_count": I,
}

PLAYER_SETTINGS_SCHEMA: Dict[str, Coercion] = {
    "player_index": I,
    "port": I,
    "external_character_id": I,
    "player_type": I,
}

FRAME_SCHEMA: Dict[str, Coercion] = {
    "frame_number": I,
    "player_index": I,
    "follower": B,
    "seed": I,
    "buttons": I,
    "phys_l": N,
    "phys_r": N,
    "joy_x": N,
    "joy_y": N,
    "c_x": N,
    "c_y": N,
    "char_id": I,
    "action_post": I,
    "pos_x_post": N,
    "pos_y_post": N,
    "face_dir_post": N,
    "percent_post": N,
    "shield": N,
    "hit_with": I,
    "combo": I,
    "hurt_by": I,
    "stocks": I,
    "action_fc": N,
    "hitstun": N,
    "airborne": B,
    "ground_id": I,
    "jumps": I,
    "l_cancel": I,
    "hurtbox": I,
    "self_air_x": N,
    "self_air_y": N,
    "attack_x": N,
    "attack_y": N,
    "self_grd_x": N,
    "hitlag": N,
    "alive": B,
}

ITEM_SCHEMA: Dict[str, Coercion] = {
    "frame_number": I,
    "type_id": I,
    "state": I,
    "facing_direction": N,
    "x_velocity": N,
    "y_velocity": N,
    "x_position": N,
    "y_position": N,
    "spawn_id": I,
    "samus_missile_type": I,
    "peach_turnip_face": I,
    "is_charge_shot_launched": B,
    "charge_shot_level": I,
    "owner": I,
}

PLATFORM_SCHEMA: Dict[str, Coercion] = {
    "frame": I,
    "platform": I,
    "platform_height": N,
}


def _player_state(row: Mapping[str, Any]) -> PlayerState:
    return PlayerState(
        frame_number=row["frame_number"],
        player_index=row["player_index"],
        is_nana=row["follower"],
        internal_character_id=row["char_id"],
        action_state_id=row["action_post"],
        x_position=row["pos_x_post"],
        y_position=row["pos_y_post"],
        facing_direction=row["face_dir_post"],
        percent=row["percent_post"],
        shield_size=row["shield"],
        last_hitting_attack_id=row["hit_with"],
        current_combo_count=row["combo"],
        last_hit_by=row["hurt_by"],
        stocks_remaining=row["stocks"],
        action_state_frame_counter=row["action_fc"],
        hitstun_remaining=row["hitstun"],
        is_grounded=not row["airborne"],
        last_ground_id=row["ground_id"],
        jumps_remaining=row["jumps"],
        l_cancel_status=row["l_cancel"],
        hurtbox_collision_state=row["hurtbox"],
        self_induced_air_x_speed=row["self_air_x"],
        self_induced_air_y_speed=row["self_air_y"],
        attack_based_x_speed=row["attack_x"],
        attack_based_y_speed=row["attack_y"],
        self_induced_ground_x_speed=row["self_grd_x"],
        hitlag_remaining=row["hitlag"],
        is_in_hitstun=row["hitstun"] > 0,
        is_dead=not row["alive"],
    )


def build_player_frame(row: Mapping[str, Any]) -> PlayerFrame:
    """One frame row -> PlayerFrame with decoded inputs and defaulted state."""
    controls = decode_buttons(
        row["buttons"],
        AnalogInputs(
            l_trigger=row["phys_l"],
            r_trigger=row["phys_r"],
            joystick_x=row["joy_x"],
            joystick_y=row["joy_y"],
            c_stick_x=row["c_x"],
            c_stick_y=row["c_y"],
        ),
    )
    inputs = PlayerInputs(
        frame_number=row["frame_number"],
        player_index=row["player_index"],
        is_nana=row["follower"],
        physical=controls.physical,
        processed=controls.processed,
    )
    return PlayerFrame(
        frame_number=row["frame_number"],
        player_index=row["player_index"],
        inputs=inputs,
        state=with_defaults(_player_state(row), PLAYER_STATE_DEFAULTS),
    )


def _split_players(frame_number: int, rows: Sequence[Mapping[str, Any]]) -> tuple[List[PlayerFrame], List[PlayerFrame]]:
    leaders: Dict[int, PlayerFrame] = {}
    followers: Dict[int, PlayerFrame] = {}
    for row in rows:
        target = followers if row["follower"] else leaders
        index = row["player_index"]
        if index in target:
            logger.warning(
                "Duplicate %s row for frame=%s player_index=%s; keeping the first",
                "follower" if row["follower"] else "player",
                frame_number,
                index,
            )
            continue
        target[index] = build_player_frame(row)
    return (
        [leaders[i] for i in sorted(leaders)],
        [followers[i] for i in sorted(followers)],
    )


def build_settings(
    match_records: Sequence[Mapping[str, Any]],
    player_records: Sequence[Mapping[str, Any]],
    match_id: Optional[str] = None,
) -> tuple[MatchSettings, Dict[str, Any]]:
    """Computed match settings and the serialized settings object with players attached."""
    if not match_records:
        raise ReplayNotFoundError(f"Match {match_id} not found" if match_id else "Match not found")
    match_settings = MatchSettings(**match_records[0])
    settings = with_defaults(match_settings, MATCH_SETTINGS_DEFAULTS)
    settings[PLAYER_SETTINGS_KEY] = [
        with_defaults(PlayerSettings(**record), PLAYER_SETTINGS_DEFAULTS)
        for record in player_records
    ]
    return match_settings, settings


def assemble(
    match_settings_raw: QueryResult,
    player_settings_raw: QueryResult,
    frame_rows: QueryResult,
    item_rows: QueryResult,
    platform_events: QueryResult,
    frame_start: int,
    frame_end: int,
    *,
    fallbacks: Optional[PlatformFallbacks] = None,
    match_id: Optional[str] = None,
) -> ReplaySnapshot:
    """Build the replay document for [frame_start, frame_end].

    Raises ReplayNotFoundError when there is no match settings row and
    ReplayDataError when a source value cannot be read as its declared type.
    """
    fallbacks = fallbacks or PlatformFallbacks()
    try:
        match_settings, settings = build_settings(
            normalize_rows(match_settings_raw, MATCH_SETTINGS_SCHEMA),
            normalize_rows(player_settings_raw, PLAYER_SETTINGS_SCHEMA),
            match_id=match_id,
        )

        rows = [
            row
            for row in normalize_rows(frame_rows, FRAME_SCHEMA)
            if frame_start <= row["frame_number"] <= frame_end
        ]
        frames_by_number = group_by_frame(rows)
        items_by_number = group_by_frame(normalize_rows(item_rows, ITEM_SCHEMA))

        changes = platform_changes(normalize_rows(platform_events, PLATFORM_SCHEMA))
        left_events = events_for_side(changes, PlatformSide.LEFT)
        right_events = events_for_side(changes, PlatformSide.RIGHT)
        fallback = fallbacks.for_stage(match_settings.stage_id)

        frames: List[ReplayFrame] = []
        for frame_number in sorted(frames_by_number):
            group = frames_by_number[frame_number]
            players, followers = _split_players(frame_number, group)
            heights = resolve_stage_heights(left_events, right_events, frame_number, fallback)
            frames.append(
                ReplayFrame(
                    frame_number=frame_number,
                    random_seed=group[0]["seed"],
                    players=players,
                    followers=followers,
                    items=[
                        with_defaults(ItemState(**item), ITEM_STATE_DEFAULTS)
                        for item in items_by_number.get(frame_number, [])
                    ],
                    stage=StageState(
                        frame_number=frame_number,
                        fod_left_platform_height=heights[PlatformSide.LEFT],
                        fod_right_platform_height=heights[PlatformSide.RIGHT],
                    ),
                )
            )
    except (KeyError, ValueError) as exc:
        # pydantic.ValidationError is a ValueError
        raise ReplayDataError(f"Malformed replay source data: {exc}") from exc

    logger.debug(
        "Assembled replay match_id=%s frames=%d range=[%d, %d]",
        match_id,
        len(frames),
        frame_start,
        frame_end,
    )
    return ReplaySnapshot(
        settings=settings,
        frames=frames,
        ending=GAME_ENDING.model_dump(mode="json", by_alias=True),
    )
