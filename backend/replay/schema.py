"""
Typed records of the reconstructed replay document.

Attributes are snake_case; the document is serialized with camelCase aliases
so it keeps the key layout of the replay file format. NaN and
infinity are rejected, so a malformed numeric cell fails here rather than
leaking into the document.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ReplayModel(BaseModel):
    """Base for every replay record: camelCase aliases, immutable, finite numbers."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
        frozen=True,
    )


# --- Settings ---


class MatchSettings(ReplayModel):
    """Computed match configuration (from the match_settings table)."""

    replay_format_version: str
    start_time_stamp: str
    stage_id: int
    timer_start: int
    frame_count: int


class PlayerSettings(ReplayModel):
    """Computed per-seat configuration (from the player_settings table)."""

    player_index: int
    port: int
    external_character_id: int
    player_type: int
    nametag: str = ""
    display_name: str = ""
    connect_code: str = ""


# --- Inputs ---


class PhysicalInputs(ReplayModel):
    """Buttons as physically pressed plus raw analog trigger magnitudes."""

    d_pad_left: bool
    d_pad_right: bool
    d_pad_down: bool
    d_pad_up: bool
    z: bool
    r_trigger_analog: float
    r_trigger_digital: bool
    l_trigger_analog: float
    l_trigger_digital: bool
    a: bool
    b: bool
    x: bool
    y: bool
    start: bool


class ProcessedInputs(ReplayModel):
    """Buttons as processed by the game plus stick axes and the combined trigger."""

    d_pad_left: bool
    d_pad_right: bool
    d_pad_down: bool
    d_pad_up: bool
    z: bool
    r_trigger_digital: bool
    l_trigger_digital: bool
    a: bool
    b: bool
    x: bool
    y: bool
    start: bool
    joystick_x: float
    joystick_y: float
    c_stick_x: float
    c_stick_y: float
    any_trigger: float


class PlayerInputs(ReplayModel):
    frame_number: int
    player_index: int
    is_nana: bool
    physical: PhysicalInputs
    processed: ProcessedInputs


# --- State ---


class PlayerState(ReplayModel):
    """Computed post-frame character state."""

    frame_number: int
    player_index: int
    is_nana: bool
    internal_character_id: int
    action_state_id: int
    x_position: float
    y_position: float
    facing_direction: float
    percent: float
    shield_size: float
    last_hitting_attack_id: int
    current_combo_count: int
    last_hit_by: int
    stocks_remaining: int
    action_state_frame_counter: float
    hitstun_remaining: float
    is_grounded: bool
    last_ground_id: int
    jumps_remaining: int
    l_cancel_status: int
    hurtbox_collision_state: int
    self_induced_air_x_speed: float
    self_induced_air_y_speed: float
    attack_based_x_speed: float
    attack_based_y_speed: float
    self_induced_ground_x_speed: float
    hitlag_remaining: float
    is_in_hitstun: bool
    is_dead: bool


class ItemState(ReplayModel):
    """Computed state of one item instance on one frame."""

    frame_number: int
    type_id: int
    state: int
    facing_direction: float
    x_velocity: float
    y_velocity: float
    x_position: float
    y_position: float
    spawn_id: int
    samus_missile_type: int
    peach_turnip_face: int
    is_charge_shot_launched: bool
    charge_shot_level: int
    owner: int


class StageState(ReplayModel):
    """Platform heights in effect on a frame (Fountain of Dreams side platforms)."""

    frame_number: int
    fod_left_platform_height: float
    fod_right_platform_height: float


# --- Document ---


class PlayerFrame(ReplayModel):
    frame_number: int
    player_index: int
    inputs: PlayerInputs
    # PlayerState merged with the additive state defaults
    state: Dict[str, Any]


class ReplayFrame(ReplayModel):
    """Everything known about one frame. Items are exactly those recorded on this frame."""

    frame_number: int
    random_seed: int
    players: List[PlayerFrame] = Field(default_factory=list)
    followers: List[PlayerFrame] = Field(default_factory=list)
    items: List[Dict[str, Any]] = Field(default_factory=list)
    stage: StageState


class ReplaySnapshot(ReplayModel):
    """The reconstructed replay: settings, frames ascending by number, ending."""

    settings: Dict[str, Any]
    frames: List[ReplayFrame] = Field(default_factory=list)
    ending: Dict[str, Any]


def serialize_snapshot(snapshot: ReplaySnapshot) -> bytes:
    """Deterministic compact JSON encoding used for both the cache and the response."""
    return snapshot.model_dump_json(by_alias=True).encode("utf-8")


def deserialize_snapshot(body: bytes) -> ReplaySnapshot:
    return ReplaySnapshot.model_validate_json(body)
