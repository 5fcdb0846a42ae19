"""
Additive defaults for fields the source tables do not record.

Each defaults model is merged into its computed counterpart with
``with_defaults``, which only fills keys the computed record does not have.
The field sets of every (computed, defaults) pair are checked for overlap at
import time, so a schema change that would let a static default shadow a
computed value fails before the service starts.
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Mapping, Tuple, Type

from pydantic import BaseModel

from .schema import (
    ItemState,
    MatchSettings,
    PlayerSettings,
    PlayerState,
    ReplayModel,
)


class MatchSettingsDefaults(ReplayModel):
    is_teams: bool = False
    is_pal: bool = False
    is_frozen_stadium: bool = False
    platform: str = "dolphin"
    console_nickname: str = "slippi"
    timer_type: str = "counting down"
    character_ui_places_count: int = 0
    game_type: str = "stock"
    friendly_fire_on: bool = True
    is_break_the_targets_or_title_demo: bool = False
    is_classic_or_adventure_mode: bool = False
    is_home_run_contest_or_event_match: bool = False
    is_single_button_mode: bool = False
    timer_counts_during_pause: bool = False
    bomb_rain: bool = False
    item_spawn_rate: str = "off"
    self_destruct_score_value: int = 0
    damage_ratio: float = 1.0


class PlayerSettingsDefaults(ReplayModel):
    start_stocks: int = 4
    costume_index: int = 1
    team_shade: int = 1
    handicap: int = 0
    team_id: int = 1
    stamina_mode: bool = False
    silent_character: bool = False
    low_gravity: bool = False
    invisible: bool = False
    black_stock_icon: bool = False
    metal: bool = False
    start_game_on_warp_platform: bool = False
    rumble_enabled: bool = False
    cpu_level: int = 1
    offense_ratio: float = 1.0
    defense_ratio: float = 1.0
    model_scale: float = 1.0
    controller_fix: str = "UCF"
    internal_character_ids: Tuple[int, ...] = ()


class PlayerStateDefaults(ReplayModel):
    is_reflect_active: bool = False
    is_fastfalling: bool = False
    is_shield_active: bool = False
    is_hitting_shield: bool = False
    is_powershield_active: bool = False
    is_offscreen: bool = False


class ItemStateDefaults(ReplayModel):
    damage_taken: float = 0.0
    expiration_timer: float = 0.0


class GameEnding(ReplayModel):
    game_end_method: str = "GAME!"
    old_game_end_method: str = "resolved"
    quit_initiator: int = 0


MATCH_SETTINGS_DEFAULTS = MatchSettingsDefaults()
PLAYER_SETTINGS_DEFAULTS = PlayerSettingsDefaults()
PLAYER_STATE_DEFAULTS = PlayerStateDefaults()
ITEM_STATE_DEFAULTS = ItemStateDefaults()
GAME_ENDING = GameEnding()

# Key under which the per-seat list is attached to the settings object.
PLAYER_SETTINGS_KEY = "playerSettings"


def field_keys(model: Type[BaseModel]) -> FrozenSet[str]:
    """Serialized (alias) names of a model's fields."""
    return frozenset(
        info.serialization_alias or info.alias or name
        for name, info in model.model_fields.items()
    )


def assert_disjoint(computed: Type[BaseModel], defaults: Type[BaseModel]) -> None:
    """Raise TypeError if defaults declares any field computed also produces."""
    overlap = field_keys(computed) & field_keys(defaults)
    if overlap:
        raise TypeError(
            f"{defaults.__name__} overlaps computed fields of {computed.__name__}: {sorted(overlap)}"
        )


def fill_absent(computed: Mapping[str, Any], defaults: Mapping[str, Any]) -> Dict[str, Any]:
    """Return computed plus every default whose key computed lacks. Computed values always win."""
    merged = dict(computed)
    for key, value in defaults.items():
        merged.setdefault(key, value)
    return merged


def with_defaults(computed: BaseModel, defaults: BaseModel) -> Dict[str, Any]:
    """Serialize computed and fill in the additive defaults."""
    return fill_absent(
        computed.model_dump(mode="json", by_alias=True),
        defaults.model_dump(mode="json", by_alias=True),
    )


MERGED_PAIRS: Tuple[Tuple[Type[BaseModel], Type[BaseModel]], ...] = (
    (MatchSettings, MatchSettingsDefaults),
    (PlayerSettings, PlayerSettingsDefaults),
    (PlayerState, PlayerStateDefaults),
    (ItemState, ItemStateDefaults),
)

for _computed, _defaults in MERGED_PAIRS:
    assert_disjoint(_computed, _defaults)

if PLAYER_SETTINGS_KEY in field_keys(MatchSettings) | field_keys(MatchSettingsDefaults):
    raise TypeError(f"{PLAYER_SETTINGS_KEY!r} collides with a match settings field")
