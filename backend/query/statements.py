"""
SQL statements for the five replay data sources.

All values are bound parameters (:match_id, :frame_start, :frame_end).
Column aliases are lowercase snake_case so engines that fold identifier case
return the same header. Boolean columns are typed so every backend renders
them as ``true`` / ``false``.
"""

from __future__ import annotations

from sqlalchemy import Boolean, text

MATCH_SETTINGS = text(
    """
    SELECT
        slippi_version AS replay_format_version,
        match_id AS start_time_stamp,
        stage AS stage_id,
        timer AS timer_start,
        frame_count
    FROM match_settings
    WHERE match_id = :match_id
    """
)

PLAYER_SETTINGS = text(
    """
    SELECT
        player_index,
        port,
        ext_char AS external_character_id,
        player_type,
        player_tag AS nametag,
        player_tag AS display_name,
        slippi_code AS connect_code
    FROM player_settings
    WHERE match_id = :match_id
    ORDER BY player_index ASC
    """
)

FRAMES = text(
    """
    SELECT
        frame_number, player_index, follower, seed,
        buttons, phys_l, phys_r, joy_x, joy_y, c_x, c_y,
        char_id, action_post, pos_x_post, pos_y_post, face_dir_post,
        percent_post, shield, hit_with, combo, hurt_by, stocks,
        action_fc, hitstun, airborne, ground_id, jumps, l_cancel,
        hurtbox, self_air_x, self_air_y, attack_x, attack_y,
        self_grd_x, hitlag, alive
    FROM frames
    WHERE match_id = :match_id
      AND frame_number BETWEEN :frame_start AND :frame_end
    ORDER BY frame_number ASC
    """
).columns(follower=Boolean, airborne=Boolean, alive=Boolean)

ITEMS = text(
    """
    SELECT
        frame AS frame_number,
        item_type AS type_id,
        state,
        face_dir AS facing_direction,
        xvel AS x_velocity,
        yvel AS y_velocity,
        xpos AS x_position,
        ypos AS y_position,
        spawn_id,
        missile_type AS samus_missile_type,
        turnip_face AS peach_turnip_face,
        is_launched AS is_charge_shot_launched,
        charged_power AS charge_shot_level,
        owner
    FROM items
    WHERE match_id = :match_id
      AND frame BETWEEN :frame_start AND :frame_end
    ORDER BY frame ASC
    """
).columns(is_charge_shot_launched=Boolean)

# Changes inside the range plus, per side, the most recent change strictly
# before it (the boundary event that seeds carry-forward at frame_start).
PLATFORMS = text(
    """
    SELECT frame, platform, platform_height
    FROM (
        SELECT frame, platform, platform_height
        FROM platforms
        WHERE match_id = :match_id
          AND frame BETWEEN :frame_start AND :frame_end

        UNION ALL

        SELECT frame, platform, platform_height
        FROM (
            SELECT frame, platform, platform_height
            FROM platforms
            WHERE match_id = :match_id
              AND platform = 0
              AND frame < :frame_start
            ORDER BY frame DESC
            LIMIT 1
        ) AS right_boundary

        UNION ALL

        SELECT frame, platform, platform_height
        FROM (
            SELECT frame, platform, platform_height
            FROM platforms
            WHERE match_id = :match_id
              AND platform = 1
              AND frame < :frame_start
            ORDER BY frame DESC
            LIMIT 1
        ) AS left_boundary
    ) AS platform_changes
    ORDER BY frame ASC
    """
)

REPLAY_STATEMENTS = {
    "match_settings": MATCH_SETTINGS,
    "player_settings": PLAYER_SETTINGS,
    "frames": FRAMES,
    "items": ITEMS,
    "platforms": PLATFORMS,
}
