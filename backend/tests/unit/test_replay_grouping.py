"""
Unit tests for frame grouping: one pass, first-seen group order, stable within a group.
"""

from __future__ import annotations

import sys
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

from replay.grouping import group_by_frame


def test_groups_preserve_relative_order_within_frame() -> None:
    records = [
        {"frame_number": 10, "player_index": 1},
        {"frame_number": 10, "player_index": 0},
        {"frame_number": 11, "player_index": 0},
        {"frame_number": 10, "player_index": 3},
    ]
    groups = group_by_frame(records)
    assert list(groups) == [10, 11]
    assert [r["player_index"] for r in groups[10]] == [1, 0, 3]
    assert [r["player_index"] for r in groups[11]] == [0]


def test_group_key_is_configurable() -> None:
    groups = group_by_frame([{"frame": 3}, {"frame": 1}, {"frame": 3}], key="frame")
    assert list(groups) == [3, 1]
    assert len(groups[3]) == 2


def test_empty_input_yields_no_groups() -> None:
    assert group_by_frame([]) == {}


def test_records_are_not_copied() -> None:
    record = {"frame_number": 5}
    assert group_by_frame([record])[5][0] is record
