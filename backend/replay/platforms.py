"""
Carry-forward resolution of sparse platform heights.

Platform heights are only recorded when they change. The height in effect on
a frame is the height of the latest change at or before it; before any change
the side's fallback height applies. The platform statement includes, per
side, the last change strictly before the requested range so the first frames
of a window resolve from that boundary event instead of the fallback.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from core.config import Settings


class PlatformSide(IntEnum):
    RIGHT = 0
    LEFT = 1


@dataclass(frozen=True)
class PlatformChange:
    frame: int
    side: PlatformSide
    height: float


@dataclass(frozen=True)
class PlatformHeights:
    left: float
    right: float

    def for_side(self, side: PlatformSide) -> float:
        return self.left if side is PlatformSide.LEFT else self.right


# Fountain of Dreams side platform heights at match start.
DEFAULT_PLATFORM_HEIGHTS = PlatformHeights(left=20.0, right=28.0)


@dataclass(frozen=True)
class PlatformFallbacks:
    """Fallback heights per stage id, with a default for stages not listed."""

    default: PlatformHeights = DEFAULT_PLATFORM_HEIGHTS
    by_stage: Mapping[int, PlatformHeights] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: Settings) -> "PlatformFallbacks":
        return cls(
            default=PlatformHeights(
                left=settings.platform_fallback_left,
                right=settings.platform_fallback_right,
            )
        )

    def for_stage(self, stage_id: Optional[int]) -> PlatformHeights:
        if stage_id is None:
            return self.default
        return self.by_stage.get(stage_id, self.default)


def platform_changes(records: Iterable[Mapping[str, Any]]) -> List[PlatformChange]:
    """Build change events from normalized platform rows (frame, platform, platform_height)."""
    return [
        PlatformChange(
            frame=record["frame"],
            side=PlatformSide(record["platform"]),
            height=record["platform_height"],
        )
        for record in records
    ]


def events_for_side(events: Iterable[PlatformChange], side: PlatformSide) -> List[PlatformChange]:
    """Changes for one side sorted ascending by frame. The sort is stable: equal frames keep input order."""
    return sorted((e for e in events if e.side is side), key=lambda e: e.frame)


def resolve_height(events: Sequence[PlatformChange], target_frame: int, fallback: float) -> float:
    """Height in effect on target_frame.

    events must already be sorted ascending by frame. The last event at or
    before target_frame wins, so among equal frames the later entry wins.
    """
    height = fallback
    for event in events:
        if event.frame > target_frame:
            break
        height = event.height
    return height


def resolve_stage_heights(
    left_events: Sequence[PlatformChange],
    right_events: Sequence[PlatformChange],
    target_frame: int,
    fallback: PlatformHeights,
) -> Dict[PlatformSide, float]:
    return {
        PlatformSide.LEFT: resolve_height(left_events, target_frame, fallback.left),
        PlatformSide.RIGHT: resolve_height(right_events, target_frame, fallback.right),
    }
