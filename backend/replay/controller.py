"""
Controller bitmask decoding.

The packed button field uses the game's controller bit layout. The decoder
returns two views: ``physical`` (buttons plus raw trigger magnitudes) and
``processed`` (buttons plus stick axes and the larger of the two triggers).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import Dict, Tuple

from .schema import PhysicalInputs, ProcessedInputs


class Buttons(IntFlag):
    D_PAD_LEFT = 0x0001
    D_PAD_RIGHT = 0x0002
    D_PAD_DOWN = 0x0004
    D_PAD_UP = 0x0008
    Z = 0x0010
    R = 0x0020
    L = 0x0040
    A = 0x0100
    B = 0x0200
    X = 0x0400
    Y = 0x0800
    START = 0x1000


BUTTON_FIELDS: Tuple[Tuple[str, Buttons], ...] = (
    ("d_pad_left", Buttons.D_PAD_LEFT),
    ("d_pad_right", Buttons.D_PAD_RIGHT),
    ("d_pad_down", Buttons.D_PAD_DOWN),
    ("d_pad_up", Buttons.D_PAD_UP),
    ("z", Buttons.Z),
    ("r_trigger_digital", Buttons.R),
    ("l_trigger_digital", Buttons.L),
    ("a", Buttons.A),
    ("b", Buttons.B),
    ("x", Buttons.X),
    ("y", Buttons.Y),
    ("start", Buttons.START),
)


@dataclass(frozen=True)
class AnalogInputs:
    l_trigger: float = 0.0
    r_trigger: float = 0.0
    joystick_x: float = 0.0
    joystick_y: float = 0.0
    c_stick_x: float = 0.0
    c_stick_y: float = 0.0


@dataclass(frozen=True)
class ControllerInputs:
    physical: PhysicalInputs
    processed: ProcessedInputs


def pressed_buttons(bitmask: int) -> Dict[str, bool]:
    """Map every named button to whether its bit is set. Unknown bits are ignored."""
    mask = int(bitmask)
    return {name: bool(mask & flag) for name, flag in BUTTON_FIELDS}


def decode_buttons(bitmask: int, analog: AnalogInputs = AnalogInputs()) -> ControllerInputs:
    buttons = pressed_buttons(bitmask)
    physical = PhysicalInputs(
        **buttons,
        l_trigger_analog=analog.l_trigger,
        r_trigger_analog=analog.r_trigger,
    )
    processed = ProcessedInputs(
        **buttons,
        joystick_x=analog.joystick_x,
        joystick_y=analog.joystick_y,
        c_stick_x=analog.c_stick_x,
        c_stick_y=analog.c_stick_y,
        any_trigger=max(analog.l_trigger, analog.r_trigger),
    )
    return ControllerInputs(physical=physical, processed=processed)
