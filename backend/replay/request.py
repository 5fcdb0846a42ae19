"""Validation of inbound replay requests ({matchId, frameStart, frameEnd})."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping

from .errors import RequestValidationFailed


@dataclass(frozen=True)
class ReplayRequest:
    match_id: str
    frame_start: int
    frame_end: int


def _frame_value(body: Mapping[str, Any], field: str) -> int:
    value = body.get(field)
    if value is None:
        raise RequestValidationFailed(f"Missing {field}")
    if isinstance(value, bool):
        raise RequestValidationFailed(f"Invalid {field}")
    if isinstance(value, str):
        text = value.strip()
        # ASCII digits only.
        if not (text.isascii() and text.isdigit()):
            raise RequestValidationFailed(f"Invalid {field}")
        value = int(text)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value < 0:
        raise RequestValidationFailed(f"Invalid {field}")
    return value


def parse_replay_request(body: Any) -> ReplayRequest:
    """Validate a decoded JSON body. frameStart 0 is a valid start.

    Raises RequestValidationFailed with the caller-facing message.
    """
    if not isinstance(body, Mapping):
        raise RequestValidationFailed("Request body must be a JSON object")

    match_id = body.get("matchId")
    if match_id is None or match_id == "":
        raise RequestValidationFailed("Missing matchId")
    if not isinstance(match_id, str) or not match_id.strip():
        raise RequestValidationFailed("Invalid matchId")

    frame_start = _frame_value(body, "frameStart")
    frame_end = _frame_value(body, "frameEnd")
    if frame_end < frame_start:
        raise RequestValidationFailed("frameEnd must be greater than or equal to frameStart")
    return ReplayRequest(match_id=match_id, frame_start=frame_start, frame_end=frame_end)


def parse_replay_request_body(raw: bytes) -> ReplayRequest:
    """Decode raw request bytes as JSON and validate them."""
    try:
        body = json.loads(raw or b"null")
    except ValueError:
        raise RequestValidationFailed("Request body must be valid JSON") from None
    return parse_replay_request(body)
