"""POST /api/v1/replays: reconstruct a replay for a match and frame range."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from core.dependencies import get_replay_service
from replay.errors import ReplayError
from replay.request import parse_replay_request_body
from replay.schema import serialize_snapshot
from replay.service import ReplayService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/replays", tags=["replays"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "OPTIONS,POST,GET",
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=CORS_HEADERS)


@router.options("", summary="Pre-flight negotiation", status_code=204)
async def replays_options() -> Response:
    """Empty success with permissive cross-origin headers."""
    return Response(status_code=204, headers=CORS_HEADERS)


@router.post(
    "",
    summary="Reconstruct a replay",
    description="Body {matchId, frameStart, frameEnd}. Returns the replay document for the inclusive frame range, served from cache when available.",
)
async def post_replay(
    request: Request,
    service: ReplayService = Depends(get_replay_service),
) -> Response:
    """
    Reconstruct a replay.

    - **matchId**: non-empty string.
    - **frameStart**: integer >= 0.
    - **frameEnd**: integer >= frameStart.

    Errors are returned as {"error": message} with 400, 404, 502, 504 or 500.
    """
    try:
        replay_request = parse_replay_request_body(await request.body())
        snapshot = await service.get_replay(replay_request)
    except ReplayError as e:
        if e.status_code >= 500:
            logger.error("Replay request failed: %s: %s", type(e).__name__, e)
        return _error(e.status_code, str(e))
    except Exception:
        logger.exception("Unexpected error reconstructing replay")
        return _error(500, "Internal error")

    return Response(
        content=serialize_snapshot(snapshot),
        media_type="application/json",
        headers=CORS_HEADERS,
    )
