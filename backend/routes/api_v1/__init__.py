"""API v1: replay reconstruction and meta endpoints."""

from fastapi import APIRouter

from .meta import router as meta_router
from .replays import router as replays_router

router = APIRouter(prefix="/api/v1", tags=["api_v1"])
router.include_router(replays_router)
router.include_router(meta_router)

api_v1_router = router
