"""GET /api/v1/meta/version: application name and version from VERSION file."""

from __future__ import annotations

from fastapi import APIRouter

from core.config import get_settings
from version import get_version

router = APIRouter(prefix="/meta", tags=["meta"])


@router.get("/version", summary="Application version")
def meta_version() -> dict:
    return {"name": get_settings().app_name, "version": get_version()}
