import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import get_settings
from core.database import init_database, dispose_database
from core.logging import setup_logging
from replay.service import build_replay_service
from routes.api_v1 import api_v1_router
from storage.sql_blob_store import SqlBlobStore
from version import get_version

settings = get_settings()
setup_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=get_version())

# CORS: single source of truth, defined before any routers. Browser preflights are answered by CORSMiddleware.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["OPTIONS", "POST", "GET"],
    allow_headers=["Content-Type"],
    allow_credentials=False,
)

app.include_router(api_v1_router)


@app.on_event("startup")
async def on_startup() -> None:
    """Application startup hook: database, cache table, replay service."""
    db = await init_database(settings.database_url)
    service = build_replay_service(settings, db)
    if isinstance(service.cache.blob_store, SqlBlobStore):
        # Source tables are owned by ingestion; only the cache table is ours to create.
        await service.cache.blob_store.ensure_table()
    app.state.replay_service = service
    logger.info(
        "Replay service ready: cache_backend=%s cors_allow_origins=%s",
        settings.cache_backend,
        settings.cors_allow_origins,
    )
    logger.info("Application startup complete")


@app.on_event("shutdown")
async def on_shutdown() -> None:
    """Application shutdown hook."""
    app.state.replay_service = None
    await dispose_database()
    logger.info("Application shutdown complete")


@app.get("/health")
async def health() -> dict:
    """Simple health check endpoint."""
    return {"status": "ok"}
