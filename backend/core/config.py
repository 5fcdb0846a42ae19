import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional


def _env_float(name: str, default: float, minimum: Optional[float] = None) -> float:
    """Read a float from the environment; malformed or missing values use the default."""
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    if minimum is not None:
        value = max(minimum, value)
    return value


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables with safe defaults."""

    app_name: str = "Replay Reconstruction API"
    env: str = "dev"
    database_url: str = "sqlite+aiosqlite:///./replays.db"
    log_level: str = "INFO"
    ops_log_level: str = "INFO"

    # Query execution service
    query_database: str = "replays"
    query_output_location: str = ""
    query_poll_interval_seconds: float = 1.0
    query_poll_backoff: float = 1.5
    query_max_poll_interval_seconds: float = 5.0
    query_timeout_seconds: float = 120.0

    # Replay cache
    cache_backend: str = "sql"  # sql | file
    cache_dir: str = "./replay_cache"

    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])

    # Platform heights used when no change event precedes a frame
    platform_fallback_left: float = 20.0
    platform_fallback_right: float = 28.0

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings from environment variables."""
        return cls(
            app_name=os.getenv("APP_NAME", cls.app_name),
            env=os.getenv("ENV", cls.env),
            database_url=os.getenv("DATABASE_URL") or cls.database_url,
            log_level=os.getenv("LOG_LEVEL", cls.log_level),
            ops_log_level=os.getenv("OPS_LOG_LEVEL", cls.ops_log_level),
            query_database=os.getenv("QUERY_DATABASE", cls.query_database),
            query_output_location=os.getenv("QUERY_OUTPUT_LOCATION", cls.query_output_location),
            query_poll_interval_seconds=_env_float(
                "QUERY_POLL_INTERVAL_SECONDS", cls.query_poll_interval_seconds, minimum=0.0
            ),
            query_poll_backoff=_env_float("QUERY_POLL_BACKOFF", cls.query_poll_backoff, minimum=1.0),
            query_max_poll_interval_seconds=_env_float(
                "QUERY_MAX_POLL_INTERVAL_SECONDS", cls.query_max_poll_interval_seconds, minimum=0.0
            ),
            query_timeout_seconds=_env_float(
                "QUERY_TIMEOUT_SECONDS", cls.query_timeout_seconds, minimum=0.0
            ),
            cache_backend=(os.getenv("CACHE_BACKEND") or cls.cache_backend).strip().lower(),
            cache_dir=os.getenv("CACHE_DIR", cls.cache_dir),
            cors_allow_origins=_env_list("CORS_ALLOW_ORIGINS", ["*"]),
            platform_fallback_left=_env_float("PLATFORM_FALLBACK_LEFT", cls.platform_fallback_left),
            platform_fallback_right=_env_float("PLATFORM_FALLBACK_RIGHT", cls.platform_fallback_right),
        )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings.from_env()
