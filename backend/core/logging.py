import logging

from ops.ops_events import OPS_LOGGER_NAME

from .config import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def resolve_level(name: str, default: int = logging.INFO) -> int:
    """Numeric level for a name such as "debug"; unknown names give default."""
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(settings: Settings) -> None:
    """Configure application-wide logging based on settings.

    Application loggers follow LOG_LEVEL. The ops_events logger emits one
    ``ops_event=<type> k=v ...`` line per replay request, query and cache
    milestone and follows OPS_LOG_LEVEL, so the event stream can stay on while
    application logs are quiet (or the reverse).
    """
    level = resolve_level(settings.log_level)

    logging.basicConfig(level=level, format=LOG_FORMAT)

    # Align uvicorn loggers with the application log level for consistency.
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(level)

    logging.getLogger(OPS_LOGGER_NAME).setLevel(resolve_level(settings.ops_log_level, level))

    # SQL statements are issued per request; keep engine chatter out of INFO logs.
    logging.getLogger("sqlalchemy.engine").setLevel(max(level, logging.WARNING))
