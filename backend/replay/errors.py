"""Error taxonomy for replay reconstruction.

Each caller-visible error carries the HTTP status the transport reports it
with. CacheReadError never reaches the caller: reads fail open.
"""

from __future__ import annotations


class ReplayError(Exception):
    """Base class for replay reconstruction failures."""

    status_code: int = 500


class RequestValidationFailed(ReplayError):
    """A request field is missing or invalid; the engine is never invoked."""

    status_code = 400


class ReplayNotFoundError(ReplayError):
    """The match id has no match settings row."""

    status_code = 404


class ReplayDataError(ReplayError):
    """A source value could not be read as its declared type."""

    status_code = 500


class QueryExecutionError(ReplayError):
    """The query engine reported a terminal failure (FAILED or CANCELLED)."""

    status_code = 502

    def __init__(self, message: str, state: str = "FAILED", reason: str | None = None) -> None:
        super().__init__(message)
        self.state = state
        self.reason = reason


class QueryTimeoutError(ReplayError):
    """The query did not reach a terminal state within the configured wait bound."""

    status_code = 504


class CacheReadError(ReplayError):
    """The blob store failed on read for a reason other than not-found."""


class CacheWriteError(ReplayError):
    """The blob store failed to persist a freshly computed replay."""

    status_code = 500
