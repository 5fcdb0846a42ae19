from fastapi import Request

from replay.service import ReplayService


def get_replay_service(request: Request) -> ReplayService:
    """FastAPI dependency returning the ReplayService built at startup."""
    service = getattr(request.app.state, "replay_service", None)
    if service is None:
        raise RuntimeError("ReplayService is not initialized.")
    return service
