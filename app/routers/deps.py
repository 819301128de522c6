"""Shared dependencies: the app-wide store and play session registry."""
import uuid

from fastapi import Request, Response

from app.core.config import get_settings
from app.services.player import PlaySessionRegistry
from app.services.tour_store import TourStore

settings = get_settings()


def get_store(request: Request) -> TourStore:
    return request.app.state.store


def get_play_registry(request: Request) -> PlaySessionRegistry:
    return request.app.state.play_registry


def get_or_create_session_id(request: Request, response: Response) -> str:
    """Visitor id from the session cookie; issue a new cookie if there is none."""
    sid = request.cookies.get(settings.session_cookie_name)
    if not sid:
        sid = str(uuid.uuid4())
        response.set_cookie(
            key=settings.session_cookie_name,
            value=sid,
            max_age=settings.session_cookie_max_age,
            httponly=True,
            samesite="lax",
        )
    return sid
