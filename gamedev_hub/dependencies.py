from typing import Optional

from fastapi import Depends, Request
from fastapi.templating import Jinja2Templates

from gamedev_hub.auth.session import SessionData, SessionStore
from gamedev_hub.core.config import Settings
from gamedev_hub.services.binder import SessionBinder
from gamedev_hub.services.discord_oauth import DiscordOAuthClient
from gamedev_hub.services.repository import Repository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_repository(request: Request) -> Repository:
    return request.app.state.repository


def get_oauth_client(request: Request) -> DiscordOAuthClient:
    return request.app.state.oauth


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_binder(request: Request) -> SessionBinder:
    return request.app.state.binder


def get_templates(request: Request) -> Jinja2Templates:
    return request.app.state.templates


def get_session(
    request: Request,
    settings: Settings = Depends(get_settings),
    sessions: SessionStore = Depends(get_session_store),
) -> Optional[SessionData]:
    """Session for the request's cookie, or None when absent or not ours."""
    return sessions.from_cookie(request.cookies.get(settings.SESSION_COOKIE_NAME))
