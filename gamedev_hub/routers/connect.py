import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, RedirectResponse

from gamedev_hub.auth.session import SessionData, SessionStore
from gamedev_hub.core.config import Settings
from gamedev_hub.dependencies import get_oauth_client, get_session, get_session_store, get_settings
from gamedev_hub.services.discord_oauth import DiscordOAuthClient, TokenExchangeError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/connect", tags=["Connect"])


@router.get("/login")
def discord_login(oauth: DiscordOAuthClient = Depends(get_oauth_client)):
    return RedirectResponse(oauth.build_authorize_url(), status_code=status.HTTP_302_FOUND)


@router.get("/callback")
async def discord_callback(
    code: Optional[str] = None,
    oauth: DiscordOAuthClient = Depends(get_oauth_client),
):
    if not code:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"status": "ERROR", "error": "Not authenticated properly, please retry."},
        )

    try:
        tokens = await oauth.exchange_code(code)
    except TokenExchangeError:
        return RedirectResponse("/invalidToken", status_code=status.HTTP_302_FOUND)

    query_params = urlencode({"token": tokens.access_token, "refresh": tokens.refresh_token})
    return RedirectResponse(f"/?{query_params}", status_code=status.HTTP_302_FOUND)


@router.get("/logout")
def logout(
    session: Optional[SessionData] = Depends(get_session),
    sessions: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
):
    if session is None or not session.is_bound:
        return RedirectResponse("/", status_code=status.HTTP_302_FOUND)

    sessions.destroy(session.session_id)
    logger.info("Session ended for %s", session.user_id)

    response = RedirectResponse("/logoutSuccess", status_code=status.HTTP_302_FOUND)
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/")
    return response
