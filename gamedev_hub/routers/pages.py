from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from gamedev_hub.auth.session import SessionData, SessionStore
from gamedev_hub.core.config import Settings
from gamedev_hub.dependencies import (
    get_binder, get_repository, get_session, get_session_store, get_settings, get_templates,
)
from gamedev_hub.schemas.result import LookupStatus
from gamedev_hub.services.binder import BindStatus, SessionBinder
from gamedev_hub.services.repository import Repository

router = APIRouter(tags=["Pages"])


def page_context(session: Optional[SessionData], **extra) -> dict:
    """View-model shared by every page: the signed-in user, if any."""
    user = session if session is not None and session.is_bound else None
    return {"user": user, **extra}


def set_session_cookie(response, settings: Settings, sessions: SessionStore, session: SessionData) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=sessions.encode_cookie(session),
        max_age=sessions.max_age,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite=settings.SESSION_COOKIE_SAMESITE,
        path="/",
    )


@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    token: Optional[str] = None,
    refresh: Optional[str] = None,
    session: Optional[SessionData] = Depends(get_session),
    binder: SessionBinder = Depends(get_binder),
    sessions: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
    templates: Jinja2Templates = Depends(get_templates),
):
    if not (token and refresh):
        return templates.TemplateResponse(request, "index.html", page_context(session))

    result = await binder.bind(session, token, refresh)

    if result.status is BindStatus.PROVIDER_ERROR:
        return RedirectResponse("/invalidToken", status_code=status.HTTP_302_FOUND)
    if result.status is BindStatus.NOT_VERIFIED:
        return templates.TemplateResponse(request, "notVerified.html", page_context(None))
    if result.status is BindStatus.NOT_MEMBER:
        return templates.TemplateResponse(request, "joinServer.html", page_context(None))

    # Drop the one-time tokens from the address bar
    response = RedirectResponse("/", status_code=status.HTTP_302_FOUND)
    set_session_cookie(response, settings, sessions, result.session)
    return response


@router.get("/profile", response_class=HTMLResponse)
def profile(
    request: Request,
    session: Optional[SessionData] = Depends(get_session),
    repository: Repository = Depends(get_repository),
    templates: Jinja2Templates = Depends(get_templates),
):
    bio = ""
    if session is not None and session.is_bound:
        bio = repository.get_user_bio(session.user_id)
    return templates.TemplateResponse(
        request, "profile.html", page_context(session, bio=bio, failed=False, saved=False)
    )


@router.post("/profile", response_class=HTMLResponse)
def update_profile(
    request: Request,
    bioText: Optional[str] = Form(None),
    session: Optional[SessionData] = Depends(get_session),
    repository: Repository = Depends(get_repository),
    templates: Jinja2Templates = Depends(get_templates),
):
    failed = True
    bio = ""
    if session is not None and session.is_bound and bioText:
        bio = repository.get_user_bio(session.user_id)
        failed = not repository.update_user_bio(session.user_id, bioText)
        if not failed:
            bio = bioText.strip()

    return templates.TemplateResponse(
        request, "profile.html", page_context(session, bio=bio, failed=failed, saved=not failed)
    )


@router.get("/users", response_class=HTMLResponse)
def users(
    request: Request,
    session: Optional[SessionData] = Depends(get_session),
    repository: Repository = Depends(get_repository),
    templates: Jinja2Templates = Depends(get_templates),
):
    return templates.TemplateResponse(
        request, "users.html", page_context(session, users=repository.get_all_users())
    )


@router.get("/users/{user_id}", response_class=HTMLResponse)
def user_detail(
    request: Request,
    user_id: int,
    session: Optional[SessionData] = Depends(get_session),
    repository: Repository = Depends(get_repository),
    templates: Jinja2Templates = Depends(get_templates),
):
    lookup = repository.get_user_by_uid(user_id)
    status_code = {
        LookupStatus.FOUND: status.HTTP_200_OK,
        LookupStatus.NOT_FOUND: status.HTTP_404_NOT_FOUND,
        LookupStatus.ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    }[lookup.status]
    return templates.TemplateResponse(
        request,
        "user.html",
        page_context(session, profile=lookup.value, lookup_status=lookup.status.value),
        status_code=status_code,
    )


@router.get("/logoutSuccess", response_class=HTMLResponse)
def logout_success(request: Request, templates: Jinja2Templates = Depends(get_templates)):
    return templates.TemplateResponse(request, "logoutSuccess.html", page_context(None))


@router.get("/invalidToken", response_class=HTMLResponse)
def invalid_token(request: Request, templates: Jinja2Templates = Depends(get_templates)):
    return templates.TemplateResponse(request, "invalidToken.html", page_context(None))
