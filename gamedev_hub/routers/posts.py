from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from gamedev_hub.auth.session import SessionData
from gamedev_hub.dependencies import get_repository, get_session, get_templates
from gamedev_hub.routers.pages import page_context
from gamedev_hub.schemas.result import LookupStatus
from gamedev_hub.services.repository import Repository

router = APIRouter(prefix="/posts", tags=["Posts"])


@router.get("", response_class=HTMLResponse)
def list_posts(
    request: Request,
    session: Optional[SessionData] = Depends(get_session),
    repository: Repository = Depends(get_repository),
    templates: Jinja2Templates = Depends(get_templates),
):
    return templates.TemplateResponse(
        request, "posts.html", page_context(session, posts=repository.get_all_posts(), failed=False)
    )


@router.post("", response_class=HTMLResponse)
def create_post(
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    link: str = Form(""),
    session: Optional[SessionData] = Depends(get_session),
    repository: Repository = Depends(get_repository),
    templates: Jinja2Templates = Depends(get_templates),
):
    failed = True
    if session is not None and session.is_bound:
        owner = repository.get_user_id(session.user_id)
        if owner.is_found:
            failed = not repository.add_post(title, description, owner.value, link)

    return templates.TemplateResponse(
        request,
        "posts.html",
        page_context(session, posts=repository.get_all_posts(), failed=failed),
        status_code=status.HTTP_200_OK if not failed else status.HTTP_400_BAD_REQUEST,
    )


@router.get("/{post_id}", response_class=HTMLResponse)
def post_detail(
    request: Request,
    post_id: int,
    session: Optional[SessionData] = Depends(get_session),
    repository: Repository = Depends(get_repository),
    templates: Jinja2Templates = Depends(get_templates),
):
    lookup = repository.get_post(post_id)
    status_code = {
        LookupStatus.FOUND: status.HTTP_200_OK,
        LookupStatus.NOT_FOUND: status.HTTP_404_NOT_FOUND,
        LookupStatus.ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    }[lookup.status]
    return templates.TemplateResponse(
        request,
        "post.html",
        page_context(session, post=lookup.value, lookup_status=lookup.status.value),
        status_code=status_code,
    )
