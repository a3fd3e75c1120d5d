# gamedev_hub/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from gamedev_hub.auth.session import SessionStore
from gamedev_hub.core.config import PACKAGE_DIR, Settings, build_settings
from gamedev_hub.core.logging import configure_logging
from gamedev_hub.database import Store
from gamedev_hub.routers import connect, pages, posts
from gamedev_hub.services.binder import SessionBinder
from gamedev_hub.services.discord_oauth import DiscordOAuthClient
from gamedev_hub.services.repository import Repository

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Build the application. Missing configuration raises ConfigError here;
    an unreadable schema raises SchemaError when the lifespan starts.
    """
    settings = settings or build_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = Store(settings.DATABASE_URL, settings.SCHEMA_PATH).open()
        http = http_client or httpx.AsyncClient(headers={"User-Agent": settings.APP_NAME})

        repository = Repository(store)
        sessions = SessionStore(
            settings.SESSION_SECRET, settings.SESSION_ALG, max_age=settings.SESSION_MAX_AGE_SECONDS
        )
        oauth = DiscordOAuthClient(
            http,
            client_id=settings.CLIENT_ID,
            client_secret=settings.CLIENT_SECRET,
            redirect_uri=settings.OAUTH_REDIRECT_URI,
            api_base=settings.DISCORD_API_BASE,
            auth_style=settings.OAUTH_AUTH_STYLE,
        )

        app.state.store = store
        app.state.repository = repository
        app.state.sessions = sessions
        app.state.oauth = oauth
        app.state.binder = SessionBinder(
            oauth,
            repository,
            sessions,
            guild_id=settings.GUILD_ID,
            default_bio=settings.DEFAULT_BIO,
            cdn_base=settings.DISCORD_CDN_BASE,
        )
        logger.info("%s started", settings.APP_NAME)
        try:
            yield
        finally:
            if http_client is None:
                await http.aclose()
            store.close()
            sessions.clear()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))

    @app.middleware("http")
    async def strip_trailing_slash(request: Request, call_next):
        path = request.url.path
        if len(path) > 1 and path.endswith("/"):
            # "//host/" must not turn into a protocol-relative redirect
            target = "/" + path.strip("/")
            if request.url.query:
                target = f"{target}?{request.url.query}"
            return RedirectResponse(target, status_code=301)
        return await call_next(request)

    # Routers
    app.include_router(pages.router)
    app.include_router(connect.router)
    app.include_router(posts.router)

    return app


def run() -> None:
    import uvicorn

    load_dotenv()
    settings = build_settings()
    # log_config=None keeps the handlers and redaction filter from configure_logging
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
