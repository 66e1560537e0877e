"""
Libreria Web Client

Server-rendered front end that talks to the Libreria API over HTTP.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import FastAPI, Request
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from libreria import __version__
from .api_client import LibreriaAPIClient
from .config import WebSettings, get_web_settings
from .routes import books_router, index_router, login_router, logout_router
from .templating import render

SESSION_COOKIE = "libreria-session"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the API client on startup unless one was injected."""
    settings: WebSettings = app.state.settings
    owned_client = None

    if getattr(app.state, "api_client", None) is None:
        owned_client = LibreriaAPIClient(settings.api_url, timeout=settings.api_timeout_seconds)
        app.state.api_client = owned_client

    logger.info(f"Libreria web client started, API at {settings.api_url}")

    try:
        yield
    finally:
        if owned_client is not None:
            await owned_client.close()
            app.state.api_client = None
        logger.info("Libreria web client stopped")


def create_web_app(
    settings: Optional[WebSettings] = None,
    api_client: Optional[LibreriaAPIClient] = None,
) -> FastAPI:
    """
    Create and configure the web client application.

    Args:
        settings: Client settings. If None, loads from environment.
        api_client: Client for the API. If None, one is created on startup
            from ``settings.api_url``.
    """
    if settings is None:
        settings = get_web_settings()

    app = FastAPI(
        title="Libreria",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.api_client = api_client

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie=SESSION_COOKIE,
        https_only=settings.secure_cookies,
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_page(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            message = "The page you are looking for does not exist"
        else:
            message = str(exc.detail)

        return render(
            request,
            "error.html",
            {
                "title": f"Libreria - Error {exc.status_code}",
                "status_code": exc.status_code,
                "message": message,
            },
            status_code=exc.status_code,
        )

    app.include_router(index_router)
    app.include_router(login_router)
    app.include_router(logout_router)
    app.include_router(books_router)

    return app


app = create_web_app()


def main():
    """Run the web client using uvicorn."""
    import uvicorn

    settings = get_web_settings()

    uvicorn.run(
        "libreria.web.main:app",
        host=settings.client_host,
        port=settings.client_port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
