"""
Libreria API

FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import FastAPI, Request

from libreria import __version__
from .schemas import HealthResponse
from .routes import auth, books
from .middleware import (
    setup_cors,
    setup_logging,
    setup_exception_handlers,
    LoggingConfig,
    get_cors_config,
)
from .middleware.error_handler import POWERED_BY, POWERED_BY_HEADER
from .dependencies import (
    get_settings,
    init_database,
    dispose_database,
    create_tables,
    check_database,
    Settings,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

API_PREFIX = "/endpoint"


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown tasks:
    - Initialize the database engine
    - Create tables
    - Dispose of pooled connections on shutdown
    """
    settings: Settings = app.state.settings
    logger.info(f"Starting Libreria API in {settings.environment} mode")

    try:
        logger.info("Initializing database...")
        init_database(settings)
        await create_tables()

        logger.info("Libreria API started successfully")

        yield

    finally:
        logger.info("Shutting down Libreria API...")
        await dispose_database()
        logger.info("Shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(settings: Settings = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Libreria API",
        description="Library catalog API: users, tokens and books.",
        version=__version__,
        docs_url="/api-docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # ==========================================================================
    # Middleware (order matters - last added = outermost)
    # ==========================================================================

    setup_exception_handlers(app)

    setup_cors(app, get_cors_config(settings.environment, settings.cors_allowed_origins))

    @app.middleware("http")
    async def powered_by_header(request: Request, call_next):
        response = await call_next(request)
        response.headers[POWERED_BY_HEADER] = POWERED_BY
        return response

    # Logging is added last so it wraps everything
    setup_logging(
        app,
        config=LoggingConfig(
            enabled=True,
            log_request_body=settings.debug,
        ),
        structured=settings.environment != "development",
    )

    # ==========================================================================
    # Routers
    # ==========================================================================

    app.include_router(auth.router, prefix=API_PREFIX)
    app.include_router(books.router, prefix=API_PREFIX)

    # ==========================================================================
    # Root Routes
    # ==========================================================================

    @app.get(API_PREFIX, tags=["System"])
    async def root():
        """API status."""
        return {"status": "Operational (200)"}

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check() -> HealthResponse:
        """
        Health check endpoint.

        Returns status of all system components.
        """
        components = {}
        overall_healthy = True

        try:
            if await check_database():
                components["database"] = "healthy"
            else:
                components["database"] = "not_initialized"
                overall_healthy = False
        except Exception as e:
            components["database"] = f"unhealthy: {str(e)}"
            overall_healthy = False

        return HealthResponse(
            status="healthy" if overall_healthy else "degraded",
            version=__version__,
            components=components,
        )

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

def main():
    """Run the API using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "libreria.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
