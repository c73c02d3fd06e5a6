"""
FastAPI Application Factory.

Usage:
    # Development
    uvicorn api.app:create_app --factory --reload

    # Or from code
    from api.app import create_app
    app = create_app()
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import get_settings
from core.errors import DiscoverError, InvalidOutcomeError, SessionNotFoundError
from core.logging import configure_logging, get_logger
from core.middleware import RequestTracingMiddleware
from services.session_manager import reset_discover_session_manager


logger = get_logger(__name__)


_ERROR_STATUS = {
    SessionNotFoundError: 404,
    InvalidOutcomeError: 422,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Configures logging on startup and stops every session's fetch
    workers on shutdown.
    """
    settings = get_settings()

    configure_logging(
        json_logs=settings.is_production,
        log_level=settings.log_level,
    )

    logger.info(
        "Starting discover API",
        environment=settings.environment,
        port=settings.port,
        low_water_mark=settings.low_water_mark,
    )

    yield

    logger.info("Shutting down discover API")
    reset_discover_session_manager()


async def discover_error_handler(request: Request, exc: DiscoverError) -> JSONResponse:
    status_code = _ERROR_STATUS.get(type(exc), 400)
    logger.warning("Discover error", code=exc.code, error=str(exc), status_code=status_code)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "code": exc.code},
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    app = FastAPI(
        title="Discover Queue API",
        description="""
        One-at-a-time candidate discovery.

        ## Main Endpoints

        - `POST /api/discover/sessions` - start a session
        - `POST /api/discover/sessions/{id}/gesture` - like (left) / seen (right) / none
        - `POST /api/discover/sessions/{id}/reject` - skip without a decision
        - `POST /api/discover/sessions/{id}/undo` - bring back the last removed candidate
        - `POST /api/discover/sessions/{id}/reset` - restart discovery with new params
        """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # =========================================================================
    # Middleware (order matters - first added = outermost)
    # =========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request tracing (adds X-Request-ID, logs timing)
    app.add_middleware(RequestTracingMiddleware)

    app.add_exception_handler(DiscoverError, discover_error_handler)

    # =========================================================================
    # Routes
    # =========================================================================

    from api.routes.health import router as health_router
    app.include_router(health_router, tags=["Health"])

    from api.routes.discover import router as discover_router
    app.include_router(discover_router)

    return app


def get_app() -> FastAPI:
    """Get an application instance (for ASGI servers)."""
    return create_app()
