"""
FastAPI Application Entry Point

This module builds the FastAPI application and configures:
- API routes
- Middleware (request logging)
- Exception handlers mapping domain errors to JSON error bodies
- Store lifecycle (created on startup, closed on shutdown)

Configuration is passed in explicitly as a Settings object. A store can be
injected (tests); otherwise one is created from the settings on startup.

Run with:
    uvicorn --factory shortener.main:build_app
    python -m shortener serve
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortener import __version__
from shortener.api import endpoints
from shortener.core.exceptions import ShortenerError, StorageError
from shortener.core.logging_config import configure_logging
from shortener.core.setting import Settings, get_settings
from shortener.db.factory import create_store
from shortener.db.interface import URLStore
from shortener.middleware.logging import add_logging_middleware
from shortener.services.redirect_service import RedirectService
from shortener.services.url_service import URLShorteningService

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "BadRequest",
    404: "NotFound",
    405: "MethodNotAllowed",
}


def bind_store(app: FastAPI, store: URLStore) -> None:
    """Attach a store and the services built on it to the application."""
    settings: Settings = app.state.settings
    app.state.store = store
    app.state.url_service = URLShorteningService(
        store,
        strict_dedup=settings.STRICT_DEDUP,
        allowed_schemes=settings.ALLOWED_SCHEMES,
    )
    app.state.redirect_service = RedirectService(store)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the store on startup unless one was injected; close it on shutdown."""
    settings: Settings = app.state.settings
    owns_store = getattr(app.state, "store", None) is None

    if owns_store:
        store = await create_store(
            settings.resolved_database_url(),
            strict_dedup=settings.STRICT_DEDUP,
        )
        bind_store(app, store)

    logger.info(f"URL shortener started (env={settings.ENV_SETTING.value}, strict_dedup={settings.STRICT_DEDUP})")
    try:
        yield
    finally:
        if owns_store:
            await app.state.store.close()
        logger.info("URL shortener stopped")


async def shortener_error_handler(request: Request, exc: ShortenerError) -> JSONResponse:
    if isinstance(exc, StorageError):
        logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc.original_error)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error_code, "detail": str(exc)},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": HTTP_ERROR_CODES.get(exc.status_code, "HTTPError"), "detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": "InvalidRequest", "detail": str(exc.errors())},
    )


def create_app(settings: Optional[Settings] = None, store: Optional[URLStore] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration; loaded from the environment when omitted
        store: Persistence port to use instead of creating one from settings

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="URL Shortener Service",
        description="Shortens URLs into compact base-51 tokens and redirects them back",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = None
    if store is not None:
        bind_store(app, store)

    add_logging_middleware(app)

    app.add_exception_handler(ShortenerError, shortener_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Health endpoints defined before router to match before the token route
    @app.get("/", tags=["Health"])
    async def root():
        """Service metadata."""
        return {
            "message": "URL Shortener Service",
            "version": __version__,
            "docs": "/docs"
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for monitoring."""
        return {"status": "healthy"}

    app.include_router(endpoints.router, tags=["URL Shortener"])

    return app


def build_app() -> FastAPI:
    """Application factory for `uvicorn --factory shortener.main:build_app`."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, json_format=settings.LOG_JSON)
    return create_app(settings)
