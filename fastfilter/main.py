"""fastfilter main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fastfilter.api.cache import router as cache_router
from fastfilter.api.events import router as events_router
from fastfilter.api.health import router as health_router
from fastfilter.api.middleware import error_response, setup_middleware
from fastfilter.api.products import router as products_router
from fastfilter.domain.exceptions import CacheError, CatalogError
from fastfilter.infrastructure.config import Settings, settings
from fastfilter.infrastructure.context import AppContext, build_context
from fastfilter.infrastructure.logging import configure_logging

logger = structlog.get_logger()


def create_app(
    app_settings: Settings | None = None,
    context: AppContext | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        app_settings: Settings to build the context from; the process
            settings when omitted.
        context: Prebuilt application context. When omitted, one is
            built on startup and closed on shutdown.

    Returns:
        Configured application.
    """
    app_settings = app_settings or (context.settings if context else settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Handle application startup and shutdown events.

        Args:
            app: The FastAPI application instance.

        Yields:
            None after startup, cleanup happens after yield.
        """
        # Startup
        configure_logging(app_settings.log_level, json=not app_settings.debug)
        logger.info(
            "Starting fastfilter",
            version=app_settings.api_version,
            catalog_backend=app_settings.catalog_backend,
            cache_backend=app_settings.cache_backend,
        )

        owned = getattr(app.state, "context", None) is None
        if owned:
            app.state.context = build_context(app_settings)

        yield

        # Shutdown
        logger.info("Shutting down fastfilter")
        if owned:
            await app.state.context.close()
            app.state.context = None

    app = FastAPI(
        title="fastfilter",
        description="Faceted product search with a versioned result cache",
        version=app_settings.api_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.context = context

    # CORS middleware (must be added before custom middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-FF-Cache", "X-FF-Total", "X-FF-Total-Pages", "X-Request-ID"],
    )

    # Request ID, access log and crash handling
    setup_middleware(app)

    # Include routers
    app.include_router(health_router, tags=["Health"])
    app.include_router(products_router)
    app.include_router(cache_router)
    app.include_router(events_router)

    # ========================================================================
    # Custom Exception Handlers
    # ========================================================================

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Handle HTTP exceptions with consistent format."""
        detail = exc.detail
        if isinstance(detail, dict):
            return error_response(
                request,
                exc.status_code,
                detail.get("error_code", "ERROR"),
                detail.get("message", str(detail)),
                detail.get("details"),
            )
        return error_response(request, exc.status_code, "ERROR", str(detail))

    @app.exception_handler(CatalogError)
    async def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
        """Handle catalog store failures."""
        logger.error("Catalog unavailable", path=request.url.path, error=exc.message)
        return error_response(
            request,
            503,
            "CATALOG_UNAVAILABLE",
            "The product catalog is temporarily unavailable",
            exc.details,
        )

    @app.exception_handler(CacheError)
    async def cache_exception_handler(request: Request, exc: CacheError) -> JSONResponse:
        """Handle cache failures that were not absorbed as misses."""
        logger.error("Cache unavailable", path=request.url.path, error=exc.message)
        return error_response(
            request,
            503,
            "CACHE_UNAVAILABLE",
            "The cache is temporarily unavailable",
            exc.details,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions with consistent format."""
        logger.exception(
            "Unhandled exception in handler",
            path=request.url.path,
            method=request.method,
            error=str(exc),
        )
        return error_response(request, 500, "INTERNAL_ERROR", "An internal error occurred")

    return app


app = create_app()
