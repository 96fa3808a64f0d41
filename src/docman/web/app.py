"""FastAPI application factory for DocMan.

This module provides the main application factory function that creates
and configures a FastAPI application with:
- CORS middleware for cross-origin requests
- Request logging middleware with correlation IDs
- Database, notification and review service lifecycle management
- 404 responses for missing documents, assignments and users

Example usage:
    >>> from docman.config import DocmanConfig
    >>> from docman.web.app import create_app
    >>>
    >>> app = create_app(DocmanConfig())
    >>>
    >>> import uvicorn
    >>> uvicorn.run(app, host="0.0.0.0", port=8000)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docman import __version__
from docman.config import DocmanConfig
from docman.database.connection import get_engine, get_session_factory
from docman.logging import get_logger
from docman.notifications import build_notification_sender
from docman.review.cycle import ReviewCycleService
from docman.review.errors import NotFoundError
from docman.web.middleware import RequestLoggingMiddleware
from docman.web.routes.documents import create_documents_router
from docman.web.routes.health import create_health_router
from docman.web.routes.maintenance import create_maintenance_router
from docman.web.routes.notifications import create_notifications_router
from docman.web.routes.reviews import create_reviews_router

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    Creates the database engine, session factory, notification sender and
    ReviewCycleService on startup and stores them in app.state; disposes of
    them on shutdown.
    """
    config: DocmanConfig = app.state.config

    logger.info("app_startup_begin", host=config.web.host, port=config.web.port)

    engine = get_engine(config.database)
    session_factory = get_session_factory(engine)
    notifier = build_notification_sender(config.notifications, session_factory)

    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.review_service = ReviewCycleService(
        session_factory,
        notifier=notifier,
        config=config.review,
    )

    logger.info(
        "review_service_initialized",
        pool_size=config.database.pool_size,
        notifier=type(notifier).__name__ if notifier else None,
    )

    yield

    logger.info("app_shutdown_begin")
    if notifier is not None:
        await notifier.close()
    await engine.dispose()
    logger.info("database_pool_disposed")


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.warning("record_not_found", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


def create_app(config: DocmanConfig | None = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Args:
        config: Optional DocmanConfig. If None, creates default config.

    Returns:
        Configured FastAPI application instance.
    """
    if config is None:
        config = DocmanConfig()

    app = FastAPI(
        title="DocMan",
        version=__version__,
        description="Document review cycle service",
        lifespan=lifespan,
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.web.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_exception_handler(NotFoundError, not_found_handler)  # type: ignore[arg-type]

    app.include_router(create_health_router())
    app.include_router(create_reviews_router())
    app.include_router(create_documents_router())
    app.include_router(create_maintenance_router())
    app.include_router(create_notifications_router())

    logger.info(
        "app_created",
        cors_origins=config.web.cors_origins,
        version=__version__,
    )

    return app
