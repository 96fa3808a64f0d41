"""FastAPI route definitions for the DocMan API."""

from __future__ import annotations

from docman.web.routes.documents import create_documents_router
from docman.web.routes.health import (
    HealthResponse,
    ReadinessResponse,
    create_health_router,
)
from docman.web.routes.maintenance import create_maintenance_router
from docman.web.routes.notifications import create_notifications_router
from docman.web.routes.reviews import create_reviews_router

__all__ = [
    "HealthResponse",
    "ReadinessResponse",
    "create_documents_router",
    "create_health_router",
    "create_maintenance_router",
    "create_notifications_router",
    "create_reviews_router",
]
