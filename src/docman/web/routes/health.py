"""Health check endpoints for DocMan.

GET /health/ answers as long as the process is serving requests. GET
/health/ready additionally checks that the database accepts queries and
that the review assignment table exists, which catches a service started
against a database that was never migrated.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import select, text

from docman import __version__
from docman.database.models.review_assignment import ReviewAssignment
from docman.logging import get_logger
from docman.web.dependencies import get_session_factory

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = get_logger(__name__)


class HealthResponse(BaseModel):
    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model.

    Attributes:
        status: "ok" when the review engine can serve requests, else "unhealthy"
        database: "connected" or "disconnected"
        review_schema: "ready", "missing" when the review tables are absent,
            or "unknown" when the database could not be reached
    """

    status: str
    database: str
    review_schema: str


def _readiness(status: str, database: str, review_schema: str) -> dict[str, Any]:
    return {"status": status, "database": database, "review_schema": review_schema}


def create_health_router() -> APIRouter:
    """Create health check router.

    Routes:
        GET /health/ - Liveness with the running version
        GET /health/ready - Database and review schema verification
    """
    router = APIRouter(prefix="/health", tags=["health"])

    @router.get("/", response_model=HealthResponse)
    async def health() -> dict[str, Any]:
        return {"status": "ok", "version": __version__}

    @router.get("/ready", response_model=ReadinessResponse)
    async def readiness(
        session_factory: async_sessionmaker[AsyncSession] = Depends(  # noqa: B008
            get_session_factory
        ),
    ) -> dict[str, Any]:
        try:
            async with session_factory() as session:
                await session.execute(text("SELECT 1"))
                try:
                    await session.execute(select(ReviewAssignment.id).limit(1))
                except Exception as exc:
                    logger.warning("readiness_check_failed", review_schema="missing", error=str(exc))
                    return _readiness("unhealthy", "connected", "missing")

        except Exception as exc:
            logger.warning("readiness_check_failed", database="disconnected", error=str(exc))
            return _readiness("unhealthy", "disconnected", "unknown")

        logger.debug("readiness_check_passed")
        return _readiness("ok", "connected", "ready")

    return router
