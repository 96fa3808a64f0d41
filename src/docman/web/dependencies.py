"""FastAPI dependencies shared by the DocMan routers."""

from __future__ import annotations

from uuid import UUID

from fastapi import Header, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docman.review.cycle import ReviewCycleService


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Dependency that retrieves session factory from app state.

    Args:
        request: FastAPI request object

    Returns:
        Session factory from app.state
    """
    return request.app.state.session_factory  # type: ignore[return-value]


def get_review_service(request: Request) -> ReviewCycleService:
    """Dependency that retrieves the review cycle service from app state."""
    return request.app.state.review_service  # type: ignore[return-value]


def get_actor_id(x_user_id: UUID | None = Header(default=None)) -> UUID | None:  # noqa: B008
    """The acting user, taken from the optional ``X-User-ID`` header."""
    return x_user_id
