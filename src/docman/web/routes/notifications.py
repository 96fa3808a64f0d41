"""In-app notification endpoints for DocMan."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from fastapi import status as http_status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docman.database.queries import notification as notification_queries
from docman.logging import get_logger
from docman.web.dependencies import get_session_factory
from docman.web.schemas import NotificationResponse

logger = get_logger(__name__)


def create_notifications_router() -> APIRouter:
    """Create notifications router.

    Routes:
        GET /notifications/user/{user_id} - A user's notifications, newest first
        PUT /notifications/{notification_id}/read - Mark a notification read
    """
    router = APIRouter(prefix="/notifications", tags=["notifications"])

    @router.get("/user/{user_id}", response_model=list[NotificationResponse])
    async def list_notifications(
        user_id: UUID,
        unread_only: bool = False,
        session_factory: async_sessionmaker[AsyncSession] = Depends(  # noqa: B008
            get_session_factory
        ),
    ) -> list[NotificationResponse]:
        async with session_factory() as session:
            notifications = await notification_queries.list_user_notifications(
                session, user_id, unread_only=unread_only
            )
        return [NotificationResponse.model_validate(n) for n in notifications]

    @router.put("/{notification_id}/read", response_model=NotificationResponse)
    async def mark_read(
        notification_id: UUID,
        session_factory: async_sessionmaker[AsyncSession] = Depends(  # noqa: B008
            get_session_factory
        ),
    ) -> NotificationResponse:
        """Mark a notification read.

        Raises:
            HTTPException: 404 if the notification does not exist
        """
        async with session_factory() as session:
            notification = await notification_queries.mark_notification_read(
                session, notification_id
            )

        if notification is None:
            logger.warning("notification_not_found", notification_id=str(notification_id))
            raise HTTPException(
                status_code=http_status.HTTP_404_NOT_FOUND,
                detail="Notification not found",
            )
        return NotificationResponse.model_validate(notification)

    return router
