"""Notification query functions for DocMan."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docman.database.models.notification import Notification, NotificationType

logger = structlog.get_logger(__name__)


async def create_notification(
    session: AsyncSession,
    recipient_id: UUID,
    notification_type: NotificationType,
    title: str,
    message: str,
    sender_id: UUID | None = None,
    related_document_id: UUID | None = None,
) -> Notification:
    """Store an in-app notification for a user.

    Args:
        session: Active async database session.
        recipient_id: Addressee.
        notification_type: Notification kind.
        title: Short headline.
        message: Body text.
        sender_id: Originating user, if any.
        related_document_id: Document the notification is about.

    Returns:
        The newly created Notification instance.
    """
    notification = Notification(
        recipient_id=recipient_id,
        sender_id=sender_id,
        type=notification_type,
        title=title,
        message=message,
        related_document_id=related_document_id,
        is_read=False,
    )
    session.add(notification)
    await session.commit()

    logger.debug(
        "notification_stored",
        notification_id=str(notification.id),
        recipient_id=str(recipient_id),
        type=notification_type.value,
    )
    return notification


async def list_user_notifications(
    session: AsyncSession,
    user_id: UUID,
    unread_only: bool = False,
) -> list[Notification]:
    """List a user's notifications, newest first."""
    stmt = select(Notification).where(Notification.recipient_id == user_id)
    if unread_only:
        stmt = stmt.where(Notification.is_read.is_(False))
    stmt = stmt.order_by(Notification.created_at.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def mark_notification_read(
    session: AsyncSession,
    notification_id: UUID,
) -> Notification | None:
    """Mark a notification as read.

    Returns:
        The updated Notification, or None if it does not exist.
    """
    result = await session.execute(
        select(Notification).where(Notification.id == notification_id)
    )
    notification = result.scalar_one_or_none()
    if notification is None:
        return None

    if not notification.is_read:
        notification.is_read = True
        notification.read_at = datetime.now(timezone.utc)
        await session.commit()

    return notification
