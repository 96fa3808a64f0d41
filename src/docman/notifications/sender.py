"""Notification senders for DocMan.

A sender delivers one notification to one recipient. Senders report
delivery problems by returning False or raising; callers in the review
engine treat every notification as best-effort.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docman.database.models.notification import NotificationType
from docman.database.queries.notification import create_notification
from docman.logging import get_logger

logger = get_logger(__name__)


@dataclass
class NotificationContext:
    """Content of a notification, independent of the delivery channel."""

    type: NotificationType
    title: str
    message: str
    sender_id: UUID | None = None
    document_id: UUID | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for JSON serialization."""
        return {
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "sender_id": str(self.sender_id) if self.sender_id else None,
            "document_id": str(self.document_id) if self.document_id else None,
            "data": self.data,
        }


class NotificationSender(ABC):
    """Delivers notifications to users."""

    @abstractmethod
    async def send(self, recipient_id: UUID, context: NotificationContext) -> bool:
        """Deliver a notification.

        Returns:
            True if the notification was delivered.
        """

    async def close(self) -> None:
        """Release any resources held by the sender."""


class InAppNotificationSender(NotificationSender):
    """Stores notifications in the notifications table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def send(self, recipient_id: UUID, context: NotificationContext) -> bool:
        async with self.session_factory() as session:
            await create_notification(
                session,
                recipient_id=recipient_id,
                notification_type=context.type,
                title=context.title,
                message=context.message,
                sender_id=context.sender_id,
                related_document_id=context.document_id,
            )
        return True


class CompositeNotificationSender(NotificationSender):
    """Fans a notification out to several senders.

    Every sender is attempted; the first exception is re-raised after all
    senders ran so that a failing webhook cannot suppress in-app delivery.
    """

    def __init__(self, senders: list[NotificationSender]) -> None:
        self.senders = senders

    async def send(self, recipient_id: UUID, context: NotificationContext) -> bool:
        delivered = True
        first_error: Exception | None = None
        for sender in self.senders:
            try:
                delivered = await sender.send(recipient_id, context) and delivered
            except Exception as e:
                logger.warning(
                    "notification_sender_failed",
                    sender=type(sender).__name__,
                    recipient_id=str(recipient_id),
                    error=str(e),
                )
                delivered = False
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error
        return delivered

    async def close(self) -> None:
        for sender in self.senders:
            await sender.close()
