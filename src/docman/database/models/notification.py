"""In-app notification model for DocMan."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Enum, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from docman.database.models.base import Base, TimestampMixin, UTCDateTime, enum_values


class NotificationType(enum.Enum):
    """Kinds of notification raised by the review engine."""

    document_assigned = "document_assigned"
    document_review_due = "document_review_due"
    document_review_completed = "document_review_completed"
    document_updated = "document_updated"
    document_update_required = "document_update_required"
    message = "message"


class Notification(TimestampMixin, Base):
    """A notification addressed to one user.

    Attributes:
        recipient_id: Addressee.
        sender_id: Originating user, if any.
        type: Notification kind.
        title: Short headline.
        message: Body text.
        related_document_id: Document the notification is about.
        is_read: Whether the recipient has read it.
        read_at: When it was marked read.
    """

    __tablename__ = "notifications"

    recipient_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    type: Mapped[NotificationType] = mapped_column(
        Enum(NotificationType, name="notification_type", values_callable=enum_values),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    related_document_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=True,
    )
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    read_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
