"""SQLAlchemy ORM models for DocMan.

This module defines the schema used by the review cycle engine: users,
documents and their reviewer lists, review assignments, and in-app
notifications.

All models use SQLAlchemy 2.0 declarative style with Mapped[] type annotations.
"""

from docman.database.models.base import Base, TimestampMixin, UTCDateTime, utcnow
from docman.database.models.document import (
    Document,
    ReviewInterval,
    ReviewPeriod,
    document_reviewers,
)
from docman.database.models.notification import Notification, NotificationType
from docman.database.models.review_assignment import (
    OPEN_STATUSES,
    AssignmentStatus,
    ReviewAssignment,
)
from docman.database.models.user import User

__all__ = [
    "Base",
    "TimestampMixin",
    "UTCDateTime",
    "utcnow",
    "User",
    "Document",
    "ReviewInterval",
    "ReviewPeriod",
    "document_reviewers",
    "ReviewAssignment",
    "AssignmentStatus",
    "OPEN_STATUSES",
    "Notification",
    "NotificationType",
]
