"""Database layer for DocMan.

This module handles database connections, session management, and provides
the SQLAlchemy async engine configuration.

Public API:
    get_engine: Create an AsyncEngine from DatabaseConfig.
    get_session_factory: Create an async_sessionmaker from an engine.
    Base: SQLAlchemy declarative base for all models.
"""

from docman.database.connection import get_engine, get_session_factory
from docman.database.models import (
    AssignmentStatus,
    Base,
    Document,
    Notification,
    NotificationType,
    ReviewAssignment,
    ReviewInterval,
    ReviewPeriod,
    TimestampMixin,
    User,
)

__all__ = [
    "get_engine",
    "get_session_factory",
    "Base",
    "TimestampMixin",
    "User",
    "Document",
    "ReviewInterval",
    "ReviewPeriod",
    "ReviewAssignment",
    "AssignmentStatus",
    "Notification",
    "NotificationType",
]
