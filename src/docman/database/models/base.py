"""SQLAlchemy declarative base and common column types for DocMan.

This module defines the DeclarativeBase class, a UTC-preserving datetime
column type, and a TimestampMixin that provides id, created_at, and
updated_at columns shared across all models.

Example:
    >>> class MyModel(TimestampMixin, Base):
    ...     __tablename__ = "my_table"
    ...     name: Mapped[str] = mapped_column(Text, nullable=False)
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetime stored as UTC.

    PostgreSQL keeps the offset, SQLite drops it; values are normalised to
    UTC on the way in and re-attached on the way out so that comparisons
    never mix naive and aware datetimes.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Base(DeclarativeBase):
    """SQLAlchemy 2.0 declarative base for all DocMan models."""

    pass


class TimestampMixin:
    """Mixin providing id (UUID), created_at, and updated_at columns.

    Timestamps are generated application-side with microsecond precision;
    review assignments rely on created_at to decide which record is the
    latest for a reviewer.

    Attributes:
        id: UUID primary key.
        created_at: Row creation timestamp.
        updated_at: Timestamp refreshed on each modification.
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Persist enum values (e.g. ``in-progress``) rather than member names."""
    return [member.value for member in enum_cls]
