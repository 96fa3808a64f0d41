"""ReviewAssignment model for DocMan.

One row per assignment attempt: a reviewer's obligation to review one
document during one cycle attempt. Several rows may exist for the same
(document, assignee) pair; the most recently created one is authoritative.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Enum, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docman.database.models.base import (
    Base,
    TimestampMixin,
    UTCDateTime,
    enum_values,
    utcnow,
)


class AssignmentStatus(enum.Enum):
    """Lifecycle of a single review assignment.

    States:
        pending: Assigned, not yet started.
        in_progress: Reviewer has started.
        completed: Reviewer signed off.
        overdue: Due date passed before completion.
    """

    pending = "pending"
    in_progress = "in-progress"
    completed = "completed"
    overdue = "overdue"


OPEN_STATUSES = (AssignmentStatus.pending, AssignmentStatus.in_progress)


class ReviewAssignment(TimestampMixin, Base):
    """A reviewer's assignment to review a document.

    Attributes:
        id: UUID primary key (from TimestampMixin).
        document_id: Reviewed document.
        assignee_id: Assigned reviewer; None once the user is deleted.
        assigned_by_id: User who created the assignment.
        assigned_date: When the assignment was made.
        due_date: When the review is due.
        status: Current assignment status.
        completed_date: Set when the status becomes completed.
        completed_by_id: User who completed the assignment.
        notes: Instructions for the assignee.
        requires_updates: Reviewer flagged that the document needs changes.
        update_notes: Reviewer's explanation of the required changes.
        update_assignment_id: Assignment whose update request spawned this one.
        created_at: Creation timestamp, orders "latest wins" (from TimestampMixin).
    """

    __tablename__ = "review_assignments"
    __table_args__ = (
        Index("ix_review_assignments_document_assignee", "document_id", "assignee_id"),
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
    )
    assignee_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    assigned_by_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    assigned_date: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=utcnow,
        nullable=False,
    )
    due_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, index=True)
    status: Mapped[AssignmentStatus] = mapped_column(
        Enum(AssignmentStatus, name="assignment_status", values_callable=enum_values),
        default=AssignmentStatus.pending,
        nullable=False,
        index=True,
    )
    completed_date: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    completed_by_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    requires_updates: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    update_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    update_assignment_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("review_assignments.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Relationships
    document: Mapped["Document"] = relationship(  # noqa: F821
        "Document",
        lazy="selectin",
    )
    assignee: Mapped["User | None"] = relationship(  # noqa: F821
        "User",
        foreign_keys=[assignee_id],
        lazy="selectin",
    )
    assigned_by: Mapped["User | None"] = relationship(  # noqa: F821
        "User",
        foreign_keys=[assigned_by_id],
        lazy="selectin",
    )
    completed_by: Mapped["User | None"] = relationship(  # noqa: F821
        "User",
        foreign_keys=[completed_by_id],
        lazy="selectin",
    )
