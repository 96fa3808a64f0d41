"""Document model for DocMan.

Defines the Document table, its reviewer association table, and the
ReviewInterval / ReviewPeriod enums that drive recurring reviews. Only the
fields the review cycle engine reads or writes are modelled.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, Enum, ForeignKey, Integer, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docman.database.models.base import Base, TimestampMixin, UTCDateTime, enum_values


class ReviewInterval(enum.Enum):
    """How often a document must be reviewed.

    ``custom`` uses the document's review_interval_days.
    """

    monthly = "monthly"
    quarterly = "quarterly"
    semiannually = "semiannually"
    annually = "annually"
    custom = "custom"


class ReviewPeriod(enum.Enum):
    """Length of the review window once a cycle opens."""

    one_week = "1week"
    two_weeks = "2weeks"
    three_weeks = "3weeks"
    one_month = "1month"


document_reviewers = Table(
    "document_reviewers",
    Base.metadata,
    Column(
        "document_id",
        ForeignKey("documents.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Document(TimestampMixin, Base):
    """A managed document and its review-cycle bookkeeping.

    Attributes:
        id: UUID primary key (from TimestampMixin).
        title: Document title.
        description: Optional description.
        author_id: Author's user id; None once the author is deleted.
        review_completed: True only when every current reviewer's latest
            assignment is completed.
        review_completed_at: When the current cycle completed.
        review_completed_by_id: User whose action completed the cycle.
        review_due_date: Due date of the currently open cycle.
        last_reviewed_on: When the document last completed a cycle.
        next_review_due_on: Due date of the next cycle.
        opens_for_review: When the next cycle opens.
        review_interval: Recurrence interval.
        review_interval_days: Interval length for ``custom``.
        review_period: Review window length added to opens_for_review.
        review_notes: Free-text notes for reviewers.
        author: Relationship to the author User.
        reviewers: Authoritative list of users expected to review this cycle.
    """

    __tablename__ = "documents"

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    author_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    review_completed: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    review_completed_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    review_completed_by_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    review_due_date: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    last_reviewed_on: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    next_review_due_on: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    opens_for_review: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True, index=True)
    review_interval: Mapped[ReviewInterval | None] = mapped_column(
        Enum(ReviewInterval, name="review_interval", values_callable=enum_values),
        nullable=True,
    )
    review_interval_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    review_period: Mapped[ReviewPeriod | None] = mapped_column(
        Enum(ReviewPeriod, name="review_period", values_callable=enum_values),
        nullable=True,
    )
    review_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    author: Mapped["User | None"] = relationship(  # noqa: F821
        "User",
        foreign_keys=[author_id],
        lazy="selectin",
    )
    reviewers: Mapped[list["User"]] = relationship(  # noqa: F821
        "User",
        secondary=document_reviewers,
        lazy="selectin",
    )

    @property
    def reviewer_ids(self) -> set[uuid.UUID]:
        """Ids of the users currently expected to review this document."""
        return {user.id for user in self.reviewers}
