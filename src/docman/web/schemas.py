"""Request and response schemas for the DocMan HTTP API.

Review payloads use camelCase keys (``dueDate``, ``requiresUpdates``) and
also accept snake_case.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from docman.database.models.document import ReviewInterval, ReviewPeriod
from docman.database.models.notification import NotificationType
from docman.database.models.review_assignment import AssignmentStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserSummary(CamelModel):
    id: UUID
    firstname: str
    lastname: str
    email: str


class DocumentSummary(CamelModel):
    id: UUID
    title: str


# --- Assignments ---


class AssignmentCreateItem(CamelModel):
    """One reviewer in a bulk assignment request."""

    assignee: UUID
    due_date: datetime
    notes: str | None = None


class AssignmentBatchCreate(CamelModel):
    """Request schema for assigning reviewers to a document."""

    document_id: UUID
    assignments: list[AssignmentCreateItem] = Field(..., min_length=1)


class AssignmentStatusUpdate(CamelModel):
    """Request schema for updating an assignment.

    Attributes:
        status: New status; triggers completion evaluation when present.
        requires_updates: Flags the document for author updates.
        update_notes: Explanation of the required updates.
    """

    status: AssignmentStatus | None = None
    requires_updates: bool | None = None
    update_notes: str | None = None


class AssignmentResponse(CamelModel):
    """Response schema for a review assignment with its users populated."""

    id: UUID
    document_id: UUID
    document: DocumentSummary | None = None
    assignee: UserSummary | None = None
    assigned_by: UserSummary | None = None
    completed_by: UserSummary | None = None
    assigned_date: datetime
    due_date: datetime
    status: AssignmentStatus
    completed_date: datetime | None = None
    notes: str | None = None
    requires_updates: bool
    update_notes: str | None = None
    update_assignment_id: UUID | None = None
    created_at: datetime
    updated_at: datetime


# --- Document review state ---


class CompletionSummaryResponse(CamelModel):
    completed: int
    total: int
    percentage: int


class CompletionDecisionResponse(CamelModel):
    """Outcome of a completion evaluation."""

    transition: str
    is_complete: bool
    completed: int
    total: int
    opens_for_review: datetime | None = None
    next_review_due_on: datetime | None = None


class DocumentReviewResponse(CamelModel):
    """A document's review configuration, state and current progress."""

    id: UUID
    title: str
    author_id: UUID | None
    reviewer_ids: list[UUID]
    review_completed: bool
    review_completed_at: datetime | None
    review_completed_by_id: UUID | None
    review_due_date: datetime | None
    last_reviewed_on: datetime | None
    next_review_due_on: datetime | None
    opens_for_review: datetime | None
    review_interval: ReviewInterval | None
    review_interval_days: int | None
    review_period: ReviewPeriod | None
    summary: CompletionSummaryResponse


class CountResponse(CamelModel):
    count: int


class ForceCompleteResponse(CamelModel):
    completed: int
    decision: CompletionDecisionResponse | None = None


class ResetResponse(CamelModel):
    reset: int
    decision: CompletionDecisionResponse


# --- Notifications ---


class NotificationResponse(CamelModel):
    id: UUID
    recipient_id: UUID
    sender_id: UUID | None = None
    type: NotificationType
    title: str
    message: str
    related_document_id: UUID | None = None
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime
