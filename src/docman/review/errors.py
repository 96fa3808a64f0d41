"""Exceptions raised by the review cycle engine."""

from __future__ import annotations

from uuid import UUID


class ReviewError(Exception):
    """Base class for review cycle errors."""


class NotFoundError(ReviewError, LookupError):
    """A referenced record does not exist.

    Attributes:
        kind: Human-readable record kind ("Document", "Review assignment", ...).
        record_id: The id that was looked up.
    """

    kind = "Record"

    def __init__(self, record_id: UUID) -> None:
        self.record_id = record_id
        super().__init__(f"{self.kind} {record_id} not found")


class DocumentNotFoundError(NotFoundError):
    kind = "Document"


class AssignmentNotFoundError(NotFoundError):
    kind = "Review assignment"


class UserNotFoundError(NotFoundError):
    kind = "User"
