"""Review assignment query functions for DocMan.

Provides async functions for creating, reading, and bulk-updating
ReviewAssignment records. Mutating functions flush but do not commit;
ReviewCycleService wraps each operation in its own unit of work.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from docman.database.models.review_assignment import (
    OPEN_STATUSES,
    AssignmentStatus,
    ReviewAssignment,
)

logger = structlog.get_logger(__name__)


async def create_assignment(
    session: AsyncSession,
    document_id: UUID,
    assignee_id: UUID | None,
    due_date: datetime,
    assigned_by_id: UUID | None = None,
    notes: str | None = None,
    update_assignment_id: UUID | None = None,
) -> ReviewAssignment:
    """Create a pending review assignment.

    Args:
        session: Active async database session.
        document_id: Reviewed document.
        assignee_id: User assigned to review.
        due_date: When the review is due.
        assigned_by_id: User creating the assignment.
        notes: Instructions for the assignee.
        update_assignment_id: Assignment whose update request spawned this one.

    Returns:
        The newly created ReviewAssignment instance.
    """
    assignment = ReviewAssignment(
        document_id=document_id,
        assignee_id=assignee_id,
        assigned_by_id=assigned_by_id,
        due_date=due_date,
        notes=notes,
        status=AssignmentStatus.pending,
        requires_updates=False,
        update_assignment_id=update_assignment_id,
    )
    session.add(assignment)
    await session.flush()

    logger.debug(
        "assignment_created",
        assignment_id=str(assignment.id),
        document_id=str(document_id),
        assignee_id=str(assignee_id) if assignee_id else None,
    )
    return assignment


async def get_assignment(
    session: AsyncSession,
    assignment_id: UUID,
) -> ReviewAssignment | None:
    """Retrieve an assignment by ID with its users and document populated.

    Args:
        session: Active async database session.
        assignment_id: UUID of the assignment to retrieve.

    Returns:
        The ReviewAssignment if found, None otherwise.
    """
    stmt = (
        select(ReviewAssignment)
        .where(ReviewAssignment.id == assignment_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_assignments(
    session: AsyncSession,
    assignment_ids: Iterable[UUID],
) -> list[ReviewAssignment]:
    """Retrieve several assignments, populated, ordered by due date."""
    ids = list(assignment_ids)
    if not ids:
        return []
    stmt = (
        select(ReviewAssignment)
        .where(ReviewAssignment.id.in_(ids))
        .order_by(ReviewAssignment.due_date.asc())
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_document_assignments(
    session: AsyncSession,
    document_id: UUID,
) -> list[ReviewAssignment]:
    """List every assignment record of a document, stale ones included.

    Args:
        session: Active async database session.
        document_id: Document to list assignments for.

    Returns:
        All ReviewAssignment rows for the document, oldest first.
    """
    stmt = (
        select(ReviewAssignment)
        .where(ReviewAssignment.document_id == document_id)
        .order_by(ReviewAssignment.created_at.asc())
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_user_assignments(
    session: AsyncSession,
    user_id: UUID,
    status_filter: AssignmentStatus | None = None,
) -> list[ReviewAssignment]:
    """List a user's assignments, optionally filtered by status, by due date."""
    stmt = select(ReviewAssignment).where(ReviewAssignment.assignee_id == user_id)

    if status_filter is not None:
        stmt = stmt.where(ReviewAssignment.status == status_filter)

    stmt = stmt.order_by(ReviewAssignment.due_date.asc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_overdue_assignments(
    session: AsyncSession,
    now: datetime,
) -> list[ReviewAssignment]:
    """List open (pending or in-progress) assignments past their due date."""
    stmt = (
        select(ReviewAssignment)
        .where(ReviewAssignment.due_date < now)
        .where(ReviewAssignment.status.in_(OPEN_STATUSES))
        .order_by(ReviewAssignment.due_date.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_assigned_document_ids(session: AsyncSession) -> list[UUID]:
    """Ids of every document that has at least one assignment record."""
    stmt = select(ReviewAssignment.document_id).distinct()
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def update_assignment_fields(
    session: AsyncSession,
    assignment: ReviewAssignment,
    changes: dict[str, Any],
) -> ReviewAssignment:
    """Apply field changes to a loaded assignment and flush."""
    for field, value in changes.items():
        setattr(assignment, field, value)
    await session.flush()
    return assignment


async def delete_assignments(
    session: AsyncSession,
    assignment_ids: Iterable[UUID],
) -> int:
    """Delete assignments by id.

    Returns:
        Number of rows deleted.
    """
    ids = list(assignment_ids)
    if not ids:
        return 0
    stmt = delete(ReviewAssignment).where(ReviewAssignment.id.in_(ids))
    result = await session.execute(stmt)
    await session.flush()
    return result.rowcount  # type: ignore[union-attr]


async def delete_orphaned_assignments(
    session: AsyncSession,
    document_id: UUID | None = None,
) -> int:
    """Delete assignments whose assignee is missing.

    Args:
        session: Active async database session.
        document_id: Restrict the purge to one document if given.

    Returns:
        Number of rows deleted.
    """
    stmt = delete(ReviewAssignment).where(ReviewAssignment.assignee_id.is_(None))
    if document_id is not None:
        stmt = stmt.where(ReviewAssignment.document_id == document_id)
    result = await session.execute(stmt)
    await session.flush()
    return result.rowcount  # type: ignore[union-attr]


async def complete_assignments(
    session: AsyncSession,
    assignment_ids: Iterable[UUID],
    completed_by_id: UUID | None,
    now: datetime,
) -> int:
    """Mark assignments completed by the given user.

    Returns:
        Number of rows updated.
    """
    ids = list(assignment_ids)
    if not ids:
        return 0
    stmt = (
        update(ReviewAssignment)
        .where(ReviewAssignment.id.in_(ids))
        .values(
            status=AssignmentStatus.completed,
            completed_date=now,
            completed_by_id=completed_by_id,
        )
    )
    result = await session.execute(stmt)
    await session.flush()
    return result.rowcount  # type: ignore[union-attr]


async def reset_document_assignments(
    session: AsyncSession,
    document_id: UUID,
) -> int:
    """Put every assignment of a document back to pending.

    Clears completion and update-request fields.

    Returns:
        Number of rows updated.
    """
    stmt = (
        update(ReviewAssignment)
        .where(ReviewAssignment.document_id == document_id)
        .values(
            status=AssignmentStatus.pending,
            completed_date=None,
            completed_by_id=None,
            requires_updates=False,
            update_notes=None,
        )
    )
    result = await session.execute(stmt)
    await session.flush()
    return result.rowcount  # type: ignore[union-attr]


async def mark_overdue_assignments(
    session: AsyncSession,
    now: datetime,
) -> int:
    """Flip open assignments past their due date to overdue.

    Returns:
        Number of rows updated.
    """
    stmt = (
        update(ReviewAssignment)
        .where(ReviewAssignment.due_date < now)
        .where(ReviewAssignment.status.in_(OPEN_STATUSES))
        .values(status=AssignmentStatus.overdue)
    )
    result = await session.execute(stmt)
    await session.flush()
    return result.rowcount  # type: ignore[union-attr]
