"""Document query functions for DocMan.

Covers the document data the review engine needs: creating a document with
its review configuration, managing the reviewer list, writing review-state
changes, and finding documents whose next cycle is opening.

Functions that change review state only flush; the caller owns the commit
so that completion and scheduling fields land in one transaction.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docman.database.models.document import Document, ReviewInterval, ReviewPeriod
from docman.database.models.user import User

logger = structlog.get_logger(__name__)


async def create_document(
    session: AsyncSession,
    title: str,
    author_id: UUID | None,
    description: str | None = None,
    review_interval: ReviewInterval | None = None,
    review_interval_days: int | None = None,
    review_period: ReviewPeriod | None = None,
    opens_for_review: datetime | None = None,
    review_due_date: datetime | None = None,
    reviewer_ids: Iterable[UUID] = (),
) -> Document:
    """Create a new document with its review configuration.

    Args:
        session: Active async database session.
        title: Document title.
        author_id: Author's user id.
        description: Optional description.
        review_interval: Recurrence interval.
        review_interval_days: Interval length in days for ``custom``.
        review_period: Review window length.
        opens_for_review: When the first cycle opens.
        review_due_date: Due date of the first cycle.
        reviewer_ids: Users expected to review the document.

    Returns:
        The newly created Document instance.
    """
    reviewers = await _load_users(session, reviewer_ids)
    document = Document(
        title=title,
        description=description,
        author_id=author_id,
        review_interval=review_interval,
        review_interval_days=review_interval_days,
        review_period=review_period,
        opens_for_review=opens_for_review,
        review_due_date=review_due_date,
        review_completed=False,
        reviewers=reviewers,
    )
    session.add(document)
    await session.commit()

    logger.info(
        "document_created",
        document_id=str(document.id),
        title=title,
        reviewer_count=len(reviewers),
    )
    return document


async def get_document(
    session: AsyncSession,
    document_id: UUID,
) -> Document | None:
    """Retrieve a document by ID, with author and reviewers loaded.

    Args:
        session: Active async database session.
        document_id: UUID of the document to retrieve.

    Returns:
        The Document instance if found, None otherwise.
    """
    stmt = (
        select(Document)
        .where(Document.id == document_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def set_reviewers(
    session: AsyncSession,
    document: Document,
    user_ids: Iterable[UUID],
) -> Document:
    """Replace the document's reviewer list.

    Unknown user ids are ignored.
    """
    document.reviewers = await _load_users(session, user_ids)
    await session.flush()

    logger.info(
        "document_reviewers_set",
        document_id=str(document.id),
        reviewer_count=len(document.reviewers),
    )
    return document


async def add_reviewers(
    session: AsyncSession,
    document: Document,
    user_ids: Iterable[UUID],
) -> int:
    """Add users to the document's reviewer list.

    Returns:
        Number of reviewers actually added.
    """
    current = document.reviewer_ids
    missing = [user_id for user_id in user_ids if user_id not in current]
    added = await _load_users(session, missing)
    if added:
        document.reviewers.extend(added)
        await session.flush()
    return len(added)


async def update_review_state(
    session: AsyncSession,
    document: Document,
    changes: dict[str, Any],
) -> Document:
    """Apply review-state field changes to a loaded document and flush."""
    for field, value in changes.items():
        setattr(document, field, value)
    if changes:
        await session.flush()
    return document


async def list_documents_opening_between(
    session: AsyncSession,
    start: datetime,
    end: datetime,
) -> list[Document]:
    """Documents whose next review cycle opens within [start, end]."""
    stmt = (
        select(Document)
        .where(Document.opens_for_review.is_not(None))
        .where(Document.opens_for_review >= start)
        .where(Document.opens_for_review <= end)
        .order_by(Document.opens_for_review.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_completed_documents_due_to_reopen(
    session: AsyncSession,
    now: datetime,
) -> list[Document]:
    """Completed documents whose next cycle has already opened."""
    stmt = (
        select(Document)
        .where(Document.review_completed.is_(True))
        .where(Document.opens_for_review.is_not(None))
        .where(Document.opens_for_review <= now)
        .order_by(Document.opens_for_review.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def _load_users(session: AsyncSession, user_ids: Iterable[UUID]) -> list[User]:
    ids = list(dict.fromkeys(user_ids))
    if not ids:
        return []
    result = await session.execute(select(User).where(User.id.in_(ids)))
    by_id = {user.id: user for user in result.scalars().all()}
    return [by_id[user_id] for user_id in ids if user_id in by_id]
