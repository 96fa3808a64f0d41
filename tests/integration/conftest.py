"""Pytest fixtures for integration tests.

Provides an in-memory SQLite database shared by every session of a test,
seeded users, document and assignment factories, and a ReviewCycleService
running on a frozen clock with a recording notifier. Production runs on
PostgreSQL; nothing the review engine does depends on PostgreSQL features.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from docman.database.models.base import Base
from docman.database.models.document import Document
from docman.database.models.review_assignment import AssignmentStatus, ReviewAssignment
from docman.database.models.user import User
from docman.database.queries.document import create_document, get_document
from docman.database.queries.user import create_user
from docman.notifications.sender import NotificationContext, NotificationSender
from docman.review.cycle import ReviewCycleService

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


class RecordingNotifier(NotificationSender):
    """Notification sender that remembers what it was asked to send."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[tuple[UUID, NotificationContext]] = []

    async def send(self, recipient_id: UUID, context: NotificationContext) -> bool:
        if self.fail:
            raise RuntimeError("notification backend unavailable")
        self.sent.append((recipient_id, context))
        return True

    def of_type(self, notification_type: Any) -> list[tuple[UUID, NotificationContext]]:
        return [(r, c) for r, c in self.sent if c.type is notification_type]


@dataclass
class People:
    author: User
    alice: User
    bob: User
    carol: User


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite async engine for testing.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """A session for query-level tests; rolled back after the test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def review_service(
    session_factory: async_sessionmaker[AsyncSession],
    notifier: RecordingNotifier,
) -> ReviewCycleService:
    """ReviewCycleService on a clock frozen at NOW."""
    return ReviewCycleService(session_factory, notifier=notifier, clock=lambda: NOW)


@pytest_asyncio.fixture
async def people(session_factory: async_sessionmaker[AsyncSession]) -> People:
    async with session_factory() as session:
        return People(
            author=await create_user(session, "Ada", "ada@example.com", lastname="Author"),
            alice=await create_user(session, "Alice", "alice@example.com", lastname="Reviewer"),
            bob=await create_user(session, "Bob", "bob@example.com", lastname="Reviewer"),
            carol=await create_user(session, "Carol", "carol@example.com", lastname="Reviewer"),
        )


@pytest.fixture
def make_document(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[Document]]:
    """Factory creating a committed document.

    Keyword arguments other than the create_document ones are written to
    the document afterwards, so review state (e.g. ``review_completed``)
    can be seeded directly.
    """

    async def _make(
        title: str = "Infection Control Policy",
        author: User | None = None,
        reviewers: list[User] | None = None,
        **state: Any,
    ) -> Document:
        create_kwargs = {
            key: state.pop(key)
            for key in ("review_interval", "review_interval_days", "review_period")
            if key in state
        }
        async with session_factory() as session:
            document = await create_document(
                session,
                title=title,
                author_id=author.id if author else None,
                reviewer_ids=[user.id for user in reviewers or []],
                **create_kwargs,
            )
            if state:
                for field, value in state.items():
                    setattr(document, field, value)
                await session.commit()
            return await get_document(session, document.id)

    return _make


@pytest.fixture
def make_assignment(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[ReviewAssignment]]:
    """Factory creating a committed assignment.

    ``assignee=None`` produces an orphaned record, as left behind by a
    deleted user. ``age`` sets created_at relative to NOW so tests control
    which record is the latest.
    """

    async def _make(
        document: Document,
        assignee: User | None,
        status: AssignmentStatus = AssignmentStatus.pending,
        age: timedelta = timedelta(days=1),
        due_date: datetime | None = None,
        **fields: Any,
    ) -> ReviewAssignment:
        created_at = NOW - age
        assignment = ReviewAssignment(
            document_id=document.id,
            assignee_id=assignee.id if assignee else None,
            status=status,
            due_date=due_date or NOW + timedelta(days=7),
            assigned_date=created_at,
            created_at=created_at,
            updated_at=created_at,
            requires_updates=fields.pop("requires_updates", False),
            completed_date=NOW - age if status is AssignmentStatus.completed else None,
            **fields,
        )
        async with session_factory() as session:
            session.add(assignment)
            await session.commit()
        return assignment

    return _make
