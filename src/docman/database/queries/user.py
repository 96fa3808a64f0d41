"""User query functions for DocMan.

The review engine only resolves users to address notifications, so lookups
return None for deleted users instead of raising.
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docman.database.models.user import User

logger = structlog.get_logger(__name__)


async def create_user(
    session: AsyncSession,
    firstname: str,
    email: str,
    lastname: str = "",
) -> User:
    """Create a new user.

    Args:
        session: Active async database session.
        firstname: Given name.
        email: Unique email address.
        lastname: Family name.

    Returns:
        The newly created User instance.
    """
    user = User(firstname=firstname, lastname=lastname, email=email)
    session.add(user)
    await session.commit()

    logger.info("user_created", user_id=str(user.id), email=email)
    return user


async def get_user(
    session: AsyncSession,
    user_id: UUID,
) -> User | None:
    """Retrieve a user by ID, or None if the user does not exist."""
    stmt = select(User).where(User.id == user_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_users(
    session: AsyncSession,
    user_ids: Iterable[UUID],
) -> dict[UUID, User]:
    """Retrieve several users keyed by id; missing ids are simply absent."""
    ids = set(user_ids)
    if not ids:
        return {}
    stmt = select(User).where(User.id.in_(ids))
    result = await session.execute(stmt)
    return {user.id: user for user in result.scalars().all()}
