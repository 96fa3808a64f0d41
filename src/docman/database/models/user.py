"""User model for DocMan.

Only the identity fields the review engine needs to address notifications
are modelled here; accounts, roles and credentials live elsewhere.
"""

from __future__ import annotations

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from docman.database.models.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """A person who authors, assigns, or reviews documents.

    Attributes:
        id: UUID primary key (from TimestampMixin).
        firstname: Given name.
        lastname: Family name.
        email: Unique email address.
    """

    __tablename__ = "users"

    firstname: Mapped[str] = mapped_column(Text, nullable=False)
    lastname: Mapped[str] = mapped_column(Text, nullable=False, default="")
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}".strip()
