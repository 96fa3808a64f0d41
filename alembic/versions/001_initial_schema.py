"""Initial schema for DocMan.

Creates the users, documents, document_reviewers, review_assignments and
notifications tables with their enums and lookup indexes.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

REVIEW_INTERVALS = ("monthly", "quarterly", "semiannually", "annually", "custom")
REVIEW_PERIODS = ("1week", "2weeks", "3weeks", "1month")
ASSIGNMENT_STATUSES = ("pending", "in-progress", "completed", "overdue")
NOTIFICATION_TYPES = (
    "document_assigned",
    "document_review_due",
    "document_review_completed",
    "document_updated",
    "document_update_required",
    "message",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    sa.Enum(*REVIEW_INTERVALS, name="review_interval").create(bind, checkfirst=True)
    sa.Enum(*REVIEW_PERIODS, name="review_period").create(bind, checkfirst=True)
    sa.Enum(*ASSIGNMENT_STATUSES, name="assignment_status").create(bind, checkfirst=True)
    sa.Enum(*NOTIFICATION_TYPES, name="notification_type").create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), server_default=sa.text("gen_random_uuid()"), primary_key=True),
        sa.Column("firstname", sa.Text(), nullable=False),
        sa.Column("lastname", sa.Text(), nullable=False, server_default=""),
        sa.Column("email", sa.Text(), nullable=False, unique=True),
        *_timestamps(),
    )

    op.create_table(
        "documents",
        sa.Column("id", sa.Uuid(), server_default=sa.text("gen_random_uuid()"), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("author_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("review_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("review_completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "review_completed_by_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("review_due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_reviewed_on", sa.DateTime(timezone=True), nullable=True),
        sa.Column("next_review_due_on", sa.DateTime(timezone=True), nullable=True),
        sa.Column("opens_for_review", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "review_interval",
            sa.Enum(*REVIEW_INTERVALS, name="review_interval", create_type=False),
            nullable=True,
        ),
        sa.Column("review_interval_days", sa.Integer(), nullable=True),
        sa.Column(
            "review_period",
            sa.Enum(*REVIEW_PERIODS, name="review_period", create_type=False),
            nullable=True,
        ),
        sa.Column("review_notes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_documents_opens_for_review", "documents", ["opens_for_review"])

    op.create_table(
        "document_reviewers",
        sa.Column(
            "document_id",
            sa.Uuid(),
            sa.ForeignKey("documents.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "review_assignments",
        sa.Column("id", sa.Uuid(), server_default=sa.text("gen_random_uuid()"), primary_key=True),
        sa.Column(
            "document_id",
            sa.Uuid(),
            sa.ForeignKey("documents.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("assignee_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("assigned_by_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("assigned_date", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*ASSIGNMENT_STATUSES, name="assignment_status", create_type=False),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("completed_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "completed_by_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("requires_updates", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("update_notes", sa.Text(), nullable=True),
        sa.Column(
            "update_assignment_id",
            sa.Uuid(),
            sa.ForeignKey("review_assignments.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )
    op.create_index(
        "ix_review_assignments_document_assignee",
        "review_assignments",
        ["document_id", "assignee_id"],
    )
    op.create_index("ix_review_assignments_due_date", "review_assignments", ["due_date"])
    op.create_index("ix_review_assignments_status", "review_assignments", ["status"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), server_default=sa.text("gen_random_uuid()"), primary_key=True),
        sa.Column(
            "recipient_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sender_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column(
            "type",
            sa.Enum(*NOTIFICATION_TYPES, name="notification_type", create_type=False),
            nullable=False,
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column(
            "related_document_id",
            sa.Uuid(),
            sa.ForeignKey("documents.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_notifications_recipient_id", "notifications", ["recipient_id"])


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("review_assignments")
    op.drop_table("document_reviewers")
    op.drop_table("documents")
    op.drop_table("users")

    bind = op.get_bind()
    sa.Enum(name="notification_type").drop(bind, checkfirst=True)
    sa.Enum(name="assignment_status").drop(bind, checkfirst=True)
    sa.Enum(name="review_period").drop(bind, checkfirst=True)
    sa.Enum(name="review_interval").drop(bind, checkfirst=True)
