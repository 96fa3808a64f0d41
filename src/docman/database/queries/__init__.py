"""Database query functions for DocMan.

This module provides async query functions for all database entities:
- User lookup (tolerant of deleted users)
- Document review configuration, reviewer lists and review state
- Review assignment creation, listing, and bulk maintenance
- In-app notifications
"""

from docman.database.queries.document import (
    add_reviewers,
    create_document,
    get_document,
    list_completed_documents_due_to_reopen,
    list_documents_opening_between,
    set_reviewers,
    update_review_state,
)
from docman.database.queries.notification import (
    create_notification,
    list_user_notifications,
    mark_notification_read,
)
from docman.database.queries.review_assignment import (
    complete_assignments,
    create_assignment,
    delete_assignments,
    delete_orphaned_assignments,
    get_assignment,
    get_assignments,
    list_assigned_document_ids,
    list_document_assignments,
    list_overdue_assignments,
    list_user_assignments,
    mark_overdue_assignments,
    reset_document_assignments,
    update_assignment_fields,
)
from docman.database.queries.user import create_user, get_user, get_users

__all__ = [
    # User queries
    "create_user",
    "get_user",
    "get_users",
    # Document queries
    "create_document",
    "get_document",
    "set_reviewers",
    "add_reviewers",
    "update_review_state",
    "list_documents_opening_between",
    "list_completed_documents_due_to_reopen",
    # Review assignment queries
    "create_assignment",
    "get_assignment",
    "get_assignments",
    "list_document_assignments",
    "list_user_assignments",
    "list_overdue_assignments",
    "list_assigned_document_ids",
    "update_assignment_fields",
    "delete_assignments",
    "delete_orphaned_assignments",
    "complete_assignments",
    "reset_document_assignments",
    "mark_overdue_assignments",
    # Notification queries
    "create_notification",
    "list_user_notifications",
    "mark_notification_read",
]
