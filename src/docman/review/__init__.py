"""Review cycle engine for DocMan.

Decides, per document, whether the current review cycle is complete from
the latest assignment of each current reviewer, schedules the next cycle,
spawns update-required follow-ups for authors, and cleans up stale
assignment records.
"""

from docman.review.completion import (
    CompletionDecision,
    CompletionSummary,
    CompletionTransition,
    decide_completion,
    is_cycle_complete,
    summarize,
)
from docman.review.cycle import (
    AssignmentRequest,
    AssignmentUpdate,
    ReviewCycleService,
    ReviewState,
)
from docman.review.errors import (
    AssignmentNotFoundError,
    DocumentNotFoundError,
    NotFoundError,
    ReviewError,
    UserNotFoundError,
)
from docman.review.reconciler import (
    Reconciliation,
    ResolvedAssignment,
    reconcile,
    restrict_to_reviewers,
)
from docman.review.recurrence import (
    ReviewSchedule,
    add_months,
    compute_next_schedule,
    next_opens_for_review,
    next_review_due,
)

__all__ = [
    "AssignmentNotFoundError",
    "AssignmentRequest",
    "AssignmentUpdate",
    "CompletionDecision",
    "CompletionSummary",
    "CompletionTransition",
    "DocumentNotFoundError",
    "NotFoundError",
    "Reconciliation",
    "ResolvedAssignment",
    "ReviewCycleService",
    "ReviewError",
    "ReviewSchedule",
    "ReviewState",
    "UserNotFoundError",
    "add_months",
    "compute_next_schedule",
    "decide_completion",
    "is_cycle_complete",
    "next_opens_for_review",
    "next_review_due",
    "reconcile",
    "restrict_to_reviewers",
    "summarize",
]
