"""Document-level completion evaluation.

Decides whether a document's review cycle is complete from the latest
assignment of each current reviewer, and what the document's review-state
fields must become. The decision is pure; ReviewCycleService applies it.
"""

from __future__ import annotations

import enum
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from docman.database.models.document import ReviewInterval, ReviewPeriod
from docman.database.models.review_assignment import AssignmentStatus
from docman.review.reconciler import ResolvedAssignment
from docman.review.recurrence import ReviewSchedule, compute_next_schedule


class CompletionTransition(enum.Enum):
    """What an evaluation does to the document's completion flag."""

    completed = "completed"
    reopened = "reopened"
    unchanged = "unchanged"


@dataclass(frozen=True)
class CompletionDecision:
    """Result of evaluating a document's review cycle.

    Attributes:
        transition: Flag transition to apply.
        changes: Exact document field changes; empty when unchanged.
        schedule: Next-cycle schedule, only set on completion.
        completed: Completed current reviewers.
        total: Current reviewers with an assignment.
    """

    transition: CompletionTransition
    changes: dict[str, Any] = field(default_factory=dict)
    schedule: ReviewSchedule | None = None
    completed: int = 0
    total: int = 0

    @property
    def is_complete(self) -> bool:
        return self.total > 0 and self.completed == self.total


@dataclass(frozen=True)
class CompletionSummary:
    completed: int
    total: int
    percentage: int


def is_cycle_complete(assignments: Sequence[ResolvedAssignment]) -> bool:
    """True iff there is at least one assignment and all are completed."""
    if not assignments:
        return False
    return all(a.status is AssignmentStatus.completed for a in assignments)


def summarize(assignments: Sequence[ResolvedAssignment]) -> CompletionSummary:
    """Count completed assignments; percentage is rounded to an integer."""
    total = len(assignments)
    completed = sum(1 for a in assignments if a.status is AssignmentStatus.completed)
    percentage = round(completed * 100 / total) if total else 0
    return CompletionSummary(completed=completed, total=total, percentage=percentage)


def decide_completion(
    assignments: Sequence[ResolvedAssignment],
    already_completed: bool,
    now: datetime,
    actor_id: uuid.UUID | None,
    interval: ReviewInterval | str | None,
    interval_days: int | None,
    period: ReviewPeriod | str | None,
) -> CompletionDecision:
    """Decide the document's completion transition.

    Args:
        assignments: Latest assignment of each current reviewer.
        already_completed: The document's current ``review_completed`` flag.
        now: Evaluation moment.
        actor_id: User whose action triggered the evaluation.
        interval: Document review interval.
        interval_days: Interval length for ``custom``.
        period: Document review period.

    Returns:
        CompletionDecision carrying the field changes to write.
    """
    summary = summarize(assignments)
    complete = is_cycle_complete(assignments)

    if complete and not already_completed:
        schedule = compute_next_schedule(now, interval, interval_days, period)
        return CompletionDecision(
            transition=CompletionTransition.completed,
            changes={
                "review_completed": True,
                "review_completed_at": now,
                "review_completed_by_id": actor_id,
                "review_due_date": None,
                "last_reviewed_on": now,
                "next_review_due_on": schedule.review_due,
                "opens_for_review": schedule.opens_for_review,
            },
            schedule=schedule,
            completed=summary.completed,
            total=summary.total,
        )

    if not complete and already_completed:
        return CompletionDecision(
            transition=CompletionTransition.reopened,
            changes={
                "review_completed": False,
                "review_completed_at": None,
                "review_completed_by_id": None,
            },
            completed=summary.completed,
            total=summary.total,
        )

    return CompletionDecision(
        transition=CompletionTransition.unchanged,
        completed=summary.completed,
        total=summary.total,
    )
