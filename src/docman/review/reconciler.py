"""Assignment reconciliation for DocMan review cycles.

A document can accumulate several assignment records for the same reviewer
(re-assignments, update-request follow-ups) as well as records whose
reviewer account was deleted. Reconciliation collapses them to exactly one
authoritative record per reviewer, the most recently created, and reports
which records are stale.

Everything here is pure: no session, no I/O. The service layer decides
whether to delete what reconciliation reports.
"""

from __future__ import annotations

import uuid
from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from docman.database.identifiers import to_optional_uuid, to_uuid
from docman.database.models.review_assignment import AssignmentStatus


class AssignmentRecord(Protocol):
    """Attributes reconciliation reads from a stored assignment."""

    id: uuid.UUID
    document_id: uuid.UUID
    assignee_id: uuid.UUID | None
    status: AssignmentStatus
    created_at: datetime
    completed_date: datetime | None


@dataclass(frozen=True)
class ResolvedAssignment:
    """An assignment whose reviewer is known to exist.

    Only reconciliation creates these, and only from records with an
    assignee, so code handling them never checks for a missing reviewer.
    """

    id: uuid.UUID
    document_id: uuid.UUID
    assignee_id: uuid.UUID
    status: AssignmentStatus
    created_at: datetime
    completed_date: datetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.status is AssignmentStatus.completed


@dataclass(frozen=True)
class Reconciliation:
    """Outcome of reconciling one document's assignment records.

    Attributes:
        latest: One record per distinct reviewer, newest first.
        orphaned_ids: Records without an assignee.
        superseded_ids: Older records of a reviewer that has a newer one.
    """

    latest: list[ResolvedAssignment] = field(default_factory=list)
    orphaned_ids: list[uuid.UUID] = field(default_factory=list)
    superseded_ids: list[uuid.UUID] = field(default_factory=list)

    @property
    def to_delete(self) -> list[uuid.UUID]:
        return [*self.orphaned_ids, *self.superseded_ids]

    @property
    def is_clean(self) -> bool:
        return not self.orphaned_ids and not self.superseded_ids

    def latest_by_assignee(self) -> dict[uuid.UUID, ResolvedAssignment]:
        return {assignment.assignee_id: assignment for assignment in self.latest}


def _newest_first_key(record: AssignmentRecord) -> tuple[datetime, str]:
    # id breaks created_at ties so the winner never depends on input order
    return (record.created_at, str(record.id))


def reconcile(records: Iterable[AssignmentRecord]) -> Reconciliation:
    """Collapse assignment records to the latest one per reviewer.

    Args:
        records: Assignment records of a single document, in any order.

    Returns:
        Reconciliation with the authoritative records and the stale ids.
    """
    ordered = sorted(records, key=_newest_first_key, reverse=True)

    latest: list[ResolvedAssignment] = []
    orphaned: list[uuid.UUID] = []
    superseded: list[uuid.UUID] = []
    seen: set[uuid.UUID] = set()

    for record in ordered:
        record_id = to_uuid(record.id)
        assignee_id = to_optional_uuid(record.assignee_id)
        if assignee_id is None:
            orphaned.append(record_id)
            continue
        if assignee_id in seen:
            superseded.append(record_id)
            continue
        seen.add(assignee_id)
        latest.append(
            ResolvedAssignment(
                id=record_id,
                document_id=to_uuid(record.document_id),
                assignee_id=assignee_id,
                status=record.status,
                created_at=record.created_at,
                completed_date=record.completed_date,
            )
        )

    return Reconciliation(latest=latest, orphaned_ids=orphaned, superseded_ids=superseded)


def restrict_to_reviewers(
    latest: Sequence[ResolvedAssignment],
    reviewer_ids: Collection[uuid.UUID],
) -> tuple[list[ResolvedAssignment], list[ResolvedAssignment]]:
    """Split latest assignments by membership in the current reviewer list.

    Assignments of users removed from the reviewer list stay on disk but do
    not count towards (or against) completion of the current cycle.

    Returns:
        (current, detached) assignment lists.
    """
    current = [a for a in latest if a.assignee_id in reviewer_ids]
    detached = [a for a in latest if a.assignee_id not in reviewer_ids]
    return current, detached
