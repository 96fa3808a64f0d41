"""Unit tests for assignment reconciliation."""

from __future__ import annotations

import random
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest

from docman.database.models.review_assignment import AssignmentStatus
from docman.review.reconciler import (
    ResolvedAssignment,
    reconcile,
    restrict_to_reviewers,
)

BASE = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)
DOCUMENT_ID = uuid.uuid4()


@dataclass
class Record:
    id: uuid.UUID
    document_id: uuid.UUID
    assignee_id: uuid.UUID | None
    status: AssignmentStatus
    created_at: datetime
    completed_date: datetime | None = None


def make_record(
    assignee_id: uuid.UUID | None,
    minutes: int,
    status: AssignmentStatus = AssignmentStatus.pending,
) -> Record:
    return Record(
        id=uuid.uuid4(),
        document_id=DOCUMENT_ID,
        assignee_id=assignee_id,
        status=status,
        created_at=BASE + timedelta(minutes=minutes),
    )


class TestReconcile:
    def test_empty(self) -> None:
        result = reconcile([])
        assert result.latest == []
        assert result.to_delete == []
        assert result.is_clean

    def test_latest_record_per_reviewer_wins(self) -> None:
        alice, bob = uuid.uuid4(), uuid.uuid4()
        old_alice = make_record(alice, 0, AssignmentStatus.completed)
        new_alice = make_record(alice, 10, AssignmentStatus.pending)
        only_bob = make_record(bob, 5, AssignmentStatus.completed)

        result = reconcile([old_alice, new_alice, only_bob])

        latest = result.latest_by_assignee()
        assert latest[alice].id == new_alice.id
        assert latest[alice].status is AssignmentStatus.pending
        assert latest[bob].id == only_bob.id
        assert result.superseded_ids == [old_alice.id]
        assert result.orphaned_ids == []

    def test_latest_is_newest_first(self) -> None:
        records = [make_record(uuid.uuid4(), minutes) for minutes in (3, 1, 2)]
        result = reconcile(records)
        assert [a.created_at for a in result.latest] == sorted(
            (r.created_at for r in records), reverse=True
        )

    def test_orphans_are_reported_not_resolved(self) -> None:
        alice = uuid.uuid4()
        orphan = make_record(None, 20, AssignmentStatus.pending)
        kept = make_record(alice, 0, AssignmentStatus.completed)

        result = reconcile([orphan, kept])

        assert [a.id for a in result.latest] == [kept.id]
        assert result.orphaned_ids == [orphan.id]
        assert result.to_delete == [orphan.id]
        assert all(isinstance(a, ResolvedAssignment) for a in result.latest)

    def test_independent_of_input_order(self) -> None:
        alice, bob = uuid.uuid4(), uuid.uuid4()
        records = [
            make_record(alice, 0),
            make_record(alice, 30),
            make_record(alice, 15),
            make_record(bob, 5),
            make_record(bob, 40),
            make_record(None, 1),
        ]
        expected = reconcile(records)

        shuffled = records[:]
        for seed in range(5):
            random.Random(seed).shuffle(shuffled)
            result = reconcile(shuffled)
            assert {a.id for a in result.latest} == {a.id for a in expected.latest}
            assert set(result.to_delete) == set(expected.to_delete)

    def test_same_timestamp_is_deterministic(self) -> None:
        alice = uuid.uuid4()
        first = make_record(alice, 0)
        second = make_record(alice, 0)

        winner_a = reconcile([first, second]).latest[0].id
        winner_b = reconcile([second, first]).latest[0].id

        assert winner_a == winner_b == max(first.id, second.id, key=str)

    def test_idempotent(self) -> None:
        alice, bob = uuid.uuid4(), uuid.uuid4()
        records = [make_record(alice, 0), make_record(alice, 5), make_record(bob, 1)]

        first = reconcile(records)
        survivors = [r for r in records if r.id not in set(first.to_delete)]
        second = reconcile(survivors)

        assert second.is_clean
        assert [a.id for a in second.latest] == [a.id for a in first.latest]

    def test_completed_date_is_carried(self) -> None:
        record = make_record(uuid.uuid4(), 0, AssignmentStatus.completed)
        record.completed_date = BASE
        assert reconcile([record]).latest[0].completed_date == BASE

    def test_string_references_group_with_uuids(self) -> None:
        alice = uuid.uuid4()
        older = make_record(alice, 0)
        newer = make_record(alice, 5)
        newer.assignee_id = str(alice)  # type: ignore[assignment]

        result = reconcile([older, newer])

        assert result.superseded_ids == [older.id]
        assert result.latest[0].assignee_id == alice


class TestRestrictToReviewers:
    @pytest.fixture
    def people(self) -> tuple[uuid.UUID, uuid.UUID, uuid.UUID]:
        return uuid.uuid4(), uuid.uuid4(), uuid.uuid4()

    def test_splits_on_reviewer_list(self, people) -> None:
        alice, bob, carol = people
        latest = reconcile(
            [make_record(alice, 0), make_record(bob, 1), make_record(carol, 2)]
        ).latest

        current, detached = restrict_to_reviewers(latest, {alice, bob})

        assert {a.assignee_id for a in current} == {alice, bob}
        assert [a.assignee_id for a in detached] == [carol]

    def test_empty_reviewer_list_detaches_everything(self, people) -> None:
        alice, _, _ = people
        latest = reconcile([make_record(alice, 0)]).latest

        current, detached = restrict_to_reviewers(latest, set())

        assert current == []
        assert len(detached) == 1
