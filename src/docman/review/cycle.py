"""Review cycle service for DocMan.

ReviewCycleService is the single entry point for everything that changes
review state: assignment creation and status updates, completion
evaluation, update-required follow-ups, recurrence, and maintenance.

Each public method runs in its own session and commits once its writes are
done. Notifications are sent after the commit and never fail the
operation that triggered them.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docman.config import ReviewConfig
from docman.database.models.base import utcnow
from docman.database.models.document import Document
from docman.database.models.notification import NotificationType
from docman.database.models.review_assignment import AssignmentStatus, ReviewAssignment
from docman.database.queries import document as document_queries
from docman.database.queries import review_assignment as assignment_queries
from docman.database.queries import user as user_queries
from docman.logging import bind_document_context, get_logger
from docman.notifications.sender import NotificationContext, NotificationSender
from docman.review.completion import (
    CompletionDecision,
    CompletionSummary,
    CompletionTransition,
    decide_completion,
    summarize,
)
from docman.review.errors import (
    AssignmentNotFoundError,
    DocumentNotFoundError,
    UserNotFoundError,
)
from docman.review.reconciler import Reconciliation, reconcile, restrict_to_reviewers

logger = get_logger(__name__)

SessionFactory = async_sessionmaker[AsyncSession]


@dataclass(frozen=True)
class AssignmentRequest:
    """One reviewer to assign in a bulk creation."""

    assignee_id: UUID
    due_date: datetime
    notes: str | None = None


@dataclass(frozen=True)
class ReviewState:
    """A document together with the progress of its current cycle."""

    document: Document
    summary: CompletionSummary


@dataclass(frozen=True)
class AssignmentUpdate:
    """Result of a status update.

    Attributes:
        assignment: The updated assignment, relationships populated.
        follow_up: Update-required assignment spawned for the author, if any.
        decision: Completion decision, when the update carried a status.
    """

    assignment: ReviewAssignment
    follow_up: ReviewAssignment | None = None
    decision: CompletionDecision | None = None


class ReviewCycleService:
    """Coordinates review assignments and document review state.

    Attributes:
        session_factory: Produces database sessions, one per operation.
        notifier: Notification sender; None disables notifications.
        config: Review engine settings.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        notifier: NotificationSender | None = None,
        config: ReviewConfig | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.session_factory = session_factory
        self.notifier = notifier
        self.config = config or ReviewConfig()
        self._clock = clock
        self._logger = logger.bind(component="ReviewCycleService")

    # ------------------------------------------------------------------
    # Assignments
    # ------------------------------------------------------------------

    async def create_assignments(
        self,
        document_id: UUID,
        requests: Sequence[AssignmentRequest],
        assigned_by_id: UUID | None = None,
    ) -> list[ReviewAssignment]:
        """Assign reviewers to a document.

        Each assignee joins the document's reviewer list. The document's
        review due date is set to the latest requested due date if it has
        none yet.

        Raises:
            DocumentNotFoundError: If the document does not exist.
            UserNotFoundError: If an assignee does not exist.
        """
        async with self.session_factory() as session:
            document = await self._require_document(session, document_id)
            assignee_ids = [request.assignee_id for request in requests]
            users = await user_queries.get_users(session, assignee_ids)
            for assignee_id in assignee_ids:
                if assignee_id not in users:
                    raise UserNotFoundError(assignee_id)

            created = [
                await assignment_queries.create_assignment(
                    session,
                    document_id=document_id,
                    assignee_id=request.assignee_id,
                    due_date=request.due_date,
                    assigned_by_id=assigned_by_id,
                    notes=request.notes,
                )
                for request in requests
            ]
            added = await document_queries.add_reviewers(session, document, assignee_ids)

            if document.review_due_date is None and requests:
                await document_queries.update_review_state(
                    session,
                    document,
                    {"review_due_date": max(request.due_date for request in requests)},
                )

            decision = await self._evaluate(session, document, assigned_by_id, self._clock())
            await session.commit()

            self._logger.info(
                "assignments_created",
                document_id=str(document_id),
                count=len(created),
                reviewers_added=added,
                transition=decision.transition.value,
            )
            assignments = await assignment_queries.get_assignments(
                session, [assignment.id for assignment in created]
            )
            title = document.title
            sender = await user_queries.get_user(session, assigned_by_id) if assigned_by_id else None

        sender_name = sender.full_name if sender else "Someone"
        for assignment in assignments:
            if assignment.assignee_id is None:
                continue
            await self._notify(
                assignment.assignee_id,
                NotificationContext(
                    type=NotificationType.document_assigned,
                    title="Document Assigned",
                    message=f'{sender_name} has assigned you the document "{title}"',
                    sender_id=assigned_by_id,
                    document_id=document_id,
                    data={"assignment_id": str(assignment.id), "due_date": assignment.due_date.isoformat()},
                ),
            )
        return assignments

    async def list_document_assignments(self, document_id: UUID) -> list[ReviewAssignment]:
        """Authoritative assignments of a document, soonest due first.

        Stale records found while listing are deleted.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        async with self.session_factory() as session:
            await self._require_document(session, document_id)
            reconciliation = await self._reconcile(session, document_id, purge=True)
            await session.commit()
            return await assignment_queries.get_assignments(
                session, [assignment.id for assignment in reconciliation.latest]
            )

    async def list_user_assignments(
        self,
        user_id: UUID,
        status: AssignmentStatus | None = None,
    ) -> list[ReviewAssignment]:
        """A user's assignments, optionally filtered by status.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        async with self.session_factory() as session:
            if await user_queries.get_user(session, user_id) is None:
                raise UserNotFoundError(user_id)
            return await assignment_queries.list_user_assignments(session, user_id, status)

    async def list_overdue(self) -> list[ReviewAssignment]:
        async with self.session_factory() as session:
            return await assignment_queries.list_overdue_assignments(session, self._clock())

    async def update_assignment(
        self,
        assignment_id: UUID,
        status: AssignmentStatus | None = None,
        requires_updates: bool | None = None,
        update_notes: str | None = None,
        actor_id: UUID | None = None,
    ) -> AssignmentUpdate:
        """Update an assignment's status and update-request fields.

        Completing an assignment records who completed it and when; any other
        status clears both. Flagging ``requires_updates`` spawns a follow-up
        assignment for the document's author. Whenever a status is given the
        document's completion is re-evaluated in the same transaction.

        Args:
            assignment_id: Assignment to update.
            status: New status.
            requires_updates: Reviewer flagged that the document needs changes.
            update_notes: Reviewer's explanation of the required changes.
            actor_id: User performing the update; defaults to the assignee.

        Raises:
            AssignmentNotFoundError: If the assignment does not exist.
        """
        now = self._clock()
        async with self.session_factory() as session:
            assignment = await assignment_queries.get_assignment(session, assignment_id)
            if assignment is None:
                raise AssignmentNotFoundError(assignment_id)
            bind_document_context(str(assignment.document_id), str(assignment_id))

            acting_user = actor_id or assignment.assignee_id
            changes: dict[str, object] = {}
            if status is not None:
                changes["status"] = status
                if status is AssignmentStatus.completed:
                    changes["completed_date"] = now
                    changes["completed_by_id"] = acting_user
                else:
                    changes["completed_date"] = None
                    changes["completed_by_id"] = None
            if requires_updates is not None:
                changes["requires_updates"] = requires_updates
            if update_notes is not None:
                changes["update_notes"] = update_notes
            await assignment_queries.update_assignment_fields(session, assignment, changes)

            document = await document_queries.get_document(session, assignment.document_id)

            follow_up_id: UUID | None = None
            if requires_updates:
                follow_up_id = await self._spawn_update_assignment(session, assignment, document, now)

            decision: CompletionDecision | None = None
            if status is not None and document is not None:
                decision = await self._evaluate(session, document, acting_user, now)

            await session.commit()

            updated = await assignment_queries.get_assignment(session, assignment_id)
            follow_up = (
                await assignment_queries.get_assignment(session, follow_up_id)
                if follow_up_id
                else None
            )

        if follow_up is not None and follow_up.assignee_id is not None:
            await self._notify(
                follow_up.assignee_id,
                NotificationContext(
                    type=NotificationType.document_update_required,
                    title="Document Update Required",
                    message=follow_up.notes or "",
                    sender_id=follow_up.assigned_by_id,
                    document_id=follow_up.document_id,
                    data={
                        "assignment_id": str(follow_up.id),
                        "due_date": follow_up.due_date.isoformat(),
                    },
                ),
            )
        if decision is not None and document is not None:
            await self._notify_completed(document, decision)

        return AssignmentUpdate(assignment=updated, follow_up=follow_up, decision=decision)

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    async def evaluate_completion(
        self,
        document_id: UUID,
        actor_id: UUID | None = None,
    ) -> CompletionDecision:
        """Re-evaluate a document's completion flag and persist any change.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        async with self.session_factory() as session:
            document = await self._require_document(session, document_id)
            decision = await self._evaluate(session, document, actor_id, self._clock())
            if decision.changes:
                await session.commit()

        await self._notify_completed(document, decision)
        return decision

    async def get_review_state(self, document_id: UUID) -> ReviewState:
        """Document review fields plus current cycle progress.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        async with self.session_factory() as session:
            document = await self._require_document(session, document_id)
            summary = await self._summarize(session, document)
        return ReviewState(document=document, summary=summary)

    async def completion_summary(self, document_id: UUID) -> CompletionSummary:
        return (await self.get_review_state(document_id)).summary

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def purge_orphaned(self, document_id: UUID | None = None) -> int:
        """Delete assignments whose reviewer no longer exists.

        Returns:
            Number of assignments deleted.
        """
        async with self.session_factory() as session:
            deleted = await assignment_queries.delete_orphaned_assignments(session, document_id)
            await session.commit()

        self._logger.info(
            "orphaned_assignments_purged",
            document_id=str(document_id) if document_id else None,
            deleted=deleted,
        )
        return deleted

    async def purge_duplicates(self, document_id: UUID | None = None) -> int:
        """Delete every assignment that is not its reviewer's latest.

        Args:
            document_id: Document to clean; every document with assignments
                when omitted.

        Returns:
            Number of assignments deleted.
        """
        async with self.session_factory() as session:
            if document_id is not None:
                document_ids = [document_id]
            else:
                document_ids = await assignment_queries.list_assigned_document_ids(session)

            deleted = 0
            for current_id in document_ids:
                reconciliation = await self._reconcile(session, current_id, purge=True)
                deleted += len(reconciliation.to_delete)
            await session.commit()

        self._logger.info(
            "duplicate_assignments_purged",
            documents=len(document_ids),
            deleted=deleted,
        )
        return deleted

    async def force_complete(self, document_id: UUID, completed_by: UUID | None) -> int:
        """Mark every reviewer's latest assignment completed.

        Stale records are purged first. Completion is not evaluated.

        Returns:
            Number of assignments completed.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        async with self.session_factory() as session:
            await self._require_document(session, document_id)
            reconciliation = await self._reconcile(session, document_id, purge=True)
            completed = await assignment_queries.complete_assignments(
                session,
                [assignment.id for assignment in reconciliation.latest],
                completed_by_id=completed_by,
                now=self._clock(),
            )
            await session.commit()

        self._logger.info(
            "assignments_force_completed",
            document_id=str(document_id),
            completed=completed,
        )
        return completed

    async def reset_cycle(self, document_id: UUID) -> int:
        """Put every assignment of the document back to pending.

        Returns:
            Number of assignments reset.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        async with self.session_factory() as session:
            await self._require_document(session, document_id)
            reset = await assignment_queries.reset_document_assignments(session, document_id)
            await session.commit()

        self._logger.info("review_cycle_reset", document_id=str(document_id), reset=reset)
        return reset

    async def mark_overdue(self) -> int:
        """Flip open assignments past their due date to overdue.

        Returns:
            Number of assignments marked.
        """
        async with self.session_factory() as session:
            marked = await assignment_queries.mark_overdue_assignments(session, self._clock())
            await session.commit()

        self._logger.info("assignments_marked_overdue", marked=marked)
        return marked

    async def open_due_cycles(self) -> int:
        """Start the next cycle of completed documents whose time has come.

        Returns:
            Number of documents reopened for review.
        """
        now = self._clock()
        async with self.session_factory() as session:
            documents = await document_queries.list_completed_documents_due_to_reopen(session, now)
            for document in documents:
                await assignment_queries.reset_document_assignments(session, document.id)
                await document_queries.update_review_state(
                    session,
                    document,
                    {
                        "review_completed": False,
                        "review_completed_at": None,
                        "review_completed_by_id": None,
                        "review_due_date": document.next_review_due_on,
                    },
                )
                self._logger.info(
                    "review_cycle_opened",
                    document_id=str(document.id),
                    review_due_date=(
                        document.review_due_date.isoformat() if document.review_due_date else None
                    ),
                )
            await session.commit()
        return len(documents)

    async def send_due_notifications(self) -> int:
        """Notify authors and reviewers of documents about to open for review.

        Returns:
            Number of notifications delivered.
        """
        if self.notifier is None:
            self._logger.warning("due_notifications_skipped", reason="notifications_disabled")
            return 0

        now = self._clock()
        window_end = now + timedelta(hours=self.config.due_notice_window_hours)
        async with self.session_factory() as session:
            documents = await document_queries.list_documents_opening_between(session, now, window_end)

        self._logger.info("due_documents_found", count=len(documents))
        sent = 0
        for document in documents:
            recipients = [document.author_id, *(user.id for user in document.reviewers)]
            for recipient_id in dict.fromkeys(r for r in recipients if r is not None):
                delivered = await self._notify(
                    recipient_id,
                    NotificationContext(
                        type=NotificationType.document_review_due,
                        title="Document Review Due",
                        message=f'The document "{document.title}" is due for review',
                        document_id=document.id,
                    ),
                )
                sent += int(delivered)
        return sent

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _require_document(self, session: AsyncSession, document_id: UUID) -> Document:
        document = await document_queries.get_document(session, document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    async def _reconcile(
        self,
        session: AsyncSession,
        document_id: UUID,
        purge: bool = False,
    ) -> Reconciliation:
        records = await assignment_queries.list_document_assignments(session, document_id)
        reconciliation = reconcile(records)
        if reconciliation.is_clean:
            return reconciliation

        self._logger.info(
            "assignments_reconciled",
            document_id=str(document_id),
            latest=len(reconciliation.latest),
            orphaned=len(reconciliation.orphaned_ids),
            superseded=len(reconciliation.superseded_ids),
            purged=purge,
        )
        if purge:
            await assignment_queries.delete_assignments(session, reconciliation.to_delete)
        return reconciliation

    async def _summarize(self, session: AsyncSession, document: Document) -> CompletionSummary:
        reconciliation = await self._reconcile(session, document.id)
        current, _ = restrict_to_reviewers(reconciliation.latest, document.reviewer_ids)
        return summarize(current)

    async def _evaluate(
        self,
        session: AsyncSession,
        document: Document,
        actor_id: UUID | None,
        now: datetime,
    ) -> CompletionDecision:
        reconciliation = await self._reconcile(session, document.id)
        current, detached = restrict_to_reviewers(reconciliation.latest, document.reviewer_ids)
        if detached:
            self._logger.debug(
                "detached_assignments_ignored",
                document_id=str(document.id),
                detached=len(detached),
            )

        decision = decide_completion(
            current,
            already_completed=document.review_completed,
            now=now,
            actor_id=actor_id,
            interval=document.review_interval,
            interval_days=document.review_interval_days,
            period=document.review_period,
        )
        if decision.transition is CompletionTransition.unchanged:
            return decision

        await document_queries.update_review_state(session, document, decision.changes)
        if decision.transition is CompletionTransition.completed:
            schedule = decision.schedule
            self._logger.info(
                "review_cycle_completed",
                document_id=str(document.id),
                reviewers=decision.total,
                opens_for_review=(
                    schedule.opens_for_review.isoformat()
                    if schedule and schedule.opens_for_review
                    else None
                ),
            )
        else:
            self._logger.info(
                "review_cycle_reopened",
                document_id=str(document.id),
                completed=decision.completed,
                reviewers=decision.total,
            )
        return decision

    async def _spawn_update_assignment(
        self,
        session: AsyncSession,
        assignment: ReviewAssignment,
        document: Document | None,
        now: datetime,
    ) -> UUID | None:
        if document is None or document.author_id is None:
            self._logger.warning(
                "update_assignment_skipped",
                assignment_id=str(assignment.id),
                reason="document_has_no_author",
            )
            return None

        notes = assignment.update_notes or self.config.update_notes_fallback
        follow_up = await assignment_queries.create_assignment(
            session,
            document_id=document.id,
            assignee_id=document.author_id,
            due_date=now + timedelta(days=self.config.update_due_days),
            assigned_by_id=assignment.assignee_id,
            notes=f"Updates required based on review: {notes}",
            update_assignment_id=assignment.id,
        )
        self._logger.info(
            "update_assignment_created",
            document_id=str(document.id),
            flagged_by=str(assignment.id),
            update_assignment_id=str(follow_up.id),
        )
        return follow_up.id

    async def _notify_completed(self, document: Document, decision: CompletionDecision) -> None:
        if decision.transition is not CompletionTransition.completed or document.author_id is None:
            return
        await self._notify(
            document.author_id,
            NotificationContext(
                type=NotificationType.document_review_completed,
                title="Document Review Completed",
                message=f'All reviewers have completed their review of "{document.title}"',
                sender_id=document.review_completed_by_id,
                document_id=document.id,
            ),
        )

    async def _notify(self, recipient_id: UUID, context: NotificationContext) -> bool:
        if self.notifier is None:
            return False
        try:
            return await self.notifier.send(recipient_id, context)
        except Exception as e:
            self._logger.warning(
                "notification_failed",
                recipient_id=str(recipient_id),
                type=context.type.value,
                error=str(e),
            )
            return False
