"""Document review state endpoints for DocMan."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from docman.review.completion import CompletionDecision
from docman.review.cycle import ReviewCycleService
from docman.web.dependencies import get_actor_id, get_review_service
from docman.web.schemas import (
    CompletionDecisionResponse,
    CompletionSummaryResponse,
    DocumentReviewResponse,
    ForceCompleteResponse,
    ResetResponse,
)


def decision_response(decision: CompletionDecision) -> CompletionDecisionResponse:
    schedule = decision.schedule
    return CompletionDecisionResponse(
        transition=decision.transition.value,
        is_complete=decision.is_complete,
        completed=decision.completed,
        total=decision.total,
        opens_for_review=schedule.opens_for_review if schedule else None,
        next_review_due_on=schedule.review_due if schedule else None,
    )


def create_documents_router() -> APIRouter:
    """Create document review router.

    Routes:
        GET /documents/{document_id}/review - Review state and progress
        POST /documents/{document_id}/review/evaluate - Re-evaluate completion
        POST /documents/{document_id}/review/reset - Restart the current cycle
        POST /documents/{document_id}/review/force-complete - Complete all reviewers
    """
    router = APIRouter(prefix="/documents", tags=["documents"])

    @router.get("/{document_id}/review", response_model=DocumentReviewResponse)
    async def get_review_state(
        document_id: UUID,
        service: ReviewCycleService = Depends(get_review_service),  # noqa: B008
    ) -> DocumentReviewResponse:
        state = await service.get_review_state(document_id)
        document = state.document
        return DocumentReviewResponse(
            id=document.id,
            title=document.title,
            author_id=document.author_id,
            reviewer_ids=sorted(document.reviewer_ids, key=str),
            review_completed=document.review_completed,
            review_completed_at=document.review_completed_at,
            review_completed_by_id=document.review_completed_by_id,
            review_due_date=document.review_due_date,
            last_reviewed_on=document.last_reviewed_on,
            next_review_due_on=document.next_review_due_on,
            opens_for_review=document.opens_for_review,
            review_interval=document.review_interval,
            review_interval_days=document.review_interval_days,
            review_period=document.review_period,
            summary=CompletionSummaryResponse.model_validate(state.summary),
        )

    @router.post("/{document_id}/review/evaluate", response_model=CompletionDecisionResponse)
    async def evaluate_completion(
        document_id: UUID,
        service: ReviewCycleService = Depends(get_review_service),  # noqa: B008
        actor_id: UUID | None = Depends(get_actor_id),  # noqa: B008
    ) -> CompletionDecisionResponse:
        decision = await service.evaluate_completion(document_id, actor_id=actor_id)
        return decision_response(decision)

    @router.post("/{document_id}/review/reset", response_model=ResetResponse)
    async def reset_cycle(
        document_id: UUID,
        service: ReviewCycleService = Depends(get_review_service),  # noqa: B008
        actor_id: UUID | None = Depends(get_actor_id),  # noqa: B008
    ) -> ResetResponse:
        reset = await service.reset_cycle(document_id)
        decision = await service.evaluate_completion(document_id, actor_id=actor_id)
        return ResetResponse(reset=reset, decision=decision_response(decision))

    @router.post("/{document_id}/review/force-complete", response_model=ForceCompleteResponse)
    async def force_complete(
        document_id: UUID,
        evaluate: bool = False,
        service: ReviewCycleService = Depends(get_review_service),  # noqa: B008
        actor_id: UUID | None = Depends(get_actor_id),  # noqa: B008
    ) -> ForceCompleteResponse:
        """Complete every reviewer's latest assignment.

        Completion is only re-evaluated when ``evaluate`` is true.
        """
        completed = await service.force_complete(document_id, completed_by=actor_id)
        decision = None
        if evaluate:
            decision = decision_response(
                await service.evaluate_completion(document_id, actor_id=actor_id)
            )
        return ForceCompleteResponse(completed=completed, decision=decision)

    return router
