"""Review assignment endpoints for DocMan.

Bulk assignment, reconciled listings, and the status update that drives
the update-required flow and document completion.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from fastapi import status as http_status

from docman.database.models.review_assignment import AssignmentStatus
from docman.logging import get_logger
from docman.review.cycle import AssignmentRequest, ReviewCycleService
from docman.web.dependencies import get_actor_id, get_review_service
from docman.web.schemas import (
    AssignmentBatchCreate,
    AssignmentResponse,
    AssignmentStatusUpdate,
)

logger = get_logger(__name__)


def create_reviews_router() -> APIRouter:
    """Create review assignment router.

    Routes:
        POST /reviews/ - Assign reviewers to a document
        GET /reviews/document/{document_id} - Latest assignment per reviewer
        GET /reviews/user/{user_id} - A user's assignments
        GET /reviews/overdue - Open assignments past their due date
        PUT /reviews/{assignment_id} - Update status and update-request fields
    """
    router = APIRouter(prefix="/reviews", tags=["reviews"])

    @router.post(
        "/",
        response_model=list[AssignmentResponse],
        status_code=http_status.HTTP_201_CREATED,
    )
    async def create_assignments(
        payload: AssignmentBatchCreate,
        service: ReviewCycleService = Depends(get_review_service),  # noqa: B008
        actor_id: UUID | None = Depends(get_actor_id),  # noqa: B008
    ) -> list[AssignmentResponse]:
        assignments = await service.create_assignments(
            payload.document_id,
            [
                AssignmentRequest(
                    assignee_id=item.assignee,
                    due_date=item.due_date,
                    notes=item.notes,
                )
                for item in payload.assignments
            ],
            assigned_by_id=actor_id,
        )
        return [AssignmentResponse.model_validate(a) for a in assignments]

    @router.get("/document/{document_id}", response_model=list[AssignmentResponse])
    async def list_document_assignments(
        document_id: UUID,
        service: ReviewCycleService = Depends(get_review_service),  # noqa: B008
    ) -> list[AssignmentResponse]:
        assignments = await service.list_document_assignments(document_id)
        return [AssignmentResponse.model_validate(a) for a in assignments]

    @router.get("/user/{user_id}", response_model=list[AssignmentResponse])
    async def list_user_assignments(
        user_id: UUID,
        status: str | None = None,
        service: ReviewCycleService = Depends(get_review_service),  # noqa: B008
    ) -> list[AssignmentResponse]:
        """List a user's assignments.

        Raises:
            HTTPException: 400 if the status filter is invalid
        """
        status_filter = None
        if status is not None:
            try:
                status_filter = AssignmentStatus(status)
            except ValueError:
                logger.warning("invalid_status_filter", status=status)
                raise HTTPException(
                    status_code=http_status.HTTP_400_BAD_REQUEST,
                    detail=f"Invalid status: {status}. Valid values: {[s.value for s in AssignmentStatus]}",
                ) from None

        assignments = await service.list_user_assignments(user_id, status_filter)
        return [AssignmentResponse.model_validate(a) for a in assignments]

    @router.get("/overdue", response_model=list[AssignmentResponse])
    async def list_overdue_assignments(
        service: ReviewCycleService = Depends(get_review_service),  # noqa: B008
    ) -> list[AssignmentResponse]:
        assignments = await service.list_overdue()
        return [AssignmentResponse.model_validate(a) for a in assignments]

    @router.put("/{assignment_id}", response_model=AssignmentResponse)
    async def update_assignment(
        assignment_id: UUID,
        payload: AssignmentStatusUpdate,
        service: ReviewCycleService = Depends(get_review_service),  # noqa: B008
        actor_id: UUID | None = Depends(get_actor_id),  # noqa: B008
    ) -> AssignmentResponse:
        result = await service.update_assignment(
            assignment_id,
            status=payload.status,
            requires_updates=payload.requires_updates,
            update_notes=payload.update_notes,
            actor_id=actor_id,
        )
        return AssignmentResponse.model_validate(result.assignment)

    return router
