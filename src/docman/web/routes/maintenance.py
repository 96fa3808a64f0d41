"""Maintenance endpoints for DocMan review data.

These are meant for administrators and scheduled jobs rather than
the document UI.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from docman.review.cycle import ReviewCycleService
from docman.web.dependencies import get_review_service
from docman.web.schemas import CountResponse


def create_maintenance_router() -> APIRouter:
    """Create maintenance router.

    Routes:
        POST /maintenance/purge-orphaned - Delete assignments without a reviewer
        POST /maintenance/purge-duplicates - Delete superseded assignments
        POST /maintenance/mark-overdue - Flag open assignments past due
        POST /maintenance/open-due-cycles - Start cycles whose opening date passed
        POST /maintenance/send-due-notifications - Notify about upcoming reviews
    """
    router = APIRouter(prefix="/maintenance", tags=["maintenance"])

    @router.post("/purge-orphaned", response_model=CountResponse)
    async def purge_orphaned(
        document_id: UUID | None = None,
        service: ReviewCycleService = Depends(get_review_service),  # noqa: B008
    ) -> CountResponse:
        return CountResponse(count=await service.purge_orphaned(document_id))

    @router.post("/purge-duplicates", response_model=CountResponse)
    async def purge_duplicates(
        document_id: UUID | None = None,
        service: ReviewCycleService = Depends(get_review_service),  # noqa: B008
    ) -> CountResponse:
        return CountResponse(count=await service.purge_duplicates(document_id))

    @router.post("/mark-overdue", response_model=CountResponse)
    async def mark_overdue(
        service: ReviewCycleService = Depends(get_review_service),  # noqa: B008
    ) -> CountResponse:
        return CountResponse(count=await service.mark_overdue())

    @router.post("/open-due-cycles", response_model=CountResponse)
    async def open_due_cycles(
        service: ReviewCycleService = Depends(get_review_service),  # noqa: B008
    ) -> CountResponse:
        return CountResponse(count=await service.open_due_cycles())

    @router.post("/send-due-notifications", response_model=CountResponse)
    async def send_due_notifications(
        service: ReviewCycleService = Depends(get_review_service),  # noqa: B008
    ) -> CountResponse:
        return CountResponse(count=await service.send_due_notifications())

    return router
