"""
Review API Router

Endpoints for the spaced repetition review queue.

Endpoints:
- GET /api/review/due - Items due for review
- GET /api/review/stats - Review pool size and forecast
- GET /api/review/items/{item_id} - Schedule of one item
"""

from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.base import get_db
from app.dependencies import get_learner_id
from app.middleware.error_handling import handle_endpoint_errors
from app.models.learning import DueItemsResponse, ReviewStateResponse, ReviewStats
from app.services.learning import ReviewService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/review", tags=["review"])


# ===========================================
# Dependency Injection
# ===========================================


async def get_review_service(
    db: AsyncSession = Depends(get_db),
) -> ReviewService:
    """Get review service."""
    return ReviewService(db)


# ===========================================
# Review Endpoints
# ===========================================


@router.get("/due", response_model=DueItemsResponse)
@handle_endpoint_errors("Get due items")
async def get_due_items(
    limit: Optional[int] = Query(
        None,
        ge=1,
        le=settings.REVIEW_MAX_LIMIT,
        description="Maximum items to return",
    ),
    learner_id: str = Depends(get_learner_id),
    service: ReviewService = Depends(get_review_service),
) -> DueItemsResponse:
    """
    Get items due for review, most overdue first.

    Only items the learner has attempted at least once are scheduled.
    """
    return await service.get_due_items(learner_id, limit=limit)


@router.get("/stats", response_model=ReviewStats)
@handle_endpoint_errors("Get review stats")
async def get_review_stats(
    learner_id: str = Depends(get_learner_id),
    service: ReviewService = Depends(get_review_service),
) -> ReviewStats:
    """
    Get review statistics.

    Returns the number of scheduled items, how many are due now, and a
    forecast bucketed into overdue, today, tomorrow, this week and later.
    """
    return await service.get_review_stats(learner_id)


@router.get("/items/{item_id}", response_model=ReviewStateResponse)
@handle_endpoint_errors("Get review state")
async def get_review_state(
    item_id: str,
    learner_id: str = Depends(get_learner_id),
    service: ReviewService = Depends(get_review_service),
) -> ReviewStateResponse:
    """Get the learner's schedule for one item."""
    return await service.get_review_state(learner_id, item_id)
