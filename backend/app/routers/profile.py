"""
Profile API Router

Learner profile, adaptive daily goal and dashboard analytics.

Endpoints:
- GET /api/profile - Get (or lazily create) the learner's profile
- POST /api/profile/daily-goal/refresh - Run the daily goal adjustment
- GET /api/profile/analytics - XP trend, lesson funnel, review split
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.base import get_db
from app.dependencies import get_learner_id
from app.enums import RateLimitType
from app.middleware.error_handling import handle_endpoint_errors
from app.middleware.rate_limit import limiter
from app.models.learning import DailyGoalStatus, LearnerAnalytics, ProfileResponse
from app.services.learning import ProgressService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/profile", tags=["profile"])


async def get_progress_service(
    db: AsyncSession = Depends(get_db),
) -> ProgressService:
    """Get progress service."""
    return ProgressService(db)


@router.get("", response_model=ProfileResponse)
@handle_endpoint_errors("Get profile")
async def get_profile(
    learner_id: str = Depends(get_learner_id),
    service: ProgressService = Depends(get_progress_service),
) -> ProfileResponse:
    """Get the learner's XP, streak and daily goal."""
    return await service.get_profile(learner_id)


@router.post("/daily-goal/refresh", response_model=DailyGoalStatus)
@handle_endpoint_errors("Refresh daily goal")
async def refresh_daily_goal(
    learner_id: str = Depends(get_learner_id),
    service: ProgressService = Depends(get_progress_service),
) -> DailyGoalStatus:
    """
    Evaluate the daily goal and report today's progress.

    Called when the learner opens the app. The goal is adjusted at most
    once per day from the last seven days of lesson XP; later calls on the
    same day return adjustment "skipped".
    """
    return await service.refresh_daily_goal(learner_id)


@router.get("/analytics", response_model=LearnerAnalytics)
@limiter.limit(settings.get_rate_limit(RateLimitType.ANALYTICS))
@handle_endpoint_errors("Get learner analytics")
async def get_analytics(
    request: Request,
    learner_id: str = Depends(get_learner_id),
    service: ProgressService = Depends(get_progress_service),
) -> LearnerAnalytics:
    """Get dashboard analytics for the learner."""
    return await service.get_analytics(learner_id)
