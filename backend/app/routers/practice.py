"""
Practice API Router

Endpoints used by the exercise player.

Endpoints:
- POST /api/practice/attempts - Submit an answer (judge, score, schedule)
- POST /api/practice/lessons/{lesson_id}/complete - Complete a lesson
- POST /api/practice/feedback - Advisory AI tutor feedback on an answer
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.base import get_db
from app.dependencies import get_learner_id
from app.enums import ExerciseKind, RateLimitType
from app.middleware.error_handling import handle_endpoint_errors
from app.middleware.rate_limit import limiter
from app.models.learning import (
    AttemptResult,
    AttemptSubmitRequest,
    FeedbackRequest,
    FeedbackResponse,
    LessonCompleteRequest,
    LessonProgressResponse,
)
from app.services.learning import (
    CatalogService,
    FeedbackService,
    ProgressService,
    ReviewService,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/practice", tags=["practice"])


# ===========================================
# Dependency Injection
# ===========================================


async def get_review_service(
    db: AsyncSession = Depends(get_db),
) -> ReviewService:
    """Get review service."""
    return ReviewService(db)


async def get_progress_service(
    db: AsyncSession = Depends(get_db),
) -> ProgressService:
    """Get progress service."""
    return ProgressService(db)


async def get_catalog_service(
    db: AsyncSession = Depends(get_db),
) -> CatalogService:
    """Get catalog service."""
    return CatalogService(db)


async def get_feedback_service() -> FeedbackService:
    """Get AI feedback service."""
    return FeedbackService()


# ===========================================
# Attempts
# ===========================================


@router.post("/attempts", response_model=AttemptResult)
@limiter.limit(settings.get_rate_limit(RateLimitType.DEFAULT))
@handle_endpoint_errors("Submit attempt")
async def submit_attempt(
    request: Request,
    attempt: AttemptSubmitRequest,
    learner_id: str = Depends(get_learner_id),
    service: ReviewService = Depends(get_review_service),
) -> AttemptResult:
    """
    Submit an answer for an item.

    The answer is judged against the item's canonical answer, XP is
    awarded (10 for correct, 0 otherwise), and the item's review schedule
    is updated. An empty answer is judged incorrect.

    Returns 503 (progress_not_saved) with the verdict in details if the
    result could not be stored.
    """
    return await service.submit_attempt(learner_id, attempt.item_id, attempt.answer)


@router.post("/lessons/{lesson_id}/complete", response_model=LessonProgressResponse)
@handle_endpoint_errors("Complete lesson")
async def complete_lesson(
    lesson_id: str,
    body: LessonCompleteRequest,
    learner_id: str = Depends(get_learner_id),
    service: ProgressService = Depends(get_progress_service),
) -> LessonProgressResponse:
    """
    Mark a lesson as completed.

    XP earned is the total score of the learner's attempts on the lesson's
    items since started_at.
    """
    return await service.complete_lesson(learner_id, lesson_id, body.started_at)


# ===========================================
# AI Feedback
# ===========================================


@router.post("/feedback", response_model=FeedbackResponse)
@limiter.limit(settings.get_rate_limit(RateLimitType.LLM_HEAVY))
@handle_endpoint_errors("Get AI feedback")
async def get_feedback(
    request: Request,
    body: FeedbackRequest,
    learner_id: str = Depends(get_learner_id),
    catalog: CatalogService = Depends(get_catalog_service),
    feedback_service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackResponse:
    """
    Get advisory tutor feedback on an answer.

    Feedback never changes the verdict, XP or review schedule. When no LLM
    is configured or the provider fails, available is False.
    """
    item, language = await catalog.get_item_with_language(body.item_id)
    kind = ExerciseKind(item.kind)

    if kind == ExerciseKind.SPEAKING:
        text = await feedback_service.get_speaking_feedback(
            speech=body.answer,
            expected=item.correct_answer,
            language=language,
        )
    else:
        text = await feedback_service.get_exercise_feedback(
            answer=body.answer,
            correct_answer=item.correct_answer,
            question=item.question,
            kind=kind,
            language=language,
        )

    return FeedbackResponse(
        item_id=item.id,
        kind=kind,
        available=text is not None,
        feedback=text,
    )
