"""
Review Service

Service layer that connects answer evaluation and SM-2 scheduling with the
database. Handles attempt submission, the due-item queue and review
statistics.

Submission flow:
    load item → judge → score → lock review state → schedule
    → upsert review state → append attempt → credit profile → commit

Usage:
    from app.services.learning import ReviewService

    service = ReviewService(db_session)

    result = await service.submit_attempt("learner-1", item_id, "Hola")
    due = await service.get_due_items("learner-1", limit=20)
"""

from datetime import datetime, timezone
from typing import Optional
import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.db.models import Item
from app.db.models_learning import ExerciseAttempt, ReviewState
from app.middleware.error_handling import (
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from app.models.catalog import PlayerItem
from app.models.learning import (
    AttemptResult,
    DueItem,
    DueItemsResponse,
    ReviewForecast,
    ReviewStateResponse,
    ReviewStats,
)
from app.services.learning.answers import judge, score
from app.services.learning.profiles import get_or_create_profile
from app.services.learning.scheduler import (
    ReviewSchedule,
    get_review_forecast,
    schedule,
)
from app.services.learning.streak import advance_streak

logger = logging.getLogger(__name__)


def _state_response(item_id: str, state) -> ReviewStateResponse:
    return ReviewStateResponse(
        item_id=item_id,
        ease_factor=state.ease_factor,
        interval=state.interval,
        repetition_count=state.repetition_count,
        next_due=state.next_due,
        last_reviewed=state.last_reviewed,
    )


class ReviewService:
    """
    Service for answer submission and spaced repetition review.

    Provides:
    - Attempt judging, scoring and scheduling
    - Due item queries
    - Review statistics and forecasts
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the review service.

        Args:
            db: Async database session
        """
        self.db = db

    async def submit_attempt(
        self,
        learner_id: str,
        item_id: str,
        answer: str,
        now: Optional[datetime] = None,
    ) -> AttemptResult:
        """
        Judge an answer and record its effects.

        The review state row is locked with SELECT ... FOR UPDATE so two
        near-simultaneous submissions for the same (learner, item) pair are
        applied one after the other instead of both starting from the same
        stale state.

        Args:
            learner_id: Learner submitting the answer
            item_id: Item being answered
            answer: Raw answer text (may be empty)
            now: Review time (defaults to current UTC time)

        Returns:
            AttemptResult with verdict, XP and the new schedule

        Raises:
            NotFoundError: If the item doesn't exist
            ValidationError: If the item has an unknown exercise kind
            PersistenceError: If the review state, attempt or profile could
                not be saved. details carries the verdict.
        """
        now = now or datetime.now(timezone.utc)

        item = await self.db.get(Item, item_id)
        if item is None:
            raise NotFoundError(f"Item {item_id} not found")

        try:
            correct = judge(item.kind, answer, item.correct_answer)
        except ValueError:
            raise ValidationError(
                f"Item {item_id} has unsupported exercise kind '{item.kind}'"
            )
        xp_awarded = score(correct)

        # Rollback expires loaded instances, so read these up front.
        correct_answer = item.correct_answer
        explanation = item.explanation

        try:
            result = await self.db.execute(
                select(ReviewState)
                .where(
                    ReviewState.learner_id == learner_id,
                    ReviewState.item_id == item_id,
                )
                .with_for_update()
            )
            state = result.scalar_one_or_none()

            new_schedule: ReviewSchedule = schedule(state, correct, now)

            if state is None:
                state = ReviewState(learner_id=learner_id, item_id=item_id)
                self.db.add(state)
            state.ease_factor = new_schedule.ease_factor
            state.interval = new_schedule.interval
            state.repetition_count = new_schedule.repetition_count
            state.next_due = new_schedule.next_due
            state.last_reviewed = new_schedule.last_reviewed

            self.db.add(
                ExerciseAttempt(
                    learner_id=learner_id,
                    item_id=item_id,
                    submitted_answer=answer or "",
                    correct=correct,
                    score=xp_awarded,
                    created_at=now,
                )
            )

            profile = await get_or_create_profile(
                self.db, learner_id, for_update=True
            )
            profile.xp = (profile.xp or 0) + xp_awarded
            profile.streak, profile.last_active = advance_streak(
                profile.streak or 0, profile.last_active, now.date()
            )

            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Failed to save attempt for learner {learner_id} on item {item_id}: {e}"
            )
            raise PersistenceError(
                "Answer checked but progress was not saved",
                details={
                    "item_id": item_id,
                    "correct": correct,
                    "xp_awarded": xp_awarded,
                    "correct_answer": correct_answer,
                },
            )

        logger.debug(
            f"Learner {learner_id} answered item {item_id}: correct={correct}, "
            f"interval={new_schedule.interval}d, ease={new_schedule.ease_factor}"
        )

        return AttemptResult(
            item_id=item_id,
            correct=correct,
            xp_awarded=xp_awarded,
            correct_answer=correct_answer,
            explanation=explanation,
            review=_state_response(item_id, new_schedule),
            total_xp=profile.xp,
            streak=profile.streak,
        )

    async def get_due_items(
        self,
        learner_id: str,
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> DueItemsResponse:
        """
        Get items whose next review time has passed.

        Items the learner never attempted have no review state and are not
        returned.

        Args:
            learner_id: Learner whose queue to read
            limit: Maximum items to return (default REVIEW_DEFAULT_LIMIT)
            now: Reference time (defaults to current UTC time)

        Returns:
            DueItemsResponse ordered by next_due, most overdue first
        """
        now = now or datetime.now(timezone.utc)
        limit = min(limit or settings.REVIEW_DEFAULT_LIMIT, settings.REVIEW_MAX_LIMIT)

        due_filter = (
            ReviewState.learner_id == learner_id,
            ReviewState.item_id.is_not(None),
            ReviewState.next_due <= now,
        )

        result = await self.db.execute(
            select(ReviewState, Item)
            .join(Item, ReviewState.item_id == Item.id)
            .where(*due_filter)
            .order_by(ReviewState.next_due.asc())
            .limit(limit)
        )
        rows = result.all()

        count_result = await self.db.execute(
            select(func.count()).select_from(ReviewState).where(*due_filter)
        )
        total_due = count_result.scalar() or 0

        return DueItemsResponse(
            items=[
                DueItem(
                    item=PlayerItem.model_validate(item),
                    review=_state_response(item.id, state),
                )
                for state, item in rows
            ],
            total_due=total_due,
        )

    async def get_review_stats(
        self,
        learner_id: str,
        now: Optional[datetime] = None,
    ) -> ReviewStats:
        """
        Summarize a learner's review pool.

        Returns:
            ReviewStats with total scheduled, due now and forecast buckets
        """
        now = now or datetime.now(timezone.utc)

        result = await self.db.execute(
            select(ReviewState.next_due).where(
                ReviewState.learner_id == learner_id,
                ReviewState.item_id.is_not(None),
            )
        )
        due_dates = list(result.scalars().all())

        return ReviewStats(
            total_scheduled=len(due_dates),
            due_now=sum(1 for due in due_dates if due <= now),
            forecast=ReviewForecast(**get_review_forecast(due_dates, as_of=now)),
        )

    async def get_review_state(
        self,
        learner_id: str,
        item_id: str,
    ) -> ReviewStateResponse:
        """
        Get the schedule of one item for a learner.

        Raises:
            NotFoundError: If the learner never attempted the item
        """
        result = await self.db.execute(
            select(ReviewState).where(
                ReviewState.learner_id == learner_id,
                ReviewState.item_id == item_id,
            )
        )
        state = result.scalar_one_or_none()
        if state is None:
            raise NotFoundError(f"No review state for item {item_id}")
        return _state_response(item_id, state)
