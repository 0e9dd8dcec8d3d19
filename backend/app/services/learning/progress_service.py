"""
Progress Service

Lesson completion, learner profile, adaptive daily goal and learner
analytics.

Responsibilities:
- Upsert per-lesson progress when a lesson is completed
- Lazily create and return learner profiles
- Run the once-per-day daily goal adjustment
- Aggregate XP trend, lesson funnel and review split for the dashboard

Usage:
    from app.services.learning import ProgressService

    service = ProgressService(db)
    progress = await service.complete_lesson("learner-1", lesson_id, started_at)
    goal = await service.refresh_daily_goal("learner-1")
"""

from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
import logging

from sqlalchemy import case, distinct, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.models import Item, Lesson
from app.db.models_learning import ExerciseAttempt, LessonProgress, ReviewState
from app.middleware.error_handling import NotFoundError, PersistenceError
from app.models.learning import (
    DailyGoalStatus,
    LearnerAnalytics,
    LessonFunnel,
    LessonProgressResponse,
    ProfileResponse,
    ReviewSplit,
    XpTrendPoint,
)
from app.services.learning.daily_goal import apply_daily_goal
from app.services.learning.profiles import get_or_create_profile

logger = logging.getLogger(__name__)


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


class ProgressService:
    """Service for lesson progress, profiles and daily goals."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ===========================================
    # Lesson completion
    # ===========================================

    async def complete_lesson(
        self,
        learner_id: str,
        lesson_id: str,
        started_at: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> LessonProgressResponse:
        """
        Record that a learner finished a lesson.

        XP for the lesson is the sum of the learner's attempt scores on the
        lesson's items since started_at. The profile total is not touched
        here; it was already credited attempt by attempt.

        Completing a lesson again replaces the stored XP and completion time
        (one progress row per learner and lesson).

        Raises:
            NotFoundError: If the lesson doesn't exist
            PersistenceError: If the progress row could not be saved
        """
        now = now or datetime.now(timezone.utc)

        lesson = await self.db.get(Lesson, lesson_id)
        if lesson is None:
            raise NotFoundError(f"Lesson {lesson_id} not found")

        xp_query = (
            select(func.coalesce(func.sum(ExerciseAttempt.score), 0))
            .join(Item, ExerciseAttempt.item_id == Item.id)
            .where(
                ExerciseAttempt.learner_id == learner_id,
                Item.lesson_id == lesson_id,
            )
        )
        if started_at is not None:
            xp_query = xp_query.where(ExerciseAttempt.created_at >= started_at)

        try:
            xp_result = await self.db.execute(xp_query)
            xp_earned = int(xp_result.scalar() or 0)

            result = await self.db.execute(
                select(LessonProgress)
                .where(
                    LessonProgress.learner_id == learner_id,
                    LessonProgress.lesson_id == lesson_id,
                )
                .with_for_update()
            )
            progress = result.scalar_one_or_none()
            if progress is None:
                progress = LessonProgress(learner_id=learner_id, lesson_id=lesson_id)
                self.db.add(progress)

            progress.xp_earned = xp_earned
            progress.completed = True
            progress.completed_at = now

            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Failed to save progress for learner {learner_id} on lesson {lesson_id}: {e}"
            )
            raise PersistenceError("Lesson completion was not saved")

        logger.info(
            f"Learner {learner_id} completed lesson {lesson_id} with {xp_earned} XP"
        )

        return LessonProgressResponse(
            lesson_id=lesson_id,
            xp_earned=xp_earned,
            completed=True,
            completed_at=now,
        )

    # ===========================================
    # Profile & daily goal
    # ===========================================

    async def get_profile(self, learner_id: str) -> ProfileResponse:
        """Get a learner's profile, creating it on first contact."""
        try:
            profile = await get_or_create_profile(self.db, learner_id)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to load profile for learner {learner_id}: {e}")
            raise PersistenceError("Profile could not be loaded")
        return ProfileResponse.model_validate(profile)

    async def refresh_daily_goal(
        self,
        learner_id: str,
        today: Optional[date] = None,
    ) -> DailyGoalStatus:
        """
        Evaluate the learner's daily goal and report today's progress.

        Trailing XP is the XP of lessons completed since midnight seven days
        ago. The goal is adjusted at most once per calendar day; calling this
        again on the same day only re-reads today's progress.

        Args:
            learner_id: Learner to evaluate
            today: Learner's calendar date (defaults to the UTC date)

        Returns:
            DailyGoalStatus with the current goal and today's XP
        """
        today = today or datetime.now(timezone.utc).date()
        window_start = _start_of_day(
            today - timedelta(days=settings.DAILY_GOAL_WINDOW_DAYS)
        )
        today_start = _start_of_day(today)

        try:
            profile = await get_or_create_profile(self.db, learner_id, for_update=True)

            result = await self.db.execute(
                select(LessonProgress.xp_earned, LessonProgress.completed_at).where(
                    LessonProgress.learner_id == learner_id,
                    LessonProgress.completed.is_(True),
                    LessonProgress.completed_at >= window_start,
                )
            )
            recent = result.all()

            count_result = await self.db.execute(
                select(func.count())
                .select_from(LessonProgress)
                .where(
                    LessonProgress.learner_id == learner_id,
                    LessonProgress.completed.is_(True),
                )
            )
            lessons_completed = count_result.scalar() or 0

            trailing_xp = sum(xp or 0 for xp, _ in recent)
            today_xp = sum(
                xp or 0
                for xp, completed_at in recent
                if completed_at is not None and completed_at >= today_start
            )

            update = apply_daily_goal(
                profile.daily_goal_xp or settings.DAILY_GOAL_DEFAULT_XP,
                profile.daily_goal_last_adjusted,
                trailing_xp,
                today,
            )
            if update.changed:
                profile.daily_goal_xp = update.goal
                profile.daily_goal_last_adjusted = update.last_adjusted
                logger.info(
                    f"Daily goal for learner {learner_id}: {update.adjustment.value} "
                    f"to {update.goal} XP (trailing {trailing_xp} XP)"
                )

            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to refresh daily goal for learner {learner_id}: {e}")
            raise PersistenceError("Daily goal could not be updated")

        goal_percent = min(100.0, today_xp / max(update.goal, 1) * 100)

        return DailyGoalStatus(
            daily_goal_xp=update.goal,
            adjustment=update.adjustment,
            last_adjusted=update.last_adjusted,
            today_xp=today_xp,
            goal_percent=round(goal_percent, 1),
            lessons_completed=lessons_completed,
        )

    # ===========================================
    # Analytics
    # ===========================================

    async def get_analytics(
        self,
        learner_id: str,
        now: Optional[datetime] = None,
    ) -> LearnerAnalytics:
        """
        Dashboard analytics for one learner.

        Returns:
            LearnerAnalytics with:
            - Cumulative XP per day of completed lessons
            - Lesson funnel (total, attempted, completed)
            - Review states due now vs scheduled later
            - Attempt accuracy
        """
        now = now or datetime.now(timezone.utc)

        # XP trend
        result = await self.db.execute(
            select(LessonProgress.completed_at, LessonProgress.xp_earned)
            .where(
                LessonProgress.learner_id == learner_id,
                LessonProgress.completed.is_(True),
                LessonProgress.completed_at.is_not(None),
            )
            .order_by(LessonProgress.completed_at.asc())
        )
        xp_by_day: dict[date, int] = defaultdict(int)
        completed_lessons = 0
        for completed_at, xp_earned in result.all():
            xp_by_day[completed_at.date()] += xp_earned or 0
            completed_lessons += 1

        xp_trend = []
        cumulative = 0
        for day in sorted(xp_by_day):
            cumulative += xp_by_day[day]
            xp_trend.append(
                XpTrendPoint(day=day, xp_earned=xp_by_day[day], cumulative_xp=cumulative)
            )

        # Lesson funnel
        total_result = await self.db.execute(select(func.count()).select_from(Lesson))
        total_lessons = total_result.scalar() or 0

        attempted_result = await self.db.execute(
            select(func.count(distinct(Item.lesson_id)))
            .select_from(ExerciseAttempt)
            .join(Item, ExerciseAttempt.item_id == Item.id)
            .where(ExerciseAttempt.learner_id == learner_id)
        )
        attempted_lessons = attempted_result.scalar() or 0

        # Review split
        review_result = await self.db.execute(
            select(ReviewState.next_due).where(
                ReviewState.learner_id == learner_id,
                ReviewState.item_id.is_not(None),
            )
        )
        due_dates = list(review_result.scalars().all())
        due = sum(1 for next_due in due_dates if next_due <= now)

        # Accuracy
        accuracy_result = await self.db.execute(
            select(
                func.count(ExerciseAttempt.id),
                func.coalesce(
                    func.sum(case((ExerciseAttempt.correct.is_(True), 1), else_=0)), 0
                ),
            ).where(ExerciseAttempt.learner_id == learner_id)
        )
        total_attempts, correct_attempts = accuracy_result.one()
        total_attempts = total_attempts or 0
        correct_attempts = int(correct_attempts or 0)

        return LearnerAnalytics(
            xp_trend=xp_trend,
            funnel=LessonFunnel(
                total_lessons=total_lessons,
                attempted_lessons=attempted_lessons,
                completed_lessons=completed_lessons,
            ),
            reviews=ReviewSplit(due=due, scheduled=len(due_dates) - due),
            total_attempts=total_attempts,
            correct_attempts=correct_attempts,
            accuracy=(
                round(correct_attempts / total_attempts, 3) if total_attempts else 0.0
            ),
        )
