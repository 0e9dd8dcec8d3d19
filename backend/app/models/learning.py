"""
Learning System API Models (Pydantic)

Request/response schemas for the Learning System API including:
- Answer submission and verdicts
- SM-2 review queue and forecast
- Lesson completion and learner profile
- Daily goal and analytics
- Advisory AI feedback

ARCHITECTURE NOTE:
    This file contains PYDANTIC models for API validation.
    There is a corresponding SQLAlchemy file: app/db/models_learning.py

    Data flows: API Request → Pydantic → Service → SQLAlchemy → Database

API Contract:
    Request models use StrictRequest (extra="forbid") to reject unknown fields.
    This catches frontend/backend mismatches early with clear 422 errors.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import AwareDatetime, Field

from app.enums.learning import ExerciseKind, GoalAdjustment
from app.models.base import StrictRequest, StrictResponse
from app.models.catalog import PlayerItem


# ===========================================
# Attempts
# ===========================================


class AttemptSubmitRequest(StrictRequest):
    """
    Request to submit an answer for one item.

    The answer is the raw text the learner typed, the option they selected,
    or the speech transcript. An empty answer is accepted and judged
    incorrect rather than rejected.
    """

    item_id: str = Field(..., description="Item being answered")
    answer: str = Field("", max_length=2000, description="Raw answer text")


class ReviewStateResponse(StrictResponse):
    """SM-2 schedule for one (learner, item) pair."""

    item_id: str
    ease_factor: float = Field(..., ge=1.3)
    interval: int = Field(..., ge=0, description="Days until next review")
    repetition_count: int = Field(..., ge=0)
    next_due: datetime
    last_reviewed: datetime


class AttemptResult(StrictResponse):
    """
    Verdict for a submitted answer.

    The canonical answer and explanation are revealed after submission
    regardless of correctness.
    """

    item_id: str
    correct: bool
    xp_awarded: int = Field(..., ge=0)
    correct_answer: str
    explanation: Optional[str] = None
    review: ReviewStateResponse
    total_xp: int = Field(..., ge=0)
    streak: int = Field(..., ge=0)


# ===========================================
# Review Queue
# ===========================================


class DueItem(StrictResponse):
    """A due item together with its current schedule."""

    item: PlayerItem
    review: ReviewStateResponse


class DueItemsResponse(StrictResponse):
    """Items whose next review time has passed."""

    items: list[DueItem]
    total_due: int


class ReviewForecast(StrictResponse):
    """
    Forecast of upcoming reviews.

    Buckets are disjoint; a review is counted in exactly one of them.
    """

    overdue: int = 0
    today: int = 0
    tomorrow: int = 0
    this_week: int = 0
    later: int = 0


class ReviewStats(StrictResponse):
    """Summary of a learner's review pool."""

    total_scheduled: int
    due_now: int
    forecast: ReviewForecast


# ===========================================
# Lesson Progress & Profile
# ===========================================


class LessonCompleteRequest(StrictRequest):
    """
    Mark a lesson as completed.

    started_at bounds which attempts count toward the lesson's XP. When
    omitted, every attempt the learner made on the lesson's items counts.
    """

    started_at: Optional[AwareDatetime] = Field(
        None, description="When the learner started this lesson run"
    )


class LessonProgressResponse(StrictResponse):
    """Completion summary for one (learner, lesson) pair."""

    lesson_id: str
    xp_earned: int = Field(..., ge=0)
    completed: bool
    completed_at: Optional[datetime] = None


class ProfileResponse(StrictResponse):
    """Learner profile."""

    id: str
    email: Optional[str] = None
    xp: int = 0
    streak: int = 0
    last_active: Optional[date] = None
    daily_goal_xp: int
    daily_goal_last_adjusted: Optional[date] = None


class DailyGoalStatus(StrictResponse):
    """Today's progress toward the (possibly just adjusted) daily goal."""

    daily_goal_xp: int
    adjustment: GoalAdjustment
    last_adjusted: Optional[date] = None
    today_xp: int = 0
    goal_percent: float = Field(0.0, ge=0.0, le=100.0)
    lessons_completed: int = 0


# ===========================================
# Analytics
# ===========================================


class XpTrendPoint(StrictResponse):
    """Cumulative XP at the end of one day with completed lessons."""

    day: date
    xp_earned: int
    cumulative_xp: int


class LessonFunnel(StrictResponse):
    """How far the learner has gone through the catalog."""

    total_lessons: int
    attempted_lessons: int
    completed_lessons: int


class ReviewSplit(StrictResponse):
    """Due versus scheduled-later review states."""

    due: int
    scheduled: int


class LearnerAnalytics(StrictResponse):
    """Dashboard analytics for one learner."""

    xp_trend: list[XpTrendPoint] = Field(default_factory=list)
    funnel: LessonFunnel
    reviews: ReviewSplit
    total_attempts: int = 0
    correct_attempts: int = 0
    accuracy: float = Field(0.0, ge=0.0, le=1.0)


# ===========================================
# AI Feedback
# ===========================================


class FeedbackRequest(StrictRequest):
    """Request advisory tutor feedback on an answer."""

    item_id: str
    answer: str = Field(..., min_length=1, max_length=2000)


class FeedbackResponse(StrictResponse):
    """
    Advisory tutor feedback.

    available is False when no LLM is configured or the call failed; the
    client then shows its built-in message.
    """

    item_id: str
    kind: ExerciseKind
    available: bool
    feedback: Optional[str] = None
