"""
SQLAlchemy Database Models for the Learning System

These models support SM-2 review scheduling, attempt history and lesson
progress.

Tables:
- review_states: Per (learner, item) spaced repetition state
- exercise_attempts: Append-only log of every submitted answer
- lesson_progress: Per (learner, lesson) completion summary (upserted)

ARCHITECTURE NOTE:
    This file contains SQLALCHEMY models for database persistence.
    There is a corresponding Pydantic file: app/models/learning.py

    Data flows: Service Layer → Pydantic → SQLAlchemy → Database
"""

from datetime import datetime, timezone
from typing import Optional
import uuid


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _new_id() -> str:
    """Generate a UUID string primary key."""
    return str(uuid.uuid4())


from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


# ===========================================
# Spaced Repetition State (SM-2)
# ===========================================


class ReviewState(Base):
    """
    Spaced repetition record for one learner and one item.

    Created lazily on the learner's first attempt at the item, updated on
    every later attempt, never deleted.

    Attributes:
        id: UUID string primary key.
        learner_id: Learner the state belongs to.
        item_id: Item being scheduled. Set to NULL if the item is deleted.
        ease_factor: SM-2 multiplier for interval growth, never below 1.3.
        interval: Days between last_reviewed and next_due, never negative.
        repetition_count: Consecutive correct reviews since the last lapse.
        next_due: When the item re-enters the learner's review queue.
            Always equals last_reviewed + interval days.
        last_reviewed: Timestamp of the most recent scheduled review.
    """

    __tablename__ = "review_states"
    __table_args__ = (
        UniqueConstraint("learner_id", "item_id", name="uq_review_state_learner_item"),
        Index("ix_review_state_learner_due", "learner_id", "next_due"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    learner_id: Mapped[str] = mapped_column(String(64))
    item_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("items.id", ondelete="SET NULL"), nullable=True
    )

    # SM-2 state
    ease_factor: Mapped[float] = mapped_column(Float, default=2.5)
    interval: Mapped[int] = mapped_column(Integer, default=0)
    repetition_count: Mapped[int] = mapped_column(Integer, default=0)

    # Scheduling
    next_due: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    last_reviewed: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )

    item: Mapped[Optional["Item"]] = relationship()  # noqa: F821


# ===========================================
# Attempts & Progress
# ===========================================


class ExerciseAttempt(Base):
    """
    Immutable record of one answer submission.

    Attributes:
        learner_id: Learner who answered.
        item_id: Item answered. Set to NULL if the item is deleted.
        submitted_answer: Raw answer text (typed, selected or transcribed).
        correct: Verdict of the answer judge.
        score: XP awarded by the scoring policy.
        created_at: Submission time.
    """

    __tablename__ = "exercise_attempts"
    __table_args__ = (
        Index("ix_attempt_learner_created", "learner_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    learner_id: Mapped[str] = mapped_column(String(64))
    item_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("items.id", ondelete="SET NULL"), nullable=True
    )
    submitted_answer: Mapped[str] = mapped_column(Text)
    correct: Mapped[bool] = mapped_column(Boolean)
    score: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )


class LessonProgress(Base):
    """
    Completion summary for one learner and one lesson.

    At most one row exists per pair; completing the lesson again overwrites
    the XP and completion time.
    """

    __tablename__ = "lesson_progress"
    __table_args__ = (
        UniqueConstraint("learner_id", "lesson_id", name="uq_progress_learner_lesson"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    learner_id: Mapped[str] = mapped_column(String(64), index=True)
    lesson_id: Mapped[str] = mapped_column(
        ForeignKey("lessons.id", ondelete="CASCADE")
    )
    xp_earned: Mapped[int] = mapped_column(Integer, default=0)
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )
