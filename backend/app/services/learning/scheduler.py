"""
SM-2 Spaced Repetition Scheduler

Pure scheduling functions for per-(learner, item) review state. The
database row (app.db.models_learning.ReviewState) stores the same fields;
this module never touches the database.

State machine:
    - No prior state: repetitions 0, ease 2.5, interval 0
    - Correct: repetitions + 1; interval 1 day, then 6 days, then
      round(previous interval × ease); ease nudged up, capped
    - Incorrect: repetitions 0, interval 0, ease lowered to a floor of 1.3;
      the item is due again immediately

    next_due = last_reviewed + interval days, always.

Usage:
    from app.services.learning.scheduler import schedule, is_due

    state = schedule(None, correct=True, now=now)      # interval 1
    state = schedule(state, correct=True, now=later)   # interval 6
    is_due(state, now)                                 # False
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
import logging

from app.config import settings

logger = logging.getLogger(__name__)


@dataclass
class ReviewSchedule:
    """
    SM-2 scheduling state.

    Mirrors the scheduling columns of the review_states table. Any object
    exposing these attributes (including the ORM row) can be passed to
    schedule() as the prior state.
    """

    ease_factor: float
    interval: int  # Days
    repetition_count: int
    next_due: Optional[datetime] = None
    last_reviewed: Optional[datetime] = None

    @classmethod
    def initial(cls) -> "ReviewSchedule":
        """State used for an item the learner has never attempted."""
        return cls(
            ease_factor=settings.SM2_INITIAL_EASE_FACTOR,
            interval=0,
            repetition_count=0,
        )

    @classmethod
    def from_record(cls, record: Any) -> "ReviewSchedule":
        """Copy the scheduling fields off a ReviewState row."""
        return cls(
            ease_factor=record.ease_factor,
            interval=record.interval,
            repetition_count=record.repetition_count,
            next_due=record.next_due,
            last_reviewed=record.last_reviewed,
        )


class SM2Scheduler:
    """
    SM-2 scheduler with configurable constants.

    Attributes:
        min_ease: Ease factor floor.
        max_ease: Ease factor ceiling.
        ease_bonus: Added to the ease factor on a correct review.
        ease_penalty: Subtracted from the ease factor on a lapse.
        first_interval: Interval in days after the first correct review.
        second_interval: Interval in days after the second correct review.
    """

    def __init__(
        self,
        min_ease: float = None,
        max_ease: float = None,
        ease_bonus: float = None,
        ease_penalty: float = None,
        first_interval: int = None,
        second_interval: int = None,
    ):
        self.min_ease = settings.SM2_MIN_EASE_FACTOR if min_ease is None else min_ease
        self.max_ease = settings.SM2_MAX_EASE_FACTOR if max_ease is None else max_ease
        self.ease_bonus = settings.SM2_EASE_BONUS if ease_bonus is None else ease_bonus
        self.ease_penalty = (
            settings.SM2_EASE_PENALTY if ease_penalty is None else ease_penalty
        )
        self.first_interval = (
            settings.SM2_FIRST_INTERVAL_DAYS if first_interval is None else first_interval
        )
        self.second_interval = (
            settings.SM2_SECOND_INTERVAL_DAYS
            if second_interval is None
            else second_interval
        )

    def schedule(
        self,
        state: Optional[Any],
        correct: bool,
        now: datetime,
    ) -> ReviewSchedule:
        """
        Apply one review to a scheduling state.

        Args:
            state: Prior state (ReviewSchedule or ReviewState row), or None
                for the learner's first attempt at the item.
            correct: Verdict of the answer judge.
            now: Review time. Must be provided.

        Returns:
            New ReviewSchedule. The input is not modified.

        Raises:
            ValueError: If now is None.
        """
        if now is None:
            raise ValueError("Review time is required")

        prior = (
            ReviewSchedule.initial()
            if state is None
            else ReviewSchedule.from_record(state)
        )

        review_time = now
        if prior.last_reviewed is not None and now < prior.last_reviewed:
            # Clock went backwards; never schedule before the last review
            logger.warning(
                f"Review time {now.isoformat()} is before last review "
                f"{prior.last_reviewed.isoformat()}, clamping"
            )
            review_time = prior.last_reviewed

        ease = max(self.min_ease, prior.ease_factor)

        if correct:
            repetitions = prior.repetition_count + 1
            if repetitions == 1:
                interval = self.first_interval
            elif repetitions == 2:
                interval = self.second_interval
            else:
                interval = round(prior.interval * ease)
            ease = min(self.max_ease, round(ease + self.ease_bonus, 2))
        else:
            repetitions = 0
            interval = 0
            ease = max(self.min_ease, round(ease - self.ease_penalty, 2))

        interval = max(0, interval)

        return ReviewSchedule(
            ease_factor=ease,
            interval=interval,
            repetition_count=repetitions,
            next_due=review_time + timedelta(days=interval),
            last_reviewed=review_time,
        )


def create_scheduler(**overrides) -> SM2Scheduler:
    """Create a scheduler using settings defaults, with optional overrides."""
    return SM2Scheduler(**overrides)


_default_scheduler: Optional[SM2Scheduler] = None


def _get_default_scheduler() -> SM2Scheduler:
    global _default_scheduler
    if _default_scheduler is None:
        _default_scheduler = SM2Scheduler()
    return _default_scheduler


def schedule(
    state: Optional[Any],
    correct: bool,
    now: datetime,
) -> ReviewSchedule:
    """Apply one review using the default SM-2 constants."""
    return _get_default_scheduler().schedule(state, correct, now)


def is_due(state: Optional[Any], now: datetime) -> bool:
    """
    Whether an item is in the learner's review queue.

    Items without a schedule have never been attempted and are not due.
    """
    if state is None or state.next_due is None:
        return False
    return state.next_due <= now


def get_review_forecast(
    due_dates: list[datetime],
    as_of: Optional[datetime] = None,
) -> dict[str, int]:
    """
    Bucket upcoming review times.

    Args:
        due_dates: next_due values of a learner's review states.
        as_of: Reference time (default: now).

    Returns:
        Dict with counts: overdue, today, tomorrow, this_week, later.
        Items already due today count as today, not overdue.
    """
    as_of = as_of or datetime.now(timezone.utc)
    today_start = as_of.replace(hour=0, minute=0, second=0, microsecond=0)
    tomorrow_start = today_start + timedelta(days=1)
    week_end = today_start + timedelta(days=7)

    forecast = {
        "overdue": 0,
        "today": 0,
        "tomorrow": 0,
        "this_week": 0,
        "later": 0,
    }

    for due in due_dates:
        if due < today_start:
            forecast["overdue"] += 1
        elif due < tomorrow_start:
            forecast["today"] += 1
        elif due < tomorrow_start + timedelta(days=1):
            forecast["tomorrow"] += 1
        elif due < week_end:
            forecast["this_week"] += 1
        else:
            forecast["later"] += 1

    return forecast
