"""
Daily Goal Adaptation

Closed-loop adjustment of a learner's daily XP target from the previous
week's throughput. Runs at most once per calendar day; the caller invokes
it when the learner opens the app and persists the result.

    avg = trailing 7-day XP / 7
    avg > goal × 1.2  → goal + 5 (ceiling 120)
    avg < goal × 0.5  → goal - 5 (floor 15)

The thresholds are asymmetric so the goal rises faster than it falls.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from app.config import settings
from app.enums.learning import GoalAdjustment


@dataclass(frozen=True)
class DailyGoalUpdate:
    """Result of a daily goal evaluation."""

    goal: int
    last_adjusted: Optional[date]
    adjustment: GoalAdjustment

    @property
    def changed(self) -> bool:
        """Whether the evaluation ran and needs persisting."""
        return self.adjustment != GoalAdjustment.SKIPPED


def apply_daily_goal(
    goal: int,
    last_adjusted: Optional[date],
    trailing_xp: int,
    today: date,
) -> DailyGoalUpdate:
    """
    Evaluate the daily goal for today.

    Args:
        goal: Current daily XP goal.
        last_adjusted: Date of the previous evaluation, if any.
        trailing_xp: XP earned over the trailing window (7 days).
        today: Learner's current calendar date.

    Returns:
        DailyGoalUpdate. When last_adjusted is already today the goal and
        date are returned unchanged with adjustment SKIPPED. Otherwise
        last_adjusted is stamped to today even if the goal stays the same.
    """
    if last_adjusted == today:
        return DailyGoalUpdate(goal, last_adjusted, GoalAdjustment.SKIPPED)

    avg_per_day = trailing_xp / settings.DAILY_GOAL_WINDOW_DAYS

    if avg_per_day > goal * settings.DAILY_GOAL_RAISE_RATIO:
        new_goal = min(goal + settings.DAILY_GOAL_STEP_XP, settings.DAILY_GOAL_MAX_XP)
    elif avg_per_day < goal * settings.DAILY_GOAL_LOWER_RATIO:
        new_goal = max(goal - settings.DAILY_GOAL_STEP_XP, settings.DAILY_GOAL_MIN_XP)
    else:
        new_goal = goal

    if new_goal > goal:
        adjustment = GoalAdjustment.RAISED
    elif new_goal < goal:
        adjustment = GoalAdjustment.LOWERED
    else:
        adjustment = GoalAdjustment.UNCHANGED

    return DailyGoalUpdate(new_goal, today, adjustment)


def adjust_goal(
    current_goal: int,
    trailing_xp: int,
    last_adjusted: Optional[date],
    today: date,
) -> tuple[int, Optional[date]]:
    """Return (new goal, new adjusted date). See apply_daily_goal()."""
    update = apply_daily_goal(current_goal, last_adjusted, trailing_xp, today)
    return update.goal, update.last_adjusted
