"""
Unit tests for daily goal adaptation and streak tracking.
"""

from datetime import date, timedelta

from app.enums.learning import GoalAdjustment
from app.services.learning.daily_goal import adjust_goal, apply_daily_goal
from app.services.learning.streak import advance_streak

TODAY = date(2024, 3, 10)
YESTERDAY = TODAY - timedelta(days=1)


class TestApplyDailyGoal:
    """Tests for the closed-loop goal adjustment."""

    def test_raises_goal(self):
        # avg 40/day > 30 × 1.2
        update = apply_daily_goal(30, YESTERDAY, trailing_xp=280, today=TODAY)

        assert update.goal == 35
        assert update.adjustment == GoalAdjustment.RAISED
        assert update.last_adjusted == TODAY
        assert update.changed is True

    def test_lowers_goal(self):
        # avg 10/day < 30 × 0.5
        update = apply_daily_goal(30, YESTERDAY, trailing_xp=70, today=TODAY)

        assert update.goal == 25
        assert update.adjustment == GoalAdjustment.LOWERED

    def test_unchanged_still_stamps_today(self):
        update = apply_daily_goal(30, YESTERDAY, trailing_xp=210, today=TODAY)

        assert update.goal == 30
        assert update.adjustment == GoalAdjustment.UNCHANGED
        assert update.last_adjusted == TODAY
        assert update.changed is True

    def test_thresholds_are_strict(self):
        # avg exactly 36 = 30 × 1.2 and exactly 15 = 30 × 0.5
        assert apply_daily_goal(30, None, 252, TODAY).goal == 30
        assert apply_daily_goal(30, None, 105, TODAY).goal == 30

    def test_skipped_when_already_adjusted_today(self):
        update = apply_daily_goal(30, TODAY, trailing_xp=10_000, today=TODAY)

        assert update.goal == 30
        assert update.last_adjusted == TODAY
        assert update.adjustment == GoalAdjustment.SKIPPED
        assert update.changed is False

    def test_first_evaluation(self):
        update = apply_daily_goal(30, None, trailing_xp=0, today=TODAY)

        assert update.goal == 25
        assert update.last_adjusted == TODAY

    def test_ceiling_over_many_days(self):
        goal, adjusted = 110, None
        day = TODAY
        for _ in range(10):
            goal, adjusted = adjust_goal(goal, 10_000, adjusted, day)
            day += timedelta(days=1)

        assert goal == 120

    def test_floor_over_many_days(self):
        goal, adjusted = 30, None
        day = TODAY
        for _ in range(10):
            goal, adjusted = adjust_goal(goal, 0, adjusted, day)
            day += timedelta(days=1)

        assert goal == 15

    def test_idempotent_within_a_day(self):
        first = adjust_goal(30, 280, YESTERDAY, TODAY)
        second = adjust_goal(first[0], 280, first[1], TODAY)

        assert first == (35, TODAY)
        assert second == first


class TestAdvanceStreak:
    """Tests for practice streak tracking."""

    def test_first_activity(self):
        assert advance_streak(0, None, TODAY) == (1, TODAY)

    def test_consecutive_day(self):
        assert advance_streak(4, YESTERDAY, TODAY) == (5, TODAY)

    def test_same_day(self):
        assert advance_streak(4, TODAY, TODAY) == (4, TODAY)

    def test_same_day_never_zero(self):
        assert advance_streak(0, TODAY, TODAY) == (1, TODAY)

    def test_gap_resets(self):
        assert advance_streak(9, TODAY - timedelta(days=3), TODAY) == (1, TODAY)
