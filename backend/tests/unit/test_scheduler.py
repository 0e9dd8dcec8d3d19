"""
Unit tests for the SM-2 scheduler.

Tests the pure scheduling functions:
- Interval growth over consecutive correct reviews
- Lapse handling
- Ease factor bounds
- Due predicate and forecast buckets
"""

from datetime import datetime, timedelta, timezone
import random

import pytest

from app.services.learning.scheduler import (
    ReviewSchedule,
    SM2Scheduler,
    create_scheduler,
    get_review_forecast,
    is_due,
    schedule,
)


@pytest.fixture
def start():
    return datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestFirstReview:
    """Tests for an item the learner has never attempted."""

    def test_first_correct(self, start):
        state = schedule(None, correct=True, now=start)

        assert state.repetition_count == 1
        assert state.interval == 1
        assert state.ease_factor == pytest.approx(2.6)
        assert state.last_reviewed == start
        assert state.next_due == start + timedelta(days=1)

    def test_first_incorrect(self, start):
        state = schedule(None, correct=False, now=start)

        assert state.repetition_count == 0
        assert state.interval == 0
        assert state.ease_factor == pytest.approx(2.3)
        assert state.next_due == start

    def test_requires_review_time(self):
        with pytest.raises(ValueError):
            schedule(None, correct=True, now=None)


class TestIntervalGrowth:
    """Tests for consecutive correct reviews."""

    def test_worked_sequence(self, start):
        """1, 6, then round(6 × 2.7) = 16 days."""
        s1 = schedule(None, True, start)
        s2 = schedule(s1, True, s1.next_due)
        s3 = schedule(s2, True, s2.next_due)

        assert [s1.interval, s2.interval, s3.interval] == [1, 6, 16]
        assert [s1.ease_factor, s2.ease_factor, s3.ease_factor] == pytest.approx(
            [2.6, 2.7, 2.8]
        )
        assert s3.repetition_count == 3
        assert s3.next_due == s2.next_due + timedelta(days=16)

    def test_lapse_after_streak(self, start):
        s = None
        now = start
        for _ in range(3):
            s = schedule(s, True, now)
            now = s.next_due

        lapsed = schedule(s, False, now)

        assert lapsed.repetition_count == 0
        assert lapsed.interval == 0
        assert lapsed.ease_factor == pytest.approx(2.6)
        assert lapsed.next_due == now

    def test_relearning_restarts_intervals(self, start):
        lapsed = schedule(None, False, start)
        again = schedule(lapsed, True, start + timedelta(minutes=5))

        assert again.interval == 1
        assert again.repetition_count == 1

    def test_does_not_mutate_input(self, start):
        prior = ReviewSchedule(
            ease_factor=2.5,
            interval=6,
            repetition_count=2,
            next_due=start,
            last_reviewed=start - timedelta(days=6),
        )
        schedule(prior, True, start)

        assert prior.interval == 6
        assert prior.repetition_count == 2


class TestEaseBounds:
    """Tests for the ease factor floor and ceiling."""

    def test_floor(self, start):
        s = None
        now = start
        for _ in range(10):
            s = schedule(s, False, now)
            now += timedelta(minutes=1)

        assert s.ease_factor == pytest.approx(1.3)

    def test_ceiling(self, start):
        scheduler = SM2Scheduler(max_ease=2.65)
        s = scheduler.schedule(None, True, start)
        s = scheduler.schedule(s, True, s.next_due)

        assert s.ease_factor == pytest.approx(2.65)

    def test_invariants_over_random_sequences(self, start):
        rng = random.Random(42)
        for _ in range(50):
            s = None
            now = start
            for _ in range(20):
                s = schedule(s, rng.random() < 0.7, now)
                assert 1.3 <= s.ease_factor <= 3.0
                assert s.interval >= 0
                assert s.repetition_count >= 0
                assert s.next_due == s.last_reviewed + timedelta(days=s.interval)
                now = s.next_due + timedelta(hours=rng.randint(0, 48))


class TestClockSkew:
    """Tests for review times earlier than the last review."""

    def test_clamps_to_last_review(self, start):
        prior = schedule(None, True, start)
        earlier = start - timedelta(hours=3)

        s = schedule(prior, True, earlier)

        assert s.last_reviewed == start
        assert s.next_due == start + timedelta(days=s.interval)


class TestIsDue:
    """Tests for the due predicate."""

    def test_due_boundary(self, start):
        state = schedule(None, True, start)

        assert is_due(state, start + timedelta(days=1)) is True
        assert is_due(state, start + timedelta(days=1, seconds=1)) is True
        assert is_due(state, start + timedelta(hours=23)) is False

    def test_lapsed_item_due_immediately(self, start):
        state = schedule(None, False, start)
        assert is_due(state, start) is True

    def test_unseen_item_not_due(self, start):
        assert is_due(None, start) is False


class TestCreateScheduler:
    """Tests for scheduler construction."""

    def test_defaults_from_settings(self):
        scheduler = create_scheduler()

        assert scheduler.min_ease == pytest.approx(1.3)
        assert scheduler.max_ease == pytest.approx(3.0)
        assert scheduler.first_interval == 1
        assert scheduler.second_interval == 6

    def test_overrides(self):
        scheduler = create_scheduler(first_interval=2, ease_bonus=0.0)

        assert scheduler.first_interval == 2
        assert scheduler.ease_bonus == 0.0

    def test_zero_overrides_are_kept(self, start):
        scheduler = create_scheduler(
            min_ease=0.0, first_interval=0, second_interval=0
        )

        assert scheduler.min_ease == 0.0
        assert scheduler.first_interval == 0
        assert scheduler.second_interval == 0

        state = scheduler.schedule(None, correct=True, now=start)

        assert state.interval == 0
        assert state.next_due == start


class TestReviewForecast:
    """Tests for forecast bucketing."""

    def test_buckets(self, start):
        today_start = start.replace(hour=0, minute=0)
        due_dates = [
            today_start - timedelta(hours=1),  # overdue
            start - timedelta(hours=2),  # today, already due
            start + timedelta(hours=3),  # today
            today_start + timedelta(days=1, hours=5),  # tomorrow
            today_start + timedelta(days=4),  # this week
            today_start + timedelta(days=30),  # later
        ]

        forecast = get_review_forecast(due_dates, as_of=start)

        assert forecast == {
            "overdue": 1,
            "today": 2,
            "tomorrow": 1,
            "this_week": 1,
            "later": 1,
        }

    def test_empty(self, start):
        assert sum(get_review_forecast([], as_of=start).values()) == 0
