"""
Practice streak tracking.

A streak counts consecutive calendar days with at least one submitted
answer. It is advanced on every attempt submission.
"""

from datetime import date, timedelta
from typing import Optional


def advance_streak(
    streak: int,
    last_active: Optional[date],
    today: date,
) -> tuple[int, date]:
    """
    Update a streak for activity on today.

    Args:
        streak: Current streak in days.
        last_active: Date of the learner's previous activity.
        today: Date of the new activity.

    Returns:
        (new streak, new last_active). Activity on the same day leaves the
        streak unchanged; activity the day after extends it; anything else
        (first activity, gap of more than one day) restarts it at 1.
    """
    if last_active == today:
        return max(streak, 1), today
    if last_active is not None and last_active == today - timedelta(days=1):
        return streak + 1, today
    return 1, today
