"""
Centralized enum definitions for the application.

All enums are organized by domain:
- learning.py: Exercise kinds, daily goal adjustments
- api.py: Rate limit categories

Usage:
    from app.enums import ExerciseKind, RateLimitType

    # Or import from specific module
    from app.enums.learning import ExerciseKind
"""

from app.enums.learning import (
    ExerciseKind,
    GoalAdjustment,
)
from app.enums.api import (
    RateLimitType,
)

__all__ = [
    # Learning
    "ExerciseKind",
    "GoalAdjustment",
    # API
    "RateLimitType",
]
