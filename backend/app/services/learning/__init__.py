"""
Learning System Services

Answer evaluation, SM-2 review scheduling, gamification and the course
catalog.

Modules:
- answers: Answer normalization, judging and scoring
- scheduler: SM-2 scheduling and due predicate
- daily_goal: Adaptive daily XP goal
- streak: Practice streak tracking
- review_service: Attempt submission and review queue
- progress_service: Lesson completion, profile, daily goal, analytics
- catalog_service: Courses, lessons, items and playlists
- feedback: Advisory AI tutor feedback
- speech: Speech recognition locale lookup

Usage:
    from app.services.learning import (
        ReviewService,
        ProgressService,
        CatalogService,
        FeedbackService,
    )
"""

from app.services.learning.answers import judge, normalize, score
from app.services.learning.catalog_service import CatalogService
from app.services.learning.daily_goal import adjust_goal, apply_daily_goal
from app.services.learning.feedback import FeedbackService
from app.services.learning.progress_service import ProgressService
from app.services.learning.review_service import ReviewService
from app.services.learning.scheduler import (
    ReviewSchedule,
    SM2Scheduler,
    create_scheduler,
    get_review_forecast,
    is_due,
    schedule,
)
from app.services.learning.speech import speech_locale
from app.services.learning.streak import advance_streak

__all__ = [
    # Core
    "normalize",
    "judge",
    "score",
    "ReviewSchedule",
    "SM2Scheduler",
    "create_scheduler",
    "schedule",
    "is_due",
    "get_review_forecast",
    "adjust_goal",
    "apply_daily_goal",
    "advance_streak",
    "speech_locale",
    # Services
    "ReviewService",
    "ProgressService",
    "CatalogService",
    "FeedbackService",
]
