"""Pydantic request/response models."""

from app.models.base import ErrorDetail, StrictRequest, StrictResponse, SuccessResponse
from app.models.catalog import (
    CourseCreate,
    CourseLessonsResponse,
    CourseResponse,
    CourseUpdate,
    ItemCreate,
    ItemResponse,
    ItemUpdate,
    LessonCreate,
    LessonResponse,
    LessonUpdate,
    LessonWithProgress,
    PlayerItem,
    PlaylistCreate,
    PlaylistLessonEntry,
    PlaylistResponse,
    SpeechLocaleResponse,
)
from app.models.learning import (
    AttemptResult,
    AttemptSubmitRequest,
    DailyGoalStatus,
    DueItem,
    DueItemsResponse,
    FeedbackRequest,
    FeedbackResponse,
    LearnerAnalytics,
    LessonCompleteRequest,
    LessonFunnel,
    LessonProgressResponse,
    ProfileResponse,
    ReviewForecast,
    ReviewSplit,
    ReviewStateResponse,
    ReviewStats,
    XpTrendPoint,
)

__all__ = [
    "ErrorDetail",
    "StrictRequest",
    "StrictResponse",
    "SuccessResponse",
    "CourseCreate",
    "CourseLessonsResponse",
    "CourseResponse",
    "CourseUpdate",
    "ItemCreate",
    "ItemResponse",
    "ItemUpdate",
    "LessonCreate",
    "LessonResponse",
    "LessonUpdate",
    "LessonWithProgress",
    "PlayerItem",
    "PlaylistCreate",
    "PlaylistLessonEntry",
    "PlaylistResponse",
    "SpeechLocaleResponse",
    "AttemptResult",
    "AttemptSubmitRequest",
    "DailyGoalStatus",
    "DueItem",
    "DueItemsResponse",
    "FeedbackRequest",
    "FeedbackResponse",
    "LearnerAnalytics",
    "LessonCompleteRequest",
    "LessonFunnel",
    "LessonProgressResponse",
    "ProfileResponse",
    "ReviewForecast",
    "ReviewSplit",
    "ReviewStateResponse",
    "ReviewStats",
    "XpTrendPoint",
]
