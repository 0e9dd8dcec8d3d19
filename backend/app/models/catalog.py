"""
Course Catalog API Models (Pydantic)

Request/response schemas for courses, lessons, items and playlists.

ARCHITECTURE NOTE:
    This file contains PYDANTIC models for API validation.
    There is a corresponding SQLAlchemy file: app/db/models.py
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import Field, field_validator

from app.enums.learning import ExerciseKind
from app.models.base import StrictRequest, StrictResponse


def parse_options(value: Union[str, list[str], None]) -> Optional[list[str]]:
    """
    Normalize an options payload into a clean list.

    The admin form submits options as one comma-separated string
    ("Hola, Adiós, Gracias"); API clients may send a list. Entries are
    trimmed and blanks dropped. An empty result becomes None.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.split(",")
    options = [str(option).strip() for option in value]
    options = [option for option in options if option]
    return options or None


# ===========================================
# Courses
# ===========================================


class CourseCreate(StrictRequest):
    """Admin request to create a course."""

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    language_from: str = Field(..., min_length=1, max_length=50)
    language_to: str = Field(..., min_length=1, max_length=50)
    flag_emoji: Optional[str] = Field(None, max_length=16)


class CourseUpdate(StrictRequest):
    """Admin request to update a course. Omitted fields are left as-is."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    language_from: Optional[str] = Field(None, min_length=1, max_length=50)
    language_to: Optional[str] = Field(None, min_length=1, max_length=50)
    flag_emoji: Optional[str] = Field(None, max_length=16)


class CourseResponse(StrictResponse):
    """Course as returned to learners and admins."""

    id: str
    title: str
    description: Optional[str] = None
    language_from: str
    language_to: str
    flag_emoji: Optional[str] = None
    created_at: Optional[datetime] = None


# ===========================================
# Lessons
# ===========================================


class LessonCreate(StrictRequest):
    """Admin request to create a lesson."""

    course_id: str
    title: str = Field(..., min_length=1, max_length=200)
    order_index: int = Field(1, ge=1)


class LessonUpdate(StrictRequest):
    """Admin request to update a lesson."""

    course_id: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    order_index: Optional[int] = Field(None, ge=1)


class LessonResponse(StrictResponse):
    """Lesson without learner-specific state."""

    id: str
    course_id: str
    title: str
    order_index: int
    created_at: Optional[datetime] = None


class LessonWithProgress(LessonResponse):
    """
    Lesson annotated for one learner.

    unlocked is True when the lesson is completed, or when the previous
    lesson is completed (always true for the first lesson) and the
    learner's XP meets xp_required.
    """

    completed: bool = False
    unlocked: bool = False
    xp_required: int = 0


class CourseLessonsResponse(StrictResponse):
    """A course with its lessons and the learner's progress through them."""

    course: CourseResponse
    lessons: list[LessonWithProgress]
    completed_count: int
    progress_percent: float = Field(..., ge=0.0, le=100.0)


# ===========================================
# Items
# ===========================================


class ItemCreate(StrictRequest):
    """Admin request to create an item."""

    lesson_id: str
    kind: ExerciseKind = ExerciseKind.MULTIPLE_CHOICE
    question: str = Field(..., min_length=1)
    correct_answer: str = Field(..., min_length=1)
    options: Optional[list[str]] = Field(
        None, description="List of options or a comma-separated string"
    )
    audio_url: Optional[str] = None
    explanation: Optional[str] = None
    hint: Optional[str] = None
    order_index: int = Field(1, ge=0)

    @field_validator("options", mode="before")
    @classmethod
    def _split_options(cls, value):
        return parse_options(value)


class ItemUpdate(StrictRequest):
    """Admin request to update an item."""

    lesson_id: Optional[str] = None
    kind: Optional[ExerciseKind] = None
    question: Optional[str] = Field(None, min_length=1)
    correct_answer: Optional[str] = Field(None, min_length=1)
    options: Optional[list[str]] = None
    audio_url: Optional[str] = None
    explanation: Optional[str] = None
    hint: Optional[str] = None
    order_index: Optional[int] = Field(None, ge=0)

    @field_validator("options", mode="before")
    @classmethod
    def _split_options(cls, value):
        return parse_options(value)


class PlayerItem(StrictResponse):
    """
    Item as shown in the exercise player.

    The canonical answer is withheld; learners get it back in the attempt
    result after submitting.
    """

    id: str
    lesson_id: str
    kind: ExerciseKind
    question: str
    options: Optional[list[str]] = None
    audio_url: Optional[str] = None
    hint: Optional[str] = None
    order_index: int


class ItemResponse(PlayerItem):
    """Full item including the canonical answer (admin view)."""

    correct_answer: str
    explanation: Optional[str] = None
    created_at: Optional[datetime] = None


class SpeechLocaleResponse(StrictResponse):
    """Speech recognition locale for a lesson's target language."""

    lesson_id: str
    language: str
    locale: str


# ===========================================
# Playlists
# ===========================================


class PlaylistCreate(StrictRequest):
    """Learner request to create a playlist from an ordered set of lessons."""

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    focus_tag: Optional[str] = Field(None, max_length=100)
    lesson_ids: list[str] = Field(default_factory=list)


class PlaylistLessonEntry(StrictResponse):
    """One lesson inside a playlist."""

    lesson_id: str
    order_index: int
    title: str
    course_id: str
    course_title: Optional[str] = None
    flag_emoji: Optional[str] = None


class PlaylistResponse(StrictResponse):
    """Playlist with its ordered lessons."""

    id: str
    owner_id: str
    title: str
    description: Optional[str] = None
    focus_tag: Optional[str] = None
    created_at: Optional[datetime] = None
    lessons: list[PlaylistLessonEntry] = Field(default_factory=list)
