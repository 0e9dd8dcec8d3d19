"""
SQLAlchemy Database Models for the Course Catalog

These models define the PostgreSQL schema for the catalog and learner
profiles. Catalog rows are edited through the admin API only.

Tables:
- courses: Language courses (e.g. English -> Spanish)
- lessons: Ordered lessons within a course
- items: Ordered exercises within a lesson
- profiles: Per-learner aggregate state (XP, streak, daily goal)
- playlists: Learner-curated lesson playlists
- playlist_lessons: Ordered lessons within a playlist
"""

from datetime import date, datetime, timezone
from typing import List, Optional
import uuid

from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _new_id() -> str:
    """Generate a UUID string primary key."""
    return str(uuid.uuid4())


class Course(Base):
    """
    A language course.

    Attributes:
        id: UUID string primary key.
        title: Display title (e.g. "Spanish for Beginners").
        description: Optional longer description.
        language_from: Language the learner already speaks.
        language_to: Language being learned. Also used to pick the tutor
            persona for AI feedback and the speech recognition locale.
        flag_emoji: Optional emoji shown next to the title.
        lessons: Lessons in this course, ordered by order_index.
    """

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text)
    language_from: Mapped[str] = mapped_column(String(50))
    language_to: Mapped[str] = mapped_column(String(50))
    flag_emoji: Mapped[Optional[str]] = mapped_column(String(16))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )

    lessons: Mapped[List["Lesson"]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Lesson.order_index",
    )


class Lesson(Base):
    """
    A lesson within a course.

    Attributes:
        id: UUID string primary key.
        course_id: Owning course.
        title: Display title.
        order_index: 1-based position within the course. Also drives the
            XP requirement for unlocking the lesson.
        items: Exercises in this lesson, ordered by order_index.
    """

    __tablename__ = "lessons"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    course_id: Mapped[str] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), index=True
    )
    title: Mapped[str] = mapped_column(String(200))
    order_index: Mapped[int] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )

    course: Mapped["Course"] = relationship(back_populates="lessons")
    items: Mapped[List["Item"]] = relationship(
        back_populates="lesson",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Item.order_index",
    )


class Item(Base):
    """
    One exercise unit.

    Attributes:
        id: UUID string primary key.
        lesson_id: Owning lesson.
        kind: Exercise kind (multiple_choice, fill_blank, translate, speaking).
        question: Prompt shown to the learner.
        correct_answer: Canonical answer used by the answer judge.
        options: Ordered distractor options for choice-based kinds.
        audio_url: Optional pronunciation audio.
        explanation: Optional explanation shown after answering.
        hint: Optional hint the learner can reveal before answering.
        order_index: Position within the lesson.
    """

    __tablename__ = "items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    lesson_id: Mapped[str] = mapped_column(
        ForeignKey("lessons.id", ondelete="CASCADE"), index=True
    )
    kind: Mapped[str] = mapped_column(String(30))
    question: Mapped[str] = mapped_column(Text)
    correct_answer: Mapped[str] = mapped_column(Text)
    options: Mapped[Optional[list]] = mapped_column(JSON)
    audio_url: Mapped[Optional[str]] = mapped_column(String(2000))
    explanation: Mapped[Optional[str]] = mapped_column(Text)
    hint: Mapped[Optional[str]] = mapped_column(Text)
    order_index: Mapped[int] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )

    lesson: Mapped["Lesson"] = relationship(back_populates="items")


class Profile(Base):
    """
    Per-learner aggregate state.

    The primary key is the learner id issued by the identity provider.

    Attributes:
        id: Learner id.
        email: Optional contact email.
        xp: Cumulative XP. Incremented by every scored attempt.
        streak: Consecutive active days.
        last_active: Calendar date of the most recent attempt.
        daily_goal_xp: Current daily XP target.
        daily_goal_last_adjusted: Date the goal was last evaluated.
    """

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String(320))
    xp: Mapped[int] = mapped_column(Integer, default=0)
    streak: Mapped[int] = mapped_column(Integer, default=0)
    last_active: Mapped[Optional[date]] = mapped_column(Date)
    daily_goal_xp: Mapped[int] = mapped_column(Integer, default=30)
    daily_goal_last_adjusted: Mapped[Optional[date]] = mapped_column(Date)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )


class Playlist(Base):
    """
    A learner-curated sequence of lessons, possibly across courses.

    Attributes:
        owner_id: Learner who owns the playlist.
        title: Required display title.
        description: Optional description.
        focus_tag: Optional free-form tag (e.g. "travel", "verbs").
        lessons: Playlist entries ordered by order_index.
    """

    __tablename__ = "playlists"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    owner_id: Mapped[str] = mapped_column(String(64), index=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text)
    focus_tag: Mapped[Optional[str]] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, onupdate=_utc_now
    )

    lessons: Mapped[List["PlaylistLesson"]] = relationship(
        back_populates="playlist",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PlaylistLesson.order_index",
    )


class PlaylistLesson(Base):
    """Ordered playlist entry pointing at a lesson."""

    __tablename__ = "playlist_lessons"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    playlist_id: Mapped[str] = mapped_column(
        ForeignKey("playlists.id", ondelete="CASCADE"), index=True
    )
    lesson_id: Mapped[str] = mapped_column(
        ForeignKey("lessons.id", ondelete="CASCADE")
    )
    order_index: Mapped[int] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )

    playlist: Mapped["Playlist"] = relationship(back_populates="lessons")
    lesson: Mapped["Lesson"] = relationship()
