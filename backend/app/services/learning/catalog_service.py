"""
Catalog Service

Course, lesson and item management plus learner playlists.

Responsibilities:
- Admin CRUD for courses, lessons and items
- Learner lesson view with completion and unlock state
- Exercise player item lists (canonical answers withheld)
- Learner playlists spanning lessons across courses

Lesson unlock rule:
    A lesson is unlocked when it is completed, or when the previous lesson
    is completed (always true for the first lesson) and the learner's XP is
    at least max(0, (order_index - 1) × LESSON_UNLOCK_XP_STEP).

Usage:
    from app.services.learning import CatalogService

    service = CatalogService(db)
    course = await service.create_course(CourseCreate(...))
    lessons = await service.get_course_lessons(course.id, "learner-1")
"""

from typing import Optional
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import settings
from app.db.models import Course, Item, Lesson, Playlist, PlaylistLesson, Profile
from app.db.models_learning import LessonProgress
from app.middleware.error_handling import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
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
from app.services.learning.speech import speech_locale

logger = logging.getLogger(__name__)


def lesson_xp_requirement(order_index: int) -> int:
    """XP a learner needs before the lesson at order_index unlocks."""
    return max(0, (order_index - 1) * settings.LESSON_UNLOCK_XP_STEP)


def annotate_lessons(
    lessons: list,
    completed_ids: set[str],
    learner_xp: int,
) -> list[LessonWithProgress]:
    """
    Attach completion and unlock state to lessons ordered by order_index.

    Args:
        lessons: Lesson rows of one course, in order
        completed_ids: Ids of lessons the learner completed
        learner_xp: Learner's cumulative XP

    Returns:
        LessonWithProgress list in the same order
    """
    annotated = []
    previous_completed = True  # The first lesson has no predecessor
    for lesson in lessons:
        completed = lesson.id in completed_ids
        xp_required = lesson_xp_requirement(lesson.order_index)
        unlocked = completed or (previous_completed and learner_xp >= xp_required)
        annotated.append(
            LessonWithProgress(
                id=lesson.id,
                course_id=lesson.course_id,
                title=lesson.title,
                order_index=lesson.order_index,
                created_at=lesson.created_at,
                completed=completed,
                unlocked=unlocked,
                xp_required=xp_required,
            )
        )
        previous_completed = completed
    return annotated


class CatalogService:
    """Service for the course catalog and learner playlists."""

    def __init__(self, db: AsyncSession):
        """
        Initialize the catalog service.

        Args:
            db: Async database session
        """
        self.db = db

    # ===========================================
    # Courses
    # ===========================================

    async def list_courses(self) -> list[CourseResponse]:
        """List all courses, oldest first."""
        result = await self.db.execute(select(Course).order_by(Course.created_at.asc()))
        return [CourseResponse.model_validate(c) for c in result.scalars().all()]

    async def _get_course(self, course_id: str) -> Course:
        course = await self.db.get(Course, course_id)
        if course is None:
            raise NotFoundError(f"Course {course_id} not found")
        return course

    async def get_course(self, course_id: str) -> CourseResponse:
        """Get a course by id."""
        return CourseResponse.model_validate(await self._get_course(course_id))

    async def create_course(self, data: CourseCreate) -> CourseResponse:
        """Create a course."""
        course = Course(**data.model_dump())
        self.db.add(course)
        await self.db.commit()
        await self.db.refresh(course)
        logger.info(f"Created course {course.id}: {course.title}")
        return CourseResponse.model_validate(course)

    async def update_course(self, course_id: str, data: CourseUpdate) -> CourseResponse:
        """Update the fields present in the request."""
        course = await self._get_course(course_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(course, field, value)
        await self.db.commit()
        await self.db.refresh(course)
        return CourseResponse.model_validate(course)

    async def delete_course(self, course_id: str) -> None:
        """Delete a course and, by cascade, its lessons and items."""
        course = await self._get_course(course_id)
        await self.db.delete(course)
        await self.db.commit()
        logger.info(f"Deleted course {course_id}")

    # ===========================================
    # Lessons
    # ===========================================

    async def _get_lesson(self, lesson_id: str) -> Lesson:
        lesson = await self.db.get(Lesson, lesson_id)
        if lesson is None:
            raise NotFoundError(f"Lesson {lesson_id} not found")
        return lesson

    async def list_lessons(self, course_id: str) -> list[LessonResponse]:
        """List a course's lessons by order_index."""
        await self._get_course(course_id)
        result = await self.db.execute(
            select(Lesson)
            .where(Lesson.course_id == course_id)
            .order_by(Lesson.order_index.asc())
        )
        return [LessonResponse.model_validate(lesson) for lesson in result.scalars().all()]

    async def get_lesson(self, lesson_id: str) -> LessonResponse:
        """Get a lesson by id."""
        return LessonResponse.model_validate(await self._get_lesson(lesson_id))

    async def get_course_lessons(
        self,
        course_id: str,
        learner_id: str,
    ) -> CourseLessonsResponse:
        """
        Get a course with its lessons annotated for a learner.

        Returns:
            CourseLessonsResponse with completed/unlocked flags and the share
            of lessons completed
        """
        course = await self._get_course(course_id)

        lessons_result = await self.db.execute(
            select(Lesson)
            .where(Lesson.course_id == course_id)
            .order_by(Lesson.order_index.asc())
        )
        lessons = list(lessons_result.scalars().all())

        completed_result = await self.db.execute(
            select(LessonProgress.lesson_id)
            .join(Lesson, LessonProgress.lesson_id == Lesson.id)
            .where(
                LessonProgress.learner_id == learner_id,
                LessonProgress.completed.is_(True),
                Lesson.course_id == course_id,
            )
        )
        completed_ids = set(completed_result.scalars().all())

        xp_result = await self.db.execute(
            select(Profile.xp).where(Profile.id == learner_id)
        )
        learner_xp = xp_result.scalar() or 0

        annotated = annotate_lessons(lessons, completed_ids, learner_xp)
        completed_count = sum(1 for lesson in annotated if lesson.completed)
        progress_percent = (
            round(completed_count / len(annotated) * 100, 1) if annotated else 0.0
        )

        return CourseLessonsResponse(
            course=CourseResponse.model_validate(course),
            lessons=annotated,
            completed_count=completed_count,
            progress_percent=progress_percent,
        )

    async def create_lesson(self, data: LessonCreate) -> LessonResponse:
        """Create a lesson in an existing course."""
        await self._get_course(data.course_id)
        lesson = Lesson(**data.model_dump())
        self.db.add(lesson)
        await self.db.commit()
        await self.db.refresh(lesson)
        logger.info(f"Created lesson {lesson.id} in course {lesson.course_id}")
        return LessonResponse.model_validate(lesson)

    async def update_lesson(self, lesson_id: str, data: LessonUpdate) -> LessonResponse:
        """Update the fields present in the request."""
        lesson = await self._get_lesson(lesson_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("course_id"):
            await self._get_course(changes["course_id"])
        for field, value in changes.items():
            setattr(lesson, field, value)
        await self.db.commit()
        await self.db.refresh(lesson)
        return LessonResponse.model_validate(lesson)

    async def delete_lesson(self, lesson_id: str) -> None:
        """Delete a lesson and its items."""
        lesson = await self._get_lesson(lesson_id)
        await self.db.delete(lesson)
        await self.db.commit()
        logger.info(f"Deleted lesson {lesson_id}")

    async def get_lesson_speech_locale(self, lesson_id: str) -> SpeechLocaleResponse:
        """Speech recognition locale for the lesson's target language."""
        result = await self.db.execute(
            select(Course.language_to)
            .join(Lesson, Lesson.course_id == Course.id)
            .where(Lesson.id == lesson_id)
        )
        language = result.scalar_one_or_none()
        if language is None:
            raise NotFoundError(f"Lesson {lesson_id} not found")
        return SpeechLocaleResponse(
            lesson_id=lesson_id,
            language=language,
            locale=speech_locale(language),
        )

    # ===========================================
    # Items
    # ===========================================

    async def _get_item(self, item_id: str) -> Item:
        item = await self.db.get(Item, item_id)
        if item is None:
            raise NotFoundError(f"Item {item_id} not found")
        return item

    async def _lesson_items(self, lesson_id: str) -> list[Item]:
        await self._get_lesson(lesson_id)
        result = await self.db.execute(
            select(Item)
            .where(Item.lesson_id == lesson_id)
            .order_by(Item.order_index.asc())
        )
        return list(result.scalars().all())

    async def get_item_with_language(self, item_id: str) -> tuple[Item, str]:
        """
        Get an item together with its course's target language.

        Raises:
            NotFoundError: If the item doesn't exist
        """
        result = await self.db.execute(
            select(Item, Course.language_to)
            .join(Lesson, Item.lesson_id == Lesson.id)
            .join(Course, Lesson.course_id == Course.id)
            .where(Item.id == item_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError(f"Item {item_id} not found")
        item, language = row
        return item, language

    async def list_player_items(self, lesson_id: str) -> list[PlayerItem]:
        """Items of a lesson for the exercise player, answers withheld."""
        return [PlayerItem.model_validate(i) for i in await self._lesson_items(lesson_id)]

    async def list_items(self, lesson_id: str) -> list[ItemResponse]:
        """Items of a lesson with canonical answers (admin view)."""
        return [ItemResponse.model_validate(i) for i in await self._lesson_items(lesson_id)]

    async def get_item(self, item_id: str) -> ItemResponse:
        """Get an item with its canonical answer."""
        return ItemResponse.model_validate(await self._get_item(item_id))

    async def create_item(self, data: ItemCreate) -> ItemResponse:
        """Create an item in an existing lesson."""
        await self._get_lesson(data.lesson_id)
        values = data.model_dump()
        values["kind"] = data.kind.value
        item = Item(**values)
        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)
        logger.info(f"Created {item.kind} item {item.id} in lesson {item.lesson_id}")
        return ItemResponse.model_validate(item)

    async def update_item(self, item_id: str, data: ItemUpdate) -> ItemResponse:
        """Update the fields present in the request."""
        item = await self._get_item(item_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("lesson_id"):
            await self._get_lesson(changes["lesson_id"])
        if changes.get("kind") is not None:
            changes["kind"] = data.kind.value
        for field, value in changes.items():
            setattr(item, field, value)
        await self.db.commit()
        await self.db.refresh(item)
        return ItemResponse.model_validate(item)

    async def delete_item(self, item_id: str) -> None:
        """
        Delete an item.

        Review states and attempts for the item are kept as learner history;
        the database nulls their item_id.
        """
        item = await self._get_item(item_id)
        await self.db.delete(item)
        await self.db.commit()
        logger.info(f"Deleted item {item_id}")

    # ===========================================
    # Playlists
    # ===========================================

    def _playlist_response(self, playlist: Playlist) -> PlaylistResponse:
        entries = []
        for entry in playlist.lessons:
            lesson = entry.lesson
            if lesson is None:
                continue
            course = lesson.course
            entries.append(
                PlaylistLessonEntry(
                    lesson_id=lesson.id,
                    order_index=entry.order_index,
                    title=lesson.title,
                    course_id=lesson.course_id,
                    course_title=course.title if course else None,
                    flag_emoji=course.flag_emoji if course else None,
                )
            )
        return PlaylistResponse(
            id=playlist.id,
            owner_id=playlist.owner_id,
            title=playlist.title,
            description=playlist.description,
            focus_tag=playlist.focus_tag,
            created_at=playlist.created_at,
            lessons=entries,
        )

    def _playlist_query(self):
        # populate_existing refreshes playlists already in the identity map
        return (
            select(Playlist)
            .options(
                selectinload(Playlist.lessons)
                .selectinload(PlaylistLesson.lesson)
                .selectinload(Lesson.course)
            )
            .execution_options(populate_existing=True)
        )

    async def list_playlists(self, owner_id: str) -> list[PlaylistResponse]:
        """A learner's playlists, newest first."""
        result = await self.db.execute(
            self._playlist_query()
            .where(Playlist.owner_id == owner_id)
            .order_by(Playlist.created_at.desc())
        )
        return [self._playlist_response(p) for p in result.scalars().all()]

    async def create_playlist(
        self,
        owner_id: str,
        data: PlaylistCreate,
    ) -> PlaylistResponse:
        """
        Create a playlist from an ordered list of lesson ids.

        Entries are numbered from 1 in the order given. Duplicate ids are
        kept once, at their first position.

        Raises:
            ValidationError: If any lesson id doesn't exist
        """
        lesson_ids: list[str] = list(dict.fromkeys(data.lesson_ids))

        if lesson_ids:
            result = await self.db.execute(
                select(Lesson.id).where(Lesson.id.in_(lesson_ids))
            )
            found = set(result.scalars().all())
            missing = [lid for lid in lesson_ids if lid not in found]
            if missing:
                raise ValidationError(
                    "Unknown lessons in playlist",
                    details={"missing_lesson_ids": missing},
                )

        playlist = Playlist(
            owner_id=owner_id,
            title=data.title,
            description=data.description,
            focus_tag=data.focus_tag,
        )
        playlist.lessons = [
            PlaylistLesson(lesson_id=lesson_id, order_index=index)
            for index, lesson_id in enumerate(lesson_ids, start=1)
        ]
        self.db.add(playlist)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ValidationError("Playlist references a lesson that no longer exists")

        logger.info(
            f"Created playlist {playlist.id} for {owner_id} with {len(lesson_ids)} lessons"
        )
        return await self.get_playlist(playlist.id, owner_id)

    async def get_playlist(
        self,
        playlist_id: str,
        owner_id: Optional[str] = None,
    ) -> PlaylistResponse:
        """
        Get a playlist with its lessons.

        Raises:
            NotFoundError: If the playlist doesn't exist
            AuthorizationError: If owner_id is given and doesn't own it
        """
        result = await self.db.execute(
            self._playlist_query().where(Playlist.id == playlist_id)
        )
        playlist = result.scalar_one_or_none()
        if playlist is None:
            raise NotFoundError(f"Playlist {playlist_id} not found")
        if owner_id is not None and playlist.owner_id != owner_id:
            raise AuthorizationError("Playlist belongs to another learner")
        return self._playlist_response(playlist)

    async def delete_playlist(self, playlist_id: str, owner_id: str) -> None:
        """Delete one of the learner's own playlists."""
        playlist = await self.db.get(Playlist, playlist_id)
        if playlist is None:
            raise NotFoundError(f"Playlist {playlist_id} not found")
        if playlist.owner_id != owner_id:
            raise AuthorizationError("Playlist belongs to another learner")
        await self.db.delete(playlist)
        await self.db.commit()
        logger.info(f"Deleted playlist {playlist_id}")
