"""
Catalog API Router

Learner-facing course and lesson browsing.

Endpoints:
- GET /api/courses - List courses
- GET /api/courses/{course_id} - Get a course
- GET /api/courses/{course_id}/lessons - Lessons with completion/unlock state
- GET /api/lessons/{lesson_id}/items - Items for the exercise player
- GET /api/lessons/{lesson_id}/speech-locale - Speech recognition locale
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import get_db
from app.dependencies import get_learner_id
from app.middleware.error_handling import handle_endpoint_errors
from app.models.catalog import (
    CourseLessonsResponse,
    CourseResponse,
    PlayerItem,
    SpeechLocaleResponse,
)
from app.services.learning import CatalogService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["catalog"])


# ===========================================
# Dependency Injection
# ===========================================


async def get_catalog_service(
    db: AsyncSession = Depends(get_db),
) -> CatalogService:
    """Get catalog service."""
    return CatalogService(db)


# ===========================================
# Courses
# ===========================================


@router.get("/courses", response_model=list[CourseResponse])
@handle_endpoint_errors("List courses")
async def list_courses(
    service: CatalogService = Depends(get_catalog_service),
) -> list[CourseResponse]:
    """List all courses."""
    return await service.list_courses()


@router.get("/courses/{course_id}", response_model=CourseResponse)
@handle_endpoint_errors("Get course")
async def get_course(
    course_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> CourseResponse:
    """Get a course by ID."""
    return await service.get_course(course_id)


@router.get("/courses/{course_id}/lessons", response_model=CourseLessonsResponse)
@handle_endpoint_errors("Get course lessons")
async def get_course_lessons(
    course_id: str,
    learner_id: str = Depends(get_learner_id),
    service: CatalogService = Depends(get_catalog_service),
) -> CourseLessonsResponse:
    """
    Get a course's lessons for the calling learner.

    Each lesson carries completed, unlocked and xp_required so the client
    can render locked lessons with their XP requirement.
    """
    return await service.get_course_lessons(course_id, learner_id)


# ===========================================
# Lessons
# ===========================================


@router.get("/lessons/{lesson_id}/items", response_model=list[PlayerItem])
@handle_endpoint_errors("Get lesson items")
async def get_lesson_items(
    lesson_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> list[PlayerItem]:
    """
    Get a lesson's items in order for the exercise player.

    Canonical answers are not included; they are returned with each
    attempt result.
    """
    return await service.list_player_items(lesson_id)


@router.get("/lessons/{lesson_id}/speech-locale", response_model=SpeechLocaleResponse)
@handle_endpoint_errors("Get speech locale")
async def get_speech_locale(
    lesson_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> SpeechLocaleResponse:
    """
    Get the speech recognition locale for a lesson's target language.

    Clients without speech recognition answer speaking items by typing.
    """
    return await service.get_lesson_speech_locale(lesson_id)
