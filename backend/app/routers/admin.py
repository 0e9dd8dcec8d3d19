"""
Admin API Router

Catalog editing for the admin panel. Every endpoint requires the
X-Admin-Key header when ADMIN_API_KEY is configured.

Endpoints:
- GET/POST /api/admin/courses, PATCH/DELETE /api/admin/courses/{id}
- GET/POST /api/admin/lessons, PATCH/DELETE /api/admin/lessons/{id}
- GET/POST /api/admin/items, GET/PATCH/DELETE /api/admin/items/{id}
"""

import logging

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.base import get_db
from app.dependencies import RequireAdminKey
from app.enums import RateLimitType
from app.middleware.error_handling import handle_endpoint_errors
from app.middleware.rate_limit import limiter
from app.models.base import SuccessResponse
from app.models.catalog import (
    CourseCreate,
    CourseResponse,
    CourseUpdate,
    ItemCreate,
    ItemResponse,
    ItemUpdate,
    LessonCreate,
    LessonResponse,
    LessonUpdate,
)
from app.services.learning import CatalogService

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[RequireAdminKey],
)

ADMIN_LIMIT = settings.get_rate_limit(RateLimitType.ADMIN)


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


@router.post("/courses", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(ADMIN_LIMIT)
@handle_endpoint_errors("Create course")
async def create_course(
    request: Request,
    course: CourseCreate,
    service: CatalogService = Depends(get_catalog_service),
) -> CourseResponse:
    """Create a course."""
    return await service.create_course(course)


@router.patch("/courses/{course_id}", response_model=CourseResponse)
@limiter.limit(ADMIN_LIMIT)
@handle_endpoint_errors("Update course")
async def update_course(
    request: Request,
    course_id: str,
    course: CourseUpdate,
    service: CatalogService = Depends(get_catalog_service),
) -> CourseResponse:
    """Update a course. Omitted fields are left unchanged."""
    return await service.update_course(course_id, course)


@router.delete("/courses/{course_id}", response_model=SuccessResponse)
@limiter.limit(ADMIN_LIMIT)
@handle_endpoint_errors("Delete course")
async def delete_course(
    request: Request,
    course_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> SuccessResponse:
    """Delete a course with its lessons and items."""
    await service.delete_course(course_id)
    return SuccessResponse(message="Course deleted")


# ===========================================
# Lessons
# ===========================================


@router.get("/lessons", response_model=list[LessonResponse])
@handle_endpoint_errors("List lessons")
async def list_lessons(
    course_id: str = Query(..., description="Course to list lessons for"),
    service: CatalogService = Depends(get_catalog_service),
) -> list[LessonResponse]:
    """List a course's lessons in order."""
    return await service.list_lessons(course_id)


@router.post("/lessons", response_model=LessonResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(ADMIN_LIMIT)
@handle_endpoint_errors("Create lesson")
async def create_lesson(
    request: Request,
    lesson: LessonCreate,
    service: CatalogService = Depends(get_catalog_service),
) -> LessonResponse:
    """Create a lesson."""
    return await service.create_lesson(lesson)


@router.patch("/lessons/{lesson_id}", response_model=LessonResponse)
@limiter.limit(ADMIN_LIMIT)
@handle_endpoint_errors("Update lesson")
async def update_lesson(
    request: Request,
    lesson_id: str,
    lesson: LessonUpdate,
    service: CatalogService = Depends(get_catalog_service),
) -> LessonResponse:
    """Update a lesson."""
    return await service.update_lesson(lesson_id, lesson)


@router.delete("/lessons/{lesson_id}", response_model=SuccessResponse)
@limiter.limit(ADMIN_LIMIT)
@handle_endpoint_errors("Delete lesson")
async def delete_lesson(
    request: Request,
    lesson_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> SuccessResponse:
    """Delete a lesson with its items."""
    await service.delete_lesson(lesson_id)
    return SuccessResponse(message="Lesson deleted")


# ===========================================
# Items
# ===========================================


@router.get("/items", response_model=list[ItemResponse])
@handle_endpoint_errors("List items")
async def list_items(
    lesson_id: str = Query(..., description="Lesson to list items for"),
    service: CatalogService = Depends(get_catalog_service),
) -> list[ItemResponse]:
    """List a lesson's items with canonical answers."""
    return await service.list_items(lesson_id)


@router.get("/items/{item_id}", response_model=ItemResponse)
@handle_endpoint_errors("Get item")
async def get_item(
    item_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> ItemResponse:
    """Get an item with its canonical answer."""
    return await service.get_item(item_id)


@router.post("/items", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(ADMIN_LIMIT)
@handle_endpoint_errors("Create item")
async def create_item(
    request: Request,
    item: ItemCreate,
    service: CatalogService = Depends(get_catalog_service),
) -> ItemResponse:
    """
    Create an item.

    options may be sent as a list or as a comma-separated string.
    """
    return await service.create_item(item)


@router.patch("/items/{item_id}", response_model=ItemResponse)
@limiter.limit(ADMIN_LIMIT)
@handle_endpoint_errors("Update item")
async def update_item(
    request: Request,
    item_id: str,
    item: ItemUpdate,
    service: CatalogService = Depends(get_catalog_service),
) -> ItemResponse:
    """Update an item."""
    return await service.update_item(item_id, item)


@router.delete("/items/{item_id}", response_model=SuccessResponse)
@limiter.limit(ADMIN_LIMIT)
@handle_endpoint_errors("Delete item")
async def delete_item(
    request: Request,
    item_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> SuccessResponse:
    """Delete an item."""
    await service.delete_item(item_id)
    return SuccessResponse(message="Item deleted")
