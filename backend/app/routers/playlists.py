"""
Playlists API Router

Learner-curated lesson playlists.

Endpoints:
- GET /api/playlists - List the learner's playlists
- POST /api/playlists - Create a playlist
- GET /api/playlists/{playlist_id} - Get one of the learner's playlists
- DELETE /api/playlists/{playlist_id} - Delete one of the learner's playlists
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import get_db
from app.dependencies import get_learner_id
from app.middleware.error_handling import handle_endpoint_errors
from app.models.base import SuccessResponse
from app.models.catalog import PlaylistCreate, PlaylistResponse
from app.services.learning import CatalogService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/playlists", tags=["playlists"])


async def get_catalog_service(
    db: AsyncSession = Depends(get_db),
) -> CatalogService:
    """Get catalog service."""
    return CatalogService(db)


@router.get("", response_model=list[PlaylistResponse])
@handle_endpoint_errors("List playlists")
async def list_playlists(
    learner_id: str = Depends(get_learner_id),
    service: CatalogService = Depends(get_catalog_service),
) -> list[PlaylistResponse]:
    """List the learner's playlists, newest first."""
    return await service.list_playlists(learner_id)


@router.post("", response_model=PlaylistResponse, status_code=status.HTTP_201_CREATED)
@handle_endpoint_errors("Create playlist")
async def create_playlist(
    playlist: PlaylistCreate,
    learner_id: str = Depends(get_learner_id),
    service: CatalogService = Depends(get_catalog_service),
) -> PlaylistResponse:
    """
    Create a playlist from an ordered list of lesson IDs.

    Lessons may come from different courses. Unknown lesson IDs are
    rejected with 422.
    """
    return await service.create_playlist(learner_id, playlist)


@router.get("/{playlist_id}", response_model=PlaylistResponse)
@handle_endpoint_errors("Get playlist")
async def get_playlist(
    playlist_id: str,
    learner_id: str = Depends(get_learner_id),
    service: CatalogService = Depends(get_catalog_service),
) -> PlaylistResponse:
    """Get one of the learner's playlists."""
    return await service.get_playlist(playlist_id, owner_id=learner_id)


@router.delete("/{playlist_id}", response_model=SuccessResponse)
@handle_endpoint_errors("Delete playlist")
async def delete_playlist(
    playlist_id: str,
    learner_id: str = Depends(get_learner_id),
    service: CatalogService = Depends(get_catalog_service),
) -> SuccessResponse:
    """Delete one of the learner's playlists."""
    await service.delete_playlist(playlist_id, learner_id)
    return SuccessResponse(message="Playlist deleted")
