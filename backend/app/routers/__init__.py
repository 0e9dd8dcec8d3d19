"""API Routers package."""

from app.routers import admin as admin_router
from app.routers import catalog as catalog_router
from app.routers import health as health_router
from app.routers import playlists as playlists_router
from app.routers import practice as practice_router
from app.routers import profile as profile_router
from app.routers import review as review_router

__all__ = [
    "admin_router",
    "catalog_router",
    "health_router",
    "playlists_router",
    "practice_router",
    "profile_router",
    "review_router",
]
