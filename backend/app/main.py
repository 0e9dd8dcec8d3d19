"""
LinguaLearn API

FastAPI application entry point.

Run locally:
    uvicorn app.main:app --reload --app-dir backend
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings, yaml_config
from app.db.base import init_db
from app.middleware import setup_error_handling, setup_rate_limiting
from app.routers import (
    admin_router,
    catalog_router,
    health_router,
    playlists_router,
    practice_router,
    profile_router,
    review_router,
)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup."""
    logger.info(f"Starting {settings.APP_NAME}")
    await init_db()
    yield
    logger.info(f"Shutting down {settings.APP_NAME}")


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    version="0.1.0",
    description=(
        "Language-learning backend: course catalog, exercise judging, "
        "SM-2 review scheduling, XP, streaks and adaptive daily goals."
    ),
    lifespan=lifespan,
)

cors_config = yaml_config.get("cors", {})
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_config.get("allow_origins", ["*"]),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_error_handling(app, debug=settings.DEBUG)
setup_rate_limiting(app, enabled=settings.RATE_LIMIT_ENABLED)

app.include_router(health_router.router)
app.include_router(catalog_router.router)
app.include_router(practice_router.router)
app.include_router(review_router.router)
app.include_router(profile_router.router)
app.include_router(playlists_router.router)
app.include_router(admin_router.router)


@app.get("/")
async def root():
    return {"message": f"{settings.APP_NAME} API"}
