"""Learner profile lookup shared by the learning services."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.models import Profile

logger = logging.getLogger(__name__)


async def get_or_create_profile(
    db: AsyncSession,
    learner_id: str,
    for_update: bool = False,
) -> Profile:
    """
    Load a learner's profile, creating it on first contact.

    Args:
        db: Async database session
        learner_id: Learner id (profile primary key)
        for_update: Lock the row for the rest of the transaction

    Returns:
        Profile row. A new profile is added and flushed but not committed.
    """
    query = select(Profile).where(Profile.id == learner_id)
    if for_update:
        query = query.with_for_update()

    result = await db.execute(query)
    profile = result.scalar_one_or_none()
    if profile is not None:
        return profile

    profile = Profile(
        id=learner_id,
        xp=0,
        streak=0,
        daily_goal_xp=settings.DAILY_GOAL_DEFAULT_XP,
    )
    db.add(profile)
    await db.flush()
    logger.info(f"Created profile for learner {learner_id}")
    return profile
