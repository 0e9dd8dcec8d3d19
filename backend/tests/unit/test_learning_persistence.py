"""
Persistence tests for the learning services against a real async session.

Uses an in-memory SQLite database (aiosqlite) so session behaviour the
mocked tests cannot show is exercised: instance expiry on rollback and
foreign key actions when catalog content is deleted.
"""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from sqlalchemy import event, func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.models import Course, Item, Lesson
from app.db.models_learning import ExerciseAttempt, ReviewState
from app.middleware.error_handling import PersistenceError
from app.services.learning.catalog_service import CatalogService
from app.services.learning.review_service import ReviewService

NOW = datetime(2024, 3, 10, 9, 30, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def session_maker() -> AsyncGenerator[async_sessionmaker, None]:
    """Session factory bound to a fresh in-memory database with seeded content."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with maker() as session:
        course = Course(
            id="c1", title="Spanish", language_from="English", language_to="Spanish"
        )
        lesson = Lesson(id="l1", course_id="c1", title="Greetings", order_index=1)
        item = Item(
            id="i1",
            lesson_id="l1",
            kind="translate",
            question="Hello",
            correct_answer="Hola",
            explanation="Informal greeting.",
            order_index=1,
        )
        session.add_all([course, lesson, item])
        await session.commit()

    yield maker

    await engine.dispose()


async def _count(maker: async_sessionmaker, model) -> int:
    async with maker() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar()


class TestFailedCommit:
    """Tests for attempt submission when the commit fails."""

    @pytest.mark.asyncio
    async def test_reports_verdict_after_rollback(self, session_maker):
        """Rollback expires the loaded item; the verdict must not need it."""
        async with session_maker() as session:
            failing_commit = AsyncMock(
                side_effect=OperationalError("COMMIT", {}, Exception("disk I/O error"))
            )
            with patch.object(session, "commit", failing_commit):
                service = ReviewService(session)
                with pytest.raises(PersistenceError) as exc_info:
                    await service.submit_attempt("learner-1", "i1", "Hola", now=NOW)

        assert exc_info.value.status_code == 503
        assert exc_info.value.details == {
            "item_id": "i1",
            "correct": True,
            "xp_awarded": 10,
            "correct_answer": "Hola",
        }
        assert await _count(session_maker, ExerciseAttempt) == 0
        assert await _count(session_maker, ReviewState) == 0

    @pytest.mark.asyncio
    async def test_successful_commit_persists(self, session_maker):
        async with session_maker() as session:
            result = await ReviewService(session).submit_attempt(
                "learner-1", "i1", "hola", now=NOW
            )

        assert result.correct is True
        assert result.explanation == "Informal greeting."
        assert await _count(session_maker, ExerciseAttempt) == 1
        assert await _count(session_maker, ReviewState) == 1


class TestItemDeletion:
    """Deleting catalog items keeps learner history."""

    @pytest.mark.asyncio
    async def test_history_survives_item_delete(self, session_maker):
        async with session_maker() as session:
            await ReviewService(session).submit_attempt(
                "learner-1", "i1", "Hola", now=NOW
            )

        async with session_maker() as session:
            await CatalogService(session).delete_item("i1")

        async with session_maker() as session:
            attempts = (await session.execute(select(ExerciseAttempt))).scalars().all()
            states = (await session.execute(select(ReviewState))).scalars().all()

        assert len(attempts) == 1
        assert attempts[0].item_id is None
        assert attempts[0].correct is True
        assert len(states) == 1
        assert states[0].item_id is None

    @pytest.mark.asyncio
    async def test_orphaned_state_leaves_review_queue(self, session_maker):
        async with session_maker() as session:
            await ReviewService(session).submit_attempt(
                "learner-1", "i1", "Hola", now=NOW
            )

        async with session_maker() as session:
            await CatalogService(session).delete_course("c1")

        later = NOW + timedelta(days=2)
        async with session_maker() as session:
            service = ReviewService(session)
            due = await service.get_due_items("learner-1", now=later)
            stats = await service.get_review_stats("learner-1", now=later)

        assert due.total_due == 0
        assert due.items == []
        assert stats.total_scheduled == 0
        assert await _count(session_maker, ExerciseAttempt) == 1
