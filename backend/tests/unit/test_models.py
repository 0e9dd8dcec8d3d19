"""
Unit tests for Pydantic request/response models.

Tests option parsing, strict request validation and the player view that
withholds canonical answers.
"""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from app.enums.learning import ExerciseKind
from app.models.catalog import (
    CourseCreate,
    ItemCreate,
    ItemUpdate,
    PlayerItem,
    PlaylistCreate,
    parse_options,
)
from app.models.learning import (
    AttemptSubmitRequest,
    FeedbackRequest,
    LessonCompleteRequest,
)


class TestParseOptions:
    """Tests for parse_options()."""

    def test_comma_separated_string(self):
        assert parse_options("Hola, Adiós ,Gracias") == ["Hola", "Adiós", "Gracias"]

    def test_list(self):
        assert parse_options([" gato", "perro "]) == ["gato", "perro"]

    def test_blanks_dropped(self):
        assert parse_options("a,, ,b") == ["a", "b"]

    def test_empty_becomes_none(self):
        assert parse_options("") is None
        assert parse_options(" , ") is None
        assert parse_options(None) is None


class TestItemModels:
    """Tests for item request and response models."""

    def test_item_create_splits_options(self):
        item = ItemCreate(
            lesson_id="l1",
            question="Cat?",
            correct_answer="gato",
            options="gato, perro, pez",
        )

        assert item.kind == ExerciseKind.MULTIPLE_CHOICE
        assert item.options == ["gato", "perro", "pez"]

    def test_item_create_rejects_unknown_kind(self):
        with pytest.raises(ValidationError):
            ItemCreate(lesson_id="l1", kind="essay", question="Q", correct_answer="A")

    def test_item_update_partial(self):
        update = ItemUpdate(options="a, b")

        assert update.model_dump(exclude_unset=True) == {"options": ["a", "b"]}

    def test_player_item_withholds_answer(self):
        source = SimpleNamespace(
            id="item-1",
            lesson_id="l1",
            kind=ExerciseKind.TRANSLATE,
            question="Good morning",
            order_index=1,
            correct_answer="Buenos días",
            explanation="Greeting",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

        player = PlayerItem.model_validate(source)

        dumped = player.model_dump()
        assert "correct_answer" not in dumped
        assert "explanation" not in dumped
        assert dumped["question"] == "Good morning"


class TestStrictRequests:
    """Request bodies reject unknown fields."""

    def test_attempt_rejects_extra_fields(self):
        with pytest.raises(ValidationError):
            AttemptSubmitRequest(item_id="i1", answer="hola", correct=True)

    def test_attempt_answer_defaults_to_empty(self):
        assert AttemptSubmitRequest(item_id="i1").answer == ""

    def test_course_strips_whitespace(self):
        course = CourseCreate(
            title="  Spanish  ", language_from="English", language_to="Spanish"
        )

        assert course.title == "Spanish"

    def test_course_requires_title(self):
        with pytest.raises(ValidationError):
            CourseCreate(title="", language_from="English", language_to="Spanish")

    def test_feedback_requires_answer(self):
        with pytest.raises(ValidationError):
            FeedbackRequest(item_id="i1", answer="")

    def test_lesson_complete_requires_aware_datetime(self):
        with pytest.raises(ValidationError):
            LessonCompleteRequest(started_at=datetime(2024, 1, 1, 9, 0))

        request = LessonCompleteRequest(
            started_at=datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
        )
        assert request.started_at.tzinfo is not None

    def test_playlist_defaults(self):
        playlist = PlaylistCreate(title="Travel")

        assert playlist.lesson_ids == []
        assert playlist.focus_tag is None
