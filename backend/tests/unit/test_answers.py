"""
Unit tests for answer normalization, judging and scoring.
"""

import pytest

from app.enums.learning import ExerciseKind
from app.services.learning.answers import (
    comparison_key,
    fold_latin_diacritics,
    judge,
    normalize,
    score,
)


class TestNormalize:
    """Tests for normalize()."""

    def test_lowercases_and_trims(self):
        assert normalize("  Hola  ") == "hola"

    def test_removes_punctuation(self):
        assert normalize("Hello, World!") == "hello world"
        assert normalize("(re-do).") == "redo"

    def test_trims_after_punctuation_removal(self):
        """Whitespace exposed by removing punctuation is trimmed too."""
        assert normalize("hola !") == "hola"

    def test_keeps_inner_whitespace(self):
        assert normalize("buenos  dias") == "buenos  dias"

    def test_keeps_characters_outside_the_punctuation_set(self):
        """Question marks and apostrophes are not stripped."""
        assert normalize("¿Qué?") == "¿qué?"
        assert normalize("l'eau") == "l'eau"

    def test_empty_and_none(self):
        assert normalize("") == ""
        assert normalize(None) == ""
        assert normalize("  ...  ") == ""

    @pytest.mark.parametrize(
        "text",
        ["Hello, World!", "  ¡Buenos días!  ", "नमस्ते", "こんにちは。", "a - b", "~x~ "],
    )
    def test_idempotent(self, text):
        once = normalize(text)
        assert normalize(once) == once

    def test_non_latin_scripts_untouched(self):
        assert normalize("नमस्ते") == "नमस्ते"
        assert normalize("ありがとう") == "ありがとう"


class TestFoldLatinDiacritics:
    """Tests for accent folding used by the judge."""

    def test_folds_latin_accents(self):
        assert fold_latin_diacritics("días") == "dias"
        assert fold_latin_diacritics("ça va") == "ca va"
        assert fold_latin_diacritics("über") == "uber"

    def test_keeps_devanagari_signs(self):
        assert fold_latin_diacritics("नमस्ते") == "नमस्ते"

    def test_keeps_japanese_dakuten(self):
        assert fold_latin_diacritics("ありがとうございます") == "ありがとうございます"

    def test_comparison_key_combines_both(self):
        assert comparison_key("  Buenos Días! ") == "buenos dias"


class TestJudge:
    """Tests for judge()."""

    def test_translate_ignores_case_and_accents(self):
        assert judge(ExerciseKind.TRANSLATE, "Buenos Dias", "Buenos días") is True

    def test_translate_ignores_punctuation(self):
        assert judge(ExerciseKind.TRANSLATE, "hello world", "Hello, World!") is True

    def test_translate_requires_exact_match(self):
        assert judge(ExerciseKind.TRANSLATE, "buenos", "Buenos días") is False
        assert judge(ExerciseKind.TRANSLATE, "buenas dias", "Buenos días") is False

    @pytest.mark.parametrize("kind", [ExerciseKind.MULTIPLE_CHOICE, ExerciseKind.FILL_BLANK])
    def test_choice_kinds_exact_match(self, kind):
        assert judge(kind, "Gato", "gato") is True
        assert judge(kind, "perro", "gato") is False

    def test_accepts_string_kind(self):
        assert judge("multiple_choice", "Gato", "gato") is True

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError):
            judge("essay", "a", "a")

    def test_empty_answer_never_correct(self):
        for kind in ExerciseKind:
            assert judge(kind, "", "hola") is False
            assert judge(kind, None, "hola") is False
            assert judge(kind, " !! ", "hola") is False

    def test_speaking_partial_transcripts(self):
        assert judge(ExerciseKind.SPEAKING, "hola", "hola amigo") is True
        assert judge(ExerciseKind.SPEAKING, "bueno hola amigo", "hola amigo") is True
        assert judge(ExerciseKind.SPEAKING, "adios", "hola amigo") is False

    def test_speaking_empty_expected_rejects(self):
        assert judge(ExerciseKind.SPEAKING, "hola", "") is False

    def test_non_latin_exact_match(self):
        assert judge(ExerciseKind.TRANSLATE, "नमस्ते", "नमस्ते") is True
        assert judge(ExerciseKind.TRANSLATE, "नमस्ते!", "नमस्ते") is True
        assert judge(ExerciseKind.TRANSLATE, "नमस्त", "नमस्ते") is False


class TestScore:
    """Tests for score()."""

    def test_correct_earns_ten(self):
        assert score(True) == 10

    def test_incorrect_earns_nothing(self):
        assert score(False) == 0
