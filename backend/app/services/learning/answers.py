"""
Answer Evaluation

Pure functions that decide whether a learner's answer matches an item's
canonical answer and how much XP it earns.

    raw answer → normalize() → judge() → score()

Normalization lower-cases, removes a fixed set of ASCII punctuation and
trims surrounding whitespace. It never touches letters, so Devanagari,
kana and other scripts used in prompts survive intact.

Usage:
    from app.services.learning.answers import judge, score

    correct = judge(ExerciseKind.TRANSLATE, "Buenos Dias", "Buenos días")
    xp = score(correct)  # 10
"""

from typing import Optional, Union
import unicodedata

from app.config import settings
from app.enums.learning import ExerciseKind

# Characters removed before comparison: - . , / # ! $ % ^ & * ; : { } = _ ` ~ ( )
STRIPPED_PUNCTUATION = "-.,/#!$%^&*;:{}=_`~()"

_PUNCTUATION_TABLE = str.maketrans("", "", STRIPPED_PUNCTUATION)


def normalize(text: Optional[str]) -> str:
    """
    Canonicalize raw answer text for comparison.

    Idempotent: normalize(normalize(x)) == normalize(x).

    Args:
        text: Typed answer, selected option or speech transcript.

    Returns:
        Lower-cased text without the stripped punctuation and without
        leading/trailing whitespace. None and "" both yield "".
    """
    if not text:
        return ""
    # Trim again after removing punctuation so "hola !" and "hola" agree
    return text.lower().strip().translate(_PUNCTUATION_TABLE).strip()


def fold_latin_diacritics(text: str) -> str:
    """
    Drop accents from Latin letters only ("días" → "dias").

    Combining marks attached to letters of other scripts (Devanagari
    vowel signs, Japanese dakuten) are part of the letter and are kept.
    """
    decomposed = unicodedata.normalize("NFD", text)
    folded = []
    base_is_latin = False
    for char in decomposed:
        if unicodedata.combining(char):
            if base_is_latin:
                continue
        else:
            base_is_latin = "LATIN" in unicodedata.name(char, "")
        folded.append(char)
    return unicodedata.normalize("NFC", "".join(folded))


def comparison_key(text: Optional[str]) -> str:
    """Key used by the judge: normalized text with Latin accents folded."""
    return fold_latin_diacritics(normalize(text))


def judge(
    kind: Union[ExerciseKind, str],
    submitted: Optional[str],
    canonical: Optional[str],
) -> bool:
    """
    Decide whether a submitted answer is correct.

    Rules per exercise kind:
        multiple_choice, fill_blank, translate: exact match after
            normalization.
        speaking: exact match, or either string contains the other, since
            speech recognition often returns partial transcripts.

    An empty submission is never correct.

    Args:
        kind: Exercise kind of the item (enum member or its string value).
        submitted: Learner's raw answer.
        canonical: Item's correct answer.

    Returns:
        True if the answer is accepted.

    Raises:
        ValueError: If kind is not a known exercise kind.
    """
    kind = ExerciseKind(kind)

    answer = comparison_key(submitted)
    expected = comparison_key(canonical)
    if not answer:
        return False

    if kind in (
        ExerciseKind.MULTIPLE_CHOICE,
        ExerciseKind.FILL_BLANK,
        ExerciseKind.TRANSLATE,
    ):
        return answer == expected
    elif kind == ExerciseKind.SPEAKING:
        if not expected:
            return False
        return answer == expected or answer in expected or expected in answer

    raise ValueError(f"Unsupported exercise kind: {kind}")


def score(correct: bool) -> int:
    """Map a verdict to XP. No partial credit and no time bonus."""
    if correct:
        return settings.XP_PER_CORRECT_ANSWER
    return settings.XP_PER_INCORRECT_ANSWER
