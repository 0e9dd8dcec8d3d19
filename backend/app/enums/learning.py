"""
Learning System Enums

Defines enums for exercise kinds, review outcomes and daily goal adjustments.
"""

from enum import Enum


class ExerciseKind(str, Enum):
    """
    Kinds of exercises an item can hold.

    The kind decides both how the player renders the item and how the
    answer judge compares the learner's answer with the canonical one:
    - MULTIPLE_CHOICE: Pick one of the options (exact match)
    - FILL_BLANK: Pick the word that completes the sentence (exact match)
    - TRANSLATE: Type the translation (exact match, no fuzzy matching)
    - SPEAKING: Say the phrase; transcripts are matched leniently
    """

    MULTIPLE_CHOICE = "multiple_choice"
    FILL_BLANK = "fill_blank"
    TRANSLATE = "translate"
    SPEAKING = "speaking"


class GoalAdjustment(str, Enum):
    """
    Outcome of a daily goal adaptation pass.

    - RAISED: Trailing average exceeded the raise threshold
    - LOWERED: Trailing average fell below the lower threshold
    - UNCHANGED: Pass ran, goal stayed the same
    - SKIPPED: Goal was already evaluated today
    """

    RAISED = "raised"
    LOWERED = "lowered"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
