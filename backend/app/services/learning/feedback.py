"""
AI Feedback Service

Advisory tutor feedback on learner answers via the LLM client.

Feedback is best-effort: when no provider is configured, feedback is
disabled, or the provider fails after retries, the service logs and
returns None. Verdicts, XP and review schedules never depend on it.

Usage:
    from app.services.learning.feedback import FeedbackService

    service = FeedbackService()
    text = await service.get_exercise_feedback(
        answer="Buenas",
        correct_answer="Buenos días",
        question="Translate: Good morning",
        kind=ExerciseKind.TRANSLATE,
        language="Spanish",
    )
"""

import logging
from typing import Optional, Union

from app.config import settings
from app.enums.learning import ExerciseKind
from app.services.learning.feedback_prompts import (
    EXERCISE_FEEDBACK_PROMPT,
    EXERCISE_SYSTEM_PROMPT,
    SPEAKING_FEEDBACK_PROMPT,
    SPEAKING_SYSTEM_PROMPT,
)
from app.services.llm import LLMClient, build_messages, get_llm_client

logger = logging.getLogger(__name__)


class FeedbackService:
    """Builds tutor prompts and asks the LLM for short feedback."""

    def __init__(self, llm_client: Optional[LLMClient] = None):
        self.llm_client = llm_client or get_llm_client()

    def is_available(self) -> bool:
        """Whether feedback can be requested at all."""
        return settings.FEEDBACK_ENABLED and self.llm_client.is_configured()

    async def get_exercise_feedback(
        self,
        answer: str,
        correct_answer: str,
        question: str,
        kind: Union[ExerciseKind, str],
        language: str,
    ) -> Optional[str]:
        """
        Feedback on a typed, selected or translated answer.

        Returns:
            Feedback text, or None if unavailable.
        """
        kind_value = kind.value if isinstance(kind, ExerciseKind) else kind
        prompt = EXERCISE_FEEDBACK_PROMPT.format(
            language=language,
            kind=kind_value,
            question=question,
            correct_answer=correct_answer,
            answer=answer,
        )
        system_prompt = EXERCISE_SYSTEM_PROMPT.format(language=language)
        return await self._request(prompt, system_prompt)

    async def get_speaking_feedback(
        self,
        speech: str,
        expected: str,
        language: str,
    ) -> Optional[str]:
        """
        Feedback on a speech recognition transcript.

        Returns:
            Feedback text, or None if unavailable.
        """
        prompt = SPEAKING_FEEDBACK_PROMPT.format(
            language=language,
            expected=expected,
            speech=speech,
        )
        return await self._request(prompt, SPEAKING_SYSTEM_PROMPT)

    async def _request(self, prompt: str, system_prompt: str) -> Optional[str]:
        if not self.is_available():
            logger.debug("AI feedback unavailable, skipping")
            return None

        try:
            text = await self.llm_client.complete(
                messages=build_messages(prompt, system_prompt),
                temperature=settings.FEEDBACK_TEMPERATURE,
                max_tokens=settings.FEEDBACK_MAX_TOKENS,
            )
        except Exception as e:
            logger.warning(f"AI feedback failed, falling back: {e}")
            return None

        return text or None
