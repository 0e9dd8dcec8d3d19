"""
LLM Client supporting multiple providers via LiteLLM.

LiteLLM provides a unified interface to 100+ LLM providers using
the format "provider/model-name". Key features:
- Provider selection through the TEXT_MODEL setting
- Automatic retries with exponential backoff
- Native async support

See: https://docs.litellm.ai/

Usage:
    from app.services.llm import build_messages, get_llm_client

    client = get_llm_client()
    if client.is_configured():
        text = await client.complete(
            messages=build_messages("Explain 'ser' vs 'estar'", system_prompt),
        )
"""

import logging
import os
from typing import Optional

import litellm
from litellm import acompletion
from tenacity import retry, stop_after_attempt, wait_exponential

from app.config.settings import settings

logger = logging.getLogger(__name__)

# Configure LiteLLM
litellm.drop_params = True  # Drop unsupported params instead of erroring
if settings.DEBUG:
    os.environ["LITELLM_LOG"] = "DEBUG"

# Environment variable consulted by LiteLLM for each provider prefix
_PROVIDER_KEYS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


def get_default_text_model() -> str:
    """Get the default text model from settings."""
    return settings.TEXT_MODEL


def build_messages(
    prompt: str,
    system_prompt: Optional[str] = None,
) -> list[dict[str, str]]:
    """
    Build messages list from prompt and optional system prompt.

    Args:
        prompt: User prompt text
        system_prompt: Optional system prompt

    Returns:
        List of message dicts for LLM API
    """
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})
    return messages


class LLMClient:
    """
    Thin async wrapper around litellm.acompletion.

    Attributes:
        model: Default model in LiteLLM "provider/model" format.
    """

    def __init__(self, model: Optional[str] = None):
        """Initialize the LLM client and report configured providers."""
        self.model = model or get_default_text_model()
        self.available_providers = self._detect_providers()

        if not self.available_providers:
            logger.warning(
                "No LLM API keys configured; AI feedback is disabled. Set one of: "
                + ", ".join(_PROVIDER_KEYS.values())
            )
        else:
            logger.info(
                f"LLM client initialized with providers: {self.available_providers}"
            )

    @staticmethod
    def _detect_providers() -> list[str]:
        available = []
        for provider, env_name in _PROVIDER_KEYS.items():
            if os.getenv(env_name) or getattr(settings, env_name, ""):
                available.append(provider)
        return available

    def _api_key_for(self, model: str) -> Optional[str]:
        provider = model.split("/", 1)[0].lower()
        env_name = _PROVIDER_KEYS.get(provider)
        if not env_name:
            return None
        return getattr(settings, env_name, "") or None

    def is_configured(self, model: Optional[str] = None) -> bool:
        """Whether the provider of the given (or default) model has a key."""
        provider = (model or self.model).split("/", 1)[0].lower()
        return provider in self.available_providers

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        reraise=True,
    )
    async def complete(
        self,
        messages: list[dict],
        temperature: float = 0.7,
        max_tokens: int = 500,
        model: Optional[str] = None,
    ) -> str:
        """
        Generate a chat completion.

        Args:
            messages: Chat messages in OpenAI format
                [{"role": "user", "content": "..."}, ...]
            temperature: Sampling temperature
            max_tokens: Maximum tokens in response
            model: Optional model override

        Returns:
            Response text, stripped. Empty string if the provider returned
            no content.

        Raises:
            Exception: If completion fails after retries
        """
        model = model or self.model

        kwargs = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        api_key = self._api_key_for(model)
        if api_key:
            kwargs["api_key"] = api_key

        try:
            response = await acompletion(**kwargs)
        except Exception as e:
            logger.error(f"LLM completion failed: {e} (model={model})")
            raise

        content = response.choices[0].message.content or ""
        return content.strip()


# Singleton instance
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """
    Get or create the singleton LLM client instance.

    Returns:
        Shared LLMClient instance
    """
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client


def reset_llm_client() -> None:
    """Reset the singleton (for testing)."""
    global _llm_client
    _llm_client = None
