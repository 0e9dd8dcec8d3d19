"""
LLM Service Module

Provides a unified interface to multiple LLM providers via LiteLLM.

Key Components:
- client.py: LLMClient class with async completion and retries

Usage:
    from app.services.llm import get_llm_client, build_messages

    client = get_llm_client()
    text = await client.complete(messages=build_messages("Hola?"))
"""

from app.services.llm.client import (
    LLMClient,
    build_messages,
    get_default_text_model,
    get_llm_client,
    reset_llm_client,
)

__all__ = [
    "LLMClient",
    "get_llm_client",
    "reset_llm_client",
    "get_default_text_model",
    "build_messages",
]
