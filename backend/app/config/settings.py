"""
Application Configuration

This module provides type-safe configuration loading using Pydantic settings.
Environment variables are loaded from .env file and validated.

Usage:
    from app.config import settings

    # Access settings
    db_url = settings.POSTGRES_URL
    xp = settings.XP_PER_CORRECT_ANSWER
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings

from app.enums.api import RateLimitType


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "LinguaLearn"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # PostgreSQL
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "lingualearn"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "lingualearn"

    @property
    def POSTGRES_URL(self) -> str:
        """Async PostgreSQL connection URL."""
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def POSTGRES_URL_SYNC(self) -> str:
        """Sync PostgreSQL connection URL for maintenance scripts."""
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Admin panel - empty disables the key check (development mode)
    ADMIN_API_KEY: str = ""

    # LLM providers (AI feedback is optional)
    OPENAI_API_KEY: str = ""
    ANTHROPIC_API_KEY: str = ""
    GEMINI_API_KEY: str = ""

    # Text model for tutor feedback (LiteLLM "provider/model" format)
    TEXT_MODEL: str = "openai/gpt-4o-mini"
    FEEDBACK_ENABLED: bool = True
    FEEDBACK_TEMPERATURE: float = 0.7
    FEEDBACK_MAX_TOKENS: int = 500

    # Scoring
    XP_PER_CORRECT_ANSWER: int = 10
    XP_PER_INCORRECT_ANSWER: int = 0

    # SM-2 scheduling
    SM2_INITIAL_EASE_FACTOR: float = 2.5
    SM2_MIN_EASE_FACTOR: float = 1.3
    SM2_MAX_EASE_FACTOR: float = 3.0
    SM2_EASE_BONUS: float = 0.1  # Added on every correct review
    SM2_EASE_PENALTY: float = 0.2  # Subtracted on every lapse
    SM2_FIRST_INTERVAL_DAYS: int = 1
    SM2_SECOND_INTERVAL_DAYS: int = 6

    # Review queue
    REVIEW_DEFAULT_LIMIT: int = 20
    REVIEW_MAX_LIMIT: int = 100

    # Daily goal adaptation
    DAILY_GOAL_DEFAULT_XP: int = 30
    DAILY_GOAL_MIN_XP: int = 15
    DAILY_GOAL_MAX_XP: int = 120
    DAILY_GOAL_STEP_XP: int = 5
    DAILY_GOAL_RAISE_RATIO: float = 1.2
    DAILY_GOAL_LOWER_RATIO: float = 0.5
    DAILY_GOAL_WINDOW_DAYS: int = 7

    # Lesson unlocking: lesson N requires (N - 1) * step XP
    LESSON_UNLOCK_XP_STEP: int = 20

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "100/minute"
    RATE_LIMIT_LLM_HEAVY: str = "10/minute"
    RATE_LIMIT_ANALYTICS: str = "30/minute"
    RATE_LIMIT_ADMIN: str = "60/minute"

    def get_rate_limit(self, rate_limit_type: RateLimitType) -> str:
        """Return the configured rate limit string for an endpoint category."""
        return {
            RateLimitType.DEFAULT: self.RATE_LIMIT_DEFAULT,
            RateLimitType.LLM_HEAVY: self.RATE_LIMIT_LLM_HEAVY,
            RateLimitType.ANALYTICS: self.RATE_LIMIT_ANALYTICS,
            RateLimitType.ADMIN: self.RATE_LIMIT_ADMIN,
        }.get(rate_limit_type, self.RATE_LIMIT_DEFAULT)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()


@lru_cache()
def load_yaml_config() -> dict[str, Any]:
    """Load application configuration from config/default.yaml."""
    config_path = Path(__file__).parent.parent.parent.parent / "config" / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


yaml_config: dict[str, Any] = load_yaml_config()
