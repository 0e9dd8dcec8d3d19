"""
Rate Limiting Middleware

Prevents abuse and ensures fair resource usage using SlowAPI.

Usage:
    from app.middleware.rate_limit import limiter
    from app.enums import RateLimitType
    from app.config import settings

    @router.post("/feedback")
    @limiter.limit(settings.get_rate_limit(RateLimitType.LLM_HEAVY))
    async def get_feedback(request: Request, ...):
        ...

Rate limit configurations (from settings):
- DEFAULT: Catalog, practice and review endpoints (100/minute)
- LLM_HEAVY: Endpoints that call LLMs (10/minute)
- ANALYTICS: Profile analytics (30/minute)
- ADMIN: Catalog editing (60/minute)
"""

import logging

from fastapi import FastAPI, Request
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from app.config import settings
from app.enums import RateLimitType

logger = logging.getLogger(__name__)


def get_client_identifier(request: Request) -> str:
    """
    Get client identifier for rate limiting.

    Learners are limited per learner id when the X-Learner-Id header is
    present. Otherwise the first X-Forwarded-For address (behind a proxy)
    or the direct client address is used.

    Args:
        request: FastAPI request object

    Returns:
        Learner id or client IP address
    """
    learner_id = request.headers.get("X-Learner-Id")
    if learner_id:
        return f"learner:{learner_id.strip()}"

    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_client_identifier,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    enabled=settings.RATE_LIMIT_ENABLED,
)


def setup_rate_limiting(app: FastAPI, enabled: bool = True) -> None:
    """
    Configure rate limiting on the FastAPI app.

    Args:
        app: FastAPI application instance
        enabled: Whether to enable rate limiting
    """
    # Decorated endpoints look the limiter up on app state even when disabled
    app.state.limiter = limiter

    if not enabled:
        limiter.enabled = False
        logger.info("Rate limiting disabled")
        return

    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    logger.info("Rate limiting enabled")


def get_rate_limit(rate_limit_type: RateLimitType) -> str:
    """
    Get rate limit string for an endpoint type.

    Args:
        rate_limit_type: RateLimitType enum value

    Returns:
        Rate limit string (e.g., "100/minute")
    """
    return settings.get_rate_limit(rate_limit_type)
