"""
Middleware Package

Provides FastAPI middleware for:
- Rate limiting
- Error handling

Rate limiting usage:
    from app.middleware import limiter
    from app.enums import RateLimitType
    from app.config import settings

    @limiter.limit(settings.get_rate_limit(RateLimitType.LLM_HEAVY))
    async def my_endpoint(request: Request):
        ...
"""

from app.middleware.error_handling import (
    AuthorizationError,
    ErrorHandlingMiddleware,
    LLMError,
    NotFoundError,
    PersistenceError,
    ServiceError,
    ValidationError,
    handle_endpoint_errors,
    setup_error_handling,
)
from app.middleware.rate_limit import get_rate_limit, limiter, setup_rate_limiting

__all__ = [
    "setup_rate_limiting",
    "limiter",
    "get_rate_limit",
    "ErrorHandlingMiddleware",
    "setup_error_handling",
    "handle_endpoint_errors",
    "ServiceError",
    "NotFoundError",
    "ValidationError",
    "PersistenceError",
    "LLMError",
    "AuthorizationError",
]
