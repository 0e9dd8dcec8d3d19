"""
Error Handling Middleware

Provides consistent, informative error responses across the API.

Features:
- Standardized error response format
- Correlation IDs for log tracking
- Sanitized responses (hides internal details in production)
- Custom exception classes for different error types
- Endpoint decorator translating service errors into HTTP errors

Usage:
    from app.middleware.error_handling import (
        NotFoundError,
        handle_endpoint_errors,
    )

    # In a service
    raise NotFoundError(f"Lesson {lesson_id} not found")

    # In a router
    @router.get("/{lesson_id}")
    @handle_endpoint_errors("Get lesson")
    async def get_lesson(...):
        ...

Exception flow:
    Request → ErrorHandlingMiddleware.dispatch()
                  │
                  └─ try:
                        await call_next(request)  ← entire app runs here
                             │
                             └─ raise SomeException  ← bubbles up
                     except ServiceError:  ← caught here
                     except Exception:     ← or here

    Routers decorated with handle_endpoint_errors convert ServiceError into
    HTTPException before it reaches the middleware, so the middleware only
    sees errors from undecorated code paths.

    Caveat: BaseHTTPMiddleware cannot catch exceptions raised after the
    response body starts streaming (not an issue for JSON APIs).
"""

import functools
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Callable, Optional
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


# =============================================================================
# Custom Exceptions
# =============================================================================


class ServiceError(Exception):
    """
    Base exception for service errors.

    Provides consistent error handling with:
    - HTTP status code
    - Error code for categorization
    - Optional details for the client

    Example:
        raise ServiceError("Database connection failed", status_code=503)
    """

    status_code: int = 500
    error_code: str = "service_error"

    def __init__(
        self,
        message: str,
        status_code: int = None,
        error_code: str = None,
        details: dict = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code:
            self.status_code = status_code
        if error_code:
            self.error_code = error_code
        self.details = details


class NotFoundError(ServiceError):
    """Raised when a requested course, lesson, item or playlist doesn't exist."""

    status_code = 404
    error_code = "not_found"


class ValidationError(ServiceError):
    """Raised when input data fails business validation."""

    status_code = 422
    error_code = "validation_error"


class PersistenceError(ServiceError):
    """
    Learner progress could not be saved.

    The answer was judged but the review state, attempt or profile update
    was rolled back. details carries the verdict so the client can still
    show it alongside a "progress not saved" notice.
    """

    status_code = 503
    error_code = "progress_not_saved"


class LLMError(ServiceError):
    """
    LLM provider error.

    Raised when LLM API calls fail (rate limits, timeouts, etc.)
    """

    status_code = 502
    error_code = "llm_error"


class AuthorizationError(ServiceError):
    """Raised when a learner acts on a resource they don't own."""

    status_code = 403
    error_code = "forbidden"


# =============================================================================
# Error Handling Middleware
# =============================================================================


def _error_body(
    error_code: str,
    message: str,
    error_id: str,
    details: Optional[dict] = None,
) -> dict[str, Any]:
    return {
        "error": error_code,
        "message": message,
        "error_id": error_id,
        "details": details,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    - Catches unhandled exceptions
    - Logs with correlation ID
    - Returns consistent error format
    - Hides internal details in production
    """

    def __init__(self, app, debug: bool = False):
        """
        Initialize middleware.

        Args:
            app: FastAPI/Starlette application
            debug: Whether to include stack traces in responses
        """
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next):
        """Process request and handle any errors."""
        error_id = str(uuid4())[:8]

        try:
            return await call_next(request)

        except HTTPException:
            raise

        except ServiceError as e:
            logger.error(
                f"[{error_id}] {e.error_code}: {e.message}",
                extra={
                    "error_id": error_id,
                    "error_code": e.error_code,
                    "path": request.url.path,
                    "method": request.method,
                },
            )
            return JSONResponse(
                status_code=e.status_code,
                content=_error_body(e.error_code, e.message, error_id, e.details),
            )

        except Exception as e:
            logger.error(
                f"[{error_id}] Unhandled error: {type(e).__name__}: {e}",
                extra={
                    "error_id": error_id,
                    "path": request.url.path,
                    "method": request.method,
                    "traceback": traceback.format_exc(),
                },
            )

            details = None
            if self.debug:
                details = {
                    "exception": type(e).__name__,
                    "message": str(e),
                    "traceback": traceback.format_exc(),
                }

            return JSONResponse(
                status_code=500,
                content=_error_body(
                    "internal_server_error",
                    "An unexpected error occurred",
                    error_id,
                    details,
                ),
            )


# =============================================================================
# Router Helpers
# =============================================================================


def handle_endpoint_errors(operation_name: str) -> Callable:
    """
    Decorator converting exceptions raised by an endpoint into HTTP errors.

    - HTTPException passes through unchanged
    - ServiceError becomes an HTTPException with the error's status code and
      a detail dict of error code, message and details
    - Anything else is logged with its traceback and becomes a 500 whose
      detail names the operation

    Args:
        operation_name: Human-readable operation (e.g. "Submit attempt"),
            used in logs and 500 messages.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except ServiceError as e:
                logger.warning(f"{operation_name} failed: {e.error_code}: {e.message}")
                detail = {"error": e.error_code, "message": e.message}
                if e.details:
                    detail["details"] = e.details
                raise HTTPException(status_code=e.status_code, detail=detail)
            except Exception as e:
                logger.exception(f"{operation_name} failed: {e}")
                raise HTTPException(
                    status_code=500,
                    detail=f"{operation_name} failed",
                )

        return wrapper

    return decorator


def setup_error_handling(app: FastAPI, debug: bool = False) -> None:
    """
    Configure error handling on the FastAPI app.

    Args:
        app: FastAPI application instance
        debug: Whether to include stack traces in responses
    """
    app.add_middleware(ErrorHandlingMiddleware, debug=debug)
    logger.info(f"Error handling middleware enabled (debug={debug})")
