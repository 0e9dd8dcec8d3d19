"""
Base Models for API Request/Response Validation

Request bodies are strict so that a front end sending a misspelled field
gets a 422 instead of a silently ignored value. Response bodies are built
from ORM rows that carry more columns than the API exposes, so they ignore
extras.

Usage:
    class CourseCreate(StrictRequest):
        title: str

    class CourseResponse(StrictResponse):
        id: str
        title: str

    CourseResponse.model_validate(db_course)
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class StrictRequest(BaseModel):
    """
    Base model for API request bodies.

    - extra="forbid": Unknown fields raise 422 Unprocessable Entity
    - str_strip_whitespace=True: Trims surrounding whitespace from strings
    - from_attributes=True: Allows ORM model conversion
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
        from_attributes=True,
    )


class StrictResponse(BaseModel):
    """
    Base model for API response bodies.

    Ignores extra attributes so ORM rows can be validated directly.
    """

    model_config = ConfigDict(
        extra="ignore",
        validate_default=True,
        from_attributes=True,
    )


class ErrorDetail(StrictResponse):
    """
    Standardized error response body.

    Matches the error format produced by the error_handling middleware.
    """

    error: str  # Error code (e.g., "not_found")
    message: str  # Human-readable message
    error_id: str  # Correlation ID for log lookup
    details: Optional[dict] = None
    timestamp: datetime


class SuccessResponse(StrictResponse):
    """Simple acknowledgement for operations without a richer result."""

    success: bool = True
    message: str
