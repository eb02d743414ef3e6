"""
Error response models.

Standardized error responses for the API.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    success: bool = False
    message: str
    error: Optional[str] = None
    details: dict[str, Any] = Field(default_factory=dict)


class ValidationErrorResponse(ErrorResponse):
    """Validation error response format."""

    error: str = "VALIDATION_ERROR"
    message: str = "Invalid request"
