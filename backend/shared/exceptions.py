"""
Base exception classes for the Postly backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base class to an HTTP status, so a new exception
only has to pick the right parent.
"""

from typing import Optional, Any


class PostlyError(Exception):
    """
    Base exception for all Postly errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "success": False,
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(PostlyError):
    """Resource not found."""

    pass


class ValidationError(PostlyError):
    """Input validation failed."""

    pass


class AuthenticationError(PostlyError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(PostlyError):
    """Authorization failed (insufficient permissions)."""

    pass


class ExternalServiceError(PostlyError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
