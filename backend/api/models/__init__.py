"""
API-level models.

Module-specific request/response models live in their modules.
"""

from .errors import ErrorResponse, ValidationErrorResponse

__all__ = ["ErrorResponse", "ValidationErrorResponse"]
