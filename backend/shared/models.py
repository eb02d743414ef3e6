"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from typing import Optional
from pydantic import BaseModel, Field


ADMIN_ROLE = "admin"


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated caller.

    Populated from the session token by the access control gate and made
    available to route handlers via dependency injection. Deliberately
    minimal: anything else about the user is looked up when needed.
    """

    id: str = Field(..., description="User ID")
    role: str = Field(..., min_length=1, description="User role")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",  # Ignore extra claims from the token
    }

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


class APIResponse(BaseModel):
    """
    Envelope shared by every API response.

    Route-specific responses subclass this and add their payload fields.
    """

    success: bool = True
    message: Optional[str] = None
