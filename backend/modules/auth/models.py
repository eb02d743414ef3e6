"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from typing import Optional
from pydantic import BaseModel, Field, EmailStr

from shared.models import APIResponse
from modules.users.models import UserProfile


class JWTPayload(BaseModel):
    """Decoded session token claims."""

    sub: str = Field(..., description="Subject (user ID)")
    role: Optional[str] = Field(None, description="User role at issue time")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")


class RegisterRequest(BaseModel):
    """Request to create an account."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(BaseModel):
    """Request to sign in."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthSession(BaseModel):
    """A signed-in user and the token that proves it."""

    user: UserProfile
    token: str


class AuthResponse(APIResponse):
    """
    Response to register and login.

    The token is also set as an HTTP-only cookie; it is returned in the
    body for clients that send it as a Bearer header instead.
    """

    user: UserProfile
    access_token: str
    token_type: str = "bearer"
