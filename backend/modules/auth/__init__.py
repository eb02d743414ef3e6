"""
Authentication module.

Handles registration, login, and session token issue and validation.

Public API:
- IAuthService: Interface for auth operations
- Models: JWTPayload, RegisterRequest, LoginRequest, AuthSession, AuthResponse
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import IAuthService
from .models import JWTPayload, RegisterRequest, LoginRequest, AuthSession, AuthResponse
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    UnknownUserError,
    InvalidCredentialsError,
    InsufficientPermissionsError,
)

__all__ = [
    # Interface
    "IAuthService",
    # Models
    "JWTPayload",
    "RegisterRequest",
    "LoginRequest",
    "AuthSession",
    "AuthResponse",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "UnknownUserError",
    "InvalidCredentialsError",
    "InsufficientPermissionsError",
]
