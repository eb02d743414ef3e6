"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with mocks.
"""

from typing import Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import AuthSession


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to other modules. Implementations must provide all these methods.
    """

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Validate a session token and return the authenticated user.

        Args:
            token: Signed session token from the cookie or Bearer header

        Returns:
            AuthenticatedUser with user ID and role

        Raises:
            MissingTokenError: If token is empty
            ExpiredTokenError: If token has expired
            InvalidTokenError: If token is malformed or carries no role
            UnknownUserError: If the user no longer exists
        """
        ...

    async def register(self, name: str, email: str, password: str) -> AuthSession:
        """
        Create an account and sign it in.

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        ...

    async def login(self, email: str, password: str) -> AuthSession:
        """
        Sign in with email and password.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong
        """
        ...
