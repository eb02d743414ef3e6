"""
Authentication service implementation.

Issues and validates HS256 session tokens and checks passwords against
bcrypt hashes stored on the user document.
"""

import logging
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from shared.config import Settings
from shared.models import AuthenticatedUser
from modules.users.exceptions import DuplicateEmailError
from modules.users.models import DEFAULT_ROLE, User
from modules.users.repository import UserRepository

from .interfaces import IAuthService
from .models import AuthSession, JWTPayload
from .exceptions import (
    NOT_AUTHORIZED_MESSAGE,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    UnknownUserError,
)

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Tokens are signed with the configured JWT secret; users are looked
    up in the users collection.
    """

    def __init__(self, users: UserRepository, settings: Settings):
        self._users = users
        self._settings = settings

    # -------------------------------------------------------------------------
    # Tokens
    # -------------------------------------------------------------------------

    def issue_token(self, user: User) -> str:
        """Sign a session token carrying the user's ID and role."""
        now = datetime.now(timezone.utc)
        expire = now + timedelta(minutes=self._settings.access_token_expire_minutes)
        claims = {
            "sub": user.id,
            "role": user.role,
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp()),
        }
        return jwt.encode(claims, self._settings.jwt_secret, algorithm=self._settings.jwt_algorithm)

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Validate a session token and return the authenticated user.

        A token without a role, or naming a user that has since been
        deleted, is rejected even if its signature is valid.
        """
        if not token:
            raise MissingTokenError()

        if not self._settings.jwt_secret:
            raise InvalidTokenError("Server authentication not configured")

        try:
            payload = jwt.decode(
                token,
                self._settings.jwt_secret,
                algorithms=[self._settings.jwt_algorithm],
            )
            claims = JWTPayload(**payload)
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(str(e))
        except ValueError as e:
            raise InvalidTokenError(f"Malformed token claims: {e}")

        if not claims.role:
            raise InvalidTokenError(NOT_AUTHORIZED_MESSAGE)

        if self._users.get_by_id(claims.sub) is None:
            logger.warning("Token presented for missing user %s", claims.sub)
            raise UnknownUserError(claims.sub)

        return AuthenticatedUser(id=claims.sub, role=claims.role)

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    async def register(self, name: str, email: str, password: str) -> AuthSession:
        if self._users.get_by_email(email) is not None:
            raise DuplicateEmailError(email)

        user = self._users.create({
            "name": name,
            "email": email,
            "password": pwd_context.hash(password),
            "role": DEFAULT_ROLE,
        })
        logger.info("Registered user %s", user.id)
        return AuthSession(user=user.to_profile(), token=self.issue_token(user))

    async def login(self, email: str, password: str) -> AuthSession:
        user = self._users.get_by_email(email)
        if user is None or not pwd_context.verify(password, user.password):
            raise InvalidCredentialsError()
        return AuthSession(user=user.to_profile(), token=self.issue_token(user))
