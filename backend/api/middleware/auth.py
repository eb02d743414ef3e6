"""
Session authentication dependencies.

The session token travels in an HTTP-only cookie set at login. Clients
that cannot use cookies may send the same token as a Bearer header,
which takes precedence when both are present.
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from shared.config import get_settings
from shared.models import ADMIN_ROLE, AuthenticatedUser
from modules.auth.exceptions import InsufficientPermissionsError
from modules.auth.interfaces import IAuthService

from ..dependencies import get_auth_service

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


def extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> str:
    """Return the Bearer token if given, otherwise the session cookie, otherwise ""."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(get_settings().session_cookie_name, "")


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth: IAuthService = Depends(get_auth_service),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Use this for endpoints that require a logged-in user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    return await auth.validate_token(extract_token(request, credentials))


async def require_admin(
    user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    """Dependency that requires an authenticated admin."""
    if not user.is_admin:
        raise InsufficientPermissionsError(ADMIN_ROLE, user.role)
    return user


# Type aliases for cleaner route definitions
RequireAuth = Depends(get_current_user)
RequireAdmin = Depends(require_admin)
