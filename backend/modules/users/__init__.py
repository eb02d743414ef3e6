"""
Users module.

Profiles, avatars and account deletion.

Public API:
- IUserService: Protocol defining user operations
- Models: User, UserProfile, UserProjection, AdminUserView, UpdateProfileRequest
- Exceptions: UserNotFoundError, DuplicateEmailError, UnsupportedFileTypeError
"""

from .interfaces import IUserService
from .models import (
    User,
    UserProfile,
    UserProjection,
    AdminUserView,
    PostSummary,
    UpdateProfileRequest,
    UserResponse,
    UserListResponse,
)
from .exceptions import (
    UserNotFoundError,
    UsersNotDeletedError,
    DuplicateEmailError,
    UnsupportedFileTypeError,
)

__all__ = [
    # Interface
    "IUserService",
    # Models
    "User",
    "UserProfile",
    "UserProjection",
    "AdminUserView",
    "PostSummary",
    "UpdateProfileRequest",
    "UserResponse",
    "UserListResponse",
    # Exceptions
    "UserNotFoundError",
    "UsersNotDeletedError",
    "DuplicateEmailError",
    "UnsupportedFileTypeError",
]
