"""
Users module interface.
"""

from typing import Protocol, runtime_checkable

from modules.storage.models import FileUpload

from .models import AdminUserView, UpdateProfileRequest, UserProfile


@runtime_checkable
class IUserService(Protocol):
    """Interface for profile and account operations."""

    async def get_profile(self, user_id: str) -> UserProfile:
        """
        Get a user's profile.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        ...

    async def update_profile(
        self,
        user_id: str,
        request: UpdateProfileRequest,
    ) -> UserProfile:
        """
        Update name, email or onboarding flag. Omitted fields are kept.

        Raises:
            UserNotFoundError: If the user does not exist
            DuplicateEmailError: If the new email belongs to another user
        """
        ...

    async def upload_avatar(self, user_id: str, upload: FileUpload) -> UserProfile:
        """
        Store a new avatar image, replacing any previous one.

        Raises:
            UnsupportedFileTypeError: If the file is not jpg, jpeg or png
        """
        ...

    async def delete_account(self, user_id: str) -> None:
        """Delete a user together with all of their posts."""
        ...

    async def delete_users(self, user_ids: list[str]) -> int:
        """Delete several users and their posts. Returns the number deleted."""
        ...

    async def list_users_with_posts(self) -> list[AdminUserView]:
        """All users with their posts expanded to summaries, newest first."""
        ...
