"""
User service implementation with Supabase.
"""

import logging

from shared.config import Settings
from modules.integrity.service import ReferentialIntegrityService
from modules.posts.repository import PostRepository
from modules.storage.models import FileUpload
from modules.storage.service import StorageService

from .exceptions import (
    DuplicateEmailError,
    UnsupportedFileTypeError,
    UserNotFoundError,
    UsersNotDeletedError,
)
from .interfaces import IUserService
from .models import AdminUserView, PostSummary, UpdateProfileRequest, UserProfile
from .repository import UserRepository

logger = logging.getLogger(__name__)


class UserService(IUserService):
    """
    User service with Supabase backend.

    Implements IUserService protocol with real database operations.
    """

    def __init__(
        self,
        users: UserRepository,
        posts: PostRepository,
        integrity: ReferentialIntegrityService,
        storage: StorageService,
        settings: Settings,
    ):
        self._users = users
        self._posts = posts
        self._integrity = integrity
        self._storage = storage
        self._settings = settings

    async def get_profile(self, user_id: str) -> UserProfile:
        user = self._users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user.to_profile()

    async def update_profile(
        self,
        user_id: str,
        request: UpdateProfileRequest,
    ) -> UserProfile:
        """Apply the fields present in the request."""
        user = self._users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        changes = request.model_dump(exclude_none=True)
        email = changes.get("email")
        if email is not None and email != user.email:
            existing = self._users.get_by_email(email)
            if existing is not None and existing.id != user_id:
                raise DuplicateEmailError(email)

        if not changes:
            return user.to_profile()

        updated = self._users.update(user_id, changes)
        if updated is None:
            raise UserNotFoundError(user_id)

        logger.info("Updated profile of user %s: %s", user_id, sorted(changes))
        return updated.to_profile()

    async def upload_avatar(self, user_id: str, upload: FileUpload) -> UserProfile:
        """Store the image at a fixed key per user so re-uploads overwrite."""
        allowed = self._settings.avatar_extensions
        if upload.extension not in allowed:
            raise UnsupportedFileTypeError(upload.filename, allowed)

        if self._users.get_by_id(user_id) is None:
            raise UserNotFoundError(user_id)

        url = self._storage.upload(
            f"avatars/{user_id}.{upload.extension}",
            upload.content,
            upload.content_type,
            overwrite=True,
        )
        updated = self._users.update(user_id, {"avatar": url})
        if updated is None:
            raise UserNotFoundError(user_id)
        return updated.to_profile()

    async def delete_account(self, user_id: str) -> None:
        self._integrity.delete_user(user_id)
        logger.info("Deleted account %s", user_id)

    async def delete_users(self, user_ids: list[str]) -> int:
        """
        Bulk delete for admins.

        Raises:
            UsersNotDeletedError: If fewer users were deleted than requested.
                Users that did exist are gone, along with their posts.
        """
        requested = list(dict.fromkeys(user_ids))
        deleted = self._integrity.delete_users(requested)
        if deleted != len(requested):
            logger.warning("Deleted %d of %d requested users", deleted, len(requested))
            raise UsersNotDeletedError(len(requested), deleted)
        return deleted

    async def list_users_with_posts(self) -> list[AdminUserView]:
        users = self._users.list_all()
        post_ids = [pid for user in users for pid in user.posts]
        summaries = {
            post.id: PostSummary(id=post.id, description=post.description)
            for post in self._posts.find(post_ids=post_ids)
        }

        views = []
        for user in users:
            profile = user.to_profile().model_dump(exclude={"posts"})
            posts = [summaries[pid] for pid in user.posts if pid in summaries]
            views.append(AdminUserView(**profile, posts=posts))
        return views
