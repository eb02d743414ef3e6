"""
Posts module interface.

The API layer depends on IPostService for all post operations.
"""

from datetime import datetime
from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser
from modules.storage.models import FileUpload

from .models import CreatePostRequest, Post, PostView


@runtime_checkable
class IPostService(Protocol):
    """
    Interface for post operations.

    Reads return PostView objects enriched with author display fields;
    writes return the stored Post.
    """

    async def create_post(
        self,
        user_id: str,
        request: CreatePostRequest,
        uploads: list[FileUpload],
    ) -> Post:
        """
        Upload attachments and create a post owned by user_id.

        Raises:
            UserNotFoundError: If the owner does not exist
            InvalidPriceError: If a paid post has no positive price
            StorageError: If an attachment upload fails
            PartialCascadeError: If the post was stored but not linked to its owner
        """
        ...

    async def delete_post(self, post_id: str, requester: AuthenticatedUser) -> Post:
        """
        Delete a post and its attachments. Owner or admin only.

        Raises:
            PostNotFoundError: If the post does not exist
            PostAccessDeniedError: If the requester may not delete it
        """
        ...

    async def delete_posts(self, post_ids: list[str]) -> int:
        """Delete several posts and their attachments. Returns the number deleted."""
        ...

    async def add_comment(
        self,
        post_id: str,
        user_id: str,
        text: str,
        date: Optional[datetime] = None,
    ) -> Post:
        """Add a comment at the front of the post's comments."""
        ...

    async def delete_comment(
        self,
        post_id: str,
        comment_id: str,
        requester: AuthenticatedUser,
    ) -> Post:
        """
        Delete a comment. Comment author, post owner or admin only.

        Raises:
            CommentNotFoundError: If the comment does not exist
        """
        ...

    async def toggle_like(self, post_id: str, user_id: str) -> Post:
        """Like the post if user_id has not, otherwise remove the like."""
        ...

    async def list_posts(self, viewer: AuthenticatedUser) -> list[PostView]:
        """All posts, newest first."""
        ...

    async def list_user_posts(
        self,
        user_id: str,
        viewer: AuthenticatedUser,
    ) -> list[PostView]:
        """Posts owned by user_id, newest first."""
        ...

    async def get_post(self, post_id: str, viewer: AuthenticatedUser) -> PostView:
        """A single post."""
        ...

    async def search(self, query: str, viewer: AuthenticatedUser) -> list[PostView]:
        """Posts matching query by title, description or author name."""
        ...
