"""
Posts service implementation with Supabase.

Writes that create or delete posts go through the referential integrity
service. Reads are enriched by a PostAggregator created per call, then
paid posts are locked for viewers without an entitlement.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
import uuid

from shared.models import AuthenticatedUser
from modules.integrity.service import ReferentialIntegrityService
from modules.storage.models import FileUpload
from modules.storage.service import StorageService
from modules.users.exceptions import UserNotFoundError
from modules.users.repository import UserRepository

from .aggregation import PostAggregator
from .exceptions import (
    CommentNotFoundError,
    EmptyQueryError,
    InvalidPriceError,
    PostAccessDeniedError,
    PostNotFoundError,
)
from .interfaces import IPostService
from .models import Comment, CreatePostRequest, Post, PostView
from .repository import PostRepository

logger = logging.getLogger(__name__)


class PostService(IPostService):
    """
    Post service with Supabase backend.

    Implements IPostService protocol with real database operations.
    """

    def __init__(
        self,
        posts: PostRepository,
        users: UserRepository,
        integrity: ReferentialIntegrityService,
        storage: StorageService,
    ):
        self._posts = posts
        self._users = users
        self._integrity = integrity
        self._storage = storage

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create_post(
        self,
        user_id: str,
        request: CreatePostRequest,
        uploads: list[FileUpload],
    ) -> Post:
        """Upload attachments, then create the post and link it to its owner."""
        if self._users.get_by_id(user_id) is None:
            raise UserNotFoundError(user_id)

        if request.is_paid and request.price <= 0:
            raise InvalidPriceError(str(request.price))

        files = []
        for upload in uploads:
            stamp = int(datetime.now(timezone.utc).timestamp() * 1000)
            key = f"{user_id}/{stamp}-{upload.filename}"
            url = self._storage.upload(key, upload.content, upload.content_type)
            files.append({"url": url, "name": upload.filename, "file_name": key})

        data = {
            "user_id": user_id,
            "title": request.title,
            "description": request.description,
            "files": files,
            "is_paid": request.is_paid,
            "price": float(request.price),
            "likes": [],
            "comments": [],
        }
        post = self._integrity.create_post(data)
        logger.info("User %s created post %s with %d files", user_id, post.id, len(files))
        return post

    async def delete_post(self, post_id: str, requester: AuthenticatedUser) -> Post:
        """Remove stored attachments, then delete the post and unlink it."""
        post = self._get_or_raise(post_id)

        if post.user_id != requester.id and not requester.is_admin:
            raise PostAccessDeniedError(post_id, requester.id)

        self._storage.remove([f.file_name for f in post.files])
        deleted = self._integrity.delete_post(post_id)
        logger.info("User %s deleted post %s", requester.id, post_id)
        return deleted

    async def delete_posts(self, post_ids: list[str]) -> int:
        """Admin bulk delete. IDs that match nothing are ignored."""
        matched = self._posts.find(post_ids=post_ids)
        self._storage.remove([f.file_name for post in matched for f in post.files])
        deleted = self._integrity.delete_posts(post_ids=[post.id for post in matched])
        logger.info("Deleted %d of %d requested posts", len(deleted), len(post_ids))
        return len(deleted)

    async def add_comment(
        self,
        post_id: str,
        user_id: str,
        text: str,
        date: Optional[datetime] = None,
    ) -> Post:
        """Insert a comment at the front of the post's comments."""
        post = self._get_or_raise(post_id)

        comment = Comment(
            id=str(uuid.uuid4()),
            user_id=user_id,
            text=text,
            date=date or datetime.now(timezone.utc),
        )
        updated = self._posts.save_comments(post_id, [comment] + post.comments)
        if updated is None:
            raise PostNotFoundError(post_id)
        return updated

    async def delete_comment(
        self,
        post_id: str,
        comment_id: str,
        requester: AuthenticatedUser,
    ) -> Post:
        """Remove a comment written by the requester, or any comment on their post."""
        post = self._get_or_raise(post_id)

        comment = next((c for c in post.comments if c.id == comment_id), None)
        if comment is None:
            raise CommentNotFoundError(post_id, comment_id)

        allowed = requester.id in (comment.user_id, post.user_id) or requester.is_admin
        if not allowed:
            raise PostAccessDeniedError(post_id, requester.id)

        remaining = [c for c in post.comments if c.id != comment_id]
        updated = self._posts.save_comments(post_id, remaining)
        if updated is None:
            raise PostNotFoundError(post_id)
        return updated

    async def toggle_like(self, post_id: str, user_id: str) -> Post:
        """Add user_id to likes if absent, remove it if present."""
        post = self._get_or_raise(post_id)

        if user_id in post.likes:
            likes = [uid for uid in post.likes if uid != user_id]
        else:
            likes = post.likes + [user_id]

        updated = self._posts.save_likes(post_id, likes)
        if updated is None:
            raise PostNotFoundError(post_id)
        return updated

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def list_posts(self, viewer: AuthenticatedUser) -> list[PostView]:
        return self._present(self._posts.list_all(), viewer)

    async def list_user_posts(
        self,
        user_id: str,
        viewer: AuthenticatedUser,
    ) -> list[PostView]:
        if self._users.get_by_id(user_id) is None:
            raise UserNotFoundError(user_id)
        return self._present(self._posts.list_by_user(user_id), viewer)

    async def get_post(self, post_id: str, viewer: AuthenticatedUser) -> PostView:
        post = self._get_or_raise(post_id)
        return self._present([post], viewer)[0]

    async def search(self, query: str, viewer: AuthenticatedUser) -> list[PostView]:
        """Match title or description, or any post by a user whose name matches."""
        term = (query or "").strip()
        if not term:
            raise EmptyQueryError()

        owner_ids = self._users.search_ids_by_name(term)
        return self._present(self._posts.search(term, owner_ids), viewer)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _get_or_raise(self, post_id: str) -> Post:
        post = self._posts.get_by_id(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    def _present(self, posts: list[Post], viewer: AuthenticatedUser) -> list[PostView]:
        views = PostAggregator(self._users).enrich(posts)
        return self._apply_entitlements(views, viewer)

    def _apply_entitlements(
        self,
        views: list[PostView],
        viewer: AuthenticatedUser,
    ) -> list[PostView]:
        """Withhold files of paid posts the viewer neither owns nor bought."""
        if viewer.is_admin:
            return views

        restricted = [v for v in views if v.is_paid and v.user_id != viewer.id]
        if not restricted:
            return views

        buyer = self._users.get_by_id(viewer.id)
        entitled = set(buyer.paid_for_posts) if buyer else set()

        return [
            view.model_copy(update={"files": [], "locked": True})
            if view.is_paid and view.user_id != viewer.id and view.id not in entitled
            else view
            for view in views
        ]
