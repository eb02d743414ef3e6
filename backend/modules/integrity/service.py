"""
Referential integrity between users and posts.

Every post appears in exactly one user's `posts` list, and no post outlives
its owner. The procedures here are the only code paths that create or
delete posts and users, and each one performs its steps in a fixed order:

- create: post row, then owner's `posts`
- delete post(s): post rows, then each owner's `posts`
- delete user(s): owned posts (as above), then their likes and comments
  on other posts, then the user rows

There is no transaction around the steps. If a later step fails the
earlier ones stay applied and PartialCascadeError is raised.
"""

import logging
from collections import defaultdict
from typing import Any, Optional

from modules.posts.exceptions import PostNotFoundError
from modules.posts.models import Post
from modules.posts.repository import PostRepository
from modules.users.exceptions import UserNotFoundError
from modules.users.repository import UserRepository

from .exceptions import PartialCascadeError

logger = logging.getLogger(__name__)


class ReferentialIntegrityService:
    """Creates and deletes posts and users while keeping references in sync."""

    def __init__(self, users: UserRepository, posts: PostRepository):
        self._users = users
        self._posts = posts

    # -------------------------------------------------------------------------
    # Posts
    # -------------------------------------------------------------------------

    def create_post(self, data: dict[str, Any]) -> Post:
        """
        Persist a post and register it with its owner.

        Args:
            data: Post columns; must include user_id.

        Returns:
            The created post.

        Raises:
            PartialCascadeError: The post was stored but the owner's posts
                list could not be updated.
        """
        post = self._posts.create(data)

        try:
            linked = self._users.add_post(post.user_id, post.id)
        except Exception as e:
            logger.error(
                "Post %s stored but not linked to user %s: %s",
                post.id, post.user_id, e,
            )
            raise PartialCascadeError(
                "link_post_to_owner", post_id=post.id, user_id=post.user_id, reason=str(e)
            ) from e

        if not linked:
            logger.error("Post %s stored but owner %s is missing", post.id, post.user_id)
            raise PartialCascadeError(
                "link_post_to_owner",
                post_id=post.id,
                user_id=post.user_id,
                reason="owner not found",
            )

        return post

    def delete_post(self, post_id: str) -> Post:
        """
        Delete a post and remove it from its owner's posts.

        Returns:
            The deleted post.

        Raises:
            PostNotFoundError: If the post does not exist.
            PartialCascadeError: The post was deleted but the owner could
                not be updated.
        """
        post = self._posts.get_by_id(post_id)
        if post is None:
            raise PostNotFoundError(post_id)

        if not self._posts.delete(post_id):
            raise PostNotFoundError(post_id)

        try:
            unlinked = self._users.remove_posts(post.user_id, [post_id])
        except Exception as e:
            logger.error(
                "Post %s deleted but not unlinked from user %s: %s",
                post_id, post.user_id, e,
            )
            raise PartialCascadeError(
                "unlink_post_from_owner", post_id=post_id, user_id=post.user_id, reason=str(e)
            ) from e

        if not unlinked:
            logger.error("Post %s deleted but owner %s is missing", post_id, post.user_id)
            raise PartialCascadeError(
                "unlink_post_from_owner",
                post_id=post_id,
                user_id=post.user_id,
                reason="owner not found",
            )

        return post

    def delete_posts(
        self,
        post_ids: Optional[list[str]] = None,
        owner_ids: Optional[list[str]] = None,
    ) -> list[Post]:
        """
        Delete every post matching a filter and unlink each from its owner.

        Zero matches is a successful no-op. Owners that no longer exist
        have nothing to repair and are skipped.

        Returns:
            The deleted posts.
        """
        matched = self._posts.find(post_ids=post_ids, owner_ids=owner_ids)
        if not matched:
            return []

        ids = [post.id for post in matched]
        deleted = self._posts.delete_many(ids)
        logger.debug("Deleted %d of %d matched posts", deleted, len(ids))

        by_owner: dict[str, list[str]] = defaultdict(list)
        for post in matched:
            by_owner[post.user_id].append(post.id)

        for owner_id, owned in by_owner.items():
            try:
                found = self._users.remove_posts(owner_id, owned)
            except Exception as e:
                logger.error(
                    "Posts %s deleted but not unlinked from user %s: %s",
                    owned, owner_id, e,
                )
                raise PartialCascadeError(
                    "unlink_posts_from_owner", user_id=owner_id, reason=str(e)
                ) from e
            if not found:
                logger.warning("Owner %s of deleted posts no longer exists", owner_id)

        return matched

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def delete_users(self, user_ids: list[str]) -> int:
        """
        Delete users after deleting every post they own and removing
        their likes and comments from everyone else's posts.

        Returns:
            Number of user rows deleted.

        Raises:
            PartialCascadeError: Posts were removed but the users could not be.
        """
        if not user_ids:
            return 0

        self.delete_posts(owner_ids=user_ids)
        self.remove_user_references(user_ids)

        try:
            return self._users.delete_many(user_ids)
        except Exception as e:
            logger.error("Posts of users %s deleted but users were not: %s", user_ids, e)
            raise PartialCascadeError("delete_users", reason=str(e)) from e

    def remove_user_references(self, user_ids: list[str]) -> int:
        """
        Drop the users' likes and comments from posts they do not own.

        Returns:
            Number of posts rewritten.

        Raises:
            PartialCascadeError: A post could not be rewritten.
        """
        gone = set(user_ids)
        touched = 0
        for post in self._posts.find_referencing(user_ids):
            likes = [uid for uid in post.likes if uid not in gone]
            comments = [c for c in post.comments if c.user_id not in gone]
            try:
                if len(likes) != len(post.likes):
                    self._posts.save_likes(post.id, likes)
                if len(comments) != len(post.comments):
                    self._posts.save_comments(post.id, comments)
            except Exception as e:
                logger.error("Could not remove users %s from post %s: %s", user_ids, post.id, e)
                raise PartialCascadeError(
                    "remove_user_references", post_id=post.id, reason=str(e)
                ) from e
            touched += 1
        logger.debug("Removed likes and comments of %s from %d posts", user_ids, touched)
        return touched

    def delete_user(self, user_id: str) -> None:
        """
        Delete a single user and their posts.

        Raises:
            UserNotFoundError: If no user was deleted.
        """
        if self.delete_users([user_id]) == 0:
            raise UserNotFoundError(user_id)
