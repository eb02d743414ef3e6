"""
Read-side enrichment of posts with user display fields.

A PostAggregator lives for one request. It resolves every user reference
in a result set (post author, commenters, likers) to a UserProjection,
looking each distinct user up once and serving repeats from a dict.
"""

import logging
from typing import Iterable

from modules.users.models import UserProjection
from modules.users.repository import UserRepository

from .exceptions import AuthorNotFoundError
from .models import CommentView, Post, PostView

logger = logging.getLogger(__name__)


class PostAggregator:
    """
    Per-request author cache and post enricher.

    Create a new instance per request; the cache is never invalidated.
    """

    def __init__(self, users: UserRepository):
        self._users = users
        self._cache: dict[str, UserProjection] = {}
        self.lookup_count = 0

    def resolve(self, user_id: str) -> UserProjection:
        """
        Get the display projection of a user.

        Raises:
            AuthorNotFoundError: If the user does not exist.
        """
        cached = self._cache.get(user_id)
        if cached is not None:
            return cached

        self.lookup_count += 1
        projection = self._users.get_projection(user_id)
        if projection is None:
            logger.warning("Post references missing user %s", user_id)
            raise AuthorNotFoundError(user_id)

        self._cache[user_id] = projection
        return projection

    def enrich_post(self, post: Post) -> PostView:
        """Attach display fields to one post without reordering anything."""
        comments = []
        for comment in post.comments:
            author = self.resolve(comment.user_id)
            comments.append(
                CommentView(
                    **comment.model_dump(),
                    name=author.name,
                    avatar=author.avatar,
                )
            )

        likes = [self.resolve(user_id) for user_id in post.likes]
        author = self.resolve(post.user_id)

        return PostView(
            **post.model_dump(exclude={"comments", "likes"}),
            comments=comments,
            likes=likes,
            name=author.name,
            avatar=author.avatar,
        )

    def enrich(self, posts: Iterable[Post]) -> list[PostView]:
        """Enrich a sequence of posts, preserving its order."""
        views = [self.enrich_post(post) for post in posts]
        logger.debug(
            "Enriched %d posts with %d user lookups", len(views), self.lookup_count
        )
        return views
