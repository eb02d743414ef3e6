"""
Post repository for database access.

Encapsulates all Supabase queries against the posts collection. Files,
likes and comments are JSON arrays embedded in the post row.
"""

import json
from decimal import Decimal
from typing import Any, Optional

from supabase import Client

from shared.repository import BaseRepository
from .models import Comment, Post, PostFile


# Characters with meaning inside a PostgREST or=() filter
_FILTER_RESERVED = str.maketrans({c: " " for c in ",()*%\\\""})


class PostRepository(BaseRepository[Post]):
    """
    Repository for post documents.

    Note: Creating or deleting posts here does NOT touch the owner's
    posts list. Go through the referential integrity service for that.
    """

    def __init__(self, db: Client, table: str = "posts") -> None:
        super().__init__(db, table)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_by_id(self, post_id: str) -> Optional[Post]:
        row = self._first(self._query().select("*").eq("id", post_id).execute())
        return self._map_to_post(row) if row else None

    def list_all(self) -> list[Post]:
        """List every post, newest first."""
        result = self._query().select("*").order("created_at", desc=True).execute()
        return [self._map_to_post(row) for row in result.data]

    def list_by_user(self, user_id: str) -> list[Post]:
        """List a user's posts, newest first."""
        result = (
            self._query()
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [self._map_to_post(row) for row in result.data]

    def find(
        self,
        post_ids: Optional[list[str]] = None,
        owner_ids: Optional[list[str]] = None,
    ) -> list[Post]:
        """
        Resolve posts matching a filter.

        Args:
            post_ids: Match posts with these IDs.
            owner_ids: Match posts owned by these users.

        Returns:
            Matching posts, newest first. An empty or missing filter matches
            nothing rather than everything.
        """
        if not post_ids and not owner_ids:
            return []

        query = self._query().select("*")
        if post_ids:
            query = query.in_("id", post_ids)
        if owner_ids:
            query = query.in_("user_id", owner_ids)

        result = query.order("created_at", desc=True).execute()
        return [self._map_to_post(row) for row in result.data]

    def find_referencing(self, user_ids: list[str]) -> list[Post]:
        """
        Posts liked or commented on by any of user_ids, newest first.

        Ownership is not considered; see find(owner_ids=...) for that.
        """
        matched: dict[str, dict[str, Any]] = {}
        for user_id in dict.fromkeys(user_ids):
            for column, needle in (
                ("likes", [user_id]),
                ("comments", [{"user_id": user_id}]),
            ):
                result = (
                    self._query()
                    .select("*")
                    .filter(column, "cs", json.dumps(needle))
                    .execute()
                )
                for row in result.data or []:
                    matched[str(row["id"])] = row
        posts = [self._map_to_post(row) for row in matched.values()]
        return sorted(posts, key=lambda p: p.created_at, reverse=True)

    def search(self, term: str, owner_ids: list[str]) -> list[Post]:
        """
        Posts whose title or description contains term, or that belong to
        one of owner_ids. Case-insensitive, newest first.
        """
        term = term.translate(_FILTER_RESERVED).strip()
        conditions = []
        if term:
            conditions.append(f"title.ilike.*{term}*")
            conditions.append(f"description.ilike.*{term}*")
        if owner_ids:
            conditions.append(f"user_id.in.({','.join(owner_ids)})")
        if not conditions:
            return []

        result = (
            self._query()
            .select("*")
            .or_(",".join(conditions))
            .order("created_at", desc=True)
            .execute()
        )
        return [self._map_to_post(row) for row in result.data]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create(self, data: dict[str, Any]) -> Post:
        """
        Insert a new post document.

        Args:
            data: Column values (user_id, description, files, ...).

        Returns:
            Created Post with generated ID and timestamps.
        """
        result = self._query().insert(data).execute()
        return self._map_to_post(result.data[0])

    def update(self, post_id: str, data: dict[str, Any]) -> Optional[Post]:
        """
        Update columns of a post and refresh updated_at.

        Returns:
            The updated post, or None if it does not exist.
        """
        data = {**data, "updated_at": self._now()}
        row = self._first(self._query().update(data).eq("id", post_id).execute())
        return self._map_to_post(row) if row else None

    def save_likes(self, post_id: str, likes: list[str]) -> Optional[Post]:
        return self.update(post_id, {"likes": likes})

    def save_comments(self, post_id: str, comments: list[Comment]) -> Optional[Post]:
        return self.update(
            post_id,
            {"comments": [c.model_dump(mode="json") for c in comments]},
        )

    def delete(self, post_id: str) -> bool:
        """
        Delete a post.

        Returns:
            True if a row was deleted.
        """
        result = self._query().delete().eq("id", post_id).execute()
        return bool(result.data)

    def delete_many(self, post_ids: list[str]) -> int:
        """
        Delete posts by ID.

        Returns:
            Number of posts actually deleted.
        """
        if not post_ids:
            return 0
        result = self._query().delete().in_("id", post_ids).execute()
        return len(result.data or [])

    # -------------------------------------------------------------------------
    # Private mapping methods
    # -------------------------------------------------------------------------

    def _map_to_post(self, data: dict[str, Any]) -> Post:
        """Map database row to Post model."""
        return Post(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            title=data.get("title"),
            description=data["description"],
            files=[PostFile(**f) for f in data.get("files") or []],
            is_paid=bool(data.get("is_paid", False)),
            price=Decimal(str(data.get("price") or 0)),
            likes=[str(uid) for uid in data.get("likes") or []],
            comments=[Comment(**c) for c in data.get("comments") or []],
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
