"""
User repository for database access.

Encapsulates all Supabase queries against the users collection. The
`posts` and `paid_for_posts` columns are JSON arrays; membership changes
are read-modify-write against the stored document, the same way the
rest of the document is updated.
"""

from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import Client

from shared.repository import BaseRepository
from .exceptions import DuplicateEmailError
from .models import User, UserProjection

UNIQUE_VIOLATION = "23505"

# LIKE wildcards and the escape character itself, matched literally
_LIKE_ESCAPES = str.maketrans({"\\": "\\\\", "%": "\\%", "_": "\\_"})


def _is_duplicate_email(error: APIError, data: dict[str, Any]) -> bool:
    """True when a write hit the unique constraint on users.email."""
    text = f"{error.message or ''} {error.details or ''}"
    return error.code == UNIQUE_VIOLATION and "email" in data and "email" in text


class UserRepository(BaseRepository[User]):
    """
    Repository for user documents.

    Note: This repository does NOT keep User.posts consistent with the
    posts collection on its own. The referential integrity service is the
    only caller of add_post/remove_posts.
    """

    def __init__(self, db: Client, table: str = "users") -> None:
        super().__init__(db, table)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_by_id(self, user_id: str) -> Optional[User]:
        row = self._first(self._query().select("*").eq("id", user_id).execute())
        return self._map_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        row = self._first(self._query().select("*").eq("email", email).execute())
        return self._map_to_user(row) if row else None

    def get_projection(self, user_id: str) -> Optional[UserProjection]:
        """Fetch only the display fields of a user."""
        row = self._first(
            self._query().select("id, name, avatar").eq("id", user_id).execute()
        )
        if row is None:
            return None
        return UserProjection(
            id=str(row["id"]),
            name=row["name"],
            avatar=row.get("avatar") or "",
        )

    def list_all(self) -> list[User]:
        """List every user, newest first."""
        result = self._query().select("*").order("created_at", desc=True).execute()
        return [self._map_to_user(row) for row in result.data]

    def count(self) -> int:
        result = self._query().select("id", count="exact").limit(1).execute()
        return result.count or 0

    def search_ids_by_name(self, term: str) -> list[str]:
        """IDs of users whose name contains term, case-insensitively."""
        pattern = f"%{term.translate(_LIKE_ESCAPES)}%"
        result = self._query().select("id").ilike("name", pattern).execute()
        return [str(row["id"]) for row in result.data]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create(self, data: dict[str, Any]) -> User:
        """
        Insert a new user document.

        Args:
            data: Column values (name, email, password, ...). Defaults for
                the remaining columns are applied by the database.

        Returns:
            Created User with generated ID and created_at.

        Raises:
            DuplicateEmailError: The email is already taken.
        """
        try:
            result = self._query().insert(data).execute()
        except APIError as e:
            if _is_duplicate_email(e, data):
                raise DuplicateEmailError(data["email"]) from e
            raise
        return self._map_to_user(result.data[0])

    def update(self, user_id: str, data: dict[str, Any]) -> Optional[User]:
        """
        Update columns of a user. Returns None if the user does not exist.

        Raises:
            DuplicateEmailError: The new email is already taken.
        """
        try:
            result = self._query().update(data).eq("id", user_id).execute()
        except APIError as e:
            if _is_duplicate_email(e, data):
                raise DuplicateEmailError(data["email"]) from e
            raise
        row = self._first(result)
        return self._map_to_user(row) if row else None

    def add_post(self, user_id: str, post_id: str) -> bool:
        """
        Append a post ID to the user's posts, keeping membership unique.

        Returns:
            False if the user does not exist.
        """
        user = self.get_by_id(user_id)
        if user is None:
            return False
        if post_id not in user.posts:
            self._query().update({"posts": user.posts + [post_id]}).eq("id", user_id).execute()
        return True

    def remove_posts(self, user_id: str, post_ids: list[str]) -> bool:
        """
        Remove post IDs from the user's posts, preserving order of the rest.

        Returns:
            False if the user does not exist.
        """
        user = self.get_by_id(user_id)
        if user is None:
            return False
        removed = set(post_ids)
        remaining = [pid for pid in user.posts if pid not in removed]
        if len(remaining) != len(user.posts):
            self._query().update({"posts": remaining}).eq("id", user_id).execute()
        return True

    def add_paid_post(self, user_id: str, post_id: str) -> Optional[User]:
        """
        Record an entitlement. Adding an existing entitlement is a no-op.

        Returns:
            The updated user, or None if the user does not exist.
        """
        user = self.get_by_id(user_id)
        if user is None:
            return None
        if post_id in user.paid_for_posts:
            return user
        return self.update(user_id, {"paid_for_posts": user.paid_for_posts + [post_id]})

    def delete_many(self, user_ids: list[str]) -> int:
        """
        Delete users by ID.

        Returns:
            Number of users actually deleted.
        """
        if not user_ids:
            return 0
        result = self._query().delete().in_("id", user_ids).execute()
        return len(result.data or [])

    # -------------------------------------------------------------------------
    # Private mapping methods
    # -------------------------------------------------------------------------

    def _map_to_user(self, data: dict[str, Any]) -> User:
        """Map database row to User model."""
        return User(
            id=str(data["id"]),
            name=data["name"],
            email=data["email"],
            password=data["password"],
            posts=[str(pid) for pid in data.get("posts") or []],
            paid_for_posts=[str(pid) for pid in data.get("paid_for_posts") or []],
            avatar=data.get("avatar") or "",
            role=data.get("role") or "",
            otp=data.get("otp") or "",
            is_onboarded=bool(data.get("is_onboarded", False)),
            created_at=data["created_at"],
        )
