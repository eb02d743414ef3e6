"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and providing shared utilities for data operations.
"""

from datetime import datetime, timezone
from typing import Any, Generic, Optional, TypeVar

from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - The collection the repository owns via self._table
    - Generic type parameter for model type hints

    Subclasses implement domain-specific data access methods and handle
    dict-to-Pydantic model mapping internally.

    Example:
        class PostRepository(BaseRepository[Post]):
            def get_by_id(self, post_id: str) -> Optional[Post]:
                row = self._first(self._query().select("*").eq("id", post_id).execute())
                return self._map_to_post(row) if row else None
    """

    def __init__(self, db: Client, table: str) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
            table: Name of the table this repository reads and writes.
        """
        self._db = db
        self._table = table

    def _query(self):
        """Start a query builder on this repository's table."""
        return self._db.table(self._table)

    @staticmethod
    def _first(result: Any) -> Optional[dict[str, Any]]:
        """Return the first row of a query result, or None."""
        if not result.data:
            return None
        return result.data[0]

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()
