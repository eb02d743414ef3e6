"""
Posts module exceptions.
"""

from shared.exceptions import (
    PostlyError,
    NotFoundError,
    ValidationError,
    AuthorizationError,
)


class PostError(PostlyError):
    """Base exception for post-related errors."""

    pass


class PostNotFoundError(NotFoundError):
    """Raised when a post is not found."""

    def __init__(self, post_id: str):
        super().__init__(
            f"Post not found: {post_id}",
            code="POST_NOT_FOUND",
            details={"post_id": post_id},
        )


class CommentNotFoundError(NotFoundError):
    """Raised when a comment is not found on a post."""

    def __init__(self, post_id: str, comment_id: str):
        super().__init__(
            f"Comment not found: {comment_id}",
            code="COMMENT_NOT_FOUND",
            details={"post_id": post_id, "comment_id": comment_id},
        )


class AuthorNotFoundError(NotFoundError):
    """
    Raised when a post references a user that no longer exists.

    This can only happen if referential integrity was broken, so it is
    surfaced instead of rendering an anonymous author.
    """

    def __init__(self, user_id: str):
        super().__init__(
            f"User not found: {user_id}",
            code="AUTHOR_NOT_FOUND",
            details={"user_id": user_id},
        )


class PostAccessDeniedError(AuthorizationError):
    """Raised when a user may not modify a post or comment."""

    def __init__(self, post_id: str, user_id: str):
        super().__init__(
            f"Access denied to post: {post_id}",
            code="POST_ACCESS_DENIED",
            details={"post_id": post_id, "user_id": user_id},
        )


class InvalidPriceError(ValidationError):
    """Raised when a paid post has no positive price."""

    def __init__(self, price: str):
        super().__init__(
            "Paid posts need a price greater than zero",
            code="INVALID_PRICE",
            details={"price": price},
        )


class EmptyQueryError(ValidationError):
    """Raised when a search query is blank."""

    def __init__(self):
        super().__init__("Search query is required", code="EMPTY_QUERY")
