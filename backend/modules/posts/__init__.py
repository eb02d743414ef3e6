"""
Posts module.

Posts with attachments, comments and likes, plus read-side enrichment
with author display fields.

Public API:
- IPostService: Protocol defining post operations
- Models: Post, PostView, Comment, CommentView, PostFile and request/response models
- Exceptions: PostNotFoundError, CommentNotFoundError, AuthorNotFoundError, etc.
"""

from .interfaces import IPostService
from .models import (
    Post,
    PostFile,
    PostView,
    Comment,
    CommentView,
    CreatePostRequest,
    PostIdRequest,
    AddCommentRequest,
    DeleteCommentRequest,
    DeletePostsRequest,
    CreatePostResponse,
    PostResponse,
    PostListResponse,
    LikeResponse,
    DeletePostsResponse,
)
from .exceptions import (
    PostError,
    PostNotFoundError,
    CommentNotFoundError,
    AuthorNotFoundError,
    PostAccessDeniedError,
    InvalidPriceError,
    EmptyQueryError,
)

__all__ = [
    # Interface
    "IPostService",
    # Models
    "Post",
    "PostFile",
    "PostView",
    "Comment",
    "CommentView",
    "CreatePostRequest",
    "PostIdRequest",
    "AddCommentRequest",
    "DeleteCommentRequest",
    "DeletePostsRequest",
    "CreatePostResponse",
    "PostResponse",
    "PostListResponse",
    "LikeResponse",
    "DeletePostsResponse",
    # Exceptions
    "PostError",
    "PostNotFoundError",
    "CommentNotFoundError",
    "AuthorNotFoundError",
    "PostAccessDeniedError",
    "InvalidPriceError",
    "EmptyQueryError",
]
