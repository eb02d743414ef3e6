"""
Posts module data models.

`Post` mirrors the stored document. `PostView` and `CommentView` are the
read-side shapes produced by the aggregation layer: the same data with
author display fields attached.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, Field, PlainSerializer

from shared.models import APIResponse
from modules.users.models import UserProjection


# Decimal in memory for minor-unit arithmetic, a JSON number on the wire
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class PostFile(BaseModel):
    """An attachment stored in object storage."""

    url: str = Field(..., description="Public download URL")
    name: str = Field(..., description="Original file name shown to users")
    file_name: str = Field(..., description="Storage key inside the bucket")


class Comment(BaseModel):
    """A comment embedded in a post."""

    id: str = Field(..., description="Comment ID")
    user_id: str = Field(..., description="Author user ID")
    text: str = Field(..., min_length=1, description="Comment body")
    date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the comment was written",
    )


class Post(BaseModel):
    """A stored post document."""

    id: str = Field(..., description="Post ID")
    user_id: str = Field(..., description="Owner user ID")
    title: Optional[str] = Field(None, description="Optional title")
    description: str = Field(..., description="Post body")
    files: list[PostFile] = Field(default_factory=list)
    is_paid: bool = Field(default=False, description="Whether files require purchase")
    price: Price = Field(default=Decimal(0), description="Price in major currency units")
    likes: list[str] = Field(default_factory=list, description="User IDs that liked the post")
    comments: list[Comment] = Field(
        default_factory=list,
        description="Comments, newest first",
    )
    created_at: datetime
    updated_at: datetime


class CommentView(Comment):
    """Comment with its author's display fields."""

    name: str
    avatar: str = ""


class PostView(BaseModel):
    """
    Display-ready post.

    `name` and `avatar` belong to the post's author. `locked` is set when
    the files of a paid post were withheld from the viewer.
    """

    id: str
    user_id: str
    title: Optional[str] = None
    description: str
    files: list[PostFile] = Field(default_factory=list)
    is_paid: bool = False
    price: Price = Decimal(0)
    likes: list[UserProjection] = Field(default_factory=list)
    comments: list[CommentView] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    name: str
    avatar: str = ""
    locked: bool = False


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------


class CreatePostRequest(BaseModel):
    """Fields of a new post; attachments travel separately as uploads."""

    description: str = Field(..., min_length=1, max_length=10000)
    title: Optional[str] = Field(None, max_length=300)
    is_paid: bool = False
    price: Decimal = Field(default=Decimal(0), ge=0)


class PostIdRequest(BaseModel):
    """Request body naming a single post."""

    post_id: str = Field(..., min_length=1)


class AddCommentRequest(BaseModel):
    """Request to add a comment."""

    post_id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1, max_length=5000)
    date: Optional[datetime] = None


class DeleteCommentRequest(BaseModel):
    """Request to delete a comment."""

    post_id: str = Field(..., min_length=1)
    comment_id: str = Field(..., min_length=1)


class DeletePostsRequest(BaseModel):
    """Admin request to delete several posts."""

    posts: list[str] = Field(..., min_length=1)


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------


class CreatePostResponse(APIResponse):
    post_id: str


class PostResponse(APIResponse):
    post: PostView


class PostListResponse(APIResponse):
    posts: list[PostView]


class LikeResponse(APIResponse):
    liked: bool
    likes: list[str]


class DeletePostsResponse(APIResponse):
    deleted: int
