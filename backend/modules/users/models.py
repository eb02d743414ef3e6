"""
Users module data models.

`User` is the stored document, including the credential hash. Everything
that leaves the API goes through `UserProfile` or `UserProjection`, which
never carry the password or one-time code.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from shared.models import APIResponse


DEFAULT_ROLE = "user"


class User(BaseModel):
    """A stored user document."""

    id: str = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Unique email address")
    password: str = Field(..., description="Password hash")
    posts: list[str] = Field(
        default_factory=list,
        description="IDs of posts authored by this user, in insertion order",
    )
    paid_for_posts: list[str] = Field(
        default_factory=list,
        description="IDs of posts this user has purchased",
    )
    avatar: str = Field(default="", description="Avatar storage URL")
    role: str = Field(default=DEFAULT_ROLE, description="User role")
    otp: str = Field(default="", description="Transient one-time code")
    is_onboarded: bool = Field(default=False, description="Onboarding completed")
    created_at: datetime = Field(..., description="Account creation time")

    def to_profile(self) -> "UserProfile":
        return UserProfile(
            id=self.id,
            name=self.name,
            email=self.email,
            posts=list(self.posts),
            paid_for_posts=list(self.paid_for_posts),
            avatar=self.avatar,
            role=self.role,
            is_onboarded=self.is_onboarded,
            created_at=self.created_at,
        )


class UserProfile(BaseModel):
    """Public view of a user, safe to return from the API."""

    id: str
    name: str
    email: str
    posts: list[str] = Field(default_factory=list)
    paid_for_posts: list[str] = Field(default_factory=list)
    avatar: str = ""
    role: str = DEFAULT_ROLE
    is_onboarded: bool = False
    created_at: datetime


class UserProjection(BaseModel):
    """
    Display fields of a user embedded in another entity.

    Used for post authors, commenters and likers.
    """

    model_config = {"frozen": True}

    id: str
    name: str
    avatar: str = ""


class PostSummary(BaseModel):
    """A post reference expanded just enough for the admin user list."""

    id: str
    description: str


class AdminUserView(UserProfile):
    """User profile with its posts expanded to summaries."""

    posts: list[PostSummary] = Field(default_factory=list)


class UpdateProfileRequest(BaseModel):
    """Request to update the caller's profile. Omitted fields are left alone."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    is_onboarded: Optional[bool] = None


class UserResponse(APIResponse):
    """API response carrying a single profile."""

    user: UserProfile


class UserListResponse(APIResponse):
    """API response for the admin user list."""

    users: list[AdminUserView]
