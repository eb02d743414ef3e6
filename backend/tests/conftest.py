"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
token helpers, and in-memory stand-ins for the Supabase-backed repositories
so that cascade and aggregation behaviour can be exercised end to end.
"""

import pytest
from datetime import datetime, timezone, timedelta
from decimal import Decimal
from typing import Any, Optional
from types import SimpleNamespace
from unittest.mock import MagicMock
import jwt  # PyJWT
from fastapi.testclient import TestClient

from api.dependencies import (
    get_auth_service,
    get_billing_service,
    get_container,
    get_post_service,
    get_user_service,
    reset_container,
)
from shared.config import Settings
from modules.auth.service import AuthService
from modules.billing.service import BillingService
from modules.integrity.service import ReferentialIntegrityService
from modules.posts.models import Comment, Post
from modules.posts.service import PostService
from modules.storage.service import StorageService
from modules.users.service import UserService
from modules.users.models import User, UserProjection


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def create_test_token(
    user_id: str = "test-user-123",
    role: Optional[str] = "user",
    expired: bool = False,
    secret: str = TEST_JWT_SECRET,
) -> str:
    """
    Create a test session token.

    Args:
        user_id: User ID to include in the token
        role: Role claim; None leaves it out
        expired: If True, creates an expired token
        secret: Signing secret

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    if role is not None:
        payload["role"] = role
    return jwt.encode(payload, secret, algorithm="HS256")


# -----------------------------------------------------------------------------
# In-memory repositories
# -----------------------------------------------------------------------------


class InMemoryUserRepository:
    """Dict-backed counterpart of UserRepository."""

    def __init__(self):
        self.rows: dict[str, User] = {}
        self.projection_calls = 0
        self._seq = 0

    def _tick(self) -> datetime:
        self._seq += 1
        return _EPOCH + timedelta(seconds=self._seq)

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.rows.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.rows.values() if u.email == email), None)

    def get_projection(self, user_id: str) -> Optional[UserProjection]:
        self.projection_calls += 1
        user = self.rows.get(user_id)
        if user is None:
            return None
        return UserProjection(id=user.id, name=user.name, avatar=user.avatar)

    def list_all(self) -> list[User]:
        return sorted(self.rows.values(), key=lambda u: u.created_at, reverse=True)

    def count(self) -> int:
        return len(self.rows)

    def search_ids_by_name(self, term: str) -> list[str]:
        needle = term.casefold()
        return [u.id for u in self.rows.values() if needle in u.name.casefold()]

    def create(self, data: dict[str, Any]) -> User:
        created_at = self._tick()
        user = User(
            id=data.get("id") or f"user-{self._seq}",
            name=data["name"],
            email=data["email"],
            password=data.get("password", "hash"),
            role=data.get("role", "user"),
            avatar=data.get("avatar", ""),
            created_at=created_at,
        )
        self.rows[user.id] = user
        return user

    def update(self, user_id: str, data: dict[str, Any]) -> Optional[User]:
        user = self.rows.get(user_id)
        if user is None:
            return None
        updated = user.model_copy(update=data)
        self.rows[user_id] = updated
        return updated

    def add_post(self, user_id: str, post_id: str) -> bool:
        user = self.rows.get(user_id)
        if user is None:
            return False
        if post_id not in user.posts:
            self.update(user_id, {"posts": user.posts + [post_id]})
        return True

    def remove_posts(self, user_id: str, post_ids: list[str]) -> bool:
        user = self.rows.get(user_id)
        if user is None:
            return False
        removed = set(post_ids)
        self.update(user_id, {"posts": [p for p in user.posts if p not in removed]})
        return True

    def add_paid_post(self, user_id: str, post_id: str) -> Optional[User]:
        user = self.rows.get(user_id)
        if user is None:
            return None
        if post_id in user.paid_for_posts:
            return user
        return self.update(user_id, {"paid_for_posts": user.paid_for_posts + [post_id]})

    def delete_many(self, user_ids: list[str]) -> int:
        return sum(1 for uid in set(user_ids) if self.rows.pop(uid, None) is not None)


class InMemoryPostRepository:
    """Dict-backed counterpart of PostRepository."""

    def __init__(self):
        self.rows: dict[str, Post] = {}
        self._seq = 0

    def _tick(self) -> datetime:
        self._seq += 1
        return _EPOCH + timedelta(seconds=self._seq)

    def _newest_first(self, posts) -> list[Post]:
        return sorted(posts, key=lambda p: p.created_at, reverse=True)

    def get_by_id(self, post_id: str) -> Optional[Post]:
        return self.rows.get(post_id)

    def list_all(self) -> list[Post]:
        return self._newest_first(self.rows.values())

    def list_by_user(self, user_id: str) -> list[Post]:
        return self._newest_first(p for p in self.rows.values() if p.user_id == user_id)

    def find(
        self,
        post_ids: Optional[list[str]] = None,
        owner_ids: Optional[list[str]] = None,
    ) -> list[Post]:
        if not post_ids and not owner_ids:
            return []
        matched = self.rows.values()
        if post_ids:
            matched = [p for p in matched if p.id in post_ids]
        if owner_ids:
            matched = [p for p in matched if p.user_id in owner_ids]
        return self._newest_first(matched)

    def find_referencing(self, user_ids: list[str]) -> list[Post]:
        return self._newest_first(
            p for p in self.rows.values()
            if any(uid in user_ids for uid in p.likes)
            or any(c.user_id in user_ids for c in p.comments)
        )

    def search(self, term: str, owner_ids: list[str]) -> list[Post]:
        needle = term.casefold()
        return self._newest_first(
            p for p in self.rows.values()
            if needle in (p.title or "").casefold()
            or needle in p.description.casefold()
            or p.user_id in owner_ids
        )

    def create(self, data: dict[str, Any]) -> Post:
        stamp = self._tick()
        post = Post(
            id=data.get("id") or f"post-{self._seq}",
            created_at=stamp,
            updated_at=stamp,
            **{k: v for k, v in data.items() if k != "id"},
        )
        self.rows[post.id] = post
        return post

    def update(self, post_id: str, data: dict[str, Any]) -> Optional[Post]:
        post = self.rows.get(post_id)
        if post is None:
            return None
        updated = post.model_copy(update={**data, "updated_at": self._tick()})
        self.rows[post_id] = updated
        return updated

    def save_likes(self, post_id: str, likes: list[str]) -> Optional[Post]:
        return self.update(post_id, {"likes": list(likes)})

    def save_comments(self, post_id: str, comments: list[Comment]) -> Optional[Post]:
        return self.update(post_id, {"comments": list(comments)})

    def delete(self, post_id: str) -> bool:
        return self.rows.pop(post_id, None) is not None

    def delete_many(self, post_ids: list[str]) -> int:
        return sum(1 for pid in set(post_ids) if self.rows.pop(pid, None) is not None)


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_service_container():
    """Reset the service container before and after each test."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        jwt_secret=TEST_JWT_SECRET,
        stripe_secret_key="sk_test_123",
        frontend_url="http://frontend.test",
    )


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def post_repo() -> InMemoryPostRepository:
    return InMemoryPostRepository()


@pytest.fixture
def integrity(user_repo, post_repo) -> ReferentialIntegrityService:
    return ReferentialIntegrityService(user_repo, post_repo)


@pytest.fixture
def storage() -> MagicMock:
    """Storage service double that hands out predictable URLs."""
    mock = MagicMock(spec=StorageService)
    mock.upload.side_effect = lambda path, *args, **kwargs: f"https://cdn.test/{path}"
    return mock


@pytest.fixture
def alice(user_repo) -> User:
    return user_repo.create({"id": "alice", "name": "Alice", "email": "alice@example.com"})


@pytest.fixture
def bob(user_repo) -> User:
    return user_repo.create({"id": "bob", "name": "Bob", "email": "bob@example.com"})


@pytest.fixture
def admin(user_repo) -> User:
    return user_repo.create({
        "id": "admin",
        "name": "Root",
        "email": "root@example.com",
        "role": "admin",
    })


@pytest.fixture
def make_post(integrity):
    """Create a post through the integrity service."""

    def _make(user_id: str, description: str = "hello", **fields) -> Post:
        data = {
            "user_id": user_id,
            "title": fields.pop("title", None),
            "description": description,
            "files": fields.pop("files", []),
            "is_paid": fields.pop("is_paid", False),
            "price": fields.pop("price", Decimal(0)),
            "likes": [],
            "comments": [],
        }
        data.update(fields)
        return integrity.create_post(data)

    return _make


def auth_headers(user_id: str, role: str = "user") -> dict[str, str]:
    """Bearer header for a test session token."""
    return {"Authorization": f"Bearer {create_test_token(user_id, role=role)}"}


@pytest.fixture
def checkout() -> MagicMock:
    """Stand-in for stripe.checkout.Session."""
    return MagicMock()


@pytest.fixture
def services(user_repo, post_repo, integrity, storage, settings, checkout) -> SimpleNamespace:
    """Real services wired over the in-memory repositories."""
    return SimpleNamespace(
        auth=AuthService(users=user_repo, settings=settings),
        users=UserService(
            users=user_repo,
            posts=post_repo,
            integrity=integrity,
            storage=storage,
            settings=settings,
        ),
        posts=PostService(posts=post_repo, users=user_repo, integrity=integrity, storage=storage),
        billing=BillingService(posts=post_repo, users=user_repo, settings=settings, checkout=checkout),
    )


@pytest.fixture
def client(services, user_repo):
    """TestClient with every service dependency overridden."""
    from api import app

    app.dependency_overrides[get_auth_service] = lambda: services.auth
    app.dependency_overrides[get_user_service] = lambda: services.users
    app.dependency_overrides[get_post_service] = lambda: services.posts
    app.dependency_overrides[get_billing_service] = lambda: services.billing
    app.dependency_overrides[get_container] = lambda: SimpleNamespace(user_repository=user_repo)
    yield TestClient(app)
    app.dependency_overrides.clear()
