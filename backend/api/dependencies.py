"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService
    from modules.billing.interfaces import IBillingService
    from modules.integrity.service import ReferentialIntegrityService
    from modules.posts.interfaces import IPostService
    from modules.posts.repository import PostRepository
    from modules.storage.service import StorageService
    from modules.users.interfaces import IUserService
    from modules.users.repository import UserRepository


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._user_repository: "UserRepository | None" = None
        self._post_repository: "PostRepository | None" = None
        self._storage_service: "StorageService | None" = None
        self._integrity_service: "ReferentialIntegrityService | None" = None
        self._auth_service: "IAuthService | None" = None
        self._user_service: "IUserService | None" = None
        self._post_service: "IPostService | None" = None
        self._billing_service: "IBillingService | None" = None

    @property
    def user_repository(self) -> "UserRepository":
        """Get the user repository instance."""
        if self._user_repository is None:
            from modules.users.repository import UserRepository
            from shared.config import get_settings
            from shared.database import get_supabase_client
            self._user_repository = UserRepository(
                get_supabase_client(), get_settings().users_table
            )
        return self._user_repository

    @property
    def post_repository(self) -> "PostRepository":
        """Get the post repository instance."""
        if self._post_repository is None:
            from modules.posts.repository import PostRepository
            from shared.config import get_settings
            from shared.database import get_supabase_client
            self._post_repository = PostRepository(
                get_supabase_client(), get_settings().posts_table
            )
        return self._post_repository

    @property
    def storage(self) -> "StorageService":
        """Get the storage service instance."""
        if self._storage_service is None:
            from modules.storage.service import StorageService
            from shared.config import get_settings
            from shared.database import get_supabase_client
            self._storage_service = StorageService(
                get_supabase_client(), get_settings().storage_bucket
            )
        return self._storage_service

    @property
    def integrity(self) -> "ReferentialIntegrityService":
        """Get the referential integrity service instance."""
        if self._integrity_service is None:
            from modules.integrity.service import ReferentialIntegrityService
            self._integrity_service = ReferentialIntegrityService(
                users=self.user_repository,
                posts=self.post_repository,
            )
        return self._integrity_service

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            from shared.config import get_settings
            self._auth_service = AuthService(
                users=self.user_repository,
                settings=get_settings(),
            )
        return self._auth_service

    @property
    def users(self) -> "IUserService":
        """Get the user service instance."""
        if self._user_service is None:
            from modules.users.service import UserService
            from shared.config import get_settings
            self._user_service = UserService(
                users=self.user_repository,
                posts=self.post_repository,
                integrity=self.integrity,
                storage=self.storage,
                settings=get_settings(),
            )
        return self._user_service

    @property
    def posts(self) -> "IPostService":
        """Get the post service instance."""
        if self._post_service is None:
            from modules.posts.service import PostService
            self._post_service = PostService(
                posts=self.post_repository,
                users=self.user_repository,
                integrity=self.integrity,
                storage=self.storage,
            )
        return self._post_service

    @property
    def billing(self) -> "IBillingService":
        """Get the billing service instance."""
        if self._billing_service is None:
            from modules.billing.service import BillingService
            from shared.config import get_settings
            self._billing_service = BillingService(
                posts=self.post_repository,
                users=self.user_repository,
                settings=get_settings(),
            )
        return self._billing_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._user_repository = None
        self._post_repository = None
        self._storage_service = None
        self._integrity_service = None
        self._auth_service = None
        self._user_service = None
        self._post_service = None
        self._billing_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_user_service() -> "IUserService":
    """FastAPI dependency for user service."""
    return get_container().users


def get_post_service() -> "IPostService":
    """FastAPI dependency for post service."""
    return get_container().posts


def get_billing_service() -> "IBillingService":
    """FastAPI dependency for billing service."""
    return get_container().billing
