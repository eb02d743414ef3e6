import pytest
import jwt
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from modules.auth.service import AuthService, pwd_context
from modules.auth.exceptions import (
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    UnknownUserError,
)
from modules.users.exceptions import DuplicateEmailError
from tests.conftest import TEST_JWT_SECRET, create_test_token


class TestAuthService:
    @pytest.fixture
    def service(self, user_repo, settings):
        """Create auth service over the in-memory user repository."""
        return AuthService(users=user_repo, settings=settings)

    @pytest.mark.asyncio
    async def test_validate_valid_token(self, service, alice):
        """Should validate a valid token and return user."""
        user = await service.validate_token(create_test_token(alice.id))
        assert user.id == alice.id
        assert user.role == "user"

    @pytest.mark.asyncio
    async def test_validate_admin_token(self, service, admin):
        user = await service.validate_token(create_test_token(admin.id, role="admin"))
        assert user.is_admin

    @pytest.mark.asyncio
    async def test_validate_expired_token(self, service, alice):
        """Should raise ExpiredTokenError for expired token."""
        with pytest.raises(ExpiredTokenError):
            await service.validate_token(create_test_token(alice.id, expired=True))

    @pytest.mark.asyncio
    async def test_validate_invalid_token(self, service):
        """Should raise InvalidTokenError for malformed token."""
        with pytest.raises(InvalidTokenError):
            await service.validate_token("not-a-valid-token")

    @pytest.mark.asyncio
    async def test_validate_missing_token(self, service):
        """Should raise MissingTokenError for empty token."""
        with pytest.raises(MissingTokenError):
            await service.validate_token("")

    @pytest.mark.asyncio
    async def test_validate_none_token(self, service):
        """Should raise MissingTokenError for None token."""
        with pytest.raises(MissingTokenError):
            await service.validate_token(None)

    @pytest.mark.asyncio
    async def test_validate_wrong_secret(self, service, alice):
        """Should raise InvalidTokenError for token signed with wrong secret."""
        token = create_test_token(alice.id, secret="wrong-secret")
        with pytest.raises(InvalidTokenError):
            await service.validate_token(token)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [None, ""])
    async def test_validate_token_without_role(self, service, alice, role):
        """A token without a role is rejected even if correctly signed."""
        with pytest.raises(InvalidTokenError) as exc_info:
            await service.validate_token(create_test_token(alice.id, role=role))
        assert exc_info.value.message == "You are not authorized to access this resource"

    @pytest.mark.asyncio
    async def test_validate_token_for_deleted_user(self, service):
        with pytest.raises(UnknownUserError):
            await service.validate_token(create_test_token("ghost"))

    @pytest.mark.asyncio
    async def test_validate_without_configured_secret(self, user_repo, settings, alice):
        service = AuthService(users=user_repo, settings=settings.model_copy(update={"jwt_secret": ""}))
        with pytest.raises(InvalidTokenError):
            await service.validate_token(create_test_token(alice.id))

    def test_issue_token_claims(self, service, alice):
        token = service.issue_token(alice)

        claims = jwt.decode(token, TEST_JWT_SECRET, algorithms=["HS256"])
        assert claims["sub"] == alice.id
        assert claims["role"] == "user"
        lifetime = timedelta(seconds=claims["exp"] - claims["iat"])
        assert lifetime == timedelta(days=7)

    @pytest.mark.asyncio
    async def test_issued_token_round_trips(self, service, alice):
        user = await service.validate_token(service.issue_token(alice))
        assert user.id == alice.id


class TestAccounts:
    @pytest.fixture
    def service(self, user_repo, settings):
        return AuthService(users=user_repo, settings=settings)

    @pytest.mark.asyncio
    async def test_register_hashes_password(self, service, user_repo):
        session = await service.register("Dana", "dana@example.com", "s3cret!")

        stored = user_repo.get_by_id(session.user.id)
        assert stored.password != "s3cret!"
        assert pwd_context.verify("s3cret!", stored.password)
        assert stored.role == "user"
        assert session.token

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, service, alice):
        with pytest.raises(DuplicateEmailError):
            await service.register("Other", alice.email, "password")

    @pytest.mark.asyncio
    async def test_register_loses_race_for_email(self, user_repo, settings):
        users = MagicMock(wraps=user_repo)
        users.create.side_effect = DuplicateEmailError("dana@example.com")
        service = AuthService(users=users, settings=settings)

        with pytest.raises(DuplicateEmailError):
            await service.register("Dana", "dana@example.com", "s3cret!")

        users.get_by_email.assert_called_once_with("dana@example.com")

    @pytest.mark.asyncio
    async def test_login(self, service):
        await service.register("Dana", "dana@example.com", "s3cret!")

        session = await service.login("dana@example.com", "s3cret!")

        assert session.user.email == "dana@example.com"
        claims = jwt.decode(session.token, TEST_JWT_SECRET, algorithms=["HS256"])
        assert claims["sub"] == session.user.id

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, service):
        await service.register("Dana", "dana@example.com", "s3cret!")
        with pytest.raises(InvalidCredentialsError):
            await service.login("dana@example.com", "nope")

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, service):
        with pytest.raises(InvalidCredentialsError):
            await service.login("nobody@example.com", "whatever")

    def test_issue_token_is_recent(self, service, alice):
        claims = jwt.decode(service.issue_token(alice), TEST_JWT_SECRET, algorithms=["HS256"])
        issued = datetime.fromtimestamp(claims["iat"], tz=timezone.utc)
        assert datetime.now(timezone.utc) - issued < timedelta(minutes=1)
