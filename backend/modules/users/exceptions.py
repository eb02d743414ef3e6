"""
Users module exceptions.
"""

from shared.exceptions import NotFoundError, ValidationError


class UserNotFoundError(NotFoundError):
    """Raised when a user does not exist."""

    def __init__(self, user_id: str):
        super().__init__(
            f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class UsersNotDeletedError(NotFoundError):
    """Raised when a bulk delete removed fewer users than requested."""

    def __init__(self, requested: int, deleted: int):
        super().__init__(
            "Some users were not deleted",
            code="USERS_NOT_DELETED",
            details={"requested": requested, "deleted": deleted},
        )


class DuplicateEmailError(ValidationError):
    """Raised when an email address is already registered."""

    def __init__(self, email: str):
        super().__init__(
            f"Email already registered: {email}",
            code="DUPLICATE_EMAIL",
            details={"email": email},
        )


class UnsupportedFileTypeError(ValidationError):
    """Raised when an uploaded file has a disallowed extension."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            "File type not supported",
            code="UNSUPPORTED_FILE_TYPE",
            details={"filename": filename, "allowed": allowed},
        )
