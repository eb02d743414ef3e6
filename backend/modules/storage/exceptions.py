"""
Storage module exceptions.
"""

from shared.exceptions import ExternalServiceError


class StorageError(ExternalServiceError):
    """Raised when the object storage service rejects an operation."""

    def __init__(self, message: str, path: str):
        super().__init__(
            message,
            service="storage",
            code="STORAGE_ERROR",
            details={"path": path},
        )
