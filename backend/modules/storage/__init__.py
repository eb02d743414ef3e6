"""
Storage module.

Handles uploads to and removals from the Supabase Storage bucket.

Public API:
- FileUpload: an in-memory uploaded file
- StorageError: storage provider failure
"""

from .models import FileUpload
from .exceptions import StorageError

__all__ = ["FileUpload", "StorageError"]
