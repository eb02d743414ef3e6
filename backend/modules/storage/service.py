"""
Object storage for post attachments and avatars.

Wraps a Supabase Storage bucket. Files are public objects; the stored
locator of a file is its public URL plus its key inside the bucket.
"""

import logging
from typing import Optional

from supabase import Client

from .exceptions import StorageError

logger = logging.getLogger(__name__)


class StorageService:
    """Upload, locate and remove objects in a single bucket."""

    def __init__(self, client: Client, bucket: str):
        self._client = client
        self._bucket = bucket

    def _bucket_api(self):
        return self._client.storage.from_(self._bucket)

    def upload(
        self,
        path: str,
        content: bytes,
        content_type: Optional[str] = None,
        overwrite: bool = False,
    ) -> str:
        """
        Store bytes under path.

        Args:
            path: Object key inside the bucket.
            content: File contents.
            content_type: MIME type recorded with the object.
            overwrite: Replace an existing object at the same key.

        Returns:
            Public URL of the stored object.

        Raises:
            StorageError: If the upload is rejected.
        """
        file_options = {
            "content-type": content_type or "application/octet-stream",
            "upsert": "true" if overwrite else "false",
        }
        try:
            self._bucket_api().upload(path=path, file=content, file_options=file_options)
            url = self._bucket_api().get_public_url(path)
        except Exception as e:
            logger.warning("Upload of %s failed: %s", path, e)
            raise StorageError(f"Failed to upload file: {e}", path) from e

        if not url:
            raise StorageError("Failed to get download URL", path)

        logger.debug("Uploaded %s (%d bytes)", path, len(content))
        return url

    def remove(self, paths: list[str]) -> None:
        """
        Delete objects by key. An empty list does nothing.

        Raises:
            StorageError: If the removal is rejected.
        """
        if not paths:
            return
        try:
            self._bucket_api().remove(paths)
        except Exception as e:
            logger.warning("Removal of %s failed: %s", paths, e)
            raise StorageError(f"Failed to remove files: {e}", ",".join(paths)) from e
