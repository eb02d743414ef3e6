"""
Storage module data models.
"""

from typing import Optional

from pydantic import BaseModel, Field


class FileUpload(BaseModel):
    """
    A file received from a client, already read into memory.

    Routes convert framework upload objects into this so services never
    depend on the web framework.
    """

    filename: str = Field(..., min_length=1)
    content: bytes
    content_type: Optional[str] = None

    @property
    def extension(self) -> str:
        """Lower-cased extension without the dot, or "" if there is none."""
        if "." not in self.filename:
            return ""
        return self.filename.rsplit(".", 1)[-1].lower()
