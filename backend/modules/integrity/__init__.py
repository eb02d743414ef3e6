"""
Referential integrity module.

Keeps User.posts and the posts collection consistent across creates and
cascading deletes.

Public API:
- PartialCascadeError: raised when a multi-step mutation stops halfway
"""

from .exceptions import PartialCascadeError

__all__ = ["PartialCascadeError"]
