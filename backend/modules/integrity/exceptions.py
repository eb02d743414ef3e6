"""
Referential integrity exceptions.
"""

from typing import Optional

from shared.exceptions import PostlyError


class PartialCascadeError(PostlyError):
    """
    Raised when one step of a multi-step mutation succeeded and a later
    step failed.

    The completed steps are not rolled back, so persisted state no longer
    satisfies the user/post reference invariants. `details` names the
    step that failed and the documents involved.
    """

    def __init__(
        self,
        step: str,
        post_id: Optional[str] = None,
        user_id: Optional[str] = None,
        reason: Optional[str] = None,
    ):
        details = {"step": step}
        if post_id:
            details["post_id"] = post_id
        if user_id:
            details["user_id"] = user_id
        if reason:
            details["reason"] = reason
        super().__init__(
            f"Operation partially applied; failed at step: {step}",
            code="PARTIAL_CASCADE",
            details=details,
        )
