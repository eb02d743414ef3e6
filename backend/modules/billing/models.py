"""
Billing module data models.

These models define the data structures used by the billing module
and exposed to other modules through the interface.
"""

from pydantic import BaseModel, Field

from shared.models import APIResponse


class CheckoutSession(BaseModel):
    """Stripe checkout session for purchasing a post."""

    session_id: str = Field(..., description="Stripe session ID")
    url: str = Field(..., description="Checkout URL to redirect to")


class PurchaseRequest(BaseModel):
    """Request to start buying a post."""

    post_id: str = Field(..., min_length=1)


class VerifyPaymentRequest(BaseModel):
    """Request to confirm a completed checkout."""

    session_id: str = Field(..., min_length=1)
    post_id: str = Field(..., min_length=1)


class CheckoutResponse(APIResponse):
    session_id: str
    url: str


class EntitlementResponse(APIResponse):
    paid_for_posts: list[str]
