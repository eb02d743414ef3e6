"""
Billing module.

Handles Stripe Checkout for paid posts and the entitlements it grants.

Public API:
- IBillingService: Interface for billing operations
- CheckoutSession: Stripe checkout session handle
- Billing exceptions: PaymentFailedError, PaymentNotCompletedError, InvalidAmountError
"""

from .interfaces import IBillingService
from .models import (
    CheckoutSession,
    PurchaseRequest,
    VerifyPaymentRequest,
    CheckoutResponse,
    EntitlementResponse,
)
from .exceptions import (
    InvalidAmountError,
    PaymentFailedError,
    PaymentNotCompletedError,
)

__all__ = [
    # Interface
    "IBillingService",
    # Models
    "CheckoutSession",
    "PurchaseRequest",
    "VerifyPaymentRequest",
    "CheckoutResponse",
    "EntitlementResponse",
    # Exceptions
    "InvalidAmountError",
    "PaymentFailedError",
    "PaymentNotCompletedError",
]
