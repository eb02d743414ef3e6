"""
Billing module exceptions.

These exceptions are raised by the billing module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from decimal import Decimal
from typing import Optional

from shared.exceptions import ExternalServiceError, ValidationError


class InvalidAmountError(ValidationError):
    """Raised when a post cannot be sold for its stored price."""

    def __init__(self, amount: Decimal, reason: str):
        super().__init__(
            f"Invalid amount: {amount}. {reason}",
            code="INVALID_AMOUNT",
            details={"amount": str(amount), "reason": reason},
        )


class PaymentFailedError(ExternalServiceError):
    """Raised when Stripe rejects a request."""

    def __init__(self, message: str, stripe_error: Optional[str] = None):
        super().__init__(
            message,
            service="stripe",
            code="PAYMENT_FAILED",
            details={"stripe_error": stripe_error} if stripe_error else {},
        )


class PaymentNotCompletedError(ExternalServiceError):
    """
    Raised when a checkout session is not (or not yet) paid, or does not
    belong to the purchase being confirmed.
    """

    def __init__(self, session_id: str, status: Optional[str]):
        super().__init__(
            "Payment has not been completed",
            service="stripe",
            code="PAYMENT_NOT_COMPLETED",
            details={"session_id": session_id, "payment_status": status},
        )
