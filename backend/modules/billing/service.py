"""
Billing service implementation.

Sells access to paid posts through Stripe Checkout. Prices are stored in
major currency units and sent to Stripe in minor units.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

import stripe

from shared.config import Settings
from modules.posts.exceptions import PostNotFoundError
from modules.posts.repository import PostRepository
from modules.users.exceptions import UserNotFoundError
from modules.users.repository import UserRepository

from .interfaces import IBillingService
from .models import CheckoutSession
from .exceptions import InvalidAmountError, PaymentFailedError, PaymentNotCompletedError

logger = logging.getLogger(__name__)

PAID_STATUS = "paid"


def to_minor_units(price: Decimal) -> int:
    """Convert a price such as 4.99 to 499."""
    return int((price * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


class BillingService(IBillingService):
    """
    Stripe-backed implementation of the billing service.

    The checkout argument is the Stripe Checkout Session resource; tests
    pass a mock in its place.
    """

    def __init__(
        self,
        posts: PostRepository,
        users: UserRepository,
        settings: Settings,
        checkout: Optional[Any] = None,
    ):
        self._posts = posts
        self._users = users
        self._settings = settings
        self._checkout = checkout or stripe.checkout.Session

    async def initiate_purchase(self, post_id: str, buyer_id: str) -> CheckoutSession:
        post = self._posts.get_by_id(post_id)
        if post is None:
            raise PostNotFoundError(post_id)

        if not post.is_paid:
            raise InvalidAmountError(post.price, "Post is not for sale")
        if post.price <= 0:
            raise InvalidAmountError(post.price, "Price must be positive")

        frontend = self._settings.frontend_url.rstrip("/")
        try:
            session = self._checkout.create(
                api_key=self._settings.stripe_secret_key,
                mode="payment",
                payment_method_types=["card"],
                line_items=[{
                    "price_data": {
                        "currency": self._settings.stripe_currency,
                        "product_data": {"name": post.title or f"Post {post.id}"},
                        "unit_amount": to_minor_units(post.price),
                    },
                    "quantity": 1,
                }],
                success_url=(
                    f"{frontend}/posts/{post.id}?session_id={{CHECKOUT_SESSION_ID}}"
                ),
                cancel_url=f"{frontend}/posts/{post.id}",
                metadata={"post_id": post.id, "buyer_id": buyer_id},
            )
        except stripe.StripeError as e:
            logger.warning("Stripe rejected checkout for post %s: %s", post_id, e)
            raise PaymentFailedError("Failed to create checkout session", str(e)) from e

        logger.info("Checkout %s started by %s for post %s", session.id, buyer_id, post_id)
        return CheckoutSession(session_id=session.id, url=session.url)

    async def confirm_purchase(
        self,
        session_id: str,
        post_id: str,
        buyer_id: str,
    ) -> list[str]:
        try:
            session = self._checkout.retrieve(
                session_id,
                api_key=self._settings.stripe_secret_key,
            )
        except stripe.StripeError as e:
            logger.warning("Stripe lookup of session %s failed: %s", session_id, e)
            raise PaymentFailedError("Failed to retrieve checkout session", str(e)) from e

        status = session.payment_status
        if status != PAID_STATUS:
            raise PaymentNotCompletedError(session_id, status)

        metadata = session.metadata or {}
        if metadata.get("post_id") != post_id or metadata.get("buyer_id") != buyer_id:
            logger.warning(
                "Session %s does not belong to post %s and buyer %s",
                session_id, post_id, buyer_id,
            )
            raise PaymentNotCompletedError(session_id, status)

        if self._posts.get_by_id(post_id) is None:
            raise PostNotFoundError(post_id)

        buyer = self._users.add_paid_post(buyer_id, post_id)
        if buyer is None:
            raise UserNotFoundError(buyer_id)

        logger.info("User %s is entitled to post %s", buyer_id, post_id)
        return buyer.paid_for_posts
