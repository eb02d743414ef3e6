"""
Billing module interface.

Other modules should depend on IBillingService, not the concrete implementation.
"""

from typing import Protocol, runtime_checkable

from .models import CheckoutSession


@runtime_checkable
class IBillingService(Protocol):
    """
    Interface for purchasing paid posts.

    A purchase is a Stripe Checkout Session. Once Stripe reports it as
    paid, the buyer is entitled to the post's files.
    """

    async def initiate_purchase(self, post_id: str, buyer_id: str) -> CheckoutSession:
        """
        Start a checkout for a paid post.

        Args:
            post_id: Post being bought
            buyer_id: User paying for it

        Returns:
            CheckoutSession with the ID to confirm later and the URL to redirect to

        Raises:
            PostNotFoundError: If the post doesn't exist
            InvalidAmountError: If the post is not for sale
            PaymentFailedError: If Stripe rejects the session
        """
        ...

    async def confirm_purchase(
        self,
        session_id: str,
        post_id: str,
        buyer_id: str,
    ) -> list[str]:
        """
        Record the entitlement for a paid checkout session.

        Confirming the same session again is harmless.

        Returns:
            The buyer's full list of purchased post IDs

        Raises:
            PaymentNotCompletedError: If the session is not paid
            PostNotFoundError: If the post doesn't exist
            UserNotFoundError: If the buyer doesn't exist
        """
        ...
