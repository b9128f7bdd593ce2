"""
Billing provider integration.

Billing is optional per deployment: build_billing_client() returns None when no
Stripe secret key is configured, and the account deletion service checks that
once, at construction.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

import stripe

from core.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class BillingCustomer:
    """A billing customer and the ids of its subscriptions."""

    id: str
    email: str | None
    subscription_ids: list[str] = field(default_factory=list)


class BillingClient(Protocol):
    """Capability used by account deletion to cancel a user's subscription."""

    async def list_customers_by_email(self, email: str) -> list[BillingCustomer]:
        """Return customers registered under the email, subscriptions expanded."""
        ...

    async def cancel_subscription(
        self,
        subscription_id: str,
        comment: str | None = None,
        feedback: str | None = None,
    ) -> dict[str, Any]:
        """Cancel a subscription and return the cancelled subscription record."""
        ...


class StripeBillingClient:
    """BillingClient backed by the Stripe SDK async API."""

    def __init__(
        self,
        api_key: str,
        api_version: str = "2022-11-15",
        client: stripe.StripeClient | None = None,
    ) -> None:
        self._client = client or stripe.StripeClient(api_key, stripe_version=api_version)

    async def list_customers_by_email(self, email: str) -> list[BillingCustomer]:
        """List customers by email with their subscriptions expanded."""
        result = await self._client.v1.customers.list_async(
            params={"email": email, "expand": ["data.subscriptions"]},
        )
        customers = []
        for customer in result.to_dict().get("data", []):
            subscriptions = customer.get("subscriptions")
            subscription_ids = (
                [subscription["id"] for subscription in subscriptions.get("data", [])]
                if subscriptions
                else []
            )
            customers.append(
                BillingCustomer(
                    id=customer["id"],
                    email=customer.get("email"),
                    subscription_ids=subscription_ids,
                ),
            )
        return customers

    async def cancel_subscription(
        self,
        subscription_id: str,
        comment: str | None = None,
        feedback: str | None = None,
    ) -> dict[str, Any]:
        """Cancel a subscription immediately, recording cancellation details."""
        cancellation_details: dict[str, str] = {}
        if comment is not None:
            cancellation_details["comment"] = comment
        if feedback is not None:
            cancellation_details["feedback"] = feedback

        params: dict[str, Any] = {}
        if cancellation_details:
            params["cancellation_details"] = cancellation_details

        subscription = await self._client.v1.subscriptions.cancel_async(
            subscription_id, params=params,
        )
        logger.info("Cancelled billing subscription %s", subscription_id)
        return subscription.to_dict()


def build_billing_client(settings: Settings) -> BillingClient | None:
    """Return a billing client, or None when billing is not configured."""
    if not settings.billing_enabled:
        logger.info("Billing disabled by configuration (no STRIPE_SECRET_KEY)")
        return None
    return StripeBillingClient(
        api_key=settings.stripe_secret_key,
        api_version=settings.stripe_api_version,
    )
