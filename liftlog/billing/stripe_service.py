"""Thin wrapper around the Stripe SDK used for the premium subscription."""

from __future__ import annotations

from typing import Any, Dict, Optional

import stripe

from liftlog.errors import SignatureInvalid


class CheckoutSessionError(RuntimeError):
    """Raised when Stripe refuses to create a checkout session."""


class StripeBillingService:
    """Handles Stripe interactions required for hosted checkout and webhooks."""

    def __init__(
        self,
        secret_key: Optional[str],
        *,
        webhook_secret: Optional[str] = None,
        tolerance: int = stripe.Webhook.DEFAULT_TOLERANCE,
    ):
        if secret_key:
            stripe.api_key = secret_key
        self._secret_key = secret_key
        self._webhook_secret = webhook_secret
        self._tolerance = tolerance

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------
    def create_checkout_session(
        self,
        *,
        user_id: str,
        price_id: str,
        success_url: str,
        cancel_url: str,
        customer_email: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a hosted subscription checkout that reports back ``user_id``."""

        if not self._secret_key:
            raise ValueError("Stripe secret key is required")
        if not price_id:
            raise ValueError("Stripe price id is required")

        params: Dict[str, Any] = {
            "mode": "subscription",
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price": price_id,
                    "quantity": 1,
                }
            ],
            "success_url": success_url,
            "cancel_url": cancel_url,
            # Read back by the webhook to find the user to upgrade.
            "client_reference_id": user_id,
            "metadata": {"user_id": user_id},
        }
        if customer_email:
            params["customer_email"] = customer_email

        try:
            session = stripe.checkout.Session.create(**params)
        except stripe.StripeError as exc:
            raise CheckoutSessionError(str(exc) or "Stripe checkout session creation failed") from exc

        return {"id": session["id"], "url": session["url"]}

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------
    def parse_event(self, payload: bytes, signature: str) -> Dict[str, Any]:
        """Validate a Stripe webhook signature and decode the event body."""

        if not self._webhook_secret:
            raise SignatureInvalid("Stripe webhook secret is not configured; cannot verify signatures")
        if not signature:
            raise SignatureInvalid("Stripe signature header missing")

        try:
            event = stripe.Webhook.construct_event(payload, signature, self._webhook_secret, self._tolerance)
        except stripe.SignatureVerificationError as exc:
            raise SignatureInvalid(f"Webhook signature verification failed: {exc}") from exc
        except ValueError as exc:
            raise SignatureInvalid(f"Invalid webhook payload: {exc}") from exc
        return event.to_dict()
