"""Stripe implementation of the billing provider interface."""

from __future__ import annotations

from typing import Any, Dict, Optional

from liftlog.config import CONFIG

from ..stripe_service import CheckoutSessionError, StripeBillingService
from .base import BillingProvider, ProviderNotConfiguredError


class StripeBillingProvider(BillingProvider):
    key = "stripe"

    def __init__(self) -> None:
        self._service: Optional[StripeBillingService] = None

    def is_configured(self) -> bool:
        return bool(getattr(CONFIG, "stripe_configured", False))

    def _get_service(self) -> StripeBillingService:
        if self._service is None:
            self._service = StripeBillingService(
                getattr(CONFIG, "stripe_secret_key", None),
                webhook_secret=getattr(CONFIG, "stripe_webhook_secret", None),
                tolerance=int(getattr(CONFIG, "stripe_webhook_tolerance", 300)),
            )
        return self._service

    def create_checkout_session(
        self,
        *,
        user_id: str,
        success_url: str,
        cancel_url: str,
        customer_email: Optional[str],
    ) -> Dict[str, Any]:
        if not self.is_configured():
            raise ProviderNotConfiguredError("Stripe billing is not configured")
        return self._get_service().create_checkout_session(
            user_id=user_id,
            price_id=getattr(CONFIG, "stripe_premium_price_id"),
            success_url=success_url,
            cancel_url=cancel_url,
            customer_email=customer_email,
        )

    def parse_event(self, payload: bytes, signature: str) -> Dict[str, Any]:
        return self._get_service().parse_event(payload, signature)


__all__ = [
    "StripeBillingProvider",
    "CheckoutSessionError",
]
