"""Billing module: Stripe checkout and payment webhooks."""

from .stripe_service import CheckoutSessionError, StripeBillingService
from .providers import (
    BillingProvider,
    ProviderNotConfiguredError,
    get_billing_provider,
    reset_billing_providers,
)
from .webhooks import (
    CHECKOUT_COMPLETED,
    PaymentNotificationHandler,
    WebhookOutcome,
    WebhookResult,
)

__all__ = [
    "StripeBillingService",
    "CheckoutSessionError",
    "BillingProvider",
    "ProviderNotConfiguredError",
    "get_billing_provider",
    "reset_billing_providers",
    "CHECKOUT_COMPLETED",
    "PaymentNotificationHandler",
    "WebhookOutcome",
    "WebhookResult",
]
