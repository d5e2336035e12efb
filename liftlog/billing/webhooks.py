"""Payment notification handling: verify, classify, and apply plan upgrades."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from liftlog.errors import MissingReference, SignatureInvalid, StoreError
from liftlog.logger import log
from liftlog.policy import PolicyEngine

from .providers import BillingProvider

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


class WebhookOutcome(str, Enum):
    """Terminal states of a single webhook delivery."""

    APPLIED = "applied"
    IGNORED = "ignored"
    REJECTED = "rejected"
    FAILED = "failed"

    @property
    def status_code(self) -> int:
        if self in {WebhookOutcome.APPLIED, WebhookOutcome.IGNORED}:
            return 200
        if self is WebhookOutcome.REJECTED:
            return 400
        return 500


@dataclass
class WebhookResult:
    outcome: WebhookOutcome
    event_type: Optional[str] = None
    event_id: Optional[str] = None
    user_id: Optional[str] = None
    detail: Optional[str] = None

    @property
    def status_code(self) -> int:
        return self.outcome.status_code

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.outcome.value,
            "processed": self.outcome is WebhookOutcome.APPLIED,
            "event_type": self.event_type,
            "event_id": self.event_id,
            "user_id": self.user_id,
            "detail": self.detail,
        }


class PaymentNotificationHandler:
    """Single-pass state machine for inbound payment provider events.

    Unverified events are rejected; verified events other than a completed
    checkout are ignored so the provider stops redelivering them. A completed
    checkout upgrades the user named in ``client_reference_id``.
    """

    def __init__(self, provider: BillingProvider, policy: PolicyEngine):
        self._provider = provider
        self._policy = policy

    def handle(self, payload: bytes, signature: Optional[str]) -> WebhookResult:
        try:
            event = self._provider.parse_event(payload, signature or "")
        except SignatureInvalid as exc:
            logger.warning("Webhook signature verification failed: %s", exc)
            return WebhookResult(WebhookOutcome.REJECTED, detail=str(exc))

        event_type = str(event.get("type") or "unknown")
        event_id = event.get("id")

        if event_type != CHECKOUT_COMPLETED:
            log("[billing] unhandled event type", event_type=event_type, event_id=event_id)
            return WebhookResult(WebhookOutcome.IGNORED, event_type=event_type, event_id=event_id)

        try:
            user_id = extract_client_reference(event)
        except MissingReference as exc:
            logger.error("Checkout session %s completed without a user reference", event_id)
            return WebhookResult(WebhookOutcome.REJECTED, event_type=event_type, event_id=event_id, detail=str(exc))

        try:
            self._policy.apply_plan_upgrade(user_id)
        except StoreError as exc:
            logger.error("Error updating plan for user %s: %s", user_id, exc)
            return WebhookResult(
                WebhookOutcome.FAILED,
                event_type=event_type,
                event_id=event_id,
                user_id=user_id,
                detail="Database update failed",
            )

        log("[billing] checkout session completed", user_id=user_id, event_id=event_id)
        return WebhookResult(WebhookOutcome.APPLIED, event_type=event_type, event_id=event_id, user_id=user_id)


def extract_client_reference(event: Dict[str, Any]) -> str:
    """Return the user id carried by a completed checkout session event."""

    data = event.get("data") or {}
    session = data.get("object") if isinstance(data, dict) else None
    if not isinstance(session, dict):
        raise MissingReference("Checkout session payload missing")

    reference = session.get("client_reference_id")
    if isinstance(reference, str):
        reference = reference.strip()
    if not reference:
        raise MissingReference("User ID not found in checkout session")
    return str(reference)
