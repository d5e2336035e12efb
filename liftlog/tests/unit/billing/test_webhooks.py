"""Tests for the payment notification state machine."""

from __future__ import annotations

from typing import Any, Dict

import pytest

from liftlog.billing import BillingProvider, PaymentNotificationHandler, WebhookOutcome
from liftlog.billing.webhooks import extract_client_reference
from liftlog.db import USERS_TABLE, InMemoryDatabaseClient
from liftlog.errors import MissingReference, SignatureInvalid
from liftlog.policy import PolicyEngine


class StubProvider(BillingProvider):
    key = "stub"

    def __init__(self, event: Dict[str, Any] | None = None, error: Exception | None = None):
        self._event = event or {}
        self._error = error
        self.received = []

    def is_configured(self) -> bool:
        return True

    def create_checkout_session(self, *, user_id, success_url, cancel_url, customer_email):
        raise AssertionError("not used")

    def parse_event(self, payload: bytes, signature: str) -> Dict[str, Any]:
        self.received.append((payload, signature))
        if self._error is not None:
            raise self._error
        return self._event


def _completed(user_id: Any = "user-free") -> Dict[str, Any]:
    return {
        "id": "evt_1",
        "type": "checkout.session.completed",
        "data": {"object": {"id": "cs_1", "client_reference_id": user_id}},
    }


def _handle(provider: StubProvider, db: InMemoryDatabaseClient, signature: str | None = "t=1,v1=sig"):
    return PaymentNotificationHandler(provider, PolicyEngine(db)).handle(b"{}", signature)


def test_completed_checkout_upgrades_user(memory_db) -> None:
    result = _handle(StubProvider(_completed()), memory_db)

    assert result.outcome is WebhookOutcome.APPLIED
    assert result.status_code == 200
    assert result.user_id == "user-free"
    assert result.to_dict()["processed"] is True
    assert memory_db.get_row(USERS_TABLE, "user-free")["plan"] == "premium"


def test_redelivered_event_is_applied_again_without_error(memory_db) -> None:
    provider = StubProvider(_completed())

    first = _handle(provider, memory_db)
    second = _handle(provider, memory_db)

    assert first.outcome is WebhookOutcome.APPLIED
    assert second.outcome is WebhookOutcome.APPLIED
    assert memory_db.get_row(USERS_TABLE, "user-free")["plan"] == "premium"


def test_invalid_signature_is_rejected_without_writes(memory_db) -> None:
    provider = StubProvider(_completed(), error=SignatureInvalid("bad signature"))

    result = _handle(provider, memory_db)

    assert result.outcome is WebhookOutcome.REJECTED
    assert result.status_code == 400
    assert memory_db.get_row(USERS_TABLE, "user-free")["plan"] == "free"


def test_missing_signature_header_is_passed_as_empty(memory_db) -> None:
    provider = StubProvider(error=SignatureInvalid("Stripe signature header missing"))

    result = _handle(provider, memory_db, signature=None)

    assert result.outcome is WebhookOutcome.REJECTED
    assert provider.received == [(b"{}", "")]


def test_other_event_types_are_ignored(memory_db) -> None:
    provider = StubProvider({"id": "evt_2", "type": "invoice.paid", "data": {"object": {}}})

    result = _handle(provider, memory_db)

    assert result.outcome is WebhookOutcome.IGNORED
    assert result.status_code == 200
    assert result.to_dict()["processed"] is False
    assert result.event_type == "invoice.paid"


@pytest.mark.parametrize("reference", [None, "", "   "])
def test_completed_checkout_without_reference_is_rejected(memory_db, reference) -> None:
    result = _handle(StubProvider(_completed(reference)), memory_db)

    assert result.outcome is WebhookOutcome.REJECTED
    assert result.status_code == 400
    assert all(row["plan"] != "premium" or row["id"] == "user-premium" for row in memory_db.list_rows(USERS_TABLE))


def test_store_failure_returns_failed_for_redelivery() -> None:
    db = InMemoryDatabaseClient()

    result = _handle(StubProvider(_completed("unknown-user")), db)

    assert result.outcome is WebhookOutcome.FAILED
    assert result.status_code == 500
    assert result.user_id == "unknown-user"


def test_extract_client_reference_requires_session_object() -> None:
    with pytest.raises(MissingReference):
        extract_client_reference({"type": "checkout.session.completed"})

    assert extract_client_reference(_completed(" user-9 ")) == "user-9"
