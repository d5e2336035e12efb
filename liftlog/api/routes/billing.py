"""Billing endpoints: premium checkout and Stripe webhook."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse

from liftlog.api.dependencies import get_database, get_optional_user, get_webhook_database, store_unavailable
from liftlog.api.schemas import CheckoutSessionRequest, CheckoutSessionResponse
from liftlog.billing import (
    BillingProvider,
    CheckoutSessionError,
    PaymentNotificationHandler,
    ProviderNotConfiguredError,
    WebhookOutcome,
    WebhookResult,
    get_billing_provider,
)
from liftlog.config import CONFIG
from liftlog.db import USERS_TABLE, DatabaseClient, UserRecord
from liftlog.errors import StoreError
from liftlog.policy import PolicyEngine

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_billing_provider() -> BillingProvider:
    try:
        return get_billing_provider()
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


def _build_redirect_url(base: str, path: str) -> str:
    return f"{base.rstrip('/')}/{path.lstrip('/')}"


@router.post("/billing/checkout", response_model=CheckoutSessionResponse, status_code=status.HTTP_200_OK)
def create_checkout_session(
    request: Optional[CheckoutSessionRequest] = None,
    origin: Optional[str] = Header(None),
    session_user: Optional[Dict[str, Any]] = Depends(get_optional_user),
    db: DatabaseClient = Depends(get_database),
) -> CheckoutSessionResponse:
    """Start a hosted checkout that upgrades the caller to premium."""

    session_user_id = session_user.get("id") if session_user else None
    requested_user_id = request.user_id if request else None
    user_id = requested_user_id or session_user_id
    if not user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User ID is required")
    if session_user_id and requested_user_id and requested_user_id != session_user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cannot start checkout for another user")

    provider = _require_billing_provider()
    if not provider.is_configured():
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Billing is not enabled")

    # The webhook upgrades the users row, so it must exist before payment.
    policy = PolicyEngine(db)
    try:
        if session_user_id:
            customer_email = policy.ensure_user(session_user_id, session_user.get("email")).email
        else:
            user = db.get_row(USERS_TABLE, user_id)
            if user is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
            customer_email = UserRecord.from_record(user).email
    except StoreError as exc:
        raise store_unavailable(exc) from exc

    base_url = (origin or "").strip() or CONFIG.app_base_url
    success_url = _build_redirect_url(base_url, CONFIG.checkout_success_path)
    cancel_url = _build_redirect_url(base_url, CONFIG.checkout_cancel_path)

    try:
        session = provider.create_checkout_session(
            user_id=user_id,
            success_url=success_url,
            cancel_url=cancel_url,
            customer_email=customer_email,
        )
    except ProviderNotConfiguredError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except CheckoutSessionError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create checkout session: {exc}",
        ) from exc

    return CheckoutSessionResponse(url=session["url"], session_id=session.get("id"))


@router.post("/billing/webhook", status_code=status.HTTP_200_OK)
async def stripe_webhook(
    request: Request,
    db: Optional[DatabaseClient] = Depends(get_webhook_database),
) -> JSONResponse:
    payload = await request.body()
    signature = request.headers.get("Stripe-Signature")

    try:
        provider = get_billing_provider()
    except KeyError as exc:
        logger.error("Webhook received but billing provider is misconfigured: %s", exc)
        provider = None

    if provider is None or db is None:
        # Stripe keeps redelivering 5xx responses until configuration is fixed.
        result = WebhookResult(WebhookOutcome.FAILED, detail="Billing webhook is not configured")
    else:
        result = PaymentNotificationHandler(provider, PolicyEngine(db)).handle(payload, signature)
    return JSONResponse(status_code=result.status_code, content=result.to_dict())
