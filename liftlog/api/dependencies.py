"""FastAPI dependencies shared across the public API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Header, HTTPException, status

from ..auth import require_auth, require_auth_user
from ..db import DatabaseClient, get_database_client
from ..errors import AuthenticationMissing, StoreError
from ..policy import PolicyEngine, Requester

logger = logging.getLogger(__name__)


def get_current_user_id(authorization: str = Header(None)) -> str:
    """Resolve the authenticated Supabase user from the Authorization header."""

    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return require_auth(authorization)


def get_current_user(authorization: str = Header(None)) -> Dict[str, Any]:
    """Like :func:`get_current_user_id`, but keeps the token's email claim."""

    return require_auth_user(authorization)


def get_optional_user(authorization: str = Header(None)) -> Optional[Dict[str, Any]]:
    """Like :func:`get_current_user`, but a missing header yields ``None``."""

    if not authorization:
        return None
    return require_auth_user(authorization)


def get_database() -> DatabaseClient:
    """Return the shared database client instance."""

    return get_database_client()


def get_webhook_database() -> Optional[DatabaseClient]:
    """Return the shared client, or ``None`` when the record store is not configured."""

    try:
        return get_database_client()
    except ValueError as exc:
        logger.error("Record store is not configured: %s", exc)
        return None


def get_database_with_user(
    user_id: str = Depends(get_current_user_id),
) -> tuple[str, DatabaseClient]:
    """Convenience helper that returns both user id and database client."""

    return user_id, get_database_client()


def get_policy_engine(db: DatabaseClient = Depends(get_database)) -> PolicyEngine:
    """Build a policy engine bound to the request's database client."""

    return PolicyEngine(db)


def get_requester(
    user: Dict[str, Any] = Depends(get_current_user),
    policy: PolicyEngine = Depends(get_policy_engine),
) -> Requester:
    """Resolve the authenticated user's role and plan, creating their ``users`` row if needed."""

    try:
        policy.ensure_user(user.get("id"), user.get("email"))
        return policy.resolve_requester(user.get("id"))
    except AuthenticationMissing as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    except StoreError as exc:
        raise store_unavailable(exc) from exc


def store_unavailable(exc: StoreError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Record store unavailable: {exc}",
    )
