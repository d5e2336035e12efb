"""
Bearer token verification against Supabase Auth.

Tokens are checked locally with the project's JWT secret first; when that
fails and a Supabase client is available the SDK is asked instead. The
service role key additionally allows looking up auth users by id, which the
profile endpoint uses to seed the ``users`` row on first sign-in.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Dict, List, Optional, Union

import jwt
import requests
from fastapi import HTTPException, status
from supabase import Client, create_client

from ..config import CONFIG

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
TOKEN_AUDIENCE = "authenticated"
ADMIN_LOOKUP_TIMEOUT = 10


def _secret_candidates(secret: Optional[str]) -> List[Union[str, bytes]]:
    """Supabase shows the JWT secret either raw or base64 encoded; try both."""

    if not secret or not secret.strip():
        return []
    raw = secret.strip()
    candidates: List[Union[str, bytes]] = [raw]
    try:
        decoded = base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError):
        decoded = b""
    if decoded:
        candidates.append(decoded)
    return candidates


class SupabaseAuthManager:
    """Resolves the user id behind an ``Authorization`` header."""

    def __init__(self):
        self.supabase_url = getattr(CONFIG, "supabase_url", None)
        self.service_role_key = getattr(CONFIG, "supabase_service_role_key", None)
        self._secrets = _secret_candidates(getattr(CONFIG, "supabase_jwt_secret", None))

        client_key = self.service_role_key or getattr(CONFIG, "supabase_anon_key", None)
        self.supabase: Optional[Client] = None
        if self.supabase_url and client_key:
            self.supabase = create_client(self.supabase_url, client_key)
        elif not self._secrets:
            raise ValueError("Set SUPABASE_JWT_SECRET, or SUPABASE_URL with SUPABASE_ANON_KEY, to verify sessions")
        else:
            logger.info("Supabase client not configured; verifying tokens with SUPABASE_JWT_SECRET only")

    def _decode_locally(self, token: str) -> Optional[Dict[str, Any]]:
        for secret in self._secrets:
            try:
                return jwt.decode(token, secret, algorithms=["HS256"], audience=TOKEN_AUDIENCE)
            except jwt.InvalidTokenError:
                continue
        return None

    def _decode_remotely(self, token: str) -> Optional[Dict[str, Any]]:
        if self.supabase is None:
            return None
        try:
            response = self.supabase.auth.get_user(token)
        except Exception as exc:
            logger.warning("Supabase rejected bearer token: %s", exc)
            return None
        user = getattr(response, "user", None) if response else None
        if user is None:
            return None
        return {"sub": user.id, "email": user.email, "user_metadata": user.user_metadata or {}}

    def verify_jwt_token(self, token: str) -> Optional[Dict[str, Any]]:
        """Return the token claims, or ``None`` if the token cannot be verified."""

        if not token:
            return None
        claims = self._decode_locally(token) or self._decode_remotely(token)
        if claims is None:
            logger.debug("Bearer token failed verification")
        return claims

    def get_user_from_token(self, token: str) -> Optional[Dict[str, Any]]:
        claims = self.verify_jwt_token(token)
        if not claims or not claims.get("sub"):
            return None
        return {
            "id": claims["sub"],
            "email": claims.get("email"),
            "metadata": claims.get("user_metadata") or {},
        }

    def authenticate_request_user(self, authorization_header: Optional[str]) -> Optional[Dict[str, Any]]:
        """Return ``id``, ``email`` and ``metadata`` for a ``Bearer <jwt>`` header value."""

        if not authorization_header or not authorization_header.startswith(BEARER_PREFIX):
            return None
        return self.get_user_from_token(authorization_header[len(BEARER_PREFIX):].strip())

    def authenticate_request_token(self, authorization_header: Optional[str]) -> Optional[str]:
        """Extract the user id from a ``Bearer <jwt>`` header value."""

        user = self.authenticate_request_user(authorization_header)
        return user["id"] if user else None

    def get_auth_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Fetch ``id`` and ``email`` for ``user_id`` through the auth admin API.

        Needs the service role key; returns ``None`` without it or when the
        lookup fails.
        """

        if not user_id or not self.service_role_key or not self.supabase_url:
            return None

        url = f"{self.supabase_url.rstrip('/')}/auth/v1/admin/users/{user_id}"
        headers = {
            "Authorization": f"Bearer {self.service_role_key}",
            "apikey": self.service_role_key,
        }
        try:
            response = requests.get(url, headers=headers, timeout=ADMIN_LOOKUP_TIMEOUT)
        except requests.RequestException:
            logger.exception("Auth user lookup failed for %s", user_id)
            return None

        if response.status_code != 200:
            logger.warning("Auth user lookup for %s returned %s", user_id, response.status_code)
            return None

        data = response.json()
        return {
            "id": data.get("id"),
            "email": data.get("email"),
            "user_metadata": data.get("user_metadata") or {},
        }


AuthManager = SupabaseAuthManager

_auth_manager: Optional[AuthManager] = None


def get_auth_manager() -> AuthManager:
    global _auth_manager
    if _auth_manager is None:
        _auth_manager = AuthManager()
    return _auth_manager


def reset_auth_manager() -> None:
    """Drop the cached manager so the next call re-reads configuration."""
    global _auth_manager
    _auth_manager = None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def require_auth_user(authorization: Optional[str] = None) -> Dict[str, Any]:
    """Return the authenticated user (id, email, metadata) or raise a 401."""

    if not authorization:
        raise _unauthorized("Authorization header required")

    user = get_auth_manager().authenticate_request_user(authorization)
    if not user:
        raise _unauthorized("Invalid or expired token")
    return user


def require_auth(authorization: Optional[str] = None) -> str:
    """Return the authenticated user id or raise a 401."""

    return require_auth_user(authorization)["id"]
