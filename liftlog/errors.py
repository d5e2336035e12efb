"""Domain errors raised by the policy engine, store clients and billing handlers."""

from __future__ import annotations

from typing import Optional


class LiftlogError(Exception):
    """Base class for errors surfaced to API callers."""


class AuthenticationMissing(LiftlogError):
    """Raised when an operation needs a session and none was supplied."""


class AuthorizationDenied(LiftlogError):
    """Raised when the requester's role does not allow the operation."""


class QuotaExceeded(LiftlogError):
    """Raised when a free-plan user has used up the daily entry quota."""

    def __init__(self, limit: int, message: Optional[str] = None):
        self.limit = limit
        super().__init__(message or f"Daily limit reached: free plan allows {limit} workouts per day")


class StoreError(LiftlogError):
    """Raised when the record store rejects or fails an operation."""


class RecordNotFound(LiftlogError):
    """Raised when a workout record does not exist."""


class SignatureInvalid(LiftlogError):
    """Raised when a payment webhook cannot be authenticated."""


class MissingReference(LiftlogError):
    """Raised when a completed checkout does not carry a user reference."""


__all__ = [
    "LiftlogError",
    "AuthenticationMissing",
    "AuthorizationDenied",
    "QuotaExceeded",
    "StoreError",
    "RecordNotFound",
    "SignatureInvalid",
    "MissingReference",
]
