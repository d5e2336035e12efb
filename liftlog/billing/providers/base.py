"""Provider abstraction for handling billing operations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ProviderNotConfiguredError(RuntimeError):
    """Raised when a billing provider is missing required configuration."""


class BillingProvider(ABC):
    """Interface for payment providers."""

    key: str

    @abstractmethod
    def is_configured(self) -> bool:
        """Return True when the provider has the secrets it needs to sell the plan."""

    @abstractmethod
    def create_checkout_session(
        self,
        *,
        user_id: str,
        success_url: str,
        cancel_url: str,
        customer_email: Optional[str],
    ) -> Dict[str, Any]:
        """Create a hosted purchase session for the premium plan; returns ``id`` and ``url``."""

    @abstractmethod
    def parse_event(self, payload: bytes, signature: str) -> Dict[str, Any]:
        """Validate and decode webhook payloads, raising ``SignatureInvalid`` on failure."""
