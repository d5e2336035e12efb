"""Repository-wide pytest fixtures."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from liftlog.auth import reset_auth_manager
from liftlog.billing import reset_billing_providers
from liftlog.config import reload_config
from liftlog.db import ROLES_TABLE, USERS_TABLE, InMemoryDatabaseClient, reset_database_client
from liftlog.policy import Plan, PolicyEngine, Requester, Role

_ISOLATED_ENV = (
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "SUPABASE_SERVICE_ROLE_KEY",
    "STRIPE_SECRET_KEY",
    "STRIPE_WEBHOOK_SECRET",
    "STRIPE_PREMIUM_PRICE_ID",
    "PREMIUM_PRICE_ID",
    "FREE_DAILY_WORKOUT_LIMIT",
    "STRIPE_WEBHOOK_TOLERANCE",
    "BILLING_PROVIDER_DEFAULT",
    "APP_BASE_URL",
    "CHECKOUT_SUCCESS_PATH",
    "CHECKOUT_CANCEL_PATH",
    "API_CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def _set_default_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Run every test against the in-memory store with no external services configured."""

    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("DATABASE_BACKEND", "memory")
    monkeypatch.setenv("SUPABASE_JWT_SECRET", "test-jwt-secret-0123456789abcdef0123")
    reload_config()
    reset_database_client()
    reset_auth_manager()
    reset_billing_providers()
    yield
    reset_database_client()
    reset_auth_manager()
    reset_billing_providers()
    reload_config()


@pytest.fixture
def memory_db() -> InMemoryDatabaseClient:
    """Store seeded with one free member, one premium member and one admin."""

    return InMemoryDatabaseClient(
        seed={
            USERS_TABLE: [
                {"id": "user-free", "email": "free@example.com", "plan": "free"},
                {"id": "user-premium", "email": "premium@example.com", "plan": "premium"},
                {"id": "user-admin", "email": "admin@example.com", "plan": "free"},
            ],
            ROLES_TABLE: [
                {"user_id": "user-admin", "role": "admin"},
            ],
        }
    )


@pytest.fixture
def policy(memory_db: InMemoryDatabaseClient) -> PolicyEngine:
    return PolicyEngine(memory_db, daily_limit=5)


@pytest.fixture
def free_member() -> Requester:
    return Requester(user_id="user-free", role=Role.MEMBER, plan=Plan.FREE, email="free@example.com")


@pytest.fixture
def premium_member() -> Requester:
    return Requester(user_id="user-premium", role=Role.MEMBER, plan=Plan.PREMIUM, email="premium@example.com")


@pytest.fixture
def admin() -> Requester:
    return Requester(user_id="user-admin", role=Role.ADMIN, plan=Plan.FREE, email="admin@example.com")
