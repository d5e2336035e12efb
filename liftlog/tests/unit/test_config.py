"""Tests for environment-driven configuration."""

from __future__ import annotations

import os

import pytest

from liftlog.config import CONFIG, DEFAULT_DAILY_WORKOUT_LIMIT, load_envs, reload_config


def test_defaults_under_test_environment() -> None:
    assert CONFIG.environment == "test"
    assert CONFIG.database_backend == "memory"
    assert CONFIG.free_daily_workout_limit == DEFAULT_DAILY_WORKOUT_LIMIT
    assert CONFIG.billing_default_provider == "stripe"
    assert CONFIG.checkout_cancel_path == "/dashboard"
    assert CONFIG.stripe_configured is False


def test_backend_falls_back_to_supabase_when_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE_BACKEND", raising=False)
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    reload_config()

    assert CONFIG.supabase_configured is True
    assert CONFIG.database_backend == "supabase"


def test_invalid_values_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENV", "staging")
    monkeypatch.setenv("FREE_DAILY_WORKOUT_LIMIT", "many")
    monkeypatch.setenv("DATABASE_BACKEND", "sqlite")
    reload_config()

    assert CONFIG.environment == "prod"
    assert CONFIG.free_daily_workout_limit == DEFAULT_DAILY_WORKOUT_LIMIT
    assert CONFIG.database_backend == "supabase"


def test_price_alias_and_cors_origins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PREMIUM_PRICE_ID", "price_legacy")
    monkeypatch.setenv("API_CORS_ORIGINS", "https://a.test, https://b.test,")
    monkeypatch.setenv("APP_BASE_URL", "https://app.test/")
    reload_config()

    assert CONFIG.stripe_premium_price_id == "price_legacy"
    assert CONFIG.api_cors_origins == ("https://a.test", "https://b.test")
    assert CONFIG.app_base_url == "https://app.test"


def test_load_envs_reads_dotenv_file(tmp_path) -> None:
    (tmp_path / ".env").write_text("STRIPE_WEBHOOK_SECRET=whsec_from_file\n", encoding="utf-8")

    load_envs(str(tmp_path))

    assert CONFIG.stripe_webhook_secret == "whsec_from_file"
    os.environ.pop("STRIPE_WEBHOOK_SECRET", None)
