"""Environment-driven runtime settings for the workout service."""

from __future__ import annotations

import os
from types import SimpleNamespace
from typing import Optional, Tuple

ENVIRONMENTS = ("dev", "test", "prod")
DATABASE_BACKENDS = ("supabase", "memory")
DEFAULT_DAILY_WORKOUT_LIMIT = 5


def _env_str(name: str, default: Optional[str] = None, *, alias: Optional[str] = None) -> Optional[str]:
    """Read ``name`` (or ``alias``); blank values count as unset."""

    for key in (name, alias):
        if not key:
            continue
        value = (os.getenv(key) or "").strip()
        if value:
            return value
    return default


def _env_int(name: str, default: int, *, minimum: Optional[int] = None) -> int:
    value = _env_str(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    if minimum is not None and parsed < minimum:
        return default
    return parsed


def _env_list(name: str) -> Tuple[str, ...]:
    value = _env_str(name) or ""
    return tuple(part.strip() for part in value.split(",") if part.strip())


class Settings(SimpleNamespace):
    """Attribute bag holding the resolved settings; refreshed by ``reload_config``."""

CONFIG = Settings()


def _compute_values() -> dict[str, object]:
    # -----------------------------------------------------------------------
    # RUNTIME ENVIRONMENT
    # -----------------------------------------------------------------------
    environment = (_env_str("ENV") or "prod").lower()
    if environment not in ENVIRONMENTS:
        environment = "prod"
    log_level = (_env_str("LOG_LEVEL") or "INFO").upper()

    # -----------------------------------------------------------------------
    # RECORD STORE
    # -----------------------------------------------------------------------
    supabase_url = _env_str("SUPABASE_URL")
    supabase_anon_key = _env_str("SUPABASE_ANON_KEY")
    supabase_service_role_key = _env_str("SUPABASE_SERVICE_ROLE_KEY")
    supabase_configured = bool(supabase_url and (supabase_service_role_key or supabase_anon_key))

    # Explicit choice wins; otherwise local runs without Supabase use the in-memory store.
    database_backend = (_env_str("DATABASE_BACKEND") or "").lower()
    if database_backend not in DATABASE_BACKENDS:
        if supabase_configured or environment == "prod":
            database_backend = "supabase"
        else:
            database_backend = "memory"

    # -----------------------------------------------------------------------
    # BILLING / STRIPE
    # -----------------------------------------------------------------------
    stripe_secret_key = _env_str("STRIPE_SECRET_KEY")
    stripe_premium_price_id = _env_str("STRIPE_PREMIUM_PRICE_ID", alias="PREMIUM_PRICE_ID")
    checkout_success_path = _env_str("CHECKOUT_SUCCESS_PATH", "/upgrade-success?session_id={CHECKOUT_SESSION_ID}")

    return {
        "environment": environment,
        "is_development": environment == "dev",
        "log_level": log_level,
        "supabase_url": supabase_url,
        "supabase_anon_key": supabase_anon_key,
        "supabase_service_role_key": supabase_service_role_key,
        "supabase_jwt_secret": _env_str("SUPABASE_JWT_SECRET"),
        "supabase_configured": supabase_configured,
        "database_backend": database_backend,
        "free_daily_workout_limit": _env_int("FREE_DAILY_WORKOUT_LIMIT", DEFAULT_DAILY_WORKOUT_LIMIT, minimum=0),
        "stripe_secret_key": stripe_secret_key,
        "stripe_webhook_secret": _env_str("STRIPE_WEBHOOK_SECRET"),
        "stripe_premium_price_id": stripe_premium_price_id,
        "stripe_webhook_tolerance": _env_int("STRIPE_WEBHOOK_TOLERANCE", 300, minimum=1),
        "stripe_configured": bool(stripe_secret_key and stripe_premium_price_id),
        "billing_default_provider": (_env_str("BILLING_PROVIDER_DEFAULT") or "stripe").lower(),
        "app_base_url": (_env_str("APP_BASE_URL") or "http://localhost:3000").rstrip("/"),
        "checkout_success_path": checkout_success_path,
        "checkout_cancel_path": _env_str("CHECKOUT_CANCEL_PATH", "/dashboard"),
        "api_title": _env_str("API_TITLE", "liftlog API"),
        "api_version": _env_str("API_VERSION", "1.0.0"),
        "api_cors_origins": _env_list("API_CORS_ORIGINS"),
    }


def reload_config() -> None:
    CONFIG.__dict__.update(_compute_values())


def load_envs(global_dir: str) -> None:
    """Load ``<global_dir>/.env`` into the process environment and refresh CONFIG."""
    from dotenv import load_dotenv

    load_dotenv(os.path.join(global_dir, ".env"))
    reload_config()


# Resolve once on import so modules can read CONFIG immediately.
reload_config()
