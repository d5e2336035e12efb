"""User profile endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, status

from liftlog.api.dependencies import get_database_with_user, store_unavailable
from liftlog.api.schemas import DailyUsageSummary, UserProfile
from liftlog.auth.manager import get_auth_manager
from liftlog.db import USERS_TABLE
from liftlog.errors import StoreError
from liftlog.policy import PolicyEngine

router = APIRouter()


@router.get("/me", response_model=UserProfile, status_code=status.HTTP_200_OK)
def get_profile(context=Depends(get_database_with_user)) -> UserProfile:
    """Return the authenticated user's role, plan and today's quota usage."""

    user_id, db = context
    policy = PolicyEngine(db)

    try:
        if db.get_row(USERS_TABLE, user_id) is None:
            auth_user = get_auth_manager().get_auth_user(user_id) or {}
            policy.ensure_user(user_id, auth_user.get("email"))

        requester = policy.resolve_requester(user_id)
        usage = policy.daily_usage(requester, date.today())
    except StoreError as exc:
        raise store_unavailable(exc) from exc

    return UserProfile(
        id=user_id,
        email=requester.email,
        role=requester.role.value,
        plan=requester.plan.value,
        usage=DailyUsageSummary(**usage.to_dict()),
    )
