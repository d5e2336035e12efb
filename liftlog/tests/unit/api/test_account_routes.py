"""Tests for the profile, report and role-management endpoints."""

from __future__ import annotations

from datetime import date

import pytest
from fastapi import HTTPException, status

from liftlog.api.routes import admin as admin_module
from liftlog.api.routes import profile as profile_module
from liftlog.api.routes import reports as reports_module
from liftlog.api.schemas import RoleUpdateRequest
from liftlog.db import USERS_TABLE, WORKOUTS_TABLE


def test_profile_reports_plan_and_usage(memory_db) -> None:
    memory_db.insert_row(
        WORKOUTS_TABLE,
        {"user_id": "user-free", "date": date.today().isoformat(), "exercise": "Squat", "sets": 2},
    )

    profile = profile_module.get_profile(context=("user-free", memory_db))

    assert profile.email == "free@example.com"
    assert profile.role == "member"
    assert profile.plan == "free"
    assert profile.usage.used == 1
    assert profile.usage.remaining == 4


def test_profile_creates_missing_user_row(monkeypatch, memory_db) -> None:
    class StubAuthManager:
        def get_auth_user(self, user_id):
            assert user_id == "user-new"
            return {"id": user_id, "email": "new@example.com", "user_metadata": {}}

    monkeypatch.setattr(profile_module, "get_auth_manager", lambda: StubAuthManager())

    profile = profile_module.get_profile(context=("user-new", memory_db))

    assert profile.email == "new@example.com"
    assert profile.plan == "free"
    assert memory_db.get_row(USERS_TABLE, "user-new")["email"] == "new@example.com"


def test_premium_profile_has_no_limit(memory_db) -> None:
    profile = profile_module.get_profile(context=("user-premium", memory_db))

    assert profile.plan == "premium"
    assert profile.usage.limit is None


def test_average_sets_report_for_admin(policy, memory_db, admin) -> None:
    memory_db.insert_row(WORKOUTS_TABLE, {"user_id": "user-free", "date": "2024-01-01", "exercise": "Row", "sets": 4})

    report = reports_module.get_average_sets_report(requester=admin, policy=policy, db=memory_db)

    assert [(row.email, row.avg_sets_per_day) for row in report.rows] == [("free@example.com", 4.0)]


def test_average_sets_report_forbidden_for_members(policy, memory_db, premium_member) -> None:
    with pytest.raises(HTTPException) as excinfo:
        reports_module.get_average_sets_report(requester=premium_member, policy=policy, db=memory_db)

    assert excinfo.value.status_code == status.HTTP_403_FORBIDDEN


def test_admin_can_promote_member(policy, admin) -> None:
    response = admin_module.update_user_role(
        "user-free",
        RoleUpdateRequest(role="Admin"),
        requester=admin,
        policy=policy,
    )

    assert response.role == "admin"
    assert policy.resolve_requester("user-free").is_admin


def test_member_cannot_change_roles(policy, free_member) -> None:
    with pytest.raises(HTTPException) as excinfo:
        admin_module.update_user_role(
            "user-free",
            RoleUpdateRequest(role="admin"),
            requester=free_member,
            policy=policy,
        )

    assert excinfo.value.status_code == status.HTTP_403_FORBIDDEN
