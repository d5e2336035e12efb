"""Operator utility for inspecting users, setting roles and printing the averages report.

Run with:

    python -m scripts.manage_users inspect --user-id <uuid>
    python -m scripts.manage_users set-role --user-id <uuid> --role admin
    python -m scripts.manage_users upgrade --user-id <uuid>
    python -m scripts.manage_users report

Requires SUPABASE_URL/SUPABASE_SERVICE_ROLE_KEY environment variables
(or DATABASE_BACKEND=memory for a throwaway store).
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import date
from typing import Any, Dict, List, Optional


def load_environment() -> str:
    """Load the repository-level .env before any client is built."""
    from liftlog.config import load_envs

    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    load_envs(project_root)
    return project_root


def get_database():
    from liftlog.db import get_database_client  # Lazy import to ensure env is loaded

    return get_database_client()


def dump(obj: Any) -> str:
    return json.dumps(obj, indent=2, sort_keys=True, default=str)


def _operator():
    from liftlog.policy import Plan, Requester, Role

    # Console operators act with admin rights.
    return Requester(user_id="cli", role=Role.ADMIN, plan=Plan.FREE, email=None)


def inspect_user(user_id: str) -> int:
    from liftlog.db import USERS_TABLE
    from liftlog.policy import PolicyEngine

    db = get_database()
    record = db.get_row(USERS_TABLE, user_id)
    if not record:
        print("No user found", file=sys.stderr)
        return 1

    print("User record:\n" + dump(record))

    policy = PolicyEngine(db)
    requester = policy.resolve_requester(user_id)
    print(f"\nRole: {requester.role.value}\nPlan: {requester.plan.value}")

    usage = policy.daily_usage(requester, date.today())
    print("\nToday's usage:\n" + dump(usage.to_dict()))
    return 0


def set_role(user_id: str, role: str) -> int:
    from liftlog.errors import StoreError
    from liftlog.policy import PolicyEngine, Role

    policy = PolicyEngine(get_database())
    try:
        applied = policy.assign_role(_operator(), user_id, Role.coerce(role))
    except StoreError as exc:
        print(f"Failed to set role: {exc}", file=sys.stderr)
        return 1

    print(f"User {user_id} is now {applied.value}")
    return 0


def upgrade_user(user_id: str) -> int:
    from liftlog.errors import StoreError
    from liftlog.policy import PolicyEngine

    policy = PolicyEngine(get_database())
    try:
        policy.apply_plan_upgrade(user_id)
    except StoreError as exc:
        print(f"Failed to upgrade user: {exc}", file=sys.stderr)
        return 1

    print(f"User {user_id} is now premium")
    return 0


def print_report() -> int:
    from liftlog.services import build_average_sets_report

    rows: List[Dict[str, Any]] = [row.to_dict() for row in build_average_sets_report(get_database())]
    if not rows:
        print("No workouts recorded yet")
        return 0

    print(dump(rows))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Manage workout tracker users")
    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect_parser = subparsers.add_parser("inspect", help="Show a user's record, role, plan and usage")
    inspect_parser.add_argument("--user-id", required=True, help="Auth user UUID")

    role_parser = subparsers.add_parser("set-role", help="Grant or revoke the admin role")
    role_parser.add_argument("--user-id", required=True, help="Auth user UUID")
    role_parser.add_argument("--role", required=True, choices=["member", "admin"])

    upgrade_parser = subparsers.add_parser("upgrade", help="Move a user to the premium plan")
    upgrade_parser.add_argument("--user-id", required=True, help="Auth user UUID")

    subparsers.add_parser("report", help="Print average sets per day for every user")

    args = parser.parse_args(argv)

    if args.command == "inspect":
        return inspect_user(args.user_id)
    if args.command == "set-role":
        return set_role(args.user_id, args.role)
    if args.command == "upgrade":
        return upgrade_user(args.user_id)
    return print_report()


if __name__ == "__main__":
    load_environment()
    raise SystemExit(main())
