"""Tests for the operator CLI."""

from __future__ import annotations

import json
import os

import pytest

from liftlog.db import ROLES_TABLE, USERS_TABLE, WORKOUTS_TABLE
from scripts import manage_users


@pytest.fixture
def cli_db(monkeypatch: pytest.MonkeyPatch, memory_db):
    monkeypatch.setattr(manage_users, "get_database", lambda: memory_db)
    return memory_db


def test_inspect_prints_role_plan_and_usage(cli_db, capsys) -> None:
    assert manage_users.main(["inspect", "--user-id", "user-admin"]) == 0

    output = capsys.readouterr().out
    assert "admin@example.com" in output
    assert "Role: admin" in output
    assert "Plan: free" in output


def test_inspect_unknown_user_fails(cli_db, capsys) -> None:
    assert manage_users.main(["inspect", "--user-id", "ghost"]) == 1
    assert "No user found" in capsys.readouterr().err


def test_set_role_promotes_user(cli_db) -> None:
    assert manage_users.main(["set-role", "--user-id", "user-free", "--role", "admin"]) == 0

    rows = cli_db.list_rows(ROLES_TABLE, filters={"user_id": "user-free"})
    assert rows[0]["role"] == "admin"


def test_upgrade_sets_premium_and_reports_failures(cli_db, capsys) -> None:
    assert manage_users.main(["upgrade", "--user-id", "user-free"]) == 0
    assert cli_db.get_row(USERS_TABLE, "user-free")["plan"] == "premium"

    assert manage_users.main(["upgrade", "--user-id", "ghost"]) == 1
    assert "Failed to upgrade user" in capsys.readouterr().err


def test_report_prints_json_rows(cli_db, capsys) -> None:
    cli_db.insert_row(WORKOUTS_TABLE, {"user_id": "user-free", "date": "2024-01-01", "exercise": "Row", "sets": 3})

    assert manage_users.main(["report"]) == 0

    rows = json.loads(capsys.readouterr().out)
    assert rows == [{"avg_sets_per_day": 3.0, "email": "free@example.com", "user_id": "user-free"}]


def test_load_environment_reads_repository_dotenv(monkeypatch: pytest.MonkeyPatch) -> None:
    import liftlog.config as config_module

    loaded = []
    monkeypatch.setattr(config_module, "load_envs", loaded.append)

    project_root = manage_users.load_environment()

    assert loaded == [project_root]
    assert os.path.isfile(os.path.join(project_root, "pyproject.toml"))
