"""Tests for the Supabase store adapter using a stubbed SDK client."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from liftlog.db import (
    InMemoryDatabaseClient,
    SupabaseDatabaseClient,
    WorkoutRecord,
    get_database_client,
    reset_database_client,
)
from liftlog.db import client as client_module
from liftlog.errors import StoreError


class StubQuery:
    def __init__(self, calls, result):
        self._calls = calls
        self._result = result

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self._calls.append((name, args, kwargs))
            return self

        return record

    def execute(self):
        if isinstance(self._result, Exception):
            raise self._result
        return self._result


class StubSupabase:
    def __init__(self, result):
        self.calls = []
        self._result = result

    def table(self, name):
        self.calls.append(("table", (name,), {}))
        return StubQuery(self.calls, self._result)

    def rpc(self, name, params):
        self.calls.append(("rpc", (name, params), {}))
        return StubQuery(self.calls, self._result)


def test_list_rows_applies_filters_and_order() -> None:
    stub = StubSupabase(SimpleNamespace(data=[{"id": "w-1"}]))
    db = SupabaseDatabaseClient(client=stub)

    rows = db.list_rows("workouts", filters={"user_id": "u-1"}, order_by="date", descending=True)

    assert rows == [{"id": "w-1"}]
    assert ("eq", ("user_id", "u-1"), {}) in stub.calls
    assert ("order", ("date",), {"desc": True}) in stub.calls


def test_count_rows_uses_exact_count() -> None:
    stub = StubSupabase(SimpleNamespace(data=[], count=4))
    db = SupabaseDatabaseClient(client=stub)

    assert db.count_rows("workouts", filters={"user_id": "u-1", "date": "2024-01-01"}) == 4
    assert ("select", ("id",), {"count": "exact"}) in stub.calls


def test_sdk_failures_become_store_errors() -> None:
    stub = StubSupabase(RuntimeError("connection reset"))
    db = SupabaseDatabaseClient(client=stub)

    with pytest.raises(StoreError):
        db.list_rows("users")
    with pytest.raises(StoreError):
        db.update_row("users", "u-1", {"plan": "premium"})
    with pytest.raises(StoreError):
        db.average_sets_per_day()


def test_conditional_insert_calls_rpc_and_maps_empty_result() -> None:
    stub = StubSupabase(SimpleNamespace(data=[]))
    db = SupabaseDatabaseClient(client=stub)

    row = {"user_id": "u-1", "date": "2024-01-01", "exercise": "Squat", "sets": 3}
    assert db.insert_workout_within_limit(row, 5) is None

    name, (rpc_name, params), _ = stub.calls[0]
    assert rpc_name == "insert_workout_within_limit"
    assert params == {
        "p_user_id": "u-1",
        "p_date": "2024-01-01",
        "p_exercise": "Squat",
        "p_sets": 3,
        "p_limit": 5,
    }


def test_insert_row_requires_returned_row() -> None:
    db = SupabaseDatabaseClient(client=StubSupabase(SimpleNamespace(data=None)))

    with pytest.raises(StoreError):
        db.insert_row("workouts", {"user_id": "u-1"})


def test_get_database_client_honours_memory_backend() -> None:
    reset_database_client()

    db = get_database_client()

    assert isinstance(db, InMemoryDatabaseClient)
    assert get_database_client() is db


def test_get_database_client_builds_supabase_client(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_BACKEND", "supabase")
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-key")
    created = {}

    def fake_create_client(url, key):
        created["args"] = (url, key)
        return StubSupabase(SimpleNamespace(data=[]))

    monkeypatch.setattr(client_module, "create_client", fake_create_client)
    reset_database_client()

    db = get_database_client()

    assert isinstance(db, SupabaseDatabaseClient)
    assert created["args"] == ("https://example.supabase.co", "service-key")


def test_workout_record_parses_timestamps() -> None:
    record = WorkoutRecord.from_record(
        {"id": 7, "user_id": "u-1", "date": "2024-02-03T00:00:00+00:00", "exercise": "Row", "sets": "4"}
    )

    assert record.id == "7"
    assert record.date.isoformat() == "2024-02-03"
    assert record.sets == 4
