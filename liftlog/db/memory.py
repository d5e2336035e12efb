"""In-process record store used for local development and tests."""

from __future__ import annotations

import threading
import uuid
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..errors import StoreError
from .base import DatabaseClient
from .models import ROLES_TABLE, USERS_TABLE, WORKOUTS_TABLE

# Child table -> column that must name an existing users row.
_USER_REFERENCES = {WORKOUTS_TABLE: "user_id", ROLES_TABLE: "user_id"}


class InMemoryDatabaseClient(DatabaseClient):
    """Dictionary-backed store honouring the same contract as the Supabase client."""

    backend = "memory"

    def __init__(self, seed: Optional[Mapping[str, Iterable[Mapping[str, Any]]]] = None):
        self._tables: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self._lock = threading.RLock()
        for table, rows in (seed or {}).items():
            for row in rows:
                self.insert_row(table, row)

    def list_rows(
        self,
        table: str,
        *,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        with self._lock:
            rows = [dict(row) for row in self._tables[table] if _matches(row, filters)]
        if order_by:
            rows.sort(key=lambda row: (row.get(order_by) is None, row.get(order_by)), reverse=descending)
        return rows

    def count_rows(self, table: str, *, filters: Optional[Mapping[str, Any]] = None) -> int:
        with self._lock:
            return sum(1 for row in self._tables[table] if _matches(row, filters))

    def insert_row(self, table: str, row: Mapping[str, Any]) -> Dict[str, Any]:
        record = dict(row)
        with self._lock:
            record_id = str(record.get("id") or uuid.uuid4())
            if any(existing.get("id") == record_id for existing in self._tables[table]):
                raise StoreError(f"duplicate key value violates unique constraint on {table}.id")
            self._check_user_reference(table, record)
            record["id"] = record_id
            self._tables[table].append(record)
        return dict(record)

    def _check_user_reference(self, table: str, record: Mapping[str, Any]) -> None:
        column = _USER_REFERENCES.get(table)
        if column is None:
            return
        user_id = record.get(column)
        if not any(user.get("id") == user_id for user in self._tables[USERS_TABLE]):
            raise StoreError(f"insert on {table} violates foreign key constraint: user {user_id} does not exist")

    def update_row(self, table: str, row_id: str, values: Mapping[str, Any]) -> List[Dict[str, Any]]:
        updated: List[Dict[str, Any]] = []
        with self._lock:
            for row in self._tables[table]:
                if row.get("id") == row_id:
                    row.update({key: value for key, value in values.items() if key != "id"})
                    updated.append(dict(row))
        return updated

    def delete_row(self, table: str, row_id: str) -> bool:
        with self._lock:
            rows = self._tables[table]
            for index, row in enumerate(rows):
                if row.get("id") == row_id:
                    del rows[index]
                    return True
        return False

    def insert_workout_within_limit(self, row: Mapping[str, Any], limit: int) -> Optional[Dict[str, Any]]:
        scope = {"user_id": row.get("user_id"), "date": row.get("date")}
        with self._lock:
            if self.count_rows(WORKOUTS_TABLE, filters=scope) >= limit:
                return None
            return self.insert_row(WORKOUTS_TABLE, row)

    def average_sets_per_day(self) -> List[Dict[str, Any]]:
        totals: Dict[str, int] = defaultdict(int)
        days: Dict[str, set] = defaultdict(set)
        with self._lock:
            for row in self._tables[WORKOUTS_TABLE]:
                user_id = row.get("user_id")
                if user_id is None:
                    continue
                try:
                    totals[user_id] += int(row.get("sets") or 0)
                except (TypeError, ValueError):
                    pass
                days[user_id].add(row.get("date"))

        return [
            {
                "user_id": user_id,
                "avg_sets_per_day": round(totals[user_id] / len(days[user_id]), 2),
            }
            for user_id in sorted(days)
        ]


def _matches(row: Mapping[str, Any], filters: Optional[Mapping[str, Any]]) -> bool:
    if not filters:
        return True
    return all(row.get(column) == value for column, value in filters.items())
