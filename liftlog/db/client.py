"""
Database client for the workout service.
Handles users, roles and workout records stored in Supabase.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from supabase import Client, create_client

from ..config import CONFIG, reload_config
from ..errors import StoreError
from .base import DatabaseClient
from .models import WORKOUTS_TABLE

logger = logging.getLogger(__name__)


def _rows(result: Any) -> List[Dict[str, Any]]:
    data = getattr(result, "data", None)
    if not data:
        return []
    if isinstance(data, dict):
        return [data]
    return [row for row in data if isinstance(row, dict)]


class SupabaseDatabaseClient(DatabaseClient):
    """Database client for Supabase operations."""

    backend = "supabase"

    def __init__(self, client: Optional[Client] = None):
        if client is not None:
            self.client = client
            self.using_service_role = True
            return

        self.supabase_url = getattr(CONFIG, "supabase_url", None)

        # Prefer service role key so webhook upgrades and admin reads bypass RLS
        service_key = getattr(CONFIG, "supabase_service_role_key", None)
        anon_key = getattr(CONFIG, "supabase_anon_key", None)

        if service_key:
            self.supabase_key = service_key
            self.using_service_role = True
            if getattr(CONFIG, "is_development", False):
                logger.info("DatabaseClient: using service role key (development mode)")
        else:
            self.supabase_key = anon_key
            self.using_service_role = False
            logger.warning("DatabaseClient: SUPABASE_SERVICE_ROLE_KEY not set; falling back to anon key")

        if not self.supabase_url or not self.supabase_key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY (or SUPABASE_SERVICE_ROLE_KEY) environment variables are required")

        self.client = create_client(self.supabase_url, self.supabase_key)

    def list_rows(
        self,
        table: str,
        *,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        try:
            query = self.client.table(table).select("*")
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            if order_by:
                query = query.order(order_by, desc=descending)
            return _rows(query.execute())
        except Exception as exc:
            logger.error("Error listing %s rows: %s", table, exc)
            raise StoreError(f"Could not read {table}: {exc}") from exc

    def count_rows(self, table: str, *, filters: Optional[Mapping[str, Any]] = None) -> int:
        try:
            query = self.client.table(table).select("id", count="exact")
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            result = query.execute()
        except Exception as exc:
            logger.error("Error counting %s rows: %s", table, exc)
            raise StoreError(f"Could not count {table}: {exc}") from exc

        count = getattr(result, "count", None)
        if count is None:
            return len(_rows(result))
        return int(count)

    def insert_row(self, table: str, row: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            result = self.client.table(table).insert(dict(row)).execute()
        except Exception as exc:
            logger.error("Error inserting into %s: %s", table, exc)
            raise StoreError(f"Could not insert into {table}: {exc}") from exc

        rows = _rows(result)
        if not rows:
            raise StoreError(f"Insert into {table} returned no row")
        return rows[0]

    def update_row(self, table: str, row_id: str, values: Mapping[str, Any]) -> List[Dict[str, Any]]:
        try:
            result = self.client.table(table).update(dict(values)).eq("id", row_id).execute()
        except Exception as exc:
            logger.error("Error updating %s row %s: %s", table, row_id, exc)
            raise StoreError(f"Could not update {table}: {exc}") from exc
        return _rows(result)

    def delete_row(self, table: str, row_id: str) -> bool:
        try:
            result = self.client.table(table).delete().eq("id", row_id).execute()
        except Exception as exc:
            logger.error("Error deleting %s row %s: %s", table, row_id, exc)
            raise StoreError(f"Could not delete from {table}: {exc}") from exc
        return bool(_rows(result))

    def insert_workout_within_limit(self, row: Mapping[str, Any], limit: int) -> Optional[Dict[str, Any]]:
        # Backed by a Postgres function that locks on (user_id, date) before counting.
        params = {
            "p_user_id": row.get("user_id"),
            "p_date": row.get("date"),
            "p_exercise": row.get("exercise"),
            "p_sets": row.get("sets"),
            "p_limit": limit,
        }
        try:
            result = self.client.rpc("insert_workout_within_limit", params).execute()
        except Exception as exc:
            logger.error("Error inserting into %s within limit: %s", WORKOUTS_TABLE, exc)
            raise StoreError(f"Could not insert workout: {exc}") from exc

        rows = _rows(result)
        return rows[0] if rows else None

    def average_sets_per_day(self) -> List[Dict[str, Any]]:
        try:
            result = self.client.rpc("avg_sets_per_day_per_user", {}).execute()
        except Exception as exc:
            logger.error("Error computing average sets per day: %s", exc)
            raise StoreError(f"Could not compute average sets per day: {exc}") from exc
        return _rows(result)


# Global database client instance
_database_client: Optional[DatabaseClient] = None


def get_database_client() -> DatabaseClient:
    """Get the global database client instance for the configured backend."""
    global _database_client
    if _database_client is None:
        # Ensure environment is loaded
        from dotenv import load_dotenv

        load_dotenv()
        reload_config()

        if getattr(CONFIG, "database_backend", "supabase") == "memory":
            from .memory import InMemoryDatabaseClient

            _database_client = InMemoryDatabaseClient()
        else:
            _database_client = SupabaseDatabaseClient()
    return _database_client


def reset_database_client() -> None:
    """Drop the cached client so the next call re-reads configuration."""
    global _database_client
    _database_client = None

