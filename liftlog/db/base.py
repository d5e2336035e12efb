"""Record store interface shared by the Supabase and in-memory clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional


class DatabaseClient(ABC):
    """Table-oriented access to the record store.

    Every method raises :class:`liftlog.errors.StoreError` when the backend
    fails. Each mutation touches a single row.
    """

    backend: str

    @abstractmethod
    def list_rows(
        self,
        table: str,
        *,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        """Return rows whose columns equal every value in ``filters``."""

    @abstractmethod
    def count_rows(self, table: str, *, filters: Optional[Mapping[str, Any]] = None) -> int:
        """Count rows whose columns equal every value in ``filters``."""

    @abstractmethod
    def insert_row(self, table: str, row: Mapping[str, Any]) -> Dict[str, Any]:
        """Insert a row and return it with its generated ``id``."""

    @abstractmethod
    def update_row(self, table: str, row_id: str, values: Mapping[str, Any]) -> List[Dict[str, Any]]:
        """Apply ``values`` to the row with ``row_id``; return the rows affected."""

    @abstractmethod
    def delete_row(self, table: str, row_id: str) -> bool:
        """Delete the row with ``row_id``; return False when nothing matched."""

    @abstractmethod
    def insert_workout_within_limit(self, row: Mapping[str, Any], limit: int) -> Optional[Dict[str, Any]]:
        """Insert a workout only if its owner has fewer than ``limit`` rows on that date.

        Counting and inserting happen as one operation. Returns ``None`` when
        the limit was already reached.
        """

    @abstractmethod
    def average_sets_per_day(self) -> List[Dict[str, Any]]:
        """Return ``{"user_id", "avg_sets_per_day"}`` rows, one per user with workouts."""

    def get_row(self, table: str, row_id: str) -> Optional[Dict[str, Any]]:
        rows = self.list_rows(table, filters={"id": row_id})
        return rows[0] if rows else None
