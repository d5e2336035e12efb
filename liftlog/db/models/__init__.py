"""
Database models and schema definitions for the workout service.

Table names live here so the store clients, the policy engine and the
reporting helpers agree on them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

USERS_TABLE = "users"
ROLES_TABLE = "roles"
WORKOUTS_TABLE = "workouts"


@dataclass
class UserRecord:
    """Row of the ``users`` table."""
    id: str
    email: Optional[str]
    plan: str = "free"

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "UserRecord":
        return cls(
            id=str(record.get("id")),
            email=record.get("email"),
            plan=str(record.get("plan") or "free"),
        )


@dataclass
class WorkoutRecord:
    """Row of the ``workouts`` table."""
    id: str
    user_id: str
    date: date
    exercise: str
    sets: int

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "WorkoutRecord":
        return cls(
            id=str(record.get("id")),
            user_id=str(record.get("user_id")),
            date=_parse_date(record.get("date")),
            exercise=str(record.get("exercise") or ""),
            sets=_coerce_sets(record.get("sets")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "date": self.date.isoformat(),
            "exercise": self.exercise,
            "sets": self.sets,
        }


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        return date.fromisoformat(value[:10])
    raise ValueError(f"Workout record has no usable date: {value!r}")


def _coerce_sets(value: Any) -> int:
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


__all__ = [
    "USERS_TABLE",
    "ROLES_TABLE",
    "WORKOUTS_TABLE",
    "UserRecord",
    "WorkoutRecord",
]
