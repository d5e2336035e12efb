"""Data structures describing plans, roles, and policy decisions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class Plan(str, Enum):
    """Subscription tier of a user."""

    FREE = "free"
    PREMIUM = "premium"

    @classmethod
    def coerce(cls, value: Any) -> "Plan":
        """Map a raw store value onto a plan, defaulting to the restrictive tier."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            candidate = value.strip().lower()
            for member in cls:
                if member.value == candidate:
                    return member
        return cls.FREE


class Role(str, Enum):
    """Authorization tier of a user."""

    MEMBER = "member"
    ADMIN = "admin"

    @classmethod
    def coerce(cls, value: Any) -> "Role":
        """Map a raw store value onto a role; anything unrecognised has no privilege."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            candidate = value.strip().lower()
            for member in cls:
                if member.value == candidate:
                    return member
        return cls.MEMBER


@dataclass(frozen=True)
class Requester:
    """Identity, role and plan of the user performing an operation."""

    user_id: str
    role: Role = Role.MEMBER
    plan: Plan = Plan.FREE
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_premium(self) -> bool:
        return self.plan is Plan.PREMIUM


@dataclass(frozen=True)
class RecordFilter:
    """Visibility scope over workout records; ``owner_id=None`` matches everything."""

    owner_id: Optional[str] = None

    @property
    def matches_all(self) -> bool:
        return self.owner_id is None

    def matches(self, record: Mapping[str, Any]) -> bool:
        if self.owner_id is None:
            return True
        return record.get("user_id") == self.owner_id

    def to_filters(self) -> Dict[str, Any]:
        if self.owner_id is None:
            return {}
        return {"user_id": self.owner_id}


@dataclass(frozen=True)
class Decision:
    """Outcome of a policy check."""

    allowed: bool
    reason: Optional[str] = None
    limit: Optional[int] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str, *, limit: Optional[int] = None) -> "Decision":
        return cls(allowed=False, reason=reason, limit=limit)

    def __bool__(self) -> bool:
        return self.allowed


@dataclass(frozen=True)
class DailyUsage:
    """Number of records a user has logged on a day, against their quota."""

    day: date
    used: int
    limit: Optional[int] = None

    @property
    def remaining(self) -> Optional[int]:
        if self.limit is None:
            return None
        return max(self.limit - self.used, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day.isoformat(),
            "used": self.used,
            "limit": self.limit,
            "remaining": self.remaining,
        }


@dataclass(frozen=True)
class WorkoutSubmission:
    """A new workout record as proposed by its owner."""

    day: date
    exercise: str
    sets: int = 1

    def to_row(self, user_id: str) -> Dict[str, Any]:
        return {
            "user_id": user_id,
            "date": self.day.isoformat(),
            "exercise": self.exercise,
            "sets": self.sets,
        }


DAILY_LIMIT_REASON = "daily limit reached"
ADMIN_REQUIRED_REASON = "admin access required"
