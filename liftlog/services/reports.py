"""Admin report: average sets per training day for each user."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from liftlog.db import USERS_TABLE, DatabaseClient
from liftlog.errors import AuthorizationDenied
from liftlog.policy import PolicyEngine, Requester

UNKNOWN_EMAIL = "Unknown"


@dataclass
class AverageSetsRow:
    user_id: str
    email: str
    avg_sets_per_day: float

    @classmethod
    def from_record(cls, record: Dict[str, Any], emails: Dict[str, str]) -> "AverageSetsRow":
        user_id = str(record.get("user_id"))
        return cls(
            user_id=user_id,
            email=emails.get(user_id) or UNKNOWN_EMAIL,
            avg_sets_per_day=_coerce_float(record.get("avg_sets_per_day")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "avg_sets_per_day": self.avg_sets_per_day,
        }


def build_average_sets_report(db: DatabaseClient) -> List[AverageSetsRow]:
    """Join the store's per-user averages with user emails, sorted by email."""

    averages = db.average_sets_per_day()
    emails = {
        str(row.get("id")): row.get("email")
        for row in db.list_rows(USERS_TABLE)
        if row.get("id") is not None and row.get("email")
    }
    rows = [AverageSetsRow.from_record(record, emails) for record in averages if record.get("user_id")]
    rows.sort(key=lambda row: (row.email == UNKNOWN_EMAIL, row.email.lower(), row.user_id))
    return rows


def average_sets_report_for(policy: PolicyEngine, db: DatabaseClient, requester: Requester) -> List[AverageSetsRow]:
    """Build the report after checking that ``requester`` may see it."""

    decision = policy.can_view_aggregate_report(requester)
    if not decision:
        raise AuthorizationDenied(decision.reason or "admin access required")
    return build_average_sets_report(db)


def _coerce_float(value: Any) -> float:
    try:
        return round(float(value), 2)
    except (TypeError, ValueError):
        return 0.0
