"""Plan-gated quota and role-scoped visibility rules for workout records."""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from liftlog.config import CONFIG
from liftlog.db import ROLES_TABLE, USERS_TABLE, WORKOUTS_TABLE, DatabaseClient, UserRecord, WorkoutRecord
from liftlog.errors import AuthenticationMissing, AuthorizationDenied, QuotaExceeded, RecordNotFound, StoreError

from .plans import (
    ADMIN_REQUIRED_REASON,
    DAILY_LIMIT_REASON,
    DailyUsage,
    Decision,
    Plan,
    RecordFilter,
    Requester,
    Role,
    WorkoutSubmission,
)

logger = logging.getLogger(__name__)


class PolicyEngine:
    """Facade that resolves requesters, enforces quotas, and scopes record access."""

    def __init__(self, db: DatabaseClient, *, daily_limit: Optional[int] = None):
        self._db = db
        if daily_limit is None:
            daily_limit = int(getattr(CONFIG, "free_daily_workout_limit", 5))
        self._daily_limit = daily_limit

    @property
    def daily_limit(self) -> int:
        return self._daily_limit

    # ------------------------------------------------------------------
    # Requester resolution
    # ------------------------------------------------------------------
    def resolve_requester(self, user_id: str) -> Requester:
        """Load the role and plan for ``user_id``, defaulting to member/free."""

        if not user_id:
            raise AuthenticationMissing("A signed-in user is required")

        users = self._db.list_rows(USERS_TABLE, filters={"id": user_id})
        user = UserRecord.from_record(users[0]) if users else None
        roles = self._db.list_rows(ROLES_TABLE, filters={"user_id": user_id})
        role_value = roles[0].get("role") if roles else None

        return Requester(
            user_id=user_id,
            role=Role.coerce(role_value),
            plan=Plan.coerce(user.plan if user else None),
            email=user.email if user else None,
        )

    def ensure_user(self, user_id: str, email: Optional[str] = None) -> UserRecord:
        """Return the ``users`` row for ``user_id``, creating a free-plan row on first sight.

        Workouts and roles reference this row, and plan upgrades update it.
        """

        if not user_id:
            raise AuthenticationMissing("A signed-in user is required")

        row = self._db.get_row(USERS_TABLE, user_id)
        if row is not None:
            return UserRecord.from_record(row)

        try:
            row = self._db.insert_row(USERS_TABLE, {"id": user_id, "email": email, "plan": Plan.FREE.value})
        except StoreError:
            # A concurrent request may have created the row first.
            row = self._db.get_row(USERS_TABLE, user_id)
            if row is None:
                raise
        else:
            logger.info("Created users row for %s", user_id)
        return UserRecord.from_record(row)

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------
    def can_view_records(self, requester: Requester) -> RecordFilter:
        if requester.is_admin:
            return RecordFilter()
        return RecordFilter(owner_id=requester.user_id)

    def list_visible_records(self, requester: Requester) -> List[WorkoutRecord]:
        scope = self.can_view_records(requester)
        rows = self._db.list_rows(
            WORKOUTS_TABLE,
            filters=scope.to_filters(),
            order_by="date",
            descending=True,
        )
        return [WorkoutRecord.from_record(row) for row in rows if scope.matches(row)]

    def can_view_aggregate_report(self, requester: Requester) -> Decision:
        if requester.is_admin:
            return Decision.allow()
        return Decision.deny(ADMIN_REQUIRED_REASON)

    # ------------------------------------------------------------------
    # Quota
    # ------------------------------------------------------------------
    def daily_usage(self, requester: Requester, day: date) -> DailyUsage:
        used = self._db.count_rows(
            WORKOUTS_TABLE,
            filters={"user_id": requester.user_id, "date": day.isoformat()},
        )
        limit = None if requester.is_premium else self._daily_limit
        return DailyUsage(day=day, used=used, limit=limit)

    def can_submit_record(self, requester: Requester, proposed_date: date) -> Decision:
        """Read-only quota check keyed on the submitted date."""

        if requester.is_premium:
            return Decision.allow()
        usage = self.daily_usage(requester, proposed_date)
        if usage.used < self._daily_limit:
            return Decision.allow()
        return Decision.deny(DAILY_LIMIT_REASON, limit=self._daily_limit)

    def submit_record(self, requester: Requester, submission: WorkoutSubmission) -> WorkoutRecord:
        """Check the quota and insert the record.

        Free-plan inserts use the store's conditional insert so concurrent
        submissions cannot push the day past the limit.
        """

        decision = self.can_submit_record(requester, submission.day)
        if not decision:
            raise QuotaExceeded(self._daily_limit)

        row = submission.to_row(requester.user_id)
        if requester.is_premium:
            inserted = self._db.insert_row(WORKOUTS_TABLE, row)
        else:
            inserted = self._db.insert_workout_within_limit(row, self._daily_limit)
            if inserted is None:
                raise QuotaExceeded(self._daily_limit)

        logger.info("Workout %s recorded for user %s on %s", inserted.get("id"), requester.user_id, row["date"])
        return WorkoutRecord.from_record(inserted)

    def delete_record(self, requester: Requester, record_id: str) -> None:
        """Delete a record owned by ``requester``."""

        row = self._db.get_row(WORKOUTS_TABLE, record_id)
        if row is None:
            raise RecordNotFound(f"Workout {record_id} not found")
        if row.get("user_id") != requester.user_id:
            raise AuthorizationDenied("Only the owner can delete this workout")
        if not self._db.delete_row(WORKOUTS_TABLE, record_id):
            raise RecordNotFound(f"Workout {record_id} not found")

    # ------------------------------------------------------------------
    # Plan & role transitions
    # ------------------------------------------------------------------
    def apply_plan_upgrade(self, user_id: str) -> None:
        """Move ``user_id`` to the premium plan; applying it twice is harmless."""

        affected = self._db.update_row(USERS_TABLE, user_id, {"plan": Plan.PREMIUM.value})
        if len(affected) != 1:
            raise StoreError(f"Plan upgrade for user {user_id} affected {len(affected)} rows")
        logger.info("User %s plan updated to premium", user_id)

    def assign_role(self, actor: Requester, user_id: str, role: Role) -> Role:
        """Set ``user_id``'s role; only admins may do this."""

        if not actor.is_admin:
            raise AuthorizationDenied(ADMIN_REQUIRED_REASON)

        role = Role.coerce(role)
        existing = self._db.list_rows(ROLES_TABLE, filters={"user_id": user_id})
        if existing:
            affected = self._db.update_row(ROLES_TABLE, str(existing[0]["id"]), {"role": role.value})
            if len(affected) != 1:
                raise StoreError(f"Role update for user {user_id} affected {len(affected)} rows")
        else:
            self._db.insert_row(ROLES_TABLE, {"user_id": user_id, "role": role.value})
        logger.info("User %s role set to %s by %s", user_id, role.value, actor.user_id)
        return role
