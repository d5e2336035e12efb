"""Admin reporting endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from liftlog.api.dependencies import get_database, get_policy_engine, get_requester, store_unavailable
from liftlog.api.schemas import AverageSetsEntry, AverageSetsReport
from liftlog.db import DatabaseClient
from liftlog.errors import AuthorizationDenied, StoreError
from liftlog.policy import PolicyEngine, Requester
from liftlog.services import average_sets_report_for

router = APIRouter()


@router.get("/reports/average-sets", response_model=AverageSetsReport, status_code=status.HTTP_200_OK)
def get_average_sets_report(
    requester: Requester = Depends(get_requester),
    policy: PolicyEngine = Depends(get_policy_engine),
    db: DatabaseClient = Depends(get_database),
) -> AverageSetsReport:
    """Average sets per training day for every user. Admins only."""

    try:
        rows = average_sets_report_for(policy, db, requester)
    except AuthorizationDenied as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required") from exc
    except StoreError as exc:
        raise store_unavailable(exc) from exc

    return AverageSetsReport(rows=[AverageSetsEntry(**row.to_dict()) for row in rows])
