"""Workout record endpoints scoped by role and gated by the daily quota."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response, status

from liftlog.api.dependencies import get_policy_engine, get_requester, store_unavailable
from liftlog.api.schemas import Workout, WorkoutCreate, WorkoutList
from liftlog.errors import AuthorizationDenied, QuotaExceeded, RecordNotFound, StoreError
from liftlog.policy import PolicyEngine, Requester, WorkoutSubmission

router = APIRouter()

UPGRADE_PATH = "/v1/billing/checkout"


@router.get("/workouts", response_model=WorkoutList, status_code=status.HTTP_200_OK)
def list_workouts(
    requester: Requester = Depends(get_requester),
    policy: PolicyEngine = Depends(get_policy_engine),
) -> WorkoutList:
    """Return the workouts the requester may see, newest first."""

    try:
        records = policy.list_visible_records(requester)
    except StoreError as exc:
        raise store_unavailable(exc) from exc

    return WorkoutList(
        scope="all" if requester.is_admin else "own",
        workouts=[Workout(**record.to_dict()) for record in records],
    )


@router.post("/workouts", response_model=Workout, status_code=status.HTTP_201_CREATED)
def create_workout(
    payload: WorkoutCreate,
    requester: Requester = Depends(get_requester),
    policy: PolicyEngine = Depends(get_policy_engine),
) -> Workout:
    submission = WorkoutSubmission(
        day=payload.date or date.today(),
        exercise=payload.exercise,
        sets=payload.sets,
    )
    try:
        record = policy.submit_record(requester, submission)
    except QuotaExceeded as exc:
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail={
                "message": (
                    f"The free plan allows {exc.limit} workouts per day. "
                    "Upgrade to premium for unlimited entries."
                ),
                "limit": exc.limit,
                "upgrade_path": UPGRADE_PATH,
            },
        ) from exc
    except StoreError as exc:
        raise store_unavailable(exc) from exc

    return Workout(**record.to_dict())


@router.delete("/workouts/{workout_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workout(
    workout_id: str,
    requester: Requester = Depends(get_requester),
    policy: PolicyEngine = Depends(get_policy_engine),
) -> Response:
    try:
        policy.delete_record(requester, workout_id)
    except RecordNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except AuthorizationDenied as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except StoreError as exc:
        raise store_unavailable(exc) from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)
