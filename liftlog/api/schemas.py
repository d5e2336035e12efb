"""Pydantic schemas for the public API."""

from __future__ import annotations

from datetime import date as Date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class Workout(BaseModel):
    id: str
    user_id: str
    date: Date
    exercise: str
    sets: int


class WorkoutCreate(BaseModel):
    date: Optional[Date] = None
    exercise: str = Field(..., min_length=1, max_length=200)
    sets: int = Field(default=1, ge=0)

    @field_validator("exercise", mode="before")
    @classmethod
    def normalize_exercise(cls, value: Optional[str]) -> str:
        if not isinstance(value, str):
            raise ValueError("exercise must be a string")
        candidate = value.strip()
        if not candidate:
            raise ValueError("exercise cannot be empty")
        return candidate


class WorkoutList(BaseModel):
    scope: Literal["own", "all"]
    workouts: List[Workout] = Field(default_factory=list)


class DailyUsageSummary(BaseModel):
    day: Date
    used: int = 0
    limit: Optional[int] = None
    remaining: Optional[int] = None


class UserProfile(BaseModel):
    id: str
    email: Optional[str] = None
    role: Literal["member", "admin"]
    plan: Literal["free", "premium"]
    usage: DailyUsageSummary


class AverageSetsEntry(BaseModel):
    user_id: str
    email: str
    avg_sets_per_day: float


class AverageSetsReport(BaseModel):
    rows: List[AverageSetsEntry] = Field(default_factory=list)


class CheckoutSessionRequest(BaseModel):
    user_id: Optional[str] = None

    @field_validator("user_id", mode="before")
    @classmethod
    def normalize_user_id(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        candidate = str(value).strip()
        return candidate or None


class CheckoutSessionResponse(BaseModel):
    url: str
    session_id: Optional[str] = None


class RoleUpdateRequest(BaseModel):
    role: Literal["member", "admin"]

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Optional[str]) -> str:
        candidate = (value or "").strip().lower()
        if candidate not in {"member", "admin"}:
            raise ValueError("role must be member or admin")
        return candidate


class RoleUpdateResponse(BaseModel):
    user_id: str
    role: Literal["member", "admin"]
