"""Quota and visibility policy module."""

from .engine import PolicyEngine
from .plans import DailyUsage, Decision, Plan, RecordFilter, Requester, Role, WorkoutSubmission

__all__ = [
    "PolicyEngine",
    "DailyUsage",
    "Decision",
    "Plan",
    "RecordFilter",
    "Requester",
    "Role",
    "WorkoutSubmission",
]
