"""Route modules for the public API."""

from . import admin, billing, profile, reports, workouts

__all__ = [
    "admin",
    "billing",
    "profile",
    "reports",
    "workouts",
]
