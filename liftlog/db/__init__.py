"""
Database module for the workout service.

This module provides:
- The record store interface shared by every backend
- Supabase client and operations
- An in-memory store for development and tests
- Table names and row models
"""

from .base import DatabaseClient
from .client import SupabaseDatabaseClient, get_database_client, reset_database_client
from .memory import InMemoryDatabaseClient
from .models import ROLES_TABLE, USERS_TABLE, WORKOUTS_TABLE, UserRecord, WorkoutRecord

__all__ = [
    "DatabaseClient",
    "SupabaseDatabaseClient",
    "InMemoryDatabaseClient",
    "get_database_client",
    "reset_database_client",
    "USERS_TABLE",
    "ROLES_TABLE",
    "WORKOUTS_TABLE",
    "UserRecord",
    "WorkoutRecord",
]
