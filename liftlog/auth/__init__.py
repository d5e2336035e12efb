"""
Authentication

This module provides:
- User authentication via Supabase Auth
- JWT token validation for bearer headers
- Auth user lookups through the admin API
"""

from .manager import AuthManager, get_auth_manager, require_auth, require_auth_user, reset_auth_manager

__all__ = [
    'AuthManager',
    'get_auth_manager',
    'require_auth',
    'require_auth_user',
    'reset_auth_manager',
]
