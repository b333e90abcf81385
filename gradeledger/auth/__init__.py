"""Caller identity for the HTTP surface."""
from .models import CurrentUser, TokenData
from .service import create_access_token, verify_token, get_current_user, require_staff, scope_for

__all__ = [
    'CurrentUser',
    'TokenData',
    'create_access_token',
    'verify_token',
    'get_current_user',
    'require_staff',
    'scope_for',
]
