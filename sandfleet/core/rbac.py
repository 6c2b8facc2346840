# sandfleet/core/rbac.py
from __future__ import annotations

from fastapi import Depends

from sandfleet.core.auth import get_current_user
from sandfleet.core.errors import AuthorizationError
from sandfleet.models.user import WRITE_ROLES, User


def can_write(user: User) -> bool:
    return (getattr(user, "role", "") or "").lower() in WRITE_ROLES


def ensure_writer(user: User) -> None:
    """Raise 403 unless the user is an operator or admin."""
    if not can_write(user):
        raise AuthorizationError("Operator or admin role required")


def require_writer(current_user: User = Depends(get_current_user)) -> User:
    """Dependency for mutating routes: authenticated AND operator/admin."""
    ensure_writer(current_user)
    return current_user
