"""
Graph service: auth-specific FastAPI dependencies.

Tokens are issued elsewhere; this service only verifies them (shared.auth) and
adds role guards on top.
"""
from __future__ import annotations

from fastapi import Depends, HTTPException, status

from shared.auth.dependencies import get_current_user_required
from shared.constants import Role
from shared.models.user import CurrentUser

# Routes import from here, not from shared directly.
get_current_user = get_current_user_required


def require_admin(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Raise 403 unless the authenticated user holds the ADMIN or SUPER_ADMIN role."""
    if not current_user.has_any_role(Role.ADMIN, Role.SUPER_ADMIN):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required.",
        )
    return current_user
