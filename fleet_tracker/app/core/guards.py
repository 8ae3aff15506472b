"""
Security guards for the admin console.

Admin routes need an admin-type token held by a user flagged ``is_admin``;
creating administrators additionally needs ``is_super_admin``.
"""

from fastapi import Depends
from fleet_tracker.app.core.dependencies import get_current_user
from fleet_tracker.app.core.exceptions import InsufficientPermissionsError
from fleet_tracker.app.core.jwt import TOKEN_TYPE_ADMIN


def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    """
    Dependency for admin-only endpoints.

    Usage:
        @router.get("/admin/users")
        async def list_users(admin: dict = Depends(require_admin)):
            ...

    Raises:
        InsufficientPermissionsError: 403 for non-admin tokens or users
    """
    if current_user.get("type") != TOKEN_TYPE_ADMIN or not current_user.get("is_admin"):
        raise InsufficientPermissionsError("Admin access required")
    return current_user


def require_super_admin(admin: dict = Depends(require_admin)) -> dict:
    """Dependency for super-admin-only endpoints."""
    if not admin.get("is_super_admin"):
        raise InsufficientPermissionsError("Super admin access required")
    return admin
