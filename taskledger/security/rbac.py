"""
Role-based access control (RBAC) for the TaskLedger API.

Role Hierarchy:
  ADMIN >= STANDARD

Usage:
    from taskledger.security import Role, require_role

    @router.get("/admin-only")
    def admin_only(caller: Caller = Depends(require_role(Role.ADMIN))):
        ...
"""

import logging
from collections.abc import Callable

from fastapi import Depends, Request

from ..errors import AccessDenied
from ..models import Caller, Role
from .auth import require_user

logger = logging.getLogger(__name__)

# Role hierarchy: higher value = more permissions
_ROLE_HIERARCHY = {
    Role.STANDARD: 1,
    Role.ADMIN: 2,
}


def role_has_permission(user_role: Role | str, minimum_role: Role | str) -> bool:
    """Check if user_role has at least minimum_role permissions."""
    user_level = _ROLE_HIERARCHY.get(user_role, 0)
    min_level = _ROLE_HIERARCHY.get(minimum_role, 0)
    return user_level >= min_level


def require_role(minimum_role: Role) -> Callable:
    """
    FastAPI dependency that requires a minimum role.

    Args:
        minimum_role: The minimum role required for this endpoint

    Returns:
        An async dependency yielding the authenticated Caller
    """

    async def _check_role(request: Request, caller: Caller = Depends(require_user)) -> Caller:
        if not role_has_permission(caller.role, minimum_role):
            logger.warning(
                f"Access denied: {caller.role} lacks permission for {minimum_role} "
                f"at {request.url.path}"
            )
            if minimum_role == Role.ADMIN:
                raise AccessDenied("Access denied. Admin only.")
            raise AccessDenied()
        return caller

    return _check_role
