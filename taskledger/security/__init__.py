"""
Security module for TaskLedger.

Provides:
1. API key management (creation, validation, revocation)
2. Caller authentication from API keys
3. Role-based access control (RBAC) for API endpoints
"""

from ..models import Caller, Role
from .auth import authenticate, get_token_from_request, require_user
from .key_manager import KeyInfo, KeyManager
from .rbac import require_role, role_has_permission

__all__ = [
    "Caller",
    "KeyInfo",
    "KeyManager",
    "Role",
    "authenticate",
    "get_token_from_request",
    "require_role",
    "require_user",
    "role_has_permission",
]
