"""
Request authentication for TaskLedger.

Resolves the caller from an API key. Token extraction order:
1. Authorization: Bearer <token> header
2. X-API-Token header

Usage:
    from taskledger.security import require_user

    @router.get("/protected")
    def protected_endpoint(caller: Caller = Depends(require_user)):
        ...
"""

import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..database import Database, get_database
from ..errors import AuthenticationRequired
from ..models import Caller
from ..repositories import DirectoryRepository
from .key_manager import KeyManager

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)


def get_token_from_request(request: Request) -> str | None:
    """Extract the API token from the request headers."""
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:]

    x_token = request.headers.get("X-API-Token")
    if x_token:
        return x_token

    return None


def authenticate(token: str | None, db: Database) -> Caller:
    """
    Resolve a token to the caller it belongs to.

    Raises:
        AuthenticationRequired: If the token is missing, unknown, revoked, or
            its user no longer exists
    """
    if not token:
        raise AuthenticationRequired(
            "Authentication required. Provide Bearer token in Authorization header."
        )

    key_info = KeyManager(db).validate_key(token)
    if key_info is None:
        raise AuthenticationRequired("Invalid authentication token.")

    user = DirectoryRepository(db).get_user(key_info.user_id)
    if user is None:
        raise AuthenticationRequired("Invalid authentication token.")

    return Caller(user_id=user.id, name=user.name, role=user.role, email=user.email)


async def require_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Database = Depends(get_database),
) -> Caller:
    """
    Dependency that requires a valid API key.

    Attaches the caller to request.state.caller.
    Raises AuthenticationRequired (401) on failure.
    """
    try:
        caller = authenticate(get_token_from_request(request), db)
    except AuthenticationRequired:
        logger.warning(f"Auth failed for {request.url.path}")
        raise

    request.state.caller = caller
    logger.debug(f"Authenticated {caller.user_id} ({caller.role}) for {request.url.path}")
    return caller
