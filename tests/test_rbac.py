"""
Test suite for Role-Based Access Control (RBAC).

Tests validate:
- Role enum values and hierarchy
- require_role() FastAPI dependency on a bare app
- 401 and 403 responses
"""

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from taskledger.api.server import taskledger_error_handler
from taskledger.database import get_database
from taskledger.errors import TaskLedgerError
from taskledger.models import Caller
from taskledger.security import KeyManager, Role, require_role, role_has_permission

# =============================================================================
# Role Enum Tests
# =============================================================================


class TestRoleEnum:
    def test_role_values(self):
        assert Role.ADMIN == "admin"
        assert Role.STANDARD == "standard"

    def test_role_is_str_enum(self):
        assert isinstance(Role.STANDARD, str)


# =============================================================================
# Permission Checking Tests
# =============================================================================


class TestRoleHasPermission:
    @pytest.mark.parametrize(
        "user_role,minimum,expected",
        [
            (Role.ADMIN, Role.ADMIN, True),
            (Role.ADMIN, Role.STANDARD, True),
            (Role.STANDARD, Role.STANDARD, True),
            (Role.STANDARD, Role.ADMIN, False),
            ("admin", "standard", True),
            ("unknown", Role.STANDARD, False),
        ],
    )
    def test_hierarchy(self, user_role, minimum, expected):
        assert role_has_permission(user_role, minimum) is expected


# =============================================================================
# Dependency Tests
# =============================================================================


@pytest.fixture
def rbac_client(seeded_db):
    app = FastAPI()
    app.add_exception_handler(TaskLedgerError, taskledger_error_handler)
    app.dependency_overrides[get_database] = lambda: seeded_db

    @app.get("/admin")
    def admin_only(caller: Caller = Depends(require_role(Role.ADMIN))):
        return {"user": caller.user_id}

    @app.get("/any")
    def any_user(caller: Caller = Depends(require_role(Role.STANDARD))):
        return {"user": caller.user_id}

    manager = KeyManager(seeded_db)
    keys = {uid: manager.create_key(uid, "rbac")[0] for uid in ("usr_admin", "usr_u1")}
    with TestClient(app) as client:
        yield client, keys


class TestRequireRole:
    def test_admin_allowed(self, rbac_client):
        client, keys = rbac_client
        response = client.get("/admin", headers={"Authorization": f"Bearer {keys['usr_admin']}"})
        assert response.status_code == 200
        assert response.json() == {"user": "usr_admin"}

    def test_standard_user_gets_403(self, rbac_client):
        client, keys = rbac_client
        response = client.get("/admin", headers={"Authorization": f"Bearer {keys['usr_u1']}"})
        assert response.status_code == 403
        assert response.json()["message"] == "Access denied. Admin only."

    def test_standard_route_accepts_standard_user(self, rbac_client):
        client, keys = rbac_client
        response = client.get("/any", headers={"X-API-Token": keys["usr_u1"]})
        assert response.status_code == 200

    def test_missing_token_gets_401(self, rbac_client):
        client, _ = rbac_client
        response = client.get("/admin")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["errors"][0]["code"] == "AuthenticationRequired"
