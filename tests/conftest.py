"""
Test configuration — ensures repo root is in sys.path + determinism guards.

Every test runs with TASKLEDGER_HOME pointed at a temp directory and cached
settings dropped, so nothing reads or writes the real application home.
"""

import sys
from pathlib import Path

import pytest

# Add repo root to sys.path so tests can import taskledger.* and tests.*
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from taskledger.api.dependencies import get_timesheet_service  # noqa: E402
from taskledger.api.server import create_app  # noqa: E402
from taskledger.config import Settings, reset_settings  # noqa: E402
from taskledger.database import Database, close_db  # noqa: E402
from taskledger.schema import ensure_schema  # noqa: E402
from taskledger.security import KeyManager  # noqa: E402
from taskledger.services import TimesheetService  # noqa: E402
from tests.fixtures import FIXTURE_NOW, create_fixture_db  # noqa: E402

_APP_ENV_VARS = (
    "TASKLEDGER_DB",
    "TASKLEDGER_CONFIG",
    "TASKLEDGER_REPORT_TZ",
    "TASKLEDGER_REPORT_PERIOD",
    "TASKLEDGER_REPORT_TASK_LIMIT",
    "TASKLEDGER_LOG_LEVEL",
    "TASKLEDGER_LOG_JSON",
    "CORS_ORIGINS",
)


# =============================================================================
# DETERMINISM GUARD: isolate the application home
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point TASKLEDGER_HOME at a temp dir and clear every other app env var."""
    monkeypatch.setenv("TASKLEDGER_HOME", str(tmp_path / "home"))
    for name in _APP_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    close_db()
    yield tmp_path / "home"
    close_db()
    reset_settings()


# =============================================================================
# DATABASES
# =============================================================================


@pytest.fixture
def db(tmp_path):
    """Empty database with the schema applied."""
    database = Database(str(tmp_path / "test.db"))
    ensure_schema(database)
    yield database
    database.close()


@pytest.fixture
def seeded_db(tmp_path):
    """Database seeded from tests/fixtures/seed.json."""
    database = create_fixture_db(tmp_path / "fixture.db")
    yield database
    database.close()


@pytest.fixture
def settings(tmp_path):
    return Settings(db_path=str(tmp_path / "fixture.db"))


@pytest.fixture
def fixture_now():
    return FIXTURE_NOW


# =============================================================================
# API
# =============================================================================


@pytest.fixture
def api_keys(seeded_db):
    """Plaintext API key per seeded user id."""
    manager = KeyManager(seeded_db)
    keys = {}
    for user_id in ("usr_admin", "usr_u1", "usr_u2", "usr_u3", "usr_out"):
        key, _ = manager.create_key(user_id, "tests")
        keys[user_id] = key
    return keys


@pytest.fixture
def auth_headers(api_keys):
    """auth_headers("usr_u1") -> Authorization header for that user."""

    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {api_keys[user_id]}"}

    return _headers


@pytest.fixture
def app(seeded_db, settings):
    application = create_app(seeded_db, settings)
    application.dependency_overrides[get_timesheet_service] = lambda: TimesheetService(
        seeded_db, settings, clock=lambda: FIXTURE_NOW
    )
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
