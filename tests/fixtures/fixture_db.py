"""
Fixture Database Factory for deterministic tests.

Creates a temp SQLite DB with the application schema + pinned seed data.
Tests MUST use this fixture, never the configured database.

Design:
- Schema comes from taskledger.schema (single source of truth)
- Seed data is from tests/fixtures/seed.json (pinned, committed)
- Every timestamp in the seed is fixed; FIXTURE_NOW is the reference instant
"""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from taskledger.database import Database
from taskledger.models import minutes_to_hours, now_iso, to_minutes
from taskledger.schema import ensure_schema

SEED_PATH = Path(__file__).parent / "seed.json"

# Default application home; compared as a string to avoid resolving paths
_LIVE_HOME_STR = str(Path.home() / ".taskledger")

# Wednesday; the week started on Sunday 2024-05-12
FIXTURE_NOW = datetime(2024, 5, 15, 12, 0, 0, tzinfo=UTC)


def guard_no_live_db(db_path: str | Path) -> None:
    """Fail loudly if a test tries to open the configured application database."""
    if str(db_path).startswith(_LIVE_HOME_STR):
        raise RuntimeError(
            f"DETERMINISM VIOLATION: Test attempted to access live DB at {db_path}.\n"
            "Tests must use the fixture DB only. See tests/fixtures/fixture_db.py."
        )


def load_seed_data() -> dict[str, Any]:
    """Load pinned seed data from seed.json."""
    if not SEED_PATH.exists():
        raise FileNotFoundError(f"Seed data not found: {SEED_PATH}")
    return json.loads(SEED_PATH.read_text())


def create_fixture_db(db_path: str | Path) -> Database:
    """
    Create a fixture database with schema + seeded data.

    Args:
        db_path: Path to DB file.

    Returns:
        Database for the initialized file.
    """
    guard_no_live_db(db_path)
    db = Database(str(db_path))
    ensure_schema(db)
    _seed_tables(db, load_seed_data())
    return db


def _seed_tables(db: Database, seed: dict[str, Any]) -> None:
    """Insert seed data into tables."""
    created = now_iso()

    with db.transaction() as conn:
        for user in seed.get("users", []):
            conn.execute(
                """
                INSERT INTO users (id, name, email, avatar, role, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (user["id"], user["name"], user["email"], user.get("avatar"), user["role"], created),
            )

        for project in seed.get("projects", []):
            conn.execute(
                """
                INSERT INTO projects (id, name, description, manager_id, is_archived, created_at)
                VALUES (?, ?, ?, ?, 0, ?)
                """,
                (
                    project["id"],
                    project["name"],
                    project.get("description"),
                    project["manager_id"],
                    created,
                ),
            )
            for member in project.get("team", []):
                conn.execute(
                    "INSERT INTO project_members (project_id, user_id) VALUES (?, ?)",
                    (project["id"], member),
                )

        for task in seed.get("tasks", []):
            logs = task.get("time_logs", [])
            actual_minutes = sum(to_minutes(log["hours"], log["minutes"]) for log in logs)
            conn.execute(
                """
                INSERT INTO tasks (id, title, description, status, priority, project_id,
                                   assignee_id, reporter_id, estimated_hours, actual_hours,
                                   is_archived, created_at, updated_at)
                VALUES (?, ?, ?, ?, 'medium', ?, ?, ?, 0, ?, ?, ?, ?)
                """,
                (
                    task["id"],
                    task["title"],
                    task.get("description"),
                    task["status"],
                    task.get("project_id"),
                    task.get("assignee_id"),
                    task.get("reporter_id"),
                    minutes_to_hours(actual_minutes),
                    int(task.get("is_archived", False)),
                    created,
                    created,
                ),
            )
            for log in logs:
                conn.execute(
                    """
                    INSERT INTO task_time_logs (task_id, user_id, hours, minutes, logged_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (task["id"], log["user_id"], log["hours"], log["minutes"], log["logged_at"]),
                )


def get_fixture_db_path(tmp_path: Path) -> Path:
    """Create a fixture DB under tmp_path and return its path."""
    db_path = tmp_path / "fixture.db"
    create_fixture_db(db_path).close()
    return db_path
