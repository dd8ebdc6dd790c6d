"""
TaskLedger — Schema

Table definitions for users, projects, tasks and their embedded time logs.
Task time logs are owned by their task: no update or delete path exists, and
the autoincrement id records insertion order.
"""

import logging

from .database import Database

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    avatar TEXT,
    role TEXT NOT NULL DEFAULT 'standard' CHECK(role IN ('admin', 'standard')),
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS projects (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT,
    manager_id TEXT REFERENCES users(id),
    is_archived INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS project_members (
    project_id TEXT NOT NULL REFERENCES projects(id),
    user_id TEXT NOT NULL REFERENCES users(id),
    role TEXT NOT NULL DEFAULT 'member',
    PRIMARY KEY (project_id, user_id)
);

CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT,
    status TEXT NOT NULL DEFAULT 'todo'
        CHECK(status IN ('todo', 'in-progress', 'review', 'testing', 'done')),
    priority TEXT NOT NULL DEFAULT 'medium'
        CHECK(priority IN ('low', 'medium', 'high', 'critical')),
    project_id TEXT REFERENCES projects(id),
    assignee_id TEXT REFERENCES users(id),
    reporter_id TEXT REFERENCES users(id),
    estimated_hours REAL NOT NULL DEFAULT 0,
    actual_hours REAL NOT NULL DEFAULT 0,
    is_archived INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS task_time_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    task_id TEXT NOT NULL REFERENCES tasks(id),
    user_id TEXT,
    hours INTEGER NOT NULL DEFAULT 0 CHECK(hours >= 0),
    minutes INTEGER NOT NULL DEFAULT 0 CHECK(minutes BETWEEN 0 AND 59),
    logged_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS api_keys (
    id TEXT PRIMARY KEY,
    key_hash TEXT NOT NULL UNIQUE,
    user_id TEXT NOT NULL REFERENCES users(id),
    name TEXT NOT NULL,
    created_at TEXT NOT NULL,
    last_used_at TEXT,
    is_active INTEGER NOT NULL DEFAULT 1
);

CREATE INDEX IF NOT EXISTS idx_tasks_project ON tasks(project_id, status);
CREATE INDEX IF NOT EXISTS idx_tasks_assignee ON tasks(assignee_id, status);
CREATE INDEX IF NOT EXISTS idx_time_logs_task ON task_time_logs(task_id, id);
CREATE INDEX IF NOT EXISTS idx_time_logs_logged_at ON task_time_logs(logged_at);
"""


def ensure_schema(db: Database) -> None:
    """
    Create all tables and indexes if they don't exist.

    Safe to call repeatedly.
    """
    db.executescript(SCHEMA_SQL)
    db.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
    logger.debug(f"Schema ensured (version {SCHEMA_VERSION}) at {db.db_path}")
