"""
TaskLedger — Directory Repository

Users, projects and project membership. Read-only to the reporting core;
the write helpers exist for administrative seeding.
"""

import logging
from typing import Any

from ..database import Database
from ..models import Project, Role, User

logger = logging.getLogger(__name__)


class DirectoryRepository:
    """Repository for users and projects."""

    def __init__(self, db: Database):
        self.db = db

    # =========================================================================
    # Users
    # =========================================================================

    def get_user(self, user_id: str) -> User | None:
        row = self.db.fetch_one("SELECT * FROM users WHERE id = ?", (user_id,))
        return User.from_row(row) if row else None

    def get_user_by_email(self, email: str) -> User | None:
        row = self.db.fetch_one("SELECT * FROM users WHERE email = ?", (email,))
        return User.from_row(row) if row else None

    def list_users(self, role: Role | None = None) -> list[User]:
        if role is None:
            rows = self.db.fetch_all("SELECT * FROM users ORDER BY name")
        else:
            rows = self.db.fetch_all(
                "SELECT * FROM users WHERE role = ? ORDER BY name", (Role(role).value,)
            )
        return [User.from_row(row) for row in rows]

    def add_user(self, user: User) -> str:
        self.db.insert(
            "users",
            {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "avatar": user.avatar,
                "role": Role(user.role).value,
                "created_at": user.created_at,
            },
        )
        logger.info(f"Added user {user.id} ({user.role})")
        return user.id

    # =========================================================================
    # Projects
    # =========================================================================

    def _project_from_row(self, row: dict[str, Any]) -> Project:
        members = self.db.fetch_all(
            "SELECT user_id FROM project_members WHERE project_id = ? ORDER BY rowid",
            (row["id"],),
        )
        return Project(
            id=row["id"],
            name=row["name"],
            description=row.get("description"),
            manager_id=row.get("manager_id"),
            team=[m["user_id"] for m in members],
            is_archived=bool(row["is_archived"]),
            created_at=row["created_at"],
        )

    def get_project(self, project_id: str) -> Project | None:
        """
        Get a project with its team.

        Args:
            project_id: Project ID

        Returns:
            Project or None
        """
        row = self.db.fetch_one("SELECT * FROM projects WHERE id = ?", (project_id,))
        return self._project_from_row(row) if row else None

    def list_projects(self, include_archived: bool = False) -> list[Project]:
        sql = "SELECT * FROM projects"
        if not include_archived:
            sql += " WHERE is_archived = 0"
        rows = self.db.fetch_all(sql + " ORDER BY name")
        return [self._project_from_row(row) for row in rows]

    def add_project(self, project: Project) -> str:
        """Insert a project and its team members."""
        with self.db.transaction() as conn:
            conn.execute(
                """
                INSERT INTO projects (id, name, description, manager_id, is_archived, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    project.id,
                    project.name,
                    project.description,
                    project.manager_id,
                    int(project.is_archived),
                    project.created_at,
                ),
            )
            for user_id in project.team:
                conn.execute(
                    "INSERT OR IGNORE INTO project_members (project_id, user_id) VALUES (?, ?)",
                    (project.id, user_id),
                )
        logger.info(f"Added project {project.id} with {len(project.team)} members")
        return project.id

    def add_member(self, project_id: str, user_id: str) -> None:
        with self.db.transaction() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO project_members (project_id, user_id) VALUES (?, ?)",
                (project_id, user_id),
            )
