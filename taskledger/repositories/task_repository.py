"""
TaskLedger — Task Repository

Database operations for tasks and their embedded time logs.
"""

import logging
from datetime import datetime
from typing import Any

from ..database import Database
from ..errors import NotFound
from ..models import (
    ProjectRef,
    Task,
    TaskPriority,
    TaskStatus,
    TimeLogEntry,
    UserRef,
    format_timestamp,
    minutes_to_hours,
    now_iso,
    parse_timestamp,
    to_minutes,
)

logger = logging.getLogger(__name__)

_TASK_SELECT = """
    SELECT t.*,
           p.name AS project_name,
           a.name AS assignee_name, a.email AS assignee_email, a.avatar AS assignee_avatar,
           r.name AS reporter_name, r.email AS reporter_email, r.avatar AS reporter_avatar
    FROM tasks t
    LEFT JOIN projects p ON p.id = t.project_id
    LEFT JOIN users a ON a.id = t.assignee_id
    LEFT JOIN users r ON r.id = t.reporter_id
"""

_LOG_SELECT = """
    SELECT l.id, l.task_id, l.user_id, l.hours, l.minutes, l.logged_at,
           u.name AS user_name, u.email AS user_email, u.avatar AS user_avatar
    FROM task_time_logs l
    LEFT JOIN users u ON u.id = l.user_id
"""


def _user_ref(row: dict[str, Any], prefix: str) -> UserRef | None:
    """Build a UserRef from joined columns; None when the reference is dangling."""
    user_id = row.get(f"{prefix}_id")
    name = row.get(f"{prefix}_name")
    if not user_id or name is None:
        return None
    return UserRef(
        id=user_id,
        name=name,
        email=row.get(f"{prefix}_email"),
        avatar=row.get(f"{prefix}_avatar"),
    )


def _entry_from_row(row: dict[str, Any]) -> TimeLogEntry:
    return TimeLogEntry(
        hours=row["hours"] or 0,
        minutes=row["minutes"] or 0,
        logged_at=parse_timestamp(row["logged_at"]),
        user=_user_ref(row, "user"),
    )


def _task_from_row(row: dict[str, Any], time_logs: list[TimeLogEntry]) -> Task:
    project = None
    if row.get("project_id") and row.get("project_name") is not None:
        project = ProjectRef(id=row["project_id"], name=row["project_name"])
    return Task(
        id=row["id"],
        title=row["title"],
        description=row.get("description"),
        status=TaskStatus(row["status"]),
        priority=TaskPriority(row["priority"]),
        project=project,
        assignee=_user_ref(row, "assignee"),
        reporter=_user_ref(row, "reporter"),
        estimated_hours=row["estimated_hours"] or 0.0,
        actual_hours=row["actual_hours"] or 0.0,
        is_archived=bool(row["is_archived"]),
        time_logs=time_logs,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class TaskRepository:
    """Repository for task and time-log database operations."""

    def __init__(self, db: Database):
        """
        Initialize repository.

        Args:
            db: Database instance
        """
        self.db = db

    # =========================================================================
    # Queries
    # =========================================================================

    def _load(self, where: str, params: tuple) -> list[Task]:
        rows = self.db.fetch_all(f"{_TASK_SELECT} WHERE {where} ORDER BY t.rowid", params)
        if not rows:
            return []

        logs_by_task: dict[str, list[TimeLogEntry]] = {row["id"]: [] for row in rows}
        log_rows = self.db.fetch_all(
            f"""
            {_LOG_SELECT}
            WHERE l.task_id IN (SELECT t.id FROM tasks t WHERE {where})
            ORDER BY l.id
            """,
            params,
        )
        for log_row in log_rows:
            logs_by_task[log_row["task_id"]].append(_entry_from_row(log_row))

        return [_task_from_row(row, logs_by_task[row["id"]]) for row in rows]

    def list_reportable_tasks(self, project_id: str | None = None) -> list[Task]:
        """
        Non-archived tasks with their time logs, in creation order.

        Args:
            project_id: Restrict to one project

        Returns:
            Tasks with time_logs populated in insertion order
        """
        where = "t.is_archived = 0"
        params: tuple = ()
        if project_id:
            where += " AND t.project_id = ?"
            params = (project_id,)
        tasks = self._load(where, params)
        logger.debug(f"Loaded {len(tasks)} reportable tasks (project={project_id})")
        return tasks

    def get(self, task_id: str, include_archived: bool = False) -> Task | None:
        """
        Get a task with its time logs.

        Args:
            task_id: Task ID
            include_archived: Also return archived tasks

        Returns:
            Task or None
        """
        where = "t.id = ?" if include_archived else "t.id = ? AND t.is_archived = 0"
        tasks = self._load(where, (task_id,))
        return tasks[0] if tasks else None

    # =========================================================================
    # Mutations
    # =========================================================================

    def insert(self, task: Task) -> str:
        """
        Insert a new task (without time logs).

        Returns:
            Task ID
        """
        data = {
            "id": task.id,
            "title": task.title,
            "description": task.description,
            "status": TaskStatus(task.status).value,
            "priority": TaskPriority(task.priority).value,
            "project_id": task.project_id,
            "assignee_id": task.assignee.id if task.assignee else None,
            "reporter_id": task.reporter.id if task.reporter else None,
            "estimated_hours": task.estimated_hours,
            "actual_hours": task.actual_hours,
            "is_archived": int(task.is_archived),
            "created_at": task.created_at,
            "updated_at": task.updated_at,
        }
        self.db.insert("tasks", data)
        return task.id

    def set_archived(self, task_id: str, archived: bool = True) -> bool:
        count = self.db.update(
            "tasks", {"is_archived": int(archived), "updated_at": now_iso()}, "id = ?", [task_id]
        )
        return count > 0

    def append_time_log(
        self,
        task_id: str,
        user_id: str | None,
        hours: int,
        minutes: int,
        logged_at: datetime,
    ) -> None:
        """
        Append a time log and bump the task's actual_hours in one transaction.

        The write lock is taken before either statement runs and the counter
        is incremented in SQL, so concurrent appends to the same task queue up
        and none is lost.

        Raises:
            NotFound: If the task does not exist or is archived
        """
        increment = minutes_to_hours(to_minutes(hours, minutes))
        with self.db.transaction(immediate=True) as conn:
            cursor = conn.execute(
                """
                UPDATE tasks
                SET actual_hours = actual_hours + ?, updated_at = ?
                WHERE id = ? AND is_archived = 0
                """,
                (increment, now_iso(), task_id),
            )
            if cursor.rowcount == 0:
                raise NotFound("Task", task_id)
            conn.execute(
                """
                INSERT INTO task_time_logs (task_id, user_id, hours, minutes, logged_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (task_id, user_id, hours, minutes, format_timestamp(logged_at)),
            )
