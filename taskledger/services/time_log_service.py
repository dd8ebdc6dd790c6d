"""
TaskLedger — Time Log Service

Appending time to a task, and the access rule shared by everything that
reads or writes a single task.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from ..database import Database
from ..errors import AccessDenied, InvalidTimeLogAmount, MinutesOutOfRange, NotFound, ValidationFailed
from ..models import Caller, Task, to_minutes, utc_now
from ..repositories import DirectoryRepository, TaskRepository

logger = logging.getLogger(__name__)

# Largest hours value whose minute total still fits a 64-bit sqlite INTEGER
MAX_LOG_HOURS = (2**63 - 1) // 60 - 1


def validate_amount(hours: int, minutes: int) -> None:
    """
    Check the shape of an hours+minutes pair.

    Raises:
        ValidationFailed: If hours is negative or above MAX_LOG_HOURS
        MinutesOutOfRange: If minutes is outside [0, 59]
    """
    if hours < 0:
        raise ValidationFailed(
            "Hours must be a non-negative integer",
            field="hours",
            reason=f"{hours!r} is negative",
        )
    if hours > MAX_LOG_HOURS:
        raise ValidationFailed(
            "Validation failed",
            field="hours",
            reason=f"{hours!r} exceeds {MAX_LOG_HOURS}",
        )
    if not 0 <= minutes <= 59:
        raise MinutesOutOfRange(minutes)


class TimeLogService:
    """Service for logging time against tasks."""

    def __init__(self, db: Database, clock: Callable[[], datetime] = utc_now):
        self.db = db
        self.tasks = TaskRepository(db)
        self.directory = DirectoryRepository(db)
        self.clock = clock

    # =========================================================================
    # Access
    # =========================================================================

    def can_access(self, task: Task, caller: Caller) -> bool:
        """
        Admins, the assignee, the reporter, the project manager and project
        team members may work with a task.
        """
        if caller.is_admin:
            return True
        if task.assignee and task.assignee.id == caller.user_id:
            return True
        if task.reporter and task.reporter.id == caller.user_id:
            return True
        if task.project_id:
            project = self.directory.get_project(task.project_id)
            if project is not None:
                if project.manager_id == caller.user_id or project.has_member(caller.user_id):
                    return True
        return False

    def get_task(self, task_id: str, caller: Caller) -> Task:
        """
        Load a task the caller is allowed to see.

        Raises:
            NotFound: If the task does not exist or is archived
            AccessDenied: If the caller has no relationship to the task
        """
        task = self.tasks.get(task_id)
        if task is None:
            raise NotFound("Task", task_id)
        if not self.can_access(task, caller):
            logger.warning(f"Access denied: user {caller.user_id} on task {task_id}")
            raise AccessDenied()
        return task

    # =========================================================================
    # Append
    # =========================================================================

    def log_time(self, task_id: str, caller: Caller, hours: int = 0, minutes: int = 0) -> Task:
        """
        Append a time log to a task and return the updated task.

        The entry and the actual_hours increment commit together. Every
        check runs before anything is written.

        Args:
            task_id: Task ID
            caller: Acting user; recorded as the entry's user
            hours: Whole hours, >= 0
            minutes: Minutes, 0..59

        Returns:
            Task reloaded after the append

        Raises:
            ValidationFailed / MinutesOutOfRange: Malformed amount
            NotFound: Task missing or archived
            AccessDenied: Caller may not log time on this task
            InvalidTimeLogAmount: Zero total duration
        """
        validate_amount(hours, minutes)
        self.get_task(task_id, caller)

        if to_minutes(hours, minutes) <= 0:
            raise InvalidTimeLogAmount()

        self.tasks.append_time_log(task_id, caller.user_id, hours, minutes, self.clock())
        logger.info(f"User {caller.user_id} logged {hours}h{minutes:02d}m on task {task_id}")

        updated = self.tasks.get(task_id)
        if updated is None:
            raise NotFound("Task", task_id)
        return updated
