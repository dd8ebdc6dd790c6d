"""
TaskLedger — Models
"""

from .base import (
    TaskPriority,
    TaskStatus,
    format_timestamp,
    generate_id,
    now_iso,
    parse_timestamp,
    utc_now,
)
from .task import (
    ProjectRef,
    Task,
    TimeLogEntry,
    minutes_to_hours,
    to_minutes,
)
from .user import Caller, Project, Role, User, UserRef

__all__ = [
    "Caller",
    "Project",
    "ProjectRef",
    "Role",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "TimeLogEntry",
    "User",
    "UserRef",
    "format_timestamp",
    "generate_id",
    "minutes_to_hours",
    "now_iso",
    "parse_timestamp",
    "to_minutes",
    "utc_now",
]
