"""
TaskLedger — Task Model

A task exclusively owns an ordered, append-only list of time-log entries.
Entries have no identity outside their task and are never edited, removed or
reordered.
"""

from dataclasses import dataclass, field
from datetime import datetime

from .base import TaskPriority, TaskStatus, generate_id, now_iso
from .user import UserRef

MINUTES_PER_HOUR = 60


def to_minutes(hours: int, minutes: int) -> int:
    """Total whole minutes of an hours+minutes pair."""
    return hours * MINUTES_PER_HOUR + minutes


def minutes_to_hours(total_minutes: int) -> float:
    """
    Convert whole minutes to decimal hours.

    >>> minutes_to_hours(90)
    1.5
    """
    return total_minutes / MINUTES_PER_HOUR


@dataclass(frozen=True)
class ProjectRef:
    """Display fields of a project, as embedded in reports."""

    id: str
    name: str


@dataclass(frozen=True)
class TimeLogEntry:
    """
    One hours+minutes record a user reported against a task.

    `user` is None when the stored reference is missing or does not resolve
    to an existing user, and `logged_at` is None when the stored timestamp
    cannot be read. Such entries never count toward any report.
    """

    hours: int
    minutes: int
    logged_at: datetime | None
    user: UserRef | None = None

    @property
    def total_minutes(self) -> int:
        return to_minutes(self.hours, self.minutes)

    @property
    def effective_hours(self) -> float:
        """hours + minutes / 60"""
        return minutes_to_hours(self.total_minutes)

    @property
    def user_id(self) -> str | None:
        return self.user.id if self.user else None


@dataclass
class Task:
    """Task with its embedded time logs."""

    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    project: ProjectRef | None = None
    assignee: UserRef | None = None
    reporter: UserRef | None = None
    estimated_hours: float = 0.0
    actual_hours: float = 0.0
    is_archived: bool = False
    time_logs: list[TimeLogEntry] = field(default_factory=list)
    id: str = field(default_factory=lambda: generate_id("tsk"))
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)

    @property
    def project_id(self) -> str | None:
        return self.project.id if self.project else None

    @property
    def project_name(self) -> str | None:
        return self.project.name if self.project else None

    @property
    def logged_hours(self) -> float:
        """Hours recomputed from the embedded logs."""
        return minutes_to_hours(sum(entry.total_minutes for entry in self.time_logs))
