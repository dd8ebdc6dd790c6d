"""
Timesheet aggregation.

Three independent folds over the same filtered records:

- by_user:   one row per user, with per-task hours and projects touched
- by_task:   one row per task, with contributors and a per-user breakdown
- detailed:  one row per time-log entry, no grouping

Durations accumulate as whole minutes, so no rounding happens while folding;
decimal hours are derived only when a row is read.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from ..models.base import TaskStatus
from ..models.task import minutes_to_hours
from .filters import TimeLogRecord

UNKNOWN_PROJECT = "Unknown"


class AggregationMode(StrEnum):
    """Timesheet view modes."""

    BY_USER = "by-user"
    BY_TASK = "by-task"
    DETAILED = "detailed"


# =============================================================================
# Result rows
# =============================================================================


@dataclass
class UserTaskHours:
    """One user's time on one task."""

    task_id: str
    task_title: str
    project_name: str
    status: TaskStatus
    minutes: int = 0

    @property
    def hours(self) -> float:
        return minutes_to_hours(self.minutes)


@dataclass
class UserTimesheet:
    """by-user row."""

    user_id: str
    user_name: str
    user_email: str | None
    minutes: int = 0
    tasks: list[UserTaskHours] = field(default_factory=list)
    projects: list[str] = field(default_factory=list)

    @property
    def total_hours(self) -> float:
        return minutes_to_hours(self.minutes)

    @property
    def tasks_count(self) -> int:
        return len(self.tasks)


@dataclass(frozen=True)
class Contributor:
    user_id: str
    user_name: str


@dataclass
class UserBreakdown:
    """One user's share of a by-task row."""

    user_id: str
    user_name: str
    last_log: datetime
    minutes: int = 0

    @property
    def hours(self) -> float:
        return minutes_to_hours(self.minutes)


@dataclass
class TaskTimesheet:
    """by-task row."""

    task_id: str
    task_title: str
    project_name: str
    status: TaskStatus
    minutes: int = 0
    contributors: list[Contributor] = field(default_factory=list)
    user_breakdown: list[UserBreakdown] = field(default_factory=list)

    @property
    def total_hours(self) -> float:
        return minutes_to_hours(self.minutes)


@dataclass(frozen=True)
class DetailedTimeLog:
    """detailed row: a single entry."""

    user_id: str
    user_name: str
    user_email: str | None
    task_id: str
    task_title: str
    project_name: str
    minutes: int
    logged_at: datetime
    status: TaskStatus

    @property
    def hours(self) -> float:
        return minutes_to_hours(self.minutes)


TimesheetRows = list[UserTimesheet] | list[TaskTimesheet] | list[DetailedTimeLog]


def _project_name(record: TimeLogRecord) -> str:
    return record.task.project_name or UNKNOWN_PROJECT


# =============================================================================
# Folds
# =============================================================================


def aggregate_by_user(records: Sequence[TimeLogRecord]) -> list[UserTimesheet]:
    """
    Group records by the user who logged them.

    Repeated entries for the same user and task merge into one task row, so
    tasks_count counts distinct tasks. Users appear in first-seen order.
    """
    users: dict[str, UserTimesheet] = {}
    task_rows: dict[tuple[str, str], UserTaskHours] = {}

    for record in records:
        user = record.entry.user
        row = users.get(user.id)
        if row is None:
            row = UserTimesheet(user_id=user.id, user_name=user.name, user_email=user.email)
            users[user.id] = row

        row.minutes += record.total_minutes

        key = (user.id, record.task.id)
        task_row = task_rows.get(key)
        if task_row is None:
            task_row = UserTaskHours(
                task_id=record.task.id,
                task_title=record.task.title,
                project_name=_project_name(record),
                status=record.task.status,
            )
            task_rows[key] = task_row
            row.tasks.append(task_row)
        task_row.minutes += record.total_minutes

        project_name = record.task.project_name
        if project_name and project_name not in row.projects:
            row.projects.append(project_name)

    return list(users.values())


def aggregate_by_task(records: Sequence[TimeLogRecord]) -> list[TaskTimesheet]:
    """
    Group records by task.

    Each task lists its contributors in first-seen order and a per-user
    breakdown whose last_log is the latest logged_at for that user.
    """
    tasks: dict[str, TaskTimesheet] = {}
    breakdowns: dict[tuple[str, str], UserBreakdown] = {}

    for record in records:
        task = record.task
        row = tasks.get(task.id)
        if row is None:
            row = TaskTimesheet(
                task_id=task.id,
                task_title=task.title,
                project_name=_project_name(record),
                status=task.status,
            )
            tasks[task.id] = row

        row.minutes += record.total_minutes

        user = record.entry.user
        key = (task.id, user.id)
        share = breakdowns.get(key)
        if share is None:
            share = UserBreakdown(
                user_id=user.id, user_name=user.name, last_log=record.entry.logged_at
            )
            breakdowns[key] = share
            row.contributors.append(Contributor(user_id=user.id, user_name=user.name))
            row.user_breakdown.append(share)
        share.minutes += record.total_minutes
        if record.entry.logged_at > share.last_log:
            share.last_log = record.entry.logged_at

    return list(tasks.values())


def aggregate_detailed(records: Sequence[TimeLogRecord]) -> list[DetailedTimeLog]:
    """One row per record, in filter order."""
    return [
        DetailedTimeLog(
            user_id=record.entry.user.id,
            user_name=record.entry.user.name,
            user_email=record.entry.user.email,
            task_id=record.task.id,
            task_title=record.task.title,
            project_name=_project_name(record),
            minutes=record.total_minutes,
            logged_at=record.entry.logged_at,
            status=record.task.status,
        )
        for record in records
    ]


AGGREGATORS: dict[AggregationMode, Callable[[Sequence[TimeLogRecord]], TimesheetRows]] = {
    AggregationMode.BY_USER: aggregate_by_user,
    AggregationMode.BY_TASK: aggregate_by_task,
    AggregationMode.DETAILED: aggregate_detailed,
}


def aggregate(records: Sequence[TimeLogRecord], mode: AggregationMode | str) -> TimesheetRows:
    """Fold records into the rows for `mode`."""
    return AGGREGATORS[AggregationMode(mode)](records)
