"""
Admin time report.

Totals per user, per user and project, and per user and task over a period.
Hours are rounded to two decimals only when a row is read.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from ..models.task import ProjectRef, minutes_to_hours
from ..models.user import UserRef
from .filters import TimeLogRecord
from .periods import DateRange

DEFAULT_TASK_LIMIT = 100


def round_hours(minutes: int) -> float:
    """Decimal hours rounded to 2 places."""
    return round(minutes_to_hours(minutes), 2)


@dataclass
class UserTotal:
    user: UserRef
    minutes: int = 0

    @property
    def total_hours(self) -> float:
        return round_hours(self.minutes)


@dataclass
class UserProjectTotal:
    user: UserRef
    project: ProjectRef
    minutes: int = 0

    @property
    def total_hours(self) -> float:
        return round_hours(self.minutes)


@dataclass
class UserTaskTotal:
    user: UserRef
    task_id: str
    task_title: str
    project: ProjectRef
    minutes: int = 0

    @property
    def total_hours(self) -> float:
        return round_hours(self.minutes)


@dataclass
class TimeReport:
    period: DateRange
    totals_by_user: list[UserTotal]
    by_user_and_project: list[UserProjectTotal]
    by_user_and_task: list[UserTaskTotal]


def totals_by_user(records: Sequence[TimeLogRecord]) -> list[UserTotal]:
    """Per-user totals, largest first."""
    totals: dict[str, UserTotal] = {}
    for record in records:
        user = record.entry.user
        row = totals.setdefault(user.id, UserTotal(user=user))
        row.minutes += record.total_minutes
    return sorted(totals.values(), key=lambda r: (-r.minutes, r.user.name, r.user.id))


def totals_by_user_and_project(records: Sequence[TimeLogRecord]) -> list[UserProjectTotal]:
    """Per (user, project) totals, by user name then largest first."""
    totals: dict[tuple[str, str], UserProjectTotal] = {}
    for record in records:
        project = record.task.project
        if project is None:
            continue
        user = record.entry.user
        row = totals.setdefault((user.id, project.id), UserProjectTotal(user=user, project=project))
        row.minutes += record.total_minutes
    return sorted(totals.values(), key=lambda r: (r.user.name, -r.minutes, r.project.name))


def totals_by_user_and_task(
    records: Sequence[TimeLogRecord], limit: int = DEFAULT_TASK_LIMIT
) -> list[UserTaskTotal]:
    """Per (user, task) totals, largest first, capped at `limit` rows."""
    totals: dict[tuple[str, str], UserTaskTotal] = {}
    for record in records:
        project = record.task.project
        if project is None:
            continue
        user = record.entry.user
        key = (user.id, record.task.id)
        row = totals.get(key)
        if row is None:
            row = UserTaskTotal(
                user=user, task_id=record.task.id, task_title=record.task.title, project=project
            )
            totals[key] = row
        row.minutes += record.total_minutes
    ordered = sorted(totals.values(), key=lambda r: (-r.minutes, r.user.name, r.task_title))
    return ordered[:limit]


def build_time_report(
    records: Sequence[TimeLogRecord],
    period: DateRange,
    task_limit: int = DEFAULT_TASK_LIMIT,
) -> TimeReport:
    return TimeReport(
        period=period,
        totals_by_user=totals_by_user(records),
        by_user_and_project=totals_by_user_and_project(records),
        by_user_and_task=totals_by_user_and_task(records, task_limit),
    )
