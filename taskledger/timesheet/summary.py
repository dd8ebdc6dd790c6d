"""
Timesheet summary statistics.

The summary can be derived from the filtered records or from the rows of any
aggregation mode; all routes give identical numbers because every mode keeps
whole-minute totals.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from ..models.task import minutes_to_hours
from .aggregation import (
    AggregationMode,
    DetailedTimeLog,
    TaskTimesheet,
    TimesheetRows,
    UserTimesheet,
)
from .filters import TimeLogRecord


@dataclass(frozen=True)
class TimesheetSummary:
    total_minutes: int = 0
    total_tasks: int = 0
    active_users: int = 0

    @property
    def total_hours(self) -> float:
        return minutes_to_hours(self.total_minutes)

    @property
    def avg_hours_per_task(self) -> float:
        """Average hours per task; 0 when there are no tasks."""
        if self.total_tasks == 0:
            return 0.0
        return self.total_hours / self.total_tasks


def summarize_records(records: Sequence[TimeLogRecord]) -> TimesheetSummary:
    return TimesheetSummary(
        total_minutes=sum(record.total_minutes for record in records),
        total_tasks=len({record.task.id for record in records}),
        active_users=len({record.user_id for record in records}),
    )


def summarize_users(rows: Sequence[UserTimesheet]) -> TimesheetSummary:
    return TimesheetSummary(
        total_minutes=sum(row.minutes for row in rows),
        total_tasks=len({task.task_id for row in rows for task in row.tasks}),
        active_users=len(rows),
    )


def summarize_tasks(rows: Sequence[TaskTimesheet]) -> TimesheetSummary:
    return TimesheetSummary(
        total_minutes=sum(row.minutes for row in rows),
        total_tasks=len(rows),
        active_users=len({share.user_id for row in rows for share in row.user_breakdown}),
    )


def summarize_detailed(rows: Sequence[DetailedTimeLog]) -> TimesheetSummary:
    return TimesheetSummary(
        total_minutes=sum(row.minutes for row in rows),
        total_tasks=len({row.task_id for row in rows}),
        active_users=len({row.user_id for row in rows}),
    )


_SUMMARIZERS = {
    AggregationMode.BY_USER: summarize_users,
    AggregationMode.BY_TASK: summarize_tasks,
    AggregationMode.DETAILED: summarize_detailed,
}


def summarize(rows: TimesheetRows, mode: AggregationMode | str) -> TimesheetSummary:
    """Summary of rows produced by aggregate(records, mode)."""
    return _SUMMARIZERS[AggregationMode(mode)](rows)
