"""
Timesheet reporting core: period resolution, time-log filtering, aggregation
and summaries. Everything here is pure; data comes in as Task objects.
"""

from .aggregation import (
    AggregationMode,
    Contributor,
    DetailedTimeLog,
    TaskTimesheet,
    UserBreakdown,
    UserTaskHours,
    UserTimesheet,
    aggregate,
    aggregate_by_task,
    aggregate_by_user,
    aggregate_detailed,
)
from .filters import TimeLogQuery, TimeLogRecord, filter_time_logs
from .periods import (
    UNBOUNDED,
    DateRange,
    TimeRange,
    resolve_report_period,
    resolve_timesheet_range,
)
from .summary import TimesheetSummary, summarize, summarize_records
from .time_report import TimeReport, build_time_report

__all__ = [
    "UNBOUNDED",
    "AggregationMode",
    "Contributor",
    "DateRange",
    "DetailedTimeLog",
    "TaskTimesheet",
    "TimeLogQuery",
    "TimeLogRecord",
    "TimeRange",
    "TimeReport",
    "TimesheetSummary",
    "UserBreakdown",
    "UserTaskHours",
    "UserTimesheet",
    "aggregate",
    "aggregate_by_task",
    "aggregate_by_user",
    "aggregate_detailed",
    "build_time_report",
    "filter_time_logs",
    "resolve_report_period",
    "resolve_timesheet_range",
    "summarize",
    "summarize_records",
]
