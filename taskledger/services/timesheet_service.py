"""
TaskLedger — Timesheet Service

Orchestrates the reporting pipeline: resolve the period, load reportable
tasks, select time logs, fold them, and summarize.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from ..config import Settings, get_settings
from ..database import Database
from ..models import utc_now
from ..repositories import TaskRepository
from ..timesheet import (
    AggregationMode,
    DateRange,
    TimeLogQuery,
    TimeReport,
    TimesheetSummary,
    aggregate,
    build_time_report,
    filter_time_logs,
    resolve_report_period,
    resolve_timesheet_range,
    summarize,
)
from ..timesheet.aggregation import TimesheetRows

logger = logging.getLogger(__name__)


@dataclass
class TimesheetResult:
    """Rows for one view mode plus the summary computed from them."""

    view_mode: AggregationMode
    date_range: DateRange
    rows: TimesheetRows
    summary: TimesheetSummary


class TimesheetService:
    """
    Service for timesheet and time-report queries.

    Every call reads a fresh snapshot from the store; nothing is cached
    between requests.
    """

    def __init__(
        self,
        db: Database,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize service.

        Args:
            db: Database instance
            settings: Report settings (timezone, default period, row cap)
            clock: Source of the current instant
        """
        self.db = db
        self.repo = TaskRepository(db)
        self.settings = settings or get_settings()
        self.clock = clock

    # =========================================================================
    # Timesheet
    # =========================================================================

    def timesheet(
        self,
        *,
        user_id: str | None = None,
        project_id: str | None = None,
        time_range: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        search: str | None = None,
        view_mode: AggregationMode | str = AggregationMode.BY_USER,
        now: datetime | None = None,
    ) -> TimesheetResult:
        """
        Build the timesheet for one view mode.

        Raises:
            InvalidDateFormat: If startDate or endDate cannot be parsed
        """
        mode = AggregationMode(view_mode)
        date_range = resolve_timesheet_range(
            time_range,
            start_date,
            end_date,
            now=now or self.clock(),
            tz=self.settings.report_tz,
        )
        query = TimeLogQuery(
            user_id=user_id or None,
            project_id=project_id or None,
            search=search or None,
            date_range=date_range,
        )

        tasks = self.repo.list_reportable_tasks(query.project_id)
        records = filter_time_logs(tasks, query)
        rows = aggregate(records, mode)
        summary = summarize(rows, mode)

        logger.debug(
            f"Timesheet {mode}: {len(tasks)} tasks, {len(records)} logs, "
            f"{len(rows)} rows, {summary.total_minutes} minutes"
        )
        return TimesheetResult(view_mode=mode, date_range=date_range, rows=rows, summary=summary)

    # =========================================================================
    # Time report
    # =========================================================================

    def time_report(
        self,
        *,
        period: str | None = None,
        start: str | None = None,
        end: str | None = None,
        project_id: str | None = None,
        now: datetime | None = None,
    ) -> TimeReport:
        """
        Build the admin time report.

        Args:
            period: Day count or "this-month"; defaults to the configured
                report period
            start, end: Explicit bounds, applied only when both are given
            project_id: Restrict to one project
            now: Reference instant (defaults to the service clock)

        Raises:
            InvalidDateFormat: If start or end cannot be parsed
        """
        if period is None or period.strip() == "":
            period = str(self.settings.report_period_days)

        date_range = resolve_report_period(
            period,
            start,
            end,
            now=now or self.clock(),
            tz=self.settings.report_tz,
            default_days=self.settings.report_period_days,
        )
        query = TimeLogQuery(project_id=project_id or None, date_range=date_range)

        tasks = self.repo.list_reportable_tasks(query.project_id)
        records = filter_time_logs(tasks, query)
        report = build_time_report(records, date_range, self.settings.report_task_limit)

        logger.debug(
            f"Time report {date_range.start} .. {date_range.end}: {len(records)} logs, "
            f"{len(report.totals_by_user)} users"
        )
        return report
