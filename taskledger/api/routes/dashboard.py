"""
TaskLedger — Dashboard API

Admin time report: hours per user, per user and project, per user and task.
"""

import logging

from fastapi import APIRouter, Depends, Query

from ...models import Caller, Role
from ...security import require_role
from ...services import TimesheetService
from ..dependencies import get_timesheet_service
from ..response_models import TimeReportResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/time-report", response_model=TimeReportResponse)
def get_time_report(
    period: str | None = Query(None, description='Last N days (default 7) or "this-month"'),
    start: str | None = Query(None, description="ISO start; used only together with end"),
    end: str | None = Query(None, description="ISO end; used only together with start"),
    project: str | None = Query(None, description="Project ID"),
    caller: Caller = Depends(require_role(Role.ADMIN)),
    service: TimesheetService = Depends(get_timesheet_service),
):
    """Time totals over a period, hours rounded to 2 decimals."""
    report = service.time_report(period=period, start=start, end=end, project_id=project)
    return TimeReportResponse.of(report)
