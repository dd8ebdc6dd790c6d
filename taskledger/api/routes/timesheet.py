"""
TaskLedger — Timesheet API

Admin view of logged time, grouped by user, by task, or flat.
"""

import logging

from fastapi import APIRouter, Depends, Query

from ...models import Caller, Role
from ...security import require_role
from ...services import TimesheetService
from ...timesheet import AggregationMode, TimeRange
from ..dependencies import get_timesheet_service
from ..response_models import TimesheetResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/timesheet", tags=["timesheet"])


@router.get("", response_model=TimesheetResponse)
def get_timesheet(
    user_id: str | None = Query(None, alias="userId"),
    project_id: str | None = Query(None, alias="projectId"),
    time_range: TimeRange | None = Query(None, alias="timeRange"),
    start_date: str | None = Query(None, alias="startDate", description="ISO date"),
    end_date: str | None = Query(None, alias="endDate", description="ISO date, inclusive"),
    search: str | None = Query(None, description="Substring of task title or description"),
    view_mode: AggregationMode = Query(AggregationMode.BY_USER, alias="viewMode"),
    caller: Caller = Depends(require_role(Role.ADMIN)),
    service: TimesheetService = Depends(get_timesheet_service),
):
    """Timesheet rows for the requested view mode plus summary totals."""
    result = service.timesheet(
        user_id=user_id,
        project_id=project_id,
        time_range=time_range,
        start_date=start_date,
        end_date=end_date,
        search=search,
        view_mode=view_mode,
    )
    return TimesheetResponse.of(result)
