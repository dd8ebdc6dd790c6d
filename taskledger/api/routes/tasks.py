"""
TaskLedger — Tasks API

Task detail and time logging.
"""

import logging

from fastapi import APIRouter, Depends

from ...models import Caller
from ...security import require_user
from ...services import TimeLogService
from ..dependencies import get_time_log_service
from ..response_models import TaskDetailResponse, TimeLoggedResponse, TimeLogRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("/{task_id}", response_model=TaskDetailResponse)
def get_task(
    task_id: str,
    caller: Caller = Depends(require_user),
    service: TimeLogService = Depends(get_time_log_service),
):
    """Task detail with time logs. Same access rule as logging time."""
    task = service.get_task(task_id, caller)
    return TaskDetailResponse.of(task)


@router.post("/{task_id}/time", response_model=TimeLoggedResponse)
def log_time(
    task_id: str,
    body: TimeLogRequest | None = None,
    caller: Caller = Depends(require_user),
    service: TimeLogService = Depends(get_time_log_service),
):
    """Append hours+minutes to a task and return the updated task."""
    body = body or TimeLogRequest()
    task = service.log_time(task_id, caller, hours=body.hours or 0, minutes=body.minutes or 0)
    return TimeLoggedResponse(task=TaskDetailResponse.of(task))
