"""
FastAPI dependencies that build per-request services.

Tests override these through app.dependency_overrides to pin the clock.
"""

from fastapi import Depends

from ..config import get_settings
from ..database import Database, get_database
from ..services import TimeLogService, TimesheetService


def get_timesheet_service(db: Database = Depends(get_database)) -> TimesheetService:
    return TimesheetService(db, get_settings())


def get_time_log_service(db: Database = Depends(get_database)) -> TimeLogService:
    return TimeLogService(db)
