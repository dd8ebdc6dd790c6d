"""
TaskLedger — Services
"""

from .time_log_service import TimeLogService, validate_amount
from .timesheet_service import TimesheetResult, TimesheetService

__all__ = ["TimeLogService", "TimesheetResult", "TimesheetService", "validate_amount"]
