"""
TaskLedger — API Routes
"""

from .dashboard import router as dashboard_router
from .health import router as health_router
from .tasks import router as tasks_router
from .timesheet import router as timesheet_router

__all__ = ["dashboard_router", "health_router", "tasks_router", "timesheet_router"]
