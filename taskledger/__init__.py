"""
TaskLedger — project/task time tracking and timesheet reporting service.
"""

__version__ = "1.0.0"
