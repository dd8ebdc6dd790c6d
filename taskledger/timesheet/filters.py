"""
Time-log selection.

Picks the (task, entry) pairs that a report covers. Task-level constraints
(archived, project, free-text search) are applied first, then each entry is
checked against the date range, the optional user, and the presence of a
resolvable user reference.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from ..models.task import Task, TimeLogEntry
from .periods import UNBOUNDED, DateRange


@dataclass(frozen=True)
class TimeLogQuery:
    """Per-request report filters."""

    user_id: str | None = None
    project_id: str | None = None
    search: str | None = None
    date_range: DateRange = UNBOUNDED


@dataclass(frozen=True)
class TimeLogRecord:
    """A qualifying time-log entry together with the task that owns it."""

    task: Task
    entry: TimeLogEntry

    @property
    def user_id(self) -> str:
        return self.entry.user.id

    @property
    def total_minutes(self) -> int:
        return self.entry.total_minutes


def task_matches(task: Task, query: TimeLogQuery) -> bool:
    """Task-level predicate: not archived, right project, matches search."""
    if task.is_archived:
        return False
    if query.project_id and task.project_id != query.project_id:
        return False
    if query.search:
        needle = query.search.lower()
        haystacks = (task.title or "", task.description or "")
        if not any(needle in text.lower() for text in haystacks):
            return False
    return True


def entry_matches(entry: TimeLogEntry, query: TimeLogQuery) -> bool:
    """
    Entry-level predicate.

    Entries without a resolvable user or a readable timestamp are never
    counted.
    """
    if entry.user is None or entry.logged_at is None:
        return False
    if query.user_id and entry.user.id != query.user_id:
        return False
    if query.date_range.is_bounded and not query.date_range.contains(entry.logged_at):
        return False
    return True


def filter_time_logs(tasks: Iterable[Task], query: TimeLogQuery) -> list[TimeLogRecord]:
    """
    Select the time-log entries a report covers.

    Args:
        tasks: Candidate tasks, in the order they should be reported.
        query: Report filters.

    Returns:
        Qualifying records in task order, then per-task entry order.
    """
    records: list[TimeLogRecord] = []
    for task in tasks:
        if not task_matches(task, query):
            continue
        for entry in task.time_logs:
            if entry_matches(entry, query):
                records.append(TimeLogRecord(task=task, entry=entry))
    return records
