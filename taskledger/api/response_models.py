"""
Pydantic request and response models for the TaskLedger API.

Fields are snake_case in Python and camelCase on the wire.

Usage:
    from taskledger.api.response_models import TimesheetResponse

    @router.get("/timesheet", response_model=TimesheetResponse)
    def timesheet(): ...
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models import ProjectRef, Task, TimeLogEntry, UserRef, format_timestamp
from ..services import TimesheetResult
from ..timesheet import (
    AggregationMode,
    DateRange,
    DetailedTimeLog,
    TaskTimesheet,
    TimeReport,
    TimesheetSummary,
    UserTimesheet,
)


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _iso(value: datetime | None) -> str | None:
    return format_timestamp(value) if value is not None else None


# ==== Shared references ====


class UserSummary(CamelModel):
    id: str
    name: str
    email: str | None = None
    avatar: str | None = None

    @classmethod
    def of(cls, user: UserRef) -> "UserSummary":
        return cls(id=user.id, name=user.name, email=user.email, avatar=user.avatar)


class UserName(CamelModel):
    id: str
    name: str

    @classmethod
    def of(cls, user: UserRef) -> "UserName":
        return cls(id=user.id, name=user.name)


class ProjectSummary(CamelModel):
    id: str
    name: str

    @classmethod
    def of(cls, project: ProjectRef) -> "ProjectSummary":
        return cls(id=project.id, name=project.name)


# ==== Tasks ====


class TimeLogRequest(CamelModel):
    """Body of POST /api/tasks/{task_id}/time. Missing or null amounts count as 0."""

    hours: int | None = Field(default=None, ge=0, description="Whole hours, >= 0")
    minutes: int | None = Field(default=None, ge=0, le=59, description="Minutes, 0..59")


class TimeLogResponse(CamelModel):
    user: UserSummary | None = None
    hours: int
    minutes: int
    effective_hours: float
    logged_at: str | None

    @classmethod
    def of(cls, entry: TimeLogEntry) -> "TimeLogResponse":
        return cls(
            user=UserSummary.of(entry.user) if entry.user else None,
            hours=entry.hours,
            minutes=entry.minutes,
            effective_hours=entry.effective_hours,
            logged_at=_iso(entry.logged_at),
        )


class TaskDetailResponse(CamelModel):
    """Task with its project, people and time logs."""

    id: str
    title: str
    description: str | None = None
    status: str
    priority: str
    project: ProjectSummary | None = None
    assignee: UserSummary | None = None
    reporter: UserSummary | None = None
    estimated_hours: float
    actual_hours: float
    is_archived: bool
    time_logs: list[TimeLogResponse] = Field(default_factory=list)
    created_at: str
    updated_at: str

    @classmethod
    def of(cls, task: Task) -> "TaskDetailResponse":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=str(task.status),
            priority=str(task.priority),
            project=ProjectSummary.of(task.project) if task.project else None,
            assignee=UserSummary.of(task.assignee) if task.assignee else None,
            reporter=UserSummary.of(task.reporter) if task.reporter else None,
            estimated_hours=task.estimated_hours,
            actual_hours=task.actual_hours,
            is_archived=task.is_archived,
            time_logs=[TimeLogResponse.of(entry) for entry in task.time_logs],
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class TimeLoggedResponse(CamelModel):
    message: str = "Time logged successfully"
    task: TaskDetailResponse


# ==== Timesheet ====


class UserTaskHoursResponse(CamelModel):
    task_id: str
    task_title: str
    project_name: str
    hours: float
    status: str


class UserTimesheetResponse(CamelModel):
    user_id: str
    user_name: str
    user_email: str | None = None
    total_hours: float
    tasks_count: int
    tasks: list[UserTaskHoursResponse]
    projects: list[str]

    @classmethod
    def of(cls, row: UserTimesheet) -> "UserTimesheetResponse":
        return cls(
            user_id=row.user_id,
            user_name=row.user_name,
            user_email=row.user_email,
            total_hours=row.total_hours,
            tasks_count=row.tasks_count,
            tasks=[
                UserTaskHoursResponse(
                    task_id=t.task_id,
                    task_title=t.task_title,
                    project_name=t.project_name,
                    hours=t.hours,
                    status=str(t.status),
                )
                for t in row.tasks
            ],
            projects=list(row.projects),
        )


class ContributorResponse(CamelModel):
    user_id: str
    user_name: str


class UserBreakdownResponse(CamelModel):
    user_id: str
    user_name: str
    hours: float
    last_log: str


class TaskTimesheetResponse(CamelModel):
    task_id: str
    task_title: str
    project_name: str
    status: str
    total_hours: float
    contributors: list[ContributorResponse]
    user_breakdown: list[UserBreakdownResponse]

    @classmethod
    def of(cls, row: TaskTimesheet) -> "TaskTimesheetResponse":
        return cls(
            task_id=row.task_id,
            task_title=row.task_title,
            project_name=row.project_name,
            status=str(row.status),
            total_hours=row.total_hours,
            contributors=[
                ContributorResponse(user_id=c.user_id, user_name=c.user_name)
                for c in row.contributors
            ],
            user_breakdown=[
                UserBreakdownResponse(
                    user_id=b.user_id,
                    user_name=b.user_name,
                    hours=b.hours,
                    last_log=_iso(b.last_log),
                )
                for b in row.user_breakdown
            ],
        )


class DetailedTimeLogResponse(CamelModel):
    user_id: str
    user_name: str
    user_email: str | None = None
    task_id: str
    task_title: str
    project_name: str
    hours: float
    logged_at: str
    status: str

    @classmethod
    def of(cls, row: DetailedTimeLog) -> "DetailedTimeLogResponse":
        return cls(
            user_id=row.user_id,
            user_name=row.user_name,
            user_email=row.user_email,
            task_id=row.task_id,
            task_title=row.task_title,
            project_name=row.project_name,
            hours=row.hours,
            logged_at=_iso(row.logged_at),
            status=str(row.status),
        )


class SummaryResponse(CamelModel):
    total_hours: float
    total_tasks: int
    active_users: int
    avg_hours_per_task: float

    @classmethod
    def of(cls, summary: TimesheetSummary) -> "SummaryResponse":
        return cls(
            total_hours=summary.total_hours,
            total_tasks=summary.total_tasks,
            active_users=summary.active_users,
            avg_hours_per_task=summary.avg_hours_per_task,
        )


_ROW_MODELS = {
    AggregationMode.BY_USER: UserTimesheetResponse,
    AggregationMode.BY_TASK: TaskTimesheetResponse,
    AggregationMode.DETAILED: DetailedTimeLogResponse,
}


class TimesheetResponse(CamelModel):
    success: bool = True
    timesheet_data: (
        list[UserTimesheetResponse] | list[TaskTimesheetResponse] | list[DetailedTimeLogResponse]
    )
    summary: SummaryResponse

    @classmethod
    def of(cls, result: TimesheetResult) -> "TimesheetResponse":
        row_model = _ROW_MODELS[result.view_mode]
        return cls(
            timesheet_data=[row_model.of(row) for row in result.rows],
            summary=SummaryResponse.of(result.summary),
        )


# ==== Time report ====


class PeriodResponse(CamelModel):
    start: str | None = None
    end: str | None = None

    @classmethod
    def of(cls, date_range: DateRange) -> "PeriodResponse":
        return cls(start=_iso(date_range.start), end=_iso(date_range.end))


class UserTotalResponse(CamelModel):
    user: UserSummary
    total_hours: float


class UserProjectTotalResponse(CamelModel):
    user: UserName
    project: ProjectSummary
    total_hours: float


class TaskTitle(CamelModel):
    id: str
    title: str


class UserTaskTotalResponse(CamelModel):
    user: UserName
    task: TaskTitle
    project: ProjectSummary
    total_hours: float


class TimeReportResponse(CamelModel):
    period: PeriodResponse
    totals_by_user: list[UserTotalResponse]
    by_user_and_project: list[UserProjectTotalResponse]
    by_user_and_task: list[UserTaskTotalResponse]

    @classmethod
    def of(cls, report: TimeReport) -> "TimeReportResponse":
        return cls(
            period=PeriodResponse.of(report.period),
            totals_by_user=[
                UserTotalResponse(user=UserSummary.of(r.user), total_hours=r.total_hours)
                for r in report.totals_by_user
            ],
            by_user_and_project=[
                UserProjectTotalResponse(
                    user=UserName.of(r.user),
                    project=ProjectSummary.of(r.project),
                    total_hours=r.total_hours,
                )
                for r in report.by_user_and_project
            ],
            by_user_and_task=[
                UserTaskTotalResponse(
                    user=UserName.of(r.user),
                    task=TaskTitle(id=r.task_id, title=r.task_title),
                    project=ProjectSummary.of(r.project),
                    total_hours=r.total_hours,
                )
                for r in report.by_user_and_task
            ],
        )


# ==== Errors / health ====


class ErrorItem(BaseModel):
    field: str | None = None
    reason: str
    code: str


class ErrorResponse(BaseModel):
    message: str
    errors: list[ErrorItem] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str = Field(description="ok or degraded")
    database: str = Field(description="ok or error")
