"""
TaskLedger command line.

Usage:
    taskledger init-db
    taskledger add-user --name "Ada" --email ada@example.com [--role admin]
    taskledger add-project --name "Alpha" --manager <user-id> [--member <user-id> ...]
    taskledger add-task --title "Write report" --project <project-id> --reporter <user-id>
    taskledger create-key --user <user-id> --name laptop
    taskledger revoke-key --key-id <key-id>
    taskledger list-keys [--user <user-id>]
    taskledger log-time --task <task-id> --user <user-id> --hours 1 --minutes 30
    taskledger timesheet [--view-mode by-task] [--time-range this-month]
    taskledger time-report [--period 30] [--project <project-id>]
    taskledger serve [--host 127.0.0.1] [--port 8420]

Pass --db to work on a database other than the configured one.
"""

import argparse
import logging
import sqlite3
import sys

from .api.response_models import TimeReportResponse, TimesheetResponse
from .api.server import run
from .config import get_settings
from .database import Database, get_db, set_db
from .errors import TaskLedgerError
from .models import Caller, Project, ProjectRef, Role, Task, TaskPriority, TaskStatus, User
from .observability import RequestContext, configure_logging, generate_request_id
from .repositories import DirectoryRepository, TaskRepository
from .schema import ensure_schema
from .security import KeyManager
from .services import TimeLogService, TimesheetService
from .timesheet import AggregationMode, TimeRange

log = logging.getLogger(__name__)


def _open_db(args) -> Database:
    if args.db:
        set_db(Database(args.db))
    db = get_db()
    ensure_schema(db)
    return db


# =============================================================================
# Commands
# =============================================================================


def cmd_init_db(args) -> int:
    """Create the schema."""
    db = _open_db(args)
    print(f"Database ready: {db.db_path}")
    return 0


def cmd_add_user(args) -> int:
    repo = DirectoryRepository(_open_db(args))
    user = User(name=args.name, email=args.email, role=Role(args.role), avatar=args.avatar)
    repo.add_user(user)
    print(user.id)
    return 0


def cmd_add_project(args) -> int:
    repo = DirectoryRepository(_open_db(args))
    project = Project(
        name=args.name,
        manager_id=args.manager,
        description=args.description,
        team=list(args.member or []),
    )
    repo.add_project(project)
    print(project.id)
    return 0


def cmd_add_task(args) -> int:
    db = _open_db(args)
    directory = DirectoryRepository(db)

    project = None
    if args.project:
        found = directory.get_project(args.project)
        if found is None:
            print(f"Error: Unknown project: {args.project}", file=sys.stderr)
            return 1
        project = ProjectRef(id=found.id, name=found.name)

    people = {}
    for role_name in ("assignee", "reporter"):
        user_id = getattr(args, role_name)
        if user_id is None:
            people[role_name] = None
            continue
        user = directory.get_user(user_id)
        if user is None:
            print(f"Error: Unknown {role_name}: {user_id}", file=sys.stderr)
            return 1
        people[role_name] = user.ref()

    task = Task(
        title=args.title,
        description=args.description,
        status=TaskStatus(args.status),
        priority=TaskPriority(args.priority),
        project=project,
        assignee=people["assignee"],
        reporter=people["reporter"],
        estimated_hours=args.estimated_hours,
    )
    TaskRepository(db).insert(task)
    print(task.id)
    return 0


def cmd_create_key(args) -> int:
    """Create a new API key."""
    try:
        key, key_info = KeyManager(_open_db(args)).create_key(args.user, args.name)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Print the key ONCE (only time it's visible)
    print("\n" + "=" * 70)
    print("API KEY CREATED - SAVE THIS NOW")
    print("=" * 70)
    print(f"Key ID:       {key_info.id}")
    print(f"User:         {key_info.user_id}")
    print(f"Name:         {key_info.name}")
    print(f"Created:      {key_info.created_at}")
    print("\nAPI Key (save in a secure location):")
    print(f"  {key}")
    print("=" * 70)
    print("\nWarning: This key will not be displayed again!")
    print("=" * 70 + "\n")
    return 0


def cmd_revoke_key(args) -> int:
    if KeyManager(_open_db(args)).revoke_key(args.key_id):
        print(f"Successfully revoked key: {args.key_id}")
        return 0
    print(f"Key not found: {args.key_id}", file=sys.stderr)
    return 1


def cmd_list_keys(args) -> int:
    keys = KeyManager(_open_db(args)).list_keys(args.user)
    if not keys:
        print("No API keys found.")
        return 0

    print(f"{'ID':<22} {'User':<22} {'Name':<20} {'Status':<8} {'Last Used':<26}")
    for key in keys:
        status = "active" if key.is_active else "revoked"
        print(
            f"{key.id:<22} {key.user_id:<22} {key.name:<20} {status:<8} "
            f"{key.last_used_at or 'never':<26}"
        )
    return 0


def cmd_log_time(args) -> int:
    """Log time on a task as the given user."""
    db = _open_db(args)
    user = DirectoryRepository(db).get_user(args.user)
    if user is None:
        print(f"Error: Unknown user: {args.user}", file=sys.stderr)
        return 1

    caller = Caller(user_id=user.id, name=user.name, role=user.role, email=user.email)
    task = TimeLogService(db).log_time(args.task, caller, hours=args.hours, minutes=args.minutes)
    print(
        f"Logged {args.hours}h{args.minutes:02d}m on {task.id}; "
        f"actual hours now {task.actual_hours:.2f}"
    )
    return 0


def cmd_timesheet(args) -> int:
    """Print the timesheet as JSON."""
    service = TimesheetService(_open_db(args), get_settings())
    result = service.timesheet(
        user_id=args.user,
        project_id=args.project,
        time_range=args.time_range,
        start_date=args.start_date,
        end_date=args.end_date,
        search=args.search,
        view_mode=args.view_mode,
    )
    print(TimesheetResponse.of(result).model_dump_json(by_alias=True, indent=2))
    return 0


def cmd_time_report(args) -> int:
    """Print the time report as JSON."""
    service = TimesheetService(_open_db(args), get_settings())
    report = service.time_report(
        period=args.period, start=args.start, end=args.end, project_id=args.project
    )
    print(TimeReportResponse.of(report).model_dump_json(by_alias=True, indent=2))
    return 0


def cmd_serve(args) -> int:
    if args.db:
        set_db(Database(args.db))
    run(host=args.host, port=args.port, reload=args.reload)
    return 0


# =============================================================================
# Parser
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskledger",
        description="Task time logging and timesheet reports",
        epilog=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--db", help="Database path (default: configured path)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("init-db", help="Create the database schema")
    p.set_defaults(func=cmd_init_db)

    p = subparsers.add_parser("add-user", help="Add a user")
    p.add_argument("--name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--role", choices=[r.value for r in Role], default=Role.STANDARD.value)
    p.add_argument("--avatar")
    p.set_defaults(func=cmd_add_user)

    p = subparsers.add_parser("add-project", help="Add a project")
    p.add_argument("--name", required=True)
    p.add_argument("--manager", help="Manager user ID")
    p.add_argument("--member", action="append", help="Team member user ID (repeatable)")
    p.add_argument("--description")
    p.set_defaults(func=cmd_add_project)

    p = subparsers.add_parser("add-task", help="Add a task")
    p.add_argument("--title", required=True)
    p.add_argument("--project", help="Project ID")
    p.add_argument("--assignee", help="Assignee user ID")
    p.add_argument("--reporter", help="Reporter user ID")
    p.add_argument("--description")
    p.add_argument("--status", choices=[s.value for s in TaskStatus], default=TaskStatus.TODO.value)
    p.add_argument(
        "--priority", choices=[s.value for s in TaskPriority], default=TaskPriority.MEDIUM.value
    )
    p.add_argument("--estimated-hours", type=float, default=0.0)
    p.set_defaults(func=cmd_add_task)

    p = subparsers.add_parser("create-key", help="Create an API key for a user")
    p.add_argument("--user", required=True, help="Owner user ID")
    p.add_argument("--name", required=True, help="Human-readable name for the key")
    p.set_defaults(func=cmd_create_key)

    p = subparsers.add_parser("revoke-key", help="Revoke an API key")
    p.add_argument("--key-id", required=True)
    p.set_defaults(func=cmd_revoke_key)

    p = subparsers.add_parser("list-keys", help="List API keys")
    p.add_argument("--user", help="Only keys of this user")
    p.set_defaults(func=cmd_list_keys)

    p = subparsers.add_parser("log-time", help="Log time on a task")
    p.add_argument("--task", required=True)
    p.add_argument("--user", required=True, help="Acting user ID")
    p.add_argument("--hours", type=int, default=0)
    p.add_argument("--minutes", type=int, default=0)
    p.set_defaults(func=cmd_log_time)

    p = subparsers.add_parser("timesheet", help="Print the timesheet as JSON")
    p.add_argument(
        "--view-mode",
        choices=[m.value for m in AggregationMode],
        default=AggregationMode.BY_USER.value,
    )
    p.add_argument("--time-range", choices=[t.value for t in TimeRange])
    p.add_argument("--start-date")
    p.add_argument("--end-date")
    p.add_argument("--user", help="Only this user's logs")
    p.add_argument("--project", help="Only this project's tasks")
    p.add_argument("--search")
    p.set_defaults(func=cmd_timesheet)

    p = subparsers.add_parser("time-report", help="Print the time report as JSON")
    p.add_argument("--period", help='Last N days or "this-month"')
    p.add_argument("--start")
    p.add_argument("--end")
    p.add_argument("--project")
    p.set_defaults(func=cmd_time_report)

    p = subparsers.add_parser("serve", help="Run the API server")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8420)
    p.add_argument("--reload", action="store_true")
    p.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)

    with RequestContext(request_id=generate_request_id("cli")):
        try:
            return args.func(args)
        except TaskLedgerError as e:
            log.debug(f"{args.command} failed: {e.code}")
            print(f"Error: {e.message}", file=sys.stderr)
            return 1
        except sqlite3.IntegrityError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(main())
