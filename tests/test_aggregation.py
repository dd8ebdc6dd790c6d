"""
Tests for the three timesheet folds: by-user, by-task and detailed.
"""

import pytest

from taskledger.models import TaskStatus
from taskledger.timesheet import (
    AggregationMode,
    TimeLogQuery,
    aggregate,
    aggregate_by_task,
    aggregate_by_user,
    aggregate_detailed,
    filter_time_logs,
)
from taskledger.timesheet.aggregation import UNKNOWN_PROJECT
from tests.fixtures.builders import ALPHA, BETA, U1, U2, U3, at, example_tasks, log, task


def _records(tasks, **query):
    return filter_time_logs(tasks, TimeLogQuery(**query))


# =============================================================================
# by-user
# =============================================================================


class TestByUser:
    def test_worked_example(self):
        rows = aggregate_by_user(_records(example_tasks()))

        assert [r.user_id for r in rows] == ["u1", "u2"]
        u1, u2 = rows
        assert u1.total_hours == 3.5
        assert u1.tasks_count == 1
        assert u1.tasks[0].hours == 3.5
        assert u1.projects == ["Alpha"]
        assert u2.total_hours == 0.75
        assert u2.tasks_count == 1
        assert u2.projects == ["Beta"]

    def test_three_logs_on_one_task_count_once(self):
        tasks = [task("A", "Task A", ALPHA, [log(U1, 1), log(U1, 0, 30), log(U1, 2)])]
        (row,) = aggregate_by_user(_records(tasks))
        assert row.tasks_count == 1
        assert row.total_hours == 3.5

    def test_hour_and_a_half_is_exact(self):
        tasks = [task("A", "Task A", ALPHA, [log(U1, 1, 30)])]
        (row,) = aggregate_by_user(_records(tasks))
        assert row.total_hours == 1.5

    def test_projects_are_distinct_in_first_seen_order(self):
        tasks = [
            task("B", "In Beta", BETA, [log(U1, 1)]),
            task("A", "In Alpha", ALPHA, [log(U1, 1)]),
            task("C", "Also Beta", BETA, [log(U1, 1)]),
        ]
        (row,) = aggregate_by_user(_records(tasks))
        assert row.projects == ["Beta", "Alpha"]
        assert row.tasks_count == 3

    def test_task_without_project_reports_unknown(self):
        tasks = [task("N", "Loose", None, [log(U1, 0, 30)])]
        (row,) = aggregate_by_user(_records(tasks))
        assert row.tasks[0].project_name == UNKNOWN_PROJECT
        assert row.projects == []

    def test_task_rows_carry_status(self):
        tasks = [task("A", "Task A", ALPHA, [log(U1, 1)], status=TaskStatus.REVIEW)]
        (row,) = aggregate_by_user(_records(tasks))
        assert row.tasks[0].status == TaskStatus.REVIEW

    def test_users_without_entries_are_absent(self):
        rows = aggregate_by_user(_records(example_tasks(), user_id="u2"))
        assert [r.user_id for r in rows] == ["u2"]


# =============================================================================
# by-task
# =============================================================================


class TestByTask:
    def test_totals_and_contributors(self):
        tasks = [
            task("A", "Task A", ALPHA, [log(U1, 1), log(U2, 0, 30), log(U1, 0, 15)]),
        ]
        (row,) = aggregate_by_task(_records(tasks))

        assert row.total_hours == 1.75
        assert [(c.user_id, c.user_name) for c in row.contributors] == [("u1", "Una"), ("u2", "Ben")]
        assert [(b.user_id, b.hours) for b in row.user_breakdown] == [("u1", 1.25), ("u2", 0.5)]

    def test_last_log_is_latest_even_when_appended_out_of_order(self):
        tasks = [
            task(
                "A",
                "Task A",
                ALPHA,
                [log(U1, 1, when=at(14)), log(U1, 1, when=at(10)), log(U1, 1, when=at(12))],
            )
        ]
        (row,) = aggregate_by_task(_records(tasks))
        assert row.user_breakdown[0].last_log == at(14)

    def test_tasks_without_entries_are_absent(self):
        tasks = example_tasks() + [task("E", "Empty", ALPHA, [])]
        rows = aggregate_by_task(_records(tasks))
        assert [r.task_id for r in rows] == ["A", "B"]

    def test_unknown_project_name(self):
        tasks = [task("N", "Loose", None, [log(U3, 1)])]
        (row,) = aggregate_by_task(_records(tasks))
        assert row.project_name == UNKNOWN_PROJECT


# =============================================================================
# detailed
# =============================================================================


class TestDetailed:
    def test_one_row_per_entry_in_filter_order(self):
        rows = aggregate_detailed(_records(example_tasks()))
        assert [(r.task_id, r.user_id, r.hours) for r in rows] == [
            ("A", "u1", 2.0),
            ("A", "u1", 1.5),
            ("B", "u2", 0.75),
        ]

    def test_row_fields(self):
        rows = aggregate_detailed(_records(example_tasks()))
        row = rows[-1]
        assert row.user_name == "Ben"
        assert row.user_email == "ben@example.com"
        assert row.task_title == "Task B"
        assert row.project_name == "Beta"
        assert row.logged_at == at(14)
        assert row.status == TaskStatus.TODO


# =============================================================================
# Cross-mode
# =============================================================================


class TestAllModes:
    @pytest.mark.parametrize("mode", list(AggregationMode))
    def test_sum_is_the_same_in_every_mode(self, mode):
        tasks = example_tasks() + [task("C", "Task C", ALPHA, [log(U2, 0, 20), log(U3, 4, 5)])]
        records = _records(tasks)
        expected = sum(r.total_minutes for r in records)

        rows = aggregate(records, mode)

        assert sum(row.minutes for row in rows) == expected

    @pytest.mark.parametrize("mode", ["by-user", "by-task", "detailed"])
    def test_empty_input_gives_empty_rows(self, mode):
        assert aggregate([], mode) == []

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            aggregate([], "by-week")
