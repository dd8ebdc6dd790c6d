"""
Tests for timesheet summary statistics.
"""

import pytest

from taskledger.timesheet import (
    AggregationMode,
    TimeLogQuery,
    TimesheetSummary,
    aggregate,
    filter_time_logs,
    summarize,
    summarize_records,
)
from tests.fixtures.builders import ALPHA, BETA, U1, U2, U3, example_tasks, log, task


def test_worked_example_summary():
    records = filter_time_logs(example_tasks(), TimeLogQuery())
    summary = summarize_records(records)

    assert summary.total_hours == 4.25
    assert summary.total_tasks == 2
    assert summary.active_users == 2
    assert summary.avg_hours_per_task == 2.125


def test_average_is_zero_without_tasks():
    summary = TimesheetSummary()
    assert summary.total_tasks == 0
    assert summary.avg_hours_per_task == 0


def test_zero_match_gives_zero_summary():
    records = filter_time_logs(example_tasks(), TimeLogQuery(user_id="nobody"))
    assert records == []
    summary = summarize_records(records)
    assert summary == TimesheetSummary(total_minutes=0, total_tasks=0, active_users=0)
    assert summary.total_hours == 0
    assert summary.avg_hours_per_task == 0


@pytest.mark.parametrize("mode", list(AggregationMode))
def test_summary_is_identical_for_every_mode(mode):
    tasks = [
        task("A", "Task A", ALPHA, [log(U1, 2), log(U2, 0, 10), log(U1, 0, 50)]),
        task("B", "Task B", BETA, [log(U2, 1, 5)]),
        task("C", "Task C", None, [log(U3, 0, 1)]),
    ]
    records = filter_time_logs(tasks, TimeLogQuery())

    from_rows = summarize(aggregate(records, mode), mode)

    assert from_rows == summarize_records(records)


@pytest.mark.parametrize("mode", list(AggregationMode))
def test_summary_of_empty_rows(mode):
    assert summarize([], mode) == TimesheetSummary()
