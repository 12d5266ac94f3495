from datetime import date, datetime, timedelta, timezone

import pytest

from studytrack.planner import (
    SchedulableTask,
    add_days,
    bucket_tasks_by_day,
    format_iso_date,
    schedule_tasks_daily,
    start_of_day,
)
from studytrack.planner.scheduler import allocate_to_buckets, build_day_buckets, sort_for_scheduling

NOW = datetime(2024, 1, 3, 15, 42, 10)


def _day(offset: int, now: datetime = NOW) -> str:
    return format_iso_date(start_of_day(add_days(now, offset)))


def _mixed_tasks():
    created = datetime(2023, 12, 1)
    return [
        SchedulableTask("done", completed=True, estimated_minutes=50),
        SchedulableTask("due-late", estimated_minutes=45, due_date="2024-01-09"),
        SchedulableTask("due-soon", estimated_minutes=60, due_date=datetime(2024, 1, 4, 9)),
        SchedulableTask("no-estimate", created_at=created + timedelta(days=2)),
        SchedulableTask("estimated", estimated_minutes=90, created_at=created + timedelta(days=3)),
        SchedulableTask("huge", estimated_minutes=300, created_at=created),
        SchedulableTask("also-done", completed=True),
    ]


def test_empty_input_gives_empty_mapping():
    assert schedule_tasks_daily([], now=NOW) == {}


def test_completed_task_is_excluded():
    assert schedule_tasks_daily([SchedulableTask("t1", completed=True, estimated_minutes=50)], now=NOW) == {}


def test_first_fit_moves_to_next_day_when_full():
    tasks = [
        SchedulableTask("a", estimated_minutes=40, created_at=NOW),
        SchedulableTask("b", estimated_minutes=40, created_at=NOW),
    ]

    result = schedule_tasks_daily(tasks, days=2, minutes_per_day=60, now=NOW)

    assert result == {"a": _day(0), "b": _day(1)}


def test_oversized_task_takes_an_empty_day_and_overbooks_it():
    buckets = build_day_buckets(1, 60, NOW)
    assigned = allocate_to_buckets([SchedulableTask("big", estimated_minutes=90)], buckets, 60)

    assert assigned["big"] is buckets[0]
    assert buckets[0].remaining == -30
    assert schedule_tasks_daily([SchedulableTask("big", estimated_minutes=90)], days=1, minutes_per_day=60, now=NOW) == {
        "big": _day(0)
    }


def test_due_date_task_is_placed_before_undated_task():
    tasks = [SchedulableTask("y"), SchedulableTask("x", due_date="2024-01-05")]

    assert [t.id for t in sort_for_scheduling(tasks)] == ["x", "y"]
    assert schedule_tasks_daily(tasks, days=3, minutes_per_day=60, now=datetime(2024, 1, 3)) == {
        "x": "2024-01-03T00:00:00.000",
        "y": "2024-01-03T00:00:00.000",
    }


def test_every_pending_task_is_assigned_exactly_once():
    tasks = _mixed_tasks()

    result = schedule_tasks_daily(tasks, days=3, minutes_per_day=120, now=NOW)

    assert set(result) == {t.id for t in tasks if not t.completed}
    assert "done" not in result and "also-done" not in result


def test_assignments_stay_inside_horizon():
    tasks = [SchedulableTask(f"t{i}", estimated_minutes=55) for i in range(25)] + _mixed_tasks()
    window = {_day(offset) for offset in range(4)}

    result = schedule_tasks_daily(tasks, days=4, minutes_per_day=60, now=NOW)

    assert set(result.values()) <= window
    for value in result.values():
        assert start_of_day(datetime.fromisoformat(value)) == datetime.fromisoformat(value)


def test_same_inputs_give_same_mapping():
    tasks = _mixed_tasks()

    first = schedule_tasks_daily(tasks, days=5, minutes_per_day=90, now=NOW)
    second = schedule_tasks_daily(tasks, days=5, minutes_per_day=90, now=NOW)

    assert first == second


def test_input_tasks_are_not_modified():
    tasks = _mixed_tasks()
    before = [vars(t).copy() for t in tasks]

    schedule_tasks_daily(tasks, days=3, now=NOW)

    assert [vars(t) for t in tasks] == before


def test_priority_order_covers_all_rules():
    ordered = [t.id for t in sort_for_scheduling([t for t in _mixed_tasks() if not t.completed])]

    # due dates first, then known estimates (oldest first), then unknown estimates
    assert ordered == ["due-soon", "due-late", "huge", "estimated", "no-estimate"]


def test_equal_due_dates_fall_back_to_creation_time():
    tasks = [
        SchedulableTask("newer", due_date=date(2024, 1, 6), created_at="2024-01-02T10:00:00"),
        SchedulableTask("older", due_date=date(2024, 1, 6), created_at="2024-01-01T10:00:00"),
    ]

    assert [t.id for t in sort_for_scheduling(tasks)] == ["older", "newer"]


def test_capacity_is_respected_under_normal_load():
    tasks = [SchedulableTask(f"t{i}", estimated_minutes=30) for i in range(10)]
    tasks += [SchedulableTask("u1"), SchedulableTask("u2")]
    buckets = build_day_buckets(3, 120, NOW)

    allocate_to_buckets(tasks, buckets, 120)

    assert all(bucket.remaining >= 0 for bucket in buckets)
    assert sum(120 - bucket.remaining for bucket in buckets) == 12 * 30


def test_last_resort_uses_day_with_most_room():
    tasks = [
        SchedulableTask("a", estimated_minutes=50, created_at="2024-01-01"),
        SchedulableTask("b", estimated_minutes=40, created_at="2024-01-02"),
        SchedulableTask("c", estimated_minutes=45, created_at="2024-01-03"),
    ]

    result = schedule_tasks_daily(tasks, days=2, minutes_per_day=60, now=NOW)

    # day 0 has 10 left, day 1 has 20 left when "c" arrives
    assert result == {"a": _day(0), "b": _day(1), "c": _day(1)}


def test_non_positive_estimate_uses_default_length():
    tasks = [
        SchedulableTask("zero", estimated_minutes=0, created_at="2024-01-01"),
        SchedulableTask("next", estimated_minutes=30, created_at="2024-01-02"),
    ]

    result = schedule_tasks_daily(tasks, days=2, minutes_per_day=60, now=NOW)

    assert result == {"zero": _day(0), "next": _day(0)}


@pytest.mark.parametrize("kwargs", [{"days": 0}, {"days": -2}, {"minutes_per_day": 0}, {"minutes_per_day": -5}])
def test_invalid_options_raise(kwargs):
    with pytest.raises(ValueError):
        schedule_tasks_daily([SchedulableTask("a")], now=NOW, **kwargs)


def test_works_with_plain_objects():
    class Row:
        def __init__(self, id, completed=False, estimated_minutes=None, due_date=None, created_at=None):
            self.id = id
            self.completed = completed
            self.estimated_minutes = estimated_minutes
            self.due_date = due_date
            self.created_at = created_at

    result = schedule_tasks_daily([Row(1, estimated_minutes=20), Row(2, completed=True)], now=NOW)

    assert result == {1: _day(0)}


def test_board_groups_tasks_by_due_day():
    tasks = [
        SchedulableTask("today", due_date=datetime(2024, 1, 3, 20)),
        SchedulableTask("tomorrow", due_date="2024-01-04T00:00:00.000"),
        SchedulableTask("overdue", due_date=date(2024, 1, 1)),
        SchedulableTask("later", due_date=date(2024, 2, 1)),
        SchedulableTask("floating"),
        SchedulableTask("finished", completed=True, due_date=date(2024, 1, 3)),
    ]

    board = bucket_tasks_by_day(tasks, days=3, now=NOW)

    assert [day["date"] for day in board["days"]] == [_day(0), _day(1), _day(2)]
    assert [[t.id for t in day["tasks"]] for day in board["days"]] == [["today"], ["tomorrow"], []]
    assert [t.id for t in board["overdue"]] == ["overdue"]
    assert [t.id for t in board["later"]] == ["later"]
    assert [t.id for t in board["unscheduled"]] == ["floating"]


def test_board_keeps_wall_clock_days_for_aware_now():
    now = datetime(2024, 1, 3, 10, 0, tzinfo=timezone(timedelta(hours=5)))
    tasks = [
        SchedulableTask("today", due_date=datetime(2024, 1, 3, 12)),
        SchedulableTask("yesterday", due_date=datetime(2024, 1, 2, 23)),
    ]

    board = bucket_tasks_by_day(tasks, days=2, now=now)

    assert [day["date"] for day in board["days"]] == ["2024-01-03T00:00:00.000", "2024-01-04T00:00:00.000"]
    assert [[t.id for t in day["tasks"]] for day in board["days"]] == [["today"], []]
    assert [t.id for t in board["overdue"]] == ["yesterday"]
