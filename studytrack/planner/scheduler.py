"""
Greedy daily scheduler that spreads pending tasks over the next N days.

Each day in the horizon gets a capacity budget in minutes. Tasks are taken in
priority order (due date first, then known estimate, then age) and placed on
the first day with room. Tasks bigger than a whole day go to the first empty
day, and anything left over lands on the day with the most room, so nothing
is ever dropped.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .dates import EPOCH, add_days, format_iso_date, start_of_day, to_datetime

DEFAULT_DAYS = 7
DEFAULT_MINUTES_PER_DAY = 120
DEFAULT_TASK_MINUTES = 30


@dataclass
class SchedulableTask:
    id: Any
    completed: bool = False
    estimated_minutes: Optional[float] = None
    due_date: Optional[Any] = None
    created_at: Optional[Any] = None


@dataclass
class DayBucket:
    date: datetime
    remaining: float


def _has_estimate(task) -> bool:
    value = getattr(task, "estimated_minutes", None)
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _minutes_needed(task) -> float:
    if _has_estimate(task) and task.estimated_minutes > 0:
        return task.estimated_minutes
    return DEFAULT_TASK_MINUTES


def _priority_key(task):
    due = to_datetime(getattr(task, "due_date", None))
    created = to_datetime(getattr(task, "created_at", None)) or EPOCH
    if due is not None:
        return (0, due, 0, created)
    return (1, EPOCH, 0 if _has_estimate(task) else 1, created)


def sort_for_scheduling(tasks: Iterable[Any]) -> List[Any]:
    return sorted(tasks, key=_priority_key)


def build_day_buckets(days: int, minutes_per_day: float, now: datetime) -> List[DayBucket]:
    return [
        DayBucket(date=start_of_day(add_days(now, offset)), remaining=minutes_per_day)
        for offset in range(days)
    ]


def _pick_bucket(buckets: List[DayBucket], need: float, minutes_per_day: float) -> DayBucket:
    for bucket in buckets:
        if bucket.remaining >= need:
            return bucket

    # A task longer than a full day can never fit; give it a day of its own.
    if need > minutes_per_day:
        for bucket in buckets:
            if bucket.remaining == minutes_per_day:
                return bucket

    best = buckets[0]
    for bucket in buckets[1:]:
        if bucket.remaining > best.remaining:
            best = bucket
    return best


def allocate_to_buckets(
    tasks: Sequence[Any],
    buckets: List[DayBucket],
    minutes_per_day: float,
) -> Dict[Any, DayBucket]:
    """Assign every non-completed task to a bucket, mutating bucket capacity."""
    assigned: Dict[Any, DayBucket] = {}
    pending = [t for t in tasks if not getattr(t, "completed", False)]
    for task in sort_for_scheduling(pending):
        need = _minutes_needed(task)
        bucket = _pick_bucket(buckets, need, minutes_per_day)
        bucket.remaining -= need
        assigned[task.id] = bucket
    return assigned


def schedule_tasks_daily(
    tasks: Sequence[Any],
    *,
    days: int = DEFAULT_DAYS,
    minutes_per_day: float = DEFAULT_MINUTES_PER_DAY,
    now: Optional[datetime] = None,
) -> Dict[Any, str]:
    """
    Map each pending task id to the ISO timestamp of the day it should be done.

    Completed tasks are skipped entirely. Capacity is soft: a day can end up
    overbooked when a single task exceeds ``minutes_per_day`` or when no day
    has room left. The input tasks are never modified.
    """
    if days < 1:
        raise ValueError("days must be at least 1")
    if minutes_per_day <= 0:
        raise ValueError("minutes_per_day must be positive")

    now = now or datetime.now()
    buckets = build_day_buckets(days, minutes_per_day, now)
    assigned = allocate_to_buckets(tasks, buckets, minutes_per_day)
    return {task_id: format_iso_date(bucket.date) for task_id, bucket in assigned.items()}


def bucket_tasks_by_day(
    tasks: Iterable[Any],
    *,
    days: int = DEFAULT_DAYS,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Group pending tasks by the day they are due, for the planner board."""
    now = now or datetime.now()
    first_day = start_of_day(now).replace(tzinfo=None)
    day_keys = [start_of_day(add_days(first_day, offset)) for offset in range(days)]
    by_day: Dict[date, List[Any]] = {day: [] for day in day_keys}
    unscheduled: List[Any] = []
    overdue: List[Any] = []
    later: List[Any] = []

    for task in tasks:
        if getattr(task, "completed", False):
            continue
        due = to_datetime(getattr(task, "due_date", None))
        if due is None:
            unscheduled.append(task)
            continue
        day = start_of_day(due)
        if day < first_day:
            overdue.append(task)
        elif day in by_day:
            by_day[day].append(task)
        else:
            later.append(task)

    return {
        "days": [{"date": format_iso_date(day), "tasks": by_day[day]} for day in day_keys],
        "overdue": overdue,
        "later": later,
        "unscheduled": unscheduled,
    }
