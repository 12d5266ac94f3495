from __future__ import annotations

from .dates import add_days, format_iso_date, start_of_day, to_datetime
from .scheduler import (
    DEFAULT_DAYS,
    DEFAULT_MINUTES_PER_DAY,
    DEFAULT_TASK_MINUTES,
    SchedulableTask,
    bucket_tasks_by_day,
    schedule_tasks_daily,
)
from .stats import (
    check_daily_goals,
    sessions_for_day,
    study_streak,
    subject_progress,
    total_hours_for_day,
    total_hours_for_subject,
    weekly_hours,
    weekly_stats,
)
from .timer import (
    TimerMode,
    TimerState,
    elapsed_seconds,
    is_finished,
    pause_timer,
    remaining_seconds,
    reset_timer,
    resume_timer,
    session_minutes,
    start_timer,
    stop_timer,
)

__all__ = [
    "DEFAULT_DAYS",
    "DEFAULT_MINUTES_PER_DAY",
    "DEFAULT_TASK_MINUTES",
    "SchedulableTask",
    "TimerMode",
    "TimerState",
    "add_days",
    "bucket_tasks_by_day",
    "check_daily_goals",
    "elapsed_seconds",
    "format_iso_date",
    "is_finished",
    "pause_timer",
    "remaining_seconds",
    "reset_timer",
    "resume_timer",
    "schedule_tasks_daily",
    "session_minutes",
    "sessions_for_day",
    "start_of_day",
    "start_timer",
    "stop_timer",
    "study_streak",
    "subject_progress",
    "to_datetime",
    "total_hours_for_day",
    "total_hours_for_subject",
    "weekly_hours",
    "weekly_stats",
]
