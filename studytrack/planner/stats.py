from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from .dates import start_of_day, to_datetime


def _session_day(session) -> Optional[datetime]:
    value = to_datetime(getattr(session, "date", None))
    return start_of_day(value) if value else None


def _hours(session) -> float:
    return (getattr(session, "duration_minutes", 0) or 0) / 60.0


def total_hours_for_subject(sessions: Iterable[Any], subject_id: int) -> float:
    return sum(_hours(s) for s in sessions if s.subject_id == subject_id)


def sessions_for_day(sessions: Iterable[Any], day: date | datetime) -> List[Any]:
    target = start_of_day(day)
    return [s for s in sessions if _session_day(s) == target]


def total_hours_for_day(sessions: Iterable[Any], day: date | datetime) -> float:
    return sum(_hours(s) for s in sessions_for_day(sessions, day))


def check_daily_goals(subjects: Iterable[Any], sessions: Iterable[Any], day: date | datetime) -> List[Dict[str, Any]]:
    day_sessions = sessions_for_day(sessions, day)
    results = []
    for subject in subjects:
        hours = sum(_hours(s) for s in day_sessions if s.subject_id == subject.id)
        goal = subject.daily_goal_hours or 0
        results.append(
            {
                "subject": subject,
                "hours_studied": hours,
                "goal_met": hours >= goal,
                "progress_percent": (hours / goal) * 100 if goal > 0 else 0.0,
            }
        )
    return results


def subject_progress(tasks: Iterable[Any]) -> float:
    tasks = list(tasks)
    if not tasks:
        return 0.0
    completed = sum(1 for t in tasks if t.completed)
    return completed / len(tasks) * 100


def weekly_stats(sessions: Iterable[Any], now: datetime) -> Dict[str, Any]:
    """Totals for the last seven days, today included."""
    today = start_of_day(now)
    window_start = today - timedelta(days=6)
    recent = [s for s in sessions if (d := _session_day(s)) is not None and window_start <= d <= today]
    return {
        "total_hours": sum(_hours(s) for s in recent),
        "total_sessions": len(recent),
        "active_days": len({_session_day(s) for s in recent}),
    }


def weekly_hours(sessions: Iterable[Any], now: datetime, weeks: int = 4) -> List[Dict[str, Any]]:
    """Hours per trailing 7-day window, oldest window first."""
    today = start_of_day(now)
    windows = []
    for index in range(weeks - 1, -1, -1):
        end = today - timedelta(days=7 * index)
        windows.append({"week_start": end - timedelta(days=6), "week_end": end, "hours": 0.0})
    for session in sessions:
        day = _session_day(session)
        if day is None:
            continue
        for window in windows:
            if window["week_start"] <= day <= window["week_end"]:
                window["hours"] += _hours(session)
                break
    return windows


def study_streak(sessions: Iterable[Any], now: datetime) -> int:
    """Consecutive study days ending today, or yesterday if today is still empty."""
    days = {d for s in sessions if (d := _session_day(s)) is not None}
    cursor = start_of_day(now)
    if cursor not in days:
        cursor -= timedelta(days=1)
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak
