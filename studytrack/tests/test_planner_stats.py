from datetime import date, datetime
from types import SimpleNamespace

from studytrack.planner import (
    check_daily_goals,
    sessions_for_day,
    study_streak,
    subject_progress,
    total_hours_for_day,
    total_hours_for_subject,
    weekly_hours,
    weekly_stats,
)

NOW = datetime(2024, 3, 14, 18, 30)


def _session(subject_id, when, minutes):
    return SimpleNamespace(subject_id=subject_id, date=when, duration_minutes=minutes)


SESSIONS = [
    _session(1, datetime(2024, 3, 14, 9, 0), 90),
    _session(2, datetime(2024, 3, 14, 13, 0), 30),
    _session(1, datetime(2024, 3, 13, 20, 0), 60),
    _session(1, datetime(2024, 3, 12, 7, 0), 45),
    _session(2, datetime(2024, 3, 8, 10, 0), 120),
    _session(1, datetime(2024, 2, 20, 10, 0), 60),
]


def test_hours_per_subject_and_day():
    assert total_hours_for_subject(SESSIONS, 1) == (90 + 60 + 45 + 60) / 60
    assert total_hours_for_subject(SESSIONS, 99) == 0
    assert len(sessions_for_day(SESSIONS, date(2024, 3, 14))) == 2
    assert total_hours_for_day(SESSIONS, NOW) == 2.0


def test_daily_goals():
    subjects = [
        SimpleNamespace(id=1, name="Maths", daily_goal_hours=1.0),
        SimpleNamespace(id=2, name="History", daily_goal_hours=2.0),
        SimpleNamespace(id=3, name="Art", daily_goal_hours=0),
    ]

    goals = {g["subject"].id: g for g in check_daily_goals(subjects, SESSIONS, NOW)}

    assert goals[1]["goal_met"] is True
    assert goals[1]["progress_percent"] == 150.0
    assert goals[2]["goal_met"] is False
    assert goals[2]["hours_studied"] == 0.5
    assert goals[2]["progress_percent"] == 25.0
    assert goals[3]["progress_percent"] == 0.0


def test_subject_progress():
    tasks = [SimpleNamespace(completed=c) for c in (True, False, True, True)]

    assert subject_progress(tasks) == 75.0
    assert subject_progress([]) == 0.0


def test_weekly_stats_cover_last_seven_days():
    stats = weekly_stats(SESSIONS, NOW)

    assert stats["total_sessions"] == 5
    assert stats["active_days"] == 4
    assert stats["total_hours"] == (90 + 30 + 60 + 45 + 120) / 60


def test_weekly_hours_oldest_first():
    weeks = weekly_hours(SESSIONS, NOW, weeks=4)

    assert len(weeks) == 4
    assert weeks[-1]["week_end"] == datetime(2024, 3, 14)
    assert weeks[-1]["week_start"] == datetime(2024, 3, 8)
    assert weeks[-1]["hours"] == (90 + 30 + 60 + 45 + 120) / 60
    assert weeks[0]["week_start"] == datetime(2024, 2, 16)
    assert weeks[0]["hours"] == 1.0
    assert weeks[1]["hours"] == 0.0


def test_streak_counts_back_from_today_or_yesterday():
    assert study_streak(SESSIONS, NOW) == 3
    assert study_streak(SESSIONS, datetime(2024, 3, 15, 8)) == 3
    assert study_streak(SESSIONS, datetime(2024, 3, 17)) == 0
    assert study_streak([], NOW) == 0
