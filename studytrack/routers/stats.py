from datetime import date, datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import models, schemas
from ..dependencies import get_current_user, get_db
from ..planner import (
    check_daily_goals,
    study_streak,
    subject_progress,
    total_hours_for_subject,
    weekly_hours,
    weekly_stats,
)

router = APIRouter(prefix="/stats", tags=["stats"])


def _load(db: Session, user_id: int):
    subjects = (
        db.query(models.Subject)
        .filter(models.Subject.user_id == user_id)
        .order_by(models.Subject.id.asc())
        .all()
    )
    sessions = (
        db.query(models.StudySession)
        .filter(models.StudySession.user_id == user_id)
        .order_by(models.StudySession.date.asc())
        .all()
    )
    return subjects, sessions


def daily_goal_rows(subjects, sessions, day) -> list[dict]:
    return [
        {
            "subject_id": goal["subject"].id,
            "subject_name": goal["subject"].name,
            "daily_goal_hours": goal["subject"].daily_goal_hours,
            "hours_studied": goal["hours_studied"],
            "goal_met": goal["goal_met"],
            "progress_percent": goal["progress_percent"],
        }
        for goal in check_daily_goals(subjects, sessions, day)
    ]


@router.get("/daily-goals", response_model=list[schemas.DailyGoalOut])
def daily_goals(day: date | None = None, db: Session = Depends(get_db), user=Depends(get_current_user)):
    subjects, sessions = _load(db, user.id)
    return daily_goal_rows(subjects, sessions, day or datetime.now())


@router.get("/summary", response_model=schemas.StatsSummaryOut)
def summary(weeks: int = 4, db: Session = Depends(get_db), user=Depends(get_current_user)):
    subjects, sessions = _load(db, user.id)
    now = datetime.now()
    per_subject = [
        {
            "subject_id": subject.id,
            "subject_name": subject.name,
            "total_hours": total_hours_for_subject(sessions, subject.id),
            "progress": subject_progress(subject.tasks),
        }
        for subject in subjects
    ]
    return {
        "weekly": weekly_stats(sessions, now),
        "weekly_hours": weekly_hours(sessions, now, weeks=max(1, weeks)),
        "streak": study_streak(sessions, now),
        "subjects": per_subject,
        "total_hours": sum(row["total_hours"] for row in per_subject),
    }
