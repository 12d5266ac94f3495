import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..dependencies import get_current_user, get_db, get_or_create_settings
from ..planner import schedule_tasks_daily, subject_progress, total_hours_for_subject

router = APIRouter(prefix="/subjects", tags=["subjects"])
logger = logging.getLogger(__name__)


def get_owned_subject(db: Session, user: models.User, subject_id: int) -> models.Subject:
    subject = (
        db.query(models.Subject)
        .filter(models.Subject.user_id == user.id, models.Subject.id == subject_id)
        .first()
    )
    if not subject:
        raise HTTPException(status_code=404, detail="Subject not found")
    return subject


def _subject_detail(subject: models.Subject) -> dict:
    detail = schemas.SubjectOut.model_validate(subject).model_dump()
    detail["tasks"] = subject.tasks
    detail["progress"] = subject_progress(subject.tasks)
    detail["total_hours"] = total_hours_for_subject(subject.sessions, subject.id)
    return detail


@router.post("/", response_model=schemas.SubjectOut)
def create_subject(
    subject_in: schemas.SubjectCreate,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    subject = models.Subject(user_id=user.id, **subject_in.model_dump())
    db.add(subject)
    db.commit()
    db.refresh(subject)
    return subject


@router.get("/", response_model=list[schemas.SubjectOut])
def list_subjects(category: str | None = None, db: Session = Depends(get_db), user=Depends(get_current_user)):
    query = db.query(models.Subject).filter(models.Subject.user_id == user.id)
    if category:
        query = query.filter(models.Subject.category == category)
    return query.order_by(models.Subject.created_at.asc(), models.Subject.id.asc()).all()


@router.get("/{subject_id}", response_model=schemas.SubjectDetailOut)
def get_subject(subject_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return _subject_detail(get_owned_subject(db, user, subject_id))


@router.patch("/{subject_id}", response_model=schemas.SubjectOut)
def update_subject(
    subject_id: int,
    subject_in: schemas.SubjectUpdate,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    subject = get_owned_subject(db, user, subject_id)
    for field, value in subject_in.model_dump(exclude_unset=True).items():
        setattr(subject, field, value)
    db.commit()
    db.refresh(subject)
    return subject


@router.delete("/{subject_id}")
def delete_subject(subject_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    subject = get_owned_subject(db, user, subject_id)
    # journal entries outlive the subject
    db.query(models.Blog).filter(models.Blog.subject_id == subject.id).update({"subject_id": None})
    db.delete(subject)
    db.commit()
    return {"detail": "Subject deleted"}


@router.post("/{subject_id}/schedule", response_model=schemas.ScheduleOut)
def schedule_subject_tasks(
    subject_id: int,
    schedule_req: schemas.ScheduleRequest | None = None,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    """Spread the subject's pending tasks over the planning horizon and store the due dates."""
    schedule_req = schedule_req or schemas.ScheduleRequest()
    subject = get_owned_subject(db, user, subject_id)
    user_settings = get_or_create_settings(db, user.id)

    days = schedule_req.days or user_settings.planning_days
    minutes_per_day = schedule_req.minutes_per_day or int(round(subject.daily_goal_hours * 60))
    # Day boundaries follow the caller's wall clock
    now = schedule_req.now.replace(tzinfo=None) if schedule_req.now else datetime.now()

    pending = [task for task in subject.tasks if not task.completed]
    try:
        assignments = schedule_tasks_daily(pending, days=days, minutes_per_day=minutes_per_day, now=now)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if schedule_req.apply:
        for task in pending:
            task.due_date = datetime.fromisoformat(assignments[task.id])
        db.commit()
        logger.info(
            "Scheduled %s tasks for subject id=%s over %s days (%s min/day)",
            len(assignments),
            subject.id,
            days,
            minutes_per_day,
        )

    return {"assignments": assignments, "tasks": pending}
