from datetime import date, datetime, time, timedelta

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..dependencies import get_current_user, get_db
from .subjects import get_owned_subject

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("/", response_model=schemas.StudySessionOut)
def log_session(
    session_in: schemas.StudySessionCreate,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    subject = get_owned_subject(db, user, session_in.subject_id)
    study_session = models.StudySession(
        user_id=user.id,
        subject_id=subject.id,
        duration_minutes=session_in.duration_minutes,
        date=session_in.date or datetime.now(),
        notes=session_in.notes,
    )
    db.add(study_session)
    db.commit()
    db.refresh(study_session)
    return study_session


@router.get("/", response_model=list[schemas.StudySessionOut])
def list_sessions(
    subject_id: int | None = None,
    day: date | None = None,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    query = db.query(models.StudySession).filter(models.StudySession.user_id == user.id)
    if subject_id is not None:
        query = query.filter(models.StudySession.subject_id == subject_id)
    if day is not None:
        start = datetime.combine(day, time.min)
        query = query.filter(
            models.StudySession.date >= start,
            models.StudySession.date < start + timedelta(days=1),
        )
    return query.order_by(models.StudySession.date.asc()).all()


@router.delete("/{session_id}")
def delete_session(session_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    study_session = (
        db.query(models.StudySession)
        .filter(models.StudySession.user_id == user.id, models.StudySession.id == session_id)
        .first()
    )
    if not study_session:
        raise HTTPException(status_code=404, detail="Session not found")
    db.delete(study_session)
    db.commit()
    return {"detail": "Session deleted"}
