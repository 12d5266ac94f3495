import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..dependencies import get_current_user, get_db, get_or_create_settings
from ..planner import (
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
from .subjects import get_owned_subject

router = APIRouter(prefix="/timer", tags=["timer"])
logger = logging.getLogger(__name__)


def _to_state(record: models.TimerRecord) -> TimerState:
    return TimerState(
        subject_id=record.subject_id,
        mode=TimerMode(record.mode),
        target_seconds=record.target_seconds,
        is_running=record.is_running,
        elapsed_seconds=record.elapsed_seconds,
        started_at=record.started_at,
    )


def _store(record: models.TimerRecord, state: TimerState) -> None:
    record.mode = state.mode
    record.target_seconds = state.target_seconds
    record.is_running = state.is_running
    record.elapsed_seconds = state.elapsed_seconds
    record.started_at = state.started_at


def _timer_out(state: TimerState, now: datetime) -> dict:
    return {
        "subject_id": state.subject_id,
        "mode": state.mode,
        "target_seconds": state.target_seconds,
        "is_running": state.is_running,
        "elapsed_seconds": elapsed_seconds(state, now),
        "remaining_seconds": remaining_seconds(state, now),
        "finished": is_finished(state, now),
        "started_at": state.started_at,
    }


def _target_from_settings(user_settings: models.UserSettings, mode: TimerMode) -> int:
    minutes = {
        TimerMode.focus: 0,
        TimerMode.pomodoro: user_settings.pomodoro_minutes,
        TimerMode.short_break: user_settings.short_break_minutes,
        TimerMode.long_break: user_settings.long_break_minutes,
        TimerMode.custom: user_settings.custom_minutes,
    }[mode]
    return minutes * 60


def _user_timers(db: Session, user_id: int) -> list[models.TimerRecord]:
    return (
        db.query(models.TimerRecord)
        .filter(models.TimerRecord.user_id == user_id)
        .order_by(models.TimerRecord.subject_id.asc())
        .all()
    )


def _get_timer(db: Session, user, subject_id: int) -> models.TimerRecord:
    record = (
        db.query(models.TimerRecord)
        .filter(models.TimerRecord.user_id == user.id, models.TimerRecord.subject_id == subject_id)
        .first()
    )
    if not record:
        raise HTTPException(status_code=404, detail="Timer not found")
    return record


def _stop_others(db: Session, user_id: int, subject_id: int, now: datetime) -> None:
    # only one timer runs at a time
    for record in _user_timers(db, user_id):
        if record.subject_id != subject_id and record.is_running:
            _store(record, stop_timer(_to_state(record), now=now))


@router.get("/", response_model=schemas.TimerStateOut)
def timer_state(db: Session = Depends(get_db), user=Depends(get_current_user)):
    now = datetime.now()
    timers = [_timer_out(_to_state(record), now) for record in _user_timers(db, user.id)]
    active = next((timer for timer in timers if timer["is_running"]), None)
    return {"active": active, "timers": timers}


@router.post("/start", response_model=schemas.TimerOut)
def start(start_req: schemas.TimerStartRequest, db: Session = Depends(get_db), user=Depends(get_current_user)):
    subject = get_owned_subject(db, user, start_req.subject_id)
    now = datetime.now()
    target = start_req.target_seconds
    if target is None:
        target = _target_from_settings(get_or_create_settings(db, user.id), start_req.mode)
    try:
        state = start_timer(subject.id, start_req.mode, target, start_req.elapsed_seconds, now=now)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    _stop_others(db, user.id, subject.id, now)
    record = (
        db.query(models.TimerRecord)
        .filter(models.TimerRecord.user_id == user.id, models.TimerRecord.subject_id == subject.id)
        .first()
    )
    if record is None:
        record = models.TimerRecord(user_id=user.id, subject_id=subject.id)
        db.add(record)
    _store(record, state)
    db.commit()
    return _timer_out(state, now)


@router.post("/{subject_id}/pause", response_model=schemas.TimerOut)
def pause(subject_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    record = _get_timer(db, user, subject_id)
    now = datetime.now()
    state = pause_timer(_to_state(record), now=now)
    _store(record, state)
    db.commit()
    return _timer_out(state, now)


@router.post("/{subject_id}/resume", response_model=schemas.TimerOut)
def resume(subject_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    record = _get_timer(db, user, subject_id)
    now = datetime.now()
    _stop_others(db, user.id, subject_id, now)
    state = resume_timer(_to_state(record), now=now)
    _store(record, state)
    db.commit()
    return _timer_out(state, now)


@router.post("/{subject_id}/reset", response_model=schemas.TimerOut)
def reset(subject_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    record = _get_timer(db, user, subject_id)
    now = datetime.now()
    state = reset_timer(_to_state(record), now=now)
    _store(record, state)
    db.commit()
    return _timer_out(state, now)


@router.post("/{subject_id}/complete", response_model=schemas.TimerCompleteOut)
def complete(
    subject_id: int,
    complete_req: schemas.TimerCompleteRequest | None = None,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    """Log the timer's study minutes as a session and clear the timer."""
    record = _get_timer(db, user, subject_id)
    now = datetime.now()
    state = _to_state(record)
    minutes = session_minutes(state, now)

    study_session = None
    if minutes > 0:
        study_session = models.StudySession(
            user_id=user.id,
            subject_id=subject_id,
            date=now,
            duration_minutes=minutes,
            notes=complete_req.notes if complete_req else "",
        )
        db.add(study_session)

    state = reset_timer(stop_timer(state, now=now), now=now)
    _store(record, state)
    db.commit()
    if study_session is not None:
        db.refresh(study_session)
        logger.info("Timer logged %s minutes for subject id=%s", minutes, subject_id)
    return {"timer": _timer_out(state, now), "session": study_session}
