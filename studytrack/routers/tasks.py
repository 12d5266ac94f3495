from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..dependencies import get_current_user, get_db, get_or_create_settings
from ..planner import bucket_tasks_by_day
from .subjects import get_owned_subject

router = APIRouter(tags=["tasks"])


def _get_owned_task(db: Session, user, task_id: int) -> models.Task:
    task = (
        db.query(models.Task)
        .filter(models.Task.user_id == user.id, models.Task.id == task_id)
        .first()
    )
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.post("/subjects/{subject_id}/tasks", response_model=schemas.TaskOut)
def create_task(
    subject_id: int,
    task_in: schemas.TaskCreate,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    subject = get_owned_subject(db, user, subject_id)
    task = models.Task(
        user_id=user.id,
        subject_id=subject.id,
        name=task_in.name.strip(),
        estimated_minutes=task_in.estimated_minutes,
        due_date=task_in.due_date,
        phase=task_in.phase,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


@router.get("/subjects/{subject_id}/tasks", response_model=list[schemas.TaskOut])
def list_subject_tasks(
    subject_id: int,
    completed: bool | None = None,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    subject = get_owned_subject(db, user, subject_id)
    query = db.query(models.Task).filter(models.Task.subject_id == subject.id)
    if completed is not None:
        query = query.filter(models.Task.completed == completed)
    return query.order_by(models.Task.id.asc()).all()


@router.get("/tasks/board", response_model=schemas.BoardOut)
def task_board(
    days: int | None = None,
    now: datetime | None = None,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    """Pending tasks of every subject grouped by the day they are due."""
    if days is not None and days < 1:
        raise HTTPException(status_code=400, detail="days must be at least 1")
    days = days or get_or_create_settings(db, user.id).planning_days
    tasks = (
        db.query(models.Task)
        .filter(models.Task.user_id == user.id, models.Task.completed.is_(False))
        .order_by(models.Task.due_date.asc(), models.Task.id.asc())
        .all()
    )
    return bucket_tasks_by_day(tasks, days=days, now=now.replace(tzinfo=None) if now else None)


@router.get("/tasks/{task_id}", response_model=schemas.TaskOut)
def get_task(task_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return _get_owned_task(db, user, task_id)


@router.patch("/tasks/{task_id}", response_model=schemas.TaskOut)
def update_task(
    task_id: int,
    task_in: schemas.TaskUpdate,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    task = _get_owned_task(db, user, task_id)
    for field, value in task_in.model_dump(exclude_unset=True).items():
        setattr(task, field, value)
    db.commit()
    db.refresh(task)
    return task


@router.post("/tasks/{task_id}/toggle", response_model=schemas.TaskOut)
def toggle_task(task_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    task = _get_owned_task(db, user, task_id)
    task.completed = not task.completed
    db.commit()
    db.refresh(task)
    return task


@router.delete("/tasks/{task_id}")
def delete_task(task_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    task = _get_owned_task(db, user, task_id)
    db.delete(task)
    db.commit()
    return {"detail": "Task deleted"}
