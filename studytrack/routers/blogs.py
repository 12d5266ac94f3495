from datetime import datetime, timedelta
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..dependencies import get_current_user, get_db
from ..planner import start_of_day
from .subjects import get_owned_subject

router = APIRouter(prefix="/blogs", tags=["blogs"])

PERIOD_DAYS = {"today": 0, "week": 6, "month": 29}


def _get_owned_blog(db: Session, user, blog_id: int) -> models.Blog:
    blog = db.query(models.Blog).filter(models.Blog.user_id == user.id, models.Blog.id == blog_id).first()
    if not blog:
        raise HTTPException(status_code=404, detail="Blog not found")
    return blog


@router.get("/", response_model=list[schemas.BlogOut])
def list_blogs(
    subject_id: int | None = None,
    period: Literal["today", "week", "month"] | None = None,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    query = db.query(models.Blog).filter(models.Blog.user_id == user.id)
    if subject_id is not None:
        query = query.filter(models.Blog.subject_id == subject_id)
    if period:
        since = start_of_day(datetime.now()) - timedelta(days=PERIOD_DAYS[period])
        query = query.filter(models.Blog.created_at >= since)
    return query.order_by(models.Blog.created_at.desc(), models.Blog.id.desc()).all()


@router.post("/", response_model=schemas.BlogOut)
def create_blog(blog_in: schemas.BlogCreate, db: Session = Depends(get_db), user=Depends(get_current_user)):
    if blog_in.subject_id is not None:
        get_owned_subject(db, user, blog_in.subject_id)
    blog = models.Blog(
        user_id=user.id,
        subject_id=blog_in.subject_id,
        title=blog_in.title,
        content=blog_in.content,
    )
    db.add(blog)
    db.commit()
    db.refresh(blog)
    return blog


@router.patch("/{blog_id}", response_model=schemas.BlogOut)
def update_blog(
    blog_id: int,
    blog_in: schemas.BlogUpdate,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    blog = _get_owned_blog(db, user, blog_id)
    changes = blog_in.model_dump(exclude_unset=True)
    if changes.get("subject_id") is not None:
        get_owned_subject(db, user, changes["subject_id"])
    for field, value in changes.items():
        setattr(blog, field, value)
    db.commit()
    db.refresh(blog)
    return blog


@router.delete("/{blog_id}")
def delete_blog(blog_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    blog = _get_owned_blog(db, user, blog_id)
    db.delete(blog)
    db.commit()
    return {"detail": "Blog deleted"}
