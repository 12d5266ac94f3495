import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import models, schemas
from ..dependencies import get_current_user, get_db, get_or_create_settings

router = APIRouter(prefix="/settings", tags=["settings"])
logger = logging.getLogger(__name__)


@router.get("/", response_model=schemas.SettingsOut)
def get_settings(db: Session = Depends(get_db), user=Depends(get_current_user)):
    return get_or_create_settings(db, user.id)


@router.patch("/", response_model=schemas.SettingsOut)
def update_settings(
    settings_in: schemas.SettingsUpdate,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    user_settings = get_or_create_settings(db, user.id)
    for field, value in settings_in.model_dump(exclude_unset=True).items():
        setattr(user_settings, field, value)
    db.commit()
    db.refresh(user_settings)
    return user_settings


@router.get("/export", response_model=schemas.ExportOut)
def export_data(db: Session = Depends(get_db), user=Depends(get_current_user)):
    """Everything the user owns as one JSON document."""
    subjects = (
        db.query(models.Subject)
        .filter(models.Subject.user_id == user.id)
        .order_by(models.Subject.id.asc())
        .all()
    )
    sessions = (
        db.query(models.StudySession)
        .filter(models.StudySession.user_id == user.id)
        .order_by(models.StudySession.date.asc())
        .all()
    )
    blogs = db.query(models.Blog).filter(models.Blog.user_id == user.id).order_by(models.Blog.id.asc()).all()

    exported = []
    for subject in subjects:
        row = schemas.SubjectOut.model_validate(subject).model_dump(mode="json")
        row["tasks"] = [schemas.TaskOut.model_validate(t).model_dump(mode="json") for t in subject.tasks]
        row["attachments"] = [
            schemas.AttachmentOut.model_validate(a).model_dump(mode="json") for a in subject.attachments
        ]
        exported.append(row)

    logger.info("Exported data for user id=%s (%s subjects)", user.id, len(exported))
    return {"exported_at": datetime.now(), "subjects": exported, "sessions": sessions, "blogs": blogs}
