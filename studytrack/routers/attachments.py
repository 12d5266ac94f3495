from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..dependencies import get_current_user, get_db
from .subjects import get_owned_subject

router = APIRouter(tags=["attachments"])


@router.post("/subjects/{subject_id}/attachments", response_model=schemas.AttachmentOut)
def add_attachment(
    subject_id: int,
    attachment_in: schemas.AttachmentCreate,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    subject = get_owned_subject(db, user, subject_id)
    attachment = models.Attachment(user_id=user.id, subject_id=subject.id, **attachment_in.model_dump())
    db.add(attachment)
    db.commit()
    db.refresh(attachment)
    return attachment


@router.get("/subjects/{subject_id}/attachments", response_model=list[schemas.AttachmentOut])
def list_attachments(subject_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    subject = get_owned_subject(db, user, subject_id)
    return subject.attachments


@router.delete("/attachments/{attachment_id}")
def delete_attachment(attachment_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    attachment = (
        db.query(models.Attachment)
        .filter(models.Attachment.user_id == user.id, models.Attachment.id == attachment_id)
        .first()
    )
    if not attachment:
        raise HTTPException(status_code=404, detail="Attachment not found")
    db.delete(attachment)
    db.commit()
    return {"detail": "Attachment deleted"}
