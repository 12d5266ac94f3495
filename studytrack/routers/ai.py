import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..assistant import AIServiceError, GenerativeClient, parsing, prompts
from ..dependencies import get_ai_client, get_current_user, get_db
from ..planner import check_daily_goals, weekly_stats
from .subjects import get_owned_subject

router = APIRouter(tags=["ai"])
logger = logging.getLogger(__name__)


def _user_context(db: Session, user) -> str:
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
    now = datetime.now()
    return prompts.format_context(
        subjects=subjects,
        sessions=sessions,
        daily_goals=check_daily_goals(subjects, sessions, now) if subjects else None,
        weekly_stats=weekly_stats(sessions, now) if sessions else None,
        current_time=now,
    )


def _generate(client: GenerativeClient, prompt: str) -> str:
    try:
        return client.generate(prompt)
    except AIServiceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


def _ask_with_context(client: GenerativeClient, db: Session, user, message: str) -> str:
    return _generate(client, prompts.build_prompt(message, _user_context(db, user)))


@router.post("/ai/chat", response_model=schemas.AiTextResponse)
def chat(
    payload: schemas.AiChatRequest,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
    client: GenerativeClient = Depends(get_ai_client),
):
    return schemas.AiTextResponse(reply=_ask_with_context(client, db, user, payload.message))


@router.post("/ai/analysis", response_model=schemas.AiTextResponse)
def productivity_analysis(
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
    client: GenerativeClient = Depends(get_ai_client),
):
    return schemas.AiTextResponse(reply=_ask_with_context(client, db, user, prompts.PRODUCTIVITY_ANALYSIS))


@router.post("/ai/plan-day", response_model=schemas.AiTextResponse)
def plan_day(
    payload: schemas.AiPlanDayRequest,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
    client: GenerativeClient = Depends(get_ai_client),
):
    message = prompts.plan_day_prompt(
        [slot.model_dump() for slot in payload.class_schedule],
        payload.preferences,
    )
    return schemas.AiTextResponse(reply=_ask_with_context(client, db, user, message))


@router.post("/ai/recommendations", response_model=schemas.AiRecommendationsResponse)
def recommendations(
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
    client: GenerativeClient = Depends(get_ai_client),
):
    response = _ask_with_context(client, db, user, prompts.RECOMMENDATIONS)
    return schemas.AiRecommendationsResponse(recommendations=parsing.parse_recommendations(response))


@router.post("/ai/roadmap", response_model=schemas.AiRoadmapResponse)
def roadmap(
    payload: schemas.AiRoadmapRequest,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
    client: GenerativeClient = Depends(get_ai_client),
):
    message = prompts.roadmap_prompt(payload.subject, payload.current_level, payload.target_level, payload.timeframe)
    text = _ask_with_context(client, db, user, message)
    return {"text": text, "phases": parsing.parse_roadmap_phases(text)}


@router.post("/ai/subtopics", response_model=schemas.AiSubtopicsResponse)
def subtopics(
    payload: schemas.AiSubtopicsRequest,
    user=Depends(get_current_user),
    client: GenerativeClient = Depends(get_ai_client),
):
    response = _generate(
        client,
        prompts.subtopics_prompt(payload.subject_name, payload.description, payload.level, payload.timeframe),
    )
    return {"subtopics": parsing.parse_subtopics(response)}


@router.post("/ai/timetable-summary", response_model=schemas.AiTextResponse)
def timetable_summary(
    payload: schemas.AiTimetableRequest,
    user=Depends(get_current_user),
    client: GenerativeClient = Depends(get_ai_client),
):
    schedule = [slot.model_dump() for slot in payload.class_schedule]
    return schemas.AiTextResponse(reply=_generate(client, prompts.timetable_prompt(schedule)))


@router.get("/ai/test-connection", response_model=schemas.ConnectionTestOut)
def test_connection(user=Depends(get_current_user), client: GenerativeClient = Depends(get_ai_client)):
    return client.test_connection()


@router.post("/subjects/{subject_id}/generate-tasks", response_model=schemas.AiGenerateTasksResponse)
def generate_tasks(
    subject_id: int,
    payload: schemas.AiGenerateTasksRequest,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
    client: GenerativeClient = Depends(get_ai_client),
):
    """Ask for a study task list for the subject and optionally add it to the subject."""
    subject = get_owned_subject(db, user, subject_id)
    response = _generate(client, prompts.task_list_prompt(subject.name, payload.level, payload.timeframe))
    generated = parsing.parse_task_list(response)
    if not generated:
        logger.warning("No tasks could be parsed for subject id=%s", subject.id)

    created = []
    if payload.apply and generated:
        created = [
            models.Task(
                user_id=user.id,
                subject_id=subject.id,
                name=item["name"],
                estimated_minutes=item["estimated_minutes"],
            )
            for item in generated
        ]
        db.add_all(created)
        db.commit()
        for task in created:
            db.refresh(task)
    return {"tasks": generated, "created": created}
