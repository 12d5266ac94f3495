import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..assistant import AIServiceError, GenerativeClient, parsing, prompts
from ..dependencies import get_ai_client, get_current_user, get_db
from .subjects import get_owned_subject

router = APIRouter(prefix="/quizzes", tags=["quizzes"])
logger = logging.getLogger(__name__)


@router.post("/generate", response_model=schemas.QuizGenerateOut)
def generate_quiz(
    quiz_req: schemas.QuizGenerateRequest,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
    client: GenerativeClient = Depends(get_ai_client),
):
    subject = get_owned_subject(db, user, quiz_req.subject_id)
    completed_topics = [task.name for task in subject.tasks if task.completed]
    if not completed_topics:
        raise HTTPException(status_code=400, detail="Complete at least one topic before taking a test")

    prompt = prompts.quiz_prompt(
        subject.name,
        completed_topics,
        num_questions=quiz_req.num_questions,
        difficulty=quiz_req.difficulty,
        question_type=quiz_req.question_type,
    )
    try:
        response = client.generate(prompt)
    except AIServiceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    questions = parsing.parse_questions(response)
    if not questions:
        raise HTTPException(status_code=502, detail="Could not generate questions. Please try again.")
    return {"questions": questions}


@router.post("/grade", response_model=schemas.QuizResults)
def grade_quiz(
    grade_req: schemas.QuizGradeRequest,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
    client: GenerativeClient = Depends(get_ai_client),
):
    subject = get_owned_subject(db, user, grade_req.subject_id)
    questions = [q.model_dump() for q in grade_req.questions]
    try:
        response = client.generate(prompts.grading_prompt(subject.name, questions, grade_req.answers))
    except AIServiceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return parsing.parse_grading(response, questions)


@router.post("/", response_model=schemas.QuizOut)
def save_quiz(quiz_in: schemas.QuizCreate, db: Session = Depends(get_db), user=Depends(get_current_user)):
    """Store a graded quiz and carry its mastery level over to the subject."""
    subject = get_owned_subject(db, user, quiz_in.subject_id)
    results = quiz_in.results.model_dump()
    quiz = models.Quiz(
        user_id=user.id,
        subject_id=subject.id,
        difficulty=quiz_in.difficulty,
        question_type=quiz_in.question_type,
        questions=[q.model_dump() for q in quiz_in.questions],
        answers=dict(quiz_in.answers),
        results=results,
        mastery=results["mastery"],
    )
    subject.mastery = results["mastery"]
    db.add(quiz)
    db.commit()
    db.refresh(quiz)
    logger.info("Saved quiz id=%s for subject id=%s (mastery=%s)", quiz.id, subject.id, quiz.mastery)
    return quiz


@router.get("/", response_model=list[schemas.QuizOut])
def list_quizzes(subject_id: int | None = None, db: Session = Depends(get_db), user=Depends(get_current_user)):
    query = db.query(models.Quiz).filter(models.Quiz.user_id == user.id)
    if subject_id is not None:
        query = query.filter(models.Quiz.subject_id == subject_id)
    return query.order_by(models.Quiz.created_at.desc(), models.Quiz.id.desc()).all()


@router.delete("/{quiz_id}")
def delete_quiz(quiz_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    quiz = db.query(models.Quiz).filter(models.Quiz.user_id == user.id, models.Quiz.id == quiz_id).first()
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found")
    db.delete(quiz)
    db.commit()
    return {"detail": "Quiz deleted"}
