from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from .planner.timer import TimerMode


class UserCreate(BaseModel):
    email: EmailStr
    name: str
    password: str = Field(min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class UserOut(BaseModel):
    id: int
    email: EmailStr
    name: str
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class SettingsOut(BaseModel):
    planning_days: int
    pomodoro_minutes: int
    short_break_minutes: int
    long_break_minutes: int
    custom_minutes: int
    ai_model: Optional[str] = None

    class Config:
        from_attributes = True


class SettingsUpdate(BaseModel):
    planning_days: Optional[int] = Field(None, ge=1, le=60)
    pomodoro_minutes: Optional[int] = Field(None, gt=0)
    short_break_minutes: Optional[int] = Field(None, gt=0)
    long_break_minutes: Optional[int] = Field(None, gt=0)
    custom_minutes: Optional[int] = Field(None, gt=0)
    ai_model: Optional[str] = None


class TaskCreate(BaseModel):
    name: str = Field(min_length=1)
    estimated_minutes: Optional[int] = Field(None, gt=0)
    due_date: Optional[datetime] = None
    phase: Optional[str] = None


class TaskUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    completed: Optional[bool] = None
    estimated_minutes: Optional[int] = Field(None, gt=0)
    due_date: Optional[datetime] = None
    phase: Optional[str] = None


class TaskOut(BaseModel):
    id: int
    subject_id: int
    name: str
    completed: bool
    estimated_minutes: Optional[int] = None
    due_date: Optional[datetime] = None
    phase: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubjectCreate(BaseModel):
    name: str = Field(min_length=1)
    color: str = "#3f51b5"
    category: Optional[str] = None
    daily_goal_hours: float = Field(1.0, gt=0)
    notes: str = ""
    deadline: Optional[datetime] = None


class SubjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    color: Optional[str] = None
    category: Optional[str] = None
    daily_goal_hours: Optional[float] = Field(None, gt=0)
    notes: Optional[str] = None
    deadline: Optional[datetime] = None


class SubjectOut(BaseModel):
    id: int
    name: str
    color: str
    category: Optional[str] = None
    daily_goal_hours: float
    notes: str
    deadline: Optional[datetime] = None
    mastery: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubjectDetailOut(SubjectOut):
    tasks: List[TaskOut] = []
    progress: float = 0.0
    total_hours: float = 0.0


class ScheduleRequest(BaseModel):
    days: Optional[int] = Field(None, ge=1)
    minutes_per_day: Optional[int] = Field(None, gt=0)
    now: Optional[datetime] = None
    apply: bool = True


class ScheduleOut(BaseModel):
    assignments: Dict[int, str]
    tasks: List[TaskOut]


class BoardDayOut(BaseModel):
    date: str
    tasks: List[TaskOut]


class BoardOut(BaseModel):
    days: List[BoardDayOut]
    overdue: List[TaskOut]
    later: List[TaskOut]
    unscheduled: List[TaskOut]


class StudySessionCreate(BaseModel):
    subject_id: int
    duration_minutes: int = Field(gt=0)
    date: Optional[datetime] = None
    notes: str = ""


class StudySessionOut(BaseModel):
    id: int
    subject_id: int
    date: datetime
    duration_minutes: int
    notes: str

    class Config:
        from_attributes = True


class BlogCreate(BaseModel):
    title: str = Field(min_length=1)
    content: str = ""
    subject_id: Optional[int] = None


class BlogUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = None
    subject_id: Optional[int] = None


class BlogOut(BaseModel):
    id: int
    title: str
    content: str
    subject_id: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AttachmentCreate(BaseModel):
    name: str = Field(min_length=1)
    url: str = Field(min_length=1)
    mime_type: Optional[str] = None


class AttachmentOut(BaseModel):
    id: int
    subject_id: int
    name: str
    url: str
    mime_type: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TimerStartRequest(BaseModel):
    subject_id: int
    mode: TimerMode = TimerMode.pomodoro
    target_seconds: Optional[int] = Field(None, ge=0)
    elapsed_seconds: int = Field(0, ge=0)


class TimerCompleteRequest(BaseModel):
    notes: str = ""


class TimerOut(BaseModel):
    subject_id: int
    mode: TimerMode
    target_seconds: int
    is_running: bool
    elapsed_seconds: int
    remaining_seconds: Optional[int] = None
    finished: bool = False
    started_at: Optional[datetime] = None


class TimerStateOut(BaseModel):
    active: Optional[TimerOut] = None
    timers: List[TimerOut]


class TimerCompleteOut(BaseModel):
    timer: TimerOut
    session: Optional[StudySessionOut] = None


class DailyGoalOut(BaseModel):
    subject_id: int
    subject_name: str
    daily_goal_hours: float
    hours_studied: float
    goal_met: bool
    progress_percent: float


class WeeklyStatsOut(BaseModel):
    total_hours: float
    total_sessions: int
    active_days: int


class WeekHoursOut(BaseModel):
    week_start: datetime
    week_end: datetime
    hours: float


class SubjectStatsOut(BaseModel):
    subject_id: int
    subject_name: str
    total_hours: float
    progress: float


class StatsSummaryOut(BaseModel):
    weekly: WeeklyStatsOut
    weekly_hours: List[WeekHoursOut]
    streak: int
    subjects: List[SubjectStatsOut]
    total_hours: float


QuestionType = Literal["mcq", "descriptive", "both"]


class QuizQuestion(BaseModel):
    id: Any
    text: str
    type: str = "open_ended"
    options: Optional[List[str]] = None
    correct_answer: Optional[str] = None


class QuizGenerateRequest(BaseModel):
    subject_id: int
    num_questions: int = Field(5, ge=1, le=30)
    difficulty: str = "medium"
    question_type: QuestionType = "both"


class QuizGenerateOut(BaseModel):
    questions: List[QuizQuestion]


class AnswerResult(BaseModel):
    correct: bool = False
    explanation: str = ""


class QuizResults(BaseModel):
    answers: List[AnswerResult]
    mastery: str = "Unknown"


class QuizGradeRequest(BaseModel):
    subject_id: int
    questions: List[QuizQuestion]
    answers: Dict[str, str]


class QuizCreate(BaseModel):
    subject_id: int
    difficulty: str = "medium"
    question_type: QuestionType = "both"
    questions: List[QuizQuestion]
    answers: Dict[str, str]
    results: QuizResults


class QuizOut(BaseModel):
    id: int
    subject_id: int
    difficulty: str
    question_type: str
    questions: List[Dict[str, Any]]
    answers: Dict[str, Any]
    results: Optional[Dict[str, Any]] = None
    mastery: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AiChatRequest(BaseModel):
    message: str = Field(min_length=1)


class AiTextResponse(BaseModel):
    reply: str


class ClassSlot(BaseModel):
    subject: str
    day: str
    start_time: str
    end_time: str


class AiPlanDayRequest(BaseModel):
    class_schedule: List[ClassSlot] = []
    preferences: Dict[str, Any] = {}


class AiRecommendationsResponse(BaseModel):
    recommendations: List[str]


class AiRoadmapRequest(BaseModel):
    subject: str
    current_level: str = "Beginner"
    target_level: str = "Advanced"
    timeframe: str = "3 months"


class RoadmapTask(BaseModel):
    name: str
    completed: bool = False


class RoadmapPhase(BaseModel):
    name: str
    tasks: List[RoadmapTask]


class AiRoadmapResponse(BaseModel):
    text: str
    phases: List[RoadmapPhase]


class AiSubtopicsRequest(BaseModel):
    subject_name: str
    description: str = ""
    level: str = "Beginner"
    timeframe: str = "1 month"


class Subtopic(BaseModel):
    name: str
    description: str = ""


class AiSubtopicsResponse(BaseModel):
    subtopics: List[Subtopic]


class AiTimetableRequest(BaseModel):
    class_schedule: List[ClassSlot]


class AiGenerateTasksRequest(BaseModel):
    level: str = "Beginner"
    timeframe: str = "1 month"
    apply: bool = True


class GeneratedTask(BaseModel):
    name: str
    estimated_minutes: int


class AiGenerateTasksResponse(BaseModel):
    tasks: List[GeneratedTask]
    created: List[TaskOut] = []


class ConnectionTestOut(BaseModel):
    success: bool
    message: str


class ExportOut(BaseModel):
    exported_at: datetime
    subjects: List[Dict[str, Any]]
    sessions: List[StudySessionOut]
    blogs: List[BlogOut]
