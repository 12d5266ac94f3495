"""Prompt templates for the study assistant.

Every prompt is a plain function returning a string so that routers can build
them from ORM rows and tests can inspect them without a network call.
"""
from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

RECENT_LIMIT = 5


def _format_subjects(subjects: Sequence[Any]) -> str:
    lines = [f"**SUBJECTS (Most Recent {RECENT_LIMIT}):**"]
    for subject in list(subjects)[-RECENT_LIMIT:]:
        lines.append(f"- {subject.name} ({subject.category or 'Uncategorized'})")
        lines.append(f"  Daily Goal: {subject.daily_goal_hours}h")
        tasks = list(getattr(subject, "tasks", None) or [])
        if tasks:
            completed = sum(1 for t in tasks if t.completed)
            lines.append(f"  Tasks: {len(tasks)} total")
            lines.append(f"  Completed: {completed}/{len(tasks)}")
        if subject.notes:
            lines.append(f"  Notes: {subject.notes}")
    return "\n".join(lines)


def _format_sessions(sessions: Sequence[Any], subjects: Sequence[Any]) -> str:
    names = {s.id: s.name for s in subjects}
    lines = [f"**RECENT STUDY SESSIONS (Most Recent {RECENT_LIMIT}):**"]
    for session in list(sessions)[-RECENT_LIMIT:]:
        name = names.get(session.subject_id, "Unknown")
        hours = session.duration_minutes / 60
        lines.append(f"- {name}: {hours:.1f}h on {session.date:%Y-%m-%d}")
    return "\n".join(lines)


def _format_daily_goals(daily_goals: Iterable[Dict[str, Any]]) -> str:
    lines = ["**TODAY'S PROGRESS:**"]
    for goal in daily_goals:
        subject = goal["subject"]
        lines.append(
            f"- {subject.name}: {goal['hours_studied']:.1f}h / {subject.daily_goal_hours}h "
            f"({goal['progress_percent']:.1f}%)"
        )
    return "\n".join(lines)


def _format_weekly(weekly: Dict[str, Any]) -> str:
    return "\n".join(
        [
            "**THIS WEEK'S STATS:**",
            f"- Total Hours: {weekly['total_hours']:.1f}h",
            f"- Sessions: {weekly['total_sessions']}",
            f"- Active Days: {weekly['active_days']}/7",
        ]
    )


def format_context(
    *,
    subjects: Sequence[Any] = (),
    sessions: Sequence[Any] = (),
    daily_goals: Optional[Sequence[Dict[str, Any]]] = None,
    weekly_stats: Optional[Dict[str, Any]] = None,
    current_time: Optional[datetime] = None,
) -> str:
    sections: List[str] = []
    if subjects:
        sections.append(_format_subjects(subjects))
    if sessions:
        sections.append(_format_sessions(sessions, subjects))
    if daily_goals:
        sections.append(_format_daily_goals(daily_goals))
    if weekly_stats:
        sections.append(_format_weekly(weekly_stats))
    if current_time:
        sections.append(f"**CURRENT TIME:** {current_time:%Y-%m-%d %H:%M}")
    if not sections:
        return "No specific data available."
    return "\n\n".join(sections)


def build_prompt(user_message: str, context: str = "No specific data available.") -> str:
    return f"""You are a personal AI productivity assistant for a study tracking application. You have access to the user's study data and can provide intelligent insights.

CONTEXT DATA:
{context}

USER REQUEST: {user_message}

Based on the user's data, please provide a helpful, personalized response. You can:
1. Analyze productivity patterns and trends
2. Suggest daily/weekly planning strategies
3. Create roadmaps for subjects or skills
4. Identify areas for improvement
5. Recommend optimal study schedules
6. Track goal achievement progress

Please be specific, actionable, and reference their actual data when relevant. Format your response clearly with headings and bullet points when appropriate."""


PRODUCTIVITY_ANALYSIS = """Analyze my current productivity patterns and provide insights on:
1. My strongest and weakest study areas
2. Patterns in my study habits (time of day, consistency, etc.)
3. Areas where I'm exceeding or falling short of my goals
4. Specific recommendations for improvement
5. What I should prioritize this week"""

RECOMMENDATIONS = """Based on my current study data, provide 3-5 actionable recommendations to improve my learning effectiveness. Focus on:
1. Time management and scheduling
2. Subject focus and balance
3. Goal adjustments
4. Potential burnout risks

Format the output as a JSON array of strings. For example: ["Recommendation 1", "Recommendation 2"]"""


def plan_day_prompt(class_schedule: Sequence[Dict[str, Any]], preferences: Optional[Dict[str, Any]] = None) -> str:
    prompt = (
        "Create a personalized daily study plan for today based on my current progress and goals. "
        f"I have the following classes today: {json.dumps(list(class_schedule))}. "
        "Please schedule my study sessions in my free hours and do not overlap with my classes. Include:\n"
        "1. Specific time blocks for each subject\n"
        "2. Priority order based on my goals and deadlines\n"
        "3. Recommended break intervals\n"
        "4. Tasks I should focus on for each subject\n"
        "5. Adjustment suggestions based on my recent performance"
    )
    if preferences:
        prompt += f"\n\nMy preferences: {json.dumps(preferences)}"
    return prompt


def roadmap_prompt(subject: str, current_level: str, target_level: str, timeframe: str) -> str:
    return f"""Create a detailed learning roadmap for {subject}.
Current Level: {current_level}
Target Level: {target_level}
Timeframe: {timeframe}

Please provide a comprehensive roadmap with the following structured format:

1. GOAL CLARIFICATION
   - What achieving the target level means in practical terms
   - Key skills and knowledge that will be gained

2. LEARNING PHASES
   For each phase, provide:
   - Phase title (e.g., "Phase 1: Foundations")
   - Duration estimate
   - Key objectives
   - List of specific tasks to complete (start each task with "- ")

3. CORE TOPICS AND SKILLS
   - Topic name, brief description, estimated time to master, prerequisites

4. RESOURCES AND MATERIALS
   - Recommended books, courses, tutorials and practice platforms

5. ASSESSMENT AND PROGRESS TRACKING
   - Checkpoints to evaluate progress and criteria for moving to the next phase

Format your response with clear numbered headings and bullet points. Start each task with "- " for easy parsing."""


def subtopics_prompt(subject_name: str, description: str, level: str, timeframe: str) -> str:
    return f"""Analyze the following request and generate a structured learning plan for a subject. The output must be a JSON object with a "subtopics" array.

**Subject:** {subject_name}
**Description:** {description}
**Current Level:** {level}
**Timeframe:** {timeframe}

**Instructions:**
1. Create a list of 5-10 main subtopics for this subject.
2. For each subtopic, provide a brief, one-sentence description.
3. The final output must be a single JSON object containing only the "subtopics" array.

**JSON Structure Example:**
{{
  "subtopics": [
    {{ "name": "Subtopic 1", "description": "A brief description." }},
    {{ "name": "Subtopic 2", "description": "Another brief description." }}
  ]
}}"""


def task_list_prompt(subject_name: str, level: str, timeframe: str) -> str:
    return f"""Create a comprehensive, structured task list for learning **{subject_name}**.
- **Current Level:** {level}
- **Target Timeframe:** {timeframe}

**Instructions:**
1. Generate a list of 10-15 high-level tasks in a logical, sequential order.
2. The tasks should cover all the key concepts of the subject, from beginner to advanced.
3. For each task, provide an estimated time in minutes for completion.
4. The output must be a simple list of tasks, each on a new line, formatted as: 'Task Name (Estimated Minutes: MM)'.

**Example:**
- Introduction to {subject_name} and its Core Principles (Estimated Minutes: 120)
- Foundational Concepts of {subject_name} (Estimated Minutes: 180)"""


def timetable_prompt(class_schedule: Sequence[Dict[str, Any]]) -> str:
    return (
        "Analyze the following class schedule and provide a brief, human-readable summary of the "
        "user's weekly schedule. The summary should highlight the busiest days and any large gaps "
        f"between classes.\n\nSchedule:\n{json.dumps(list(class_schedule), indent=2)}"
    )


QUESTION_TYPE_HINTS = {
    "mcq": "Only generate multiple-choice questions (MCQ).",
    "descriptive": "Only generate open-ended questions.",
    "both": "Include a mix of multiple-choice questions (MCQ) and open-ended questions.",
}


def quiz_prompt(
    subject_name: str,
    completed_topics: Sequence[str],
    num_questions: int = 5,
    difficulty: str = "medium",
    question_type: str = "both",
) -> str:
    type_hint = QUESTION_TYPE_HINTS.get(question_type, QUESTION_TYPE_HINTS["both"])
    difficulty_hint = ""
    if difficulty == "advanced":
        difficulty_hint = (
            " For these advanced questions, you should create imaginary scenarios that require "
            "the user to apply their knowledge to solve a problem."
        )
    return (
        f"Generate a short test of {num_questions} questions for the subject '{subject_name}' at a "
        f"{difficulty} difficulty level. {type_hint} The questions should be based on these completed "
        f"topics: {', '.join(completed_topics)}. You should ask questions that test the application of "
        "the knowledge, not just recall of information. You can also generate questions on related topics "
        "that are not explicitly covered in the completed topics, but are relevant to the subject."
        f"{difficulty_hint} For MCQs, ensure options are relevant, plausible, and distinct, and provide them "
        "as an array of strings (at least 3 options). Always include a 'correct_answer' field for MCQs. "
        "For open-ended, just ask the question. Return as JSON: [{id: number, text: string, "
        "type: 'mcq' | 'open_ended', options?: string[], correct_answer?: string}]."
    )


def grading_prompt(subject_name: str, questions: Sequence[Dict[str, Any]], answers: Dict[str, str]) -> str:
    graded = [dict(q, user_answer=answers.get(str(q.get("id")))) for q in questions]
    return f"""You are an AI testing assistant. Evaluate the user's answers for a test on "{subject_name}".

**Questions with User Answers:**
{json.dumps(graded, indent=2)}

**Instructions:**
1. For each question, determine if the user's answer is correct. For MCQs, consider all provided options and the user's selected option.
2. Provide a brief, one-sentence explanation for any incorrect answers, referencing the correct option for MCQs.
3. Calculate a "mastery level" (e.g., "Beginner", "Intermediate", "Advanced") based on the user's performance.
4. Return a single JSON object with two keys: "answers" (an array of objects with "correct" and "explanation" fields) and "mastery" (a string).

**JSON Structure Example:**
{{
  "answers": [
    {{ "correct": true, "explanation": "" }},
    {{ "correct": false, "explanation": "The correct answer is X because..." }}
  ],
  "mastery": "Intermediate"
}}"""
