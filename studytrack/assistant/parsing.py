"""Turn free-form model output into structured data.

Models wrap JSON in prose or code fences and drift from the requested format,
so every parser here degrades to a documented fallback instead of raising.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

TASK_LINE_RE = re.compile(r"(.+?)\s*\(Estimated Minutes:\s*(\d+)\)")
FENCED_JSON_RE = re.compile(r"```json\s*\n(.*?)\n\s*```", re.DOTALL)
PHASE_RE = re.compile(r"^\s*(?:#+\s*|\*\*)?Phase \d+:\s*")
PHASE_TASK_RE = re.compile(r"^\s*-\s+")


def parse_task_list(response: Optional[str]) -> List[Dict[str, Any]]:
    """Parse lines like ``- Topic (Estimated Minutes: 90)``."""
    if not response:
        return []
    tasks = []
    for line in response.splitlines():
        match = TASK_LINE_RE.search(line.strip().lstrip("-*").strip())
        if match:
            tasks.append({"name": match.group(1).strip(), "estimated_minutes": int(match.group(2))})
    return tasks


def _slice_between(text: str, opener: str, closer: str) -> Optional[str]:
    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end == -1 or end <= start:
        return None
    return text[start : end + 1]


def extract_json(text: Optional[str], prefer: str = "array") -> Any:
    """Pull the outermost JSON array or object out of a model response.

    Raises ValueError when nothing parseable is found.
    """
    if not text:
        raise ValueError("empty response")
    fenced = FENCED_JSON_RE.search(text)
    if fenced:
        return json.loads(fenced.group(1))
    order = [("[", "]"), ("{", "}")] if prefer == "array" else [("{", "}"), ("[", "]")]
    for opener, closer in order:
        candidate = _slice_between(text, opener, closer)
        if candidate and candidate.strip():
            return json.loads(candidate)
    raise ValueError("no JSON structure found in response")


def parse_questions(response: Optional[str]) -> List[Dict[str, Any]]:
    try:
        data = extract_json(response, prefer="array")
    except ValueError:
        logger.warning("Could not parse quiz questions from model output")
        return []
    if isinstance(data, dict):
        data = data.get("questions", [])
    if not isinstance(data, list):
        return []
    questions = []
    for index, item in enumerate(data, start=1):
        if not isinstance(item, dict) or not item.get("text"):
            continue
        question = dict(item)
        question.setdefault("id", index)
        question.setdefault("type", "mcq" if item.get("options") else "open_ended")
        questions.append(question)
    return questions


def grading_fallback(questions: Sequence[Any]) -> Dict[str, Any]:
    return {
        "answers": [{"correct": False, "explanation": "Could not parse AI response."} for _ in questions],
        "mastery": "Unknown",
    }


def parse_grading(response: Optional[str], questions: Sequence[Any]) -> Dict[str, Any]:
    try:
        data = extract_json(response, prefer="object")
    except ValueError:
        logger.warning("Could not parse grading results from model output")
        return grading_fallback(questions)
    if not isinstance(data, dict) or not isinstance(data.get("answers"), list):
        return grading_fallback(questions)
    answers = [
        {
            "correct": bool(a.get("correct")) if isinstance(a, dict) else False,
            "explanation": str(a.get("explanation") or "") if isinstance(a, dict) else "",
        }
        for a in data["answers"]
    ]
    return {"answers": answers, "mastery": str(data.get("mastery") or "Unknown")}


def parse_subtopics(response: Optional[str]) -> List[Dict[str, str]]:
    try:
        data = extract_json(response, prefer="object")
    except ValueError:
        logger.warning("Could not parse subtopics from model output")
        return []
    if not isinstance(data, dict) or not isinstance(data.get("subtopics"), list):
        return []
    return [
        {"name": str(s["name"]), "description": str(s.get("description") or "")}
        for s in data["subtopics"]
        if isinstance(s, dict) and s.get("name")
    ]


def parse_roadmap_phases(text: Optional[str]) -> List[Dict[str, Any]]:
    """Collect ``Phase N: title`` headings and the ``- task`` lines below them."""
    phases: List[Dict[str, Any]] = []
    current: Optional[Dict[str, Any]] = None
    for line in (text or "").splitlines():
        if PHASE_RE.match(line):
            name = PHASE_RE.sub("", line).strip().strip("*").strip()
            current = {"name": name, "tasks": []}
            phases.append(current)
        elif current is not None and PHASE_TASK_RE.match(line):
            current["tasks"].append({"name": PHASE_TASK_RE.sub("", line).strip(), "completed": False})
    return phases


def parse_recommendations(response: Optional[str]) -> List[str]:
    if not response:
        return []
    try:
        data = json.loads(response)
    except json.JSONDecodeError:
        try:
            data = extract_json(response, prefer="array")
        except ValueError:
            data = None
    if isinstance(data, list):
        return [str(item) for item in data]
    if data is not None:
        return [response]
    # Plain text: keep bullet lines, drop numbered headings
    return [line for line in response.splitlines() if line.strip() and not line[0].isdigit()]
