"""
Best-effort extraction and validation of study content from free-form model text.

Both functions return ``(ok, result)`` where result is the parsed value on
success and a short reason string on failure.
"""
import json
import re
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from models import OPTION_LETTERS, GeneratedContent, Mode

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)
_LABEL_RE = re.compile(r"^\s*\(?([A-Da-d])(?:\)|[.:](?=\s))\s*")


def _scan_object(text: str) -> Optional[str]:
    """Return the first balanced {...} span, ignoring braces inside JSON strings."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
            elif ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start : i + 1]
        start = text.find("{", start + 1)
    return None


def _loads_object(candidate: str) -> Optional[Dict[str, Any]]:
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def extract_json(text: str) -> Tuple[bool, Union[Dict[str, Any], str]]:
    text = (text or "").strip()
    if not text:
        return False, "Empty model response"

    candidates = []
    for block in _FENCE_RE.findall(text):
        block = block.strip()
        candidates.append(block)
        scanned = _scan_object(block)
        if scanned and scanned != block:
            candidates.append(scanned)
    candidates.append(text)
    scanned = _scan_object(text)
    if scanned:
        candidates.append(scanned)

    for candidate in candidates:
        data = _loads_object(candidate)
        if data is not None:
            return True, data
    return False, "No JSON object found in model response"


def _label_options(options: Any) -> Any:
    if not isinstance(options, list) or len(options) != 4:
        return options
    labelled = []
    for letter, option in zip(OPTION_LETTERS, options):
        body = _LABEL_RE.sub("", str(option), count=1).strip()
        labelled.append(f"{letter}) {body}")
    return labelled


def _answer_letter(answer: Any, options: List[str]) -> Any:
    if not isinstance(answer, str):
        return answer
    candidate = answer.strip()
    if len(candidate) == 1 and candidate.upper() in OPTION_LETTERS:
        return candidate.upper()
    match = _LABEL_RE.match(candidate + " ")
    if match and len(candidate) <= 3:
        return match.group(1).upper()
    body = _LABEL_RE.sub("", candidate, count=1).strip().lower()
    for letter, option in zip(OPTION_LETTERS, options):
        if _LABEL_RE.sub("", option, count=1).strip().lower() == body:
            return letter
    return answer


def _normalize_summary(summary: Any, topic: str) -> Any:
    if isinstance(summary, str):
        summary = [summary]
    if not isinstance(summary, list):
        return summary
    points = [str(p).strip() for p in summary if str(p).strip()]
    if not points:
        return points
    fillers = [
        f"Review the core definitions and ideas behind {topic}.",
        f"Connect {topic} to examples you already know.",
    ]
    while len(points) < 3:
        points.append(fillers[len(points) - 1])
    return points[:3]


def _normalize_quiz(quiz: Any) -> Any:
    if not isinstance(quiz, list):
        return quiz
    items = []
    for item in quiz[:3]:
        if not isinstance(item, dict):
            items.append(item)
            continue
        options = _label_options(item.get("options"))
        answer = item.get("correctAnswer", item.get("answer"))
        if isinstance(options, list):
            answer = _answer_letter(answer, options)
        items.append({
            "question": item.get("question"),
            "options": options,
            "correctAnswer": answer,
            "explanation": item.get("explanation") or "",
        })
    return items


def _normalize_math_question(question: Any) -> Any:
    if not isinstance(question, dict):
        return question
    normalized = dict(question)
    answer = normalized.get("answer")
    if isinstance(answer, (int, float)) and not isinstance(answer, bool):
        normalized["answer"] = str(answer)
    return normalized


def validate_content(data: Dict[str, Any], mode: Mode, topic: str) -> Tuple[bool, Union[GeneratedContent, str]]:
    if mode == Mode.MATH:
        required = ("summary", "mathQuestion", "studyTip")
    else:
        required = ("summary", "quiz", "studyTip")
    missing = [field for field in required if not data.get(field)]
    if missing:
        return False, f"Response missing required {mode.value} mode fields: {', '.join(missing)}"

    payload: Dict[str, Any] = {
        "summary": _normalize_summary(data["summary"], topic),
        "studyTip": data["studyTip"],
    }
    if mode == Mode.MATH:
        payload["mathQuestion"] = _normalize_math_question(data["mathQuestion"])
    else:
        payload["quiz"] = _normalize_quiz(data["quiz"])

    try:
        return True, GeneratedContent.model_validate(payload)
    except ValidationError as e:
        return False, f"ValidationError: {e.error_count()} error(s): {e.errors()[0]['msg']}"
