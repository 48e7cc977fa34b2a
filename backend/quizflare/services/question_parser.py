import json
import re
from typing import Any, Dict, List

from pydantic import ValidationError

from quizflare.core.ids import new_id
from quizflare.schemas.quiz import Question, QuestionBody, QuestionType

FENCE_PATTERN = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)


class QuestionParseError(ValueError):
    pass


def strip_code_fence(raw: str) -> str:
    cleaned = (raw or "").strip()
    match = FENCE_PATTERN.match(cleaned)
    if match and match.group(2):
        return match.group(2).strip()
    return cleaned


def _normalize_item(item: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(item)
    data.pop("id", None)
    if data.get("type") == QuestionType.SHORT_ANSWER.value:
        data.pop("options", None)
        data.pop("correctAnswerIndex", None)
    elif data.get("type") == QuestionType.MULTIPLE_CHOICE.value:
        data.pop("correctAnswer", None)
    return {key: value for key, value in data.items() if value is not None}


def parse_question_bodies(raw: str) -> List[QuestionBody]:
    """Parse a model reply into question bodies.

    The reply must be a JSON array, optionally wrapped in a Markdown code
    fence. Fields that belong to the other question variant are dropped;
    anything else that does not validate rejects the whole reply.
    """
    payload = strip_code_fence(raw)
    if not payload:
        raise QuestionParseError("Empty response from model")
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise QuestionParseError(f"Response is not valid JSON: {exc.msg}") from exc
    if not isinstance(data, list):
        raise QuestionParseError("Response is not a JSON array")

    bodies: List[QuestionBody] = []
    for position, item in enumerate(data):
        if not isinstance(item, dict):
            raise QuestionParseError(f"Item {position} is not an object")
        try:
            bodies.append(QuestionBody.model_validate(_normalize_item(item)))
        except ValidationError as exc:
            raise QuestionParseError(f"Item {position} is invalid: {exc.errors()[0]['msg']}") from exc
    return bodies


def assign_ids(bodies: List[QuestionBody]) -> List[Question]:
    return [Question(id=new_id("q"), **body.model_dump()) for body in bodies]
