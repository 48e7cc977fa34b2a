from typing import Optional

from pydantic import BaseModel, Field

from .quiz import CamelModel

MAX_GENERATED_QUESTIONS = 20


class EvaluateAnswerRequest(CamelModel):
    user_answer: str
    correct_answer: str


class EvaluateAnswerResponse(CamelModel):
    is_correct: bool


class GenerationSourcePayload(CamelModel):
    base64_data: Optional[str] = None
    mime_type: Optional[str] = None
    text: Optional[str] = None


class GenerateQuizRequest(CamelModel):
    source: GenerationSourcePayload
    num_questions: int = Field(5, ge=1, le=MAX_GENERATED_QUESTIONS)


class ErrorResponse(BaseModel):
    error: str
