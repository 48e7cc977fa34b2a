from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "MCQ"
    SHORT_ANSWER = "Short Answer"


class QuestionBody(CamelModel):
    """A question as the model returns it: everything except the id."""

    type: QuestionType
    text: str = ""
    options: Optional[List[str]] = None
    correct_answer_index: Optional[int] = None
    correct_answer: Optional[str] = None

    @model_validator(mode="after")
    def _check_variant_fields(self):
        if self.type == QuestionType.MULTIPLE_CHOICE:
            if self.options is None or len(self.options) < 2:
                raise ValueError("MCQ questions need at least 2 options")
            if self.correct_answer_index is None:
                raise ValueError("MCQ questions need correctAnswerIndex")
            if not 0 <= self.correct_answer_index < len(self.options):
                raise ValueError("correctAnswerIndex is out of range")
            if self.correct_answer is not None:
                raise ValueError("MCQ questions must not carry correctAnswer")
        else:
            if self.correct_answer is None:
                raise ValueError("Short answer questions need correctAnswer")
            if self.options is not None or self.correct_answer_index is not None:
                raise ValueError("Short answer questions must not carry options")
        return self


class Question(QuestionBody):
    id: str = Field(..., min_length=1)


class Quiz(CamelModel):
    id: str = Field(..., min_length=1)
    creator_id: str = Field(..., min_length=1)
    subject: str
    questions: List[Question] = Field(default_factory=list)
    participation_count: int = Field(0, ge=0)
    created_at: int = Field(..., ge=0)


class UserAnswer(CamelModel):
    question_id: str
    # option index for MCQ, free text for short answers
    answer: Union[StrictInt, str]


class EvaluationResult(CamelModel):
    question_id: str
    is_correct: bool


class LeaderboardEntry(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    participant_name: str
    quiz_id: str
    quiz_title: str
    score: int = Field(..., ge=0)
    total_questions: int = Field(..., ge=0)
    accuracy: int = Field(..., ge=0, le=100)


class RankedLeaderboardEntry(CamelModel):
    rank: int = Field(..., ge=1)
    entry: LeaderboardEntry


class SessionResult(CamelModel):
    participant_name: str
    quiz_id: str
    results: List[EvaluationResult]
    score: int
    total_questions: int
    accuracy: int
    message: str
    entry: LeaderboardEntry
