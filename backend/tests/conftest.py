from types import SimpleNamespace

import pytest

from quizflare.core.ids import new_id
from quizflare.schemas.quiz import Question, QuestionType, Quiz
from quizflare.services.data_service import DataService
from quizflare.services.storage.memory import MemoryStore


def _mcq(text="What is 2 + 2?", options=("3", "4", "5", "6"), correct_index=1, question_id=None):
    return Question(
        id=question_id or new_id("q"),
        type=QuestionType.MULTIPLE_CHOICE,
        text=text,
        options=list(options),
        correct_answer_index=correct_index,
    )


def _short(text="Capital of Bangladesh?", answer="Dhaka", question_id=None):
    return Question(
        id=question_id or new_id("q"),
        type=QuestionType.SHORT_ANSWER,
        text=text,
        correct_answer=answer,
    )


def _quiz(
    questions,
    subject="Geography",
    quiz_id=None,
    creator_id="guest_1700000000000_abc1234",
    created_at=1_700_000_000_000,
    participation_count=0,
):
    return Quiz(
        id=quiz_id or new_id("quiz"),
        creator_id=creator_id,
        subject=subject,
        questions=list(questions),
        participation_count=participation_count,
        created_at=created_at,
    )


@pytest.fixture
def build():
    return SimpleNamespace(mcq=_mcq, short=_short, quiz=_quiz)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def data_service(store):
    return DataService(store)
