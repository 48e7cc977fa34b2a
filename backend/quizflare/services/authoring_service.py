import logging
from typing import Callable, List, Optional

from quizflare.core.errors import QuizAccessError, QuizNotFoundError, QuizValidationError
from quizflare.core.ids import new_id, now_ms
from quizflare.schemas.quiz import Question, QuestionType, Quiz
from quizflare.services.data_service import DataService

MIN_QUESTIONS = 5
MAX_QUESTIONS = 50
DEFAULT_OPTION_COUNT = 4
logger = logging.getLogger(__name__)


def blank_question(question_type: QuestionType = QuestionType.MULTIPLE_CHOICE) -> Question:
    if question_type == QuestionType.MULTIPLE_CHOICE:
        return Question(
            id=new_id("q"),
            type=question_type,
            text="",
            options=[""] * DEFAULT_OPTION_COUNT,
            correct_answer_index=0,
        )
    return Question(id=new_id("q"), type=question_type, text="", correct_answer="")


class QuizDraft:
    """Editable quiz: a subject and an ordered list of questions.

    Nothing is persisted until save() succeeds, so a draft can be abandoned at
    any point.
    """

    def __init__(
        self,
        subject: str = "",
        questions: Optional[List[Question]] = None,
        quiz_id: Optional[str] = None,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.subject = subject
        self.questions: List[Question] = list(questions or [])
        self.quiz_id = quiz_id
        self._notify = notify

    @property
    def is_editing(self) -> bool:
        return self.quiz_id is not None

    @property
    def is_full(self) -> bool:
        return len(self.questions) >= MAX_QUESTIONS

    def add_question(self) -> Optional[Question]:
        if self.is_full:
            return None
        question = blank_question()
        self.questions.append(question)
        return question

    def update_question(self, index: int, question: Question) -> None:
        self.questions[index] = question

    def remove_question(self, index: int) -> Question:
        return self.questions.pop(index)

    def change_question_type(self, index: int, question_type: QuestionType) -> Question:
        current = self.questions[index]
        if current.type == question_type:
            return current
        if question_type == QuestionType.MULTIPLE_CHOICE:
            changed = Question(
                id=current.id,
                type=question_type,
                text=current.text,
                options=[""] * DEFAULT_OPTION_COUNT,
                correct_answer_index=0,
            )
        else:
            changed = Question(id=current.id, type=question_type, text=current.text, correct_answer="")
        self.questions[index] = changed
        return changed

    def set_option(self, index: int, option_index: int, value: str) -> Question:
        current = self.questions[index]
        if current.type != QuestionType.MULTIPLE_CHOICE:
            raise QuizValidationError("Only MCQ questions have options.", {"index": index})
        options = list(current.options or [])
        options[option_index] = value
        changed = current.model_copy(update={"options": options})
        self.questions[index] = changed
        return changed

    def append_generated(self, questions: List[Question]) -> int:
        room = MAX_QUESTIONS - len(self.questions)
        accepted = questions[: max(room, 0)]
        self.questions.extend(accepted)
        if len(accepted) < len(questions):
            logger.info("Draft is full, dropped %s generated questions.", len(questions) - len(accepted))
        if accepted and self._notify is not None:
            self._notify(f"{len(accepted)} questions generated successfully!")
        return len(accepted)

    def validate(self) -> None:
        if not self.subject.strip():
            raise QuizValidationError("Subject is required.")
        if len(self.questions) < MIN_QUESTIONS:
            raise QuizValidationError(
                f"A minimum of {MIN_QUESTIONS} questions is required.",
                {"count": len(self.questions)},
            )
        if len(self.questions) > MAX_QUESTIONS:
            raise QuizValidationError(
                f"A maximum of {MAX_QUESTIONS} questions is allowed.",
                {"count": len(self.questions)},
            )
        blank = [index for index, question in enumerate(self.questions) if not question.text.strip()]
        if blank:
            raise QuizValidationError("All questions must have text.", {"indexes": blank})

    def save(self, data_service: DataService) -> Quiz:
        self.validate()
        creator_id = data_service.get_or_create_creator_id()

        existing = data_service.get_quiz(self.quiz_id) if self.quiz_id else None
        if existing is not None and existing.creator_id != creator_id:
            raise QuizAccessError("Only the creator can edit this quiz.", {"quiz_id": self.quiz_id})

        quiz = Quiz(
            id=self.quiz_id or new_id("quiz"),
            creator_id=creator_id,
            subject=self.subject,
            questions=self.questions,
            participation_count=existing.participation_count if existing else 0,
            created_at=existing.created_at if existing else now_ms(),
        )
        data_service.save_quiz(quiz)
        self.quiz_id = quiz.id
        logger.info("Saved quiz %s with %s questions.", quiz.id, len(quiz.questions))
        return quiz


def _owned_quiz(data_service: DataService, quiz_id: str, creator_id: Optional[str]) -> Quiz:
    quiz = data_service.get_quiz(quiz_id)
    if quiz is None:
        raise QuizNotFoundError("Quiz not found", {"quiz_id": quiz_id})
    if not creator_id or quiz.creator_id != creator_id:
        raise QuizAccessError("Only the creator can change this quiz.", {"quiz_id": quiz_id})
    return quiz


def load_draft(
    data_service: DataService,
    quiz_id: str,
    creator_id: Optional[str],
    notify: Optional[Callable[[str], None]] = None,
) -> QuizDraft:
    quiz = _owned_quiz(data_service, quiz_id, creator_id)
    return QuizDraft(subject=quiz.subject, questions=quiz.questions, quiz_id=quiz.id, notify=notify)


def delete_owned_quiz(data_service: DataService, quiz_id: str, creator_id: Optional[str]) -> None:
    _owned_quiz(data_service, quiz_id, creator_id)
    data_service.delete_quiz(quiz_id)
    logger.info("Deleted quiz %s.", quiz_id)
