import logging
import random
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Union

from quizflare.core.errors import QuizNotFoundError, SessionError
from quizflare.schemas.quiz import Question, QuestionType, Quiz, UserAnswer
from quizflare.services.data_service import DataService

MAX_SESSION_QUESTIONS = 20
MCQ_SECONDS = 10
SHORT_ANSWER_SECONDS = 60
DEFAULT_TICK_INTERVAL = 1.0
logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    AWAITING_NAME = "AwaitingName"
    IN_PROGRESS = "InProgress"
    SUBMITTING = "Submitting"
    TERMINATED = "Terminated"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class SessionSubmission:
    quiz: Quiz
    participant_name: str
    questions: List[Question]
    answers: List[UserAnswer]


SubmitCallback = Callable[[SessionSubmission], None]


def time_budget(questions: Sequence[Question]) -> int:
    seconds = 0
    for question in questions:
        if question.type == QuestionType.MULTIPLE_CHOICE:
            seconds += MCQ_SECONDS
        else:
            seconds += SHORT_ANSWER_SECONDS
    return seconds


class SessionCountdown(threading.Thread):
    """Calls ``tick`` every ``interval`` seconds until it returns False or stop() is called."""

    def __init__(self, tick: Callable[[], bool], interval: float = DEFAULT_TICK_INTERVAL):
        super().__init__(name="quiz-countdown", daemon=True)
        self._tick = tick
        self.interval = interval
        self._stopped = threading.Event()

    def run(self) -> None:
        while not self._stopped.wait(self.interval):
            if not self._tick():
                break

    def stop(self) -> None:
        self._stopped.set()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()


class QuizSession:
    """One play-through of a quiz by one participant.

    AwaitingName -> InProgress -> Submitting -> Terminated, or Cancelled from
    any state before Terminated. The countdown, explicit submission and the
    last answer all race for the InProgress -> Submitting transition; the lock
    makes sure exactly one of them wins. When ``on_submit`` is given the
    submission is handed off as soon as Submitting is entered and the callback
    runs outside the lock.

    ``tick_interval=None`` disables the background countdown; callers then
    drive tick() themselves.
    """

    def __init__(
        self,
        quiz: Quiz,
        rng: Optional[random.Random] = None,
        max_questions: int = MAX_SESSION_QUESTIONS,
        tick_interval: Optional[float] = DEFAULT_TICK_INTERVAL,
        on_submit: Optional[SubmitCallback] = None,
    ):
        if not quiz.questions:
            raise SessionError("This quiz has no questions.", {"quiz_id": quiz.id})
        self.quiz = quiz
        self.rng = rng or random.Random()
        self.max_questions = max_questions
        self.tick_interval = tick_interval
        self.on_submit = on_submit

        self.state = SessionState.AWAITING_NAME
        self.participant_name: Optional[str] = None
        self.questions: List[Question] = []
        self.position = 0
        self.remaining_seconds = 0
        self._answers: Dict[str, UserAnswer] = {}
        self._lock = threading.RLock()
        self._countdown: Optional[SessionCountdown] = None

    @property
    def answers(self) -> List[UserAnswer]:
        with self._lock:
            return list(self._answers.values())

    @property
    def current_question(self) -> Optional[Question]:
        with self._lock:
            if self.state != SessionState.IN_PROGRESS:
                return None
            return self.questions[self.position]

    def _require(self, state: SessionState) -> None:
        if self.state != state:
            raise SessionError(
                f"Session is {self.state.value}, expected {state.value}.",
                {"quiz_id": self.quiz.id, "state": self.state.value},
            )

    def start(self, participant_name: str) -> Question:
        name = (participant_name or "").strip()
        with self._lock:
            self._require(SessionState.AWAITING_NAME)
            if not name:
                raise SessionError("Participant name is required.", {"quiz_id": self.quiz.id})

            count = min(self.max_questions, len(self.quiz.questions))
            self.questions = self.rng.sample(self.quiz.questions, count)
            self.remaining_seconds = time_budget(self.questions)
            self.participant_name = name
            self.position = 0
            self.state = SessionState.IN_PROGRESS
            logger.info(
                "Session started: quiz=%s participant=%s questions=%s seconds=%s",
                self.quiz.id,
                name,
                count,
                self.remaining_seconds,
            )
            if self.tick_interval:
                self._countdown = SessionCountdown(self.tick, self.tick_interval)
                self._countdown.start()
            return self.questions[0]

    def answer(self, value: Union[int, str]) -> Optional[Question]:
        """Record an answer for the current question and advance.

        Returns the next question, or None once the last one is answered.
        """
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise SessionError("Answers must be an option index or text.", {"answer": repr(value)})
        submission = None
        with self._lock:
            self._require(SessionState.IN_PROGRESS)
            question = self.questions[self.position]
            _check_answer_type(question, value)
            self._answers.pop(question.id, None)
            self._answers[question.id] = UserAnswer(question_id=question.id, answer=value)
            self.position += 1
            if self.position >= len(self.questions):
                submission = self._enter_submitting("answered")
                next_question = None
            else:
                next_question = self.questions[self.position]
        self._dispatch(submission)
        return next_question

    def submit(self) -> None:
        with self._lock:
            self._require(SessionState.IN_PROGRESS)
            submission = self._enter_submitting("submitted")
        self._dispatch(submission)

    def tick(self) -> bool:
        """Advance the countdown one second. Returns False once the session stops running."""
        submission = None
        with self._lock:
            if self.state != SessionState.IN_PROGRESS:
                return False
            self.remaining_seconds = max(self.remaining_seconds - 1, 0)
            if self.remaining_seconds == 0:
                submission = self._enter_submitting("timed out")
            running = self.state == SessionState.IN_PROGRESS
        self._dispatch(submission)
        return running

    def hand_off(self) -> SessionSubmission:
        with self._lock:
            self._require(SessionState.SUBMITTING)
            return self._hand_off()

    def cancel(self) -> None:
        with self._lock:
            if self.state in (SessionState.TERMINATED, SessionState.CANCELLED):
                return
            self._stop_countdown()
            self.state = SessionState.CANCELLED
            logger.info("Session cancelled: quiz=%s", self.quiz.id)

    def _enter_submitting(self, reason: str) -> Optional[SessionSubmission]:
        self._stop_countdown()
        self.state = SessionState.SUBMITTING
        logger.info(
            "Session %s: quiz=%s answered=%s/%s remaining=%ss",
            reason,
            self.quiz.id,
            len(self._answers),
            len(self.questions),
            self.remaining_seconds,
        )
        if self.on_submit is not None:
            return self._hand_off()
        return None

    def _hand_off(self) -> SessionSubmission:
        self.state = SessionState.TERMINATED
        return SessionSubmission(
            quiz=self.quiz,
            participant_name=self.participant_name or "",
            questions=list(self.questions),
            answers=list(self._answers.values()),
        )

    def _dispatch(self, submission: Optional[SessionSubmission]) -> None:
        if submission is not None and self.on_submit is not None:
            self.on_submit(submission)

    def _stop_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.stop()
            self._countdown = None


def _check_answer_type(question: Question, value: Union[int, str]) -> None:
    if question.type == QuestionType.MULTIPLE_CHOICE:
        if not isinstance(value, int) or not 0 <= value < len(question.options or []):
            raise SessionError(
                "Multiple choice answers must be an option index.",
                {"question_id": question.id, "answer": repr(value)},
            )
    elif not isinstance(value, str):
        raise SessionError(
            "Short answers must be text.",
            {"question_id": question.id, "answer": repr(value)},
        )


def open_session(data_service: DataService, quiz_id: str, **kwargs) -> QuizSession:
    quiz = data_service.get_quiz(quiz_id)
    if quiz is None:
        raise QuizNotFoundError("Quiz not found", {"quiz_id": quiz_id})
    session = QuizSession(quiz, **kwargs)
    data_service.increment_participation_count(quiz_id)
    return session
