import logging
from typing import Dict, List, Optional, Protocol

from quizflare.core.ids import new_id
from quizflare.schemas.quiz import (
    EvaluationResult,
    LeaderboardEntry,
    Question,
    QuestionType,
    SessionResult,
    UserAnswer,
)
from quizflare.services.data_service import DataService
from quizflare.services.gateways.evaluation import fallback_match
from quizflare.services.session_service import SessionSubmission

SCORE_MESSAGES: Dict[int, str] = {
    100: "Perfect score! Outstanding work!",
    90: "Excellent! You really know your stuff.",
    75: "Great job! Just a few slips.",
    50: "Good effort! Keep practicing.",
    25: "Not bad, but there is room to grow.",
    0: "Every expert was once a beginner. Try again!",
}
logger = logging.getLogger(__name__)


class AnswerEvaluator(Protocol):
    def evaluate(self, user_answer: str, correct_answer: str) -> bool:
        ...


def complimentary_message(accuracy: int, messages: Optional[Dict[int, str]] = None) -> str:
    table = SCORE_MESSAGES if messages is None else messages
    for threshold in sorted(table, reverse=True):
        if accuracy >= threshold:
            return table[threshold]
    return ""


def calculate_accuracy(score: int, total: int) -> int:
    if total <= 0:
        return 0
    # round half up without float error
    return (200 * score + total) // (2 * total)


def _is_blank(answer: Optional[UserAnswer]) -> bool:
    if answer is None:
        return True
    return isinstance(answer.answer, str) and not answer.answer.strip()


def _grade(question: Question, answer: UserAnswer, evaluator: AnswerEvaluator) -> bool:
    if question.type == QuestionType.MULTIPLE_CHOICE:
        value = answer.answer
        return isinstance(value, int) and not isinstance(value, bool) and value == question.correct_answer_index

    user_text = str(answer.answer)
    correct_text = question.correct_answer or ""
    try:
        return bool(evaluator.evaluate(user_text, correct_text))
    except Exception as exc:
        logger.warning("Evaluator failed for question %s, using exact match: %s", question.id, exc)
        return fallback_match(user_text, correct_text)


def evaluate_submission(submission: SessionSubmission, evaluator: AnswerEvaluator) -> List[EvaluationResult]:
    """Grade every sampled question in order, one at a time."""
    answers = {answer.question_id: answer for answer in submission.answers}
    results: List[EvaluationResult] = []
    for question in submission.questions:
        answer = answers.get(question.id)
        if _is_blank(answer):
            is_correct = False
        else:
            is_correct = _grade(question, answer, evaluator)
        results.append(EvaluationResult(question_id=question.id, is_correct=is_correct))
    return results


def score_session(
    submission: SessionSubmission,
    evaluator: AnswerEvaluator,
    data_service: DataService,
) -> SessionResult:
    results = evaluate_submission(submission, evaluator)
    score = sum(1 for result in results if result.is_correct)
    total = len(submission.questions)
    accuracy = calculate_accuracy(score, total)

    entry = LeaderboardEntry(
        id=new_id("le"),
        participant_name=submission.participant_name,
        quiz_id=submission.quiz.id,
        quiz_title=submission.quiz.subject,
        score=score,
        total_questions=total,
        accuracy=accuracy,
    )
    data_service.save_leaderboard_entry(entry)
    logger.info(
        "Scored session: quiz=%s participant=%s score=%s/%s accuracy=%s",
        submission.quiz.id,
        submission.participant_name,
        score,
        total,
        accuracy,
    )
    return SessionResult(
        participant_name=submission.participant_name,
        quiz_id=submission.quiz.id,
        results=results,
        score=score,
        total_questions=total,
        accuracy=accuracy,
        message=complimentary_message(accuracy),
        entry=entry,
    )
