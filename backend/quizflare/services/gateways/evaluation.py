import logging

from .base import GatewayError, HttpGateway, error_message

DEFAULT_ERROR = "Server error during evaluation."
logger = logging.getLogger(__name__)


def fallback_match(user_answer: str, correct_answer: str) -> bool:
    return user_answer.strip().lower() == correct_answer.strip().lower()


class AnswerEvaluationGateway(HttpGateway):
    """Asks the evaluate-answer endpoint whether a free-text answer is right.

    The remote model handles translations, synonyms and typos. When the call
    fails for any reason the answer is graded by trimmed, case-insensitive
    equality instead, so callers always get a verdict.
    """

    path = "evaluate-answer"

    def __init__(self, base_url: str, timeout: float = 15.0, client=None, notify=None):
        super().__init__(base_url, timeout, client=client, notify=notify)

    def evaluate(self, user_answer: str, correct_answer: str) -> bool:
        try:
            return self._request(user_answer, correct_answer)
        except Exception as exc:
            logger.warning("Answer evaluation failed, falling back to string comparison: %s", exc)
            self._notify(f"Evaluation failed: {exc}")
            return fallback_match(user_answer, correct_answer)

    def _request(self, user_answer: str, correct_answer: str) -> bool:
        response = self._post({"userAnswer": user_answer, "correctAnswer": correct_answer})
        if response.is_error:
            raise GatewayError(error_message(response, DEFAULT_ERROR))
        data = response.json()
        is_correct = data.get("isCorrect") if isinstance(data, dict) else None
        if not isinstance(is_correct, bool):
            raise GatewayError("Malformed evaluation response.")
        return is_correct
