import json
import re
from typing import List, Sequence

from .base import Attachment, LLMClient

_CORRECT_PATTERN = re.compile(r"^Correct answer: (\".*\")$", re.MULTILINE)
_SUBMITTED_PATTERN = re.compile(r"^Submitted answer: (\".*\")$", re.MULTILINE)
_COUNT_PATTERN = re.compile(r"Generate (\d+) quiz questions")
_SENTENCE_SPLIT = re.compile(r"[。！？.!?;；\n]+")


def _normalize(value: str) -> str:
    return value.strip().lower()


class MockLLM(LLMClient):
    """Offline stand-in for the hosted model.

    Grades by normalized string equality and turns the source text into
    fill-in-the-blank short answer questions, one per sentence.
    """

    def __init__(self, min_words: int = 3):
        self.min_words = min_words

    def generate_answer(
        self,
        query: str,
        context: str,
        attachments: Sequence[Attachment] = (),
    ) -> str:
        correct = _CORRECT_PATTERN.search(query)
        submitted = _SUBMITTED_PATTERN.search(query)
        if correct and submitted:
            expected = json.loads(correct.group(1))
            given = json.loads(submitted.group(1))
            return "Correct" if _normalize(expected) == _normalize(given) else "Incorrect"

        count_match = _COUNT_PATTERN.search(query)
        if count_match:
            return json.dumps(self._cloze_questions(context, int(count_match.group(1))))

        return "Incorrect"

    def _cloze_questions(self, context: str, count: int) -> List[dict]:
        questions: List[dict] = []
        for sentence in _SENTENCE_SPLIT.split(context or ""):
            words = sentence.split()
            if len(words) < self.min_words:
                continue
            answer = words[-1].strip(",:\"'()")
            if not answer:
                continue
            questions.append(
                {
                    "type": "Short Answer",
                    "text": f"Complete the statement: {' '.join(words[:-1])} ____",
                    "correctAnswer": answer,
                }
            )
            if len(questions) >= count:
                break
        return questions
