import base64
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from quizflare.core.errors import GenerationSourceError
from quizflare.schemas.ai import MAX_GENERATED_QUESTIONS
from quizflare.schemas.quiz import Question
from quizflare.services.question_parser import assign_ids, parse_question_bodies

from .base import GatewayError, HttpGateway, error_message

DEFAULT_ERROR = "Server error during quiz generation."
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationSource:
    data: Optional[bytes] = None
    mime_type: Optional[str] = None
    text: Optional[str] = None

    @classmethod
    def from_file(cls, path: str) -> "GenerationSource":
        file_path = Path(path)
        mime_type, _ = mimetypes.guess_type(file_path.name)
        return cls(data=file_path.read_bytes(), mime_type=mime_type or "application/octet-stream")

    def validate(self) -> None:
        has_document = bool(self.data)
        has_text = bool(self.text and self.text.strip())
        if has_document and not self.mime_type:
            raise GenerationSourceError("A document needs a MIME type.")
        if has_document and has_text:
            raise GenerationSourceError("Provide either a document or text, not both.")
        if not has_document and not has_text:
            raise GenerationSourceError("No source content provided.")

    def to_payload(self) -> Dict[str, Any]:
        if self.data:
            return {
                "base64Data": base64.b64encode(self.data).decode("ascii"),
                "mimeType": self.mime_type,
            }
        return {"text": self.text}


class QuizGenerationGateway(HttpGateway):
    path = "generate-quiz"

    def __init__(self, base_url: str, timeout: float = 90.0, client=None, notify=None):
        super().__init__(base_url, timeout, client=client, notify=notify)

    def generate(self, source: GenerationSource, desired_count: int) -> Optional[List[Question]]:
        """Generate questions from a document or text.

        Caller errors (no source, both sources, count outside 1..20) raise
        GenerationSourceError before any request is made. Every failure after
        that point is reported through the notifier and returns None.
        """
        source.validate()
        if not 1 <= desired_count <= MAX_GENERATED_QUESTIONS:
            raise GenerationSourceError(
                f"Question count must be between 1 and {MAX_GENERATED_QUESTIONS}.",
                {"desired_count": desired_count},
            )

        try:
            questions = self._request(source, desired_count)
        except Exception as exc:
            logger.warning("Quiz generation failed: %s", exc)
            self._notify(f"AI generation failed: {exc}. Please try again.")
            return None

        logger.info("Generated %s questions (requested %s).", len(questions), desired_count)
        return questions

    def _request(self, source: GenerationSource, desired_count: int) -> List[Question]:
        response = self._post({"source": source.to_payload(), "numQuestions": desired_count})
        if response.is_error:
            raise GatewayError(error_message(response, DEFAULT_ERROR))
        return assign_ids(parse_question_bodies(response.text))
