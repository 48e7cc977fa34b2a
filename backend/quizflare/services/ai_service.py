import base64
import binascii
import json
import logging
from typing import List, Tuple

from quizflare.core.errors import GenerationSourceError
from quizflare.schemas.ai import GenerationSourcePayload
from quizflare.schemas.quiz import QuestionBody
from quizflare.services.document_parser import extract_text, is_image, normalize_mime_type
from quizflare.services.llm.base import Attachment, LLMClient
from quizflare.services.question_parser import parse_question_bodies

logger = logging.getLogger(__name__)


def build_evaluation_prompt(user_answer: str, correct_answer: str) -> str:
    return (
        "You grade quiz answers in any language.\n"
        "Decide whether the submitted answer means the same thing as the correct answer. "
        "Accept answers written in another language or script (for example 'ঢাকা' for 'Dhaka'), "
        "synonyms, common-knowledge equivalents and minor typos.\n"
        f"Correct answer: {json.dumps(correct_answer, ensure_ascii=False)}\n"
        f"Submitted answer: {json.dumps(user_answer, ensure_ascii=False)}\n"
        "Reply with exactly one word: Correct or Incorrect."
    )


def parse_verdict(raw: str) -> bool:
    return (raw or "").strip().strip(".!\"'`").strip().lower() == "correct"


def evaluate_answer(llm: LLMClient, user_answer: str, correct_answer: str) -> bool:
    verdict = llm.generate_answer(build_evaluation_prompt(user_answer, correct_answer), "")
    is_correct = parse_verdict(verdict)
    logger.debug("Evaluated answer: verdict=%r correct=%s", verdict, is_correct)
    return is_correct


def build_generation_prompt(num_questions: int) -> str:
    return (
        f"Generate {num_questions} quiz questions based on the provided document or text. "
        "Question types may be 'MCQ' or 'Short Answer'. "
        "Return only a valid JSON array of objects, with no text or formatting around it. "
        "Every object has 'type' ('MCQ' or 'Short Answer') and 'text' (the question). "
        "MCQ objects also have 'options' (an array of 4 strings) and 'correctAnswerIndex' "
        "(an integer from 0 to 3) and no 'correctAnswer'. "
        "Short Answer objects have 'correctAnswer' (a string) and no 'options' or 'correctAnswerIndex'."
    )


def resolve_source(
    source: GenerationSourcePayload,
    max_chars: int,
) -> Tuple[str, List[Attachment]]:
    """Turn the request source into prompt context and inline attachments."""
    if source.base64_data and source.mime_type:
        mime_type = normalize_mime_type(source.mime_type)
        try:
            data = base64.b64decode(source.base64_data, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise GenerationSourceError("Invalid base64 document data.") from exc
        if is_image(mime_type):
            return "", [Attachment(mime_type=mime_type, base64_data=source.base64_data)]
        return extract_text(data, mime_type)[:max_chars], []

    if source.text and source.text.strip():
        return source.text.strip()[:max_chars], []

    raise GenerationSourceError("No source content provided.")


def generate_questions(
    llm: LLMClient,
    source: GenerationSourcePayload,
    num_questions: int,
    max_chars: int,
) -> List[QuestionBody]:
    context, attachments = resolve_source(source, max_chars)
    raw = llm.generate_answer(build_generation_prompt(num_questions), context, attachments)
    questions = parse_question_bodies(raw)
    if len(questions) > num_questions:
        logger.info("Model returned %s questions, keeping %s.", len(questions), num_questions)
        questions = questions[:num_questions]
    return questions
