import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quizflare.core.config import load_settings
from quizflare.core.errors import QuizflareError
from quizflare.schemas.ai import (
    EvaluateAnswerRequest,
    EvaluateAnswerResponse,
    ErrorResponse,
    GenerateQuizRequest,
)
from quizflare.schemas.quiz import QuestionBody
from quizflare.services.ai_service import evaluate_answer, generate_questions
from quizflare.services.llm.base import LLMClient
from quizflare.services.provider_factory import build_llm_client

settings = load_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="QuizFlare", docs_url="/api-docs", redoc_url="/api-redoc")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
llm_client = build_llm_client(settings)
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    405: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _error_response(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
        message = f"Invalid request body: {detail}"
    else:
        message = "Invalid request body."
    return _error_response(400, message)


@app.exception_handler(QuizflareError)
async def quizflare_exception_handler(request: Request, exc: QuizflareError):
    if exc.status_code >= 500:
        logger.error("Request failed: %s %s", exc.message, exc.details)
    return _error_response(exc.status_code, exc.message)


def get_llm_client() -> Optional[LLMClient]:
    return llm_client


def require_llm_client(llm: Optional[LLMClient] = Depends(get_llm_client)) -> LLMClient:
    if llm is None:
        raise HTTPException(status_code=500, detail="API key is not configured on the server.")
    return llm


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post(
    "/api/evaluate-answer",
    response_model=EvaluateAnswerResponse,
    responses=ERROR_RESPONSES,
)
def evaluate_answer_endpoint(
    request: EvaluateAnswerRequest,
    llm: LLMClient = Depends(require_llm_client),
):
    try:
        is_correct = evaluate_answer(llm, request.user_answer, request.correct_answer)
    except Exception:
        logger.exception("Answer evaluation failed")
        return _error_response(500, "Failed to evaluate answer.")
    return EvaluateAnswerResponse(is_correct=is_correct)


@app.post(
    "/api/generate-quiz",
    response_model=List[QuestionBody],
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
def generate_quiz_endpoint(
    request: GenerateQuizRequest,
    llm: LLMClient = Depends(require_llm_client),
):
    try:
        return generate_questions(
            llm,
            request.source,
            request.num_questions,
            settings.max_source_chars,
        )
    except QuizflareError:
        raise
    except Exception:
        logger.exception("Quiz generation failed")
        return _error_response(500, "Failed to generate quiz.")
