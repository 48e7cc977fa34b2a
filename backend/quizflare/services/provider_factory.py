import logging
from typing import Optional

from quizflare.core.config import Settings
from quizflare.services.gateways import AnswerEvaluationGateway, QuizGenerationGateway
from quizflare.services.gateways.base import Notifier
from quizflare.services.llm.base import LLMClient
from quizflare.services.llm.mock import MockLLM
from quizflare.services.llm.real import RealLLMClient
from quizflare.services.provider_utils import normalize_base_url
from quizflare.services.storage.base import KeyValueStore
from quizflare.services.storage.memory import MemoryStore
from quizflare.services.storage.sql import SqlKeyValueStore

logger = logging.getLogger(__name__)

REAL_PROVIDERS = {"gemini", "openai", "openai-compatible", "deepseek", "auto", "real"}
OFFLINE_PROVIDERS = {"mock", "offline"}


def build_llm_client(settings: Settings) -> Optional[LLMClient]:
    """Return the configured model client, or None when credentials are missing.

    A None client makes the AI endpoints answer 500 instead of pretending to
    grade with a stand-in.
    """
    provider = (settings.llm_provider or "").strip().lower() or "gemini"
    if provider in OFFLINE_PROVIDERS:
        return MockLLM()

    if provider not in REAL_PROVIDERS:
        logger.warning("Unknown LLM_PROVIDER=%s. AI endpoints are disabled.", provider)
        return None

    api_key = (settings.llm_api_key or "").strip()
    base_url = normalize_base_url(settings.llm_base_url)
    if not api_key:
        logger.warning("LLM_PROVIDER=%s but LLM_API_KEY is missing. AI endpoints are disabled.", provider)
        return None
    if not base_url:
        logger.warning("LLM_PROVIDER=%s but LLM_BASE_URL is missing. AI endpoints are disabled.", provider)
        return None
    return RealLLMClient(
        base_url=base_url,
        api_key=api_key,
        model=settings.llm_model,
        timeout=settings.llm_timeout,
        max_tokens=settings.llm_max_tokens,
    )


def build_store(settings: Settings) -> KeyValueStore:
    backend = (settings.store_backend or "").strip().lower() or "sql"
    if backend == "memory":
        return MemoryStore()
    if backend != "sql":
        logger.warning("Unknown STORE_BACKEND=%s. Using the SQL store.", backend)
    return SqlKeyValueStore.from_url(settings.database_url)


def build_evaluation_gateway(settings: Settings, notify: Optional[Notifier] = None) -> AnswerEvaluationGateway:
    return AnswerEvaluationGateway(
        settings.quiz_api_base_url,
        timeout=settings.evaluation_timeout,
        notify=notify,
    )


def build_generation_gateway(settings: Settings, notify: Optional[Notifier] = None) -> QuizGenerationGateway:
    return QuizGenerationGateway(
        settings.quiz_api_base_url,
        timeout=settings.generation_timeout,
        notify=notify,
    )
