import os
from dataclasses import dataclass
from typing import List

DEFAULT_LLM_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai"
DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


@dataclass(frozen=True)
class Settings:
    data_dir: str
    store_backend: str
    database_url: str
    llm_provider: str
    llm_base_url: str
    llm_model: str
    llm_api_key: str
    llm_timeout: float
    llm_max_tokens: int
    quiz_api_base_url: str
    evaluation_timeout: float
    generation_timeout: float
    max_source_chars: int
    cors_origins: List[str]
    log_level: str


def _build_database_url(data_dir: str) -> str:
    path = os.path.join(data_dir, "quizflare.db")
    return f"sqlite:///{path}"


def _split_origins(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_settings() -> Settings:
    data_dir = os.getenv("DATA_DIR", "data")
    database_url = os.getenv("DATABASE_URL") or _build_database_url(data_dir)
    # API_KEY is the variable name the hosted functions were deployed with.
    llm_api_key = os.getenv("LLM_API_KEY") or os.getenv("API_KEY", "")

    return Settings(
        data_dir=data_dir,
        store_backend=os.getenv("STORE_BACKEND", "sql").strip().lower(),
        database_url=database_url,
        llm_provider=os.getenv("LLM_PROVIDER", "gemini"),
        llm_base_url=os.getenv("LLM_BASE_URL", DEFAULT_LLM_BASE_URL),
        llm_model=os.getenv("LLM_MODEL", "gemini-2.5-flash"),
        llm_api_key=llm_api_key,
        llm_timeout=float(os.getenv("LLM_TIMEOUT", "30")),
        llm_max_tokens=int(os.getenv("LLM_MAX_TOKENS", "2048")),
        quiz_api_base_url=os.getenv("QUIZ_API_BASE_URL", "http://localhost:8000/api"),
        evaluation_timeout=float(os.getenv("EVALUATION_TIMEOUT", "15")),
        generation_timeout=float(os.getenv("GENERATION_TIMEOUT", "90")),
        max_source_chars=int(os.getenv("MAX_SOURCE_CHARS", "30000")),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
