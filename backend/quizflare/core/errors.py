from typing import Any, Dict, Optional


class QuizflareError(Exception):
    status_code = 500

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code


class QuizValidationError(QuizflareError):
    status_code = 422


class QuizNotFoundError(QuizflareError):
    status_code = 404


class QuizAccessError(QuizflareError):
    status_code = 403


class SessionError(QuizflareError):
    status_code = 409


class GenerationSourceError(QuizflareError, ValueError):
    status_code = 400


class SourceExtractionError(QuizflareError):
    status_code = 400


class DataStoreError(QuizflareError):
    status_code = 500
