from .base import GatewayError, HttpGateway
from .evaluation import AnswerEvaluationGateway, fallback_match
from .generation import GenerationSource, QuizGenerationGateway

__all__ = [
    "AnswerEvaluationGateway",
    "GatewayError",
    "GenerationSource",
    "HttpGateway",
    "QuizGenerationGateway",
    "fallback_match",
]
