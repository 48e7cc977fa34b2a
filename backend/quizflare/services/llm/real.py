import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx

from quizflare.services.provider_utils import normalize_base_url

from .base import Attachment, LLMClient

SYSTEM_PROMPT = (
    "You are a precise, multilingual quiz assistant. "
    "Follow the requested output format exactly and never add commentary."
)
logger = logging.getLogger(__name__)


class RealLLMClient(LLMClient):
    """Client for any provider that speaks the OpenAI chat/completions protocol."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        timeout: float = 30.0,
        max_tokens: int = 2048,
        temperature: float = 0.2,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = normalize_base_url(base_url)
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.transport = transport

    def _user_content(
        self,
        query: str,
        context: str,
        attachments: Sequence[Attachment],
    ) -> Union[str, List[Dict[str, Any]]]:
        cleaned = (context or "").strip()
        text = f"{query}\n\nSource material:\n{cleaned}" if cleaned else query
        if not attachments:
            return text
        parts: List[Dict[str, Any]] = [{"type": "text", "text": text}]
        for attachment in attachments:
            parts.append({"type": "image_url", "image_url": {"url": attachment.data_url()}})
        return parts

    def generate_answer(
        self,
        query: str,
        context: str,
        attachments: Sequence[Attachment] = (),
    ) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": self._user_content(query, context, attachments)},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            response = client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers=headers,
            )
        response.raise_for_status()
        data = response.json()
        choices = data.get("choices") or []
        if not choices:
            raise RuntimeError("LLM response missing choices.")
        message = choices[0].get("message") or {}
        content = (message.get("content") or "").strip()
        if not content:
            # reasoning models sometimes leave the answer in the reasoning channel
            content = (message.get("reasoning_content") or "").strip()
            if content:
                logger.warning("LLM returned empty content, using reasoning_content instead.")
        if not content:
            raise RuntimeError("LLM response missing content.")
        return content
