import logging
from typing import Any, Callable, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


class GatewayError(RuntimeError):
    pass


def error_message(response: httpx.Response, default: str) -> str:
    try:
        data = response.json()
    except ValueError:
        return default
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return default


class HttpGateway:
    """POSTs JSON to one of the AI endpoints under a shared base URL."""

    path = ""

    def __init__(
        self,
        base_url: str,
        timeout: float,
        client: Optional[httpx.Client] = None,
        notify: Optional[Notifier] = None,
    ):
        self.url = f"{base_url.rstrip('/')}/{self.path}"
        self.timeout = timeout
        self._client = client
        self._notify_callback = notify

    def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return self._client.post(self.url, json=payload, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(self.url, json=payload)

    def _notify(self, message: str) -> None:
        if self._notify_callback is not None:
            self._notify_callback(message)
