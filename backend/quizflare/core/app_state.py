"""Application-wide UI state shared by reference with every view and gateway.

Holds the colour theme (persisted alongside the rest of the device state) and
the single transient notice that views display for a few seconds.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from quizflare.services.storage.base import KeyValueStore

THEME_KEY = "quizflare_theme"
THEMES = ("light", "dark")
NOTICE_TTL_SECONDS = 4.0
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    message: str
    shown_at: float


class AppState:
    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        clock: Callable[[], float] = time.monotonic,
        notice_ttl: float = NOTICE_TTL_SECONDS,
    ) -> None:
        self._store = store
        self._clock = clock
        self._notice_ttl = notice_ttl
        self._notice: Optional[Notice] = None
        self.theme = self._load_theme()

    def _load_theme(self) -> str:
        if self._store is None:
            return "light"
        raw = self._store.get(THEME_KEY)
        theme = raw.decode("utf-8") if raw else ""
        return theme if theme in THEMES else "light"

    def toggle_theme(self) -> str:
        self.theme = "dark" if self.theme == "light" else "light"
        if self._store is not None:
            self._store.set(THEME_KEY, self.theme.encode("utf-8"))
        return self.theme

    def notify(self, message: str) -> None:
        logger.info("Notice: %s", message)
        self._notice = Notice(message=message, shown_at=self._clock())

    def current_notice(self) -> Optional[str]:
        if self._notice is None:
            return None
        if self._clock() - self._notice.shown_at >= self._notice_ttl:
            self._notice = None
            return None
        return self._notice.message
