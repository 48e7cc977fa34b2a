import logging
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from quizflare.core.errors import DataStoreError
from quizflare.core.ids import new_creator_id
from quizflare.schemas.quiz import LeaderboardEntry, Quiz
from quizflare.services.storage.base import KeyValueStore

QUIZZES_KEY = "quizflare_quizzes"
LEADERBOARD_KEY = "quizflare_leaderboard"
CREATOR_ID_KEY = "quizflare_guestId"
logger = logging.getLogger(__name__)

_quiz_list = TypeAdapter(List[Quiz])
_leaderboard_list = TypeAdapter(List[LeaderboardEntry])


class DataService:
    """Reads and writes the device-local records.

    Every write is a read-modify-write of the whole record with no isolation;
    two writers racing on the same key means the last write wins.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _load(self, key: str, adapter: TypeAdapter) -> list:
        raw = self.store.get(key)
        if not raw:
            return []
        try:
            return adapter.validate_json(raw)
        except ValidationError as exc:
            logger.error("Stored record %s could not be decoded: %s", key, exc)
            raise DataStoreError("Stored data is corrupted", {"key": key}) from exc

    def _dump(self, key: str, adapter: TypeAdapter, items: list) -> None:
        self.store.set(key, adapter.dump_json(items, by_alias=True, exclude_none=True))

    # creator identity

    def get_creator_id(self) -> Optional[str]:
        raw = self.store.get(CREATOR_ID_KEY)
        return raw.decode("utf-8") if raw else None

    def create_creator_id(self) -> str:
        creator_id = new_creator_id()
        self.store.set(CREATOR_ID_KEY, creator_id.encode("utf-8"))
        logger.info("Created device creator identity %s", creator_id)
        return creator_id

    def get_or_create_creator_id(self) -> str:
        return self.get_creator_id() or self.create_creator_id()

    # quizzes

    def get_quizzes(self) -> List[Quiz]:
        return self._load(QUIZZES_KEY, _quiz_list)

    def get_quiz(self, quiz_id: str) -> Optional[Quiz]:
        for quiz in self.get_quizzes():
            if quiz.id == quiz_id:
                return quiz
        return None

    def save_quiz(self, quiz: Quiz) -> None:
        quizzes = self.get_quizzes()
        for index, existing in enumerate(quizzes):
            if existing.id == quiz.id:
                quizzes[index] = quiz
                break
        else:
            quizzes.append(quiz)
        self._dump(QUIZZES_KEY, _quiz_list, quizzes)

    def delete_quiz(self, quiz_id: str) -> bool:
        quizzes = self.get_quizzes()
        remaining = [quiz for quiz in quizzes if quiz.id != quiz_id]
        if len(remaining) == len(quizzes):
            return False
        self._dump(QUIZZES_KEY, _quiz_list, remaining)
        return True

    def increment_participation_count(self, quiz_id: str) -> Optional[Quiz]:
        quiz = self.get_quiz(quiz_id)
        if quiz is None:
            return None
        updated = quiz.model_copy(update={"participation_count": quiz.participation_count + 1})
        self.save_quiz(updated)
        return updated

    # leaderboard

    def get_leaderboard(self) -> List[LeaderboardEntry]:
        return self._load(LEADERBOARD_KEY, _leaderboard_list)

    def save_leaderboard_entry(self, entry: LeaderboardEntry) -> None:
        entries = self.get_leaderboard()
        entries.append(entry)
        self._dump(LEADERBOARD_KEY, _leaderboard_list, entries)
