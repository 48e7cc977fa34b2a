import logging
import os
from typing import Optional

from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from quizflare.db.models import KeyValueEntry
from quizflare.db.session import Base, build_engine, build_session_factory

from .base import KeyValueStore

logger = logging.getLogger(__name__)


class SqlKeyValueStore(KeyValueStore):
    """Key-value store backed by a single SQLAlchemy table.

    Each call opens its own short session, so the store can be shared between
    the request threads of the API and the countdown thread of a play session.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @classmethod
    def from_url(cls, database_url: str, create_tables: bool = True) -> "SqlKeyValueStore":
        url = make_url(database_url)
        if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
            directory = os.path.dirname(url.database)
            if directory:
                os.makedirs(directory, exist_ok=True)
        engine = build_engine(database_url)
        if create_tables:
            Base.metadata.create_all(engine, tables=[KeyValueEntry.__table__])
        logger.info("Opened key-value store at %s", url.render_as_string(hide_password=True))
        return cls(build_session_factory(engine))

    def get(self, key: str) -> Optional[bytes]:
        with self._session_factory() as db:
            entry = db.query(KeyValueEntry).filter(KeyValueEntry.key == key).first()
            if entry is None:
                return None
            return bytes(entry.value)

    def set(self, key: str, value: bytes) -> None:
        with self._session_factory() as db:
            entry = db.query(KeyValueEntry).filter(KeyValueEntry.key == key).first()
            if entry is None:
                db.add(KeyValueEntry(key=key, value=bytes(value)))
            else:
                entry.value = bytes(value)
            db.commit()

    def delete(self, key: str) -> None:
        with self._session_factory() as db:
            db.query(KeyValueEntry).filter(KeyValueEntry.key == key).delete()
            db.commit()
