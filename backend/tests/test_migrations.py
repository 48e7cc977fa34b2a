import os

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from quizflare.services.storage.sql import SqlKeyValueStore

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def test_upgrade_creates_kv_table(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    config = Config(os.path.join(BACKEND_DIR, "alembic.ini"))
    config.set_main_option("sqlalchemy.url", url)

    command.upgrade(config, "head")

    inspector = inspect(create_engine(url))
    assert "kv_entries" in inspector.get_table_names()
    columns = {column["name"] for column in inspector.get_columns("kv_entries")}
    assert columns == {"key", "value", "updated_at"}

    store = SqlKeyValueStore.from_url(url, create_tables=False)
    store.set("quizflare_theme", b"dark")
    assert store.get("quizflare_theme") == b"dark"
