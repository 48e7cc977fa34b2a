import os

from quizflare.services.storage.memory import MemoryStore
from quizflare.services.storage.sql import SqlKeyValueStore


def test_memory_store_set_get_delete():
    store = MemoryStore()
    assert store.get("missing") is None
    store.set("a", b"1")
    store.set("a", b"2")
    assert store.get("a") == b"2"
    assert store.keys() == ["a"]
    store.delete("a")
    store.delete("a")
    assert store.get("a") is None


def test_sql_store_round_trip(tmp_path):
    url = f"sqlite:///{tmp_path / 'store.db'}"
    store = SqlKeyValueStore.from_url(url)
    assert store.get("quizflare_quizzes") is None

    store.set("quizflare_quizzes", b"[]")
    store.set("quizflare_quizzes", b'[{"id": "quiz_1"}]')
    assert store.get("quizflare_quizzes") == b'[{"id": "quiz_1"}]'

    store.delete("quizflare_quizzes")
    assert store.get("quizflare_quizzes") is None


def test_sql_store_persists_across_instances(tmp_path):
    url = f"sqlite:///{tmp_path / 'nested' / 'dir' / 'store.db'}"
    SqlKeyValueStore.from_url(url).set("quizflare_guestId", b"guest_1_abcdefg")

    assert os.path.exists(tmp_path / "nested" / "dir" / "store.db")
    reopened = SqlKeyValueStore.from_url(url)
    assert reopened.get("quizflare_guestId") == b"guest_1_abcdefg"


def test_sql_store_in_memory_url():
    store = SqlKeyValueStore.from_url("sqlite://")
    store.set("k", b"v")
    assert store.get("k") == b"v"
