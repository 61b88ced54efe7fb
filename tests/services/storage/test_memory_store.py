import pytest

from moviedb.domain.ports.key_value_store import StorageError, StorageQuotaExceededError
from moviedb.services.storage.memory_store import InMemoryKeyValueStore


def test_get_set_remove():
    store = InMemoryKeyValueStore({"person": "{}"})
    assert store.get_item("person") == "{}"
    assert store.get_item("movies") is None
    store.set_item("movies", '{"1": {}}')
    assert "movies" in store and len(store) == 2
    store.remove_item("movies")
    store.remove_item("movies")
    assert store.get_item("movies") is None


def test_quota_refuses_write_and_keeps_old_value():
    store = InMemoryKeyValueStore(quota_bytes=20)
    store.set_item("k", "0123456789")
    with pytest.raises(StorageQuotaExceededError):
        store.set_item("k", "x" * 40)
    assert store.get_item("k") == "0123456789"


def test_quota_error_is_a_storage_error():
    assert issubclass(StorageQuotaExceededError, StorageError)
