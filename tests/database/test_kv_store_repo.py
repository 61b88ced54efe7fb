import pytest
from sqlalchemy import inspect

from moviedb.database.core.main import make_engine
from moviedb.database.models import Base
from moviedb.database.repos.kv_store_repo import SqlAlchemyKeyValueStore
from moviedb.domain.ports.key_value_store import StorageError


@pytest.fixture()
def kv(tmp_path):
    store = SqlAlchemyKeyValueStore.from_url(f"sqlite:///{tmp_path / 'nested' / 'kv.sqlite3'}")
    try:
        yield store
    finally:
        store.dispose()


def test_table_created(kv):
    assert "kv_store" in inspect(kv.engine).get_table_names()
    columns = {c["name"] for c in inspect(kv.engine).get_columns("kv_store")}
    assert columns == {"key", "value", "date_created", "last_updated"}


def test_get_set_overwrite_remove(kv):
    assert kv.get_item("person") is None
    kv.set_item("person", "{}")
    assert kv.get_item("person") == "{}"
    kv.set_item("person", '{"1": {"personId": 1, "name": "Lucas"}}')
    assert kv.get_item("person") == '{"1": {"personId": 1, "name": "Lucas"}}'
    kv.remove_item("person")
    kv.remove_item("person")
    assert kv.get_item("person") is None


def test_values_survive_a_new_engine(tmp_path):
    url = f"sqlite:///{tmp_path / 'kv.sqlite3'}"
    first = SqlAlchemyKeyValueStore(make_engine(url))
    first.set_item("movies", "{}")
    first.dispose()

    second = SqlAlchemyKeyValueStore.from_url(url)
    assert second.get_item("movies") == "{}"
    second.dispose()


def test_sqlalchemy_errors_become_storage_errors(kv):
    Base.metadata.drop_all(kv.engine)
    with pytest.raises(StorageError):
        kv.get_item("person")
    with pytest.raises(StorageError):
        kv.set_item("person", "{}")
