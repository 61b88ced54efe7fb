# moviedb/database/repos/kv_store_repo.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from moviedb.database.core.main import Base, make_engine, make_session_factory, session_scope
from moviedb.database.models.kv_entry import KeyValueEntry
from moviedb.domain.ports.key_value_store import StorageError


class SqlAlchemyKeyValueStore:
    """
    KeyValueStorePort over the `kv_store` table. Each call runs in its own
    transaction; SQLAlchemy errors surface as StorageError.
    """

    def __init__(self, engine: Engine, *, create_tables: bool = True) -> None:
        self.engine = engine
        self._factory = make_session_factory(engine)
        if create_tables:
            try:
                Base.metadata.create_all(engine, tables=[KeyValueEntry.__table__])
            except SQLAlchemyError as e:
                raise StorageError(f"Cannot create the kv_store table: {e}") from e

    @classmethod
    def from_url(cls, url: str, *, echo: bool = False) -> "SqlAlchemyKeyValueStore":
        return cls(make_engine(url, echo=echo))

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        try:
            with session_scope(self._factory) as db:
                yield db
        except SQLAlchemyError as e:
            raise StorageError(f"Error when {action}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        with self._session(f"reading {key!r}") as db:
            obj = db.get(KeyValueEntry, key)
            return obj.value if obj is not None else None

    def set_item(self, key: str, value: str) -> None:
        with self._session(f"writing {key!r}") as db:
            obj = db.get(KeyValueEntry, key)
            if obj is None:
                db.add(KeyValueEntry(key=key, value=value))
            else:
                obj.value = value

    def remove_item(self, key: str) -> None:
        with self._session(f"removing {key!r}") as db:
            obj = db.get(KeyValueEntry, key)
            if obj is not None:
                db.delete(obj)

    def dispose(self) -> None:
        self.engine.dispose()
