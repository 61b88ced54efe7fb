# moviedb/services/deps.py
from __future__ import annotations

from typing import Optional

from moviedb.common.settings import StorageConfig, get_settings
from moviedb.domain.ports.key_value_store import KeyValueStorePort


def get_key_value_store(cfg: Optional[StorageConfig] = None) -> KeyValueStorePort:
    """
    Provide a KeyValueStorePort implementation for the configured backend.
    Swappable via MOVIEDB_STORAGE__BACKEND (memory | file | sqlalchemy).
    """
    cfg = cfg or get_settings().storage
    if cfg.backend == "memory":
        from moviedb.services.storage.memory_store import InMemoryKeyValueStore
        return InMemoryKeyValueStore(quota_bytes=cfg.memory_quota_bytes)
    if cfg.backend == "sqlalchemy":
        from moviedb.database.repos.kv_store_repo import SqlAlchemyKeyValueStore
        return SqlAlchemyKeyValueStore.from_url(cfg.database_url, echo=cfg.echo)
    from moviedb.services.storage.file_store import FileKeyValueStore
    return FileKeyValueStore(cfg.data_root)
