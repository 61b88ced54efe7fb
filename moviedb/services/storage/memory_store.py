# moviedb/services/storage/memory_store.py
from __future__ import annotations

from typing import Dict, Iterator, Mapping, Optional

from moviedb.domain.ports.key_value_store import StorageQuotaExceededError


class InMemoryKeyValueStore:
    """
    Process-local KeyValueStorePort, the closest thing to a fresh browser
    profile. An optional byte quota reproduces localStorage's
    QuotaExceededError: the write is refused and the old value stays.
    """

    def __init__(self, initial: Optional[Mapping[str, str]] = None, *, quota_bytes: int = 0) -> None:
        self._items: Dict[str, str] = dict(initial or {})
        self.quota_bytes = quota_bytes

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes:
            used = sum(len(k) + len(v) for k, v in self._items.items() if k != key)
            needed = used + len(key) + len(value)
            if needed > self.quota_bytes:
                raise StorageQuotaExceededError(
                    f"Writing {key!r} needs {needed} bytes, quota is {self.quota_bytes}"
                )
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
