from __future__ import annotations
from typing import Optional, Protocol


class StorageError(RuntimeError):
    """Reading from or writing to the persistent store failed."""


class StorageQuotaExceededError(StorageError):
    """The store refused a write because it would exceed its size budget."""


class KeyValueStorePort(Protocol):
    """
    Synchronous string-to-string store, shaped after browser localStorage.
    Implementations raise StorageError for any I/O failure.
    """
    def get_item(self, key: str) -> Optional[str]: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...
