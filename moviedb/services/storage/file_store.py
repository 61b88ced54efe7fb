# moviedb/services/storage/file_store.py
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional

from moviedb.common.path.safe import contained_path
from moviedb.domain.ports.key_value_store import StorageError


class FileKeyValueStore:
    """
    KeyValueStorePort backed by one file per key under `root`
    (e.g. <root>/person.json, <root>/movies.json).

    Writes go to a temp file in the same directory and are moved into place
    with os.replace, so a reader sees either the old or the new value.
    """

    def __init__(self, root: Path | str, *, suffix: str = ".json") -> None:
        self.root = Path(root).expanduser().resolve()
        self.suffix = suffix

    def _path(self, key: str) -> Path:
        try:
            return contained_path(self.root, f"{key}{self.suffix}")
        except ValueError as e:
            raise StorageError(f"Invalid storage key {key!r}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Error when reading {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp: Optional[Path] = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as fh:
                tmp = Path(fh.name)
                fh.write(value)
            os.replace(tmp, path)
        except OSError as e:
            if tmp is not None:
                tmp.unlink(missing_ok=True)
            raise StorageError(f"Error when writing {path}: {e}") from e

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Error when removing {path}: {e}") from e
