# moviedb/services/storage/_collection.py
from __future__ import annotations

from typing import Any, Dict, Generic, Iterator, Optional, TypeVar

from moviedb.common.parse import is_integer_or_integer_string, parse_string_integer

T = TypeVar("T")


def id_key(entity_id: Any) -> str:
    """Collections are keyed by decimal id strings: 7, "7" and " 07" all map to "7"."""
    if is_integer_or_integer_string(entity_id):
        return str(parse_string_integer(entity_id))
    return str(entity_id)


class IdDirectory(Generic[T]):
    """id-string keyed map that also satisfies the Person/MovieDirectory ports."""

    def __init__(self) -> None:
        self.items: Dict[str, T] = {}

    def contains(self, entity_id: Any) -> bool:
        return id_key(entity_id) in self.items

    def get(self, entity_id: Any) -> Optional[T]:
        return self.items.get(id_key(entity_id))

    def put(self, entity_id: Any, entity: T) -> None:
        self.items[id_key(entity_id)] = entity

    def pop(self, entity_id: Any) -> Optional[T]:
        return self.items.pop(id_key(entity_id), None)

    def next_id(self) -> int:
        return max((int(k) for k in self.items if k.lstrip("-").isdigit()), default=0) + 1

    def __iter__(self) -> Iterator[T]:
        return iter(list(self.items.values()))

    def __len__(self) -> int:
        return len(self.items)
