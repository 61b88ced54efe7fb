from __future__ import annotations
from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from moviedb.domain.entities.movie import Movie
    from moviedb.domain.entities.person import Person


class PersonDirectory(Protocol):
    def contains(self, person_id: int | str) -> bool: ...
    def get(self, person_id: int | str) -> Optional["Person"]: ...


class MovieDirectory(Protocol):
    def contains(self, movie_id: int | str) -> bool: ...
    def get(self, movie_id: int | str) -> Optional["Movie"]: ...
