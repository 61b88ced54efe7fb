# moviedb/domain/entities/person.py
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, Iterable, Optional, TypedDict

from moviedb.common.parse import is_empty, is_integer_or_integer_string, parse_string_integer
from moviedb.domain.enums.person_category import PersonCategory
from moviedb.domain.ports.directories import PersonDirectory
from moviedb.domain.refs import PersonRef, to_person_id
from moviedb.domain.result import Result, attempt
from moviedb.domain.violations import (
    ConstraintViolation,
    IntervalConstraintViolation,
    MandatoryValueConstraintViolation,
    NoConstraintViolation,
    RangeConstraintViolation,
    ReferentialIntegrityConstraintViolation,
    UniquenessConstraintViolation,
)

if TYPE_CHECKING:
    from moviedb.domain.entities.movie import Movie

MAX_NAME_LENGTH = 120


class PersonSlots(TypedDict, total=False):
    person_id: int | str
    name: str
    categories: Iterable[int | str]
    agent: Optional[PersonRef]


@dataclass(frozen=True)
class PersonSnapshot:
    name: str
    categories: FrozenSet[PersonCategory]
    agent: Optional["Person"]


class Person:
    """
    A person that can direct movies, act in them, or represent other persons
    as their agent.

    Invariants kept here:
      - person_id is an integer >= 1, unique in `people`, never reassigned
      - name is a trimmed, non-empty string of at most 120 characters
      - categories only hold PersonCategory members
      - agent, when set, was a live Person of `people` at assignment time

    `directed_movies` / `played_movies` are backlinks owned by Movie: they are
    written through add_/remove_ methods that also keep the DIRECTOR / ACTOR
    tags in step. The AGENT tag is maintained by PersonStorage.
    """

    def __init__(
        self,
        *,
        person_id: int | str,
        name: str,
        categories: Optional[Iterable[int | str]] = None,
        agent: Optional[PersonRef] = None,
        people: PersonDirectory,
        allow_self_agent: bool = False,
    ) -> None:
        self._people = people
        self._allow_self_agent = allow_self_agent
        self._categories: set[PersonCategory] = set()
        self._agent: Optional[Person] = None
        self.directed_movies: Dict[int, "Movie"] = {}
        self.played_movies: Dict[int, "Movie"] = {}

        violation = Person.check_person_id_as_id(person_id, people)
        if not violation.ok:
            raise violation
        self._person_id: int = parse_string_integer(person_id)
        self.name = name
        self.categories = categories or []
        self.agent = agent

    @classmethod
    def create(
        cls,
        slots: PersonSlots,
        people: PersonDirectory,
        *,
        allow_self_agent: bool = False,
    ) -> Result["Person"]:
        """Build a Person from a slot bag, returning Err instead of raising."""
        return attempt(
            cls,
            person_id=slots.get("person_id"),
            name=slots.get("name"),
            categories=slots.get("categories"),
            agent=slots.get("agent"),
            people=people,
            allow_self_agent=allow_self_agent,
        )

    # ---- person_id ---------------------------------------------------------

    @property
    def person_id(self) -> int:
        return self._person_id

    @staticmethod
    def check_person_id(person_id: Any) -> ConstraintViolation:
        if is_empty(person_id):
            return MandatoryValueConstraintViolation("The person's personId is required!")
        if not is_integer_or_integer_string(person_id):
            return RangeConstraintViolation(
                f"The person's personId must be an integer, but is ({person_id!r}: {type(person_id).__name__})!"
            )
        if parse_string_integer(person_id) < 1:
            return IntervalConstraintViolation(
                f"The person's personId must be a positive integer, but is {person_id}!"
            )
        return NoConstraintViolation()

    @staticmethod
    def check_person_id_as_id(person_id: Any, people: PersonDirectory) -> ConstraintViolation:
        violation = Person.check_person_id(person_id)
        if violation.ok and people.contains(person_id):
            return UniquenessConstraintViolation(
                f"The person's personId ({person_id}) is already taken by another person!"
            )
        return violation

    @staticmethod
    def check_person_id_as_id_ref(person_id: Any, people: PersonDirectory) -> ConstraintViolation:
        violation = Person.check_person_id(person_id)
        if violation.ok and not people.contains(person_id):
            return ReferentialIntegrityConstraintViolation(
                f"The person with personId ({person_id}) cannot be found!"
            )
        return violation

    # ---- name --------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        violation = Person.check_name(name)
        if not violation.ok:
            raise violation
        self._name = name.strip()

    @staticmethod
    def check_name(name: Any) -> ConstraintViolation:
        if is_empty(name):
            return MandatoryValueConstraintViolation("The person's name is required!")
        if not isinstance(name, str):
            return RangeConstraintViolation(
                f"The person's name ({name!r}) must be of type str, but is {type(name).__name__}!"
            )
        length = len(name.strip())
        if length < 1 or length > MAX_NAME_LENGTH:
            return IntervalConstraintViolation(
                f"The person's name must have between 1 and {MAX_NAME_LENGTH} letters, but has {length}!"
            )
        return NoConstraintViolation()

    # ---- categories --------------------------------------------------------

    @property
    def categories(self) -> FrozenSet[PersonCategory]:
        return frozenset(self._categories)

    @categories.setter
    def categories(self, categories: Iterable[int | str]) -> None:
        categories = list(categories)
        # validate all before replacing so a bad entry leaves the set untouched
        for cat in categories:
            violation = Person.check_category(cat)
            if not violation.ok:
                raise violation
        self._categories = {
            PersonCategory(parse_string_integer(c)) for c in categories if not Person._is_unset_category(c)
        }

    @staticmethod
    def _is_unset_category(category: Any) -> bool:
        return is_empty(category) or (is_integer_or_integer_string(category) and parse_string_integer(category) == 0)

    @staticmethod
    def check_category(category: Any) -> ConstraintViolation:
        if Person._is_unset_category(category):
            return NoConstraintViolation()
        if not is_integer_or_integer_string(category):
            return RangeConstraintViolation(
                f"The person's category must be an integer, but is ({category!r}: {type(category).__name__})!"
            )
        if not 1 <= parse_string_integer(category) <= PersonCategory.max():
            return IntervalConstraintViolation(
                f"The person's category ({category}) is not in PersonCategory [1,{PersonCategory.max()}]!"
            )
        return NoConstraintViolation()

    def has_category(self, category: PersonCategory) -> bool:
        return category in self._categories

    def add_category(self, category: int | str) -> None:
        violation = Person.check_category(category)
        if not violation.ok:
            raise violation
        if not Person._is_unset_category(category):
            self._categories.add(PersonCategory(parse_string_integer(category)))

    def remove_category(self, category: int | str) -> None:
        violation = Person.check_category(category)
        if not violation.ok:
            raise violation
        if not Person._is_unset_category(category):
            self._categories.discard(PersonCategory(parse_string_integer(category)))

    # ---- agent -------------------------------------------------------------

    @property
    def agent(self) -> Optional["Person"]:
        return self._agent

    @agent.setter
    def agent(self, agent: Optional[PersonRef]) -> None:
        agent_id = to_person_id(agent)
        violation = Person.check_agent(
            agent_id, self._people, person_id=self._person_id, allow_self=self._allow_self_agent
        )
        if not violation.ok:
            raise violation
        self._agent = None if agent_id is None else self._people.get(agent_id)

    @property
    def agent_id(self) -> Optional[int]:
        return self._agent.person_id if self._agent is not None else None

    @staticmethod
    def check_agent(
        agent: Optional[PersonRef],
        people: PersonDirectory,
        *,
        person_id: Optional[int] = None,
        allow_self: bool = False,
    ) -> ConstraintViolation:
        agent_id = to_person_id(agent)
        if agent_id is None:
            return NoConstraintViolation()
        violation = Person.check_person_id_as_id_ref(agent_id, people)
        if violation.ok and not allow_self and person_id is not None:
            if parse_string_integer(agent_id) == person_id:
                return ReferentialIntegrityConstraintViolation(
                    f"The person ({person_id}) cannot be their own agent!"
                )
        return violation

    # ---- backlinks (written by Movie) --------------------------------------

    def add_directed_movie(self, movie: "Movie") -> None:
        self.directed_movies[movie.movie_id] = movie
        self._categories.add(PersonCategory.DIRECTOR)

    def remove_directed_movie(self, movie: "Movie | int") -> None:
        self.directed_movies.pop(getattr(movie, "movie_id", movie), None)
        if not self.directed_movies:
            self._categories.discard(PersonCategory.DIRECTOR)

    def add_played_movie(self, movie: "Movie") -> None:
        self.played_movies[movie.movie_id] = movie
        self._categories.add(PersonCategory.ACTOR)

    def remove_played_movie(self, movie: "Movie | int") -> None:
        self.played_movies.pop(getattr(movie, "movie_id", movie), None)
        if not self.played_movies:
            self._categories.discard(PersonCategory.ACTOR)

    # ---- rollback support --------------------------------------------------

    def snapshot(self) -> PersonSnapshot:
        return PersonSnapshot(name=self._name, categories=frozenset(self._categories), agent=self._agent)

    def restore(self, snap: PersonSnapshot) -> None:
        # values in a snapshot were valid when taken; no re-validation
        self._name = snap.name
        self._categories = set(snap.categories)
        self._agent = snap.agent

    # ---- display -----------------------------------------------------------

    def __str__(self) -> str:
        parts = [f"personId: {self.person_id}", f"name: {self.name}"]
        if self._categories:
            labels = ", ".join(c.label for c in sorted(self._categories))
            parts.append(f"categories: [{labels}]")
        if self._agent is not None:
            parts.append(f"agent: {self._agent.name}")
        return "Person{ " + ", ".join(parts) + " }"

    def __repr__(self) -> str:
        return f"<Person id={self.person_id} name={self.name!r}>"
