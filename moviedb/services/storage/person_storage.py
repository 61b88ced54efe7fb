# moviedb/services/storage/person_storage.py
from __future__ import annotations

from dataclasses import fields
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, List, Mapping, Optional

from moviedb.common.logging import get_logger
from moviedb.common.parse import is_empty, is_integer_or_integer_string, parse_string_integer
from moviedb.domain.entities.person import Person
from moviedb.domain.enums.person_category import PersonCategory
from moviedb.domain.ports.key_value_store import KeyValueStorePort, StorageError
from moviedb.domain.result import Err, Ok, Result
from moviedb.domain.violations import (
    ConstraintViolation,
    RangeConstraintViolation,
    ReferentialIntegrityConstraintViolation,
)
from moviedb.services.mappers.collection import dump_collection, load_collection
from moviedb.services.mappers.person import person_from_record, person_to_record
from moviedb.services.storage._collection import IdDirectory

if TYPE_CHECKING:
    from moviedb.services.storage.movie_storage import MovieStorage

logger = get_logger()

Alert = Callable[[str], None]

# tags derived from directed_movies / played_movies
MOVIE_TAGS = frozenset({PersonCategory.DIRECTOR, PersonCategory.ACTOR})


def _changed(before: Any, after: Any) -> List[str]:
    return [f.name for f in fields(before) if getattr(before, f.name) != getattr(after, f.name)]


class PersonStorage:
    """
    The live Person collection and its key-value persistence.

    Mutations return Ok/Err: a violation is logged as "<Kind>: <message>",
    the mutation is discarded, and nothing is raised to the caller.
    Store failures are reported through `alert` and never change memory state.
    """

    def __init__(
        self,
        store: KeyValueStorePort,
        *,
        key: str = "person",
        allow_self_agent: bool = False,
        alert: Optional[Alert] = None,
    ) -> None:
        self.store = store
        self.key = key
        self.allow_self_agent = allow_self_agent
        self.alert: Alert = alert or logger.error
        self._people: IdDirectory[Person] = IdDirectory()
        self._next_id: Optional[int] = None
        self._movies: Optional["MovieStorage"] = None

    def bind_movies(self, movies: "MovieStorage") -> None:
        """Register the MovieStorage that destroy() cascades into."""
        self._movies = movies

    # ---- lookups -----------------------------------------------------------

    @property
    def instances(self) -> Mapping[str, Person]:
        return MappingProxyType(self._people.items)

    def contains(self, person_id: int | str) -> bool:
        return self._people.contains(person_id)

    def get(self, person_id: int | str) -> Optional[Person]:
        return self._people.get(person_id)

    def __len__(self) -> int:
        return len(self._people)

    def next_id(self) -> int:
        if self._next_id is None:
            self._next_id = self._people.next_id()
        return self._next_id

    # ---- mutations ---------------------------------------------------------

    def add(self, slots: Mapping[str, Any]) -> Result[Person]:
        """Insert a new person; without a person_id the next free id is used."""
        if is_empty(slots.get("person_id")):
            slots = {**slots, "person_id": self.next_id()}
        result = Person.create(slots, self, allow_self_agent=self.allow_self_agent)
        if not result.is_ok:
            self._warn(result.violation)
            return result

        person = result.value
        self._sync_movie_tags(person)
        self._people.put(person.person_id, person)
        self._next_id = max(self.next_id(), person.person_id + 1)
        if person.agent is not None:
            self.refresh_agent_tag(person.agent)
        logger.info("%s created", person)
        return result

    def update(self, slots: Mapping[str, Any]) -> Result[Person]:
        """
        Partial update. Recognized keys besides person_id: name, agent,
        categories_to_add, categories_to_remove. Absent keys are left alone;
        a violation on any of them restores the person as it was.
        DIRECTOR and ACTOR follow the person's movies and are rejected here.
        """
        person_id = slots.get("person_id")
        violation = Person.check_person_id(person_id)
        if violation.ok and not self.contains(person_id):
            violation = ReferentialIntegrityConstraintViolation(
                f"There is no person with id {person_id} to update!"
            )
        if not violation.ok:
            self._warn(violation)
            return Err(violation)

        person = self.get(person_id)
        before = person.snapshot()
        try:
            if "name" in slots:
                person.name = slots["name"]
            if "agent" in slots:
                person.agent = slots["agent"]
            to_add = list(slots.get("categories_to_add") or [])
            to_remove = list(slots.get("categories_to_remove") or [])
            for category in to_add + to_remove:
                violation = self._check_settable_category(category)
                if not violation.ok:
                    raise violation
            for category in to_add:
                person.add_category(category)
            for category in to_remove:
                person.remove_category(category)
        except ConstraintViolation as e:
            person.restore(before)
            self._warn(e)
            return Err(e)

        after = person.snapshot()
        if after.agent is not before.agent:
            for agent in (before.agent, after.agent):
                if agent is not None:
                    self.refresh_agent_tag(agent)

        changed = _changed(before, after)
        if changed:
            logger.info("Properties %s modified for person %s", ", ".join(changed), person.person_id)
        else:
            logger.info("No property value changed for person %s!", person.person_id)
        return Ok(person)

    def destroy(self, person_id: int | str) -> bool:
        """
        Remove a person and everything that depends on it: clients lose their
        agent, movies the person directs or that are about them are destroyed,
        and the person leaves every cast.
        """
        person = self.get(person_id)
        if person is None:
            logger.info("There is no person with id %s to delete from the database", person_id)
            return False

        for other in self._people:
            if other is not person and other.agent is person:
                other.agent = None
        own_agent = person.agent
        if self._movies is not None:
            self._movies.handle_person_destroyed(person)

        self._people.pop(person.person_id)
        if own_agent is not None and own_agent is not person:
            self.refresh_agent_tag(own_agent)
        if self._next_id is not None and person.person_id == self._next_id - 1:
            self._next_id = None
        logger.info("%s deleted", person)
        return True

    def refresh_agent_tag(self, person: Person) -> None:
        """AGENT follows whether anybody currently has `person` as their agent."""
        if any(p.agent is person for p in self._people):
            person.add_category(PersonCategory.AGENT)
        else:
            person.remove_category(PersonCategory.AGENT)

    # ---- persistence -------------------------------------------------------

    def retrieve_all(self) -> int:
        """
        Replace the collection with what the store holds under `key`.
        A missing or empty value leaves the collection as it is.
        Returns the number of persons loaded.
        """
        try:
            text = self.store.get_item(self.key)
        except StorageError as e:
            self.alert(f"Error when reading from storage\n{e}")
            return 0
        if not text:
            return 0
        try:
            raw = load_collection(text)
        except ValueError as e:
            self.alert(f"Stored person data under {self.key!r} is not readable\n{e}")
            return 0

        self._drop_movies()
        self._people = IdDirectory()
        self._next_id = None

        # agents may point at records further down, so resolve them in a second pass
        loaded = []
        for record in raw.values():
            person = person_from_record(record, self, resolve_agent=False, allow_self_agent=self.allow_self_agent)
            if person is not None:
                # DIRECTOR / ACTOR come back when the movies attach
                self._sync_movie_tags(person)
                self._people.put(person.person_id, person)
                loaded.append((person, record))
        for person, record in loaded:
            self._resolve_agent(person, record)

        logger.info("%d person loaded", len(self._people))
        return len(self._people)

    def _resolve_agent(self, person: Person, record: Mapping[str, Any]) -> None:
        agent_id = record.get("agent")
        if agent_id is None:
            return
        try:
            person.agent = agent_id
        except ConstraintViolation as e:
            self._warn(e)
            return
        self.refresh_agent_tag(person.agent)

    def persist(self) -> bool:
        records = {str(p.person_id): person_to_record(p) for p in self._people}
        try:
            self.store.set_item(self.key, dump_collection(records))
        except StorageError as e:
            self.alert(f"Error when writing to storage\n{e}")
            return False
        logger.info("%d person saved.", len(records))
        return True

    def clear(self) -> bool:
        try:
            self.store.set_item(self.key, "{}")
        except StorageError as e:
            self.alert(f"Error when writing to storage\n{e}")
            return False
        self._drop_movies()
        self._people = IdDirectory()
        self._next_id = 1
        logger.info("All person records cleared.")
        return True

    # ---- helpers -----------------------------------------------------------

    def _drop_movies(self) -> None:
        if self._movies is None:
            return
        dropped = self._movies.drop_all()
        if dropped:
            logger.info("%d movie(s) dropped along with the previous person collection", dropped)

    @staticmethod
    def _sync_movie_tags(person: Person) -> None:
        if person.directed_movies:
            person.add_category(PersonCategory.DIRECTOR)
        else:
            person.remove_category(PersonCategory.DIRECTOR)
        if person.played_movies:
            person.add_category(PersonCategory.ACTOR)
        else:
            person.remove_category(PersonCategory.ACTOR)

    @staticmethod
    def _check_settable_category(category: Any) -> ConstraintViolation:
        violation = Person.check_category(category)
        if violation.ok and is_integer_or_integer_string(category):
            tag = parse_string_integer(category)
            if tag in MOVIE_TAGS:
                return RangeConstraintViolation(
                    f"The person's category {PersonCategory(tag).label} follows their movies and cannot be set directly!"
                )
        return violation

    @staticmethod
    def _warn(violation: ConstraintViolation) -> None:
        logger.warning("%s: %s", violation.kind, violation.message)

