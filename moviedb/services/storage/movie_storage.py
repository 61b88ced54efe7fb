# moviedb/services/storage/movie_storage.py
from __future__ import annotations

from dataclasses import fields
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from moviedb.common.logging import get_logger
from moviedb.common.parse import is_empty
from moviedb.domain.entities.movie import Movie
from moviedb.domain.entities.person import Person
from moviedb.domain.ports.directories import PersonDirectory
from moviedb.domain.ports.key_value_store import KeyValueStorePort, StorageError
from moviedb.domain.result import Err, Ok, Result
from moviedb.domain.violations import ConstraintViolation, ReferentialIntegrityConstraintViolation
from moviedb.services.mappers.collection import dump_collection, load_collection
from moviedb.services.mappers.movie import movie_from_record, movie_to_record
from moviedb.services.storage._collection import IdDirectory

logger = get_logger()

Alert = Callable[[str], None]
MoviePredicate = Callable[[Movie], bool]

# applied in this order; category goes before the fields that depend on it
UPDATE_KEYS = (
    "title",
    "release_date",
    "director",
    "actors",
    "actors_to_add",
    "actors_to_remove",
    "category",
    "about",
    "tv_series_name",
    "episode_no",
)


class MovieStorage:
    """
    The live Movie collection and its key-value persistence.

    Every movie in the collection is attached, i.e. listed in its director's
    `directed_movies` and its actors' `played_movies`. Insertion attaches,
    deletion detaches, and a rolled back update restores the links too.
    """

    def __init__(
        self,
        store: KeyValueStorePort,
        people: PersonDirectory,
        *,
        key: str = "movies",
        release_date_required: bool = False,
        alert: Optional[Alert] = None,
    ) -> None:
        self.store = store
        self.people = people
        self.key = key
        self.release_date_required = release_date_required
        self.alert: Alert = alert or logger.error
        self._movies: IdDirectory[Movie] = IdDirectory()
        self._next_id: Optional[int] = None

    # ---- lookups -----------------------------------------------------------

    @property
    def instances(self) -> Mapping[str, Movie]:
        return MappingProxyType(self._movies.items)

    def contains(self, movie_id: int | str) -> bool:
        return self._movies.contains(movie_id)

    def get(self, movie_id: int | str) -> Optional[Movie]:
        return self._movies.get(movie_id)

    def __len__(self) -> int:
        return len(self._movies)

    def next_id(self) -> int:
        if self._next_id is None:
            self._next_id = self._movies.next_id()
        return self._next_id

    # ---- mutations ---------------------------------------------------------

    def add(self, slots: Mapping[str, Any]) -> Result[Movie]:
        if is_empty(slots.get("movie_id")):
            slots = {**slots, "movie_id": self.next_id()}
        result = Movie.create(slots, self.people, self, release_date_required=self.release_date_required)
        if not result.is_ok:
            self._warn(result.violation)
            return result

        movie = result.value
        self._movies.put(movie.movie_id, movie)
        movie.attach()
        self._next_id = max(self.next_id(), movie.movie_id + 1)
        logger.info("%s created", movie)
        return result

    def update(self, slots: Mapping[str, Any]) -> Result[Movie]:
        """
        Partial update keyed by movie_id. Only keys present in `slots` are
        applied (see UPDATE_KEYS). `actors` replaces the cast,
        `actors_to_add` / `actors_to_remove` edit it. The category is
        write-once: changing or clearing it fails with FrozenValueConstraintViolation.
        Any violation restores every field and backlink.
        """
        movie_id = slots.get("movie_id")
        violation = Movie.check_movie_id(movie_id)
        if violation.ok and not self.contains(movie_id):
            violation = ReferentialIntegrityConstraintViolation(
                f"There is no movie with id {movie_id} to update!"
            )
        if not violation.ok:
            self._warn(violation)
            return Err(violation)

        movie = self.get(movie_id)
        before = movie.snapshot()
        try:
            self._apply(movie, slots)
            violation = movie.check_category_fields()
            if not violation.ok:
                raise violation
        except ConstraintViolation as e:
            movie.restore(before)
            self._warn(e)
            return Err(e)

        after = movie.snapshot()
        changed = [f.name for f in fields(before) if getattr(before, f.name) != getattr(after, f.name)]
        if changed:
            logger.info("Properties %s modified for movie %s", ", ".join(changed), movie.movie_id)
        else:
            logger.info("No property value changed for movie %s!", movie.movie_id)
        return Ok(movie)

    @staticmethod
    def _apply(movie: Movie, slots: Mapping[str, Any]) -> None:
        for key in UPDATE_KEYS:
            if key not in slots:
                continue
            value = slots[key]
            if key == "actors_to_add":
                movie.add_actors(value)
            elif key == "actors_to_remove":
                movie.remove_actors(value)
            else:
                setattr(movie, key, value)

    def update_all(self, slots: Mapping[str, Any], predicate: Optional[MoviePredicate] = None) -> int:
        """Apply `slots` to every movie matching `predicate` (all by default); returns the number updated."""
        ids = [m.movie_id for m in self._movies if predicate is None or predicate(m)]
        return sum(1 for movie_id in ids if self.update({**slots, "movie_id": movie_id}).is_ok)

    def destroy(self, movie_id: int | str) -> bool:
        movie = self.get(movie_id)
        if movie is None:
            logger.info("There is no movie with id %s to delete from the database", movie_id)
            return False

        movie.detach()
        self._movies.pop(movie.movie_id)
        if self._next_id is not None and movie.movie_id == self._next_id - 1:
            self._next_id = None
        logger.info("%s deleted", movie)
        return True

    def destroy_all(self, predicate: Optional[MoviePredicate] = None) -> int:
        ids = [m.movie_id for m in self._movies if predicate is None or predicate(m)]
        return sum(1 for movie_id in ids if self.destroy(movie_id))

    def handle_person_destroyed(self, person: Person) -> None:
        """
        Cascade for a person about to be removed. Movies that cannot exist
        without them (they direct it, or it is their biography) go first;
        every remaining cast then drops them.
        """
        destroyed = self.destroy_all(lambda m: m.director is person or m.about is person)
        updated = self.update_all(
            {"actors_to_remove": [person.person_id]},
            lambda m: person.person_id in m.actors,
        )
        if destroyed or updated:
            logger.info(
                "Person %s removed: %d movie(s) deleted, %d cast(s) updated",
                person.person_id,
                destroyed,
                updated,
            )

    # ---- persistence -------------------------------------------------------

    def retrieve_all(self) -> int:
        """
        Replace the collection with what the store holds under `key`.
        Persons must be loaded first; movies pointing at unknown persons are
        skipped with a warning. Returns the number of movies loaded.
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
            self.alert(f"Stored movie data under {self.key!r} is not readable\n{e}")
            return 0

        self.drop_all()
        for record in raw.values():
            movie = movie_from_record(record, self.people, self, release_date_required=self.release_date_required)
            if movie is not None:
                self._movies.put(movie.movie_id, movie)
                movie.attach()

        logger.info("%d movies loaded", len(self._movies))
        return len(self._movies)

    def persist(self) -> bool:
        records = {str(m.movie_id): movie_to_record(m) for m in self._movies}
        try:
            # optional fields are left out rather than written as null
            self.store.set_item(self.key, dump_collection(records, exclude_none=True))
        except StorageError as e:
            self.alert(f"Error when writing to storage\n{e}")
            return False
        logger.info("%d movies saved.", len(records))
        return True

    def clear(self) -> bool:
        try:
            self.store.set_item(self.key, "{}")
        except StorageError as e:
            self.alert(f"Error when writing to storage\n{e}")
            return False
        self.drop_all()
        self._next_id = 1
        logger.info("All movie records cleared.")
        return True

    def drop_all(self) -> int:
        """
        Detach and forget every live movie without touching the store.
        PersonStorage calls this before replacing its persons, so no movie
        is left pointing at a Person outside the collection.
        """
        dropped = len(self._movies)
        for movie in self._movies:
            movie.detach()
        self._movies = IdDirectory()
        self._next_id = None
        return dropped

    # ---- helpers -----------------------------------------------------------

    @staticmethod
    def _warn(violation: ConstraintViolation) -> None:
        logger.warning("%s: %s", violation.kind, violation.message)
