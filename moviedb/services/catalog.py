# moviedb/services/catalog.py
from __future__ import annotations

from typing import Callable, Optional

from moviedb.common.logging import get_logger
from moviedb.common.settings import Settings, get_settings
from moviedb.domain.ports.key_value_store import KeyValueStorePort
from moviedb.services.deps import get_key_value_store
from moviedb.services.storage.movie_storage import MovieStorage
from moviedb.services.storage.person_storage import PersonStorage

logger = get_logger()


class Catalog:
    """
    Application context: one store, one PersonStorage, one MovieStorage,
    wired so that destroying a person cascades into the movies.

        catalog = Catalog()
        catalog.retrieve_all()
        catalog.people.add({"person_id": 1, "name": "George Lucas"})
        catalog.movies.add({"movie_id": 1, "title": "Star Wars", "director": 1})
        catalog.persist()
    """

    def __init__(
        self,
        store: Optional[KeyValueStorePort] = None,
        settings: Optional[Settings] = None,
        *,
        alert: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.store = store if store is not None else get_key_value_store(self.settings.storage)
        storage, validation = self.settings.storage, self.settings.validation

        self.people = PersonStorage(
            self.store,
            key=storage.person_key,
            allow_self_agent=validation.allow_self_agent,
            alert=alert,
        )
        self.movies = MovieStorage(
            self.store,
            self.people,
            key=storage.movie_key,
            release_date_required=validation.release_date_required,
            alert=alert,
        )
        self.people.bind_movies(self.movies)

    def retrieve_all(self) -> None:
        # movies resolve their persons on load
        self.people.retrieve_all()
        self.movies.retrieve_all()

    def persist(self) -> bool:
        people_ok = self.people.persist()
        movies_ok = self.movies.persist()
        return people_ok and movies_ok

    def clear(self) -> bool:
        movies_ok = self.movies.clear()
        people_ok = self.people.clear()
        return movies_ok and people_ok
