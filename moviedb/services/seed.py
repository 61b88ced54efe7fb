# moviedb/services/seed.py
from __future__ import annotations

from moviedb.common.logging import get_logger
from moviedb.services.catalog import Catalog

logger = get_logger()

TEST_PEOPLE = (
    {"person_id": 1, "name": "Stephen Frears"},
    {"person_id": 2, "name": "George Lucas"},
    {"person_id": 3, "name": "Quentin Terrentino"},
    {"person_id": 4, "name": "Uma Thurman"},
    {"person_id": 5, "name": "John Travolta"},
    {"person_id": 6, "name": "Ewan McGregor"},
    {"person_id": 7, "name": "Natalie Portman"},
    {"person_id": 8, "name": "Keanu Reeves"},
)

TEST_MOVIES = (
    {"movie_id": 1, "title": "Pulp Fiction", "release_date": "1994-05-12", "director": 3, "actors": [4, 5]},
    {"movie_id": 2, "title": "Star Wars", "release_date": "1977-05-25", "director": 2, "actors": [6, 7]},
    {"movie_id": 3, "title": "Dangerous Liaisons", "release_date": "1988-12-16", "director": 1, "actors": [4, 8]},
)


def generate_test_data(catalog: Catalog) -> bool:
    """Load the sample persons and movies into `catalog` and persist both collections."""
    logger.info("Generating test data")
    for slots in TEST_PEOPLE:
        catalog.people.add(slots)
    for slots in TEST_MOVIES:
        catalog.movies.add(slots)
    return catalog.persist()


def clear_data(catalog: Catalog) -> bool:
    """Wipe both collections in memory and in the store."""
    return catalog.clear()
