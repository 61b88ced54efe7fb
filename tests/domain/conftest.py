# tests/domain/conftest.py
from __future__ import annotations

import pytest

from moviedb.domain.entities.person import Person
from moviedb.services.storage._collection import IdDirectory


@pytest.fixture()
def person_dir() -> IdDirectory:
    return IdDirectory()


@pytest.fixture()
def movie_dir() -> IdDirectory:
    return IdDirectory()


@pytest.fixture()
def make_person(person_dir):
    """Build a Person and register it so references to it resolve."""

    def _make(person_id, name=None, **kw) -> Person:
        p = Person(person_id=person_id, name=name or f"Person {person_id}", people=person_dir, **kw)
        person_dir.put(p.person_id, p)
        return p

    return _make
