# tests/conftest.py
from __future__ import annotations

from typing import List

import pytest

from moviedb.common.settings import Settings, StorageConfig
from moviedb.services.catalog import Catalog
from moviedb.services.seed import generate_test_data
from moviedb.services.storage.memory_store import InMemoryKeyValueStore


@pytest.fixture()
def settings() -> Settings:
    # ignore any .env lying around in the working directory
    return Settings(_env_file=None, storage=StorageConfig(backend="memory"))


@pytest.fixture()
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def alerts() -> List[str]:
    return []


@pytest.fixture()
def catalog(store, settings, alerts) -> Catalog:
    return Catalog(store, settings, alert=alerts.append)


@pytest.fixture()
def people(catalog):
    return catalog.people


@pytest.fixture()
def movies(catalog):
    return catalog.movies


@pytest.fixture()
def seeded(catalog) -> Catalog:
    """Catalog holding the eight sample persons and three sample movies."""
    assert generate_test_data(catalog)
    return catalog
