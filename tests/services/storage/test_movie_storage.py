import json
import logging

import pytest

from moviedb.domain.enums import MovieCategory, PersonCategory
from moviedb.domain.violations import (
    FrozenValueConstraintViolation,
    MandatoryValueConstraintViolation,
    ReferentialIntegrityConstraintViolation,
    UniquenessConstraintViolation,
)


@pytest.fixture()
def cast(people):
    for pid, name in ((1, "Lucas"), (2, "Crowe"), (3, "Portman"), (4, "McGregor")):
        assert people.add({"person_id": pid, "name": name}).is_ok
    return people


def test_scenario_director_delete_cascades(people, movies):
    people.add({"person_id": 1, "name": "Lucas"})
    people.add({"person_id": 2, "name": "Crowe"})
    movies.add({"movie_id": 1, "title": "X", "director": 1, "actors": [2]})
    assert movies.contains(1)
    assert 2 in movies.instances["1"].actors

    people.destroy(1)
    assert not movies.contains(1)
    assert people.get(2).played_movies == {}
    assert not people.get(2).has_category(PersonCategory.ACTOR)


def test_deleting_an_actor_keeps_the_movie(cast, movies):
    movies.add({"movie_id": 1, "title": "X", "director": 1, "actors": [2, 3]})
    cast.destroy(2)
    assert movies.contains(1)
    assert set(movies.get(1).actors) == {3}


def test_director_check_runs_before_actor_removal(cast, movies):
    movies.add({"movie_id": 1, "title": "Self-made", "director": 2, "actors": [2, 3]})
    movies.add({"movie_id": 2, "title": "Other", "director": 1, "actors": [2]})
    cast.destroy(2)
    assert not movies.contains(1)
    assert set(movies.get(2).actors) == set()
    assert cast.get(3).played_movies == {}


def test_deleting_the_subject_of_a_biography(cast, movies):
    movies.add({"movie_id": 1, "title": "Life", "director": 1, "category": 1, "about": 3})
    cast.destroy(3)
    assert not movies.contains(1)


def test_add_sets_tags_and_next_id(cast, movies):
    res = movies.add({"movie_id": 3, "title": "Star Wars", "release_date": "1977-05-25", "director": 1, "actors": [2]})
    assert res.is_ok
    assert cast.get(1).has_category(PersonCategory.DIRECTOR)
    assert cast.get(2).has_category(PersonCategory.ACTOR)
    assert cast.get(1).directed_movies == {3: res.value}
    assert movies.next_id() == 4


def test_add_duplicate_is_a_no_op(cast, movies):
    movies.add({"movie_id": 1, "title": "First", "director": 1})
    res = movies.add({"movie_id": 1, "title": "Second", "director": 2, "actors": [3]})
    assert isinstance(res.violation, UniquenessConstraintViolation)
    assert len(movies) == 1
    assert movies.get(1).title == "First"
    assert cast.get(2).directed_movies == {}
    assert cast.get(3).played_movies == {}


def test_failed_update_changes_nothing(cast, movies, caplog):
    movies.add({"movie_id": 1, "title": "A", "director": 1, "actors": [2]})
    with caplog.at_level(logging.WARNING, logger="moviedb"):
        res = movies.update({"movie_id": 1, "title": "B", "actors": [3], "director": 9999})
    assert isinstance(res.violation, ReferentialIntegrityConstraintViolation)
    m = movies.get(1)
    assert m.title == "A"
    assert set(m.actors) == {2}
    assert cast.get(2).played_movies == {1: m}
    assert cast.get(3).played_movies == {}
    assert "ReferentialIntegrityConstraintViolation: " in caplog.text


def test_failed_update_restores_backlinks_changed_before_the_error(cast, movies):
    movies.add({"movie_id": 1, "title": "A", "director": 1, "actors": [2]})
    res = movies.update({"movie_id": 1, "director": 4, "actors_to_add": [3], "episode_no": 2})
    assert not res.is_ok
    m = movies.get(1)
    assert m.director is cast.get(1)
    assert cast.get(1).directed_movies == {1: m}
    assert cast.get(4).directed_movies == {}
    assert not cast.get(4).has_category(PersonCategory.DIRECTOR)
    assert cast.get(3).played_movies == {}


def test_update_unknown_movie(movies):
    res = movies.update({"movie_id": 9, "title": "Ghost"})
    assert isinstance(res.violation, ReferentialIntegrityConstraintViolation)


def test_update_moves_director_tag(cast, movies):
    movies.add({"movie_id": 1, "title": "A", "director": 1})
    movies.add({"movie_id": 2, "title": "B", "director": 2})
    assert movies.update({"movie_id": 1, "director": 2}).is_ok
    assert not cast.get(1).has_category(PersonCategory.DIRECTOR)
    assert set(cast.get(2).directed_movies) == {1, 2}


def test_update_actor_sets(cast, movies):
    movies.add({"movie_id": 1, "title": "A", "director": 1, "actors": [2]})
    assert movies.update({"movie_id": 1, "actors_to_add": [3, cast.get(4)]}).is_ok
    assert set(movies.get(1).actors) == {2, 3, 4}
    assert movies.update({"movie_id": 1, "actors_to_remove": {"2": cast.get(2)}}).is_ok
    assert set(movies.get(1).actors) == {3, 4}
    assert not cast.get(2).has_category(PersonCategory.ACTOR)
    assert movies.update({"movie_id": 1, "actors": ["2"]}).is_ok
    assert set(movies.get(1).actors) == {2}
    assert cast.get(3).played_movies == {}


def test_category_is_frozen_through_update(cast, movies):
    movies.add({"movie_id": 1, "title": "Life", "director": 1, "category": MovieCategory.BIOGRAPHY, "about": 2})

    res = movies.update({"movie_id": 1, "category": MovieCategory.TV_SERIES_EPISODE})
    assert isinstance(res.violation, FrozenValueConstraintViolation)
    res = movies.update({"movie_id": 1, "category": ""})
    assert isinstance(res.violation, FrozenValueConstraintViolation)
    assert movies.get(1).category is MovieCategory.BIOGRAPHY
    assert movies.update({"movie_id": 1, "category": 1, "about": 3}).is_ok
    assert movies.get(1).about is cast.get(3)


def test_setting_a_category_needs_its_fields(cast, movies):
    movies.add({"movie_id": 1, "title": "Pilot", "director": 1})
    res = movies.update({"movie_id": 1, "category": 2, "tv_series_name": "Lost"})
    assert isinstance(res.violation, MandatoryValueConstraintViolation)
    assert movies.get(1).category is None
    assert movies.get(1).tv_series_name is None

    res = movies.update({"movie_id": 1, "category": 2, "tv_series_name": "Lost", "episode_no": "1"})
    assert res.is_ok
    assert movies.get(1).episode_no == 1


def test_update_all_and_destroy_all(cast, movies):
    movies.add({"movie_id": 1, "title": "A", "director": 1, "actors": [2]})
    movies.add({"movie_id": 2, "title": "B", "director": 1})
    movies.add({"movie_id": 3, "title": "C", "director": 3})

    assert movies.update_all({"release_date": "2001-01-01"}) == 3
    assert movies.update_all({"title": "Lucas film"}, lambda m: m.director.person_id == 1) == 2
    assert movies.update_all({"director": 99}) == 0
    assert movies.get(3).title == "C"

    assert movies.destroy_all(lambda m: m.title == "Lucas film") == 2
    assert set(movies.instances) == {"3"}
    assert not cast.get(1).has_category(PersonCategory.DIRECTOR)
    assert movies.destroy_all() == 1
    assert len(movies) == 0


def test_destroy_keeps_tags_of_busy_persons(cast, movies):
    movies.add({"movie_id": 1, "title": "A", "director": 1, "actors": [2]})
    movies.add({"movie_id": 2, "title": "B", "director": 1, "actors": [2]})
    assert movies.destroy(1)
    assert cast.get(1).has_category(PersonCategory.DIRECTOR)
    assert cast.get(2).has_category(PersonCategory.ACTOR)
    assert movies.destroy(2)
    assert not cast.get(1).has_category(PersonCategory.DIRECTOR)
    assert not cast.get(2).has_category(PersonCategory.ACTOR)
    assert movies.destroy(2) is False


def test_next_id_after_destroying_highest(cast, movies):
    for mid in (1, 2, 7):
        movies.add({"movie_id": mid, "title": f"M{mid}", "director": 1})
    assert movies.next_id() == 8
    movies.destroy(7)
    assert movies.next_id() == 3


def test_persist_writes_camel_case_and_omits_unset(cast, movies, store):
    movies.add({"movie_id": 1, "title": "Star Wars", "release_date": "1977-05-25", "director": 1, "actors": [3, 2]})
    movies.add({"movie_id": 2, "title": "Ep", "director": 1, "category": 2, "tv_series_name": "Saga", "episode_no": 4})
    assert movies.persist()
    stored = json.loads(store.get_item("movies"))
    assert stored["1"] == {
        "movieId": 1,
        "title": "Star Wars",
        "releaseDate": "1977-05-25",
        "director": 1,
        "actors": [2, 3],
    }
    assert stored["2"] == {
        "movieId": 2,
        "title": "Ep",
        "director": 1,
        "actors": [],
        "category": 2,
        "tvSeriesName": "Saga",
        "episodeNo": 4,
    }


def test_retrieve_rebuilds_backlinks(cast, movies, store):
    movies.add({"movie_id": 1, "title": "A", "director": 1, "actors": [2]})
    movies.persist()
    movies.add({"movie_id": 2, "title": "Unsaved", "director": 3, "actors": [2]})

    assert movies.retrieve_all() == 1
    m = movies.get(1)
    assert not movies.contains(2)
    assert cast.get(1).directed_movies == {1: m}
    assert cast.get(2).played_movies == {1: m}
    assert not cast.get(3).has_category(PersonCategory.DIRECTOR)


def test_retrieve_skips_movies_with_unknown_persons(cast, movies, store, caplog):
    store.set_item(
        "movies",
        json.dumps(
            {
                "1": {"movieId": 1, "title": "Kept", "director": 1, "actors": [2]},
                "2": {"movieId": 2, "title": "Lost", "director": 42, "actors": []},
                "3": {"movieId": 3, "title": "Also lost", "director": 1, "actors": [43]},
            }
        ),
    )
    with caplog.at_level(logging.WARNING, logger="moviedb"):
        assert movies.retrieve_all() == 1
    assert movies.contains(1)
    assert caplog.text.count("ReferentialIntegrityConstraintViolation") == 2


def test_clear(cast, movies, store):
    movies.add({"movie_id": 1, "title": "A", "director": 1})
    assert movies.clear()
    assert len(movies) == 0
    assert store.get_item("movies") == "{}"
    assert movies.next_id() == 1
    assert not cast.get(1).has_category(PersonCategory.DIRECTOR)


def test_add_without_id_uses_next_id(cast, movies):
    assert movies.add({"title": "First", "director": 1}).value.movie_id == 1
    assert movies.add({"movie_id": "", "title": "Second", "director": 1}).value.movie_id == 2
