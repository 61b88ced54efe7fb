from types import SimpleNamespace

import pytest

from moviedb.domain.refs import to_person_id, to_person_ids


@pytest.mark.parametrize(
    "ref,expected",
    [(None, None), ("", None), (3, 3), ("3", "3"), (SimpleNamespace(person_id=9), 9)],
)
def test_to_person_id(ref, expected):
    assert to_person_id(ref) == expected


def test_to_person_ids_shapes():
    lucas = SimpleNamespace(person_id=2)
    assert to_person_ids(None) == []
    assert to_person_ids("") == []
    assert to_person_ids(4) == [4]
    assert to_person_ids("4") == ["4"]
    assert to_person_ids(lucas) == [2]
    assert to_person_ids([4, "5", lucas, None, ""]) == [4, "5", 2]
    assert to_person_ids({"4": 4, "2": lucas}) == [4, 2]
    assert to_person_ids((i for i in (7, 8))) == [7, 8]
