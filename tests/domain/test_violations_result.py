import pytest

from moviedb.domain.result import Err, Ok, attempt
from moviedb.domain.violations import (
    ConstraintViolation,
    FrozenValueConstraintViolation,
    IntervalConstraintViolation,
    MandatoryValueConstraintViolation,
    NoConstraintViolation,
    RangeConstraintViolation,
    ReferentialIntegrityConstraintViolation,
    UniquenessConstraintViolation,
)


def test_no_violation_is_ok():
    v = NoConstraintViolation()
    assert v.ok
    assert v.kind == "NoConstraintViolation"


@pytest.mark.parametrize(
    "cls",
    [
        MandatoryValueConstraintViolation,
        RangeConstraintViolation,
        IntervalConstraintViolation,
        UniquenessConstraintViolation,
        ReferentialIntegrityConstraintViolation,
        FrozenValueConstraintViolation,
    ],
)
def test_violations_carry_message_and_kind(cls):
    v = cls("boom")
    assert not v.ok
    assert v.message == "boom"
    assert str(v) == "boom"
    assert v.kind == cls.__name__
    assert repr(v) == f"{cls.__name__}('boom')"
    with pytest.raises(ConstraintViolation):
        raise v


def test_attempt_wraps_success():
    res = attempt(lambda a, b: a + b, 1, b=2)
    assert isinstance(res, Ok)
    assert res.is_ok
    assert res.value == 3


def test_attempt_folds_violation_into_err():
    def fail():
        raise RangeConstraintViolation("bad range")

    res = attempt(fail)
    assert isinstance(res, Err)
    assert not res.is_ok
    assert res.message == "bad range"
    assert isinstance(res.violation, RangeConstraintViolation)


def test_attempt_lets_other_errors_through():
    with pytest.raises(ZeroDivisionError):
        attempt(lambda: 1 / 0)
