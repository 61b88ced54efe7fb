# moviedb/domain/result.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

from moviedb.domain.violations import ConstraintViolation

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    violation: ConstraintViolation

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return self.violation.message


Result = Union[Ok[T], Err]


def attempt(fn: Callable[..., T], *args, **kwargs) -> Result[T]:
    """Run `fn` and fold a raised ConstraintViolation into an Err."""
    try:
        return Ok(fn(*args, **kwargs))
    except ConstraintViolation as e:
        return Err(e)
