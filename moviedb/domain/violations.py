# moviedb/domain/violations.py
from __future__ import annotations


class ConstraintViolation(Exception):
    """
    Base of the closed set of validation outcomes. Check functions return one
    of these; setters and constructors raise the first one that applies.
    """

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    @property
    def ok(self) -> bool:
        return False

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __repr__(self) -> str:
        return f"{self.kind}({self.message!r})"


class NoConstraintViolation(ConstraintViolation):
    """Success sentinel. Returned by checks, never raised."""

    @property
    def ok(self) -> bool:
        return True


class MandatoryValueConstraintViolation(ConstraintViolation):
    """A required value is missing or empty."""


class RangeConstraintViolation(ConstraintViolation):
    """Wrong type, or a value outside the field's domain (incl. forbidden values)."""


class IntervalConstraintViolation(ConstraintViolation):
    """A number, length or date lies outside its allowed interval."""


class UniquenessConstraintViolation(ConstraintViolation):
    """An id is already taken in its collection."""


class ReferentialIntegrityConstraintViolation(ConstraintViolation):
    """A referenced id does not exist in the target collection."""


class FrozenValueConstraintViolation(ConstraintViolation):
    """An attempt to change or clear a write-once value."""


__all__ = [
    "ConstraintViolation",
    "NoConstraintViolation",
    "MandatoryValueConstraintViolation",
    "RangeConstraintViolation",
    "IntervalConstraintViolation",
    "UniquenessConstraintViolation",
    "ReferentialIntegrityConstraintViolation",
    "FrozenValueConstraintViolation",
]
