# moviedb/domain/enums/labeled.py
from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, Optional

from moviedb.common.parse import is_integer_or_integer_string, parse_string_integer

# words kept upper-case in labels
_ACRONYMS = {"TV"}


class LabeledIntEnum(IntEnum):
    """
    Integer enumeration numbered from 1, with human-readable labels.
    Members are written in UPPER_SNAKE; `label` turns TV_SERIES_EPISODE into
    "TV series episode".
    """

    @property
    def label(self) -> str:
        words = [w if w in _ACRONYMS else w.lower() for w in self.name.split("_")]
        text = " ".join(words)
        return text[:1].upper() + text[1:]

    @classmethod
    def max(cls) -> int:
        return max(int(m) for m in cls)

    @classmethod
    def labels(cls) -> Dict[int, str]:
        return {int(m): m.label for m in cls}

    @classmethod
    def coerce(cls, value: Any) -> Optional["LabeledIntEnum"]:
        """Return the member for an int / integer string, or None if out of range."""
        if isinstance(value, cls):
            return value
        if not is_integer_or_integer_string(value):
            return None
        try:
            return cls(parse_string_integer(value))
        except ValueError:
            return None
