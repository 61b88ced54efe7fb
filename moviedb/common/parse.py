# moviedb/common/parse.py
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Optional

_int_re = re.compile(r"^-?[0-9]+$")


def is_empty(value: Any) -> bool:
    """True for the values a form leaves behind when nothing was entered."""
    return value is None or (isinstance(value, str) and value == "")


def is_integer_or_integer_string(value: Any) -> bool:
    """
    Accept real ints and strings such as "42" or "-3".
    bool is rejected even though it subclasses int.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and _int_re.match(value.strip()) is not None


def parse_string_integer(value: int | str) -> int:
    """Return ints unchanged, parse integer strings. Validate first."""
    if isinstance(value, int):
        return value
    return int(value.strip())


def parse_date(value: Any) -> Optional[date]:
    """
    Normalize a date-ish value to `datetime.date`:
      - date stays as-is, datetime is truncated to its date
      - ISO strings ("1994-05-12" or a full ISO timestamp) are parsed
      - anything else returns None
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    s = value.strip()
    try:
        return date.fromisoformat(s)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(s).date()
    except ValueError:
        return None
