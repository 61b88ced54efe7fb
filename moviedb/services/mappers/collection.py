# moviedb/services/mappers/collection.py
from __future__ import annotations

import json
from typing import Any, Dict, Mapping

from moviedb.services.schemas.base import RecordBase


def dump_collection(records: Mapping[str, RecordBase], *, exclude_none: bool = False) -> str:
    """Serialize `{id: record}` to the JSON text stored under one key."""
    return json.dumps(
        {key: rec.model_dump(mode="json", by_alias=True, exclude_none=exclude_none) for key, rec in records.items()}
    )


def load_collection(text: str) -> Dict[str, Any]:
    """
    Parse stored JSON text into `{id: raw record}`. Records are left raw so
    each one can be validated (and skipped) on its own.
    Raises ValueError (json.JSONDecodeError included) for anything else.
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object keyed by id, got {type(data).__name__}")
    return data
