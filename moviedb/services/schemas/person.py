# moviedb/services/schemas/person.py
from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from moviedb.services.schemas.base import RecordBase


class PersonRecord(RecordBase):
    """{ personId, name, categories: number[], agent: number | null }"""
    person_id: int
    name: str
    categories: List[int] = Field(default_factory=list)
    agent: Optional[int] = None
