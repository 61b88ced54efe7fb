# moviedb/services/schemas/base.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RecordBase(BaseModel):
    """
    Stored records use camelCase keys ("personId", "releaseDate", ...); Python code uses snake_case.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )
