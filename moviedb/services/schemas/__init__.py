from moviedb.services.schemas.base import RecordBase
from moviedb.services.schemas.person import PersonRecord
from moviedb.services.schemas.movie import MovieRecord

__all__ = [
    "RecordBase",
    "PersonRecord",
    "MovieRecord",
]
