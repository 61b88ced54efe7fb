# moviedb/services/schemas/movie.py
from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import Field

from moviedb.services.schemas.base import RecordBase


class MovieRecord(RecordBase):
    """
    { movieId, title, releaseDate?, director, actors: number[], category?,
      about?, tvSeriesName?, episodeNo? }
    Optional keys are left out of the stored JSON when unset.
    """
    movie_id: int
    title: str
    release_date: Optional[date] = None
    director: int
    actors: List[int] = Field(default_factory=list)
    category: Optional[int] = None
    about: Optional[int] = None
    tv_series_name: Optional[str] = None
    episode_no: Optional[int] = None
