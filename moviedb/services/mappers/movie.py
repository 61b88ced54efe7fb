# moviedb/services/mappers/movie.py
from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import ValidationError

from moviedb.common.logging import get_logger
from moviedb.domain.entities.movie import Movie
from moviedb.domain.ports.directories import MovieDirectory, PersonDirectory
from moviedb.services.schemas.movie import MovieRecord

logger = get_logger()


def movie_to_record(movie: Movie) -> MovieRecord:
    # object references go out as bare ids
    return MovieRecord(
        movie_id=movie.movie_id,
        title=movie.title,
        release_date=movie.release_date,
        director=movie.director.person_id,
        actors=sorted(movie.actors),
        category=int(movie.category) if movie.category is not None else None,
        about=movie.about.person_id if movie.about is not None else None,
        tv_series_name=movie.tv_series_name,
        episode_no=movie.episode_no,
    )


def movie_from_record(
    raw: Mapping[str, Any] | MovieRecord,
    people: PersonDirectory,
    movies: MovieDirectory,
    *,
    release_date_required: bool = False,
) -> Optional[Movie]:
    """Rebuild a (detached) Movie from a stored record, or None with a warning."""
    try:
        rec = raw if isinstance(raw, MovieRecord) else MovieRecord.model_validate(raw)
    except ValidationError as e:
        logger.warning("Invalid movie record skipped: %s", e)
        return None

    result = Movie.create(
        rec.model_dump(),
        people,
        movies,
        release_date_required=release_date_required,
    )
    if not result.is_ok:
        logger.warning("%s while deserializing a movie: %s", result.violation.kind, result.message)
        return None
    return result.value
