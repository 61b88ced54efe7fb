# moviedb/domain/entities/movie.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Mapping, Optional, TypedDict

from moviedb.common.parse import (
    is_empty,
    is_integer_or_integer_string,
    parse_date,
    parse_string_integer,
)
from moviedb.domain.entities.person import Person
from moviedb.domain.enums.movie_category import MovieCategory
from moviedb.domain.ports.directories import MovieDirectory, PersonDirectory
from moviedb.domain.refs import PersonRef, PersonRefs, to_person_id, to_person_ids
from moviedb.domain.result import Result, attempt
from moviedb.domain.violations import (
    ConstraintViolation,
    FrozenValueConstraintViolation,
    IntervalConstraintViolation,
    MandatoryValueConstraintViolation,
    NoConstraintViolation,
    RangeConstraintViolation,
    UniquenessConstraintViolation,
)

# first public film screening (Lumière, Paris)
MIN_RELEASE_DATE = date(1895, 12, 28)
MAX_TITLE_LENGTH = 120


class MovieSlots(TypedDict, total=False):
    movie_id: int | str
    title: str
    release_date: Optional[date | str]
    director: PersonRef
    actors: PersonRefs
    category: Optional[int | str]
    about: Optional[PersonRef]
    tv_series_name: Optional[str]
    episode_no: Optional[int | str]


MOVIE_SLOT_KEYS = (
    "movie_id",
    "title",
    "release_date",
    "director",
    "actors",
    "category",
    "about",
    "tv_series_name",
    "episode_no",
)


@dataclass(frozen=True)
class MovieSnapshot:
    title: str
    release_date: Optional[date]
    director: Person
    actors: Mapping[int, Person]
    category: Optional[MovieCategory]
    about: Optional[Person]
    tv_series_name: Optional[str]
    episode_no: Optional[int]


class Movie:
    """
    A movie with a mandatory director, an optional cast, and an optional
    write-once category that decides which of `about` / `tv_series_name` /
    `episode_no` must be present:

        BIOGRAPHY          -> about required; tv fields forbidden
        TV_SERIES_EPISODE  -> tv_series_name + episode_no required; about forbidden
        (none)             -> all three forbidden

    References to persons are resolved to Person objects on assignment.
    While a movie is attached (live in a MovieStorage) director and actor
    changes also write the Person backlinks; a freshly constructed movie is
    detached so a failed construction leaves no trace on the persons.
    """

    def __init__(
        self,
        *,
        movie_id: int | str,
        title: str,
        release_date: Optional[date | str] = None,
        director: Optional[PersonRef] = None,
        actors: PersonRefs = None,
        category: Optional[int | str] = None,
        about: Optional[PersonRef] = None,
        tv_series_name: Optional[str] = None,
        episode_no: Optional[int | str] = None,
        people: PersonDirectory,
        movies: MovieDirectory,
        release_date_required: bool = False,
    ) -> None:
        self._people = people
        self._movies = movies
        self._release_date_required = release_date_required
        self._attached = False
        self._release_date: Optional[date] = None
        self._director: Optional[Person] = None
        self._actors: Dict[int, Person] = {}
        self._category: Optional[MovieCategory] = None
        self._about: Optional[Person] = None
        self._tv_series_name: Optional[str] = None
        self._episode_no: Optional[int] = None

        violation = Movie.check_movie_id_as_id(movie_id, movies)
        if not violation.ok:
            raise violation
        self._movie_id: int = parse_string_integer(movie_id)
        self.title = title
        self.release_date = release_date
        self.director = director
        self.actors = actors
        # category before the fields that depend on it
        self.category = category
        self.about = about
        self.tv_series_name = tv_series_name
        self.episode_no = episode_no

    @classmethod
    def create(
        cls,
        slots: MovieSlots,
        people: PersonDirectory,
        movies: MovieDirectory,
        *,
        release_date_required: bool = False,
    ) -> Result["Movie"]:
        """Build a Movie from a slot bag, returning Err instead of raising."""
        fields = {k: slots.get(k) for k in MOVIE_SLOT_KEYS}
        return attempt(cls, **fields, people=people, movies=movies, release_date_required=release_date_required)

    # ---- movie_id ----------------------------------------------------------

    @property
    def movie_id(self) -> int:
        return self._movie_id

    @staticmethod
    def check_movie_id(movie_id: Any) -> ConstraintViolation:
        if is_empty(movie_id):
            return MandatoryValueConstraintViolation("The movie's movieId is required!")
        if not is_integer_or_integer_string(movie_id):
            return RangeConstraintViolation(
                f"The movie's movieId must be an integer, but is ({movie_id!r}: {type(movie_id).__name__})!"
            )
        if parse_string_integer(movie_id) < 1:
            return IntervalConstraintViolation(f"The movie's movieId must be a positive integer, but is {movie_id}!")
        return NoConstraintViolation()

    @staticmethod
    def check_movie_id_as_id(movie_id: Any, movies: MovieDirectory) -> ConstraintViolation:
        violation = Movie.check_movie_id(movie_id)
        if violation.ok and movies.contains(movie_id):
            return UniquenessConstraintViolation(
                f"The movie's movieId ({movie_id}) is already taken by another movie!"
            )
        return violation

    # ---- title -------------------------------------------------------------

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, title: str) -> None:
        violation = Movie.check_title(title)
        if not violation.ok:
            raise violation
        self._title = title.strip()

    @staticmethod
    def check_title(title: Any) -> ConstraintViolation:
        if is_empty(title):
            return MandatoryValueConstraintViolation("The movie's title is required!")
        if not isinstance(title, str):
            return RangeConstraintViolation(
                f"The movie's title ({title!r}) must be of type str, but is {type(title).__name__}!"
            )
        length = len(title.strip())
        if length < 1 or length > MAX_TITLE_LENGTH:
            return IntervalConstraintViolation(
                f"The movie's title must have a length between 1 and {MAX_TITLE_LENGTH} letters, but is {length}!"
            )
        return NoConstraintViolation()

    # ---- release_date ------------------------------------------------------

    @property
    def release_date(self) -> Optional[date]:
        return self._release_date

    @release_date.setter
    def release_date(self, release_date: Optional[date | str]) -> None:
        violation = Movie.check_release_date(release_date, required=self._release_date_required)
        if not violation.ok:
            raise violation
        self._release_date = parse_date(release_date)

    @staticmethod
    def check_release_date(release_date: Any, *, required: bool = False) -> ConstraintViolation:
        if is_empty(release_date):
            if required:
                return MandatoryValueConstraintViolation("The movie's releaseDate is required!")
            return NoConstraintViolation()
        parsed = parse_date(release_date)
        if parsed is None:
            return RangeConstraintViolation(
                f"The movie's releaseDate must be a date or an ISO date string, but is {release_date!r}!"
            )
        if parsed < MIN_RELEASE_DATE:
            return IntervalConstraintViolation(
                f"The movie's releaseDate must not be before {MIN_RELEASE_DATE.isoformat()}, "
                f"but is {parsed.isoformat()}!"
            )
        return NoConstraintViolation()

    # ---- director ----------------------------------------------------------

    @property
    def director(self) -> Person:
        return self._director  # type: ignore[return-value]

    @director.setter
    def director(self, director: PersonRef) -> None:
        director_id = to_person_id(director)
        violation = Movie.check_director(director_id, self._people)
        if not violation.ok:
            raise violation
        person = self._people.get(director_id)
        if person is self._director:
            return
        if self._attached and self._director is not None:
            self._director.remove_directed_movie(self)
        self._director = person
        if self._attached:
            person.add_directed_movie(self)

    @staticmethod
    def check_director(director: Optional[PersonRef], people: PersonDirectory) -> ConstraintViolation:
        director_id = to_person_id(director)
        if director_id is None:
            return MandatoryValueConstraintViolation("The movie's director is required!")
        return Person.check_person_id_as_id_ref(director_id, people)

    # ---- actors ------------------------------------------------------------

    @property
    def actors(self) -> Dict[int, Person]:
        """Copy of the cast, keyed by person_id."""
        return dict(self._actors)

    @actors.setter
    def actors(self, actors: PersonRefs) -> None:
        resolved = self._resolve_actors(actors)
        if self._attached:
            for pid, person in self._actors.items():
                if pid not in resolved:
                    person.remove_played_movie(self)
            for pid, person in resolved.items():
                if pid not in self._actors:
                    person.add_played_movie(self)
        self._actors = resolved

    @staticmethod
    def check_actor(actor: Optional[PersonRef], people: PersonDirectory) -> ConstraintViolation:
        actor_id = to_person_id(actor)
        if actor_id is None:
            return MandatoryValueConstraintViolation("An actor reference must not be empty!")
        return Person.check_person_id_as_id_ref(actor_id, people)

    def _resolve_actors(self, actors: PersonRefs) -> Dict[int, Person]:
        # all-or-nothing: every id is checked before anything is resolved
        ids = to_person_ids(actors)
        for actor_id in ids:
            violation = Movie.check_actor(actor_id, self._people)
            if not violation.ok:
                raise violation
        return {parse_string_integer(i): self._people.get(i) for i in ids}

    def add_actor(self, actor: PersonRef) -> None:
        self.add_actors([actor])

    def add_actors(self, actors: PersonRefs) -> None:
        for pid, person in self._resolve_actors(actors).items():
            if pid in self._actors:
                continue
            self._actors[pid] = person
            if self._attached:
                person.add_played_movie(self)

    def remove_actor(self, actor: PersonRef) -> None:
        self.remove_actors([actor])

    def remove_actors(self, actors: PersonRefs) -> None:
        for pid in self._resolve_actors(actors):
            person = self._actors.pop(pid, None)
            if person is not None and self._attached:
                person.remove_played_movie(self)

    # ---- category (write-once) --------------------------------------------

    @property
    def category(self) -> Optional[MovieCategory]:
        return self._category

    @category.setter
    def category(self, category: Optional[int | str]) -> None:
        violation = Movie.check_category(category)
        if violation.ok and self._category is not None:
            if is_empty(category):
                violation = FrozenValueConstraintViolation(
                    f"The movie's category ({self._category.label}) must not be unset!"
                )
            elif MovieCategory(parse_string_integer(category)) != self._category:
                violation = FrozenValueConstraintViolation(
                    f"The movie's category ({self._category.label}) must not be changed (to {category})!"
                )
            else:
                return
        if not violation.ok:
            raise violation
        self._category = None if is_empty(category) else MovieCategory(parse_string_integer(category))

    @staticmethod
    def check_category(category: Any) -> ConstraintViolation:
        if is_empty(category):
            return NoConstraintViolation()
        if not is_integer_or_integer_string(category):
            return RangeConstraintViolation(
                f"The movie's category must be an integer, but is ({category!r}: {type(category).__name__})!"
            )
        if not 1 <= parse_string_integer(category) <= MovieCategory.max():
            return IntervalConstraintViolation(
                f"The movie's category ({category}) is not in MovieCategory [1,{MovieCategory.max()}]!"
            )
        return NoConstraintViolation()

    # ---- about (BIOGRAPHY only) -------------------------------------------

    @property
    def about(self) -> Optional[Person]:
        return self._about

    @about.setter
    def about(self, about: Optional[PersonRef]) -> None:
        about_id = to_person_id(about)
        violation = Movie.check_about(about_id, self._category, self._people)
        if not violation.ok:
            raise violation
        self._about = None if about_id is None else self._people.get(about_id)

    @staticmethod
    def check_about(
        about: Optional[PersonRef], category: Any, people: PersonDirectory
    ) -> ConstraintViolation:
        about_id = to_person_id(about)
        is_biography = MovieCategory.coerce(category) == MovieCategory.BIOGRAPHY
        if is_biography and about_id is None:
            return MandatoryValueConstraintViolation("A biography movie must have an 'about' field!")
        if not is_biography and about_id is not None:
            return RangeConstraintViolation(
                "An 'about' field value must not be provided if the movie is not a biography!"
            )
        if about_id is not None:
            return Person.check_person_id_as_id_ref(about_id, people)
        return NoConstraintViolation()

    # ---- tv_series_name / episode_no (TV_SERIES_EPISODE only) -------------

    @property
    def tv_series_name(self) -> Optional[str]:
        return self._tv_series_name

    @tv_series_name.setter
    def tv_series_name(self, tv_series_name: Optional[str]) -> None:
        violation = Movie.check_tv_series_name(tv_series_name, self._category)
        if not violation.ok:
            raise violation
        self._tv_series_name = None if is_empty(tv_series_name) else tv_series_name.strip()  # type: ignore[union-attr]

    @staticmethod
    def check_tv_series_name(tv_series_name: Any, category: Any) -> ConstraintViolation:
        is_episode = MovieCategory.coerce(category) == MovieCategory.TV_SERIES_EPISODE
        if is_empty(tv_series_name):
            if is_episode:
                return MandatoryValueConstraintViolation("A TV series episode must have a 'tvSeriesName' field!")
            return NoConstraintViolation()
        if not is_episode:
            return RangeConstraintViolation(
                "A 'tvSeriesName' field value must not be provided if the movie is not a TV series episode!"
            )
        if not isinstance(tv_series_name, str):
            return RangeConstraintViolation(
                f"The movie's tvSeriesName must be of type str, but is {type(tv_series_name).__name__}!"
            )
        length = len(tv_series_name.strip())
        if length < 1 or length > MAX_TITLE_LENGTH:
            return IntervalConstraintViolation(
                f"The movie's tvSeriesName must have a length between 1 and {MAX_TITLE_LENGTH} letters, "
                f"but is {length}!"
            )
        return NoConstraintViolation()

    @property
    def episode_no(self) -> Optional[int]:
        return self._episode_no

    @episode_no.setter
    def episode_no(self, episode_no: Optional[int | str]) -> None:
        violation = Movie.check_episode_no(episode_no, self._category)
        if not violation.ok:
            raise violation
        self._episode_no = None if is_empty(episode_no) else parse_string_integer(episode_no)  # type: ignore[arg-type]

    @staticmethod
    def check_episode_no(episode_no: Any, category: Any) -> ConstraintViolation:
        is_episode = MovieCategory.coerce(category) == MovieCategory.TV_SERIES_EPISODE
        if is_empty(episode_no):
            if is_episode:
                return MandatoryValueConstraintViolation("A TV series episode must have an 'episodeNo' field!")
            return NoConstraintViolation()
        if not is_episode:
            return RangeConstraintViolation(
                "An 'episodeNo' field value must not be provided if the movie is not a TV series episode!"
            )
        if not is_integer_or_integer_string(episode_no):
            return RangeConstraintViolation(
                f"The episode's episodeNo must be an integer, but is ({episode_no!r}: {type(episode_no).__name__})!"
            )
        if parse_string_integer(episode_no) < 1:
            return IntervalConstraintViolation(f"The episode's episodeNo must be larger than 0, but is {episode_no}!")
        return NoConstraintViolation()

    def check_category_fields(self) -> ConstraintViolation:
        """Re-check about / tv_series_name / episode_no against the current category."""
        for violation in (
            Movie.check_about(self._about, self._category, self._people),
            Movie.check_tv_series_name(self._tv_series_name, self._category),
            Movie.check_episode_no(self._episode_no, self._category),
        ):
            if not violation.ok:
                return violation
        return NoConstraintViolation()

    # ---- backlinks ---------------------------------------------------------

    @property
    def attached(self) -> bool:
        return self._attached

    def attach(self) -> None:
        """Write this movie into its director's and actors' backlinks."""
        if self._attached:
            return
        self._attached = True
        self.director.add_directed_movie(self)
        for person in self._actors.values():
            person.add_played_movie(self)

    def detach(self) -> None:
        """Remove this movie from every backlink; tags go when nothing else is left."""
        if not self._attached:
            return
        self._attached = False
        self.director.remove_directed_movie(self)
        for person in self._actors.values():
            person.remove_played_movie(self)

    # ---- rollback support --------------------------------------------------

    def snapshot(self) -> MovieSnapshot:
        return MovieSnapshot(
            title=self._title,
            release_date=self._release_date,
            director=self.director,
            actors=dict(self._actors),
            category=self._category,
            about=self._about,
            tv_series_name=self._tv_series_name,
            episode_no=self._episode_no,
        )

    def restore(self, snap: MovieSnapshot) -> None:
        was_attached = self._attached
        self.detach()
        self._title = snap.title
        self._release_date = snap.release_date
        self._director = snap.director
        self._actors = dict(snap.actors)
        self._category = snap.category
        self._about = snap.about
        self._tv_series_name = snap.tv_series_name
        self._episode_no = snap.episode_no
        if was_attached:
            self.attach()

    # ---- display -----------------------------------------------------------

    def __str__(self) -> str:
        released = self._release_date.isoformat() if self._release_date else "unknown"
        text = (
            f"Movie{{ movieId: {self.movie_id}, title: {self.title}, releaseDate: {released}, "
            f"director: {self.director.name}"
        )
        if self._actors:
            text += ", actors: [" + ", ".join(p.name for p in self._actors.values()) + "]"
        if self._category == MovieCategory.BIOGRAPHY and self._about is not None:
            text += f", biography about: {self._about.name}"
        elif self._category == MovieCategory.TV_SERIES_EPISODE:
            text += f", episode: {self._episode_no}, tv series: {self._tv_series_name}"
        return text + " }"

    def __repr__(self) -> str:
        return f"<Movie id={self.movie_id} title={self.title!r}>"
