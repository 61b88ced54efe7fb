from moviedb.domain.enums.labeled import LabeledIntEnum
from moviedb.domain.enums.movie_category import MovieCategory
from moviedb.domain.enums.person_category import PersonCategory
__all__ = [
    "LabeledIntEnum",
    "MovieCategory",
    "PersonCategory",
]
