from __future__ import annotations

from moviedb.domain.enums.labeled import LabeledIntEnum


class MovieCategory(LabeledIntEnum):
    BIOGRAPHY = 1
    TV_SERIES_EPISODE = 2
