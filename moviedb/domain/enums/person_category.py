from __future__ import annotations

from moviedb.domain.enums.labeled import LabeledIntEnum


class PersonCategory(LabeledIntEnum):
    DIRECTOR = 1
    ACTOR = 2
    AGENT = 3
