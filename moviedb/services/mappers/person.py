# moviedb/services/mappers/person.py
from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import ValidationError

from moviedb.common.logging import get_logger
from moviedb.domain.entities.person import Person
from moviedb.domain.ports.directories import PersonDirectory
from moviedb.services.schemas.person import PersonRecord

logger = get_logger()


def person_to_record(person: Person) -> PersonRecord:
    return PersonRecord(
        person_id=person.person_id,
        name=person.name,
        categories=sorted(int(c) for c in person.categories),
        agent=person.agent_id,
    )


def person_from_record(
    raw: Mapping[str, Any] | PersonRecord,
    people: PersonDirectory,
    *,
    resolve_agent: bool = True,
    allow_self_agent: bool = False,
) -> Optional[Person]:
    """
    Rebuild a Person from a stored record, or return None (with a warning)
    if the record does not pass validation.

    With resolve_agent=False the agent is left unset; bulk loading uses that
    for its first pass because the agent's record may come later.
    """
    try:
        rec = raw if isinstance(raw, PersonRecord) else PersonRecord.model_validate(raw)
    except ValidationError as e:
        logger.warning("Invalid person record skipped: %s", e)
        return None

    result = Person.create(
        {
            "person_id": rec.person_id,
            "name": rec.name,
            "categories": rec.categories,
            "agent": rec.agent if resolve_agent else None,
        },
        people,
        allow_self_agent=allow_self_agent,
    )
    if not result.is_ok:
        logger.warning("%s while deserializing a person: %s", result.violation.kind, result.message)
        return None
    return result.value
