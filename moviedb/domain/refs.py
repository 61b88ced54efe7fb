# moviedb/domain/refs.py
"""
Normalization of person references.

Slot bags coming from callers carry references in several shapes: a bare id,
an id string from a form field, an already-resolved Person, or for
multi-valued fields a list of those or an id-keyed map. Every reference field
goes through one of the two functions below before it is validated, so the
entities only ever deal with raw ids.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, List, Optional, Union

from moviedb.common.parse import is_empty

if TYPE_CHECKING:
    from moviedb.domain.entities.person import Person

PersonRef = Union[int, str, "Person"]
PersonRefs = Union[PersonRef, Iterable[PersonRef], Mapping[Any, PersonRef], None]


def to_person_id(ref: Optional[PersonRef]) -> Any:
    """
    Reduce a single reference to its id. Empty input gives None; values that
    are neither ids nor persons are passed through for the checks to reject.
    """
    if is_empty(ref):
        return None
    if isinstance(ref, (int, str)):
        return ref
    return getattr(ref, "person_id", ref)


def to_person_ids(refs: PersonRefs) -> List[Any]:
    """Reduce a list, an id-keyed map, or a single reference to a list of ids."""
    if is_empty(refs):
        return []
    if isinstance(refs, Mapping):
        items: Iterable[Any] = refs.values()
    elif isinstance(refs, (str, int)) or hasattr(refs, "person_id"):
        items = [refs]
    elif isinstance(refs, Iterable):
        items = refs
    else:
        items = [refs]
    return [to_person_id(r) for r in items if not is_empty(r)]
