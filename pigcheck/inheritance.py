"""Resolution of eligible properties and links along `specializes` chains.

A class's eligibility is either UNRESTRICTED (the class declares no list,
so anything goes) or a concrete list of ids, which may be empty.

Resolution walks up the chain of parents. A class without a list is
unrestricted and its parents are not consulted. A class with a list gets
the union of its own list and its parent's resolution, except that an
unrestricted parent does not widen the child: the child's own list is
kept as it is.

The walk carries the set of classes already visited. A `specializes`
cycle ends the walk at the repeated class, which then contributes
nothing. Cycles are logged, not rejected.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Final, Union

from pigcheck.schemas import ElementClass, RelationshipClass

logger = logging.getLogger(__name__)


class Unrestricted:
    """Marker for 'every item is eligible'. Use the UNRESTRICTED instance."""

    def __repr__(self) -> str:
        return "UNRESTRICTED"


UNRESTRICTED: Final = Unrestricted()

Eligibility = Union[Unrestricted, list[str]]

ClassMap = Mapping[str, ElementClass]


def _dedupe(ids: list[str]) -> list[str]:
    return list(dict.fromkeys(ids))


def _resolve(
    class_id: str,
    classes: ClassMap,
    own_list: Callable[[ElementClass], list[str] | None],
    visited: frozenset[str],
) -> Eligibility:
    if class_id in visited:
        logger.warning("Cyclic specialization reached '%s' again, ignoring the rest of the chain", class_id)
        return []
    cls = classes.get(class_id)
    if cls is None:
        return []

    own = own_list(cls)
    if own is None:
        return UNRESTRICTED
    if not cls.specializes:
        return _dedupe(own)

    inherited = _resolve(cls.specializes, classes, own_list, visited | {class_id})
    if inherited is UNRESTRICTED:
        return _dedupe(own)
    return _dedupe(own + inherited)


def resolve_eligible_properties(class_id: str, classes: ClassMap) -> Eligibility:
    """Eligible Property ids for instances of the Entity/Relationship class `class_id`."""
    return _resolve(class_id, classes, lambda c: c.eligible_property, frozenset())


def resolve_eligible_source_links(class_id: str, classes: ClassMap) -> Eligibility:
    """Eligible source Link ids for instances of the Relationship class `class_id`.

    Entity classes have no source links; their resolution is the empty list.
    """
    return _resolve(
        class_id,
        classes,
        lambda c: c.eligible_source_link if isinstance(c, RelationshipClass) else [],
        frozenset(),
    )


def resolve_eligible_target_links(class_id: str, classes: ClassMap) -> Eligibility:
    """Eligible target Link ids for instances of the class `class_id`.

    Only the class's own declaration counts; target links are not
    inherited from the class it specializes, unlike properties and source
    links. Kept as is until it is decided whether inheritance should apply.
    """
    cls = classes.get(class_id)
    if cls is None:
        return []
    if cls.eligible_target_link is None:
        return UNRESTRICTED
    return _dedupe(cls.eligible_target_link)


def is_eligible(class_id: str | None, eligibility: Eligibility) -> bool:
    if eligibility is UNRESTRICTED:
        return True
    return class_id in eligibility
