"""Eligibility of the properties and links attached to instances."""

from __future__ import annotations

from collections.abc import Sequence

from pigcheck import messages
from pigcheck.index import PackageIndex
from pigcheck.inheritance import (
    is_eligible,
    resolve_eligible_properties,
    resolve_eligible_source_links,
    resolve_eligible_target_links,
)
from pigcheck.messages import RSP_OK, msg
from pigcheck.models import Rsp
from pigcheck.schemas import (
    ALinkSchema,
    ARelationship,
    AnEntity,
    BaseItemSchema,
    EntityClass,
    InstanceSchema,
    RelationshipClass,
)


def resolved_class(item: InstanceSchema, index: PackageIndex):
    """The Entity/Relationship class of an instance, or None if hasClass does not resolve to the right kind."""
    cls = index.classes.get(item.has_class or "")
    if isinstance(item, AnEntity) and isinstance(cls, EntityClass):
        return cls
    if isinstance(item, ARelationship) and isinstance(cls, RelationshipClass):
        return cls
    return None


def check_eligible_properties(graph: Sequence[BaseItemSchema], index: PackageIndex) -> Rsp:
    """Every aProperty of an instance must be eligible for the instance's class."""
    for item in graph:
        if not isinstance(item, InstanceSchema) or resolved_class(item, index) is None:
            continue
        eligible = resolve_eligible_properties(item.has_class, index.classes)
        for j, prop in enumerate(item.has_property):
            if prop.has_class and not is_eligible(prop.has_class, eligible):
                return msg(
                    messages.INELIGIBLE, item.id, "hasProperty", j, prop.has_class, "eligibleProperty", eligible
                )
    return RSP_OK


def _first_ineligible_link(links: Sequence[ALinkSchema], eligible) -> tuple[int, str] | None:
    for j, link in enumerate(links):
        if link.has_class and not is_eligible(link.has_class, eligible):
            return j, link.has_class
    return None


def check_eligible_links(graph: Sequence[BaseItemSchema], index: PackageIndex) -> Rsp:
    """Every target link (and source link of a relationship) must be eligible for the instance's class."""
    for item in graph:
        if not isinstance(item, InstanceSchema) or resolved_class(item, index) is None:
            continue

        if isinstance(item, ARelationship):
            eligible = resolve_eligible_source_links(item.has_class, index.classes)
            bad = _first_ineligible_link(item.has_source_link, eligible)
            if bad:
                return msg(
                    messages.INELIGIBLE, item.id, "hasSourceLink", bad[0], bad[1], "eligibleSourceLink", eligible
                )

        eligible = resolve_eligible_target_links(item.has_class, index.classes)
        bad = _first_ineligible_link(item.has_target_link, eligible)
        if bad:
            return msg(
                messages.INELIGIBLE, item.id, "hasTargetLink", bad[0], bad[1], "eligibleTargetLink", eligible
            )
    return RSP_OK
