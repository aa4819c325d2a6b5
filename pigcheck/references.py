"""Structural and referential checks: unique ids, hasClass and specializes references.

Every check takes the package graph and its PackageIndex and returns an
Rsp: RSP_OK, or the first violation found in graph order.
"""

from __future__ import annotations

from collections.abc import Sequence

from pigcheck import messages
from pigcheck.index import PackageIndex
from pigcheck.messages import RSP_OK, msg
from pigcheck.models import Rsp
from pigcheck.schemas import (
    ARelationship,
    AnEntity,
    BaseItemSchema,
    ClassSchema,
    InstanceSchema,
    PigItemType,
)

MISSING_HAS_CLASS = "missing hasClass"
NOT_FOUND = "not found in package"


def reference_problem(
    ref: str | None,
    expected: str,
    item_types: dict[str, str],
    mandatory: bool = True,
) -> str | None:
    """Describe what is wrong with a typed reference, or return None if it is fine.

    An absent reference is only a problem when it is mandatory. A present
    one must resolve to an item whose itemType is exactly `expected`.
    """
    if not ref:
        return MISSING_HAS_CLASS if mandatory else None
    found = item_types.get(ref)
    if found is None:
        return NOT_FOUND
    if found != expected:
        return f"expected {expected}, found {found}"
    return None


def check_unique_ids(graph: Sequence[BaseItemSchema], index: PackageIndex | None = None) -> Rsp:
    """Every item must have an id and no id may occur twice."""
    seen: dict[str, int] = {}
    for i, item in enumerate(graph):
        if not item.id:
            return msg(messages.MISSING_ID, i)
        if item.id in seen:
            return msg(messages.DUPLICATE_ID, item.id, seen[item.id], i)
        seen[item.id] = i
    return RSP_OK


def check_property_references(graph: Sequence[BaseItemSchema], index: PackageIndex) -> Rsp:
    """aProperty.hasClass of every instance must point to a Property class."""
    for item in graph:
        if not isinstance(item, InstanceSchema):
            continue
        for j, prop in enumerate(item.has_property):
            problem = reference_problem(prop.has_class, PigItemType.PROPERTY.value, index.item_types)
            if problem == MISSING_HAS_CLASS:
                return msg(messages.PROPERTY_MISSING_CLASS, item.id, j, problem)
            if problem:
                return msg(messages.PROPERTY_BAD_CLASS, item.id, j, prop.has_class, problem)
    return RSP_OK


def check_link_references(graph: Sequence[BaseItemSchema], index: PackageIndex) -> Rsp:
    """aSourceLink/aTargetLink.hasClass of every instance must point to a Link class."""
    for i, item in enumerate(graph):
        if not isinstance(item, InstanceSchema):
            continue
        link_lists = [("hasTargetLink", item.has_target_link)]
        if isinstance(item, ARelationship):
            link_lists.insert(0, ("hasSourceLink", item.has_source_link))
        for name, links in link_lists:
            for j, link in enumerate(links):
                problem = reference_problem(link.has_class, PigItemType.LINK.value, index.item_types)
                if problem == MISSING_HAS_CLASS:
                    return msg(messages.MISSING_REFERENCE, item.id, i, f"{name}[{j}].hasClass", problem)
                if problem:
                    return msg(
                        messages.BAD_REFERENCE, item.id, i, f"{name}[{j}].hasClass", link.has_class, problem
                    )
    return RSP_OK


def _check_instance_classes(
    graph: Sequence[BaseItemSchema],
    index: PackageIndex,
    instance_type: type[InstanceSchema],
    expected: PigItemType,
) -> Rsp:
    for i, item in enumerate(graph):
        if not isinstance(item, instance_type):
            continue
        problem = reference_problem(item.has_class, expected.value, index.item_types)
        if problem == MISSING_HAS_CLASS:
            return msg(messages.MISSING_REFERENCE, item.id, i, "hasClass", problem)
        if problem:
            return msg(messages.BAD_REFERENCE, item.id, i, "hasClass", item.has_class, problem)
    return RSP_OK


def check_entity_class_references(graph: Sequence[BaseItemSchema], index: PackageIndex) -> Rsp:
    """anEntity.hasClass must point to an Entity class."""
    return _check_instance_classes(graph, index, AnEntity, PigItemType.ENTITY)


def check_relationship_class_references(graph: Sequence[BaseItemSchema], index: PackageIndex) -> Rsp:
    """aRelationship.hasClass must point to a Relationship class."""
    return _check_instance_classes(graph, index, ARelationship, PigItemType.RELATIONSHIP)


def _check_specializes(
    graph: Sequence[BaseItemSchema],
    index: PackageIndex,
    class_type: PigItemType,
) -> Rsp:
    # specializes is optional; when given it must name a class of the same kind
    for i, item in enumerate(graph):
        if not isinstance(item, ClassSchema) or item.item_type != class_type.value:
            continue
        problem = reference_problem(item.specializes, class_type.value, index.item_types, mandatory=False)
        if problem:
            return msg(messages.BAD_REFERENCE, item.id, i, "specializes", item.specializes, problem)
    return RSP_OK


def check_entity_specializes(graph: Sequence[BaseItemSchema], index: PackageIndex) -> Rsp:
    return _check_specializes(graph, index, PigItemType.ENTITY)


def check_relationship_specializes(graph: Sequence[BaseItemSchema], index: PackageIndex) -> Rsp:
    return _check_specializes(graph, index, PigItemType.RELATIONSHIP)


def check_property_specializes(graph: Sequence[BaseItemSchema], index: PackageIndex) -> Rsp:
    return _check_specializes(graph, index, PigItemType.PROPERTY)


def check_link_specializes(graph: Sequence[BaseItemSchema], index: PackageIndex) -> Rsp:
    return _check_specializes(graph, index, PigItemType.LINK)
