"""Lookup maps over a package graph.

Nothing here reports errors: an id that is missing from a map simply
has no entry, and the checks that need the reference resolved decide
what that means.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import cached_property

from pigcheck.schemas import (
    BaseItemSchema,
    ElementClass,
    EntityClass,
    PropertyClass,
    RelationshipClass,
)


def build_item_type_map(graph: Sequence[BaseItemSchema]) -> dict[str, str]:
    """Map every item id to its itemType tag. Items without an id are left out."""
    item_types: dict[str, str] = {}
    for item in graph:
        if item.id and item.item_type:
            item_types[item.id] = item.item_type
    return item_types


def build_class_map(graph: Sequence[BaseItemSchema]) -> dict[str, ElementClass]:
    """Map the ids of Entity and Relationship classes to their definitions."""
    return {
        item.id: item
        for item in graph
        if item.id and isinstance(item, (EntityClass, RelationshipClass))
    }


def build_property_map(graph: Sequence[BaseItemSchema]) -> dict[str, PropertyClass]:
    """Map the ids of Property classes to their definitions."""
    return {
        item.id: item
        for item in graph
        if item.id and isinstance(item, PropertyClass)
    }


class PackageIndex:
    """The lookup maps of one package, each built on first use and then kept."""

    def __init__(self, graph: Sequence[BaseItemSchema]):
        self.graph = graph

    @cached_property
    def item_types(self) -> dict[str, str]:
        return build_item_type_map(self.graph)

    @cached_property
    def classes(self) -> dict[str, ElementClass]:
        return build_class_map(self.graph)

    @cached_property
    def properties(self) -> dict[str, PropertyClass]:
        return build_property_map(self.graph)
