from __future__ import annotations

from collections import Counter
from typing import Any

import networkx as nx

from pigcheck.models import Package
from pigcheck.schemas import (
    ARelationship,
    BaseItemSchema,
    ClassSchema,
    InstanceSchema,
    LinkClass,
)


def _title_of(item: BaseItemSchema) -> str:
    """First title text of an item, or its id when it has none."""
    title: Any = (item.model_extra or {}).get("title")
    if isinstance(title, list) and title:
        title = title[0]
    if isinstance(title, dict):
        title = title.get("value", title.get("@value"))
    return str(title) if title else str(item.id)


def build_package_graph(package: Package) -> nx.DiGraph:
    """Build a NetworkX directed graph from the items of a package.

    Nodes are the top-level items. Edges are hasClass (instance -> class),
    specializes (class -> parent), links (instance -> linked instance) and
    eligibleEndpoint (Link class -> class). An edge is only added if both
    ends are items of the package.
    """
    g = nx.DiGraph()
    g.graph["package_id"] = package.id

    for item in package.graph:
        if not item.id:
            continue
        g.add_node(item.id, item_type=item.item_type, title=_title_of(item))

    for item in package.graph:
        if not item.id:
            continue
        if isinstance(item, ClassSchema) and item.specializes in g:
            g.add_edge(item.id, item.specializes, type="specializes")
        if isinstance(item, LinkClass):
            for endpoint in item.eligible_endpoint:
                if endpoint in g:
                    g.add_edge(item.id, endpoint, type="eligibleEndpoint")
        if isinstance(item, InstanceSchema):
            if item.has_class in g:
                g.add_edge(item.id, item.has_class, type="hasClass")
            links = list(item.has_target_link)
            if isinstance(item, ARelationship):
                links = list(item.has_source_link) + links
            for link in links:
                if link.id_ref in g:
                    g.add_edge(item.id, link.id_ref, type=link.has_class or "link")

    return g


def build_specialization_graph(package: Package) -> nx.DiGraph:
    """Classes as nodes, one edge from each class to the class it specializes."""
    g = nx.DiGraph()
    for item in package.graph:
        if isinstance(item, ClassSchema) and item.id:
            g.add_node(item.id, item_type=item.item_type)
    for item in package.graph:
        if isinstance(item, ClassSchema) and item.id and item.specializes in g:
            g.add_edge(item.id, item.specializes)
    return g


def specialization_cycles(g: nx.DiGraph) -> list[list[str]]:
    """The cyclic specializes chains of a specialization graph."""
    return [sorted(cycle) for cycle in nx.simple_cycles(g)]


def specialization_depth(g: nx.DiGraph, class_id: str) -> int:
    """Number of specializes steps from a class up to its root, stopping at a cycle."""
    depth = 0
    seen = {class_id}
    node = class_id
    while True:
        parents = list(g.successors(node))
        if not parents or parents[0] in seen:
            return depth
        node = parents[0]
        seen.add(node)
        depth += 1


def unused_classes(package: Package) -> list[str]:
    """Classes that no instance, attachment or other class refers to."""
    referenced: set[str] = set()
    for item in package.graph:
        if isinstance(item, ClassSchema) and item.specializes:
            referenced.add(item.specializes)
        if isinstance(item, LinkClass):
            referenced.update(item.eligible_endpoint)
        if isinstance(item, InstanceSchema):
            if item.has_class:
                referenced.add(item.has_class)
            attachments = list(item.has_property) + list(item.has_target_link)
            if isinstance(item, ARelationship):
                attachments += list(item.has_source_link)
            referenced.update(a.has_class for a in attachments if a.has_class)
    return [
        item.id for item in package.graph
        if isinstance(item, ClassSchema) and item.id and item.id not in referenced
    ]


def query_by_item_type(g: nx.DiGraph, item_type: str) -> list[str]:
    """Get all node ids of a given itemType."""
    return [n for n, d in g.nodes(data=True) if d.get("item_type") == item_type]


def hierarchy_report(package: Package) -> str:
    """Text summary of a package: item counts, class hierarchy, cycles, unused classes."""
    lines = [f"=== PACKAGE {package.id} ===", "", "## Items"]

    type_counts = Counter(item.item_type for item in package.graph)
    for t, count in sorted(type_counts.items(), key=lambda x: -x[1]):
        lines.append(f"- {t}: {count}")

    g = build_package_graph(package)
    lines.append("")
    lines.append(f"## References ({g.number_of_edges()} resolved)")
    edge_counts = Counter(data.get("type", "?") for _, _, data in g.edges(data=True))
    for t, count in sorted(edge_counts.items(), key=lambda x: -x[1]):
        lines.append(f"- {t}: {count}")

    hierarchy = build_specialization_graph(package)
    lines.append("")
    lines.append("## Class hierarchy")
    for node, data in sorted(hierarchy.nodes(data=True)):
        parents = list(hierarchy.successors(node))
        parent = f" -> {parents[0]}" if parents else ""
        lines.append(
            f"- [{data.get('item_type', '?')}] {node}{parent} (depth {specialization_depth(hierarchy, node)})"
        )

    cycles = specialization_cycles(hierarchy)
    if cycles:
        lines.append("")
        lines.append("## WARNING: cyclic specialization")
        for cycle in cycles:
            lines.append(f"- {' -> '.join(cycle)}")

    unused = unused_classes(package)
    if unused:
        lines.append("")
        lines.append(f"## Unused classes ({len(unused)})")
        lines.extend(f"- {class_id}" for class_id in unused)

    return "\n".join(lines)
