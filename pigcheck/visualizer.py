from __future__ import annotations

from pathlib import Path

import networkx as nx
from pyvis.network import Network

# Color palette by itemType
TYPE_COLORS = {
    "pig:Entity": "#4A90D9",
    "pig:Relationship": "#F39C12",
    "pig:Property": "#2ECC71",
    "pig:Link": "#9B59B6",
    "pig:anEntity": "#1ABC9C",
    "pig:aRelationship": "#E67E22",
}

TYPE_SHAPES = {
    "pig:Entity": "box",
    "pig:Relationship": "box",
    "pig:Property": "ellipse",
    "pig:Link": "ellipse",
}

DEFAULT_COLOR = "#95A5A6"

EDGE_COLORS = {
    "specializes": "#E74C3C",
    "hasClass": "#555577",
    "eligibleEndpoint": "#8E44AD",
}


def generate_visualization(g: nx.DiGraph, output_path: str | Path = "package.html") -> str:
    """Write an interactive pyvis HTML view of a package graph and return the HTML."""
    net = Network(
        height="800px",
        width="100%",
        directed=True,
        bgcolor="#1a1a2e",
        font_color="#e0e0e0",
    )

    net.set_options("""
    {
        "physics": {
            "forceAtlas2Based": {
                "gravitationalConstant": -60,
                "centralGravity": 0.01,
                "springLength": 120,
                "springConstant": 0.03,
                "damping": 0.4
            },
            "solver": "forceAtlas2Based",
            "stabilization": {"iterations": 150}
        },
        "edges": {
            "arrows": {"to": {"enabled": true, "scaleFactor": 0.6}},
            "font": {"size": 9, "color": "#888888", "align": "middle"},
            "smooth": {"type": "cubicBezier", "roundness": 0.3}
        },
        "interaction": {"hover": true, "navigationButtons": true}
    }
    """)

    for node_id, data in g.nodes(data=True):
        item_type = data.get("item_type", "Unknown")
        label = data.get("title", node_id)
        degree = g.degree(node_id)
        net.add_node(
            node_id,
            label=label,
            title=f"<b>{label}</b><br><i>{item_type}</i><br>{node_id}",
            color=TYPE_COLORS.get(item_type, DEFAULT_COLOR),
            shape=TYPE_SHAPES.get(item_type, "dot"),
            size=max(12, min(36, 12 + degree * 3)),
        )

    for src, tgt, data in g.edges(data=True):
        edge_type = data.get("type", "")
        net.add_edge(
            src,
            tgt,
            label=edge_type,
            title=edge_type,
            color=EDGE_COLORS.get(edge_type, "#2ECC71"),
        )

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    net.save_graph(str(output_path))
    return output_path.read_text(encoding="utf-8")
