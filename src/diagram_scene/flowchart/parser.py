from __future__ import annotations

from typing import Any, Mapping

from ..errors import DiagramShapeError
from ..parser import optional_str, require_list, require_mapping, require_str
from .types import DIRECTIONS, Edge, Flowchart, Node


def parse_flowchart(data: Mapping[str, Any]) -> Flowchart:
    """Build a Flowchart from its JSON-style description.

    Expects ``{"nodes": [{"id", "label"}], "edges": [{"from", "to", "label"?}],
    "direction"?}``. Edge endpoints are not checked here.
    """
    raw_nodes = require_list(data, "nodes", "flowchart")
    raw_edges = require_list(data, "edges", "flowchart")

    nodes: list[Node] = []
    for i, raw in enumerate(raw_nodes):
        where = f"nodes[{i}]"
        item = require_mapping(raw, where)
        nodes.append(Node(id=require_str(item, "id", where), label=require_str(item, "label", where)))

    edges: list[Edge] = []
    for i, raw in enumerate(raw_edges):
        where = f"edges[{i}]"
        item = require_mapping(raw, where)
        edges.append(
            Edge(
                source=require_str(item, "from", where),
                target=require_str(item, "to", where),
                label=optional_str(item, "label", where),
            )
        )

    direction = data.get("direction") or "TD"
    if isinstance(direction, str):
        direction = direction.upper()
    if direction not in DIRECTIONS:
        raise DiagramShapeError(
            f'Flowchart "direction" must be one of: {", ".join(DIRECTIONS)}.',
            key="direction",
        )

    return Flowchart(nodes=nodes, edges=edges, direction=direction)
