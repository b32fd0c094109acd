from __future__ import annotations

import logging
import sys
import threading
from collections import deque

from grandalf.graphs import Vertex, Edge as GEdge, Graph

from .types import (
    Direction,
    Flowchart,
    PositionedEdge,
    PositionedFlowchart,
    PositionedNode,
)
from ..geometry import NodeRect, bounding_viewport, elbow_route
from ..styles import DEFAULT_METRICS, FONT_FAMILY, TextMetrics, make_text_block, wrap_text
from ..types import Diagnostic, LayoutOptions, Point

logger = logging.getLogger(__name__)

# grandalf's Tarjan pass keeps its counter on the Vertex class and adjusts the
# interpreter recursion limit, so only one pass may run at a time.
_grandalf_lock = threading.Lock()

# ============================================================================
# Flowchart layout engine
#
# Layered layout without crossing minimization:
#   1. Kahn's algorithm assigns layers (sources on layer 0)
#   2. Nodes that the forward pass never reaches (cycles) share one extra
#      trailing layer
#   3. Each layer is a centered row of fixed-size boxes, in input order
#   4. Edges are three-segment elbows between facing sides
# ============================================================================

FLOW = {
    "node_width": 180,
    "node_height": 80,
    # Gap between adjacent nodes of one layer
    "node_spacing": 80,
    # Gap between consecutive layers
    "layer_spacing": 100,
    "text_pad_x": 15,
    "font_size": 16,
    "edge_font_size": 12.8,
    "padding": 25,
}

# Side of the source box an edge leaves from, per direction
_EXIT_SIDE = {
    "TD": "bottom",
    "TB": "bottom",
    "BT": "top",
    "LR": "right",
    "RL": "left",
}


def _layers_and_leftovers(
    node_ids: list[str], links: list[tuple[str, str]]
) -> tuple[dict[str, int], list[str]]:
    """Layer per node, and the nodes the forward pass never reached."""
    adjacency: dict[str, list[str]] = {nid: [] for nid in node_ids}
    in_degree: dict[str, int] = {nid: 0 for nid in node_ids}
    for source, target in links:
        adjacency[source].append(target)
        in_degree[target] += 1

    queue = deque(nid for nid in node_ids if in_degree[nid] == 0)
    layer_of: dict[str, int] = {nid: 0 for nid in queue}

    while queue:
        u = queue.popleft()
        for v in adjacency[u]:
            in_degree[v] -= 1
            if in_degree[v] == 0:
                layer_of[v] = layer_of[u] + 1
                queue.append(v)

    leftovers = [nid for nid in node_ids if nid not in layer_of]
    if leftovers:
        trailing = max(layer_of.values(), default=-1) + 1
        for nid in leftovers:
            layer_of[nid] = trailing

    return layer_of, leftovers


def assign_layers(node_ids: list[str], links: list[tuple[str, str]]) -> dict[str, int]:
    """Layer index per node.

    Breadth-first Kahn pass from the in-degree-zero nodes; a node gets the
    layer after the predecessor that released it. Nodes left unreached (on or
    behind a cycle) all go to one layer past the deepest layer found.
    """
    return _layers_and_leftovers(node_ids, links)[0]


def find_feedback_links(
    node_ids: list[str], links: list[tuple[str, str]]
) -> tuple[set[int], list[list[str]]]:
    """Indices of links that close a cycle, and the cycles themselves.

    Runs grandalf's Tarjan pass over every connected component. A cycle is a
    strongly connected component with more than one node, listed in input
    order. Raises RuntimeError when the pass fails, e.g. on a cycle too long
    for the recursion limit.
    """
    if not links:
        return set(), []

    vertices = {nid: Vertex(nid) for nid in node_ids}
    g_edges = [GEdge(vertices[s], vertices[t], data=i) for i, (s, t) in enumerate(links)]

    with _grandalf_lock:
        limit = sys.getrecursionlimit()
        try:
            g = Graph(list(vertices.values()), g_edges)
            components = []
            for core in g.C:
                components.extend(core.get_scs_with_feedback())
        except Exception as err:
            raise RuntimeError(f"Grandalf cycle detection failed (flowchart): {err}") from err
        finally:
            # An aborted pass leaves the raised limit behind
            sys.setrecursionlimit(limit)

    order = {nid: i for i, nid in enumerate(node_ids)}
    cycles = [
        sorted((v.data for v in scc), key=order.__getitem__)
        for scc in components
        if len(scc) > 1
    ]
    cycles.sort(key=lambda members: order[members[0]])
    feedback = {e.data for e in g_edges if e.feedback}
    return feedback, cycles


def _cycle_diagnostics(
    leftovers: list[str], links: list[tuple[str, str]]
) -> tuple[set[int], list[Diagnostic]]:
    """Feedback flags (as indices into ``links``) and cycle diagnostics.

    Every cycle lies among the nodes the forward pass left over, so only that
    subgraph is searched. A failed search flags nothing and adds a warning.
    """
    if not leftovers:
        return set(), []

    inside = set(leftovers)
    sub_index = [i for i, (s, t) in enumerate(links) if s in inside and t in inside]
    try:
        sub_feedback, cycles = find_feedback_links(leftovers, [links[i] for i in sub_index])
    except RuntimeError as err:
        message = f"Cycle detection skipped: {err}"
        logger.warning(message)
        return set(), [Diagnostic("warning", message)]

    diagnostics = []
    for members in cycles:
        message = "Cycle among nodes " + ", ".join(members) + " (placed on the trailing layer)"
        logger.info(message)
        diagnostics.append(Diagnostic("info", message))
    return {sub_index[i] for i in sub_feedback}, diagnostics


def layout_flowchart(
    chart: Flowchart,
    options: LayoutOptions | None = None,
    metrics: TextMetrics = DEFAULT_METRICS,
) -> PositionedFlowchart:
    """Lay out a flowchart.

    Edges whose endpoints are missing are skipped with a warning diagnostic;
    the rest of the chart is laid out normally.
    """
    opts = options or LayoutOptions()
    font = opts.font_family or FONT_FAMILY
    node_spacing = opts.node_spacing if opts.node_spacing is not None else FLOW["node_spacing"]
    layer_spacing = opts.layer_spacing if opts.layer_spacing is not None else FLOW["layer_spacing"]
    padding = opts.padding if opts.padding is not None else FLOW["padding"]
    direction: Direction = chart.direction

    diagnostics: list[Diagnostic] = []
    node_ids = [n.id for n in chart.nodes]
    known = set(node_ids)

    # 1. Resolve edges, skipping dangling ones
    kept: list[int] = []
    for i, edge in enumerate(chart.edges):
        missing = [end for end in (edge.source, edge.target) if end not in known]
        if missing:
            message = f"Missing node for edge: {edge.source} -> {edge.target}"
            logger.warning(message)
            diagnostics.append(Diagnostic("warning", message, item=f"edges[{i}]"))
            continue
        kept.append(i)
    links = [(chart.edges[i].source, chart.edges[i].target) for i in kept]

    # 2. Layers
    layer_of, leftovers = _layers_and_leftovers(node_ids, links)
    layer_count = max(layer_of.values(), default=-1) + 1
    layers: list[list[str]] = [[] for _ in range(layer_count)]
    for nid in node_ids:
        layers[layer_of[nid]].append(nid)

    feedback, cycle_diagnostics = _cycle_diagnostics(leftovers, links)
    diagnostics.extend(cycle_diagnostics)

    # 3. Node positions
    width = FLOW["node_width"]
    height = FLOW["node_height"]
    vertical = direction in ("TD", "TB", "BT")
    main_extent = height if vertical else width
    cross_extent = width if vertical else height
    pitch = main_extent + layer_spacing
    mirrored = direction in ("BT", "RL")

    labels = {n.id: n.label for n in chart.nodes}
    rects: dict[str, NodeRect] = {}
    positioned_by_id: dict[str, PositionedNode] = {}

    for index, members in enumerate(layers):
        main = -index * pitch if mirrored else index * pitch
        row_extent = len(members) * cross_extent + (len(members) - 1) * node_spacing
        start = -row_extent / 2
        for i, nid in enumerate(members):
            cross = start + i * (cross_extent + node_spacing)
            x, y = (cross, main) if vertical else (main, cross)
            lines = wrap_text(
                labels[nid], width - FLOW["text_pad_x"] * 2, FLOW["font_size"], font, metrics
            )
            text = make_text_block(
                lines, x + width / 2, y + height / 2, FLOW["font_size"], font, metrics
            )
            positioned_by_id[nid] = PositionedNode(
                id=nid,
                label=labels[nid],
                x=x,
                y=y,
                width=width,
                height=height,
                layer=index,
                text=text,
            )
            rects[nid] = NodeRect.from_top_left(x, y, width, height)

    nodes = tuple(positioned_by_id[nid] for nid in node_ids)

    # 4. Edge routing
    exit_side = _EXIT_SIDE[direction]
    edges: list[PositionedEdge] = []
    for link_index, i in enumerate(kept):
        edge = chart.edges[i]
        points = elbow_route(rects[edge.source], rects[edge.target], exit_side, layer_spacing / 2)
        text = None
        if edge.label:
            mid = Point(
                x=(points[1].x + points[2].x) / 2,
                y=(points[1].y + points[2].y) / 2,
            )
            lines = wrap_text(edge.label, width, FLOW["edge_font_size"], font, metrics)
            text = make_text_block(lines, mid.x, mid.y, FLOW["edge_font_size"], font, metrics)
        edges.append(
            PositionedEdge(
                source=edge.source,
                target=edge.target,
                label=edge.label,
                points=tuple(points),
                text=text,
                feedback=link_index in feedback,
            )
        )

    viewport = bounding_viewport(
        ((n.x, n.y, n.width, n.height) for n in nodes),
        (p for e in edges for p in e.points),
        [n.text for n in nodes] + [e.text for e in edges if e.text is not None],
        padding,
    )
    logger.debug(
        "Flowchart laid out: %d nodes, %d edges, %d layers", len(nodes), len(edges), layer_count
    )

    return PositionedFlowchart(
        direction=direction,
        viewport=viewport,
        nodes=nodes,
        edges=tuple(edges),
        layers=tuple(tuple(members) for members in layers),
        diagnostics=tuple(diagnostics),
    )
