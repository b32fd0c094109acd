from __future__ import annotations

from .types import (
    Direction,
    Node,
    Edge,
    Flowchart,
    PositionedNode,
    PositionedEdge,
    PositionedFlowchart,
)
from .parser import parse_flowchart
from .layout import layout_flowchart, assign_layers, find_feedback_links
from .scene import build_flowchart_scene

__all__ = [
    "Direction",
    "Node",
    "Edge",
    "Flowchart",
    "PositionedNode",
    "PositionedEdge",
    "PositionedFlowchart",
    "parse_flowchart",
    "layout_flowchart",
    "assign_layers",
    "find_feedback_links",
    "build_flowchart_scene",
]
