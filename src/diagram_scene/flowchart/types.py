from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from ..types import Diagnostic, Point, TextBlock, Viewport

# ============================================================================
# Flowchart types
#
# Flowcharts are directed graphs laid out in layers: sources on layer 0,
# every other node one layer below its last-processed predecessor.
# ============================================================================

# TD and TB are the same top-to-bottom flow
Direction = Literal["TD", "TB", "BT", "LR", "RL"]

DIRECTIONS: tuple[Direction, ...] = ("TD", "TB", "BT", "LR", "RL")


@dataclass(slots=True)
class Node:
    id: str
    label: str


@dataclass(slots=True)
class Edge:
    source: str
    target: str
    label: str | None = None


@dataclass(slots=True)
class Flowchart:
    """Flowchart input -- nodes and edges in caller order."""
    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    direction: Direction = "TD"


# ============================================================================
# Positioned flowchart -- ready for scene building
# ============================================================================


@dataclass(frozen=True, slots=True)
class PositionedNode:
    id: str
    label: str
    # Top-left corner
    x: float
    y: float
    width: float
    height: float
    layer: int
    text: TextBlock


@dataclass(frozen=True, slots=True)
class PositionedEdge:
    source: str
    target: str
    label: str | None
    # Elbow path: exit point, two bends, entry point
    points: tuple[Point, ...]
    text: TextBlock | None = None
    # Edge closes a cycle (back edge found by depth-first search)
    feedback: bool = False


@dataclass(frozen=True, slots=True)
class PositionedFlowchart:
    direction: Direction
    viewport: Viewport
    nodes: tuple[PositionedNode, ...] = ()
    edges: tuple[PositionedEdge, ...] = ()
    # Node ids per layer, layer 0 first
    layers: tuple[tuple[str, ...], ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()
