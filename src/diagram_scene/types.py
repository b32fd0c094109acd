from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

# ============================================================================
# Scene description -- backend-neutral output of every layout
# ============================================================================

DiagramType = Literal["flowchart", "sequence", "erd"]

MarkerId = Literal[
    "arrow",
    "reply-arrow",
    "one",
    "zero-or-one",
    "many",
    "zero-or-many",
]

TextAnchor = Literal["start", "middle", "end"]
TextBaseline = Literal["top", "middle", "bottom"]


@dataclass(frozen=True, slots=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class Viewport:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class TextBlock:
    """Pre-wrapped text anchored at (x, y).

    ``anchor`` aligns the lines horizontally around x, ``baseline`` places the
    whole block relative to y. ``width``/``height`` are the measured extents
    of the block, used for viewport computation.
    """

    lines: tuple[str, ...]
    x: float
    y: float
    font_size: float
    font_family: str
    width: float
    height: float
    anchor: TextAnchor = "middle"
    baseline: TextBaseline = "middle"
    line_height: float = 1.2
    underline: bool = False
    italic: bool = False
    bold: bool = False
    # Glyph drawn before the first line (e.g. unique-key marker)
    glyph: str | None = None


@dataclass(frozen=True, slots=True)
class RectShape:
    x: float
    y: float
    width: float
    height: float
    # What the rectangle represents: node, participant, entity, entity-header
    role: str
    texts: tuple[TextBlock, ...] = ()
    corner_radius: float = 0


@dataclass(frozen=True, slots=True)
class PathShape:
    points: tuple[Point, ...]
    # What the path represents: edge, message, lifeline, relationship
    role: str
    marker_start: MarkerId | None = None
    marker_end: MarkerId | None = None
    dashed: bool = False
    label: TextBlock | None = None


@dataclass(frozen=True, slots=True)
class Scene:
    rects: tuple[RectShape, ...]
    paths: tuple[PathShape, ...]
    viewport: Viewport


# ============================================================================
# Diagnostics and results
# ============================================================================

DiagnosticLevel = Literal["info", "warning", "error"]


@dataclass(frozen=True, slots=True)
class Diagnostic:
    level: DiagnosticLevel
    message: str
    # Offending input item, e.g. "edges[3]"
    item: str | None = None


@dataclass(frozen=True, slots=True)
class LayoutResult:
    success: bool
    diagram_type: str | None = None
    scene: Scene | None = None
    diagnostics: tuple[Diagnostic, ...] = ()
    error: str | None = None


# ============================================================================
# Layout options -- user-facing configuration
# ============================================================================

@dataclass(slots=True)
class LayoutOptions:
    """Overrides for layout defaults. ``None`` keeps the per-diagram default."""

    font_family: str | None = None
    padding: float | None = None
    # Flowchart: gap between nodes of one layer / between layers
    node_spacing: float | None = None
    layer_spacing: float | None = None
    # Sequence: vertical distance between consecutive messages
    message_spacing: float | None = None
    # ERD: horizontal budget of one packed row
    row_width: float | None = None
    # Refuse inputs with more items than this (nodes + edges, etc.)
    max_items: int | None = 5000
