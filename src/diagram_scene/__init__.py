"""diagram-scene -- lay out flowcharts, sequence and ER diagrams as backend-neutral scenes."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .types import (
    Diagnostic,
    LayoutOptions,
    LayoutResult,
    PathShape,
    Point,
    RectShape,
    Scene,
    TextBlock,
    Viewport,
)
from .errors import DiagramError, DiagramShapeError, DiagramTooLargeError
from .markers import MARKERS, get_marker
from .parser import check_size, detect_diagram_type
from .styles import (
    TextMetrics,
    EstimatedTextMetrics,
    MonospaceTextMetrics,
    PillowTextMetrics,
    DEFAULT_METRICS,
    wrap_text,
)

from .flowchart.parser import parse_flowchart
from .flowchart.layout import layout_flowchart
from .flowchart.scene import build_flowchart_scene

from .sequence.parser import parse_sequence
from .sequence.layout import layout_sequence
from .sequence.scene import build_sequence_scene

from .er.parser import parse_erd
from .er.layout import layout_erd
from .er.scene import build_erd_scene

__all__ = [
    "layout_diagram",
    "wrap_text",
    "TextMetrics",
    "EstimatedTextMetrics",
    "MonospaceTextMetrics",
    "PillowTextMetrics",
    "MARKERS",
    "get_marker",
    "LayoutOptions",
    "LayoutResult",
    "Diagnostic",
    "Scene",
    "RectShape",
    "PathShape",
    "TextBlock",
    "Point",
    "Viewport",
    "DiagramError",
    "DiagramShapeError",
    "DiagramTooLargeError",
]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


def _item_count(kind: str, data: Mapping[str, Any]) -> int:
    keys = {
        "flowchart": ("nodes", "edges"),
        "sequence": ("participants", "messages"),
        "erd": ("entities", "relationships"),
    }[kind]
    return sum(len(data[k]) for k in keys if isinstance(data.get(k), list))


def layout_diagram(
    data: Mapping[str, Any],
    options: LayoutOptions | None = None,
    metrics: TextMetrics = DEFAULT_METRICS,
) -> LayoutResult:
    """Lay out a diagram description and return its scene.

    Picks the layout from ``data["type"]`` ("flowchart", "sequence" or
    "erd"). Malformed top-level input gives ``success=False`` with an error
    message; dangling references only add diagnostics.
    """
    if options is None:
        options = LayoutOptions()

    try:
        kind = detect_diagram_type(data)
        check_size(kind, _item_count(kind, data), options.max_items)

        if kind == "sequence":
            diagram = layout_sequence(parse_sequence(data), options, metrics)
            scene = build_sequence_scene(diagram)
        elif kind == "erd":
            diagram = layout_erd(parse_erd(data), options, metrics)
            scene = build_erd_scene(diagram)
        else:
            diagram = layout_flowchart(parse_flowchart(data), options, metrics)
            scene = build_flowchart_scene(diagram)
    except DiagramError as err:
        logger.warning("Diagram layout refused: %s", err)
        hint = data.get("type") if isinstance(data, Mapping) else None
        return LayoutResult(
            success=False,
            diagram_type=hint if isinstance(hint, str) else None,
            error=str(err),
        )

    return LayoutResult(
        success=True,
        diagram_type=kind,
        scene=scene,
        diagnostics=diagram.diagnostics,
    )
