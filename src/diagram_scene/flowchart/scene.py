from __future__ import annotations

from .types import PositionedFlowchart
from ..types import PathShape, RectShape, Scene

# ============================================================================
# Flowchart scene builder
#
# Nodes become rounded rectangles carrying their wrapped label; edges become
# elbow paths ending in an arrow. Feedback edges (closing a cycle) are dashed.
# ============================================================================

NODE_CORNER_RADIUS = 5


def build_flowchart_scene(chart: PositionedFlowchart) -> Scene:
    rects = tuple(
        RectShape(
            x=n.x,
            y=n.y,
            width=n.width,
            height=n.height,
            role="node",
            texts=(n.text,),
            corner_radius=NODE_CORNER_RADIUS,
        )
        for n in chart.nodes
    )
    paths = tuple(
        PathShape(
            points=e.points,
            role="edge",
            marker_end="arrow",
            dashed=e.feedback,
            label=e.text,
        )
        for e in chart.edges
    )
    return Scene(rects=rects, paths=paths, viewport=chart.viewport)
