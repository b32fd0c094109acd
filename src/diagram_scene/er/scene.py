from __future__ import annotations

from .types import PositionedErd
from ..types import PathShape, RectShape, Scene

# ============================================================================
# ER diagram scene builder
#
# Render order:
#   1. Relationship lines (behind boxes), with crow's foot markers
#   2. Entity boxes carrying the attribute rows
#   3. Header bands carrying the entity names
# ============================================================================

ENTITY_CORNER_RADIUS = 5


def build_erd_scene(diagram: PositionedErd) -> Scene:
    paths = tuple(
        PathShape(
            points=r.points,
            role="relationship",
            marker_start=r.marker_start,
            marker_end=r.marker_end,
        )
        for r in diagram.relationships
    )

    rects: list[RectShape] = []
    for e in diagram.entities:
        rects.append(
            RectShape(
                x=e.x,
                y=e.y,
                width=e.width,
                height=e.height,
                role="entity",
                texts=e.rows,
                corner_radius=ENTITY_CORNER_RADIUS,
            )
        )
        rects.append(
            RectShape(
                x=e.x,
                y=e.y,
                width=e.width,
                height=e.header_height,
                role="entity-header",
                texts=(e.title,),
                corner_radius=ENTITY_CORNER_RADIUS,
            )
        )

    return Scene(rects=tuple(rects), paths=paths, viewport=diagram.viewport)
