from __future__ import annotations

from .types import PositionedSequence
from ..types import PathShape, Point, RectShape, Scene

# ============================================================================
# Sequence diagram scene builder
#
# Draw order: lifelines (behind), participant headers, message arrows.
# ============================================================================

HEADER_CORNER_RADIUS = 8


def build_sequence_scene(diagram: PositionedSequence) -> Scene:
    rects = tuple(
        RectShape(
            x=p.x - p.width / 2,
            y=p.y,
            width=p.width,
            height=p.height,
            role="participant",
            texts=(p.text,),
            corner_radius=HEADER_CORNER_RADIUS,
        )
        for p in diagram.participants
    )

    paths: list[PathShape] = [
        PathShape(
            points=(Point(x=l.x, y=l.top_y), Point(x=l.x, y=l.bottom_y)),
            role="lifeline",
            dashed=True,
        )
        for l in diagram.lifelines
    ]
    for m in diagram.messages:
        paths.append(
            PathShape(
                points=m.points,
                role="reply" if m.is_reply else "message",
                marker_end="reply-arrow" if m.is_reply else "arrow",
                dashed=m.is_reply,
                label=m.label,
            )
        )

    return Scene(rects=rects, paths=tuple(paths), viewport=diagram.viewport)
