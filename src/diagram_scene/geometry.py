from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

from .styles import text_bounds
from .types import Point, TextBlock, Viewport

# ============================================================================
# Geometry helpers shared by the layout engines
# ============================================================================

# Viewport of a diagram with nothing in it
EMPTY_VIEWPORT = Viewport(x=0, y=0, width=100, height=100)

Side = Literal["top", "bottom", "left", "right"]


@dataclass(frozen=True, slots=True)
class NodeRect:
    """Box with center-based coordinates."""

    cx: float
    cy: float
    hw: float
    hh: float

    @classmethod
    def from_top_left(cls, x: float, y: float, width: float, height: float) -> NodeRect:
        return cls(cx=x + width / 2, cy=y + height / 2, hw=width / 2, hh=height / 2)

    def side_midpoint(self, side: Side) -> Point:
        if side == "top":
            return Point(x=self.cx, y=self.cy - self.hh)
        if side == "bottom":
            return Point(x=self.cx, y=self.cy + self.hh)
        if side == "left":
            return Point(x=self.cx - self.hw, y=self.cy)
        return Point(x=self.cx + self.hw, y=self.cy)


_OPPOSITE: dict[str, Side] = {
    "top": "bottom",
    "bottom": "top",
    "left": "right",
    "right": "left",
}


def elbow_route(source: NodeRect, target: NodeRect, exit_side: Side, offset: float) -> list[Point]:
    """Three-segment connector between two boxes.

    Leaves ``source`` from the middle of ``exit_side``, runs ``offset`` away
    from the box, crosses over to the target's axis, then enters ``target``
    through the middle of the opposite side. Always returns four points, even
    when the boxes are aligned and the crossing segment has zero length.
    """
    start = source.side_midpoint(exit_side)
    end = target.side_midpoint(_OPPOSITE[exit_side])

    if exit_side in ("top", "bottom"):
        sign = 1 if exit_side == "bottom" else -1
        mid = start.y + sign * offset
        return [start, Point(x=start.x, y=mid), Point(x=end.x, y=mid), end]

    sign = 1 if exit_side == "right" else -1
    mid = start.x + sign * offset
    return [start, Point(x=mid, y=start.y), Point(x=mid, y=end.y), end]


def facing_connection_points(a: NodeRect, b: NodeRect) -> tuple[Point, Point]:
    """Attachment points for a straight connector between two boxes.

    When the centers are further apart horizontally than vertically, the
    connector joins the facing left/right sides at their vertical midpoints;
    otherwise (ties included) it joins the facing top/bottom sides.
    """
    dx = b.cx - a.cx
    dy = b.cy - a.cy
    if abs(dx) > abs(dy):
        if dx > 0:
            return a.side_midpoint("right"), b.side_midpoint("left")
        return a.side_midpoint("left"), b.side_midpoint("right")
    if dy > 0:
        return a.side_midpoint("bottom"), b.side_midpoint("top")
    return a.side_midpoint("top"), b.side_midpoint("bottom")


def bounding_viewport(
    boxes: Iterable[tuple[float, float, float, float]],
    points: Iterable[Point],
    texts: Iterable[TextBlock],
    padding: float,
) -> Viewport:
    """Smallest box around every (x, y, width, height) box, point and text
    block, grown by ``padding`` on each side."""
    xs: list[float] = []
    ys: list[float] = []

    for x, y, w, h in boxes:
        xs.extend((x, x + w))
        ys.extend((y, y + h))
    for pt in points:
        xs.append(pt.x)
        ys.append(pt.y)
    for block in texts:
        left, top, right, bottom = text_bounds(block)
        xs.extend((left, right))
        ys.extend((top, bottom))

    if not xs:
        return EMPTY_VIEWPORT

    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)
    return Viewport(
        x=min_x - padding,
        y=min_y - padding,
        width=max_x - min_x + padding * 2,
        height=max_y - min_y + padding * 2,
    )
