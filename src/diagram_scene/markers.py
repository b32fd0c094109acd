from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .types import MarkerId

# ============================================================================
# Marker registry
#
# Backends look markers up by id and draw the listed glyph parts in order,
# walking inward from the path endpoint. The layout core only ever refers to
# markers by id.
#
#   arrow         filled triangle
#   reply-arrow   smaller open triangle
#   one           |   single bar
#   zero-or-one   o|  circle + bar
#   many          >   crow's foot
#   zero-or-many  o<  circle + crow's foot
# ============================================================================

GlyphPart = Literal["triangle", "open-triangle", "bar", "circle", "fork"]


@dataclass(frozen=True, slots=True)
class MarkerDef:
    id: MarkerId
    parts: tuple[GlyphPart, ...]
    width: float
    height: float


MARKERS: dict[str, MarkerDef] = {
    "arrow": MarkerDef("arrow", ("triangle",), 8, 6),
    "reply-arrow": MarkerDef("reply-arrow", ("open-triangle",), 6, 4),
    "one": MarkerDef("one", ("bar",), 2, 10),
    "zero-or-one": MarkerDef("zero-or-one", ("bar", "circle"), 10, 10),
    "many": MarkerDef("many", ("fork",), 10, 10),
    "zero-or-many": MarkerDef("zero-or-many", ("fork", "circle"), 10, 10),
}


def get_marker(marker_id: str) -> MarkerDef:
    """Look up a marker definition, raising KeyError for unknown ids."""
    try:
        return MARKERS[marker_id]
    except KeyError:
        raise KeyError(f"Unknown marker id: {marker_id!r}") from None
