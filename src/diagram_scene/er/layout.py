from __future__ import annotations

import logging

from .types import (
    Entity,
    ErDiagram,
    PositionedEntity,
    PositionedErd,
    PositionedRelationship,
)
from ..geometry import NodeRect, bounding_viewport, facing_connection_points
from ..styles import DEFAULT_METRICS, FONT_FAMILY, TextMetrics, make_text_block, wrap_text
from ..types import Diagnostic, LayoutOptions, MarkerId

logger = logging.getLogger(__name__)

# ============================================================================
# ER diagram layout engine
#
# Grid packing, not a graph layout:
#   1. Each box is sized from its title and "name: type" rows
#   2. Boxes, sorted by name, fill rows left to right up to a width budget
#   3. Each relationship is one straight segment between facing sides
#   4. The cardinality string selects a crow's foot marker for each end
# ============================================================================

ER_HEADER_HEIGHT = 30
ER_ROW_HEIGHT = 20
ER_PAD_X = 15
ER_PAD_Y = 10
ER_MIN_WIDTH = 150
ER_MAX_WIDTH = 300
ER_H_GAP = 80
ER_V_GAP = 80
ER_TITLE_FONT_SIZE = 16
ER_ATTR_FONT_SIZE = 14
ER_ROW_WIDTH = 800
ER_PADDING = 25
ER_UNIQUE_GLYPH = "◆"

# cardinality -> (from-end marker, to-end marker)
CARDINALITY_MARKERS: dict[str, tuple[MarkerId, MarkerId]] = {
    "0..1": ("one", "zero-or-one"),
    "1..1": ("one", "one"),
    "1..*": ("one", "many"),
    "0..*": ("one", "zero-or-many"),
    "*..*": ("many", "many"),
}


def cardinality_markers(cardinality: str) -> tuple[MarkerId, MarkerId] | None:
    """(from-end, to-end) markers for a cardinality string, or None if unknown.

    The string describes the "to" end only; the "from" end is drawn as "one"
    except for "*..*", which is many on both ends.
    """
    return CARDINALITY_MARKERS.get(cardinality)


def attribute_text(name: str, type_: str) -> str:
    return f"{name}: {type_}"


def entity_size(entity: Entity, font: str, metrics: TextMetrics) -> tuple[float, float]:
    """(width, height) of an entity box."""
    text_w = metrics.measure(entity.name, ER_TITLE_FONT_SIZE, font)
    for attr in entity.attributes:
        w = metrics.measure(attribute_text(attr.name, attr.type), ER_ATTR_FONT_SIZE, font)
        if w > text_w:
            text_w = w
    width = min(ER_MAX_WIDTH, max(ER_MIN_WIDTH, text_w + ER_PAD_X * 2))
    height = ER_HEADER_HEIGHT + len(entity.attributes) * ER_ROW_HEIGHT + ER_PAD_Y * 2
    return width, height


def pack_entities(
    sizes: dict[str, tuple[float, float]],
    row_width: float = ER_ROW_WIDTH,
) -> dict[str, tuple[float, float]]:
    """Top-left position per entity name.

    Names are placed in sorted order. A box starts a new row when the current
    row already holds something and the box would end past ``row_width``.
    """
    positions: dict[str, tuple[float, float]] = {}
    x = 0.0
    y = 0.0
    row_max_height = 0.0

    for name in sorted(sizes):
        w, h = sizes[name]
        if positions and x + w > row_width:
            x = 0.0
            y += row_max_height + ER_V_GAP
            row_max_height = 0.0
        positions[name] = (x, y)
        x += w + ER_H_GAP
        row_max_height = max(row_max_height, h)

    return positions


def layout_erd(
    diagram: ErDiagram,
    options: LayoutOptions | None = None,
    metrics: TextMetrics = DEFAULT_METRICS,
) -> PositionedErd:
    """Lay out an ER diagram.

    Relationships naming an unknown entity are skipped with a warning
    diagnostic. Entities come back in packing (name) order.
    """
    opts = options or LayoutOptions()
    font = opts.font_family or FONT_FAMILY
    row_width = opts.row_width if opts.row_width is not None else ER_ROW_WIDTH
    padding = opts.padding if opts.padding is not None else ER_PADDING

    # 1. Box sizes
    by_name: dict[str, Entity] = {e.name: e for e in diagram.entities}
    sizes = {name: entity_size(e, font, metrics) for name, e in by_name.items()}

    # 2. Grid pack
    positions = pack_entities(sizes, row_width)

    # 3. Entity boxes with title and attribute rows
    entities: list[PositionedEntity] = []
    for name, (x, y) in positions.items():
        entity = by_name[name]
        w, h = sizes[name]
        text_width = w - ER_PAD_X * 2

        title = make_text_block(
            wrap_text(entity.name, text_width, ER_TITLE_FONT_SIZE, font, metrics),
            x + w / 2,
            y + ER_HEADER_HEIGHT / 2,
            ER_TITLE_FONT_SIZE,
            font,
            metrics,
            bold=True,
        )

        rows = []
        row_y = y + ER_HEADER_HEIGHT + ER_PAD_Y + ER_ROW_HEIGHT / 2
        for attr in entity.attributes:
            rows.append(
                make_text_block(
                    wrap_text(
                        attribute_text(attr.name, attr.type),
                        text_width,
                        ER_ATTR_FONT_SIZE,
                        font,
                        metrics,
                    ),
                    x + ER_PAD_X,
                    row_y,
                    ER_ATTR_FONT_SIZE,
                    font,
                    metrics,
                    anchor="start",
                    underline=attr.pk,
                    italic=attr.fk is not None,
                    glyph=ER_UNIQUE_GLYPH if attr.unique else None,
                )
            )
            row_y += ER_ROW_HEIGHT

        entities.append(
            PositionedEntity(
                name=name,
                attributes=tuple(entity.attributes),
                x=x,
                y=y,
                width=w,
                height=h,
                header_height=ER_HEADER_HEIGHT,
                row_height=ER_ROW_HEIGHT,
                title=title,
                rows=tuple(rows),
            )
        )

    # 4. Relationships
    rects = {e.name: NodeRect.from_top_left(e.x, e.y, e.width, e.height) for e in entities}
    diagnostics: list[Diagnostic] = []
    relationships: list[PositionedRelationship] = []

    for i, rel in enumerate(diagram.relationships):
        if rel.source not in rects or rel.target not in rects:
            message = f"Missing entity for relationship: {rel.source} - {rel.target}"
            logger.warning(message)
            diagnostics.append(Diagnostic("warning", message, item=f"relationships[{i}]"))
            continue

        markers = cardinality_markers(rel.cardinality)
        if markers is None:
            message = f'Unknown cardinality "{rel.cardinality}", drawing one-to-one'
            logger.warning(message)
            diagnostics.append(Diagnostic("warning", message, item=f"relationships[{i}]"))
            markers = ("one", "one")

        start, end = facing_connection_points(rects[rel.source], rects[rel.target])
        relationships.append(
            PositionedRelationship(
                source=rel.source,
                target=rel.target,
                cardinality=rel.cardinality,
                points=(start, end),
                marker_start=markers[0],
                marker_end=markers[1],
            )
        )

    viewport = bounding_viewport(
        ((e.x, e.y, e.width, e.height) for e in entities),
        (p for r in relationships for p in r.points),
        [e.title for e in entities] + [row for e in entities for row in e.rows],
        padding,
    )
    logger.debug(
        "ERD laid out: %d entities, %d relationships", len(entities), len(relationships)
    )

    return PositionedErd(
        viewport=viewport,
        entities=tuple(entities),
        relationships=tuple(relationships),
        diagnostics=tuple(diagnostics),
    )
