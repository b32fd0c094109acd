from __future__ import annotations

from dataclasses import dataclass, field

from ..types import Diagnostic, MarkerId, Point, TextBlock, Viewport

# ============================================================================
# ER diagram types
#
# Entities are boxes with a title band and one row per attribute. A
# relationship carries one cardinality string describing the "to" end.
# ============================================================================


@dataclass(frozen=True, slots=True)
class Attribute:
    """A single attribute (column) of an entity."""

    name: str
    type: str
    pk: bool = False
    # Referenced column as "Entity.Attribute"
    fk: str | None = None
    unique: bool = False


@dataclass(slots=True)
class Entity:
    name: str
    attributes: list[Attribute] = field(default_factory=list)


@dataclass(slots=True)
class Relationship:
    source: str
    target: str
    cardinality: str


@dataclass(slots=True)
class ErDiagram:
    entities: list[Entity] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)


# ============================================================================
# Positioned ER diagram
# ============================================================================


@dataclass(frozen=True, slots=True)
class PositionedEntity:
    name: str
    attributes: tuple[Attribute, ...]
    # Top-left corner
    x: float
    y: float
    width: float
    height: float
    header_height: float
    row_height: float
    title: TextBlock
    # One text block per attribute, in attribute order
    rows: tuple[TextBlock, ...] = ()


@dataclass(frozen=True, slots=True)
class PositionedRelationship:
    source: str
    target: str
    cardinality: str
    # Straight segment from the source box to the target box
    points: tuple[Point, ...]
    marker_start: MarkerId
    marker_end: MarkerId


@dataclass(frozen=True, slots=True)
class PositionedErd:
    viewport: Viewport
    entities: tuple[PositionedEntity, ...] = ()
    relationships: tuple[PositionedRelationship, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()
