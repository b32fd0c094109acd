from __future__ import annotations

from .types import (
    Attribute,
    Entity,
    Relationship,
    ErDiagram,
    PositionedEntity,
    PositionedRelationship,
    PositionedErd,
)
from .parser import parse_erd
from .layout import layout_erd, cardinality_markers, entity_size, pack_entities
from .scene import build_erd_scene

__all__ = [
    "Attribute",
    "Entity",
    "Relationship",
    "ErDiagram",
    "PositionedEntity",
    "PositionedRelationship",
    "PositionedErd",
    "parse_erd",
    "layout_erd",
    "cardinality_markers",
    "entity_size",
    "pack_entities",
    "build_erd_scene",
]
