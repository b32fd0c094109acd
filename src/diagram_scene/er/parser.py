from __future__ import annotations

from typing import Any, Mapping

from ..errors import DiagramShapeError
from ..parser import optional_str, require_list, require_mapping, require_str
from .types import Attribute, Entity, ErDiagram, Relationship


def _parse_attribute(raw: Any, where: str) -> Attribute:
    item = require_mapping(raw, where)
    return Attribute(
        name=require_str(item, "name", where),
        type=require_str(item, "type", where),
        pk=bool(item.get("pk", False)),
        fk=optional_str(item, "fk", where),
        unique=bool(item.get("unique", False)),
    )


def parse_erd(data: Mapping[str, Any]) -> ErDiagram:
    """Build an ErDiagram from ``{"entities": [...], "relationships": [...]}``.

    Entities are ``{"name", "attributes"?}``; relationships are
    ``{"from", "to", "cardinality"}``. Cardinality strings are passed through
    unchecked.
    """
    raw_entities = require_list(data, "entities", "ERD")
    raw_relationships = require_list(data, "relationships", "ERD")

    entities: list[Entity] = []
    for i, raw in enumerate(raw_entities):
        where = f"entities[{i}]"
        item = require_mapping(raw, where)
        raw_attrs = item.get("attributes", [])
        if not isinstance(raw_attrs, list):
            raise DiagramShapeError(f'{where} "attributes" must be a list.', key=f"{where}.attributes")
        entities.append(
            Entity(
                name=require_str(item, "name", where),
                attributes=[
                    _parse_attribute(a, f"{where}.attributes[{j}]") for j, a in enumerate(raw_attrs)
                ],
            )
        )

    relationships: list[Relationship] = []
    for i, raw in enumerate(raw_relationships):
        where = f"relationships[{i}]"
        item = require_mapping(raw, where)
        relationships.append(
            Relationship(
                source=require_str(item, "from", where),
                target=require_str(item, "to", where),
                cardinality=require_str(item, "cardinality", where),
            )
        )

    return ErDiagram(entities=entities, relationships=relationships)
