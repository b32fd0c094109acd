"""Layout tests for ER diagrams -- box sizing, grid packing, connection
points and cardinality markers."""
from __future__ import annotations

import dataclasses

import pytest

from diagram_scene.er import (
    Attribute,
    Entity,
    ErDiagram,
    Relationship,
    build_erd_scene,
    cardinality_markers,
    entity_size,
    layout_erd,
    pack_entities,
)
from diagram_scene.markers import MARKERS
from diagram_scene.styles import EstimatedTextMetrics
from diagram_scene.types import LayoutOptions, Point, Viewport

metrics = EstimatedTextMetrics()


def entity(name: str, *attrs: Attribute) -> Entity:
    return Entity(name=name, attributes=list(attrs))


USER = entity(
    "User",
    Attribute(name="id", type="int", pk=True),
    Attribute(name="email", type="string", unique=True),
)
ORDER = entity(
    "Order",
    Attribute(name="id", type="int", pk=True),
    Attribute(name="user_id", type="int", fk="User.id"),
    Attribute(name="total", type="decimal"),
)


def by_name(result, name: str):
    return next(e for e in result.entities if e.name == name)


# ============================================================================
# Sizing
# ============================================================================


class TestEntitySize:
    def test_short_content_uses_the_minimum_width(self):
        assert entity_size(USER, "sans-serif", metrics) == (150, 90)

    def test_height_grows_with_attribute_count(self):
        assert entity_size(ORDER, "sans-serif", metrics)[1] == 30 + 3 * 20 + 20

    def test_no_attributes(self):
        assert entity_size(entity("Empty"), "sans-serif", metrics) == (150, 50)

    def test_width_follows_the_widest_row(self):
        wide = entity("T", Attribute(name="a" * 20, type="varchar"))
        # "aaaaaaaaaaaaaaaaaaaa: varchar" is 29 chars at 14px
        assert entity_size(wide, "sans-serif", metrics)[0] == pytest.approx(29 * 14 * 0.55 + 30)

    def test_width_is_capped(self):
        long_name = entity("X" * 60)
        assert entity_size(long_name, "sans-serif", metrics)[0] == 300


# ============================================================================
# Grid packing
# ============================================================================


class TestPackEntities:
    def test_single_entity_sits_at_the_origin(self):
        assert pack_entities({"A": (150, 90)}) == {"A": (0, 0)}

    def test_entities_are_placed_in_name_order(self):
        positions = pack_entities({"b": (150, 90), "a": (150, 90)})
        assert list(positions) == ["a", "b"]
        assert positions["a"] == (0, 0)
        assert positions["b"] == (230, 0)

    def test_wide_second_entity_starts_a_new_row(self):
        positions = pack_entities({"A": (500, 90), "B": (400, 60)})
        assert positions["B"] == (0, 90 + 80)

    def test_new_row_starts_below_the_tallest_box(self):
        sizes = {"A": (150, 90), "B": (150, 110), "C": (150, 90), "D": (150, 90)}
        positions = pack_entities(sizes)
        assert [positions[n] for n in "ABC"] == [(0, 0), (230, 0), (460, 0)]
        assert positions["D"] == (0, 190)

    def test_oversized_first_entity_still_goes_first(self):
        positions = pack_entities({"A": (900, 50), "B": (150, 50)})
        assert positions["A"] == (0, 0)
        assert positions["B"] == (0, 130)

    def test_custom_row_width(self):
        positions = pack_entities({"A": (150, 50), "B": (150, 50)}, row_width=300)
        assert positions["B"] == (0, 130)


# ============================================================================
# Cardinality markers
# ============================================================================


class TestCardinalityMarkers:
    @pytest.mark.parametrize(
        "cardinality,start,end",
        [
            ("0..1", "one", "zero-or-one"),
            ("1..1", "one", "one"),
            ("1..*", "one", "many"),
            ("0..*", "one", "zero-or-many"),
            ("*..*", "many", "many"),
        ],
    )
    def test_mapping(self, cardinality, start, end):
        assert cardinality_markers(cardinality) == (start, end)

    def test_unknown_cardinality(self):
        assert cardinality_markers("2..5") is None

    def test_markers_are_registered(self):
        for cardinality in ("0..1", "1..1", "1..*", "0..*", "*..*"):
            for marker in cardinality_markers(cardinality):
                assert marker in MARKERS


# ============================================================================
# Full layout
# ============================================================================


class TestLayoutErd:
    def test_boxes_and_rows(self):
        result = layout_erd(ErDiagram(entities=[USER, ORDER]))
        assert [e.name for e in result.entities] == ["Order", "User"]
        order = by_name(result, "Order")
        assert (order.x, order.y) == (0, 0)
        assert by_name(result, "User").x == 230

        rows = order.rows
        assert [r.lines for r in rows] == [("id: int",), ("user_id: int",), ("total: decimal",)]
        assert [r.underline for r in rows] == [True, False, False]
        assert [r.italic for r in rows] == [False, True, False]
        assert rows[0].x == 15
        assert [r.y for r in rows] == [50, 70, 90]

    def test_positioned_attributes_are_immutable(self):
        result = layout_erd(ErDiagram(entities=[USER]))
        attr = result.entities[0].attributes[0]
        assert attr == Attribute(name="id", type="int", pk=True)
        with pytest.raises(dataclasses.FrozenInstanceError):
            attr.pk = False

    def test_unique_attribute_gets_a_glyph(self):
        result = layout_erd(ErDiagram(entities=[USER]))
        rows = result.entities[0].rows
        assert rows[0].glyph is None
        assert rows[1].glyph is not None

    def test_title_is_centered_in_the_header(self):
        result = layout_erd(ErDiagram(entities=[USER]))
        title = result.entities[0].title
        assert (title.x, title.y) == (75, 15)
        assert title.bold

    def test_side_by_side_entities_connect_left_to_right(self):
        result = layout_erd(
            ErDiagram(
                entities=[USER, ORDER],
                relationships=[Relationship(source="User", target="Order", cardinality="1..*")],
            )
        )
        rel = result.relationships[0]
        # Order (0, 0, 150, 110) is left of User (230, 0, 150, 90)
        assert rel.points == (Point(x=230, y=45), Point(x=150, y=55))
        assert (rel.marker_start, rel.marker_end) == ("one", "many")

    def test_stacked_entities_connect_bottom_to_top(self):
        result = layout_erd(
            ErDiagram(
                entities=[USER, ORDER],
                relationships=[Relationship(source="Order", target="User", cardinality="*..*")],
            ),
            LayoutOptions(row_width=200),
        )
        assert (by_name(result, "User").x, by_name(result, "User").y) == (0, 190)
        rel = result.relationships[0]
        assert rel.points == (Point(x=75, y=110), Point(x=75, y=190))
        assert (rel.marker_start, rel.marker_end) == ("many", "many")

    def test_relationship_to_a_missing_entity_is_skipped(self):
        result = layout_erd(
            ErDiagram(
                entities=[USER],
                relationships=[Relationship(source="User", target="Ghost", cardinality="1..1")],
            )
        )
        assert result.relationships == ()
        assert result.diagnostics[0].level == "warning"
        assert result.diagnostics[0].item == "relationships[0]"

    def test_unknown_cardinality_falls_back_to_one_to_one(self):
        result = layout_erd(
            ErDiagram(
                entities=[USER, ORDER],
                relationships=[Relationship(source="User", target="Order", cardinality="2..5")],
            )
        )
        rel = result.relationships[0]
        assert (rel.marker_start, rel.marker_end) == ("one", "one")
        assert len(result.diagnostics) == 1

    def test_empty_diagram(self):
        result = layout_erd(ErDiagram())
        assert result.entities == ()
        assert result.viewport == Viewport(x=0, y=0, width=100, height=100)

    def test_viewport_covers_the_boxes(self):
        result = layout_erd(ErDiagram(entities=[USER]))
        assert result.viewport == Viewport(x=-25, y=-25, width=200, height=140)

    def test_layout_is_repeatable(self):
        source = ErDiagram(
            entities=[USER, ORDER],
            relationships=[Relationship(source="User", target="Order", cardinality="0..*")],
        )
        assert layout_erd(source) == layout_erd(source)


class TestErdScene:
    def test_scene_contents(self):
        scene = build_erd_scene(
            layout_erd(
                ErDiagram(
                    entities=[USER, ORDER],
                    relationships=[Relationship(source="User", target="Order", cardinality="0..1")],
                )
            )
        )
        assert [r.role for r in scene.rects] == ["entity", "entity-header"] * 2
        assert scene.rects[1].height == 30
        assert scene.rects[1].texts[0].lines == ("Order",)
        assert len(scene.rects[0].texts) == 3
        path = scene.paths[0]
        assert path.role == "relationship"
        assert (path.marker_start, path.marker_end) == ("one", "zero-or-one")
