"""Layout tests for sequence diagrams -- participant slots, message rows,
reply detection and lifeline extents."""
from __future__ import annotations

import pytest

from diagram_scene.sequence import (
    Message,
    Participant,
    SequenceDiagram,
    build_sequence_scene,
    is_reply,
    layout_sequence,
)
from diagram_scene.types import LayoutOptions, Point, Viewport


def diagram(names: list[str], messages: list[tuple[str, str, str]]) -> SequenceDiagram:
    return SequenceDiagram(
        participants=[Participant(name=n) for n in names],
        messages=[Message(source=s, target=t, text=text) for s, t, text in messages],
    )


API_CALL = diagram(
    ["User", "API", "DB"],
    [
        ("User", "API", "GET /items"),
        ("API", "DB", "SELECT items"),
        ("DB", "API", "rows"),
        ("API", "User", "200 OK"),
    ],
)


class TestParticipantSlots:
    def test_three_participants_spread_over_the_target_width(self):
        result = layout_sequence(API_CALL)
        assert [p.x for p in result.participants] == [110, 480, 850]
        assert all(p.y == 10 and p.width == 120 and p.height == 40 for p in result.participants)

    def test_two_participants(self):
        result = layout_sequence(diagram(["A", "B"], []))
        assert [p.x for p in result.participants] == [110, 730]

    def test_many_participants_use_the_minimum_gap(self):
        result = layout_sequence(diagram(["A", "B", "C", "D", "E"], []))
        xs = [p.x for p in result.participants]
        assert [b - a for a, b in zip(xs, xs[1:])] == [320, 320, 320, 320]

    def test_single_participant(self):
        result = layout_sequence(diagram(["Solo"], []))
        assert result.participants[0].x == 110

    def test_header_text_is_centered_in_the_box(self):
        result = layout_sequence(API_CALL)
        text = result.participants[1].text
        assert (text.x, text.y) == (480, 30)
        assert text.lines == ("API",)


class TestMessageRows:
    def test_messages_are_equally_spaced_in_input_order(self):
        result = layout_sequence(API_CALL)
        ys = [m.y for m in result.messages]
        assert ys == [140, 200, 260, 320]
        assert all(b - a == 60 for a, b in zip(ys, ys[1:]))

    def test_arrow_runs_between_lifelines(self):
        result = layout_sequence(API_CALL)
        first = result.messages[0]
        assert (first.x1, first.x2) == (110, 480)
        assert first.points == (Point(x=110, y=140), Point(x=480, y=140))
        last = result.messages[3]
        assert last.points == (Point(x=480, y=320), Point(x=110, y=320))

    def test_custom_message_spacing(self):
        result = layout_sequence(API_CALL, LayoutOptions(message_spacing=40))
        assert [m.y for m in result.messages] == [120, 160, 200, 240]

    def test_label_is_centered_above_the_arrow(self):
        result = layout_sequence(API_CALL)
        label = result.messages[0].label
        assert (label.x, label.y) == (295, 132)
        assert label.baseline == "bottom"
        assert label.lines == ("GET /items",)

    def test_long_label_wraps_within_the_span(self):
        text = " ".join(["word"] * 30)
        result = layout_sequence(diagram(["A", "B"], [("A", "B", text)]))
        label = result.messages[0].label
        assert len(label.lines) > 1
        assert " ".join(label.lines) == text
        assert label.width <= 620 - 20


class TestReplies:
    def test_status_code_prefix_marks_a_reply(self):
        result = layout_sequence(API_CALL)
        assert [m.is_reply for m in result.messages] == [False, False, False, True]

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("200 OK", True),
            ("404\tNot Found", True),
            ("GET /items", False),
            ("2000 rows", False),
            ("20 OK", False),
            ("OK 200 ", False),
            ("200", False),
        ],
    )
    def test_is_reply(self, text, expected):
        assert is_reply(text) is expected

    def test_reply_does_not_change_position(self):
        plain = layout_sequence(diagram(["A", "B"], [("A", "B", "x"), ("B", "A", "ok")]))
        reply = layout_sequence(diagram(["A", "B"], [("A", "B", "x"), ("B", "A", "200 ok")]))
        assert [m.y for m in plain.messages] == [m.y for m in reply.messages]


class TestLifelines:
    def test_lifelines_run_from_header_to_below_the_last_message(self):
        result = layout_sequence(API_CALL)
        assert [(l.participant, l.x) for l in result.lifelines] == [
            ("User", 110), ("API", 480), ("DB", 850),
        ]
        assert all(l.top_y == 50 and l.bottom_y == 340 for l in result.lifelines)

    def test_lifelines_without_messages(self):
        result = layout_sequence(diagram(["A", "B"], []))
        assert all(l.bottom_y == 100 for l in result.lifelines)


class TestSelfMessages:
    def test_self_message_loops_inside_its_row(self):
        result = layout_sequence(diagram(["A", "B"], [("A", "A", "retry"), ("A", "B", "go")]))
        loop = result.messages[0]
        assert loop.is_self
        assert loop.points == (
            Point(x=110, y=140),
            Point(x=150, y=140),
            Point(x=150, y=160),
            Point(x=110, y=160),
        )
        assert loop.label.anchor == "start"
        assert result.messages[1].y == 200


class TestDanglingAndEmpty:
    def test_message_with_unknown_participant_is_skipped_without_taking_a_row(self):
        result = layout_sequence(
            diagram(["A", "B"], [("A", "B", "one"), ("A", "Z", "lost"), ("B", "A", "two")])
        )
        assert [m.text for m in result.messages] == ["one", "two"]
        assert [m.y for m in result.messages] == [140, 200]
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].item == "messages[1]"
        assert "A -> Z" in result.diagnostics[0].message

    def test_no_participants_gives_an_empty_diagram(self):
        result = layout_sequence(SequenceDiagram())
        assert result.participants == ()
        assert result.viewport == Viewport(x=0, y=0, width=100, height=100)


class TestSequenceScene:
    def test_scene_contents(self):
        scene = build_sequence_scene(layout_sequence(API_CALL))
        assert [r.role for r in scene.rects] == ["participant"] * 3
        assert scene.rects[0].x == 50
        roles = [p.role for p in scene.paths]
        assert roles == ["lifeline"] * 3 + ["message", "message", "message", "reply"]
        assert [p.marker_end for p in scene.paths[3:]] == ["arrow", "arrow", "arrow", "reply-arrow"]
        assert scene.paths[-1].dashed

    def test_layout_is_repeatable(self):
        assert layout_sequence(API_CALL) == layout_sequence(API_CALL)
