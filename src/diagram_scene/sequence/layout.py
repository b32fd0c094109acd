from __future__ import annotations

import logging
import re

from .types import (
    Lifeline,
    PositionedMessage,
    PositionedParticipant,
    PositionedSequence,
    SequenceDiagram,
)
from ..geometry import bounding_viewport
from ..styles import DEFAULT_METRICS, FONT_FAMILY, TextMetrics, make_text_block, wrap_text
from ..types import Diagnostic, LayoutOptions, Point

logger = logging.getLogger(__name__)

# ============================================================================
# Sequence diagram layout engine
#
# Timeline layout (sequence diagrams aren't graphs):
#   1. Participants get evenly spaced fixed-width header slots
#   2. A cursor moves down one row per message, in input order
#   3. Replies ("200 OK", "404 Not Found") are flagged for styling only
#   4. Lifelines run from each header to just below the last message
# ============================================================================

SEQ = {
    "participant_width": 120,
    "participant_height": 40,
    # Top of the header boxes
    "header_y": 10,
    # Left margin before the first header
    "margin": 50,
    # Smallest gap between neighbouring header boxes
    "min_gap": 200,
    # Width the gaps are spread over when there are few participants
    "target_width": 500,
    # Cursor start; the first message sits one row below this
    "timeline_start": 80,
    "message_spacing": 60,
    # How far lifelines run past the last message
    "lifeline_tail": 20,
    "font_size": 14,
    "label_font_size": 14 * 0.85,
    "header_pad_x": 10,
    # Label sits this far above its arrow
    "label_offset": 8,
    # Label width is the arrow span minus this
    "label_pad": 20,
    # Self-message loop
    "self_loop_width": 40,
    "self_loop_height": 20,
    "padding": 25,
}

_REPLY_RE = re.compile(r"^\d{3}\s")


def is_reply(text: str) -> bool:
    """A reply starts with a three-digit status token followed by whitespace."""
    return _REPLY_RE.match(text) is not None


def participant_gap(count: int) -> float:
    """Gap between neighbouring header boxes for ``count`` participants."""
    if count > 1:
        return max(SEQ["min_gap"], SEQ["target_width"] / (count - 1))
    return SEQ["min_gap"]


def layout_sequence(
    diagram: SequenceDiagram,
    options: LayoutOptions | None = None,
    metrics: TextMetrics = DEFAULT_METRICS,
) -> PositionedSequence:
    """Lay out a sequence diagram.

    Messages naming an unknown participant are skipped with a warning
    diagnostic and take no row.
    """
    opts = options or LayoutOptions()
    font = opts.font_family or FONT_FAMILY
    row_height = opts.message_spacing if opts.message_spacing is not None else SEQ["message_spacing"]
    padding = opts.padding if opts.padding is not None else SEQ["padding"]

    width = SEQ["participant_width"]
    height = SEQ["participant_height"]
    header_y = SEQ["header_y"]
    gap = participant_gap(len(diagram.participants))

    # 1. Header slots
    center_x: dict[str, float] = {}
    participants: list[PositionedParticipant] = []
    for i, p in enumerate(diagram.participants):
        x = SEQ["margin"] + width / 2 + i * (width + gap)
        center_x[p.name] = x
        lines = wrap_text(p.name, width - SEQ["header_pad_x"] * 2, SEQ["font_size"], font, metrics)
        participants.append(
            PositionedParticipant(
                name=p.name,
                x=x,
                y=header_y,
                width=width,
                height=height,
                text=make_text_block(lines, x, header_y + height / 2, SEQ["font_size"], font, metrics),
            )
        )

    # 2. Messages, one row each
    diagnostics: list[Diagnostic] = []
    messages: list[PositionedMessage] = []
    cursor = SEQ["timeline_start"]
    label_size = SEQ["label_font_size"]

    for i, msg in enumerate(diagram.messages):
        if msg.source not in center_x or msg.target not in center_x:
            message = f"Participant not found for message: {msg.source} -> {msg.target}"
            logger.warning(message)
            diagnostics.append(Diagnostic("warning", message, item=f"messages[{i}]"))
            continue

        cursor += row_height
        y = cursor
        x1 = center_x[msg.source]
        x2 = center_x[msg.target]
        is_self = msg.source == msg.target

        if is_self:
            loop_right = x1 + SEQ["self_loop_width"]
            loop_bottom = y + SEQ["self_loop_height"]
            points = (
                Point(x=x1, y=y),
                Point(x=loop_right, y=y),
                Point(x=loop_right, y=loop_bottom),
                Point(x=x1, y=loop_bottom),
            )
            lines = wrap_text(msg.text, width, label_size, font, metrics)
            label = make_text_block(
                lines,
                loop_right + SEQ["label_offset"],
                y + SEQ["self_loop_height"] / 2,
                label_size,
                font,
                metrics,
                anchor="start",
            )
        else:
            points = (Point(x=x1, y=y), Point(x=x2, y=y))
            lines = wrap_text(msg.text, abs(x1 - x2) - SEQ["label_pad"], label_size, font, metrics)
            label = make_text_block(
                lines,
                (x1 + x2) / 2,
                y - SEQ["label_offset"],
                label_size,
                font,
                metrics,
                baseline="bottom",
            )

        messages.append(
            PositionedMessage(
                source=msg.source,
                target=msg.target,
                text=msg.text,
                x1=x1,
                x2=x2,
                y=y,
                is_reply=is_reply(msg.text),
                is_self=is_self,
                points=points,
                label=label,
            )
        )

    # 3. Lifelines
    last_y = max((m.y for m in messages), default=SEQ["timeline_start"])
    lifelines = tuple(
        Lifeline(
            participant=p.name,
            x=p.x,
            top_y=p.y + p.height,
            bottom_y=last_y + SEQ["lifeline_tail"],
        )
        for p in participants
    )

    viewport = bounding_viewport(
        ((p.x - p.width / 2, p.y, p.width, p.height) for p in participants),
        [pt for m in messages for pt in m.points]
        + [Point(x=l.x, y=l.bottom_y) for l in lifelines],
        [p.text for p in participants] + [m.label for m in messages],
        padding,
    )
    logger.debug(
        "Sequence laid out: %d participants, %d messages", len(participants), len(messages)
    )

    return PositionedSequence(
        viewport=viewport,
        participants=tuple(participants),
        lifelines=lifelines,
        messages=tuple(messages),
        diagnostics=tuple(diagnostics),
    )
