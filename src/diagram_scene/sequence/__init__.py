from __future__ import annotations

from .types import (
    Participant,
    Message,
    SequenceDiagram,
    PositionedParticipant,
    Lifeline,
    PositionedMessage,
    PositionedSequence,
)
from .parser import parse_sequence
from .layout import layout_sequence, is_reply
from .scene import build_sequence_scene

__all__ = [
    "Participant",
    "Message",
    "SequenceDiagram",
    "PositionedParticipant",
    "Lifeline",
    "PositionedMessage",
    "PositionedSequence",
    "parse_sequence",
    "layout_sequence",
    "is_reply",
    "build_sequence_scene",
]
