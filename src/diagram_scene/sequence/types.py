from __future__ import annotations

from dataclasses import dataclass, field

from ..types import Diagnostic, Point, TextBlock, Viewport

# ============================================================================
# Sequence diagram types
#
# Participants sit in fixed-width slots along the top; messages are stacked
# downward in the order given, one row each.
# ============================================================================


@dataclass(slots=True)
class Participant:
    name: str


@dataclass(slots=True)
class Message:
    source: str
    target: str
    text: str


@dataclass(slots=True)
class SequenceDiagram:
    """Sequence diagram input -- participants left to right, messages in time order."""
    participants: list[Participant] = field(default_factory=list)
    messages: list[Message] = field(default_factory=list)


# ============================================================================
# Positioned sequence diagram
# ============================================================================


@dataclass(frozen=True, slots=True)
class PositionedParticipant:
    name: str
    # Center x of the header box
    x: float
    # Top y of the header box
    y: float
    width: float
    height: float
    text: TextBlock


@dataclass(frozen=True, slots=True)
class Lifeline:
    """Vertical line from a participant header down past the last message."""
    participant: str
    x: float
    top_y: float
    bottom_y: float


@dataclass(frozen=True, slots=True)
class PositionedMessage:
    source: str
    target: str
    text: str
    # Source and target lifeline x
    x1: float
    x2: float
    y: float
    # Text starts with a status-code token such as "200 OK"
    is_reply: bool
    is_self: bool
    points: tuple[Point, ...]
    label: TextBlock


@dataclass(frozen=True, slots=True)
class PositionedSequence:
    viewport: Viewport
    participants: tuple[PositionedParticipant, ...] = ()
    lifelines: tuple[Lifeline, ...] = ()
    messages: tuple[PositionedMessage, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()
