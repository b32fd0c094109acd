from __future__ import annotations

from typing import Any, Mapping

from ..errors import DiagramShapeError
from ..parser import require_list, require_mapping, require_str
from .types import Message, Participant, SequenceDiagram


def parse_sequence(data: Mapping[str, Any]) -> SequenceDiagram:
    """Build a SequenceDiagram from ``{"participants": [...], "messages": [...]}``.

    Participants may be plain names or ``{"name": ...}`` objects; messages are
    ``{"from", "to", "text"}`` objects.
    """
    raw_participants = require_list(data, "participants", "sequence")
    raw_messages = require_list(data, "messages", "sequence")

    participants: list[Participant] = []
    for i, raw in enumerate(raw_participants):
        where = f"participants[{i}]"
        if isinstance(raw, str):
            participants.append(Participant(name=raw))
        elif isinstance(raw, Mapping):
            participants.append(Participant(name=require_str(raw, "name", where)))
        else:
            raise DiagramShapeError(f"{where} must be a name or an object.", key=where)

    messages: list[Message] = []
    for i, raw in enumerate(raw_messages):
        where = f"messages[{i}]"
        item = require_mapping(raw, where)
        messages.append(
            Message(
                source=require_str(item, "from", where),
                target=require_str(item, "to", where),
                text=require_str(item, "text", where),
            )
        )

    return SequenceDiagram(participants=participants, messages=messages)
