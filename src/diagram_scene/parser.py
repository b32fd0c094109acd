from __future__ import annotations

from typing import Any, Mapping

from .errors import DiagramShapeError, DiagramTooLargeError
from .types import DiagramType

# ============================================================================
# Shared input-shape helpers
#
# Input arrives already validated (ids unique, references resolvable). These
# helpers only guard the top-level shape so a bypassed validator produces one
# clear failure instead of a KeyError deep inside a layout.
# ============================================================================

DIAGRAM_TYPES: tuple[DiagramType, ...] = ("flowchart", "sequence", "erd")


def detect_diagram_type(data: Any) -> DiagramType:
    """Read the ``type`` key of a diagram description."""
    if not isinstance(data, Mapping):
        raise DiagramShapeError("Diagram description must be an object.")
    kind = data.get("type")
    if kind is None:
        raise DiagramShapeError('Missing "type" property.', key="type")
    if kind not in DIAGRAM_TYPES:
        raise DiagramShapeError(
            f'Invalid diagram type: "{kind}". Must be one of: {", ".join(DIAGRAM_TYPES)}.',
            key="type",
        )
    return kind


def require_list(data: Mapping[str, Any], key: str, kind: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        raise DiagramShapeError(f'Invalid {kind} data: missing "{key}".', key=key)
    if not isinstance(value, list):
        raise DiagramShapeError(f'Invalid {kind} data: "{key}" must be a list.', key=key)
    return value


def require_mapping(item: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(item, Mapping):
        raise DiagramShapeError(f"{where} must be an object.", key=where)
    return item


def require_str(item: Mapping[str, Any], key: str, where: str) -> str:
    value = item.get(key)
    if not isinstance(value, str):
        raise DiagramShapeError(f'{where} must have a string "{key}".', key=f"{where}.{key}")
    return value


def optional_str(item: Mapping[str, Any], key: str, where: str) -> str | None:
    value = item.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise DiagramShapeError(f'{where} "{key}" must be a string.', key=f"{where}.{key}")
    return value


def check_size(kind: str, count: int, limit: int | None) -> None:
    """Refuse inputs larger than ``limit`` items (no limit when ``None``)."""
    if limit is not None and count > limit:
        raise DiagramTooLargeError(
            f"{kind} has {count} items, more than the limit of {limit}."
        )
