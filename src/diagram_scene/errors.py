from __future__ import annotations


class DiagramError(ValueError):
    """Base class for errors that abort a whole layout call."""


class DiagramShapeError(DiagramError):
    """Top-level input is malformed: a required collection is absent or of the wrong kind."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class DiagramTooLargeError(DiagramError):
    """Input exceeds the configured item limit."""
