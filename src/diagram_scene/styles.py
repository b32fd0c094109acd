from __future__ import annotations

from typing import Protocol

from .types import TextAnchor, TextBaseline, TextBlock

# ============================================================================
# Text metrics -- pluggable width measurement.
#
# Layouts never measure text themselves: they call ``metrics.measure`` so a
# backend can supply real font metrics while tests use a deterministic
# estimate.
# ============================================================================


class TextMetrics(Protocol):
    def measure(self, text: str, font_size: float, font_family: str) -> float:
        """Width of ``text`` in px when set in the given font."""
        ...


class EstimatedTextMetrics:
    """Average glyph width estimate (proportional font). Fully deterministic."""

    def __init__(self, width_ratio: float = 0.55) -> None:
        self.width_ratio = width_ratio

    def measure(self, text: str, font_size: float, font_family: str) -> float:
        return len(text) * font_size * self.width_ratio


class MonospaceTextMetrics:
    """Uniform glyph width for monospace fonts."""

    def measure(self, text: str, font_size: float, font_family: str) -> float:
        return len(text) * font_size * 0.6


class PillowTextMetrics:
    """Measure with real TrueType fonts through Pillow.

    ``font_paths`` maps a font family name to a .ttf/.otf file. Families with
    no entry are measured with Pillow's built-in default font at the requested
    size. Results depend on the fonts installed on the machine.
    """

    def __init__(self, font_paths: dict[str, str] | None = None) -> None:
        from PIL import ImageFont

        self._image_font = ImageFont
        self.font_paths = dict(font_paths or {})
        self._fonts: dict[tuple[str, float], object] = {}

    def _font(self, font_size: float, font_family: str):
        key = (font_family, font_size)
        font = self._fonts.get(key)
        if font is None:
            path = self.font_paths.get(font_family)
            if path is not None:
                font = self._image_font.truetype(path, font_size)
            else:
                font = self._image_font.load_default(size=font_size)
            self._fonts[key] = font
        return font

    def measure(self, text: str, font_size: float, font_family: str) -> float:
        if not text:
            return 0.0
        return float(self._font(font_size, font_family).getlength(text))


DEFAULT_METRICS = EstimatedTextMetrics()

# ============================================================================
# Fonts
# ============================================================================

FONT_FAMILY = "sans-serif"

# Line height of wrapped text, as a multiple of the font size
LINE_HEIGHT = 1.2

# ============================================================================
# Word wrap
# ============================================================================


def wrap_text(
    text: str,
    max_width: float,
    font_size: float,
    font_family: str = FONT_FAMILY,
    metrics: TextMetrics = DEFAULT_METRICS,
) -> list[str]:
    """Greedy word wrap.

    Words are split on single spaces, so joining the result with single
    spaces gives back ``text``. A word wider than ``max_width`` on its own is
    kept whole on its own line.
    """
    if metrics.measure(text, font_size, font_family) <= max_width:
        return [text]

    words = text.split(" ")
    lines: list[str] = []
    current = words[0]
    for word in words[1:]:
        candidate = current + " " + word
        if metrics.measure(candidate, font_size, font_family) <= max_width:
            current = candidate
        else:
            lines.append(current)
            current = word
    lines.append(current)
    return lines


def make_text_block(
    lines: list[str],
    x: float,
    y: float,
    font_size: float,
    font_family: str,
    metrics: TextMetrics,
    anchor: TextAnchor = "middle",
    baseline: TextBaseline = "middle",
    **style,
) -> TextBlock:
    """Build a TextBlock, measuring its extents with ``metrics``."""
    width = max((metrics.measure(line, font_size, font_family) for line in lines), default=0.0)
    height = len(lines) * font_size * LINE_HEIGHT
    return TextBlock(
        lines=tuple(lines),
        x=x,
        y=y,
        font_size=font_size,
        font_family=font_family,
        width=width,
        height=height,
        anchor=anchor,
        baseline=baseline,
        line_height=LINE_HEIGHT,
        **style,
    )


def text_bounds(block: TextBlock) -> tuple[float, float, float, float]:
    """(left, top, right, bottom) of a text block."""
    if block.anchor == "start":
        left = block.x
    elif block.anchor == "end":
        left = block.x - block.width
    else:
        left = block.x - block.width / 2

    if block.baseline == "top":
        top = block.y
    elif block.baseline == "bottom":
        top = block.y - block.height
    else:
        top = block.y - block.height / 2

    return left, top, left + block.width, top + block.height
