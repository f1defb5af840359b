"""Text measurement collaborators."""

from __future__ import annotations

from functools import lru_cache
from typing import Callable, Protocol

from matplotlib.font_manager import FontProperties
from matplotlib.textpath import TextToPath

from .model import TextStyle


class TextMeasurer(Protocol):
    def width(self, text: str, style: TextStyle) -> float: ...

    def height(self, text: str, style: TextStyle) -> float: ...


def width_function(measurer: TextMeasurer, style: TextStyle) -> Callable[[str], float]:
    """Bind a measurer to one style, as the text layout helpers expect."""
    return lambda text: measurer.width(text, style)


class FixedFontMeasurer:
    """Monospace approximation: every character is ``char_width`` pixels wide.

    Args:
        char_width: Width of one character in pixels.
        char_height: Line height; defaults to the style's font size.
    """

    def __init__(self, char_width: float = 7, char_height: float | None = None) -> None:
        if char_width <= 0:
            raise ValueError(f"char_width must be positive, got {char_width}")
        self.char_width = char_width
        self.char_height = char_height

    def width(self, text: str, style: TextStyle | None = None) -> float:
        return len(text) * self.char_width

    def height(self, text: str, style: TextStyle | None = None) -> float:
        if self.char_height is not None:
            return self.char_height
        return style.font_size if style is not None else self.char_width


_TEXT_TO_PATH = TextToPath()


@lru_cache(maxsize=4096)
def _text_extent(text: str, font_name: str, font_size: float) -> tuple[float, float]:
    prop = FontProperties(family=font_name, size=font_size)
    width, height, _descent = _TEXT_TO_PATH.get_text_width_height_descent(text, prop, ismath=False)
    return width, height


class MatplotlibTextMeasurer:
    """Font metrics from matplotlib's text-to-path engine, memoized per (text, style)."""

    def width(self, text: str, style: TextStyle) -> float:
        if not text:
            return 0
        return _text_extent(text, style.font_name, float(style.font_size))[0]

    def height(self, text: str, style: TextStyle) -> float:
        if not text:
            return style.font_size
        return max(_text_extent(text, style.font_name, float(style.font_size))[1], style.font_size)

    @staticmethod
    def cache_info():
        return _text_extent.cache_info()
