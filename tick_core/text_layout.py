"""Measurement-driven word wrapping and ellipsis truncation for labels."""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from dataclasses import dataclass, field

from .constants import ELLIPSIS

MeasureWidth = Callable[[str], float]

_WORD = re.compile(r"\S+[^\S\n]*\n?|\n")


@dataclass
class TextLayout:
    """Lines a label was broken into and whether it lost any text."""
    lines: list[str] = field(default_factory=list)
    need_tooltip: bool = False
    max_line_width: float = 0


def truncated_text(text: str, length: int | None = None) -> str:
    """``text`` cut to ``length`` characters plus an ellipsis.

    Negative lengths shorten the ASCII fallback ``"..."`` instead.
    """
    length = len(text) if length is None else length
    if length >= 0:
        return text[:length].strip() + ELLIPSIS
    return "..."[:length]


def truncate_text(measure: MeasureWidth, text: str, width: float) -> str:
    """Shorten ``text`` with an ellipsis until it fits ``width``."""
    if measure(truncated_text(text)) <= width:
        return truncated_text(text)
    if not text or measure(truncated_text(text, 1)) > width:
        for length in range(0, -4, -1):
            candidate = truncated_text(text, length)
            if measure(candidate) <= width:
                return candidate
        return ""
    length = 1
    while length < len(text) and measure(truncated_text(text, length + 1)) <= width:
        length += 1
    return truncated_text(text, length)


def _break_positions(text: str) -> list[tuple[int, bool]]:
    positions = [(match.end(), match.group(0).endswith("\n")) for match in _WORD.finditer(text)]
    if not positions or positions[-1][0] < len(text):
        positions.append((len(text), False))
    return positions


def break_lines(measure: MeasureWidth, text: str, width: float, max_lines: float) -> tuple[list[str], bool]:
    """Greedy word wrap into at most ``max_lines`` lines.

    Words are never split. When text remains after the last line, or a single
    word is wider than ``width``, the last line is extended by the next word
    and truncated with an ellipsis.

    Returns:
        The lines and whether anything was truncated.
    """
    if text == "":
        return [], False

    positions = _break_positions(text)
    length = len(text)
    lines: list[str] = []
    last_break = 0
    index = 0
    needs_truncation = False
    while True:
        end, hard = positions[index]
        index += 1
        while (
            not hard
            and end < length
            and index < len(positions)
            and measure(text[last_break:positions[index][0]].strip()) <= width
        ):
            end, hard = positions[index]
            index += 1
        lines.append(text[last_break:end].strip())

        line_fits = measure(lines[-1]) <= width
        if end >= length or len(lines) >= max_lines or not line_fits:
            if end < length or not line_fits:
                if not hard:
                    peek_end = positions[index][0] if index < len(positions) else length
                    lines[-1] = text[last_break:peek_end].strip()
                needs_truncation = True
            break
        last_break = end

    if needs_truncation:
        lines[-1] = truncate_text(measure, lines[-1], width)

    if len(lines) == 1 and lines[0] == "":
        lines = []
    return lines, needs_truncation


def calc_text_layout(measure: MeasureWidth, text: str, width: float, max_lines: float | None = 1) -> TextLayout:
    """Lay out ``text`` in a box ``width`` wide with at most ``max_lines`` lines.

    Args:
        measure: Returns the pixel width of a string in the label style.
        text: Label text; ``"\\n"`` forces a line break.
        width: Available width in pixels.
        max_lines: Line budget; ``None`` means a single line and ``math.inf`` unlimited.

    Returns:
        The layout. ``need_tooltip`` is set when any text had to be dropped.
    """
    max_lines = 1 if max_lines is None else max_lines
    if math.isfinite(max_lines):
        max_lines = math.floor(max_lines)
    if width <= 0:
        return TextLayout([], len(text) > 0, 0)
    if max_lines == 0:
        return TextLayout([], False, 0)

    lines, truncated = break_lines(measure, text, width, max_lines)
    max_line_width = max((measure(line) for line in lines), default=0)
    return TextLayout(lines, truncated, max_line_width)
