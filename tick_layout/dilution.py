"""
Tick-label dilution search.

Labels are thinned out in two ways: alternation spreads consecutive labels
over several text rows, and skip shows only every n-th label. The search
first tries more rows, then larger skips from the 1-2-3-4-5 sequence, and
stops as soon as no label needs truncation.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from tick_core.constants import SKIP_INTERVALS
from tick_core.sequences import CustomPowersOf10
from tick_core.text_layout import TextLayout, calc_text_layout

from .measure import TextMeasurer, width_function
from .model import TickTextItem

logger = logging.getLogger("tickaxis")

ATTACH_TO_START = "attach_to_start"
ATTACH_TO_END = "attach_to_end"


def first_tick_index(first_tick_idx: int, num_ticks: int, composite_skip: int, skip_mode: str) -> int:
    """Index of the first displayed tick; attaching to the end keeps the last tick displayed."""
    if skip_mode == ATTACH_TO_END:
        return (num_ticks - 1 - first_tick_idx) % composite_skip
    return first_tick_idx


@dataclass
class DilutedTick:
    """A displayed tick with the text layout it got at the current arrangement."""
    index: int
    tick: TickTextItem
    line_idx: int
    layout: TextLayout
    width: float
    need_tooltip: bool

    @property
    def coordinate(self) -> float | None:
        return self.tick.coordinate

    @property
    def text(self) -> str:
        return self.tick.text


@dataclass
class Arrangement:
    alternation: int
    skip: int
    num_lines: float
    ticks: list[DilutedTick] = field(default_factory=list)
    acceptable: bool = True


def desired_lines(ticks: Sequence[DilutedTick]) -> tuple[int, bool]:
    """Most lines any label uses and whether any label lost text."""
    num_lines = max((len(tick.layout.lines) for tick in ticks), default=0)
    return num_lines, any(tick.need_tooltip for tick in ticks)


class TickDiluter:
    """Search over (alternation, skip) for a set of positioned labels.

    Args:
        total_length: Length of the container along the axis.
        ticks: Candidate labels in axis order.
        measurer: Text measurement collaborator.
        first_tick_idx: Index of the first label that may be displayed.
        max_lines: Line budget per label in the optimistic phase.
        max_alternation: Upper bound on text rows.
        force_skip: Fixed skip; 0 lets the search choose.
        skip_mode: ``attach_to_start`` or ``attach_to_end``.
        min_spacing: Space kept free between neighbouring labels.
        allow_cutoff: Whether labels may run past the container edges.
    """

    def __init__(
        self,
        total_length: float,
        ticks: Sequence[TickTextItem],
        measurer: TextMeasurer,
        first_tick_idx: int = 0,
        max_lines: float = math.inf,
        max_alternation: int = 2,
        force_skip: int = 0,
        skip_mode: str = ATTACH_TO_START,
        min_spacing: float = 0,
        allow_cutoff: bool = True,
    ) -> None:
        self.total_length = total_length
        self.ticks = list(ticks)
        self.measurer = measurer
        self.first_tick_idx = first_tick_idx
        self.max_lines = max_lines
        self.max_alternation = max(1, max_alternation)
        self.force_skip = force_skip
        self.skip_mode = skip_mode
        self.min_spacing = min_spacing
        self.allow_cutoff = allow_cutoff

    def interval(self, composite_skip: int) -> float:
        """Pixels available to each displayed label."""
        if len(self.ticks) <= 1:
            return self.total_length
        distance = abs(self.ticks[1].coordinate - self.ticks[0].coordinate)
        return max(0, distance * composite_skip - self.min_spacing)

    def alt_skip_too_large(self, first: int, alternation: int, skip: int) -> bool:
        """True when the first row would show fewer than two labels."""
        count = len(self.ticks)
        return count < 2 or math.ceil((count - first) / (alternation * skip)) < 2

    def _row(self, start: int, composite: int, interval: float, line_idx: int, num_lines: float) -> list[DilutedTick]:
        row = []
        for index in range(start, len(self.ticks), composite):
            tick = self.ticks[index]
            measure = width_function(self.measurer, tick.text_block.style)
            width = interval
            if tick.is_visible and not self.allow_cutoff and tick.coordinate is not None:
                width = min(interval, tick.coordinate * 2, (self.total_length - tick.coordinate) * 2)
            layout = calc_text_layout(measure, tick.text, width, num_lines)
            need_tooltip = layout.need_tooltip
            if width < interval:
                need_tooltip = calc_text_layout(measure, tick.text, interval, num_lines).need_tooltip
            row.append(DilutedTick(index, tick, line_idx, layout, layout.max_line_width, need_tooltip))
        return row

    def ticks_info(self, alternation: int, skip: int, num_lines: float) -> list[DilutedTick]:
        """Lay out every displayed label for one arrangement, in axis order."""
        composite = alternation * skip
        first = first_tick_index(self.first_tick_idx, len(self.ticks), composite, self.skip_mode)
        interval = self.interval(composite)
        lines_per_alt = 1 if alternation > 1 else num_lines
        info: list[DilutedTick] = []
        for row in range(alternation):
            info.extend(self._row(first + row * skip, composite, interval, row * lines_per_alt, lines_per_alt))
        info.sort(key=lambda tick: tick.index)
        return info

    def _skip_sequence(self, skip: float) -> tuple[CustomPowersOf10, int]:
        sequence = CustomPowersOf10(SKIP_INTERVALS)
        sequence.floor(skip)
        return sequence, int(sequence.next())

    def optimistic(self) -> Arrangement:
        """Densest arrangement without truncation, assuming unlimited lines."""
        alternation = 1
        skip = self.force_skip or 1
        info = self.ticks_info(alternation, skip, self.max_lines)
        num_lines, need_tooltip = desired_lines(info)

        safe_alternation = alternation
        while need_tooltip and alternation < self.max_alternation:
            alternation += 1
            if self.alt_skip_too_large(self.first_tick_idx, alternation, skip):
                break
            safe_alternation = alternation
            info = self.ticks_info(alternation, skip, self.max_lines)
            num_lines, need_tooltip = desired_lines(info)
        alternation = safe_alternation

        safe_skip = skip
        if not self.force_skip:
            initial = math.inf
            if self.total_length > 0:
                initial = self.min_spacing * (len(self.ticks) / alternation) / self.total_length
            if not math.isfinite(initial) or initial < 1:
                initial = 1
            sequence, skip = self._skip_sequence(initial)
            while need_tooltip and skip < len(self.ticks):
                if self.alt_skip_too_large(self.first_tick_idx, alternation, skip):
                    break
                safe_skip = skip
                info = self.ticks_info(alternation, skip, self.max_lines)
                num_lines, need_tooltip = desired_lines(info)
                skip = int(sequence.next())

        logger.debug(
            f"Optimistic dilution: alternation={alternation} skip={safe_skip} lines={num_lines * alternation}"
        )
        return Arrangement(alternation, safe_skip, num_lines * alternation, info, not need_tooltip)

    def final(self, optimistic: Arrangement, num_lines: float, acceptable_ratio: float) -> Arrangement:
        """Search again within the lines actually allocated.

        Args:
            optimistic: Result of :meth:`optimistic`.
            num_lines: Lines granted by the real-estate allocation.
            acceptable_ratio: Share of labels that may still need truncation.
        """
        max_alternation = max(1, min(self.max_alternation, num_lines))
        alternation = max(1, min(optimistic.alternation, max_alternation))
        skip = self.force_skip or optimistic.skip

        def acceptable(ticks: list[DilutedTick]) -> bool:
            return sum(1 for tick in ticks if tick.need_tooltip) <= len(ticks) * acceptable_ratio

        info = self.ticks_info(alternation, skip, num_lines)
        ok = acceptable(info)

        safe_alternation = alternation
        while not ok and alternation < max_alternation:
            alternation += 1
            if self.alt_skip_too_large(self.first_tick_idx, alternation, skip):
                break
            safe_alternation = alternation
            info = self.ticks_info(alternation, skip, num_lines)
            ok = acceptable(info)
        alternation = safe_alternation

        safe_skip = skip
        if not self.force_skip:
            sequence, skip = self._skip_sequence(skip)
            while not ok and skip < len(self.ticks):
                if self.alt_skip_too_large(self.first_tick_idx, alternation, skip):
                    break
                safe_skip = skip
                info = self.ticks_info(alternation, skip, num_lines)
                ok = acceptable(info)
                skip = int(sequence.next())

        logger.debug(f"Final dilution: alternation={alternation} skip={safe_skip} acceptable={ok}")
        return Arrangement(alternation, safe_skip, num_lines, info, ok)
