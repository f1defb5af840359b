"""
Text layout for a horizontal axis.

Outside labels compete with the axis title, legend and color bar for the
space between the chart area and the container bottom. The negotiation runs
an optimistic dilution with unlimited lines, asks the real-estate allocator
for space, then repeats the dilution within the granted lines. When the
horizontal labels still need a larger skip than allowed, the layout switches
to slanted labels and asks for space once more.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from itertools import accumulate

from tick_core.config import AxisTextSettings, DilutionSettings
from tick_core.constants import GOLDEN_RATIO, MIN_GAP, MISSING_TEXT_INDICATION
from tick_core.duration import js_round
from tick_core.real_estate import RealEstateItem, distribute_real_estate_with_keys
from tick_core.text_layout import calc_text_layout

from .dilution import Arrangement, DilutedTick, TickDiluter, first_tick_index
from .measure import TextMeasurer, width_function
from .model import (
    Box,
    ChartGeometry,
    LayoutOutcome,
    TextAlign,
    TextBlock,
    TextLine,
    TextStyle,
    TickTextItem,
)

logger = logging.getLogger("tickaxis")

TICKS = "ticks"
TITLE = "title"
LEGEND = "legend"
COLOR_BAR = "color_bar"
SPACE = "space"


@dataclass
class AxisTextLayout:
    ticks: list[TickTextItem] = field(default_factory=list)
    title: TextBlock | None = None
    legend_area: Box | None = None
    color_bar_area: Box | None = None
    skip: int = 1
    alternation: int = 1
    slanted: bool = False
    outcome: LayoutOutcome = LayoutOutcome.OK


class SlantedTicks:
    """Rotated labels: skip and height follow from the font size and angle alone.

    Args:
        ticks: Candidate labels in axis order.
        style: Tick text style.
        measurer: Text measurement collaborator.
        dilution: Dilution settings (angle, forced skip, margin, cutoff).
        total_length: Container width.
    """

    def __init__(
        self,
        ticks: list[TickTextItem],
        style: TextStyle,
        measurer: TextMeasurer,
        dilution: DilutionSettings,
        total_length: float,
    ) -> None:
        self.ticks = ticks
        self.style = style
        self.measure = width_function(measurer, style)
        self.dilution = dilution
        self.total_length = total_length
        self.angle = dilution.slanted_text_angle
        radians = math.radians(self.angle) % math.pi
        self.sin = abs(math.sin(radians))
        self.cos = abs(math.cos(radians))

        font_size = style.font_size
        # Room one rotated label takes up along the axis.
        self.footprint = (font_size + MIN_GAP) / self.sin if self.sin >= 1e-9 else math.inf
        if dilution.show_text_every:
            skip = dilution.show_text_every
        elif len(ticks) < 2:
            skip = 1
        elif self.sin < 1e-9:
            skip = len(ticks)
        else:
            interval = abs(ticks[1].coordinate - ticks[0].coordinate)
            skip = math.ceil(self.footprint / interval) if interval > 0 else len(ticks)
        self.skip = max(1, skip)
        self.max_height = max((self.text_height(tick.text) for tick in ticks[::self.skip]), default=0)
        self.min_height = min(self.max_height, self.text_height(MISSING_TEXT_INDICATION))

    def text_height(self, text: str) -> int:
        """Extent of rotated text perpendicular to the axis."""
        return math.ceil(abs(self.measure(text) * self.sin) + abs(self.style.font_size * self.cos))

    def real_estate_item(self, gap: float, gap_above: float) -> RealEstateItem:
        if self.sin < 1e-9:
            raise ValueError("dilution.slanted_text_angle must not be parallel to the axis")
        return RealEstateItem(self.min_height + gap, self.max_height + gap, [gap_above - gap], TICKS)

    def layout(self, height: float, top: float) -> list[TickTextItem]:
        """Rotated text blocks for the displayed ticks, hanging from ``top``."""
        first = first_tick_index(0, len(self.ticks), self.skip, self.dilution.show_text_every_mode)
        text_width = math.floor((height - self.style.font_size * self.cos) / self.sin)
        top += self.dilution.margin
        end_aligned = self.angle <= 180

        result = []
        for tick in self.ticks[first::self.skip]:
            width = text_width
            if not self.dilution.allow_container_boundary_text_cutoff and tick.coordinate is not None and self.cos > 0:
                room = tick.coordinate if end_aligned else self.total_length - tick.coordinate
                width = min(width, room / self.cos)
            layout = calc_text_layout(self.measure, tick.text, width, 1)
            need_tooltip = layout.need_tooltip
            if width < text_width:
                need_tooltip = calc_text_layout(self.measure, tick.text, text_width, 1).need_tooltip
            lines = []
            if layout.lines:
                lines.append(TextLine(x=0, y=0, text=layout.lines[0], length=layout.max_line_width))
            block = TextBlock(
                text=tick.text,
                style=self.style,
                lines=lines,
                paral_align=TextAlign.END if end_aligned else TextAlign.START,
                perpen_align=TextAlign.CENTER,
                anchor=(tick.coordinate, top),
                angle=-self.angle,
                tooltip=tick.text if layout.need_tooltip else None,
            )
            result.append(
                TickTextItem(
                    data_value=tick.data_value,
                    coordinate=tick.coordinate,
                    is_visible=tick.is_visible,
                    optional=tick.optional,
                    text_block=block,
                    width=layout.max_line_width,
                    need_tooltip=need_tooltip,
                )
            )
        return result

    def acceptable(self, items: list[TickTextItem], axis_length: float) -> bool:
        """Whether laid-out rotated labels can stand as the axis labelling.

        The axis must be long enough for one rotated label. No shown label
        may be truncated to fit the granted height, and at least one must
        keep its text. Labels cut at the container edges are tolerated, as
        they are for horizontal labels.
        """
        if axis_length < self.footprint:
            return False
        shown = [item for item in items if item.is_visible]
        if any(item.need_tooltip for item in shown):
            return False
        return not shown or any(item.text_block.lines for item in shown)


def _horizontal_items(
    diluted: list[DilutedTick],
    cumulative: list[float],
    anchor_y: float,
    perpen_align: TextAlign,
    direction: int = 1,
    paral_align: TextAlign | None = None,
    x_offset: float = 0,
) -> list[TickTextItem]:
    result = []
    for info in diluted:
        tick = info.tick
        texts = info.layout.lines if direction > 0 else list(reversed(info.layout.lines))
        lines = [
            TextLine(x=0, y=direction * cumulative[info.line_idx + i], text=text, length=info.width)
            for i, text in enumerate(texts)
            if info.line_idx + i < len(cumulative)
        ]
        block = TextBlock(
            text=tick.text,
            style=tick.text_block.style,
            lines=lines,
            paral_align=paral_align or tick.text_block.paral_align,
            perpen_align=perpen_align,
            anchor=(tick.coordinate + x_offset, anchor_y),
            tooltip=tick.text if info.layout.need_tooltip else None,
        )
        result.append(
            TickTextItem(
                data_value=tick.data_value,
                coordinate=tick.coordinate,
                is_visible=tick.is_visible,
                optional=tick.optional,
                text_block=block,
                width=info.width,
                line_idx=info.line_idx,
                need_tooltip=info.need_tooltip,
            )
        )
    return result


class HorizontalAxisLayout:
    """Places tick labels, title, legend and color bar of a horizontal axis.

    Args:
        axis: Text settings of the axis.
        dilution: Dilution settings.
        geometry: Chart area and container sizes.
        measurer: Text measurement collaborator.
    """

    def __init__(
        self,
        axis: AxisTextSettings,
        dilution: DilutionSettings,
        geometry: ChartGeometry,
        measurer: TextMeasurer,
    ) -> None:
        self.axis = axis
        self.dilution = dilution
        self.geometry = geometry
        self.measurer = measurer
        self.style = TextStyle(axis.font_size, axis.font_name)
        self.title_style = TextStyle(axis.title_font_size, axis.font_name)

    def layout(self, ticks: list[TickTextItem]) -> AxisTextLayout:
        if self.axis.text_position == "out":
            return self.outside(ticks)
        result = self.inside(ticks)
        if self.axis.text_position == "none":
            result.ticks = []
            result.outcome = LayoutOutcome.OK
        return result

    def _diluter(self, ticks: list[TickTextItem]) -> TickDiluter:
        return TickDiluter(
            total_length=self.geometry.container_width,
            ticks=ticks,
            measurer=self.measurer,
            first_tick_idx=self.dilution.first_visible_text,
            max_lines=self.dilution.max_text_lines,
            max_alternation=self.dilution.max_alternation,
            force_skip=self.dilution.show_text_every,
            skip_mode=self.dilution.show_text_every_mode,
            min_spacing=self.dilution.min_text_spacing,
            allow_cutoff=self.dilution.allow_container_boundary_text_cutoff,
        )

    def _gap(self, font_size: float, divisor: float) -> float:
        return max(MIN_GAP, js_round(font_size / divisor))

    def _items(
        self,
        tick_items: list[RealEstateItem],
        title_lines: list[str],
    ) -> list[RealEstateItem]:
        """Real-estate items in priority order around the given tick rows."""
        gap = MIN_GAP
        title_size = self.title_style.font_size
        items = [RealEstateItem(gap, extra=[math.inf], key=SPACE)]
        if title_lines:
            items.append(RealEstateItem(title_size + gap, extra=[math.inf], key=TITLE))
        if self.axis.legend_font_size:
            items.append(RealEstateItem(self.axis.legend_font_size + gap, extra=[math.inf], key=LEGEND))
        if self.axis.color_bar_height:
            items.append(RealEstateItem(self.axis.color_bar_height + gap, extra=[math.inf], key=COLOR_BAR))
        items.extend(tick_items)
        gap_between_title_lines = self._gap(title_size, 2 * GOLDEN_RATIO)
        for _ in title_lines[1:]:
            items.append(RealEstateItem(title_size + gap, extra=[gap_between_title_lines - gap], key=TITLE))
        return items

    def _horizontal_tick_items(self, num_lines: float) -> list[RealEstateItem]:
        gap = MIN_GAP
        font_size = self.style.font_size
        gap_above = self._gap(font_size, GOLDEN_RATIO)
        gap_between = self._gap(font_size, 2 * GOLDEN_RATIO)
        items = []
        for index in range(int(num_lines)):
            extra = gap_above if index == 0 else gap_between
            items.append(RealEstateItem(font_size + gap, extra=[extra - gap], key=TICKS))
        return items

    def outside(self, ticks: list[TickTextItem]) -> AxisTextLayout:
        """Labels below the chart area, horizontal or slanted."""
        dilution = self.dilution
        geometry = self.geometry
        font_size = self.style.font_size
        gap = MIN_GAP
        gap_above = self._gap(font_size, GOLDEN_RATIO)
        skip_threshold = dilution.show_text_every or 1
        auto = dilution.slanted_text is None

        diluter = self._diluter(ticks)
        optimistic: Arrangement | None = None
        if auto:
            if len(ticks) * font_size / (max(1, dilution.max_alternation) * skip_threshold) <= geometry.container_width:
                optimistic = diluter.optimistic()
                slanted = optimistic.skip > skip_threshold or optimistic.num_lines == 0
            else:
                slanted = True
        else:
            slanted = dilution.slanted_text
            if not slanted:
                optimistic = diluter.optimistic()

        slanted_ticks = None
        if slanted or auto:
            slanted_ticks = SlantedTicks(ticks, self.style, self.measurer, dilution, geometry.container_width)

        title_measure = width_function(self.measurer, self.title_style)
        title_lines = calc_text_layout(title_measure, self.axis.title, geometry.chart_width, math.inf).lines

        if slanted:
            tick_items = [slanted_ticks.real_estate_item(gap, gap_above)]
        else:
            tick_items = self._horizontal_tick_items(optimistic.num_lines)
        budget = geometry.container_height - geometry.chart_bottom
        allocation = distribute_real_estate_with_keys(self._items(tick_items, title_lines), budget)
        tick_sizes = allocation.get(TICKS, [])

        final: Arrangement | None = None
        if not slanted:
            final = diluter.final(optimistic, len(tick_sizes), 0)
            if auto and final.skip > skip_threshold:
                logger.debug(f"Horizontal labels need skip {final.skip}; replanning with slanted labels")
                slanted = True
                tick_items = [slanted_ticks.real_estate_item(gap, gap_above)]
                allocation = distribute_real_estate_with_keys(self._items(tick_items, title_lines), budget)
                tick_sizes = allocation.get(TICKS, [])

        result = AxisTextLayout(slanted=slanted)
        offset = geometry.chart_bottom
        if slanted:
            space = tick_sizes[0] if tick_sizes else 0
            height = min(space - gap, slanted_ticks.max_height)
            if tick_sizes:
                result.ticks = slanted_ticks.layout(height, offset + space - height)
                if not slanted_ticks.acceptable(result.ticks, geometry.chart_width):
                    result.outcome = LayoutOutcome.TRUNCATION_UNRESOLVED
            result.skip = slanted_ticks.skip
            offset += space
        else:
            cumulative = list(accumulate(tick_sizes))
            result.ticks = _horizontal_items(final.ticks, cumulative, offset, TextAlign.END)
            result.skip = final.skip
            result.alternation = final.alternation
            if not final.acceptable:
                result.outcome = LayoutOutcome.TRUNCATION_UNRESOLVED
            offset += cumulative[-1] if cumulative else 0
        if ticks and not tick_sizes:
            result.outcome = LayoutOutcome.TRUNCATION_UNRESOLVED

        title_sizes = allocation.get(TITLE, [])
        if title_sizes:
            title_layout = calc_text_layout(title_measure, self.axis.title, geometry.chart_width, len(title_sizes))
            lines = []
            for size, text in zip(title_sizes, title_layout.lines):
                offset += size
                lines.append(
                    TextLine(x=geometry.chart_left + geometry.chart_width / 2, y=offset, text=text, length=geometry.chart_width)
                )
            result.title = TextBlock(
                text=self.axis.title,
                style=self.title_style,
                lines=lines,
                paral_align=TextAlign.CENTER,
                perpen_align=TextAlign.END,
                tooltip=self.axis.title if title_layout.need_tooltip else None,
            )

        legend_sizes = allocation.get(LEGEND, [])
        if legend_sizes:
            offset += legend_sizes[0]
            result.legend_area = Box(
                offset - self.axis.legend_font_size, geometry.chart_right, offset, geometry.chart_left
            )
        color_bar_sizes = allocation.get(COLOR_BAR, [])
        if color_bar_sizes:
            offset += color_bar_sizes[0]
            result.color_bar_area = Box(
                offset - self.axis.color_bar_height, geometry.chart_right, offset, geometry.chart_left
            )

        logger.debug(
            f"Outside layout: {len(result.ticks)} labels, slanted={result.slanted}, skip={result.skip}, "
            f"alternation={result.alternation}, outcome={result.outcome.value}"
        )
        return result

    def inside(self, ticks: list[TickTextItem]) -> AxisTextLayout:
        """Labels drawn inside the chart area, above its bottom edge."""
        geometry = self.geometry
        font_size = self.style.font_size
        gap = MIN_GAP
        diluter = self._diluter(ticks)
        optimistic = diluter.optimistic()

        gap_value = self._gap(font_size, 2 * GOLDEN_RATIO)
        gap_category = self._gap(font_size, GOLDEN_RATIO)
        gap_between = gap_value
        if self.axis.axis_type == "value":
            gap_below = gap_value
            if self.axis.in_text_position == "high":
                paral_align, x_offset = TextAlign.START, gap_value
            else:
                paral_align, x_offset = TextAlign.END, -gap_value
        else:
            gap_below = gap_category
            paral_align, x_offset = TextAlign.CENTER, 0

        items = [RealEstateItem(gap, extra=[math.inf], key=SPACE)]
        for index in range(int(optimistic.num_lines)):
            extra = gap_below if index == 0 else gap_between
            items.append(RealEstateItem(font_size + gap, extra=[extra - gap], key=TICKS))
        allocation = distribute_real_estate_with_keys(items, math.floor(geometry.chart_height / 2))
        tick_sizes = allocation.get(TICKS, [])

        final = diluter.final(optimistic, len(tick_sizes), 0.5)
        cumulative = list(accumulate(tick_sizes))
        result = AxisTextLayout(skip=final.skip, alternation=final.alternation)
        result.ticks = _horizontal_items(
            final.ticks,
            cumulative,
            geometry.chart_bottom,
            TextAlign.START,
            direction=-1,
            paral_align=paral_align,
            x_offset=x_offset,
        )
        if not final.acceptable or (ticks and not tick_sizes):
            result.outcome = LayoutOutcome.TRUNCATION_UNRESOLVED
        logger.debug(f"Inside layout: {len(result.ticks)} labels, skip={result.skip}, outcome={result.outcome.value}")
        return result
