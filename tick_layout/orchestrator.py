"""
Axis tick orchestration.

Runs the gridline search for a view window, lays out the labels of each
candidate batch and keeps the first batch that fits without a hard label
collision. When no batch of a unit fits, the next coarser unit is tried a
bounded number of times; when everything fails the axis is returned without
labels instead of raising.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime

from tick_core.config import AxisLayoutConfig, default_layout_config
from tick_core.duration import datetime_to_millis, millis_to_datetime
from tick_core.formatting import format_date, resolve_pattern
from tick_core.time_units import TimeUnit, coarser_unit

from .axis_layout import HorizontalAxisLayout
from .collision import resolve_collisions
from .decorations import AxisDecoration, TimeAxisDecorationSupplier
from .gridlines import DateTickDefiner
from .mappers import LinearMapper, calc_reverse_position
from .measure import FixedFontMeasurer, TextMeasurer
from .model import (
    AxisLayoutResult,
    ChartGeometry,
    GridlineCandidate,
    LayoutOutcome,
    MeasuredText,
    TextStyle,
    TickBatch,
    TickSpanType,
    ViewWindow,
)

logger = logging.getLogger("tickaxis")


def granularity_time_unit(millis: float) -> TimeUnit:
    """Coarsest named unit not longer than ``millis``; milliseconds when unknown."""
    result = TimeUnit.MILLISECOND
    for unit in TimeUnit:
        if unit.millis <= millis:
            result = unit
    return result


def reverse_batch(batch: TickBatch, screen_start: float, screen_end: float) -> TickBatch:
    """Mirror every coordinate of ``batch``; data values and order are kept."""

    def flip(coordinate: float) -> float:
        return round(calc_reverse_position(coordinate, screen_start, screen_end), 2)

    gridlines = [replace(gridline, coordinate=flip(gridline.coordinate)) for gridline in batch.gridlines]
    ticks = []
    for tick in batch.ticks:
        block = tick.text_block.clone() if tick.text_block is not None else None
        if block is not None:
            for line in block.lines:
                line.x = flip(line.x)
        coordinate = flip(tick.coordinate) if tick.coordinate is not None else None
        ticks.append(replace(tick, coordinate=coordinate, text_block=block))
    return TickBatch(gridlines, ticks, batch.multiple, batch.label_format)


class AxisTickOrchestrator:
    """Chooses gridlines and lays out labels for a horizontal time axis.

    Args:
        config: Validated layout configuration; built-in defaults when omitted.
        measurer: Text measurement collaborator; a fixed-width measurer when omitted.
        font: Tick label style; taken from the axis settings when omitted.
        brush: Opaque drawing reference attached to major gridlines.
        minor_brush: Opaque drawing reference attached to minor gridlines.
    """

    def __init__(
        self,
        config: AxisLayoutConfig | None = None,
        measurer: TextMeasurer | None = None,
        font: TextStyle | None = None,
        brush: object | None = None,
        minor_brush: object | None = None,
    ) -> None:
        self.config = config or default_layout_config()
        self.measurer = measurer or FixedFontMeasurer()
        self.style = font or TextStyle(self.config.axis.font_size, self.config.axis.font_name)
        self.brush = brush
        self.minor_brush = minor_brush

    def geometry(self, screen_start: float, screen_end: float) -> ChartGeometry:
        return ChartGeometry.for_axis(
            screen_start,
            screen_end,
            chart_height=self.config.axis.chart_height,
            container_height=self.config.axis.container_height,
        )

    def definer(self, mapper: LinearMapper) -> DateTickDefiner:
        return DateTickDefiner(
            self.config.gridlines,
            self.config.units,
            mapper,
            self.measurer,
            self.style,
            brush=self.brush,
            minor_brush=self.minor_brush,
        )

    def layout(
        self,
        window: ViewWindow,
        screen_start: float,
        screen_end: float,
        reversed: bool = False,
        explicit_ticks: Sequence[datetime | float] | None = None,
    ) -> AxisLayoutResult:
        """Gridlines and positioned labels for ``window`` drawn between two pixel positions.

        Args:
            window: View window in epoch milliseconds.
            screen_start: Pixel position of the window start on a forward axis.
            screen_end: Pixel position of the window end on a forward axis.
            reversed: Draw the window from ``screen_end`` back to ``screen_start``.
            explicit_ticks: Dates (or epoch milliseconds) to label instead of searching.

        Returns:
            The accepted layout, or a label-free result carrying the last infeasible outcome.
        """
        mapper = LinearMapper(window.min_value, window.max_value, screen_start, screen_end)
        definer = self.definer(mapper)
        geometry = self.geometry(screen_start, screen_end)
        alignment = TickSpanType.BELOW if reversed else TickSpanType.SPAN_LEFT
        unit = definer.analyze(window)

        if explicit_ticks is not None:
            batch = self.explicit_batch(definer, unit, explicit_ticks)
            if not batch.gridlines:
                return self.exhausted(AxisLayoutResult(LayoutOutcome.EMPTY_RESULT, unit=unit))
            if reversed:
                batch = reverse_batch(batch, screen_start, screen_end)
            result = self.try_batch(batch, unit, geometry)
            result.attempts = 1
            return result if result.ok else self.exhausted(result)

        retry = self.config.retry
        attempts = 0
        last = AxisLayoutResult(LayoutOutcome.EMPTY_RESULT, unit=unit)
        for step in range(retry.max_unit_steps + 1):
            examined = 0
            for batch in definer.generate(window, unit, alignment):
                if attempts >= retry.max_candidates:
                    break
                attempts += 1
                examined += 1
                if reversed:
                    batch = reverse_batch(batch, screen_start, screen_end)
                result = self.try_batch(batch, unit, geometry)
                result.attempts = attempts
                if result.ok:
                    logger.debug(
                        f"Accepted {result.multiple} {unit} with format '{batch.label_format}' "
                        f"after {attempts} candidate(s)"
                    )
                    return result
                last = result
            if not examined:
                last = replace(last, outcome=LayoutOutcome.EMPTY_RESULT, unit=unit, attempts=attempts)
            if attempts >= retry.max_candidates:
                logger.debug(f"Candidate limit of {retry.max_candidates} reached")
                break
            coarser = coarser_unit(unit)
            if coarser is None or step == retry.max_unit_steps:
                break
            logger.debug(f"No layout fits {unit} ({last.outcome.value}); retrying with {coarser}")
            unit = coarser
        return self.exhausted(last)

    def explicit_batch(
        self, definer: DateTickDefiner, unit: str, values: Sequence[datetime | float]
    ) -> TickBatch:
        """Optional labels at user-supplied values, formatted with the unit's first pattern."""
        pattern = resolve_pattern(self.config.units.major[unit].formats[0])
        dates = sorted(value if isinstance(value, datetime) else millis_to_datetime(value) for value in values)
        gridlines: list[GridlineCandidate] = []
        texts: list[MeasuredText] = []
        for date in dates:
            position = definer.position(date)
            if position is None:
                continue
            gridlines.append(GridlineCandidate(data_value=date, coordinate=position))
            text = format_date(date, pattern)
            texts.append(MeasuredText(text, self.measurer.width(text, self.style)))
        ticks = definer.tick_text(self.style, TickSpanType.BELOW, gridlines, texts)
        for tick in ticks:
            tick.optional = True
        return TickBatch(gridlines, ticks)

    def try_batch(self, batch: TickBatch, unit: str, geometry: ChartGeometry) -> AxisLayoutResult:
        """Lay out one candidate batch and run the collision pass over it."""
        axis = self.config.axis
        text = HorizontalAxisLayout(axis, self.config.dilution, geometry, self.measurer).layout(batch.ticks)
        result = AxisLayoutResult(
            outcome=text.outcome,
            unit=unit,
            multiple=batch.multiple,
            gridlines=batch.gridlines,
            ticks=text.ticks,
            title=text.title,
            legend_area=text.legend_area,
            color_bar_area=text.color_bar_area,
            skip=text.skip,
            alternation=text.alternation,
            slanted=text.slanted,
        )
        if result.outcome == LayoutOutcome.OK and not resolve_collisions(result.ticks, axis.text_position):
            result.outcome = LayoutOutcome.COLLISION_FATAL
        return result

    def exhausted(self, last: AxisLayoutResult) -> AxisLayoutResult:
        for tick in last.ticks:
            tick.is_visible = False
        logger.warning(
            f"No tick label layout fits the axis ({last.outcome.value}); drawing it without labels"
        )
        return last

    def decorate(
        self,
        window: ViewWindow,
        screen_start: float,
        screen_end: float,
        reversed: bool = False,
        granularity: TimeUnit | None = None,
    ) -> list[AxisDecoration]:
        """Start-of-period decorations for ``window`` instead of searched gridlines."""
        mapper = LinearMapper(window.min_value, window.max_value, screen_start, screen_end, reversed)
        granularity = granularity or granularity_time_unit(window.data_granularity)
        supplier = TimeAxisDecorationSupplier(
            mapper, granularity, self.measurer, self.config.decorations, self.style
        )
        return supplier.get_decorations()


def layout_axis(
    start: datetime,
    end: datetime,
    screen_start: float,
    screen_end: float,
    reversed: bool = False,
    config: AxisLayoutConfig | None = None,
    measurer: TextMeasurer | None = None,
) -> AxisLayoutResult:
    """Convenience wrapper taking dates instead of a :class:`ViewWindow`."""
    window = ViewWindow(datetime_to_millis(start), datetime_to_millis(end))
    return AxisTickOrchestrator(config, measurer).layout(window, screen_start, screen_end, reversed)
