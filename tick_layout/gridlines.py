"""
Gridline candidate search for date axes.

For a major unit the search walks the configured multiples from the densest
to the sparsest, drops multiples whose gridlines come closer than the minimum
line distance, and yields one batch per label format for every surviving
multiple. Which batch is acceptable is decided downstream by the axis layout
and the collision pass, never here.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator, Sequence
from datetime import datetime

from tick_core.config import GridlineSettings, UnitFormats
from tick_core.constants import DURATION_COEFFICIENTS, TIME_UNITS
from tick_core.date_range import DateRangeEnumerator
from tick_core.duration import (
    ceil_date,
    datetime_to_millis,
    floor_date,
    floor_to_monday,
    get_unit,
    js_round,
    millis_to_datetime,
    multiply_duration,
    round_millis_according_to_table,
    unit_index,
)
from tick_core.formatting import format_date, resolve_pattern
from tick_core.time_units import finer_unit, unit_vector

from .measure import TextMeasurer
from .model import (
    GridlineCandidate,
    GridlinesBatch,
    GridlinesConfig,
    MeasuredText,
    TextAlign,
    TextBlock,
    TextLine,
    TextStyle,
    TickBatch,
    TickSpanType,
    TickTextItem,
    ViewWindow,
)

logger = logging.getLogger("tickaxis")

Mapper = Callable[[float], "float | None"]


def granularity_unit_index(data_granularity: float) -> int:
    """Coarsest duration slot that still fits inside the data granularity."""
    index = 0
    for position, coefficient in enumerate(DURATION_COEFFICIENTS):
        if data_granularity >= coefficient:
            index = position
    return index


def span_paral_align(span: TickSpanType) -> TextAlign:
    if span == TickSpanType.SPAN_LEFT:
        return TextAlign.START
    if span == TickSpanType.SPAN_RIGHT:
        return TextAlign.END
    return TextAlign.CENTER


class DateTickDefiner:
    """Finds gridlines and their labels for a date axis.

    Args:
        settings: Gridline tunables.
        units: Major and minor formats/multiples per duration slot.
        mapper: Maps epoch milliseconds to a pixel coordinate, ``None`` if unmappable.
        measurer: Text measurement collaborator.
        style: Style of major labels.
        minor_style: Style of minor labels, defaults to ``style``.
        brush: Drawing reference carried by major gridlines and notches.
        minor_brush: Drawing reference carried by minor gridlines, defaults to ``brush``.
    """

    def __init__(
        self,
        settings: GridlineSettings,
        units: UnitFormats,
        mapper: Mapper,
        measurer: TextMeasurer,
        style: TextStyle,
        minor_style: TextStyle | None = None,
        brush: object | None = None,
        minor_brush: object | None = None,
    ) -> None:
        self.settings = settings
        self.units = units
        self.mapper = mapper
        self.measurer = measurer
        self.style = style
        self.minor_style = minor_style or style
        self.brush = brush
        self.minor_brush = brush if minor_brush is None else minor_brush

    def analyze(self, window: ViewWindow) -> str:
        """Pick the major duration slot for the window."""
        if self.settings.major_unit:
            return self.settings.major_unit
        duration = round_millis_according_to_table(
            (window.max_value - window.min_value) / self.settings.unit_threshold,
            self.settings.round_durations,
            self.settings.repeating_intervals,
        )
        index = max(unit_index(get_unit(duration)), granularity_unit_index(window.data_granularity))
        return TIME_UNITS[index]

    def major_config(self, window: ViewWindow, unit_name: str) -> GridlinesConfig:
        unit = self.units.major[unit_name]
        return GridlinesConfig(
            min_value=window.min_value,
            max_value=window.max_value,
            unit_name=unit_name,
            unit_index=TIME_UNITS.index(unit_name),
            formats=unit.formats,
            multiples=unit.intervals,
            min_line_distance=self.settings.min_strong_line_distance,
            min_text_distance=self.settings.min_major_text_distance,
            style=self.style,
            brush=self.brush,
        )

    def minor_config(self, window: ViewWindow, unit_name: str, avoid: Sequence[GridlineCandidate]) -> GridlinesConfig:
        unit = self.units.minor[unit_name]
        return GridlinesConfig(
            min_value=window.min_value,
            max_value=window.max_value,
            unit_name=unit_name,
            unit_index=TIME_UNITS.index(unit_name),
            formats=unit.formats,
            multiples=unit.intervals,
            min_line_distance=self.settings.min_weak_line_distance,
            min_text_distance=self.settings.min_minor_text_distance,
            avoid=tuple(gridline.coordinate for gridline in avoid),
            min_cross_distance=self.settings.min_strong_to_weak_line_distance,
            style=self.minor_style,
            brush=self.minor_brush,
        )

    def _uses_minor(self, window: ViewWindow, config: GridlinesConfig, batch: GridlinesBatch) -> bool:
        if not (self.settings.allow_minor and batch.multiple == 1 and config.unit_index > 0):
            return False
        return config.unit_index - 1 >= granularity_unit_index(window.data_granularity)

    def generate(
        self,
        window: ViewWindow,
        unit_name: str | None = None,
        alignment: TickSpanType = TickSpanType.SPAN_LEFT,
    ) -> Iterator[TickBatch]:
        """Yield gridline and label candidates, most detailed first.

        Args:
            window: View window in epoch milliseconds.
            unit_name: Major duration slot; analyzed from the window when omitted.
            alignment: Label placement for multiples of one.
        """
        unit_name = unit_name or self.analyze(window)
        major = self.major_config(window, unit_name)

        for batch in self.compute_gridlines(major):
            if not batch.gridlines:
                continue

            if not self._uses_minor(window, major, batch):
                span = TickSpanType.BELOW if batch.multiple != 1 else alignment
                ticks = self.tick_text(self.style, span, batch.gridlines, batch.texts)
                gridlines = list(batch.gridlines)
                if batch.multiple > 1:
                    gridlines.extend(self.notches(window, major, batch))
                yield TickBatch(gridlines, ticks, batch.multiple, batch.label_format)
                continue

            minor = self.minor_config(window, finer_unit(unit_name), batch.gridlines)
            for minor_batch in self.compute_gridlines(minor):
                if not minor_batch.gridlines:
                    continue
                major_ticks = self.tick_text(self.style, alignment, batch.gridlines, batch.texts)
                minor_ticks = self.tick_text(self.minor_style, alignment, minor_batch.gridlines, minor_batch.texts)
                for tick in minor_ticks:
                    tick.optional = True
                yield TickBatch(
                    minor_batch.gridlines + batch.gridlines,
                    major_ticks + minor_ticks,
                    batch.multiple,
                    batch.label_format,
                )
            yield self._major_only(batch)

    def _major_only(self, batch: GridlinesBatch) -> TickBatch:
        ticks = self.tick_text(self.style, TickSpanType.SPAN_CENTER, batch.gridlines, batch.texts)
        return TickBatch(list(batch.gridlines), ticks, batch.multiple, batch.label_format)

    def position(self, date: datetime) -> float | None:
        return self.mapper(datetime_to_millis(date) - self.settings.time_offset)

    @staticmethod
    def first_gridline(start: datetime, config: GridlinesConfig, multiple: int) -> datetime | None:
        """Round date to start enumerating from, ``None`` when none is representable.

        The floor of ``start`` is used when it exists. Floors that would fall
        before year 1 move up to the first round date after ``start``.
        """
        duration = multiply_duration(unit_vector(config.unit_name), multiple)
        try:
            first = floor_date(start, duration)
        except ValueError:
            try:
                return ceil_date(start, duration)
            except ValueError:
                return None
        if config.unit_name == "days":
            first = floor_to_monday(first)
        return first

    def compute_gridlines(self, config: GridlinesConfig) -> Iterator[GridlinesBatch]:
        """Yield label batches for every multiple whose gridlines are spaced enough."""
        offset = self.settings.time_offset
        start = millis_to_datetime(config.min_value + offset)
        end = millis_to_datetime(config.max_value + offset)

        for multiple in config.multiples:
            first = self.first_gridline(start, config, multiple)
            if first is None:
                logger.debug(f"Skipped {multiple} {config.unit_name}: no round date within the calendar range")
                continue
            dates = DateRangeEnumerator(first, end, config.unit_index, multiple, include_end=True)

            gridlines: list[GridlineCandidate] = []
            spaced = True
            avoid_idx = 0
            for date in dates:
                if date < start:
                    continue
                pos = self.position(date)
                if pos is None:
                    continue

                next_date = dates.peek()
                if next_date is not None:
                    next_pos = self.position(next_date)
                    if next_pos is not None and abs(next_pos - pos) < config.min_line_distance:
                        spaced = False
                        break

                # Single forward cursor over the sorted avoidance set.
                too_close = False
                while avoid_idx < len(config.avoid):
                    avoid = config.avoid[avoid_idx]
                    if abs(avoid - pos) < config.min_cross_distance:
                        too_close = True
                        break
                    if avoid > pos:
                        avoid_idx = max(0, avoid_idx - 1)
                        break
                    avoid_idx += 1
                if too_close:
                    continue

                gridlines.append(GridlineCandidate(data_value=date, coordinate=pos, brush=config.brush))

            if not spaced:
                logger.debug(f"Rejected {multiple} {config.unit_name}: gridlines closer than {config.min_line_distance}px")
                continue

            min_space = math.inf
            for left, right in zip(gridlines, gridlines[1:]):
                min_space = min(min_space, right.coordinate - left.coordinate)

            for pattern, texts in self.format_ticks(gridlines, config):
                yield GridlinesBatch(gridlines, texts, multiple, min_space, pattern)

    def format_ticks(
        self, gridlines: Sequence[GridlineCandidate], config: GridlinesConfig
    ) -> Iterator[tuple[str, list[MeasuredText]]]:
        """Yield ``(pattern, texts)`` for each format alternative; an explicit format short-circuits."""
        patterns = (self.settings.format,) if self.settings.format else config.formats
        style = config.style or self.style
        for pattern in patterns:
            resolved = resolve_pattern(pattern)
            texts = []
            for gridline in gridlines:
                text = format_date(gridline.data_value, resolved)
                texts.append(MeasuredText(text, self.measurer.width(text, style)))
            yield pattern, texts

    def notches(self, window: ViewWindow, config: GridlinesConfig, batch: GridlinesBatch) -> list[GridlineCandidate]:
        """Unlabeled marks at the unit boundaries a multiple > 1 skips over."""
        if batch.min_space / batch.multiple < self.settings.min_notch_distance:
            return []
        offset = self.settings.time_offset
        start = millis_to_datetime(window.min_value + offset)
        end = millis_to_datetime(window.max_value + offset)
        labeled = {gridline.data_value for gridline in batch.gridlines}

        notches = []
        first = floor_date(start, unit_vector(config.unit_name))
        for date in DateRangeEnumerator(first, end, config.unit_index, 1, include_end=True):
            if date < start or date in labeled:
                continue
            pos = self.position(date)
            if pos is None:
                continue
            notches.append(
                GridlineCandidate(
                    data_value=date,
                    coordinate=pos,
                    is_notch=True,
                    length=self.settings.notch_length,
                    brush=config.brush,
                )
            )
        return notches

    def tick_text(
        self,
        style: TextStyle,
        span: TickSpanType,
        gridlines: Sequence[GridlineCandidate],
        texts: Sequence[MeasuredText],
    ) -> list[TickTextItem]:
        """Position one label per gridline according to ``span``."""
        paral_align = span_paral_align(span)
        distance = gridlines[1].coordinate - gridlines[0].coordinate if len(gridlines) > 1 else 0

        ticks = []
        for index, (gridline, measured) in enumerate(zip(gridlines, texts)):
            coordinate = gridline.coordinate
            if span == TickSpanType.SPAN_CENTER:
                if index + 1 < len(gridlines):
                    coordinate = (coordinate + gridlines[index + 1].coordinate) / 2
                else:
                    coordinate = coordinate + distance / 2
            coordinate = js_round(coordinate)
            block = TextBlock(
                text=measured.text,
                style=style,
                lines=[TextLine(x=coordinate, y=0, text=measured.text, length=measured.size)],
                paral_align=paral_align,
                perpen_align=TextAlign.END,
            )
            ticks.append(
                TickTextItem(
                    data_value=gridline.data_value,
                    coordinate=coordinate,
                    text_block=block,
                    width=measured.size,
                )
            )
        return ticks
