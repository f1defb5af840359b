"""
Start-of-period decorations for time axes.

A simpler labelling path than the gridline search: lines fall on period
boundaries (days, weeks, months, quarters, years and multiples of them),
ticks on every period of the label unit, and labels either sit on the lines
or, when one period is labelled at a time, centred between them. Strategies
are tried from the finest to the coarsest and the first whose labels do not
collide wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from tick_core.config import DecorationSettings
from tick_core.constants import DEFAULT_DECORATION_SETTINGS
from tick_core.duration import js_round
from tick_core.formatting import TimeFormatter, format_range
from tick_core.sequences import NumberSequence, create_time_sequence
from tick_core.time_units import TimeUnit

from .mappers import LinearMapper
from .measure import TextMeasurer
from .model import TextStyle

logger = logging.getLogger("tickaxis")


class Alignment(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass
class AxisDecoration:
    value: float | None
    screen_position: float
    has_line: bool = False
    has_tick: bool = False
    is_tick_heavy: bool = False
    label: str | None = None
    alignment: Alignment = Alignment.CENTER

    @property
    def position(self) -> int:
        return js_round(self.screen_position)

    @classmethod
    def labeled_line_with_heavy_tick(cls, value: float, position: float, label: str) -> AxisDecoration:
        return cls(value, position, True, True, True, label)

    @classmethod
    def make_label(cls, value: float | None, position: float, label: str) -> AxisDecoration:
        return cls(value, position, False, False, False, label)

    @classmethod
    def left_aligned_label(cls, value: float, position: float, label: str) -> AxisDecoration:
        return cls(value, position, False, False, False, label, Alignment.LEFT)

    @classmethod
    def left_aligned_label_with_line_and_tick(cls, value: float, position: float, label: str) -> AxisDecoration:
        return cls(value, position, True, True, False, label, Alignment.LEFT)

    @classmethod
    def tick(cls, value: float, position: float) -> AxisDecoration:
        return cls(value, position, False, True, False)

    @classmethod
    def line_with_tick(cls, value: float, position: float) -> AxisDecoration:
        return cls(value, position, True, True, False)

    @classmethod
    def line_with_heavy_tick(cls, value: float, position: float) -> AxisDecoration:
        return cls(value, position, True, True, True)


def default_decoration_settings() -> DecorationSettings:
    return DecorationSettings(**DEFAULT_DECORATION_SETTINGS)


class TimeAxisStrategy:
    """Decorations with one label every ``units_per_label`` periods of ``label_granularity``.

    Args:
        data_granularity: Smallest unit the data resolves.
        label_granularity: Period between ticks.
        units_per_label: Periods between labelled lines.
        measurer: Text measurement collaborator.
        style: Label style.
        mapper: Data to screen mapping; also supplies the data and screen range.
        settings: Label distance and collision thresholds.
    """

    def __init__(
        self,
        data_granularity: TimeUnit,
        label_granularity: TimeUnit,
        units_per_label: int,
        measurer: TextMeasurer,
        style: TextStyle,
        mapper: LinearMapper,
        settings: DecorationSettings,
    ) -> None:
        self.data_granularity = data_granularity
        self.label_granularity = label_granularity
        self.units_per_label = units_per_label
        self.measurer = measurer
        self.style = style
        self.mapper = mapper
        self.settings = settings
        self.formatter = TimeFormatter(label_granularity)

    @property
    def label_duration(self) -> float:
        return self.label_granularity.millis

    def _width(self, label: str) -> float:
        return self.measurer.width(label, self.style)

    def single_label(self, value: float) -> list[AxisDecoration]:
        position = abs(self.mapper.screen_start - self.mapper.screen_end) / 2
        return [AxisDecoration.make_label(value, position, self.formatter.format(value))]

    def attempt(self) -> list[AxisDecoration] | None:
        """Decorations for the mapper's range, or ``None`` when two labels collide."""
        first_time = self.mapper.data_min
        last_time = self.mapper.data_max

        self.formatter.set_time_unit(self.data_granularity)
        if first_time == last_time:
            return self.single_label(first_time)
        last_decoration = AxisDecoration.left_aligned_label_with_line_and_tick(
            last_time, self.mapper.screen_end, self.formatter.format(last_time)
        )
        self.formatter.set_time_unit(self.label_granularity)

        label_intervals = self.units_per_label == 1 and self.label_duration > self.data_granularity.millis
        line_sequence = create_time_sequence(self.label_duration * self.units_per_label)
        tick_sequence = create_time_sequence(self.label_duration)

        decorations: list[AxisDecoration] = []
        previous_value = None
        next_line_value = line_sequence.ceil(first_time)
        value = tick_sequence.ceil(first_time)
        while value <= last_time:
            position = self.mapper.get_screen_value(value)
            if value == next_line_value:
                next_line_value = line_sequence.next()
                if self.two_labels_collide(previous_value, value):
                    return None
                if label_intervals:
                    if previous_value is not None:
                        decorations.append(self.label_between(previous_value, value))
                    decorations.append(AxisDecoration.line_with_heavy_tick(value, position))
                else:
                    decorations.append(
                        AxisDecoration.labeled_line_with_heavy_tick(value, position, self.formatter.format(value))
                    )
                previous_value = value
            else:
                decorations.append(AxisDecoration.tick(value, position))
            value = tick_sequence.next()

        if label_intervals and last_time < value:
            self.add_label_for_incomplete_interval(decorations, tick_sequence, last_time)

        if self.settings.include_last:
            self.hide_last_label_if_overlapping(last_decoration, decorations)
            decorations.append(last_decoration)

        if sum(1 for decoration in decorations if decoration.label is not None) < 2:
            return self.summary_label()

        if self.ticks_collide(decorations):
            return [decoration for decoration in decorations if not decoration.has_tick or decoration.has_line]
        return decorations

    def add_label_for_incomplete_interval(
        self, decorations: list[AxisDecoration], tick_sequence: NumberSequence, max_value: float
    ) -> None:
        label = self.formatter.format(max_value)
        width = self._width(label)
        next_time = tick_sequence.value()
        previous_time = tick_sequence.previous()
        middle = (self.mapper.get_screen_value(previous_time) + self.mapper.get_screen_value(next_time)) / 2
        if self.mapper.get_screen_value(max_value) - middle > width / 2:
            decorations.append(AxisDecoration.make_label(max_value, middle, label))

    def hide_last_label_if_overlapping(self, last: AxisDecoration, decorations: list[AxisDecoration]) -> None:
        previous = next((decoration for decoration in reversed(decorations) if decoration.label is not None), None)
        if previous is None:
            return
        distance = abs(previous.position - last.position) - (self._width(previous.label) + self._width(last.label)) / 2
        if distance < self.settings.min_label_distance:
            previous.label = None

    def summary_label(self) -> list[AxisDecoration]:
        """A single "start-end" label, or nothing when even that does not fit."""
        label = format_range(
            self.formatter.format(self.mapper.data_min), self.formatter.format(self.mapper.data_max)
        )
        chart_width = abs(self.mapper.screen_start - self.mapper.screen_end)
        if self._width(label) > chart_width + self.settings.summary_overflow:
            return []
        midpoint = (self.mapper.screen_start + self.mapper.screen_end) / 2
        return [AxisDecoration.make_label(None, midpoint, label)]

    def two_labels_collide(self, first: float | None, second: float) -> bool:
        if first is None:
            return False
        size = self._width(self.formatter.format(first)) + self._width(self.formatter.format(second))
        distance = abs(self.mapper.get_screen_value(first) - self.mapper.get_screen_value(second)) - size / 2
        return distance < self.settings.min_label_distance

    def ticks_collide(self, decorations: list[AxisDecoration]) -> bool:
        for previous, decoration in zip(decorations, decorations[1:]):
            if (
                abs(decoration.position - previous.position) < self.settings.tick_collision_distance
                and previous.value != decoration.value
            ):
                return True
        return False

    def label_between(self, first: float, second: float) -> AxisDecoration:
        position = (self.mapper.get_screen_value(first) + self.mapper.get_screen_value(second)) / 2
        return AxisDecoration.make_label(self.mapper.get_data_value(position), position, self.formatter.format(first))


STRATEGIES = (
    (TimeUnit.DAY, 1),
    (TimeUnit.DAY, 7),
    (TimeUnit.MONTH, 1),
    (TimeUnit.MONTH, 2),
    (TimeUnit.MONTH, 3),
    (TimeUnit.QUARTER, 1),
    (TimeUnit.MONTH, 6),
    (TimeUnit.YEAR, 1),
    (TimeUnit.YEAR, 2),
    (TimeUnit.YEAR, 5),
    (TimeUnit.YEAR, 10),
    (TimeUnit.YEAR, 20),
    (TimeUnit.YEAR, 50),
    (TimeUnit.YEAR, 100),
    (TimeUnit.YEAR, 1000),
    (TimeUnit.YEAR, 10000),
    (TimeUnit.YEAR, 10000000),
)


class TimeAxisDecorationSupplier:
    """Tries each strategy not finer than the data granularity; the first that fits wins."""

    def __init__(
        self,
        mapper: LinearMapper,
        time_granularity: TimeUnit,
        measurer: TextMeasurer,
        settings: DecorationSettings | None = None,
        style: TextStyle | None = None,
    ) -> None:
        self.mapper = mapper
        self.time_granularity = time_granularity
        self.measurer = measurer
        self.settings = settings or default_decoration_settings()
        self.style = style or TextStyle(12)
        self.strategies = [
            TimeAxisStrategy(
                time_granularity, unit, units_per_label, measurer, self.style, mapper, self.settings
            )
            for unit, units_per_label in STRATEGIES
        ]

    def get_decorations(self) -> list[AxisDecoration]:
        granularity = self.time_granularity.millis
        for strategy in self.strategies:
            if granularity > strategy.label_duration:
                continue
            decorations = strategy.attempt()
            if decorations is not None:
                logger.debug(
                    f"Decorations: {strategy.units_per_label} x {strategy.label_granularity.value.lower()}"
                )
                return decorations
        logger.debug("No decoration strategy fits the axis")
        return []
