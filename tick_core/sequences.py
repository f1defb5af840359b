"""Ordered numeric sequences used to pick "nice" spacings and period boundaries.

Every sequence is a cursor: ``floor``/``ceil``/``round`` position it relative to
a value and ``next``/``previous`` step it, each returning the new value.
"""

from __future__ import annotations

import math
from datetime import MAXYEAR, timezone
from typing import Protocol, Sequence

from .duration import compose_date, datetime_to_millis, js_round, millis_to_datetime
from .time_units import DAY, GRANULAR_TIME_UNITS, MONTH, WEEK


class NumberSequence(Protocol):
    """Protocol shared by all sequences."""

    def value(self) -> float: ...

    def next(self) -> float: ...

    def previous(self) -> float: ...

    def floor(self, value: float) -> float: ...

    def ceil(self, value: float) -> float: ...

    def round(self, value: float) -> float: ...


def exact_scientific(multiplier: float, exponent: int) -> float:
    """``multiplier * 10**exponent`` without the drift of multiplying by 0.1."""
    if exponent >= 0:
        return multiplier * 10 ** exponent
    return multiplier / 10 ** (-exponent)


def round_to_significant_digits(digits: int, value: float) -> float:
    if value == 0 or not math.isfinite(value):
        return value
    return float(f"{value:.{digits}g}")


class CustomPowersOf10:
    """The sequence ``m[0], m[1], ..., 10*m[0], 10*m[1], ...`` over all powers of ten.

    Args:
        multipliers: Strictly increasing values in ``[1, 10)``.
    """

    def __init__(self, multipliers: Sequence[float]) -> None:
        self._check_multipliers(multipliers)
        self.multipliers = list(multipliers)
        self.level_length = len(self.multipliers)
        self.position = 0

    @staticmethod
    def _check_multipliers(multipliers: Sequence[float]) -> None:
        if not multipliers:
            raise ValueError("Multipliers must not be empty")
        if multipliers[0] < 1:
            raise ValueError("First multiplier must be at least 1")
        if multipliers[-1] >= 10:
            raise ValueError("Last multiplier must be below 10")
        previous = 0
        for value in multipliers:
            if not isinstance(value, (int, float)):
                raise ValueError("Multipliers must be numbers")
            if value <= previous:
                raise ValueError("Multipliers must be strictly increasing")
            previous = value

    def value(self) -> float:
        level = self.position // self.level_length
        index = self.position - level * self.level_length
        return exact_scientific(self.multipliers[index], level)

    def next(self) -> float:
        self.position += 1
        return self.value()

    def previous(self) -> float:
        self.position -= 1
        return self.value()

    def floor(self, value: float) -> float:
        self._check_positive(value)
        self.position = self.level_length * math.ceil(math.log10(value))
        if self.value() != value:
            while self.previous() > value:
                pass
        return self.value()

    def ceil(self, value: float) -> float:
        self._check_positive(value)
        self.position = self.level_length * math.floor(math.log10(value))
        if self.value() != value:
            while self.next() < value:
                pass
        return self.value()

    def round(self, value: float) -> float:
        self._check_positive(value)
        self.position = self.level_length * math.ceil(math.log10(value))
        if self.value() != value:
            while self.previous() > value:
                pass
            if value - self.value() < self.next() - value:
                return self.previous()
        return self.value()

    @staticmethod
    def _check_positive(value: float) -> None:
        if not value > 0:
            raise ValueError(f"Value {value} must be positive")


class LinearSequence:
    """Evenly spaced values ``offset + k * spacing``."""

    def __init__(self, spacing: float, offset: float = 0) -> None:
        self.spacing = spacing
        self.offset = offset
        self.position = 0

    def value(self) -> float:
        return round_to_significant_digits(15, self.position * self.spacing + self.offset)

    def next(self) -> float:
        self.position += 1
        return self.value()

    def previous(self) -> float:
        self.position -= 1
        return self.value()

    def floor(self, value: float) -> float:
        self.position = math.floor((value - self.offset) / self.spacing)
        return self.value()

    def ceil(self, value: float) -> float:
        self.position = math.ceil((value - self.offset) / self.spacing)
        return self.value()

    def round(self, value: float) -> float:
        self.position = js_round((value - self.offset) / self.spacing)
        return self.value()


class MonthSequence:
    """UTC month boundaries (epoch milliseconds) every ``months_per_step`` months.

    Steps larger than a year are additionally aligned to multiples of whole
    years, so a 120-month step lands on decades.
    """

    def __init__(self, months_per_step: int = 1, month_offset: int = 0) -> None:
        if months_per_step < 1 or months_per_step != int(months_per_step):
            raise ValueError(f"months_per_step must be a positive integer, got {months_per_step}")
        if month_offset != int(month_offset) or not -11 <= month_offset <= 11:
            raise ValueError(f"month_offset must be an integer in [-11, 11], got {month_offset}")
        self.step_size = int(months_per_step)
        self.full_offset = int(month_offset)
        self.year_sequence = LinearSequence(self.step_size // 12) if self.step_size > 12 else None
        self._year = 1970
        self._month = 0

    def value(self) -> float:
        """Boundary in epoch milliseconds; infinite once past the supported years."""
        try:
            date = compose_date([0, 0, 0, 0, 1, self._month, self._year], timezone.utc)
        except ValueError:
            return math.inf if self._year > MAXYEAR else -math.inf
        return datetime_to_millis(date)

    def _shift(self, months: int) -> float:
        total = self._year * 12 + self._month + months
        self._year, self._month = divmod(total, 12)
        return self.value()

    def next(self) -> float:
        return self._shift(self.step_size)

    def previous(self) -> float:
        return self._shift(-self.step_size)

    def floor(self, value: float) -> float:
        date = millis_to_datetime(value, timezone.utc)
        self._year, self._month = date.year, date.month - 1
        if self.step_size > 1:
            month_delta = ((self._month + 12 - self.full_offset) % self.step_size) % 12
            self._shift(-month_delta)
            if self.year_sequence is not None:
                self._year = int(self.year_sequence.floor(self._year))
        return self.value()

    def ceil(self, value: float) -> float:
        if self.floor(value) < value:
            return self.next()
        return self.value()

    def round(self, value: float) -> float:
        if self.floor(value) != value:
            if value - self.value() < self.next() - value:
                return self.previous()
        return self.value()


def round_time_unit(millis: float) -> float:
    """Round a span to the closest granular time unit.

    Spans below three quarters of a second snap to 1-2-5 multiples of a
    millisecond; spans of a year and a half or more snap to 1-2-5 multiples
    of a year.
    """
    nice = CustomPowersOf10([1, 2, 5])
    units = GRANULAR_TIME_UNITS
    min_unit = nice.round(units[0])
    preceding = nice.previous()
    preceding_cutoff = preceding + (min_unit - preceding) / 2
    max_unit = units[-1]
    nice.round(1)
    succeeding = max_unit * nice.next()
    succeeding_cutoff = max_unit + (succeeding - max_unit) / 2

    if millis < preceding_cutoff:
        return CustomPowersOf10([1, 2, 5]).round(millis)
    if millis >= succeeding_cutoff:
        return max_unit * CustomPowersOf10([1, 2, 5]).round(millis / max_unit)

    position = len(units) - 1
    while position > 0 and millis < units[position]:
        position -= 1
    if position + 1 < len(units) and units[position + 1] - millis <= millis - units[position]:
        position += 1
    return units[position]


def create_time_sequence(unit_millis: float, first_day_of_week: int = 1) -> NumberSequence:
    """Sequence of period boundaries for a span rounded to a granular time unit.

    Weeks start on ``first_day_of_week`` (1 = Monday); the epoch fell on a Thursday.
    """
    unit_millis = round_time_unit(unit_millis)
    if unit_millis < MONTH:
        if unit_millis == WEEK:
            return LinearSequence(unit_millis, DAY * (3 + first_day_of_week))
        return LinearSequence(unit_millis)
    return MonthSequence(js_round(unit_millis / MONTH))

