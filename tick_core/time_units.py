"""Named time units and their approximate lengths in milliseconds."""

from __future__ import annotations

from enum import Enum

from .constants import TIME_UNIT_INDEX, TIME_UNITS

MILLISECOND = 1
SECOND = 1000
MINUTE = SECOND * 60
HOUR = MINUTE * 60
DAY = HOUR * 24
WEEK = DAY * 7
MONTH = DAY * 30.436875
QUARTER = DAY * 91.310625
YEAR = DAY * 365.2425

UNIT_MILLIS = (MILLISECOND, SECOND, MINUTE, HOUR, DAY, WEEK, MONTH, QUARTER, YEAR)

GRANULAR_TIME_UNITS = (
    SECOND, SECOND * 5, SECOND * 10, SECOND * 15, SECOND * 30,
    MINUTE, MINUTE * 5, MINUTE * 10, MINUTE * 15, MINUTE * 30,
    HOUR, HOUR * 3, HOUR * 6, HOUR * 12,
    DAY, WEEK, MONTH, QUARTER, YEAR,
)


class TimeUnit(Enum):
    MILLISECOND = "MILLISECOND"
    SECOND = "SECOND"
    MINUTE = "MINUTE"
    HOUR = "HOUR"
    DAY = "DAY"
    WEEK = "WEEK"
    MONTH = "MONTH"
    QUARTER = "QUARTER"
    YEAR = "YEAR"

    @property
    def millis(self) -> float:
        return UNIT_MILLIS[list(TimeUnit).index(self)]

    @classmethod
    def parse(cls, name: str) -> "TimeUnit":
        """Look up a unit by case-insensitive name, accepting plural forms."""
        key = str(name).strip().upper()
        if key.endswith("S"):
            key = key[:-1]
        try:
            return cls(key)
        except ValueError:
            allowed = ", ".join(unit.value.lower() for unit in cls)
            raise ValueError(f"Unknown time unit '{name}'. Use one of: {allowed}.") from None


def finest_unit(unit_a: TimeUnit, unit_b: TimeUnit) -> TimeUnit:
    return unit_b if unit_a.millis > unit_b.millis else unit_a


def closest_unit(millis: float) -> float:
    """Length of the named unit closest to ``millis`` (ties go to the larger unit)."""
    millis = abs(millis)
    index = len(UNIT_MILLIS) - 1
    while index > 0 and millis < UNIT_MILLIS[index]:
        index -= 1
    if index + 1 < len(UNIT_MILLIS) and UNIT_MILLIS[index + 1] - millis <= millis - UNIT_MILLIS[index]:
        index += 1
    return UNIT_MILLIS[index]


def duration_unit_name(unit: TimeUnit) -> str:
    """Duration slot name used for gridlines of ``unit`` (weeks use days, quarters use months)."""
    mapping = {
        TimeUnit.MILLISECOND: "milliseconds",
        TimeUnit.SECOND: "seconds",
        TimeUnit.MINUTE: "minutes",
        TimeUnit.HOUR: "hours",
        TimeUnit.DAY: "days",
        TimeUnit.WEEK: "days",
        TimeUnit.MONTH: "months",
        TimeUnit.QUARTER: "months",
        TimeUnit.YEAR: "years",
    }
    return mapping[unit]


def unit_vector(name: str) -> list[int]:
    """One-hot duration vector for a duration slot name such as ``"months"``."""
    if name not in TIME_UNIT_INDEX:
        raise ValueError(f"Unknown duration unit '{name}'. Use one of: {', '.join(TIME_UNITS)}.")
    vector = [0] * len(TIME_UNITS)
    vector[TIME_UNIT_INDEX[name]] = 1
    return vector


def coarser_unit(name: str) -> str | None:
    index = TIME_UNIT_INDEX[name]
    return TIME_UNITS[index + 1] if index + 1 < len(TIME_UNITS) else None


def finer_unit(name: str) -> str | None:
    index = TIME_UNIT_INDEX[name]
    return TIME_UNITS[index - 1] if index > 0 else None
