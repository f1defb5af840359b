"""Calendar duration arithmetic.

A duration is a 7-slot magnitude vector ``[ms, s, m, h, d, month, year]``.
Shorter vectors are treated as zero-padded. A round unit has exactly one
non-zero slot; multiplying a unit by an integer yields a spacing multiple.

Dates are timezone-aware ``datetime`` objects. Arithmetic is done on wall
clock fields and the original ``tzinfo`` is reattached, so stepping by whole
days or months never drifts across daylight-saving transitions.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Sequence

import numpy as np

from .constants import DURATION_COEFFICIENTS, DURATION_HALVES, DURATION_ZEROS

DURATION_SLOTS = 7
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_DURATION_PATTERN = re.compile(r"^P?(\d+[YMDHMS])*T?(\d+[YMDHMS])*$")
_DURATION_TOKEN = re.compile(r"\d+[YMDHMS]|[PT]")
# Parse order: designator and the slot it fills. 'M' appears twice (month, then minute after 'T').
_SYMBOL_ORDER = (("P", None), ("Y", 6), ("M", 5), ("D", 4), ("T", None), ("H", 3), ("M", 2), ("S", 1))
_FORMAT_SUFFIXES = "#SMHDMY"


def js_round(value: float) -> int:
    """Round half up, matching the rounding used throughout the layout passes."""
    return math.floor(value + 0.5)


def pad_duration(duration: Sequence[float]) -> list:
    values = list(duration)[:DURATION_SLOTS]
    return values + [0] * (DURATION_SLOTS - len(values))


def is_duration_zero(duration: Sequence[float]) -> bool:
    return all(value == 0 for value in duration)


def duration_granularity(duration: Sequence[float]) -> int:
    """Return the index of the finest non-zero slot (0 for a zero duration)."""
    for index, value in enumerate(duration):
        if value:
            return index
    return 0


def unit_index(unit: Sequence[float]) -> int:
    """Return the slot index of a round unit.

    Raises:
        ValueError: If the unit has no non-zero slot.
    """
    for index, value in enumerate(unit):
        if value:
            return index
    raise ValueError(f"Duration {list(unit)} has no non-zero slot")


def get_unit(duration: Sequence[float]) -> list[int]:
    """Return the one-hot unit vector of a round duration."""
    return [1 if value > 0 else 0 for value in pad_duration(duration)]


def multiply_duration(duration: Sequence[float], multiplier: float) -> list:
    return [value * multiplier for value in duration]


def smaller_unit(unit: Sequence[float]) -> list[int]:
    """Return the unit one slot finer than ``unit``; milliseconds map to themselves."""
    if unit and unit[0]:
        return [1]
    result: list[int] = []
    for value in list(unit)[1:]:
        if value:
            result.append(1)
            return result
        result.append(0)
    result.append(1)
    return result


def duration_as_millis(duration: Sequence[float] | None) -> float:
    """Approximate length of a duration in milliseconds (-1 for ``None``)."""
    if duration is None:
        return -1
    return sum(value * coefficient for value, coefficient in zip(duration, DURATION_COEFFICIENTS))


def millis_as_duration(millis: float) -> list[int]:
    result = [0] * DURATION_SLOTS
    for index in range(DURATION_SLOTS - 1, -1, -1):
        result[index] = math.floor(millis / DURATION_COEFFICIENTS[index])
        millis -= result[index] * DURATION_COEFFICIENTS[index]
    return result


def date_fields(date: datetime) -> list[int]:
    """Wall clock fields of ``date`` in duration slot order; the month is 0-based."""
    return [
        date.microsecond // 1000,
        date.second,
        date.minute,
        date.hour,
        date.day,
        date.month - 1,
        date.year,
    ]


def compose_date(fields: Sequence[float], tzinfo=timezone.utc) -> datetime:
    """Build a date from wall clock fields, letting out-of-range fields overflow.

    Raises:
        ValueError: If the result falls outside the years 1 to 9999.
    """
    ms, seconds, minutes, hours, day, month, year = (int(value) for value in fields)
    try:
        base = datetime(year + month // 12, month % 12 + 1, 1)
        naive = base + timedelta(days=day - 1, hours=hours, minutes=minutes, seconds=seconds, milliseconds=ms)
    except OverflowError as exc:
        raise ValueError(f"Date fields {list(fields)} are out of range") from exc
    return naive.replace(tzinfo=tzinfo)


def _round_date(date: datetime, unit: Sequence[float], rounding: Callable[[float], float], ceil: bool) -> datetime:
    fields = date_fields(date)
    new_fields = list(fields)
    carry = False
    for index, unit_digit in enumerate(pad_duration(unit)):
        date_digit = fields[index]
        zero_digit = DURATION_ZEROS[index]
        if unit_digit == 0:
            carry = carry or (ceil and date_digit != zero_digit)
            new_fields[index] = zero_digit
            continue
        if carry:
            new_fields[index] = zero_digit + unit_digit * (1 + math.floor((date_digit - zero_digit) / unit_digit))
        else:
            new_fields[index] = zero_digit + unit_digit * rounding((date_digit - zero_digit) / unit_digit)
        break
    return compose_date(new_fields, date.tzinfo)


def floor_date(date: datetime, unit: Sequence[float]) -> datetime:
    """Round ``date`` down to a multiple of a single-slot unit.

    A month floor snaps the day-of-month to 1 and clears the time of day.
    """
    return _round_date(date, unit, math.floor, ceil=False)


def ceil_date(date: datetime, unit: Sequence[float]) -> datetime:
    """Round ``date`` up to a multiple of a single-slot unit.

    Any non-zero finer field carries into the unit slot, so 1 day 1 hour
    ceiled to days lands on the next day.
    """
    return _round_date(date, unit, math.ceil, ceil=True)


def floor_to_monday(date: datetime) -> datetime:
    date = floor_date(date, [0, 0, 0, 0, 1])
    return subtract_duration(date, [0, 0, 0, 0, date.weekday()])


def _add_duration(date: datetime, duration: Sequence[float], factor: int) -> datetime:
    if is_duration_zero(duration):
        return date
    result = date
    for index, value in enumerate(duration):
        if value == 0:
            continue
        fields = date_fields(result)
        fields[index] += factor * value
        result = compose_date(fields, date.tzinfo)
    return result


def add_duration(date: datetime, duration: Sequence[float]) -> datetime:
    return _add_duration(date, duration, 1)


def subtract_duration(date: datetime, duration: Sequence[float]) -> datetime:
    return _add_duration(date, duration, -1)


def _round_duration(duration: Sequence[float], unit: Sequence[float], rounding: Callable[[float], float]) -> list:
    duration = pad_duration(duration)
    unit = pad_duration(unit)
    result = list(duration)
    index = 0
    while index < DURATION_SLOTS and unit[index] == 0:
        result[index] = 0
        index += 1
    if index == DURATION_SLOTS:
        raise ValueError(f"Rounding unit {unit} has no non-zero slot")

    if index == 0:
        result[0] = rounding(duration[0] / unit[0]) * unit[0]
        return result

    fraction = 0.0
    if duration[index - 1] >= DURATION_HALVES[index - 1]:
        fraction = 0.7
    elif duration[index - 1] > 0:
        fraction = 0.1
    result[index] = rounding((duration[index] + fraction) / unit[index]) * unit[index]
    return result


def floor_duration(duration: Sequence[float], unit: Sequence[float]) -> list:
    return _round_duration(duration, unit, math.floor)


def ceil_duration(duration: Sequence[float], unit: Sequence[float]) -> list:
    return _round_duration(duration, unit, math.ceil)


def round_duration(duration: Sequence[float], unit: Sequence[float]) -> list:
    return _round_duration(duration, unit, js_round)


def closest_value_index(table: Sequence[float], target: float) -> int:
    """Index of the table entry closest to ``target`` in a sorted table."""
    upper = int(np.searchsorted(np.asarray(table, dtype=float), target, side="right"))
    if upper >= len(table):
        return len(table) - 1
    if upper == 0:
        return 0
    if table[upper] - target < target - table[upper - 1]:
        return upper
    return upper - 1


def extrapolated_closest_value(table: Sequence[float], target: float, repeat: int) -> tuple[int, float]:
    """Closest entry of ``table`` extended by repeating its last ``repeat`` intervals.

    Returns:
        A ``(virtual_index, value)`` pair. Indices past the end of the table
        refer to extrapolated entries.
    """
    last = table[-1]
    if target <= last:
        index = closest_value_index(table, target)
        return index, table[index]

    first_index = len(table) - 1 - repeat
    cycle = last - table[first_index]
    cycles = math.floor((target - last) / cycle)
    residue = target - last - cycles * cycle
    residue_table = [value - table[first_index] for value in table[first_index:]]
    closest = closest_value_index(residue_table, residue)
    index = len(table) - 1 + cycles * repeat + closest
    return index, last + cycles * cycle + residue_table[closest]


def round_millis_according_to_table(
    millis: float,
    duration_table: Sequence[Sequence[float]],
    repeating_intervals: int = 0,
) -> list:
    """Map a raw span to the closest round duration, comparing in log space.

    Args:
        millis: Span to round, in milliseconds.
        duration_table: Round durations sorted from finest to coarsest.
        repeating_intervals: When positive, the last intervals of the table
            repeat geometrically beyond its end.

    Returns:
        The chosen duration, padded to seven slots.
    """
    table = [pad_duration(entry) for entry in duration_table]
    log_table = np.log([duration_as_millis(entry) for entry in table]).tolist()
    target = math.log(millis) if millis > 0 else -math.inf

    if not repeating_intervals:
        return table[closest_value_index(log_table, target)]

    index, value = extrapolated_closest_value(log_table, target, repeating_intervals)
    if index < len(table):
        return table[index]
    return round_duration(millis_as_duration(math.exp(value)), table[-1])


def parse_duration(text: str) -> list[int] | None:
    """Parse an ISO-like duration such as ``P1Y2M`` or ``T5M``; ``None`` if malformed."""
    text = text.strip()
    if not text or not _DURATION_PATTERN.match(text):
        return None

    duration = [0] * DURATION_SLOTS
    position = 0
    for token in _DURATION_TOKEN.findall(text):
        symbol = token[-1]
        while position < len(_SYMBOL_ORDER) and _SYMBOL_ORDER[position][0] != symbol:
            position += 1
        if position == len(_SYMBOL_ORDER):
            return None
        slot = _SYMBOL_ORDER[position][1]
        if slot is not None:
            duration[slot] = int(token[:-1])
        position += 1
    return duration


def format_duration(duration: Sequence[float]) -> str:
    """Inverse of :func:`parse_duration`; the 'T' designator is added only when needed."""
    duration = pad_duration(duration)
    minutes, months = duration[2], duration[5]
    with_t = not (minutes and months) and not (not minutes and not months)
    nonzero = [index for index, value in enumerate(duration) if value]
    if not nonzero:
        return "0"
    left, right = nonzero[0], nonzero[-1]

    parts: list[str] = []
    if with_t and right < 3:
        parts.append("T")
    for index in range(right, left - 1, -1):
        if with_t and index == 3:
            parts.append("T")
        if duration[index]:
            parts.append(f"{duration[index]}{_FORMAT_SUFFIXES[index]}")
    if with_t and left > 3:
        parts.append("T")
    return "".join(parts)


def duration_string_as_millis(text: str) -> float:
    return duration_as_millis(parse_duration(text))


def millis_as_duration_string(millis: float) -> str:
    return format_duration(millis_as_duration(millis))


def date_as_duration(date: datetime) -> list[int]:
    """Duration since 1970-01-01 UTC, slot by slot."""
    date = date.astimezone(timezone.utc)
    return [
        date.microsecond // 1000,
        date.second,
        date.minute,
        date.hour,
        date.day - 1,
        date.month - 1,
        date.year - 1970,
    ]


def duration_as_date(duration: Sequence[float]) -> datetime:
    """Date at ``duration`` past 1970-01-01 UTC; out-of-range slots overflow."""
    ms, seconds, minutes, hours, days, months, years = pad_duration(duration)
    return compose_date([ms, seconds, minutes, hours, days + 1, months, years + 1970], timezone.utc)


def timeofday_as_duration(timeofday: Sequence[float]) -> list:
    """Convert ``[h, m, s, ms]`` (possibly shorter) into a duration vector."""
    values = list(timeofday) + [0] * max(0, 4 - len(timeofday))
    return list(reversed(values))


def duration_as_timeofday(duration: Sequence[float]) -> list:
    """``[h, m, s, ms]`` of a duration; day and coarser slots are dropped."""
    return list(reversed(pad_duration(duration)[:4]))


def timeofday_as_millis(timeofday: Sequence[float]) -> float:
    return duration_as_millis(timeofday_as_duration(timeofday))


def millis_as_timeofday(millis: float) -> list[int]:
    return duration_as_timeofday(millis_as_duration(millis))


def datetime_to_millis(date: datetime) -> float:
    return (date - EPOCH) / timedelta(milliseconds=1)


def millis_to_datetime(millis: float, tzinfo=timezone.utc) -> datetime:
    return (EPOCH + timedelta(milliseconds=millis)).astimezone(tzinfo)
