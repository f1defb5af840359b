"""Lazy enumeration of calendar dates spaced by a multiple of one unit."""

from __future__ import annotations

from calendar import monthrange
from datetime import MAXYEAR, MINYEAR, datetime

from .duration import DURATION_SLOTS, compose_date, date_fields

DAY_SLOT = 4
MONTH_SLOT = 5
YEAR_SLOT = 6


class DateRangeEnumerator:
    """Iterate ``start, start + k*unit, start + 2k*unit, ...`` up to ``end``.

    Every date is recomputed from ``start`` plus the current unit count
    rather than by repeated addition, so runs across month ends or DST
    transitions land on calendar-correct dates. Month and year steps clamp
    the day to the length of the target month: stepping monthly from
    January 31 gives February 29 (or 28), then March 31. The range also ends
    where the next date would leave the years ``datetime`` supports.

    Args:
        start: First date of the range.
        end: Range bound.
        unit_index: Duration slot being stepped (0 = ms ... 6 = years).
        multiple: Number of units per step.
        include_end: Whether a date equal to ``end`` is still emitted.
    """

    def __init__(
        self,
        start: datetime,
        end: datetime,
        unit_index: int,
        multiple: int = 1,
        include_end: bool = False,
    ) -> None:
        if not 0 <= unit_index < DURATION_SLOTS:
            raise ValueError(f"unit_index must be in [0, {DURATION_SLOTS}), got {unit_index}")
        if multiple < 1:
            raise ValueError(f"multiple must be a positive integer, got {multiple}")
        self.start = start
        self.end = end
        self.unit_index = unit_index
        self.multiple = int(multiple)
        self.include_end = include_end
        self._start_fields = date_fields(start)
        self._count = 0
        self._next_date: datetime | None = start

    def _date_at(self, count: int) -> datetime | None:
        """Date ``count`` steps after ``start``; ``None`` once outside the calendar range."""
        fields = list(self._start_fields)
        fields[self.unit_index] += count * self.multiple
        if self.unit_index >= MONTH_SLOT:
            year, month = divmod(fields[YEAR_SLOT] * 12 + fields[MONTH_SLOT], 12)
            if not MINYEAR <= year <= MAXYEAR:
                return None
            fields[YEAR_SLOT], fields[MONTH_SLOT] = year, month
            fields[DAY_SLOT] = min(fields[DAY_SLOT], monthrange(year, month + 1)[1])
        try:
            return compose_date(fields, self.start.tzinfo)
        except ValueError:
            return None

    def has_next(self) -> bool:
        if self._next_date is None:
            return False
        if self.include_end:
            return self._next_date <= self.end
        return self._next_date < self.end

    def next(self) -> datetime:
        if not self.has_next():
            raise StopIteration
        current = self._next_date
        self._count += 1
        self._next_date = self._date_at(self._count)
        return current

    def peek(self) -> datetime | None:
        """Return the upcoming date without advancing, or ``None`` when exhausted."""
        return self._next_date if self.has_next() else None

    def reset(self) -> None:
        self._count = 0
        self._next_date = self.start

    def __iter__(self):
        return self

    def __next__(self) -> datetime:
        return self.next()
