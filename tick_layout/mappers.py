"""Value to pixel mappings."""

from __future__ import annotations

import math


def calc_reverse_position(coordinate: float, screen_start: float, screen_end: float) -> float:
    """Mirror a coordinate inside ``[screen_start, screen_end]``."""
    return screen_start + screen_end - coordinate


class LinearMapper:
    """Linear map from a data range onto a screen range.

    With ``reversed=True`` the screen ends are swapped, so ``data_min`` lands on
    ``screen_end``.
    """

    def __init__(
        self,
        data_min: float,
        data_max: float,
        screen_start: float,
        screen_end: float,
        reversed: bool = False,
    ) -> None:
        if reversed:
            screen_start, screen_end = screen_end, screen_start
        self.data_min = data_min
        self.data_max = data_max
        self.screen_start = screen_start
        self.screen_end = screen_end
        if data_max == data_min:
            self.quotient = 0.0
        else:
            self.quotient = (screen_end - screen_start) / (data_max - data_min)
        self.offset = self.quotient * data_min - screen_start

    def get_screen_value(self, value: float) -> float:
        return value * self.quotient - self.offset

    def get_data_value(self, position: float) -> float:
        if self.quotient == 0:
            return self.data_min
        return (position + self.offset) / self.quotient

    def __call__(self, value: float | None) -> float | None:
        if value is None:
            return None
        position = self.get_screen_value(value)
        return position if math.isfinite(position) else None
