"""Core constants shared across configuration helpers and layout passes."""

import math

TIME_UNITS = ("milliseconds", "seconds", "minutes", "hours", "days", "months", "years")
TIME_UNIT_INDEX = {name: index for index, name in enumerate(TIME_UNITS)}

# Slot zero values: the day-of-month slot starts at 1, every other slot at 0.
DURATION_ZEROS = (0, 0, 0, 0, 1, 0, 0)
# Half of the next-larger slot, used when rounding a duration to a single unit.
DURATION_HALVES = (500, 30, 30, 12, 15, 6, 0)
# Approximate length of one unit of each slot in milliseconds.
DURATION_COEFFICIENTS = (1, 1000, 60000, 3600000, 86400000, 2629743830, 31556926000)

# Round units tried as the overall range granularity. Each entry has one non-zero slot.
DEFAULT_ROUND_DURATIONS = (
    (1,), (2,), (5,), (10,), (20,), (50,), (100,), (200,), (500,),
    (0, 1), (0, 2), (0, 5), (0, 10), (0, 15), (0, 30),
    (0, 0, 1), (0, 0, 2), (0, 0, 5), (0, 0, 10), (0, 0, 15), (0, 0, 30),
    (0, 0, 0, 1), (0, 0, 0, 2), (0, 0, 0, 3), (0, 0, 0, 4), (0, 0, 0, 6), (0, 0, 0, 12),
    (0, 0, 0, 0, 1), (0, 0, 0, 0, 2), (0, 0, 0, 0, 7),
    (0, 0, 0, 0, 0, 1), (0, 0, 0, 0, 0, 3), (0, 0, 0, 0, 0, 6),
    (0, 0, 0, 0, 0, 0, 1), (0, 0, 0, 0, 0, 0, 10), (0, 0, 0, 0, 0, 0, 50), (0, 0, 0, 0, 0, 0, 100),
)
# Trailing table entries that repeat by powers of ten past the end of the table.
REPEATING_INTERVALS = 3

NOTCH_LENGTH = 5
GOLDEN_RATIO = (1 + math.sqrt(5)) / 2
MIN_GAP = 2
MISSING_TEXT_INDICATION = "..."
ELLIPSIS = "…"
SKIP_INTERVALS = (1, 2, 3, 4, 5)

DATE_PATTERNS = {
    "LONG_TIME": "HH:mm:ss z",
    "MEDIUM_TIME": "HH:mm:ss",
    "SHORT_TIME": "HH:mm",
    "LONG_DATE": "MMMM d, y",
    "MEDIUM_DATE": "MMM d, y",
    "SHORT_DATE": "M/d/yy",
    "SHORT_DATETIME": "M/d/yy HH:mm",
    "MONTH_DAY_YEAR_MEDIUM": "MMM d, y",
    "MONTH_DAY_FULL": "MMMM dd",
    "MONTH_DAY_MEDIUM": "MMMM d",
    "MONTH_DAY_SHORT": "M/d",
    "MONTH_DAY_ABBR": "MMM d",
    "DAY_ABBR": "d",
    "YEAR_MONTH_FULL": "MMMM y",
    "YEAR_MONTH_ABBR": "MMM y",
}

DEFAULT_MAJOR_UNITS = {
    "milliseconds": {
        "format": ["HH:mm:ss.SSS"],
        "interval": [1, 2, 5, 10, 20, 50, 100, 200, 500],
    },
    "seconds": {
        "format": [DATE_PATTERNS["LONG_TIME"], DATE_PATTERNS["MEDIUM_TIME"]],
        "interval": [1, 2, 5, 10, 15, 30],
    },
    "minutes": {
        "format": [DATE_PATTERNS["SHORT_TIME"]],
        "interval": [1, 2, 5, 10, 15, 30],
    },
    "hours": {
        "format": ["HH:mm"],
        "interval": [1, 2, 3, 4, 6, 12],
    },
    "days": {
        "format": [
            DATE_PATTERNS["LONG_DATE"],
            DATE_PATTERNS["MEDIUM_DATE"],
            DATE_PATTERNS["SHORT_DATE"],
            DATE_PATTERNS["MONTH_DAY_YEAR_MEDIUM"],
            DATE_PATTERNS["MONTH_DAY_FULL"],
            DATE_PATTERNS["MONTH_DAY_MEDIUM"],
            DATE_PATTERNS["MONTH_DAY_SHORT"],
            DATE_PATTERNS["MONTH_DAY_ABBR"],
            DATE_PATTERNS["DAY_ABBR"],
        ],
        "interval": [1, 2, 7],
    },
    "months": {
        "format": [DATE_PATTERNS["YEAR_MONTH_FULL"], DATE_PATTERNS["YEAR_MONTH_ABBR"], "MMM"],
        "interval": [1, 2, 3, 4, 6],
    },
    "years": {
        "format": ["y"],
        "interval": [1, 2, 5, 10, 20, 25, 50, 100, 200, 250, 500, 1000],
    },
}

DEFAULT_MINOR_UNITS = {
    "milliseconds": {"format": [".SSS"], "interval": [50, 100, 200, 250, 500]},
    "seconds": {"format": [":ss"], "interval": [5, 10, 15, 30]},
    "minutes": {"format": [":mm"], "interval": [5, 10, 15, 30]},
    "hours": {"format": ["HH:mm"], "interval": [1, 2, 3, 4, 6, 12]},
    "days": {"format": ["d"], "interval": [1, 2, 7]},
    "months": {"format": ["MMMMM", "MMM", "MM"], "interval": [1, 2, 3, 4, 6, 12]},
    "years": {"format": ["y"], "interval": [1, 2, 5, 10, 20, 25, 50, 100, 200, 250, 500, 1000]},
}

VALID_TEXT_POSITIONS = ("out", "in", "none")
VALID_SKIP_MODES = ("attach_to_start", "attach_to_end")
VALID_AXIS_TYPES = ("value", "category")
VALID_IN_TEXT_POSITIONS = ("high", "low")

DEFAULT_GRIDLINE_SETTINGS = {
    "allow_minor": True,
    "major_unit": None,
    "min_strong_line_distance": 40,
    "min_weak_line_distance": 20,
    "min_strong_to_weak_line_distance": 0,
    "min_notch_distance": 5,
    "min_major_text_distance": 20,
    "min_minor_text_distance": 20,
    "unit_threshold": 2.2,
    "notch_length": NOTCH_LENGTH,
    "format": None,
    "time_offset": 0,
    "repeating_intervals": REPEATING_INTERVALS,
    "round_durations": list(DEFAULT_ROUND_DURATIONS),
}

DEFAULT_AXIS_SETTINGS = {
    "font_size": 12,
    "font_name": "DejaVu Sans",
    "title": "",
    "title_font_size": None,
    "text_position": "out",
    "in_text_position": "high",
    "axis_type": "value",
    "legend_font_size": None,
    "color_bar_height": None,
    "chart_height": 300,
    "container_height": 400,
}

DEFAULT_DILUTION_SETTINGS = {
    "slanted_text": None,
    "slanted_text_angle": 30,
    "margin": None,
    "first_visible_text": 0,
    "max_text_lines": None,
    "max_alternation": 2,
    "show_text_every": 0,
    "show_text_every_mode": "attach_to_start",
    "min_text_spacing": None,
    "allow_container_boundary_text_cutoff": True,
}

DEFAULT_RETRY_SETTINGS = {
    "max_unit_steps": 2,
    "max_candidates": 32,
}

DEFAULT_DECORATION_SETTINGS = {
    "min_label_distance": 40,
    "include_last": True,
    "tick_collision_distance": 5,
    "summary_overflow": 40,
}
