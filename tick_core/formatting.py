"""Date label formatting shared by gridline search and decoration passes."""

from __future__ import annotations

import re
from datetime import datetime, timezone

from .constants import DATE_PATTERNS
from .duration import millis_to_datetime
from .time_units import TimeUnit

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
QUARTER_NAMES = ("1st quarter", "2nd quarter", "3rd quarter", "4th quarter")

_TOKEN = re.compile(r"'(?:[^']|'')*'|([A-Za-z])\1*|[^A-Za-z']+")


def _format_field(token: str, date: datetime) -> str:
    letter = token[0]
    count = len(token)

    if letter == "y":
        if count == 2:
            return f"{date.year % 100:02d}"
        return str(date.year).zfill(count)
    if letter == "Q":
        quarter = (date.month - 1) // 3
        return QUARTER_NAMES[quarter] if count >= 4 else f"Q{quarter + 1}"
    if letter in ("M", "L"):
        if count == 1:
            return str(date.month)
        if count == 2:
            return f"{date.month:02d}"
        name = MONTH_NAMES[date.month - 1]
        if count == 3:
            return name[:3]
        if count == 4:
            return name
        return name[0]
    if letter == "d":
        return str(date.day).zfill(count)
    if letter == "E":
        name = DAY_NAMES[date.weekday()]
        if count <= 3:
            return name[:3]
        if count == 4:
            return name
        return name[0]
    if letter == "H":
        return str(date.hour).zfill(count)
    if letter == "h":
        return str(date.hour % 12 or 12).zfill(count)
    if letter == "m":
        return str(date.minute).zfill(count)
    if letter == "s":
        return str(date.second).zfill(count)
    if letter == "S":
        return f"{date.microsecond // 1000:03d}"[:count].ljust(count, "0")
    if letter == "a":
        return "AM" if date.hour < 12 else "PM"
    if letter == "z":
        return date.tzname() or "UTC"
    if letter == "Z":
        offset = date.strftime("%z")
        return offset or "+0000"
    raise ValueError(f"Unsupported date pattern field '{token}'")


def format_date(date: datetime, pattern: str) -> str:
    """Format ``date`` with an ICU-style pattern such as ``"MMM d, y"``.

    Letters are pattern fields, runs of the same letter select the width,
    and text in single quotes is copied literally (``''`` is a quote).
    """
    parts: list[str] = []
    for match in _TOKEN.finditer(pattern):
        token = match.group(0)
        if token.startswith("'"):
            literal = token[1:-1].replace("''", "'")
            parts.append(literal if token != "''" else "'")
        elif match.group(1):
            parts.append(_format_field(token, date))
        else:
            parts.append(token)
    return "".join(parts)


def resolve_pattern(pattern: str) -> str:
    """Expand a named pattern (``"SHORT_DATE"``) into its field pattern."""
    return DATE_PATTERNS.get(pattern, pattern)


def format_range(start_text: str, end_text: str) -> str:
    return f"{start_text}-{end_text}"


class TimeFormatter:
    """Formats epoch milliseconds at the resolution of one time unit (UTC)."""

    def __init__(self, unit: TimeUnit = TimeUnit.YEAR, tzinfo=timezone.utc) -> None:
        self.tzinfo = tzinfo
        self.pattern = ""
        self.set_time_unit(unit)

    def set_time_unit(self, unit: TimeUnit) -> None:
        if unit == TimeUnit.YEAR:
            self.pattern = "y"
        elif unit == TimeUnit.QUARTER:
            self.pattern = "Q yyyy"
        elif unit == TimeUnit.MONTH:
            self.pattern = DATE_PATTERNS["YEAR_MONTH_ABBR"]
        elif unit == TimeUnit.DAY:
            self.pattern = DATE_PATTERNS["SHORT_DATE"]
        else:
            self.pattern = DATE_PATTERNS["SHORT_DATETIME"]

    def format(self, millis: float) -> str:
        return format_date(millis_to_datetime(millis, self.tzinfo), self.pattern)
