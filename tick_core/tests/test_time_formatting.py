from datetime import datetime, timezone

import pytest

from tick_core.duration import datetime_to_millis
from tick_core.formatting import TimeFormatter, format_date, format_range, resolve_pattern
from tick_core.time_units import DAY, TimeUnit, closest_unit, duration_unit_name, finest_unit, unit_vector

UTC = timezone.utc
SAMPLE = datetime(2000, 2, 5, 13, 4, 9, tzinfo=UTC)


@pytest.mark.parametrize(
    "pattern, expected",
    [
        ("MMM d, y", "Feb 5, 2000"),
        ("MMMM y", "February 2000"),
        ("HH:mm", "13:04"),
        ("HH:mm:ss", "13:04:09"),
        ("M/d/yy", "2/5/00"),
        ("Q yyyy", "Q1 2000"),
        ("MMMMM", "F"),
        ("EEE", "Sat"),
        ("h a", "1 PM"),
        ("'at' HH", "at 13"),
        (".SSS", ".000"),
    ],
)
def test_format_date_patterns(pattern, expected):
    assert format_date(SAMPLE, pattern) == expected


def test_format_date_rejects_unknown_field():
    with pytest.raises(ValueError):
        format_date(SAMPLE, "G")


def test_resolve_pattern_expands_named_patterns():
    assert resolve_pattern("SHORT_DATE") == "M/d/yy"
    assert resolve_pattern("MMM y") == "MMM y"


def test_format_range():
    assert format_range("1999", "2000") == "1999-2000"


@pytest.mark.parametrize(
    "unit, expected",
    [
        (TimeUnit.YEAR, "2000"),
        (TimeUnit.QUARTER, "Q1 2000"),
        (TimeUnit.MONTH, "Feb 2000"),
        (TimeUnit.DAY, "2/5/00"),
        (TimeUnit.HOUR, "2/5/00 13:04"),
    ],
)
def test_time_formatter_by_unit(unit, expected):
    assert TimeFormatter(unit).format(datetime_to_millis(SAMPLE)) == expected


def test_time_unit_parse_accepts_plurals():
    assert TimeUnit.parse("years") == TimeUnit.YEAR
    assert TimeUnit.parse("Month") == TimeUnit.MONTH


def test_time_unit_parse_rejects_unknown():
    with pytest.raises(ValueError) as exc_info:
        TimeUnit.parse("fortnight")
    assert "Unknown time unit" in str(exc_info.value)


def test_unit_helpers():
    assert finest_unit(TimeUnit.YEAR, TimeUnit.DAY) == TimeUnit.DAY
    assert closest_unit(DAY * 1.2) == DAY
    assert duration_unit_name(TimeUnit.WEEK) == "days"
    assert duration_unit_name(TimeUnit.QUARTER) == "months"
    assert unit_vector("months") == [0, 0, 0, 0, 0, 1, 0]
    with pytest.raises(ValueError):
        unit_vector("weeks")
