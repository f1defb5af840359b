from datetime import datetime, timezone

import pytest

from tick_core.config import DecorationSettings
from tick_core.duration import datetime_to_millis
from tick_core.time_units import TimeUnit
from tick_layout.decorations import Alignment, AxisDecoration, TimeAxisDecorationSupplier, TimeAxisStrategy
from tick_layout.mappers import LinearMapper
from tick_layout.measure import FixedFontMeasurer
from tick_layout.model import TextStyle


def ms(year, month=1, day=1):
    return datetime_to_millis(datetime(year, month, day, tzinfo=timezone.utc))


def settings(min_label_distance=40):
    return DecorationSettings(
        min_label_distance=min_label_distance,
        include_last=True,
        tick_collision_distance=5,
        summary_overflow=40,
    )


def decorate(start, end, width, granularity=TimeUnit.YEAR, min_label_distance=40):
    mapper = LinearMapper(start, end, 0, width)
    supplier = TimeAxisDecorationSupplier(mapper, granularity, FixedFontMeasurer(8, 9), settings(min_label_distance))
    return supplier.get_decorations()


def labels(decorations):
    return [decoration.label for decoration in decorations if decoration.label is not None]


def test_factories():
    line = AxisDecoration.labeled_line_with_heavy_tick(1, 10.6, "2000")
    assert (line.has_line, line.has_tick, line.is_tick_heavy, line.label) == (True, True, True, "2000")
    assert line.position == 11
    assert line.alignment == Alignment.CENTER
    end = AxisDecoration.left_aligned_label_with_line_and_tick(1, 0, "x")
    assert (end.has_line, end.has_tick, end.is_tick_heavy, end.alignment) == (True, True, False, Alignment.LEFT)
    tick = AxisDecoration.tick(1, 0)
    assert (tick.has_line, tick.has_tick, tick.label) == (False, True, None)
    assert AxisDecoration.left_aligned_label(1, 0, "x").alignment == Alignment.LEFT
    assert not AxisDecoration.line_with_tick(1, 0).is_tick_heavy
    assert AxisDecoration.line_with_heavy_tick(1, 0).is_tick_heavy


def test_labels_every_fifty_years():
    decorations = decorate(ms(2000), ms(2200), 500)
    assert labels(decorations) == ["2000", "2050", "2100", "2150", "2200"]


def test_decades_with_yearly_ticks():
    decorations = decorate(ms(2000), ms(2100), 1000)
    assert labels(decorations) == [str(year) for year in range(2000, 2101, 10)]
    assert sum(1 for decoration in decorations if decoration.has_tick) == 102


def test_yearly_labels():
    decorations = decorate(ms(2000), ms(2010), 1000)
    assert labels(decorations) == [str(year) for year in range(2000, 2011)]


def test_five_year_labels_before_the_epoch():
    decorations = decorate(ms(1950), ms(1970), 200, min_label_distance=10)
    assert labels(decorations) == ["1950", "1955", "1960", "1965", "1970"]


def test_last_label_replaces_the_overlapping_one():
    decorations = decorate(ms(2000), ms(2010), 100)
    assert labels(decorations) == ["2000", "2010"]
    assert sum(1 for decoration in decorations if decoration.has_tick) == 12
    last = decorations[-1]
    assert last.alignment == Alignment.LEFT
    assert last.position == 100


def test_summary_label_when_only_one_label_fits():
    decorations = decorate(ms(2000), ms(2010), 40)
    assert labels(decorations) == ["2000-2010"]
    assert not any(decoration.has_tick for decoration in decorations)
    assert decorations[0].value is None
    assert decorations[0].position == 20


def test_quarterly_month_labels():
    decorations = decorate(ms(2000), ms(2002, 2), 1000, granularity=TimeUnit.MONTH)
    assert labels(decorations) == [
        "Jan 2000", "Apr 2000", "Jul 2000", "Oct 2000",
        "Jan 2001", "Apr 2001", "Jul 2001", "Oct 2001",
        "Feb 2002",
    ]


def test_year_labels_centred_between_lines():
    decorations = decorate(ms(2000), ms(2002, 2), 500, granularity=TimeUnit.MONTH)
    assert labels(decorations) == ["2000", "2001", "Feb 2002"]
    first_label = next(decoration for decoration in decorations if decoration.label == "2000")
    assert not first_label.has_line
    assert first_label.screen_position == pytest.approx(120, abs=1)


def test_quarter_labels():
    decorations = decorate(ms(2000), ms(2001, 4), 1000, granularity=TimeUnit.QUARTER, min_label_distance=10)
    assert labels(decorations) == ["Q1 2000", "Q2 2000", "Q3 2000", "Q4 2000", "Q1 2001", "Q2 2001"]


def test_single_value_gets_one_centred_label():
    decorations = decorate(ms(2000), ms(2000), 500)
    assert len(decorations) == 1
    assert decorations[0].position == 250
    assert labels(decorations) == ["2000"]


def test_summary_label_may_overflow_the_axis_a_little():
    assert labels(decorate(ms(1999), ms(2000), 40, min_label_distance=48)) == ["1999-2000"]


def test_nothing_when_even_the_summary_is_too_wide():
    assert decorate(ms(1999), ms(2000), 30) == []


def test_strategy_reports_label_collisions():
    mapper = LinearMapper(ms(2000), ms(2010), 0, 100)
    strategy = TimeAxisStrategy(
        TimeUnit.YEAR, TimeUnit.YEAR, 1, FixedFontMeasurer(8), TextStyle(12), mapper, settings()
    )
    assert strategy.attempt() is None
    assert strategy.two_labels_collide(None, ms(2000)) is False
    assert strategy.two_labels_collide(ms(2000), ms(2001))


def test_supplier_skips_strategies_finer_than_the_data():
    mapper = LinearMapper(ms(2000), ms(2010), 0, 1000)
    supplier = TimeAxisDecorationSupplier(mapper, TimeUnit.YEAR, FixedFontMeasurer(8))
    assert supplier.style == TextStyle(12)
    assert supplier.settings.min_label_distance == 40
    assert all(":" not in label for label in labels(supplier.get_decorations()))
