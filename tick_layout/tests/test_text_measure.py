import pytest

from tick_layout.measure import FixedFontMeasurer, MatplotlibTextMeasurer, width_function
from tick_layout.model import TextStyle


def test_fixed_font_measurer():
    measurer = FixedFontMeasurer(8)
    style = TextStyle(12)
    assert measurer.width("2000", style) == 32
    assert measurer.width("", style) == 0
    assert measurer.height("2000", style) == 12
    assert FixedFontMeasurer(8, 9).height("2000", style) == 9
    assert width_function(measurer, style)("Jan") == 24


def test_fixed_font_measurer_rejects_non_positive_width():
    with pytest.raises(ValueError):
        FixedFontMeasurer(0)


def test_matplotlib_measurer_uses_font_metrics():
    measurer = MatplotlibTextMeasurer()
    style = TextStyle(12)
    short = measurer.width("2000", style)
    assert short > 0
    assert measurer.width("20000", style) > short
    assert measurer.width("2000", TextStyle(24)) > short
    assert measurer.width("", style) == 0
    assert measurer.height("", style) == 12
    assert measurer.height("2000", style) >= 12


def test_matplotlib_measurer_memoizes():
    measurer = MatplotlibTextMeasurer()
    style = TextStyle(11)
    measurer.width("memo label", style)
    hits = MatplotlibTextMeasurer.cache_info().hits
    measurer.width("memo label", style)
    assert MatplotlibTextMeasurer.cache_info().hits == hits + 1
