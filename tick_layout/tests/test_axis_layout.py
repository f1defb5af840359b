import pytest

from tick_core.config import default_layout_config
from tick_layout.axis_layout import HorizontalAxisLayout, SlantedTicks
from tick_layout.measure import FixedFontMeasurer
from tick_layout.model import ChartGeometry, LayoutOutcome, TextAlign, TextBlock, TextLine, TextStyle, TickTextItem


def make_ticks(texts, spacing=100, align=TextAlign.START):
    style = TextStyle(12)
    ticks = []
    for index, text in enumerate(texts):
        coordinate = index * spacing
        block = TextBlock(text, style, [TextLine(coordinate, 0, text, len(text) * 8)], paral_align=align)
        ticks.append(TickTextItem(data_value=None, coordinate=coordinate, text_block=block))
    return ticks


def make_layout(width=1000, axis=None, dilution=None):
    config = default_layout_config(
        {
            "axis": axis or {},
            "dilution": {"allow_container_boundary_text_cutoff": True, **(dilution or {})},
        }
    )
    geometry = ChartGeometry.for_axis(0, width)
    return HorizontalAxisLayout(config.axis, config.dilution, geometry, FixedFontMeasurer(8))


YEARS = [str(year) for year in range(2000, 2011)]


def test_outside_labels_hang_below_the_chart():
    result = make_layout().layout(make_ticks(YEARS))
    assert result.outcome == LayoutOutcome.OK
    assert not result.slanted
    assert result.skip == 1
    assert result.alternation == 1
    assert [tick.text for tick in result.ticks] == YEARS
    first = result.ticks[0].text_block
    assert first.anchor == (0, 300)
    assert first.paral_align == TextAlign.START
    assert first.perpen_align == TextAlign.END
    assert first.lines[0].text == "2000"
    assert first.lines[0].y == pytest.approx(19)
    assert result.title is None
    assert result.legend_area is None


def test_title_legend_and_color_bar_get_space():
    layout = make_layout(axis={"title": "Time", "legend_font_size": 10, "color_bar_height": 8})
    result = layout.layout(make_ticks(YEARS))
    assert result.outcome == LayoutOutcome.OK
    assert result.title.lines[0].text == "Time"
    assert result.title.lines[0].x == 500
    assert result.title.lines[0].y > 300
    assert result.legend_area.height == 10
    assert result.legend_area.width == 1000
    assert result.color_bar_area.height == 8
    assert result.color_bar_area.top >= result.legend_area.bottom


def test_forced_slanted_labels():
    result = make_layout(dilution={"slanted_text": True}).layout(make_ticks(YEARS))
    assert result.slanted
    assert result.skip == 1
    assert all(tick.text_block.angle == -30 for tick in result.ticks)
    assert all(tick.text_block.paral_align == TextAlign.END for tick in result.ticks)
    assert result.ticks[1].text_block.anchor[0] == 100


def test_long_unbreakable_labels_switch_to_slanted():
    ticks = make_ticks(["JANUARY2000XX"] * 20, spacing=50)
    result = make_layout().layout(ticks)
    assert result.slanted
    assert result.ticks


def test_labels_that_cannot_fit_are_unresolved():
    result = make_layout(width=10, dilution={"slanted_text": False}).layout(make_ticks(["2000"]))
    assert result.outcome == LayoutOutcome.TRUNCATION_UNRESOLVED


def test_inside_labels_sit_above_the_chart_bottom():
    result = make_layout(axis={"text_position": "in"}).layout(make_ticks(YEARS))
    assert result.outcome == LayoutOutcome.OK
    block = result.ticks[1].text_block
    assert block.anchor == (104, 300)
    assert block.paral_align == TextAlign.START
    assert block.perpen_align == TextAlign.START
    assert block.lines[0].y < 0


def test_inside_category_labels_are_centred():
    result = make_layout(axis={"text_position": "in", "axis_type": "category"}).layout(make_ticks(YEARS))
    block = result.ticks[1].text_block
    assert block.anchor == (100, 300)
    assert block.paral_align == TextAlign.CENTER


def test_no_text_position_drops_labels():
    result = make_layout(axis={"text_position": "none"}).layout(make_ticks(YEARS))
    assert result.outcome == LayoutOutcome.OK
    assert result.ticks == []


def test_slanted_skip_follows_font_size_and_angle():
    config = default_layout_config({"dilution": {"slanted_text_angle": 30}})
    slanted = SlantedTicks(make_ticks(YEARS, spacing=10), TextStyle(12), FixedFontMeasurer(8), config.dilution, 100)
    assert slanted.skip == 3
    assert slanted.max_height == 27
    assert slanted.min_height == 23


def test_slanted_angle_parallel_to_axis_is_rejected():
    config = default_layout_config({"dilution": {"slanted_text_angle": 180}})
    slanted = SlantedTicks(make_ticks(YEARS), TextStyle(12), FixedFontMeasurer(8), config.dilution, 1000)
    assert slanted.skip == len(YEARS)
    with pytest.raises(ValueError):
        slanted.real_estate_item(2, 7)


def test_slanted_label_left_without_text_is_unresolved():
    layout = make_layout(dilution={"slanted_text": True, "allow_container_boundary_text_cutoff": False})
    result = layout.layout(make_ticks(["January 2000"]))
    assert result.slanted
    assert result.outcome == LayoutOutcome.TRUNCATION_UNRESOLVED
    assert result.ticks[0].text_block.lines == []


def test_slanted_labels_need_room_for_one_rotated_label():
    result = make_layout(width=20, dilution={"slanted_text": True}).layout(make_ticks(["2000"]))
    assert result.slanted
    assert result.outcome == LayoutOutcome.TRUNCATION_UNRESOLVED


def test_slanted_labels_cut_by_the_granted_height_are_unresolved():
    layout = make_layout(dilution={"slanted_text": True})
    result = layout.layout(make_ticks(["JANUARY 2000 TO DECEMBER 2000"] * 3))
    assert result.slanted
    assert result.outcome == LayoutOutcome.TRUNCATION_UNRESOLVED
