import pytest

from tick_layout.model import (
    AxisLayoutResult,
    Box,
    ChartGeometry,
    LayoutOutcome,
    TextBlock,
    TextLine,
    TextStyle,
    TickTextItem,
    ViewWindow,
)


def _item(text, visible=True, lines=True):
    block = TextBlock(text, TextStyle(12), [TextLine(0, 0, text, 10)] if lines else [])
    return TickTextItem(data_value=None, coordinate=0, is_visible=visible, text_block=block)


def test_view_window_rejects_inverted_range():
    with pytest.raises(ValueError):
        ViewWindow(10, 5)
    assert ViewWindow(5, 5).data_granularity == 0


def test_box_measures_and_expands():
    box = Box(top=10, right=50, bottom=30, left=20)
    assert box.width == 30
    assert box.height == 20
    assert box.expand(3) == Box(10, 53, 30, 17)
    assert box.expand(0, 2) == Box(8, 50, 32, 20)


def test_box_union_with_none_and_other():
    box = Box(0, 10, 10, 0)
    assert box.union(None) is box
    assert box.union(Box(5, 20, 15, 5)) == Box(0, 20, 15, 0)


def test_box_intersection_counts_touching_edges():
    box = Box(0, 10, 10, 0)
    assert box.intersects(Box(0, 20, 10, 10))
    assert box.intersects(Box(2, 8, 8, 2))
    assert not box.intersects(Box(0, 21, 10, 11))
    assert not box.intersects(Box(11, 10, 20, 0))


def test_chart_geometry_for_axis():
    geometry = ChartGeometry.for_axis(100, 20)
    assert geometry.chart_left == 20
    assert geometry.chart_width == 80
    assert geometry.chart_right == 100
    assert geometry.container_width == 100
    assert geometry.chart_bottom == 300
    assert geometry.container_height == 400


def test_text_block_clone_copies_lines():
    block = TextBlock("2000", TextStyle(12), [TextLine(5, 0, "2000", 32)], anchor=(1, 2))
    clone = block.clone()
    clone.lines[0].x = 99
    clone.anchor = (0, 0)
    assert block.lines[0].x == 5
    assert block.anchor == (1, 2)


def test_result_labels_skip_hidden_and_empty_items():
    shown = _item("2000")
    result = AxisLayoutResult(
        LayoutOutcome.OK,
        ticks=[shown, _item("2001", visible=False), _item("2002", lines=False)],
    )
    assert result.ok
    assert result.labels == [shown]
    assert shown.text == "2000"
    assert TickTextItem(None, 0).text == ""
    assert not AxisLayoutResult(LayoutOutcome.EMPTY_RESULT).ok
