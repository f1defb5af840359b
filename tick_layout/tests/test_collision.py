import pytest

from tick_layout.collision import absolute_span, resolve_collisions, rotate_to_horizontal, text_block_box
from tick_layout.model import Box, TextAlign, TextBlock, TextLine, TextStyle, TickTextItem


def label(coordinate, text="2000", optional=False, angle=0):
    block = TextBlock(
        text,
        TextStyle(12),
        [TextLine(0, 0, text, len(text) * 8)],
        paral_align=TextAlign.CENTER,
        perpen_align=TextAlign.END,
        anchor=(coordinate, 300),
        angle=angle,
    )
    return TickTextItem(data_value=None, coordinate=coordinate, optional=optional, text_block=block)


@pytest.mark.parametrize(
    "align, expected",
    [(TextAlign.START, (10, 40)), (TextAlign.END, (-20, 10)), (TextAlign.CENTER, (-5, 25))],
)
def test_absolute_span(align, expected):
    assert absolute_span(10, 30, align) == expected


def test_text_block_box():
    assert text_block_box(label(100).text_block) == Box(288, 116, 300, 84)
    empty = TextBlock("", TextStyle(12), [TextLine(0, 0, "", 0)], anchor=(0, 0))
    assert text_block_box(empty) is None


def test_separated_labels_all_stay_visible():
    ticks = [label(0), label(100), label(200)]
    assert resolve_collisions(ticks)
    assert all(tick.is_visible for tick in ticks)


def test_overlapping_required_labels_fail():
    assert not resolve_collisions([label(0), label(30)])


def test_optional_label_hidden_behind_required_one():
    optional = label(30, optional=True)
    required = label(0)
    assert resolve_collisions([optional, required])
    assert required.is_visible
    assert not optional.is_visible


def test_overlapping_optional_labels_keep_the_first():
    first = label(0, optional=True)
    second = label(30, optional=True)
    third = label(100, optional=True)
    assert resolve_collisions([first, second, third])
    assert [tick.is_visible for tick in (first, second, third)] == [True, False, True]


def test_hidden_labels_are_ignored():
    hidden = label(30)
    hidden.is_visible = False
    assert resolve_collisions([label(0), hidden])


def test_no_text_position_skips_the_pass():
    assert resolve_collisions([label(0), label(10)], text_position="none")


def test_second_pass_hides_nothing_more():
    ticks = [label(coordinate, optional=coordinate % 100 != 0) for coordinate in range(0, 400, 20)]
    assert resolve_collisions(ticks)
    visible = [tick.is_visible for tick in ticks]
    assert resolve_collisions(ticks)
    assert [tick.is_visible for tick in ticks] == visible


def test_rotate_to_horizontal_turns_anchors_around_the_first():
    blocks = [label(0, angle=90).text_block, label(10, angle=90).text_block]
    blocks[1].anchor = (10, 0)
    blocks[0].anchor = (0, 0)
    rotate_to_horizontal(blocks)
    assert blocks[0].anchor == pytest.approx((0, 0))
    assert blocks[1].anchor == pytest.approx((0, -10), abs=1e-9)
    assert all(block.angle == 0 for block in blocks)


def test_rotated_labels_do_not_modify_inputs():
    ticks = [label(0, angle=-30), label(100, angle=-30)]
    assert resolve_collisions(ticks)
    assert ticks[0].text_block.angle == -30
    assert ticks[1].text_block.anchor == (100, 300)
