import pytest

from tick_layout.dilution import ATTACH_TO_END, ATTACH_TO_START, TickDiluter, first_tick_index
from tick_layout.measure import FixedFontMeasurer
from tick_layout.model import TextBlock, TextLine, TextStyle, TickTextItem


def make_ticks(texts, spacing=100, start=0):
    style = TextStyle(12)
    ticks = []
    for index, text in enumerate(texts):
        coordinate = start + index * spacing
        block = TextBlock(text, style, [TextLine(coordinate, 0, text, len(text) * 8)])
        ticks.append(TickTextItem(data_value=None, coordinate=coordinate, text_block=block))
    return ticks


def make_diluter(ticks, total_length, **kwargs):
    return TickDiluter(total_length, ticks, FixedFontMeasurer(8), **kwargs)


def test_first_tick_index_modes():
    assert first_tick_index(1, 6, 2, ATTACH_TO_START) == 1
    assert first_tick_index(0, 6, 2, ATTACH_TO_END) == 1
    assert first_tick_index(0, 7, 3, ATTACH_TO_END) == 0


def test_interval_between_displayed_labels():
    diluter = make_diluter(make_ticks(["a", "b", "c"], spacing=50), 150, min_spacing=10)
    assert diluter.interval(1) == 40
    assert diluter.interval(3) == 140
    assert make_diluter(make_ticks(["a"]), 150).interval(1) == 150


def test_alt_skip_too_large():
    diluter = make_diluter(make_ticks(["a"] * 6), 600)
    assert not diluter.alt_skip_too_large(0, 2, 1)
    assert diluter.alt_skip_too_large(0, 2, 3)
    assert make_diluter(make_ticks(["a"]), 600).alt_skip_too_large(0, 1, 1)


def test_optimistic_keeps_every_label_when_all_fit():
    ticks = make_ticks([str(year) for year in range(2000, 2005)])
    arrangement = make_diluter(ticks, 500).optimistic()
    assert arrangement.alternation == 1
    assert arrangement.skip == 1
    assert arrangement.num_lines == 1
    assert arrangement.acceptable
    assert [tick.index for tick in arrangement.ticks] == [0, 1, 2, 3, 4]


def test_optimistic_alternates_before_skipping():
    ticks = make_ticks(["ABCDEFGHIJKL"] * 6, spacing=60)
    arrangement = make_diluter(ticks, 360).optimistic()
    assert arrangement.alternation == 2
    assert arrangement.skip == 1
    assert arrangement.num_lines == 2
    assert arrangement.acceptable
    assert [tick.line_idx for tick in arrangement.ticks] == [0, 1, 0, 1, 0, 1]


def test_optimistic_skips_when_alternation_is_capped():
    ticks = make_ticks(["ABCDEFGHIJKL"] * 6, spacing=60)
    arrangement = make_diluter(ticks, 360, max_alternation=1).optimistic()
    assert arrangement.alternation == 1
    assert arrangement.skip == 2
    assert arrangement.acceptable
    assert [tick.index for tick in arrangement.ticks] == [0, 2, 4]


def test_forced_skip_is_not_searched():
    ticks = make_ticks(["ABCDEFGHIJKL"] * 6, spacing=60)
    arrangement = make_diluter(ticks, 360, max_alternation=1, force_skip=3).optimistic()
    assert arrangement.skip == 3
    assert [tick.index for tick in arrangement.ticks] == [0, 3]


def test_final_searches_within_allocated_lines():
    ticks = make_ticks(["ABCDEFGHIJKL"] * 6, spacing=60)
    diluter = make_diluter(ticks, 360)
    optimistic = diluter.optimistic()
    final = diluter.final(optimistic, 1, 0)
    assert final.alternation == 1
    assert final.skip == 2
    assert final.num_lines == 1
    assert final.acceptable


def test_final_reports_unacceptable_truncation():
    diluter = make_diluter(make_ticks(["2000"]), 10)
    optimistic = diluter.optimistic()
    assert not optimistic.acceptable
    final = diluter.final(optimistic, 1, 0)
    assert not final.acceptable
    assert final.ticks[0].layout.lines == ["…"]


@pytest.mark.parametrize("alternation, skip", [(1, 1), (2, 1), (1, 3), (2, 2), (3, 2)])
def test_displayed_indices_follow_composite_skip(alternation, skip):
    diluter = make_diluter(make_ticks(["a"] * 13, spacing=10), 130)
    indices = [tick.index for tick in diluter.ticks_info(alternation, skip, 1)]
    expected = {
        row * skip + k * alternation * skip
        for row in range(alternation)
        for k in range(13)
        if row * skip + k * alternation * skip < 13
    }
    assert len(indices) == len(set(indices))
    assert set(indices) == expected
    assert indices == sorted(indices)


def test_container_edge_cut_off_is_not_a_truncation():
    ticks = make_ticks(["2000", "2001", "2002"], spacing=100, start=90)
    info = make_diluter(ticks, 300, allow_cutoff=False).ticks_info(1, 1, 1)
    assert info[-1].layout.lines == ["2…"]
    assert not info[-1].need_tooltip
    assert info[0].layout.lines == ["2000"]
