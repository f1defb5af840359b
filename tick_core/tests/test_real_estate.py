import random

import pytest

from tick_core.real_estate import (
    RealEstateItem,
    distribute_real_estate,
    distribute_real_estate_with_keys,
    fill_first_n_buckets,
    fill_communicating_vessels,
    key_size,
)


def test_minimums_then_extras_are_levelled():
    items = [RealEstateItem(10, extra=[5]), RealEstateItem(10, extra=[5])]
    assert distribute_real_estate(items, 25) == [12.5, 12.5]


def test_items_that_do_not_fit_are_dropped():
    items = [RealEstateItem(10), RealEstateItem(10), RealEstateItem(10)]
    assert distribute_real_estate(items, 25) == [10, 10]


def test_last_item_grows_toward_its_max():
    assert distribute_real_estate([RealEstateItem(5, max=20)], 12) == [12]


def test_unpayable_drop_penalty_returns_none():
    items = [RealEstateItem(10), RealEstateItem(10), RealEstateItem(10)]
    assert distribute_real_estate(items, 25, drop_penalty=30) is None


def test_drop_penalty_reduces_budget():
    items = [RealEstateItem(10), RealEstateItem(10), RealEstateItem(10)]
    assert distribute_real_estate(items, 25, drop_penalty=20) == []


def test_extras_are_poured_in_rounds():
    items = [RealEstateItem(0, extra=[2, 10]), RealEstateItem(0, extra=[4, 10])]
    assert distribute_real_estate(items, 8) == [3, 5]


def test_invalid_buckets():
    with pytest.raises(ValueError):
        distribute_real_estate([RealEstateItem(-1)], 10)
    with pytest.raises(ValueError):
        distribute_real_estate([RealEstateItem(5, max=2)], 10)


def test_communicating_vessels():
    assert fill_communicating_vessels([1, 3], 10) == (3, 6)
    assert fill_communicating_vessels([5, 5], 5) == (2.5, 0)


def test_keyed_distribution():
    items = [
        RealEstateItem(10, key="ticks"),
        RealEstateItem(5, key="title"),
        RealEstateItem(10, key="ticks"),
    ]
    allocation = distribute_real_estate_with_keys(items, 20)
    assert allocation == {"ticks": [10], "title": [5]}
    assert key_size(allocation, "title") == 5
    assert key_size(allocation, "ticks", 1) == 0
    assert key_size(allocation, "legend", default=-1) == -1


def test_partially_filled_bucket_keeps_its_partial_size():
    items = [
        RealEstateItem(30),
        RealEstateItem(2, max=12),
        RealEstateItem(16),
        RealEstateItem(4, max=14),
        RealEstateItem(27, max=38),
        RealEstateItem(0),
        RealEstateItem(20),
        RealEstateItem(30),
    ]
    sizes = distribute_real_estate(items, 101)
    assert sizes == [30, 12, 16, 14, 29, 0]
    assert sum(sizes) == 101


def test_fill_reports_every_granted_size():
    fill = fill_first_n_buckets([RealEstateItem(5, max=10), RealEstateItem(0), RealEstateItem(20)], 8)
    assert fill.num == 2
    assert fill.sizes == [8, 0]
    assert fill.last == 0
    assert fill.remainder == 0


def random_items(rng):
    items = []
    for _ in range(rng.randint(0, 9)):
        minimum = rng.choice([0, rng.randint(0, 40)])
        maximum = rng.choice([None, minimum + rng.randint(0, 20)])
        extra = [rng.randint(0, 15) for _ in range(rng.randint(0, 2))]
        items.append(RealEstateItem(minimum, max=maximum, extra=extra))
    return items


@pytest.mark.parametrize("seed", range(40))
def test_allocation_never_exceeds_the_budget(seed):
    rng = random.Random(seed)
    for _ in range(50):
        items = random_items(rng)
        total = rng.randint(0, 150)
        sizes = distribute_real_estate(items, total)
        assert sum(sizes) <= total + 1e-9
        for item, size in zip(items, sizes):
            assert size >= item.min
            assert size <= item.max_or_min + sum(item.extra) + 1e-9
