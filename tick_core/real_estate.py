"""Apportion a fixed pixel budget among priority-ordered layout items.

Items are sorted in descending priority. Each item asks for a minimum size
(below which it is dropped entirely), an optional maximum, and a list of
extra amounts it would like on top. Minimums are granted in order until the
budget runs out, then every item's ``extra[0]`` is filled like communicating
vessels, then ``extra[1]``, and so on.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass, field


@dataclass
class RealEstateItem:
    min: float
    max: float | None = None
    extra: list[float] = field(default_factory=list)
    key: Hashable | None = None

    @property
    def max_or_min(self) -> float:
        return self.min if self.max is None else self.max


@dataclass
class BucketFill:
    """Result of :func:`fill_first_n_buckets`.

    ``sizes`` holds the amount granted to each of the ``num`` filled buckets.
    """
    num: int
    sizes: list[float]
    remainder: float

    @property
    def last(self) -> float | None:
        return self.sizes[-1] if self.sizes else None


def fill_first_n_buckets(
    buckets: Sequence[RealEstateItem],
    total: float,
    drop_penalty: float = 0,
    penalty_index: int | None = None,
) -> BucketFill | None:
    """Fill buckets in order and stop at the first one that does not fit.

    Each bucket gets its minimum plus whatever of its ``max - min`` range the
    remaining amount covers, so a bucket followed only by zero-minimum buckets
    may stay partially filled. The granted sizes never add up to more than
    ``total``.

    Args:
        buckets: Items with ``min`` and optional ``max`` sizes.
        total: Amount to pour.
        drop_penalty: Subtracted from ``total`` when some buckets get dropped.
        penalty_index: Number of buckets that, once they all fit, cancel the
            penalty. Defaults to all of them.

    Returns:
        The fill, or ``None`` when buckets were dropped and the penalty
        exceeds ``total``.
    """
    if penalty_index is None:
        penalty_index = len(buckets)

    penalty_total = total - drop_penalty
    result_with_penalty = 0 if penalty_total >= 0 else None
    filled = 0.0
    filled_with_penalty = 0.0
    sizes: list[float] = []
    sizes_with_penalty: list[float] = []
    for index, bucket in enumerate(buckets):
        bucket_min = bucket.min
        if bucket_min < 0:
            raise ValueError("Bucket min size must be a non-negative number")
        bucket_max = bucket.max_or_min
        if bucket_max < bucket_min:
            raise ValueError("Bucket max size must be larger than or equal to bucket min")
        diff = bucket_max - bucket_min
        filled += bucket_min
        if filled <= penalty_total:
            result_with_penalty = index + 1
            capped = min(penalty_total - filled, diff)
            filled_with_penalty = filled + capped
            sizes_with_penalty = sizes + [bucket_min + capped]
        if filled > total:
            if index >= penalty_index:
                return BucketFill(index, sizes, total - (filled - bucket_min))
            if result_with_penalty is None:
                return None
            return BucketFill(result_with_penalty, sizes_with_penalty, penalty_total - filled_with_penalty)
        capped = min(total - filled, diff)
        filled += capped
        sizes.append(bucket_min + capped)
    return BucketFill(len(buckets), sizes, total - filled)


def fill_communicating_vessels(sizes: Iterable[float], total: float) -> tuple[float, float]:
    """Pour ``total`` into vessels of the given sizes, levelling the water.

    Returns:
        ``(water_level, remainder)``: the level reached in the fullest vessel
        and the part of ``total`` left over once every vessel is full.
    """
    ordered = sorted(sizes)
    water_level = 0.0
    for index, size in enumerate(ordered):
        count = len(ordered) - index
        step_total = (size - water_level) * count
        if step_total <= total:
            water_level = size
            total -= step_total
        else:
            water_level += total / count
            total = 0
            break
    return water_level, total


def _extra_at(item: RealEstateItem, index: int) -> float:
    return item.extra[index] if index < len(item.extra) else 0


def distribute_real_estate(
    items: Sequence[RealEstateItem],
    total: float,
    drop_penalty: float = 0,
    penalty_index: int | None = None,
) -> list[float] | None:
    """Sizes granted to the leading items that fit in ``total``.

    The returned list may be shorter than ``items``: trailing items that did
    not fit at their minimum are dropped. ``None`` means items were dropped
    and ``drop_penalty`` could not be paid.
    """
    fill = fill_first_n_buckets(items, total, drop_penalty, penalty_index)
    if fill is None:
        return None

    fit_items = list(items[:fill.num])
    margin = fill.remainder
    result = list(fill.sizes)
    extra_count = max((len(item.extra) for item in fit_items), default=0)
    for extra_index in range(extra_count):
        water_level, margin = fill_communicating_vessels(
            (_extra_at(item, extra_index) for item in fit_items), margin
        )
        for position, item in enumerate(fit_items):
            result[position] += min(water_level, _extra_at(item, extra_index))
        if margin == 0:
            break
    return result


def distribute_real_estate_with_keys(
    items: Sequence[RealEstateItem],
    total: float,
    drop_penalty: float = 0,
    penalty_index: int | None = None,
) -> dict[Hashable, list[float]]:
    """Like :func:`distribute_real_estate` but grouped by ``item.key``.

    Each key maps to the sizes of its surviving items, in registration order.
    Keys whose items were all dropped are absent.
    """
    sizes = distribute_real_estate(items, total, drop_penalty, penalty_index)
    result: dict[Hashable, list[float]] = {}
    if sizes is None:
        return result
    for item, size in zip(items, sizes):
        result.setdefault(item.key, []).append(size)
    return result


def key_size(allocation: dict[Hashable, list[float]], key: Hashable, index: int = 0, default: float = 0) -> float:
    sizes = allocation.get(key, [])
    return sizes[index] if index < len(sizes) else default
