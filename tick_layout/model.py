"""
Value types passed between the layout passes.

Everything here is plain data. Passes create these records, the collision
resolver may flip ``is_visible`` on tick items, and the orchestrator hands the
finished lists to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from tick_core.real_estate import RealEstateItem


class TextAlign(Enum):
    START = "start"
    CENTER = "center"
    END = "end"


class TickSpanType(Enum):
    """Where a label sits relative to its gridline."""
    BELOW = "below"
    SPAN_LEFT = "span_left"
    SPAN_RIGHT = "span_right"
    SPAN_CENTER = "span_center"


class LayoutOutcome(Enum):
    OK = "ok"
    EMPTY_RESULT = "empty_result"
    TRUNCATION_UNRESOLVED = "truncation_unresolved"
    COLLISION_FATAL = "collision_fatal"


@dataclass(frozen=True)
class ViewWindow:
    """Epoch-millisecond domain to decorate.

    ``data_granularity`` is the smallest gap between data points, 0 when unknown.
    """
    min_value: float
    max_value: float
    data_granularity: float = 0

    def __post_init__(self) -> None:
        if self.max_value < self.min_value:
            raise ValueError(
                f"ViewWindow max_value ({self.max_value}) must not be below min_value ({self.min_value})"
            )


@dataclass(frozen=True)
class TextStyle:
    font_size: float
    font_name: str = "DejaVu Sans"


@dataclass
class GridlineCandidate:
    data_value: datetime
    coordinate: float
    is_visible: bool = True
    is_notch: bool = False
    optional: bool = False
    length: float | None = None
    # Opaque drawing reference owned by the renderer.
    brush: object | None = None


@dataclass
class TextLine:
    x: float
    y: float
    text: str
    length: float


@dataclass
class TextBlock:
    """A label broken into lines, positioned relative to ``anchor``.

    Line coordinates are relative to the anchor; ``angle`` is in degrees,
    negative for text rising to the right.
    """
    text: str
    style: TextStyle
    lines: list[TextLine] = field(default_factory=list)
    paral_align: TextAlign = TextAlign.CENTER
    perpen_align: TextAlign = TextAlign.END
    anchor: tuple[float, float] | None = None
    angle: float = 0
    tooltip: str | None = None

    def clone(self) -> TextBlock:
        return replace(self, lines=[replace(line) for line in self.lines])


@dataclass
class TickTextItem:
    data_value: datetime | None
    coordinate: float | None
    is_visible: bool = True
    optional: bool = False
    text_block: TextBlock | None = None
    width: float = 0
    line_idx: int | None = None
    need_tooltip: bool = False

    @property
    def text(self) -> str:
        return self.text_block.text if self.text_block is not None else ""


@dataclass(frozen=True)
class GridlinesConfig:
    """Parameters for one gridline search pass (major or minor tier)."""
    min_value: float
    max_value: float
    unit_name: str
    unit_index: int
    formats: tuple[str, ...]
    multiples: tuple[int, ...]
    min_line_distance: float
    min_text_distance: float = 0
    avoid: tuple[float, ...] = ()
    min_cross_distance: float = 0
    style: TextStyle | None = None
    brush: object | None = None


@dataclass
class MeasuredText:
    text: str
    size: float


@dataclass
class GridlinesBatch:
    """One candidate of the search: gridlines of a multiple with the labels of one format."""
    gridlines: list[GridlineCandidate]
    texts: list[MeasuredText]
    multiple: int
    min_space: float
    label_format: str | None = None


@dataclass
class TickBatch:
    """Gridlines plus positioned label items ready for the axis layout."""
    gridlines: list[GridlineCandidate]
    ticks: list[TickTextItem]
    multiple: int = 1
    label_format: str | None = None


@dataclass(frozen=True)
class Box:
    top: float
    right: float
    bottom: float
    left: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def expand(self, horizontal: float, vertical: float = 0) -> Box:
        return Box(self.top - vertical, self.right + horizontal, self.bottom + vertical, self.left - horizontal)

    def union(self, other: Box | None) -> Box:
        if other is None:
            return self
        return Box(
            min(self.top, other.top),
            max(self.right, other.right),
            max(self.bottom, other.bottom),
            min(self.left, other.left),
        )

    def intersects(self, other: Box) -> bool:
        """Closed-interval overlap test; touching edges count as a hit."""
        return (
            self.left <= other.right
            and other.left <= self.right
            and self.top <= other.bottom
            and other.top <= self.bottom
        )


@dataclass(frozen=True)
class ChartGeometry:
    """Chart area inside the container, in pixels with y growing downwards."""
    chart_left: float
    chart_top: float
    chart_width: float
    chart_height: float
    container_width: float
    container_height: float

    @property
    def chart_bottom(self) -> float:
        return self.chart_top + self.chart_height

    @property
    def chart_right(self) -> float:
        return self.chart_left + self.chart_width

    @classmethod
    def for_axis(
        cls,
        screen_start: float,
        screen_end: float,
        chart_height: float = 300,
        container_height: float = 400,
        container_width: float | None = None,
    ) -> ChartGeometry:
        left = min(screen_start, screen_end)
        width = abs(screen_end - screen_start)
        if container_width is None:
            container_width = max(screen_start, screen_end)
        return cls(left, 0, width, chart_height, container_width, container_height)


@dataclass
class AxisLayoutResult:
    outcome: LayoutOutcome
    unit: str | None = None
    multiple: int | None = None
    gridlines: list[GridlineCandidate] = field(default_factory=list)
    ticks: list[TickTextItem] = field(default_factory=list)
    title: TextBlock | None = None
    legend_area: Box | None = None
    color_bar_area: Box | None = None
    skip: int = 1
    alternation: int = 1
    slanted: bool = False
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.outcome == LayoutOutcome.OK

    @property
    def labels(self) -> list[TickTextItem]:
        """Visible tick items that carry at least one text line."""
        return [
            tick
            for tick in self.ticks
            if tick.is_visible and tick.text_block is not None and tick.text_block.lines
        ]


__all__ = [
    "AxisLayoutResult",
    "Box",
    "ChartGeometry",
    "GridlineCandidate",
    "GridlinesBatch",
    "GridlinesConfig",
    "LayoutOutcome",
    "MeasuredText",
    "RealEstateItem",
    "TextAlign",
    "TextBlock",
    "TextLine",
    "TextStyle",
    "TickBatch",
    "TickSpanType",
    "TickTextItem",
    "ViewWindow",
]
