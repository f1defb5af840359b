"""Gridline search, label dilution, real-estate negotiation and collision handling for time axes."""

from .axis_layout import AxisTextLayout, HorizontalAxisLayout, SlantedTicks
from .collision import resolve_collisions
from .decorations import AxisDecoration, TimeAxisDecorationSupplier, TimeAxisStrategy
from .dilution import TickDiluter
from .gridlines import DateTickDefiner
from .mappers import LinearMapper, calc_reverse_position
from .measure import FixedFontMeasurer, MatplotlibTextMeasurer, TextMeasurer
from .model import (
    AxisLayoutResult,
    Box,
    ChartGeometry,
    GridlineCandidate,
    LayoutOutcome,
    TextAlign,
    TextBlock,
    TextLine,
    TextStyle,
    TickBatch,
    TickSpanType,
    TickTextItem,
    ViewWindow,
)
from .orchestrator import AxisTickOrchestrator, layout_axis

__all__ = [
    "AxisDecoration",
    "AxisLayoutResult",
    "AxisTextLayout",
    "AxisTickOrchestrator",
    "Box",
    "calc_reverse_position",
    "ChartGeometry",
    "DateTickDefiner",
    "FixedFontMeasurer",
    "GridlineCandidate",
    "HorizontalAxisLayout",
    "layout_axis",
    "LayoutOutcome",
    "LinearMapper",
    "MatplotlibTextMeasurer",
    "resolve_collisions",
    "SlantedTicks",
    "TextAlign",
    "TextBlock",
    "TextLine",
    "TextMeasurer",
    "TextStyle",
    "TickBatch",
    "TickDiluter",
    "TickSpanType",
    "TickTextItem",
    "TimeAxisDecorationSupplier",
    "TimeAxisStrategy",
    "ViewWindow",
]
