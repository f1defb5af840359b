"""Calendar arithmetic, sequences, text fitting and configuration for tickaxis."""

from .config import (
    AxisConfigService,
    AxisLayoutConfig,
    AxisTextSettings,
    DecorationSettings,
    DilutionSettings,
    GridlineSettings,
    RetrySettings,
    UnitFormat,
    UnitFormats,
    build_layout_config,
    default_layout_config,
)
from .date_range import DateRangeEnumerator
from .duration import (
    ceil_date,
    floor_date,
    format_duration,
    parse_duration,
    round_millis_according_to_table,
)
from .formatting import TimeFormatter, format_date
from .options import OptionsResolver
from .real_estate import RealEstateItem, distribute_real_estate, distribute_real_estate_with_keys
from .sequences import CustomPowersOf10, LinearSequence, MonthSequence, create_time_sequence
from .text_layout import TextLayout, calc_text_layout
from .time_units import TimeUnit

__all__ = [
    "AxisConfigService",
    "AxisLayoutConfig",
    "AxisTextSettings",
    "build_layout_config",
    "calc_text_layout",
    "ceil_date",
    "create_time_sequence",
    "CustomPowersOf10",
    "DateRangeEnumerator",
    "DecorationSettings",
    "default_layout_config",
    "DilutionSettings",
    "distribute_real_estate",
    "distribute_real_estate_with_keys",
    "floor_date",
    "format_date",
    "format_duration",
    "GridlineSettings",
    "LinearSequence",
    "MonthSequence",
    "OptionsResolver",
    "parse_duration",
    "RealEstateItem",
    "RetrySettings",
    "round_millis_according_to_table",
    "TextLayout",
    "TimeFormatter",
    "TimeUnit",
    "UnitFormat",
    "UnitFormats",
]
