"""Configuration loading for axis layout runs.

Every section of ``config.yaml`` is merged over its ``DEFAULT_*`` mapping and
validated eagerly, then frozen into the typed settings consumed by the layout
passes. Nothing downstream re-validates.
"""

from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .constants import (
    DEFAULT_AXIS_SETTINGS,
    DEFAULT_DECORATION_SETTINGS,
    DEFAULT_DILUTION_SETTINGS,
    DEFAULT_GRIDLINE_SETTINGS,
    DEFAULT_MAJOR_UNITS,
    DEFAULT_MINOR_UNITS,
    DEFAULT_RETRY_SETTINGS,
    TIME_UNITS,
    VALID_AXIS_TYPES,
    VALID_IN_TEXT_POSITIONS,
    VALID_SKIP_MODES,
    VALID_TEXT_POSITIONS,
)
from .duration import DURATION_SLOTS, duration_as_millis
from .options import OptionsResolver

logger = logging.getLogger("tickaxis")

CONFIG_SECTIONS = ("logging", "axis", "gridlines", "dilution", "retry", "decorations", "units")


@dataclass(frozen=True)
class UnitFormat:
    formats: tuple[str, ...]
    intervals: tuple[int, ...]


@dataclass(frozen=True)
class UnitFormats:
    """Label formats and spacing multiples per duration slot name."""
    major: dict[str, UnitFormat] = field(default_factory=dict)
    minor: dict[str, UnitFormat] = field(default_factory=dict)


@dataclass(frozen=True)
class GridlineSettings:
    allow_minor: bool
    major_unit: str | None
    min_strong_line_distance: float
    min_weak_line_distance: float
    min_strong_to_weak_line_distance: float
    min_notch_distance: float
    min_major_text_distance: float
    min_minor_text_distance: float
    unit_threshold: float
    notch_length: float
    format: str | None
    time_offset: float
    repeating_intervals: int
    round_durations: tuple[tuple[int, ...], ...]


@dataclass(frozen=True)
class AxisTextSettings:
    font_size: float
    font_name: str
    title: str
    title_font_size: float
    text_position: str
    in_text_position: str
    axis_type: str
    legend_font_size: float | None
    color_bar_height: float | None
    chart_height: float
    container_height: float


@dataclass(frozen=True)
class DilutionSettings:
    slanted_text: bool | None
    slanted_text_angle: float
    margin: float
    first_visible_text: int
    max_text_lines: float
    max_alternation: int
    show_text_every: int
    show_text_every_mode: str
    min_text_spacing: float
    allow_container_boundary_text_cutoff: bool


@dataclass(frozen=True)
class RetrySettings:
    max_unit_steps: int
    max_candidates: int


@dataclass(frozen=True)
class DecorationSettings:
    min_label_distance: float
    include_last: bool
    tick_collision_distance: float
    summary_overflow: float


@dataclass(frozen=True)
class AxisLayoutConfig:
    """Everything one layout run needs, assembled once and never re-queried."""
    gridlines: GridlineSettings
    axis: AxisTextSettings
    dilution: DilutionSettings
    retry: RetrySettings
    decorations: DecorationSettings
    units: UnitFormats


def load_config_dict(config_file: Path | None = Path("config.yaml")) -> dict:
    """Read the YAML config as a mapping; ``None`` means defaults only."""
    if config_file is None:
        return {}
    with open(config_file, 'r') as f:
        config = yaml.safe_load(f) or {}
    if not isinstance(config, dict):
        raise ValueError(f"Invalid config in {config_file}; expected mapping.")
    return config


def merge_overrides(config: dict, overrides: dict | None) -> dict:
    """Layer ``overrides`` over ``config`` one section deep."""
    merged = copy.deepcopy(config)
    for name, section in (overrides or {}).items():
        current = merged.get(name)
        if isinstance(current, dict) and isinstance(section, dict):
            current.update(section)
        else:
            merged[name] = section
    return merged


def _section_settings(config: dict, name: str, defaults: dict, config_file) -> dict:
    section = config.get(name, {})
    if section is None:
        section = {}
    if not isinstance(section, dict):
        raise ValueError(f"Invalid {name} section in {config_file}; expected mapping.")

    unknown = sorted(key for key in section if key not in defaults)
    if unknown:
        raise ValueError(f"Unknown {name} keys in {config_file}: {', '.join(map(str, unknown))}")

    settings = copy.deepcopy(defaults)
    settings.update(section)
    return settings


def normalize_unit_name(name: str, option: str) -> str:
    """Map ``'year'``/``'Years'`` to the duration slot name ``'years'``."""
    if isinstance(name, str):
        key = name.strip().lower()
        if key in TIME_UNITS:
            return key
        if f"{key}s" in TIME_UNITS:
            return f"{key}s"
    raise ValueError(f"Invalid {option} '{name}'. Use one of: {', '.join(TIME_UNITS)}.")


def _validate_round_durations(values) -> tuple[tuple[int, ...], ...]:
    if not isinstance(values, (list, tuple)) or not values:
        raise ValueError("gridlines.round_durations must be a non-empty list of durations")

    durations: list[tuple[int, ...]] = []
    for value in values:
        if (
            not isinstance(value, (list, tuple))
            or not value
            or len(value) > DURATION_SLOTS
            or any(isinstance(v, bool) or not isinstance(v, int) or v < 0 for v in value)
        ):
            raise ValueError("gridlines.round_durations entries must be lists of non-negative integers")
        if sum(1 for v in value if v != 0) != 1:
            raise ValueError(
                f"gridlines.round_durations entry {list(value)} must have exactly one non-zero slot"
            )
        durations.append(tuple(value))

    millis = [duration_as_millis(duration) for duration in durations]
    if any(later <= earlier for earlier, later in zip(millis, millis[1:])):
        raise ValueError("gridlines.round_durations must be sorted by increasing length")
    return tuple(durations)


def load_gridline_settings(config: dict, config_file: Path | str = "config.yaml") -> GridlineSettings:
    settings = _section_settings(config, "gridlines", DEFAULT_GRIDLINE_SETTINGS, config_file)
    options = OptionsResolver(settings, "gridlines")

    major_unit = settings["major_unit"]
    if major_unit is not None:
        major_unit = normalize_unit_name(major_unit, "gridlines.major_unit")

    round_durations = _validate_round_durations(settings["round_durations"])
    repeating_intervals = options.get_int("repeating_intervals", minimum=0)
    if repeating_intervals > len(round_durations):
        raise ValueError("gridlines.repeating_intervals cannot exceed the number of round_durations")

    return GridlineSettings(
        allow_minor=options.get_bool("allow_minor"),
        major_unit=major_unit,
        min_strong_line_distance=options.get_number("min_strong_line_distance", minimum=0),
        min_weak_line_distance=options.get_number("min_weak_line_distance", minimum=0),
        min_strong_to_weak_line_distance=options.get_number("min_strong_to_weak_line_distance", minimum=0),
        min_notch_distance=options.get_number("min_notch_distance", minimum=0),
        min_major_text_distance=options.get_number("min_major_text_distance", minimum=0),
        min_minor_text_distance=options.get_number("min_minor_text_distance", minimum=0),
        unit_threshold=_positive(options, "unit_threshold"),
        notch_length=options.get_number("notch_length", minimum=0),
        format=options.get_str("format", allow_none=True, allow_empty=False),
        time_offset=options.get_number("time_offset"),
        repeating_intervals=repeating_intervals,
        round_durations=round_durations,
    )


def _positive(options: OptionsResolver, path: str) -> float:
    value = options.get_number(path, minimum=0)
    if value <= 0:
        raise ValueError(f"{options.prefix}.{path} must be a positive number")
    return value


def load_axis_settings(config: dict, config_file: Path | str = "config.yaml") -> AxisTextSettings:
    settings = _section_settings(config, "axis", DEFAULT_AXIS_SETTINGS, config_file)
    options = OptionsResolver(settings, "axis")

    font_size = _positive(options, "font_size")
    title_font_size = options.get_number("title_font_size", allow_none=True, minimum=0)
    chart_height = _positive(options, "chart_height")
    container_height = _positive(options, "container_height")
    if container_height < chart_height:
        raise ValueError("axis.container_height must be at least axis.chart_height")

    return AxisTextSettings(
        font_size=font_size,
        font_name=options.get_str("font_name", allow_empty=False),
        title=options.get_str("title") or "",
        title_font_size=font_size if title_font_size is None else title_font_size,
        text_position=options.get_enum("text_position", VALID_TEXT_POSITIONS),
        in_text_position=options.get_enum("in_text_position", VALID_IN_TEXT_POSITIONS),
        axis_type=options.get_enum("axis_type", VALID_AXIS_TYPES),
        legend_font_size=options.get_number("legend_font_size", allow_none=True, minimum=0),
        color_bar_height=options.get_number("color_bar_height", allow_none=True, minimum=0),
        chart_height=chart_height,
        container_height=container_height,
    )


def load_dilution_settings(
    config: dict,
    font_size: float,
    config_file: Path | str = "config.yaml",
) -> DilutionSettings:
    """Dilution settings; ``margin`` and ``min_text_spacing`` default from the tick font size."""
    settings = _section_settings(config, "dilution", DEFAULT_DILUTION_SETTINGS, config_file)
    options = OptionsResolver(settings, "dilution")

    margin = options.get_number("margin", allow_none=True, minimum=0)
    min_text_spacing = options.get_number("min_text_spacing", allow_none=True, minimum=0)
    max_text_lines = options.get_number("max_text_lines", allow_none=True, minimum=0, allow_inf=True)

    return DilutionSettings(
        slanted_text=options.get_bool("slanted_text", allow_none=True),
        slanted_text_angle=options.get_number("slanted_text_angle") % 360,
        margin=0.5 * font_size if margin is None else margin,
        first_visible_text=options.get_int("first_visible_text", minimum=0),
        max_text_lines=math.inf if max_text_lines is None else max_text_lines,
        max_alternation=options.get_int("max_alternation", minimum=0),
        show_text_every=options.get_int("show_text_every", minimum=0),
        show_text_every_mode=options.get_enum("show_text_every_mode", VALID_SKIP_MODES),
        min_text_spacing=font_size if min_text_spacing is None else min_text_spacing,
        allow_container_boundary_text_cutoff=options.get_bool("allow_container_boundary_text_cutoff"),
    )


def load_retry_settings(config: dict, config_file: Path | str = "config.yaml") -> RetrySettings:
    settings = _section_settings(config, "retry", DEFAULT_RETRY_SETTINGS, config_file)
    options = OptionsResolver(settings, "retry")
    return RetrySettings(
        max_unit_steps=options.get_int("max_unit_steps", minimum=0),
        max_candidates=options.get_int("max_candidates", minimum=1),
    )


def load_decoration_settings(config: dict, config_file: Path | str = "config.yaml") -> DecorationSettings:
    settings = _section_settings(config, "decorations", DEFAULT_DECORATION_SETTINGS, config_file)
    options = OptionsResolver(settings, "decorations")
    return DecorationSettings(
        min_label_distance=options.get_number("min_label_distance", minimum=0),
        include_last=options.get_bool("include_last"),
        tick_collision_distance=options.get_number("tick_collision_distance", minimum=0),
        summary_overflow=options.get_number("summary_overflow", minimum=0),
    )


def _load_unit_table(section: dict, defaults: dict, path: str) -> dict[str, UnitFormat]:
    if not isinstance(section, dict):
        raise ValueError(f"{path} must be a mapping of unit name to format/interval settings")

    table: dict[str, UnitFormat] = {}
    overrides = {normalize_unit_name(name, path): value for name, value in section.items()}
    for unit_name in TIME_UNITS:
        entry = dict(defaults[unit_name])
        override = overrides.get(unit_name, {})
        if not isinstance(override, dict):
            raise ValueError(f"{path}.{unit_name} must be a mapping")
        entry.update(override)

        options = OptionsResolver(entry, f"{path}.{unit_name}")
        formats = entry.get("format")
        if isinstance(formats, str):
            formats = [formats]
        if not isinstance(formats, (list, tuple)) or not formats or not all(
            isinstance(item, str) and item.strip() for item in formats
        ):
            raise ValueError(f"{path}.{unit_name}.format must be a non-empty list of patterns")
        intervals = options.get_number_list("interval", minimum=1, integer=True)
        if any(later <= earlier for earlier, later in zip(intervals, intervals[1:])):
            raise ValueError(f"{path}.{unit_name}.interval must be strictly increasing")
        table[unit_name] = UnitFormat(tuple(formats), tuple(intervals))
    return table


def load_unit_formats(config: dict, config_file: Path | str = "config.yaml") -> UnitFormats:
    units = config.get("units", {})
    if units is None:
        units = {}
    if not isinstance(units, dict):
        raise ValueError(f"Invalid units section in {config_file}; expected mapping.")
    unknown = sorted(key for key in units if key not in ("major", "minor"))
    if unknown:
        raise ValueError(f"Unknown units keys in {config_file}: {', '.join(map(str, unknown))}")

    return UnitFormats(
        major=_load_unit_table(units.get("major") or {}, DEFAULT_MAJOR_UNITS, "units.major"),
        minor=_load_unit_table(units.get("minor") or {}, DEFAULT_MINOR_UNITS, "units.minor"),
    )


def build_layout_config(config: dict, config_file: Path | str = "config.yaml") -> AxisLayoutConfig:
    """Validate every section of ``config`` and freeze it into an :class:`AxisLayoutConfig`."""
    unknown = sorted(key for key in config if key not in CONFIG_SECTIONS)
    if unknown:
        logger.warning("Ignoring unknown config sections in %s: %s", config_file, ", ".join(map(str, unknown)))

    axis = load_axis_settings(config, config_file)
    return AxisLayoutConfig(
        gridlines=load_gridline_settings(config, config_file),
        axis=axis,
        dilution=load_dilution_settings(config, axis.font_size, config_file),
        retry=load_retry_settings(config, config_file),
        decorations=load_decoration_settings(config, config_file),
        units=load_unit_formats(config, config_file),
    )


class AxisConfigService:
    """Stateful access wrapper for the axis layout config loaders.

    Args:
        config_file: YAML file to read, or ``None`` for built-in defaults.
        overrides: In-memory sections layered over the file, e.g.
            ``{"gridlines": {"allow_minor": False}}``.
    """

    def __init__(self, config_file: Path | None = Path("config.yaml"), overrides: dict | None = None) -> None:
        self.config_file = config_file
        self.overrides = overrides or {}

    def load_config(self) -> dict:
        return merge_overrides(load_config_dict(self.config_file), self.overrides)

    def _source(self) -> str:
        return str(self.config_file) if self.config_file is not None else "defaults"

    def load_gridline_settings(self) -> GridlineSettings:
        return load_gridline_settings(self.load_config(), self._source())

    def load_axis_settings(self) -> AxisTextSettings:
        return load_axis_settings(self.load_config(), self._source())

    def load_dilution_settings(self) -> DilutionSettings:
        config = self.load_config()
        axis = load_axis_settings(config, self._source())
        return load_dilution_settings(config, axis.font_size, self._source())

    def load_retry_settings(self) -> RetrySettings:
        return load_retry_settings(self.load_config(), self._source())

    def load_decoration_settings(self) -> DecorationSettings:
        return load_decoration_settings(self.load_config(), self._source())

    def load_unit_formats(self) -> UnitFormats:
        return load_unit_formats(self.load_config(), self._source())

    def load_layout_config(self) -> AxisLayoutConfig:
        config = self.load_config()
        layout_config = build_layout_config(config, self._source())
        logger.debug("Loaded axis layout config from %s", self._source())
        return layout_config


def default_layout_config(overrides: dict | None = None) -> AxisLayoutConfig:
    """Built-in defaults with optional section overrides, without reading a file."""
    return AxisConfigService(None, overrides).load_layout_config()
