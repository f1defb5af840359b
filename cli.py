"""
CLI utilities for tickaxis.

Handles command-line argument parsing, timestamp handling and rendering of
layout results as tables.
"""

from __future__ import annotations

import argparse
import difflib
import logging
from datetime import datetime
from pathlib import Path

import pandas as pd

from tick_core.config import AxisConfigService, AxisLayoutConfig
from tick_core.duration import datetime_to_millis
from tick_core.time_units import TimeUnit
from tick_layout.decorations import AxisDecoration
from tick_layout.measure import FixedFontMeasurer, MatplotlibTextMeasurer, TextMeasurer
from tick_layout.model import AxisLayoutResult, ViewWindow

logger = logging.getLogger("tickaxis")

__version__ = "1.0.0"
VALID_MODES = ("gridlines", "decorations")
VALID_MEASURES = ("fixed", "matplotlib")
GRANULARITY_CHOICES = tuple(unit.value.lower() for unit in TimeUnit)
DEFAULT_CONFIG_PATH = Path("config.yaml")
GRIDLINE_COLUMNS = ["value", "coordinate", "label", "visible", "optional"]
DECORATION_COLUMNS = ["value", "position", "label", "line", "tick", "heavy", "alignment"]


class CLIError(ValueError):
    """User-facing CLI validation error with optional hint text."""

    def __init__(self, message: str, hint: str | None = None):
        self.message = message
        self.hint = hint
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class FriendlyArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises CLIError instead of exiting immediately."""

    def error(self, message: str) -> None:
        hint = None
        if "unrecognized arguments" in message:
            if "--from" in message or "--to" in message:
                hint = "Use --start and --end (for example: --start 2000-01-01 --end 2010-01-01)."
            elif "--length" in message or "--size" in message:
                hint = "Use --width to give the axis length in pixels."
        elif "--mode" in message:
            hint = f"Allowed modes: {', '.join(VALID_MODES)}."
        usage = self.format_usage().strip()
        raise CLIError(f"Argument error: {message}\n{usage}", hint=hint)


def _suggest_values(value: str, options: list[str], max_suggestions: int = 5) -> str | None:
    """Return a short suggestion string from close matches."""
    matches = difflib.get_close_matches(value, options, n=max_suggestions, cutoff=0.5)
    if not matches:
        return None
    return ", ".join(matches)


def parse_timestamp(value: str, option: str = "--start") -> datetime:
    """
    Parse a user-supplied date/time into a UTC datetime.

    Naive values are taken as UTC; values with an offset are converted.

    Raises:
        CLIError: If pandas cannot parse the value.
    """
    if value is None or not str(value).strip():
        raise CLIError(f"{option} value cannot be empty.", f"Use ISO dates, for example: {option} 2000-01-01.")
    try:
        timestamp = pd.Timestamp(str(value).strip())
    except (ValueError, TypeError):
        raise CLIError(
            f"Invalid {option} value: '{value}'.",
            f"Use ISO dates such as 2000-01-01 or 2000-01-01T12:30 (for example: {option} 2000-01-01).",
        )
    if pd.isna(timestamp):
        raise CLIError(f"Invalid {option} value: '{value}'.", "Use an actual date, not NaT.")
    if timestamp.tzinfo is None:
        timestamp = timestamp.tz_localize("UTC")
    else:
        timestamp = timestamp.tz_convert("UTC")
    return timestamp.to_pydatetime()


def parse_granularity(name: str | None) -> TimeUnit | None:
    """Parse ``--granularity`` into a TimeUnit (plural names accepted)."""
    if name is None:
        return None
    try:
        return TimeUnit.parse(name)
    except ValueError:
        suggestion = _suggest_values(str(name).lower(), list(GRANULARITY_CHOICES))
        hint = f"Did you mean: {suggestion}?" if suggestion else f"Allowed values: {', '.join(GRANULARITY_CHOICES)}."
        raise CLIError(f"Unknown granularity '{name}'.", hint)


def parse_tick_list(ticks_arg: str | None) -> list[datetime] | None:
    """Parse a comma-separated list of explicit tick dates."""
    if ticks_arg is None:
        return None
    items = [item.strip() for item in ticks_arg.split(",") if item.strip()]
    if not items:
        raise CLIError("--ticks value cannot be empty.", "Use comma-separated dates, for example: --ticks 2002-01-01,2005-01-01.")
    return [parse_timestamp(item, "--ticks") for item in items]


def infer_data_granularity(values: pd.Series) -> float:
    """Smallest positive gap between distinct values, in milliseconds; 0 when unknown."""
    times = pd.to_datetime(values, utc=True).dropna().drop_duplicates().sort_values()
    if len(times) < 2:
        return 0
    gaps = times.diff().dropna()
    gaps = gaps[gaps > pd.Timedelta(0)]
    if gaps.empty:
        return 0
    return gaps.min() / pd.Timedelta(milliseconds=1)


def load_data_times(data_file: Path, column: str | None = None) -> pd.Series:
    """
    Read the time column of a CSV file.

    Args:
        data_file: CSV file with a header row.
        column: Name of the time column; defaults to the first column.

    Returns:
        pd.Series: UTC timestamps with unparseable rows dropped.

    Raises:
        CLIError: If the file or column is missing or holds no dates.
    """
    if not data_file.exists():
        raise CLIError(f"Data file not found: {data_file}", "Check the --data path.")
    df = pd.read_csv(data_file)
    if df.empty or len(df.columns) == 0:
        raise CLIError(f"Data file {data_file} has no rows.")
    if column is None:
        column = df.columns[0]
    elif column not in df.columns:
        suggestion = _suggest_values(column, [str(name) for name in df.columns])
        hint = f"Did you mean: {suggestion}?" if suggestion else f"Columns: {', '.join(map(str, df.columns))}."
        raise CLIError(f"Column '{column}' not found in {data_file}.", hint)

    times = pd.to_datetime(df[column], utc=True, errors="coerce").dropna()
    if times.empty:
        raise CLIError(f"Column '{column}' in {data_file} holds no parseable dates.")
    dropped = len(df) - len(times)
    if dropped:
        logger.warning(f"Skipped {dropped} row(s) of {data_file} with unparseable dates")
    return times


def build_parser() -> FriendlyArgumentParser:
    parser = FriendlyArgumentParser(
        prog="tickaxis",
        description="Choose gridlines and tick labels for a horizontal time axis.",
        epilog="""
Examples:
  %(prog)s --start 2000-01-01 --end 2010-01-01 --width 1000
  %(prog)s --start 2000-01-01 --end 2000-03-01 --width 400 --reversed
  %(prog)s --start 2000-01-01 --end 2002-02-01 --width 500 --mode decorations --granularity month
  %(prog)s --data readings.csv --column time --width 800
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    window_group = parser.add_argument_group("axis window")
    window_group.add_argument("--start", type=str, default=None, help="First value on the axis (e.g. 2000-01-01)")
    window_group.add_argument("--end", type=str, default=None, help="Last value on the axis (e.g. 2010-01-01)")
    window_group.add_argument(
        "--data",
        type=Path,
        default=None,
        help="CSV file whose time column supplies the window and data granularity",
    )
    window_group.add_argument("--column", type=str, default=None, help="Time column in --data (default: first column)")
    window_group.add_argument("-w", "--width", type=float, default=None, help="Axis length in pixels")
    window_group.add_argument("--reversed", action="store_true", help="Lay the axis out right to left")

    layout_group = parser.add_argument_group("layout options")
    layout_group.add_argument(
        "--mode",
        choices=VALID_MODES,
        default="gridlines",
        help="'gridlines' searches round gridlines and dilutes labels; 'decorations' labels start of periods",
    )
    layout_group.add_argument(
        "--granularity",
        type=str,
        default=None,
        help=f"Data granularity ({', '.join(GRANULARITY_CHOICES)})",
    )
    layout_group.add_argument(
        "--ticks",
        type=str,
        default=None,
        help="Comma-separated explicit tick dates; skips the gridline search",
    )
    layout_group.add_argument("--font-size", type=float, default=None, help="Tick label font size (default from config)")
    layout_group.add_argument(
        "--char-width",
        type=float,
        default=7,
        help="Character width in pixels for --measure fixed (default: 7)",
    )
    layout_group.add_argument(
        "--measure",
        choices=VALID_MEASURES,
        default="fixed",
        help="Text measurement: fixed-width approximation or matplotlib font metrics",
    )
    layout_group.add_argument("--title", type=str, default=None, help="Axis title")
    layout_group.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to config YAML file (default: {DEFAULT_CONFIG_PATH}; built-in defaults if absent)",
    )

    output_group = parser.add_argument_group("output options")
    output_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress console output except errors (log file unaffected)"
    )
    output_group.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose console output (DEBUG level, log file always at DEBUG)"
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments for tickaxis.

    Returns:
        argparse.Namespace: Parsed arguments with ``start``/``end`` converted to
        UTC datetimes, ``granularity`` to a TimeUnit and ``ticks`` to a list.
    """
    args = build_parser().parse_args(argv)

    if args.verbose and args.quiet:
        raise CLIError("--verbose and --quiet cannot be combined.", "Pick one of -v or -q.")
    if args.width is None:
        raise CLIError("--width is required.", "Give the axis length in pixels, for example: --width 1000.")
    if args.width <= 0:
        raise CLIError(f"Invalid --width: {args.width:g}.", "The axis length must be a positive number of pixels.")
    if args.char_width <= 0:
        raise CLIError(f"Invalid --char-width: {args.char_width:g}.", "Use a positive pixel width, for example: --char-width 7.")
    if args.font_size is not None and args.font_size <= 0:
        raise CLIError(f"Invalid --font-size: {args.font_size:g}.", "Use a positive font size, for example: --font-size 12.")

    args.data_times = None
    if args.data is not None:
        args.data_times = load_data_times(args.data, args.column)
    elif args.column is not None:
        raise CLIError("--column needs --data.", "Pass the CSV file with --data.")

    if args.start is None and args.data_times is None:
        raise CLIError("--start is required.", "Use --start 2000-01-01, or pass --data to take the window from a file.")
    if args.end is None and args.data_times is None:
        raise CLIError("--end is required.", "Use --end 2010-01-01, or pass --data to take the window from a file.")

    args.start = parse_timestamp(args.start, "--start") if args.start is not None else args.data_times.min().to_pydatetime()
    args.end = parse_timestamp(args.end, "--end") if args.end is not None else args.data_times.max().to_pydatetime()
    if args.end < args.start:
        raise CLIError(
            f"--end ({args.end:%Y-%m-%d %H:%M:%S}) is before --start ({args.start:%Y-%m-%d %H:%M:%S}).",
            "Swap the values, or use --reversed to draw the axis right to left.",
        )

    args.granularity = parse_granularity(args.granularity)
    args.ticks = parse_tick_list(args.ticks)
    if args.ticks is not None and args.mode == "decorations":
        raise CLIError("--ticks only applies to --mode gridlines.")
    return args


def build_window(args: argparse.Namespace) -> ViewWindow:
    """ViewWindow for the parsed window; granularity from --granularity, else from --data."""
    if args.granularity is not None:
        granularity = args.granularity.millis
    elif args.data_times is not None:
        granularity = infer_data_granularity(args.data_times)
    else:
        granularity = 0
    return ViewWindow(datetime_to_millis(args.start), datetime_to_millis(args.end), data_granularity=granularity)


def build_overrides(args: argparse.Namespace) -> dict:
    """Config sections set from CLI flags, layered over config.yaml."""
    axis = {}
    if args.font_size is not None:
        axis["font_size"] = args.font_size
    if args.title is not None:
        axis["title"] = args.title
    return {"axis": axis} if axis else {}


def resolve_config_path(config_path: Path) -> Path | None:
    """Return ``config_path``, or ``None`` for built-in defaults when the default file is absent."""
    if config_path.exists():
        return config_path
    if config_path == DEFAULT_CONFIG_PATH:
        logger.debug(f"{config_path} not found; using built-in defaults")
        return None
    raise CLIError(f"Config file not found: {config_path}", "Check the --config path, or omit it to use defaults.")


def load_layout_config(args: argparse.Namespace) -> AxisLayoutConfig:
    return AxisConfigService(resolve_config_path(args.config), build_overrides(args)).load_layout_config()


def build_measurer(args: argparse.Namespace) -> TextMeasurer:
    if args.measure == "matplotlib":
        return MatplotlibTextMeasurer()
    return FixedFontMeasurer(args.char_width)


def _timestamp(value) -> pd.Timestamp | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return pd.Timestamp(value)
    return pd.Timestamp(value, unit="ms", tz="UTC")


def result_frame(result: AxisLayoutResult) -> pd.DataFrame:
    """One row per tick label of ``result``, hidden ones included."""
    rows = [
        {
            "value": _timestamp(tick.data_value),
            "coordinate": tick.coordinate,
            "label": tick.text,
            "visible": tick.is_visible and bool(tick.text_block is not None and tick.text_block.lines),
            "optional": tick.optional,
        }
        for tick in result.ticks
    ]
    return pd.DataFrame(rows, columns=GRIDLINE_COLUMNS)


def decorations_frame(decorations: list[AxisDecoration]) -> pd.DataFrame:
    rows = [
        {
            "value": _timestamp(decoration.value),
            "position": decoration.position,
            "label": decoration.label or "",
            "line": decoration.has_line,
            "tick": decoration.has_tick,
            "heavy": decoration.is_tick_heavy,
            "alignment": decoration.alignment.value,
        }
        for decoration in decorations
    ]
    return pd.DataFrame(rows, columns=DECORATION_COLUMNS)


def format_outcome(result: AxisLayoutResult) -> str:
    """Single summary line describing how the layout ended."""
    parts = [f"outcome={result.outcome.value}"]
    if result.unit is not None:
        parts.append(f"unit={result.unit}")
    if result.multiple is not None:
        parts.append(f"multiple={result.multiple}")
    parts.append(f"gridlines={len(result.gridlines)}")
    parts.append(f"labels={len(result.labels)}")
    parts.append(f"skip={result.skip}")
    parts.append(f"alternation={result.alternation}")
    if result.slanted:
        parts.append("slanted")
    parts.append(f"attempts={result.attempts}")
    return " ".join(parts)
