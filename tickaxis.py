"""
tickaxis: gridline and tick label layout for horizontal time axes.

Main entry point. Parses the command line, loads the layout configuration,
runs the gridline search (or the start-of-period decoration supplier) and
prints the resulting ticks as a table.
"""

import logging
import sys

import pandas as pd

from cli import (
    CLIError,
    build_measurer,
    build_window,
    decorations_frame,
    format_outcome,
    load_layout_config,
    parse_args,
    resolve_config_path,
    result_frame,
)
from logging_config import setup_logging, get_logger
from tick_layout.orchestrator import AxisTickOrchestrator


def _configure_console_logging(args, logger) -> None:
    """Apply console verbosity rules based on CLI flags."""
    app_logger = logging.getLogger("tickaxis")
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        return
    for handler in app_logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(level)
    if args.verbose:
        logger.debug("Verbose mode enabled (console output at DEBUG level)")


def run_layout(args) -> int:
    """Lay out the axis described by ``args`` and print the result."""
    logger = get_logger("tickaxis")
    config = load_layout_config(args)
    orchestrator = AxisTickOrchestrator(config, build_measurer(args))
    window = build_window(args)
    logger.info(
        f"Laying out {args.start:%Y-%m-%d %H:%M:%S} to {args.end:%Y-%m-%d %H:%M:%S} "
        f"over {args.width:g}px ({args.mode})"
    )

    with pd.option_context("display.max_rows", None, "display.width", 200):
        if args.mode == "decorations":
            decorations = orchestrator.decorate(window, 0, args.width, args.reversed, args.granularity)
            frame = decorations_frame(decorations)
            print(frame.to_string(index=False) if not frame.empty else "(no decorations)")
            print(f"decorations={len(decorations)} labels={int((frame['label'] != '').sum())}")
            return 0

        result = orchestrator.layout(window, 0, args.width, args.reversed, explicit_ticks=args.ticks)
        frame = result_frame(result)
        print(frame.to_string(index=False) if not frame.empty else "(no tick labels)")
        print(format_outcome(result))
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for tickaxis.

    Returns:
        int: 0 on success, 2 on command-line errors, 1 on configuration errors.
    """
    try:
        args = parse_args(argv)
        config_path = resolve_config_path(args.config)
    except CLIError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    # Initialize logging
    try:
        setup_logging(config_path)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    logger = get_logger("tickaxis")  # Use explicit name, not __name__

    # Handle verbose/quiet flags for console output
    _configure_console_logging(args, logger)

    try:
        return run_layout(args)
    except CLIError as e:
        logger.error(str(e))
        return 2
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
