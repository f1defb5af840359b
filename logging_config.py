"""Centralized logging configuration for tickaxis.

Reads logging configuration from config.yaml.
"""

import logging
import sys
from pathlib import Path

import yaml


DEFAULT_LOGGING_SETTINGS = {
    'log_file': 'tickaxis.log',
    'console_level': 'WARNING',
    'file_mode': 'w',
    'quiet_matplotlib': True,
    'suppress_root_logger': True,
    'third_party_log_level': 'WARNING',
}

# Font discovery in matplotlib logs heavily at DEBUG/INFO.
_MATPLOTLIB_LOGGER_NAMES = (
    'matplotlib',
    'matplotlib.font_manager',
    'PIL',
)


def quiet_matplotlib(level: int = logging.WARNING) -> None:
    """Raise matplotlib's logger levels so font lookups stay out of the console and log file."""
    for logger_name in _MATPLOTLIB_LOGGER_NAMES:
        logging.getLogger(logger_name).setLevel(level)


def _load_logging_settings(config_path: Path | None) -> dict:
    """Load and validate logging settings from config.yaml."""
    config = {}
    if config_path is not None:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f) or {}

    logging_config = config.get('logging', {}) if isinstance(config, dict) else None
    if logging_config is None:
        logging_config = {}
    if not isinstance(logging_config, dict):
        raise ValueError(f"Invalid logging section in {config_path}; expected mapping.")

    unknown = sorted(key for key in logging_config if key not in DEFAULT_LOGGING_SETTINGS)
    if unknown:
        raise ValueError(f"Unknown logging keys in {config_path}: {', '.join(map(str, unknown))}")

    settings = DEFAULT_LOGGING_SETTINGS.copy()
    settings.update(logging_config)

    console_level = str(settings['console_level']).upper()
    if not isinstance(getattr(logging, console_level, None), int):
        raise ValueError(f"Invalid logging.console_level '{settings['console_level']}'")
    settings['console_level'] = console_level

    third_party_level = str(settings['third_party_log_level']).upper()
    if not isinstance(getattr(logging, third_party_level, None), int):
        raise ValueError(f"Invalid logging.third_party_log_level '{settings['third_party_log_level']}'")
    settings['third_party_log_level'] = third_party_level

    if settings['file_mode'] not in ('w', 'a'):
        raise ValueError("logging.file_mode must be 'w' or 'a'")
    if not isinstance(settings['quiet_matplotlib'], bool):
        raise ValueError("logging.quiet_matplotlib must be boolean")
    if not isinstance(settings['suppress_root_logger'], bool):
        raise ValueError("logging.suppress_root_logger must be boolean")
    if settings['log_file'] is not None and (
        not isinstance(settings['log_file'], str) or not settings['log_file'].strip()
    ):
        raise ValueError("logging.log_file must be a non-empty string or null")

    return settings


def setup_logging(config_path: Path | None = Path("config.yaml")) -> logging.Logger:
    """
    Configure logging using settings from config.yaml.

    ``config_path=None`` uses the built-in defaults. Setting
    ``logging.log_file`` to null disables the file handler.

    Args:
        config_path: Path to the configuration YAML file.

    Returns:
        Configured logger instance.
    """
    settings = _load_logging_settings(config_path)
    log_file = settings['log_file']
    console_level = settings['console_level']

    # Create logger
    logger = logging.getLogger("tickaxis")
    logger.setLevel(logging.DEBUG)  # Capture everything

    # Avoid adding handlers multiple times if called repeatedly
    if logger.handlers:
        return logger

    # Create formatters
    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    simple_formatter = logging.Formatter(
        '%(levelname)s: %(message)s'
    )

    # File handler (DEBUG level - captures everything)
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode=settings['file_mode'], encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)

    # Console handler (WARNING level by default - only warnings and errors)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, console_level))
    console_handler.setFormatter(simple_formatter)
    logger.addHandler(console_handler)

    third_party_level = getattr(logging, settings['third_party_log_level'])
    if settings['quiet_matplotlib']:
        quiet_matplotlib(third_party_level)

    if settings['suppress_root_logger']:
        root_logger = logging.getLogger()
        root_logger.setLevel(third_party_level)

    return logger


def get_logger(name: str = "tickaxis") -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (default: "tickaxis").

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
