"""
Tests for logging_config module (logging configuration).
"""
import pytest
import logging
from logging_config import setup_logging, get_logger, quiet_matplotlib


@pytest.fixture(autouse=True)
def clean_tickaxis_logger():
    logger = logging.getLogger("tickaxis")
    root_level = logging.getLogger().level
    logger.handlers.clear()
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logging.getLogger().setLevel(root_level)


def write_config(tmp_path, body):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(body)
    return config_file


def console_handlers(logger):
    return [h for h in logger.handlers if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)]


def test_setup_logging_default(tmp_path, monkeypatch):
    """Test setup_logging with a logging section."""
    monkeypatch.chdir(tmp_path)
    config_file = write_config(tmp_path, """
logging:
  log_file: test.log
  console_level: WARNING
axis:
  font_size: 12
""")

    result = setup_logging(config_file)

    assert result.name == "tickaxis"
    assert result.level == logging.DEBUG
    assert len(result.handlers) == 2  # File and console handlers


def test_setup_logging_missing_config_section(tmp_path, monkeypatch):
    """Test setup_logging when logging section is missing (uses defaults)."""
    monkeypatch.chdir(tmp_path)
    config_file = write_config(tmp_path, "axis:\n  font_size: 12\n")

    result = setup_logging(config_file)

    assert len(result.handlers) == 2
    assert console_handlers(result)[0].level == logging.WARNING
    assert (tmp_path / "tickaxis.log").exists()


def test_setup_logging_without_config_file_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = setup_logging(None)
    assert len(result.handlers) == 2


def test_setup_logging_null_log_file_skips_file_handler(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config_file = write_config(tmp_path, "logging:\n  log_file: null\n")

    result = setup_logging(config_file)

    assert not any(isinstance(h, logging.FileHandler) for h in result.handlers)
    assert len(console_handlers(result)) == 1


def test_setup_logging_creates_log_file(tmp_path, monkeypatch):
    """Test that setup_logging creates the log file."""
    monkeypatch.chdir(tmp_path)
    config_file = write_config(tmp_path, """
logging:
  log_file: test_output.log
  console_level: WARNING
""")

    logger = setup_logging(config_file)
    logger.info("Test message")

    assert (tmp_path / "test_output.log").exists()


def test_setup_logging_prevents_duplicate_handlers(tmp_path, monkeypatch):
    """Test that calling setup_logging multiple times doesn't add duplicate handlers."""
    monkeypatch.chdir(tmp_path)
    config_file = write_config(tmp_path, "logging:\n  log_file: test.log\n")

    logger = setup_logging(config_file)
    handler_count_1 = len(logger.handlers)
    setup_logging(config_file)

    assert len(logger.handlers) == handler_count_1


@pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "info"])
def test_setup_logging_console_handler_level(tmp_path, monkeypatch, level):
    """Test different console logging levels."""
    monkeypatch.chdir(tmp_path)
    config_file = write_config(tmp_path, f"""
logging:
  log_file: test.log
  console_level: {level}
""")

    result = setup_logging(config_file)

    assert console_handlers(result)[0].level == getattr(logging, level.upper())
    file_handler = [h for h in result.handlers if isinstance(h, logging.FileHandler)][0]
    assert file_handler.level == logging.DEBUG


def test_setup_logging_log_format(tmp_path, monkeypatch):
    """Test that log formatters are correctly configured."""
    monkeypatch.chdir(tmp_path)
    config_file = write_config(tmp_path, "logging:\n  log_file: test.log\n")

    result = setup_logging(config_file)

    file_handler = [h for h in result.handlers if isinstance(h, logging.FileHandler)][0]
    assert "asctime" in file_handler.formatter._fmt
    assert console_handlers(result)[0].formatter._fmt == "%(levelname)s: %(message)s"


def test_setup_logging_missing_file(tmp_path):
    """Test setup_logging with missing config file."""
    with pytest.raises(FileNotFoundError):
        setup_logging(tmp_path / "nonexistent.yaml")


def test_setup_logging_append_mode_preserves_existing_file(tmp_path, monkeypatch):
    """Test that file_mode=append keeps existing log content."""
    monkeypatch.chdir(tmp_path)
    config_file = write_config(tmp_path, """
logging:
  log_file: append.log
  console_level: WARNING
  file_mode: a
""")
    log_file = tmp_path / "append.log"
    log_file.write_text("existing line\n")

    logger = setup_logging(config_file)
    logger.info("new line")
    for handler in logger.handlers:
        handler.flush()

    content = log_file.read_text()
    assert "existing line" in content
    assert "new line" in content


def test_setup_logging_quiets_matplotlib(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config_file = write_config(tmp_path, """
logging:
  log_file: test.log
  third_party_log_level: error
""")
    mpl_logger = logging.getLogger("matplotlib.font_manager")
    original_level = mpl_logger.level
    try:
        setup_logging(config_file)
        assert mpl_logger.level == logging.ERROR
        assert logging.getLogger().level == logging.ERROR
    finally:
        mpl_logger.setLevel(original_level)


def test_setup_logging_no_third_party_suppression(tmp_path, monkeypatch):
    """Test disabling matplotlib/root suppression toggles."""
    monkeypatch.chdir(tmp_path)
    config_file = write_config(tmp_path, """
logging:
  log_file: test.log
  quiet_matplotlib: false
  suppress_root_logger: false
  third_party_log_level: CRITICAL
""")
    root_logger = logging.getLogger()
    original_root_level = root_logger.level
    mpl_logger = logging.getLogger("matplotlib")
    original_mpl_level = mpl_logger.level

    setup_logging(config_file)

    assert root_logger.level == original_root_level
    assert mpl_logger.level == original_mpl_level


def test_quiet_matplotlib_sets_levels():
    loggers = [logging.getLogger(name) for name in ("matplotlib", "matplotlib.font_manager", "PIL")]
    original = [logger.level for logger in loggers]
    try:
        quiet_matplotlib(logging.ERROR)
        assert all(logger.level == logging.ERROR for logger in loggers)
    finally:
        for logger, level in zip(loggers, original):
            logger.setLevel(level)


@pytest.mark.parametrize(
    "body",
    [
        "logging:\n  file_mode: invalid\n",
        "logging:\n  console_level: LOUD\n",
        "logging:\n  third_party_log_level: basic_format\n",
        "logging:\n  quiet_matplotlib: sometimes\n",
        "logging:\n  suppress_root_logger: 1\n",
        "logging:\n  log_file: '  '\n",
        "logging:\n  suppress_cdsapi: true\n",
        "logging: [1, 2]\n",
    ],
)
def test_setup_logging_invalid_settings_raise(tmp_path, body):
    """Invalid logging settings fail fast."""
    config_file = write_config(tmp_path, body)
    with pytest.raises(ValueError):
        setup_logging(config_file)


def test_get_logger():
    """Test get_logger function."""
    assert get_logger().name == "tickaxis"
    assert get_logger("custom").name == "custom"
