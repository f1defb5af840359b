"""
End-to-end tests for the tickaxis entry point.
"""
import logging

import pytest

import tickaxis


@pytest.fixture(autouse=True)
def isolated_run(tmp_path, monkeypatch):
    """Run from an empty directory so the default config is absent and the log lands in tmp_path."""
    monkeypatch.chdir(tmp_path)
    logger = logging.getLogger("tickaxis")
    root_level = logging.getLogger().level
    logger.handlers.clear()
    yield
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logging.getLogger().setLevel(root_level)


def test_main_prints_yearly_labels(capsys):
    exit_code = tickaxis.main(["--start", "2000-01-01", "--end", "2010-01-01", "--width", "1000", "--char-width", "8"])
    out = capsys.readouterr().out
    assert exit_code == 0
    assert "coordinate" in out
    assert "2005" in out
    assert "outcome=ok" in out


def test_main_reversed_axis(capsys):
    exit_code = tickaxis.main(
        ["--start", "2000-01-01", "--end", "2010-01-01", "--width", "1000", "--reversed"]
    )
    assert exit_code == 0
    assert "outcome=ok" in capsys.readouterr().out


def test_main_decorations_mode(capsys):
    exit_code = tickaxis.main(
        [
            "--start", "2000-01-01", "--end", "2010-01-01", "--width", "1000",
            "--mode", "decorations", "--granularity", "year", "--char-width", "8",
        ]
    )
    out = capsys.readouterr().out
    assert exit_code == 0
    assert "alignment" in out
    assert "decorations=" in out


def test_main_explicit_ticks(capsys):
    exit_code = tickaxis.main(
        [
            "--start", "2000-01-01", "--end", "2010-01-01", "--width", "1000",
            "--ticks", "2002-01-01,2005-01-01",
        ]
    )
    out = capsys.readouterr().out
    assert exit_code == 0
    assert "2002" in out
    assert "2005" in out


def test_main_too_narrow_axis_still_succeeds(capsys):
    exit_code = tickaxis.main(["--start", "2000-01-01", "--end", "2000-02-01", "--width", "5", "-q"])
    out = capsys.readouterr().out
    assert exit_code == 0
    assert "outcome=ok" not in out


def test_main_cli_error_returns_2(capsys):
    exit_code = tickaxis.main(["--start", "2010-01-01", "--end", "2000-01-01", "--width", "100"])
    err = capsys.readouterr().err
    assert exit_code == 2
    assert "ERROR:" in err
    assert "Hint:" in err


def test_main_missing_explicit_config_returns_2(tmp_path):
    exit_code = tickaxis.main(
        ["--start", "2000-01-01", "--end", "2010-01-01", "--width", "100", "--config", str(tmp_path / "nope.yaml")]
    )
    assert exit_code == 2


def test_main_invalid_layout_config_returns_1(tmp_path, capsys):
    config_file = tmp_path / "bad.yaml"
    config_file.write_text("logging:\n  log_file: null\naxis:\n  font_size: -3\n")
    exit_code = tickaxis.main(
        ["--start", "2000-01-01", "--end", "2010-01-01", "--width", "100", "--config", str(config_file)]
    )
    assert exit_code == 1
    assert "axis.font_size" in capsys.readouterr().out


def test_main_invalid_logging_config_returns_1(tmp_path, capsys):
    config_file = tmp_path / "bad.yaml"
    config_file.write_text("logging:\n  file_mode: x\n")
    exit_code = tickaxis.main(
        ["--start", "2000-01-01", "--end", "2010-01-01", "--width", "100", "--config", str(config_file)]
    )
    assert exit_code == 1
    assert "file_mode" in capsys.readouterr().err
