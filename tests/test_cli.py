import curses
from unittest.mock import patch

import pytest

from sensorwatch.cli import main, run_console_mode, run_tui_mode


class _ScriptedReader:
    """Returns the given results in turn, then raises KeyboardInterrupt."""

    def __init__(self, results):
        self.results = list(results)
        self.calls = 0

    def read_pm_data(self):
        self.calls += 1
        if not self.results:
            raise KeyboardInterrupt
        return self.results.pop(0)


@patch("sensorwatch.cli.time.sleep")
def test_console_mode_prints_readings_and_failures(sleep, capsys):
    reader = _ScriptedReader([(12.3, 45.6), None])
    run_console_mode(reader, "/dev/fake")
    out, err = capsys.readouterr()
    assert "Serial port: /dev/fake" in out
    assert "12.3" in out and "45.6" in out
    assert "Failed to read valid data from sensor" in err
    assert reader.calls == 3
    assert sleep.call_count == 2


@patch("sensorwatch.cli.time.sleep")
def test_console_mode_summarizes_every_ten_readings(sleep, capsys):
    run_console_mode(_ScriptedReader([(1.0, 2.0)] * 10), "/dev/fake")
    out, _ = capsys.readouterr()
    assert out.count("Readings collected: 10") == 1
    assert "Readings collected: 20" not in out


@patch("sensorwatch.cli.time.sleep")
def test_console_mode_trims_trailing_zeroes(sleep, capsys):
    run_console_mode(_ScriptedReader([(7.0, 20.5)]), "/dev/fake")
    out, _ = capsys.readouterr()
    row = [line for line in out.splitlines() if "20.5" in line][0]
    assert row.split()[1:] == ["7.0", "20.5"]


@patch("sensorwatch.cli.time.sleep")
@patch("curses.initscr", side_effect=curses.error("no terminal"))
def test_tui_mode_falls_back_to_console(initscr, sleep, capsys):
    reader = _ScriptedReader([(3.0, 4.0)])
    run_tui_mode(reader, "/dev/fake")
    out, err = capsys.readouterr()
    assert "Falling back to console mode" in err
    assert "Console Mode" in out


def test_help_prints_usage(capsys):
    assert main(["--help"]) == 0
    out, _ = capsys.readouterr()
    assert "--no-tui" in out
    assert "Usage:" in out


@pytest.mark.parametrize("flags", [["--legacy", "--no-tui"], ["--legacy"]])
def test_missing_port_fails_in_legacy_mode(flags, tmp_path, capsys):
    port = str(tmp_path / "no-such-port")
    assert main([*flags, port]) == 1
    out, err = capsys.readouterr()
    assert "Starting in legacy mode..." in out
    assert "Failed to initialize sensor" in err