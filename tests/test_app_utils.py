import sys

import pytest

from sensorwatch.app_utils import Options, format_float, parse_arguments, usage_text


@pytest.fixture
def linux(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")


@pytest.fixture
def macos(monkeypatch):
    monkeypatch.setattr(sys, "platform", "darwin")


def test_default_port_on_linux_is_a_tty_device(linux):
    options = parse_arguments([])
    assert options.serial_port == "/dev/ttyUSB0"
    assert "tty" in options.serial_port
    assert options.use_tui is True
    assert options.legacy is False
    assert options.show_help is False


def test_default_port_on_macos(macos):
    assert parse_arguments([]).serial_port == "/dev/cu.usbserial"


def test_no_tui_flag(linux):
    assert parse_arguments(["--no-tui"]) == Options("/dev/ttyUSB0", use_tui=False)


def test_first_positional_is_port(linux):
    options = parse_arguments(["/dev/ttyUSB1", "/dev/ttyUSB2"])
    assert options.serial_port == "/dev/ttyUSB1"


def test_legacy_flag_and_port(linux):
    options = parse_arguments(["--legacy", "/dev/ttyACM0"])
    assert options.legacy is True
    assert options.serial_port == "/dev/ttyACM0"
    assert options.use_tui is True


def test_unknown_options_are_ignored(linux):
    assert parse_arguments(["-v", "--weird"]) == Options("/dev/ttyUSB0")


@pytest.mark.parametrize("flag", ["-h", "--help"])
def test_help_requested(linux, flag):
    assert parse_arguments(["--no-tui", flag]).show_help is True


def test_usage_text_mentions_program_and_default(linux):
    text = usage_text("prog")
    assert text.startswith("Usage: prog [options] [serial_port]\n")
    assert "serial_port: Serial port device (default: /dev/ttyUSB0)" in text
    assert "prog --legacy /dev/ttyUSB1  # Legacy TUI mode with custom port" in text


def test_usage_text_on_macos(macos):
    text = usage_text("prog")
    assert "(default: /dev/cu.usbserial)" in text
    assert "prog --legacy /dev/cu.usbserial-1" in text


def test_sample_readings_format():
    pm25 = 15.5
    pm10 = 20.3
    assert pm10 >= pm25
    assert format_float(pm25) == "15.5"
    assert format_float(pm10) == "20.3"


def test_format_float_keeps_one_decimal():
    assert format_float(5.0) == "5.0"
    assert format_float(0.0) == "0.0"


def test_format_float_strips_trailing_zeroes():
    assert format_float(1.5, 3) == "1.5"


def test_format_float_zero_precision_has_no_point():
    assert format_float(2.0, 0) == "2"