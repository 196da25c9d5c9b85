"""Command-line option parsing, usage text and number formatting."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from dataclasses import dataclass

_MACOS_DEFAULT_PORT = "/dev/cu.usbserial"
_LINUX_DEFAULT_PORT = "/dev/ttyUSB0"


def _is_macos() -> bool:
    return sys.platform == "darwin"


def _default_port() -> str:
    return _MACOS_DEFAULT_PORT if _is_macos() else _LINUX_DEFAULT_PORT


@dataclass(frozen=True)
class Options:
    """Settings taken from the command line."""

    serial_port: str
    use_tui: bool = True
    legacy: bool = False
    show_help: bool = False


def format_float(value: float, max_precision: int = 1) -> str:
    """Format ``value`` with fixed precision, dropping trailing zeroes.

    At least one decimal place is kept whenever a decimal point is printed.
    """
    text = f"{value:.{max_precision}f}"
    if "." in text:
        text = text.rstrip("0")
        if text.endswith("."):
            text += "0"
    return text


def usage_text(program_name: str) -> str:
    """Return the help text shown for ``-h`` / ``--help``."""
    if _is_macos():
        custom_port_example = f"    {program_name} --legacy /dev/cu.usbserial-1  # Legacy TUI mode with custom port"
    else:
        custom_port_example = f"    {program_name} --legacy /dev/ttyUSB1  # Legacy TUI mode with custom port"
    lines = [
        f"Usage: {program_name} [options] [serial_port]",
        "  Options:",
        "    --no-tui    Disable TUI mode and use console output",
        "    --legacy    Use legacy single-sensor mode instead of interactive",
        "    -h, --help  Show this help message",
        f"  serial_port: Serial port device (default: {_default_port()})",
        "",
        "  Interactive Mode Controls:",
        "    ^v         Navigate sensor list (up/down arrows)",
        "    Enter      Connect to selected sensor",
        "    r          Refresh sensor list",
        "    b          Back to sensor selection",
        "    c          Clear collected data",
        "    q          Quit the program",
        "",
        "  Examples:",
        f"    {program_name}                    # Interactive mode (default)",
        f"    {program_name} --legacy           # Legacy TUI mode with default port",
        custom_port_example,
        f"    {program_name} --no-tui           # Console mode with default port",
    ]
    return "\n".join(lines) + "\n"


def parse_arguments(argv: Sequence[str]) -> Options:
    """Parse command-line arguments (without the program name).

    The first argument that does not start with ``-`` is the serial port;
    unknown options are ignored. A help flag stops parsing and sets
    ``show_help``.
    """
    serial_port = _default_port()
    use_tui = True
    legacy = False
    found_port = False

    for arg in argv:
        if arg in ("-h", "--help"):
            return Options(serial_port, use_tui, legacy, show_help=True)
        if arg == "--no-tui":
            use_tui = False
        elif arg == "--legacy":
            legacy = True
        elif not found_port and not arg.startswith("-"):
            serial_port = arg
            found_port = True

    return Options(serial_port, use_tui, legacy)