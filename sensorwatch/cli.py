"""Command-line entry point: interactive monitor, legacy display or console output."""

from __future__ import annotations

import curses
import os
import signal
import sys
import threading
import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime

from .app_utils import format_float, parse_arguments, usage_text
from .interactive import InteractiveTUI
from .legacy_tui import SDS011TUI
from .reader import SDS011Reader

_CONSOLE_DELAY = 2.0
_TUI_DELAY = 0.5
_RULE = "-" * 44

_stop_requested = threading.Event()


def _request_stop(signum: int, frame: object) -> None:
    _stop_requested.set()


@contextmanager
def _shutdown_signals() -> Iterator[None]:
    """Let SIGINT and SIGTERM ask the reading loops to stop."""
    _stop_requested.clear()
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = {
        sig: signal.signal(sig, _request_stop) for sig in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def run_console_mode(reader: SDS011Reader, serial_port: str) -> None:
    """Print readings as lines of text until interrupted."""
    print("SDS011 PM2.5 Sensor Reader - Console Mode")
    print("==========================================")
    print("Product model: SDS011 V1.3")
    print(f"Serial port: {serial_port}")
    print("Use --no-tui to disable TUI mode")
    print()
    print("Reading PM2.5 data (Press Ctrl+C to exit)...")
    print()
    print(f"{'Timestamp':>20}{'PM2.5 (µg/m³)':>12}{'PM10 (µg/m³)':>12}")
    print(_RULE)

    count = 0
    try:
        while not _stop_requested.is_set():
            values = reader.read_pm_data()
            if values is not None:
                pm25, pm10 = values
                print(
                    f"{datetime.now():%H:%M:%S}"
                    f"{format_float(pm25):>12}{format_float(pm10):>12}",
                    flush=True,
                )
                count += 1
                if count % 10 == 0:
                    print()
                    print(f"Readings collected: {count}")
                    print(_RULE)
            else:
                print("Failed to read valid data from sensor", file=sys.stderr)
            # The sensor produces a new value about once a second.
            time.sleep(_CONSOLE_DELAY)
    except KeyboardInterrupt:
        pass


def run_tui_mode(reader: SDS011Reader, serial_port: str) -> None:
    """Show readings in the single-sensor display, or on the console if it cannot start."""
    tui = SDS011TUI()
    try:
        tui.initialize()
    except curses.error:
        tui.cleanup()
        print(
            "Failed to initialize TUI. Falling back to console mode.", file=sys.stderr
        )
        run_console_mode(reader, serial_port)
        return

    try:
        tui.draw_header(serial_port)
        while not _stop_requested.is_set():
            values = reader.read_pm_data()
            if values is not None:
                tui.add_reading(*values)
            else:
                tui.show_error("Failed to read valid data from sensor")
            if tui.handle_input():
                break
            time.sleep(_TUI_DELAY)
    except KeyboardInterrupt:
        pass
    finally:
        tui.cleanup()


def _program_name() -> str:
    return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "sensorwatch"


def main(argv: Sequence[str] | None = None) -> int:
    """Run the sensor monitor; return the process exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    options = parse_arguments(args)
    if options.show_help:
        print(usage_text(_program_name()), end="")
        return 0

    with _shutdown_signals():
        if not options.legacy and options.use_tui:
            print("Initializing interactive TUI...")
            interactive = InteractiveTUI()
            try:
                interactive.initialize()
            except curses.error:
                interactive.cleanup()
                print(
                    "Failed to initialize interactive TUI. Falling back to legacy mode.",
                    file=sys.stderr,
                )
            else:
                try:
                    interactive.run()
                except KeyboardInterrupt:
                    pass
                finally:
                    interactive.cleanup()
                return 0

        print("Starting in legacy mode...")
        reader = SDS011Reader(options.serial_port)
        try:
            reader.initialize()
        except OSError:
            print("Failed to initialize sensor. Please check:", file=sys.stderr)
            print("  - Serial port exists and is accessible", file=sys.stderr)
            print("  - User has permission to access the port", file=sys.stderr)
            print("  - SDS011 sensor is connected and powered on", file=sys.stderr)
            return 1

        with reader:
            if options.use_tui:
                run_tui_mode(reader, options.serial_port)
            else:
                run_console_mode(reader, options.serial_port)
    return 0


if __name__ == "__main__":
    sys.exit(main())