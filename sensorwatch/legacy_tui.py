"""Single-sensor curses display for SDS011 readings."""

from __future__ import annotations

import curses
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from .app_utils import format_float
from .sds011 import classify_pm25

MAX_READINGS = 100


@dataclass(frozen=True)
class SensorReading:
    """A PM2.5/PM10 pair with the local time it was taken."""

    pm25: float
    pm10: float
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class ReadingStats:
    """Average, minimum and maximum of a set of readings."""

    count: int
    avg_pm25: float
    min_pm25: float
    max_pm25: float
    avg_pm10: float
    min_pm10: float
    max_pm10: float


def summarize(readings: Iterable[SensorReading]) -> ReadingStats | None:
    """Statistics over ``readings``, or None when there are none."""
    items = list(readings)
    if not items:
        return None
    pm25 = [r.pm25 for r in items]
    pm10 = [r.pm10 for r in items]
    return ReadingStats(
        count=len(items),
        avg_pm25=sum(pm25) / len(items),
        min_pm25=min(pm25),
        max_pm25=max(pm25),
        avg_pm10=sum(pm10) / len(items),
        min_pm10=min(pm10),
        max_pm10=max(pm10),
    )


def _put(win, y: int, x: int, text: str, attr: int = 0) -> None:
    try:
        win.addstr(y, x, text, attr)
    except curses.error:
        # Text that runs past the window edge is simply cut off.
        pass


class SDS011TUI:
    """Curses display of recent readings, statistics and status."""

    def __init__(self) -> None:
        self.readings: deque[SensorReading] = deque(maxlen=MAX_READINGS)
        self._screen = None
        self._header = None
        self._data = None
        self._stats = None
        self._status = None
        self._max_y = 0
        self._max_x = 0
        self._colors = False

    def initialize(self) -> None:
        """Start curses and create the windows; raises curses.error on failure."""
        self._screen = curses.initscr()
        curses.cbreak()
        curses.noecho()
        self._screen.keypad(True)
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        self._screen.timeout(100)

        if curses.has_colors():
            curses.start_color()
            curses.init_pair(1, curses.COLOR_GREEN, curses.COLOR_BLACK)
            curses.init_pair(2, curses.COLOR_YELLOW, curses.COLOR_BLACK)
            curses.init_pair(3, curses.COLOR_RED, curses.COLOR_BLACK)
            curses.init_pair(4, curses.COLOR_CYAN, curses.COLOR_BLACK)
            curses.init_pair(5, curses.COLOR_WHITE, curses.COLOR_BLUE)
            self._colors = True

        self._max_y, self._max_x = self._screen.getmaxyx()
        self._create_windows()

    def _create_windows(self) -> None:
        self._header = curses.newwin(3, self._max_x, 0, 0)
        self._data = curses.newwin(self._max_y - 8, self._max_x, 3, 0)
        self._stats = curses.newwin(3, self._max_x // 2, self._max_y - 5, self._max_x // 2)
        self._status = curses.newwin(2, self._max_x, self._max_y - 2, 0)
        self._data.scrollok(True)
        for win in (self._header, self._data, self._stats, self._status):
            win.box()

    def _attr(self, pair: int, bold: bool = False) -> int:
        if not self._colors:
            return 0
        attr = curses.color_pair(pair)
        if bold:
            attr |= curses.A_BOLD
        return attr

    def cleanup(self) -> None:
        """Drop the windows and restore the terminal."""
        self._header = self._data = self._stats = self._status = None
        if self._screen is not None:
            self._screen = None
            curses.endwin()

    def draw_header(self, port: str) -> None:
        """Draw the title and the port in use."""
        win = self._header
        if win is None:
            return
        win.erase()
        win.box()
        attr = self._attr(4, bold=True)
        _put(win, 1, 2, "SDS011 PM2.5 Sensor Reader - TUI Mode", attr)
        _put(win, 2, 2, f"Port: {port} | Press 'q' to quit, 'c' to clear data", attr)
        win.refresh()

    def add_reading(self, pm25: float, pm10: float) -> None:
        """Store a reading, keeping the latest hundred, and redraw."""
        self.readings.append(SensorReading(pm25, pm10))
        self._redraw()

    def _redraw(self) -> None:
        self._update_data_window()
        self._update_stats_window()
        self._update_status_window()

    def _update_data_window(self) -> None:
        win = self._data
        if win is None:
            return
        win.erase()
        win.box()
        head = self._attr(4, bold=True)
        _put(win, 1, 2, f"{'Time':<10} {'PM2.5':<12} {'PM10':<12} {'Quality':<8}", head)
        _put(win, 2, 2, "-" * max(self._max_x - 6, 0), head)

        max_lines = self._max_y - 11
        for line, reading in enumerate(reversed(self.readings), start=3):
            if line >= max_lines:
                break
            pair, quality = classify_pm25(reading.pm25)
            row = (
                f"{reading.timestamp:%H:%M:%S}   "
                f"{format_float(reading.pm25):<8}      "
                f"{format_float(reading.pm10):<8}      "
                f"{quality:<8}"
            )
            _put(win, line, 2, row, self._attr(pair))
        win.refresh()

    def _update_stats_window(self) -> None:
        win = self._stats
        stats = summarize(self.readings)
        if win is None or stats is None:
            return
        win.erase()
        win.box()
        _put(win, 0, 2, f"Statistics (last {stats.count} readings)", self._attr(4, bold=True))
        _put(
            win, 1, 2,
            f"PM2.5: Avg {format_float(stats.avg_pm25)} "
            f"Min {format_float(stats.min_pm25)} Max {format_float(stats.max_pm25)}",
        )
        _put(
            win, 2, 2,
            f"PM10:  Avg {format_float(stats.avg_pm10)} "
            f"Min {format_float(stats.min_pm10)} Max {format_float(stats.max_pm10)}",
        )
        win.refresh()

    def _update_status_window(self) -> None:
        win = self._status
        if win is None:
            return
        win.erase()
        win.box()
        text = (
            f"Status: Running | Last update: {datetime.now():%H:%M:%S} "
            f"| Total readings: {len(self.readings)}"
        )
        _put(win, 1, 2, text, self._attr(5))
        win.refresh()

    def show_error(self, message: str) -> None:
        """Show an error in the status bar."""
        win = self._status
        if win is None:
            return
        win.erase()
        win.box()
        _put(win, 1, 2, f"ERROR: {message}", self._attr(3, bold=True))
        win.refresh()

    def clear_data(self) -> None:
        """Forget all readings and redraw."""
        self.readings.clear()
        self._redraw()

    def handle_input(self) -> bool:
        """Process one key press; return True when the user asked to quit."""
        if self._screen is None:
            return False
        ch = self._screen.getch()
        if ch in (ord("q"), ord("Q")):
            return True
        if ch in (ord("c"), ord("C")):
            self.clear_data()
        elif ch == curses.KEY_RESIZE:
            self._max_y, self._max_x = self._screen.getmaxyx()
            try:
                self._header.resize(3, self._max_x)
                self._data.resize(self._max_y - 8, self._max_x)
                self._stats.resize(3, self._max_x // 2)
                self._stats.mvwin(self._max_y - 5, self._max_x // 2)
                self._status.resize(2, self._max_x)
                self._status.mvwin(self._max_y - 2, 0)
            except curses.error:
                pass
            self._redraw()
        return False