"""Interactive curses interface for choosing a sensor and watching its readings."""

from __future__ import annotations

import curses
import time
from collections import deque
from collections.abc import Iterable
from datetime import datetime

from .app_utils import format_float
from .registry import SensorInfo, SensorRegistry
from .sds011 import SDS011Data, SDS011Plugin
from .sensor_plugin import SensorData, SensorPlugin

MAX_READINGS = 100
_LOOP_DELAY = 0.1
_ENTER_KEYS = (ord("\n"), ord("\r"), curses.KEY_ENTER)


def available_sensors(sensors: Iterable[SensorInfo]) -> list[SensorInfo]:
    """Keep only the sensors that answered on their port, in order."""
    return [sensor for sensor in sensors if sensor.available]


def _put(win, y: int, x: int, text: str, attr: int = 0) -> None:
    try:
        win.addstr(y, x, text, attr)
    except curses.error:
        # Text that runs past the window edge is simply cut off.
        pass


def _statistics_lines(readings: Iterable[SensorData]) -> tuple[str, str] | None:
    """PM2.5 and PM10 summary lines, or None when the readings are not SDS011 data."""
    items = list(readings)
    if not items or not isinstance(items[0], SDS011Data):
        return None
    values = [item for item in items if isinstance(item, SDS011Data)]
    count = len(items)
    pm25 = [item.pm25 for item in values]
    pm10 = [item.pm10 for item in values]
    return (
        f"PM2.5: Avg {format_float(sum(pm25) / count)} "
        f"Min {format_float(min(pm25))} Max {format_float(max(pm25))}",
        f"PM10:  Avg {format_float(sum(pm10) / count)} "
        f"Min {format_float(min(pm10))} Max {format_float(max(pm10))}",
    )


class InteractiveTUI:
    """Menu of discovered sensors and a live view of the one selected."""

    def __init__(self, registry: SensorRegistry | None = None) -> None:
        if registry is None:
            registry = SensorRegistry()
            registry.register_plugin(SDS011Plugin())
        self.registry = registry
        self.current_sensor: SensorPlugin | None = None
        self.readings: deque[SensorData] = deque(maxlen=MAX_READINGS)
        self.in_sensor_mode = False
        self.selected_index = 0
        self._screen = None
        self._header = None
        self._menu = None
        self._data = None
        self._stats = None
        self._status = None
        self._max_y = 0
        self._max_x = 0
        self._colors = False

    # ----------------------------------------------------------------- setup

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
            curses.init_pair(6, curses.COLOR_MAGENTA, curses.COLOR_BLACK)
            self._colors = True

        self._max_y, self._max_x = self._screen.getmaxyx()
        self._create_windows()

    def _create_windows(self) -> None:
        if self._screen is None:
            return
        self._header = curses.newwin(3, self._max_x, 0, 0)
        if self.in_sensor_mode:
            self._data = curses.newwin(self._max_y - 8, self._max_x, 3, 0)
            self._stats = curses.newwin(
                3, self._max_x // 2, self._max_y - 5, self._max_x // 2
            )
            self._status = curses.newwin(2, self._max_x, self._max_y - 2, 0)
            self._data.scrollok(True)
            windows = (self._data, self._stats, self._status)
        else:
            self._menu = curses.newwin(self._max_y - 5, self._max_x, 3, 0)
            self._status = curses.newwin(2, self._max_x, self._max_y - 2, 0)
            windows = (self._menu, self._status)
        for win in (*windows, self._header):
            win.box()

    def _attr(self, pair: int, *extra: int) -> int:
        if not self._colors:
            return 0
        attr = curses.color_pair(pair)
        for flag in extra:
            attr |= flag
        return attr

    # ------------------------------------------------------------- main loop

    def run(self) -> None:
        """Alternate between the menu and the sensor view until the user quits."""
        while True:
            if self.in_sensor_mode and self.current_sensor is not None:
                self._show_sensor_data()
                if self._handle_sensor_key(self._read_key()):
                    break
                if self.current_sensor is not None:
                    data = self.current_sensor.read_data()
                    if data is not None:
                        self.add_reading(data)
            else:
                self._show_sensor_menu()
                if self._handle_menu_key(self._read_key()):
                    break
            if self._screen is not None:
                self._screen.refresh()
            time.sleep(_LOOP_DELAY)

    def _read_key(self) -> int:
        if self._screen is None:
            return -1
        return self._screen.getch()

    # ------------------------------------------------------------------ menu

    def _show_sensor_menu(self) -> None:
        if self.in_sensor_mode:
            self.in_sensor_mode = False
            self._data = self._stats = None
            self._create_windows()

        header = self._header
        if header is not None:
            header.erase()
            header.box()
            attr = self._attr(4, curses.A_BOLD)
            _put(header, 1, 2, "Interactive Sensor Monitor - Sensor Selection", attr)
            _put(
                header, 2, 2,
                "Use arrow keys (^v) to select, Enter to connect, 'q' to quit, 'r' to refresh",
                attr,
            )
            header.refresh()

        menu = self._menu
        if menu is not None:
            menu.erase()
            menu.box()
            _put(menu, 1, 2, "Scanning for sensors...", self._attr(4, curses.A_BOLD))
            menu.refresh()

        sensors = available_sensors(self.registry.discover_sensors())

        if menu is not None:
            menu.erase()
            menu.box()
            head = self._attr(4, curses.A_BOLD)
            _put(menu, 1, 2, "Available Sensors:", head)
            _put(
                menu, 2, 2,
                f"{'Port':<15} {'Type':<10} {'Description':<40} Status",
                head,
            )
            _put(menu, 3, 2, "-" * max(self._max_x - 6, 0), head)

            if not sensors:
                _put(
                    menu, 4, 2,
                    "No sensors detected. Check connections and permissions.",
                    self._attr(3),
                )
            else:
                self.selected_index = max(0, min(self.selected_index, len(sensors) - 1))
                for line, (index, sensor) in enumerate(enumerate(sensors), start=4):
                    if line >= self._max_y - 7:
                        break
                    if index == self.selected_index:
                        row = (
                            f"> {sensor.port:<13} {sensor.type:<10} "
                            f"{sensor.description:<38} Connected"
                        )
                        _put(menu, line, 2, row, self._attr(6, curses.A_REVERSE))
                    else:
                        row = (
                            f"  {sensor.port:<13} {sensor.type:<10} "
                            f"{sensor.description:<38} Available"
                        )
                        _put(menu, line, 2, row)
            menu.refresh()

        status = self._status
        if status is not None:
            status.erase()
            status.box()
            _put(
                status, 1, 2,
                f"Found {len(sensors)} available sensor(s) | "
                "Controls: ^v Navigate, Enter Select, R Refresh, Q Quit",
            )
            status.refresh()

    def _handle_menu_key(self, ch: int) -> bool:
        """React to a key in the menu; return True when the user asked to quit."""
        if ch in (ord("q"), ord("Q")):
            return True
        if ch == curses.KEY_UP:
            self.selected_index = max(0, self.selected_index - 1)
        elif ch == curses.KEY_DOWN:
            sensors = available_sensors(self.registry.discover_sensors())
            self.selected_index = min(self.selected_index + 1, len(sensors) - 1)
        elif ch in _ENTER_KEYS:
            sensors = available_sensors(self.registry.discover_sensors())
            if 0 <= self.selected_index < len(sensors):
                if self._select_sensor(sensors[self.selected_index]):
                    self.in_sensor_mode = True
                    self._menu = None
                    self._create_windows()
        # 'r' needs nothing: the menu is rescanned on every pass.
        return False

    def _select_sensor(self, info: SensorInfo) -> bool:
        plugin = self.registry.create_plugin(info.type)
        if plugin is None:
            self.current_sensor = None
            self.show_error("Failed to create sensor plugin")
            return False
        try:
            plugin.initialize(info.port)
        except OSError:
            plugin.cleanup()
            self.current_sensor = None
            self.show_error(f"Failed to initialize sensor at {info.port}")
            return False
        self.current_sensor = plugin
        self.clear_data()
        return True

    # ----------------------------------------------------------- sensor view

    def _show_sensor_data(self) -> None:
        sensor = self.current_sensor
        if sensor is None:
            return
        header = self._header
        if header is not None:
            header.erase()
            header.box()
            attr = self._attr(4, curses.A_BOLD)
            _put(header, 1, 2, f"{sensor.type_name} - {sensor.description}", attr)
            _put(
                header, 2, 2,
                f"Port: {sensor.current_port} | Press 'b' to go back, "
                "'c' to clear data, 'q' to quit",
                attr,
            )
            header.refresh()
        self._update_data_window()
        self._update_stats_window()
        self._update_status_window()

    def _update_data_window(self) -> None:
        win = self._data
        sensor = self.current_sensor
        if win is None or sensor is None or not self.readings:
            return
        win.erase()
        win.box()
        headers = sensor.display_headers
        head = self._attr(4, curses.A_BOLD)
        header_line = f"{headers[0]:<10}" + "".join(f" {h:<12}" for h in headers[1:])
        _put(win, 1, 2, header_line, head)
        _put(win, 2, 2, "-" * max(self._max_x - 6, 0), head)

        max_lines = self._max_y - 11
        for line, reading in enumerate(reversed(self.readings), start=3):
            if line >= max_lines:
                break
            pair = sensor.color_code(reading)
            quality = sensor.quality_description(reading)
            _put(win, line, 2, f"{reading.display_string()}   {quality}", self._attr(pair))
        win.refresh()

    def _update_stats_window(self) -> None:
        win = self._stats
        if win is None or not self.readings:
            return
        win.erase()
        win.box()
        _put(
            win, 0, 2,
            f"Statistics (last {len(self.readings)} readings)",
            self._attr(4, curses.A_BOLD),
        )
        lines = _statistics_lines(self.readings)
        if lines is not None:
            _put(win, 1, 2, lines[0])
            _put(win, 2, 2, lines[1])
        win.refresh()

    def _update_status_window(self) -> None:
        win = self._status
        if win is None:
            return
        win.erase()
        win.box()
        text = (
            f"Status: Active | Last update: {datetime.now():%H:%M:%S} "
            f"| Total readings: {len(self.readings)}"
        )
        _put(win, 1, 2, text, self._attr(5))
        win.refresh()

    def _handle_sensor_key(self, ch: int) -> bool:
        """React to a key in the sensor view; return True when the user asked to quit."""
        if ch in (ord("q"), ord("Q")):
            return True
        if ch in (ord("b"), ord("B")):
            self.in_sensor_mode = False
            if self.current_sensor is not None:
                self.current_sensor.cleanup()
                self.current_sensor = None
            self.clear_data()
            self._data = self._stats = None
            self._create_windows()
        elif ch in (ord("c"), ord("C")):
            self.clear_data()
        elif ch == curses.KEY_RESIZE and self._screen is not None:
            self._max_y, self._max_x = self._screen.getmaxyx()
            self._create_windows()
        return False

    # ---------------------------------------------------------------- public

    def add_reading(self, data: SensorData) -> None:
        """Store a reading, keeping only the latest hundred."""
        self.readings.append(data)

    def show_error(self, message: str) -> None:
        """Show an error in the status bar, if one is on screen."""
        win = self._status
        if win is None:
            return
        win.erase()
        win.box()
        _put(win, 1, 2, f"ERROR: {message}", self._attr(3, curses.A_BOLD))
        win.refresh()

    def clear_data(self) -> None:
        """Forget all readings."""
        self.readings.clear()

    def cleanup(self) -> None:
        """Release the sensor, drop the windows and restore the terminal."""
        self._header = self._menu = self._data = self._stats = self._status = None
        if self.current_sensor is not None:
            self.current_sensor.cleanup()
            self.current_sensor = None
        if self._screen is not None:
            self._screen = None
            curses.endwin()