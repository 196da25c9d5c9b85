"""Self-contained SDS011 plugin: device detection, sensor access and display."""

from __future__ import annotations

import curses
import os
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from .plugin_interface import (
    DeviceInfo,
    InputAction,
    Plugin,
    PluginData,
    PluginSensor,
    PluginUI,
)
from .reader import SDS011Reader
from .sds011 import classify_pm25

_VERSION = "1.0.0"
_VENDOR_ID = "1a86"
_PRODUCT_ID = "7523"
_DEVICE_DESCRIPTION = "SDS011 PM2.5/PM10 Sensor"

_LINUX_PORTS = (
    "ttyUSB0", "ttyUSB1", "ttyUSB2", "ttyUSB3",
    "ttyACM0", "ttyACM1", "ttyACM2", "ttyACM3",
)
_MACOS_PREFIXES = ("cu.usbserial", "cu.usbmodem", "cu.SLAB_USBtoUART", "cu.wchusbserial")

_HEADER_HEIGHT = 3
_STATUS_HEIGHT = 2
_STATS_HEIGHT = 4
_MIN_ROWS = 15
_MIN_COLS = 60

_KEY_ACTIONS = {
    ord("q"): InputAction.QUIT,
    ord("Q"): InputAction.QUIT,
    ord("b"): InputAction.BACK,
    ord("B"): InputAction.BACK,
    ord("c"): InputAction.CLEAR,
    ord("C"): InputAction.CLEAR,
    curses.KEY_RESIZE: InputAction.RESIZE,
}


@dataclass
class SDS011Reading(PluginData):
    """One PM2.5/PM10 reading with the local time it was taken."""

    pm25: float
    pm10: float
    timestamp: datetime = field(default_factory=datetime.now)

    def display_string(self) -> str:
        return (
            f"{self.timestamp:%H:%M:%S}"
            f"   PM2.5: {self.pm25:5.1f}"
            f"   PM10: {self.pm10:5.1f}"
        )

    def quality_description(self) -> str:
        return classify_pm25(self.pm25)[1]

    def color_code(self) -> int:
        return classify_pm25(self.pm25)[0]


def _statistics(readings: Sequence[PluginData]) -> tuple[float, float, float, float, float, float]:
    """``(avg25, min25, max25, avg10, min10, max10)`` over the SDS011 readings.

    The averages divide by the number of all readings; minima start at 1000
    and maxima at 0.
    """
    sum25 = sum10 = 0.0
    min25, max25 = 1000.0, 0.0
    min10, max10 = 1000.0, 0.0
    for reading in readings:
        if isinstance(reading, SDS011Reading):
            sum25 += reading.pm25
            sum10 += reading.pm10
            min25 = min(min25, reading.pm25)
            max25 = max(max25, reading.pm25)
            min10 = min(min10, reading.pm10)
            max10 = max(max10, reading.pm10)
    count = len(readings)
    return sum25 / count, min25, max25, sum10 / count, min10, max10


class SDS011Sensor(PluginSensor):
    """Connection to an SDS011 through a serial reader."""

    def __init__(self, reader_factory: Callable[[str], SDS011Reader] = SDS011Reader) -> None:
        self._reader_factory = reader_factory
        self._reader: SDS011Reader | None = None
        self._port: str | None = None
        self._connected = False

    def initialize(self, port: str) -> None:
        self.cleanup()
        reader = self._reader_factory(port)
        self._reader = reader
        self._port = port
        try:
            reader.initialize()
        except OSError:
            self._connected = False
            raise
        self._connected = True

    def cleanup(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None
        self._port = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    def read_data(self) -> SDS011Reading | None:
        if not self._connected or self._reader is None:
            return None
        values = self._reader.read_pm_data()
        if values is None:
            return None
        return SDS011Reading(*values)

    def calibrate(self) -> bool:
        # The SDS011 has no calibration procedure.
        return True

    def reset(self) -> None:
        """Reopen the connection on the current port, if there is one."""
        port = self._port
        if port is not None:
            self.initialize(port)

    @property
    def sensor_name(self) -> str:
        return "SDS011"

    @property
    def version(self) -> str:
        return _VERSION

    @property
    def supported_devices(self) -> list[str]:
        return ["SDS011", "Nova PM Sensor SDS011"]


def _put(win, y: int, x: int, text: str, attr: int = 0) -> None:
    try:
        win.addstr(y, x, text, attr)
    except curses.error:
        # Text that runs past the window edge is simply cut off.
        pass


class SDS011UI(PluginUI):
    """Curses display of SDS011 readings, statistics and status.

    Keys are read from ``screen`` (normally the standard screen).
    """

    def __init__(self, screen=None) -> None:
        self._screen = screen
        self._header = None
        self._data = None
        self._stats = None
        self._status = None
        self._max_y = 0
        self._max_x = 0

    @property
    def has_windows(self) -> bool:
        """Whether the screen was large enough for the windows to be created."""
        return self._header is not None

    def initialize(self, max_y: int, max_x: int) -> None:
        self._max_y = max_y
        self._max_x = max_x
        self.create_windows()

    def cleanup(self) -> None:
        self._header = self._data = self._stats = self._status = None

    def create_windows(self) -> None:
        self.cleanup()
        if self._max_y < _MIN_ROWS or self._max_x < _MIN_COLS:
            return
        data_height = self._max_y - _HEADER_HEIGHT - _STATS_HEIGHT - _STATUS_HEIGHT
        self._header = curses.newwin(_HEADER_HEIGHT, self._max_x, 0, 0)
        self._data = curses.newwin(data_height, self._max_x, _HEADER_HEIGHT, 0)
        self._stats = curses.newwin(
            _STATS_HEIGHT, self._max_x, _HEADER_HEIGHT + data_height, 0
        )
        self._status = curses.newwin(
            _STATUS_HEIGHT, self._max_x, self._max_y - _STATUS_HEIGHT, 0
        )
        self._data.scrollok(True)
        for win in (self._header, self._data, self._stats, self._status):
            win.box()

    def resize(self, max_y: int, max_x: int) -> None:
        self._max_y = max_y
        self._max_x = max_x
        self.create_windows()

    @staticmethod
    def _attr(pair: int, *extra: int) -> int:
        try:
            if not curses.has_colors():
                return 0
        except curses.error:
            return 0
        attr = curses.color_pair(pair)
        for flag in extra:
            attr |= flag
        return attr

    def show_header(self, port: str, status: str) -> None:
        win = self._header
        if win is None:
            return
        win.erase()
        win.box()
        attr = self._attr(4, curses.A_BOLD)
        _put(win, 1, 2, f"SDS011 PM2.5/PM10 Sensor - {status}", attr)
        _put(win, 2, 2, f"Port: {port} | Controls: 'b' Back, 'c' Clear, 'q' Quit", attr)
        win.refresh()

    def update_data_display(self, readings: Sequence[PluginData]) -> None:
        win = self._data
        if win is None or not readings:
            return
        win.erase()
        win.box()
        head = self._attr(4, curses.A_BOLD)
        _put(win, 1, 2, "Time      PM2.5 (µg/m³)  PM10 (µg/m³)   Quality", head)
        _put(win, 2, 2, "-" * max(self._max_x - 6, 0), head)

        max_lines = self._max_y - _HEADER_HEIGHT - _STATS_HEIGHT - _STATUS_HEIGHT - 2
        for line, reading in enumerate(reversed(readings), start=3):
            if line >= max_lines:
                break
            text = f"{reading.display_string()}   {reading.quality_description()}"
            _put(win, line, 2, text, self._attr(reading.color_code()))
        win.refresh()

    def update_statistics(self, readings: Sequence[PluginData]) -> None:
        win = self._stats
        if win is None or not readings:
            return
        win.erase()
        win.box()
        _put(
            win, 0, 2,
            f"Statistics (last {len(readings)} readings)",
            self._attr(4, curses.A_BOLD),
        )
        avg25, min25, max25, avg10, min10, max10 = _statistics(readings)
        _put(win, 1, 2, f"PM2.5: Avg {avg25:.1f}  Min {min25:.1f}  Max {max25:.1f} µg/m³")
        _put(win, 2, 2, f"PM10:  Avg {avg10:.1f}  Min {min10:.1f}  Max {max10:.1f} µg/m³")
        win.refresh()

    def show_error(self, message: str) -> None:
        win = self._status
        if win is None:
            return
        win.erase()
        win.box()
        _put(win, 1, 2, f"ERROR: {message}", self._attr(3, curses.A_BOLD))
        win.refresh()

    def show_status(self, status: str) -> None:
        win = self._status
        if win is None:
            return
        win.erase()
        win.box()
        text = f"Status: {status} | Last update: {datetime.now():%H:%M:%S}"
        _put(win, 1, 2, text, self._attr(5))
        win.refresh()

    def handle_input(self) -> InputAction:
        source = self._screen if self._screen is not None else self._status
        if source is None:
            return InputAction.CONTINUE
        return _KEY_ACTIONS.get(source.getch(), InputAction.CONTINUE)

    @property
    def plugin_name(self) -> str:
        return "SDS011 UI"

    @property
    def version(self) -> str:
        return _VERSION


def _is_readable(path: str) -> bool:
    flags = os.O_RDONLY | getattr(os, "O_NOCTTY", 0) | getattr(os, "O_NONBLOCK", 0)
    try:
        fd = os.open(path, flags)
    except OSError:
        return False
    os.close(fd)
    return True


def _sds011_device(port: str) -> DeviceInfo:
    return DeviceInfo(
        port=port,
        vendor_id=_VENDOR_ID,
        product_id=_PRODUCT_ID,
        description=_DEVICE_DESCRIPTION,
        accessible=True,
    )


class SDS011DevicePlugin(Plugin):
    """Plugin that finds SDS011 sensors and provides their sensor and display."""

    def __init__(self, dev_dir: str | os.PathLike[str] = "/dev", platform: str | None = None) -> None:
        self._dev_dir = os.fspath(dev_dir)
        self._platform = platform or sys.platform

    def _candidate_ports(self) -> list[str]:
        if self._platform == "darwin":
            try:
                names = os.listdir(self._dev_dir)
            except OSError:
                return []
            return [
                os.path.join(self._dev_dir, name)
                for name in sorted(names)
                if name.startswith(_MACOS_PREFIXES)
            ]
        return [os.path.join(self._dev_dir, name) for name in _LINUX_PORTS]

    def detect_devices(self) -> list[DeviceInfo]:
        return [_sds011_device(port) for port in self._candidate_ports() if _is_readable(port)]

    def can_handle_device(self, device: DeviceInfo) -> bool:
        return (
            "SDS011" in device.description
            or device.vendor_id == _VENDOR_ID
            or "ttyUSB" in device.port
            or "cu.usbserial" in device.port
        )

    def device_match_score(self, device: DeviceInfo) -> float:
        score = 0.0
        if "SDS011" in device.description:
            score += 1.0
        if device.vendor_id == _VENDOR_ID:
            score += 0.8
        if device.product_id == _PRODUCT_ID:
            score += 0.8
        if "ttyUSB" in device.port:
            score += 0.5
        if "cu.usbserial" in device.port:
            score += 0.5
        return score

    def create_sensor(self) -> SDS011Sensor:
        return SDS011Sensor()

    def create_ui(self) -> SDS011UI:
        return SDS011UI()

    @property
    def plugin_name(self) -> str:
        return "SDS011"

    @property
    def version(self) -> str:
        return _VERSION

    @property
    def description(self) -> str:
        return "SDS011 PM2.5/PM10 Particulate Matter Sensor Plugin"

    @property
    def supported_device_patterns(self) -> list[str]:
        return ["SDS011", "Nova PM Sensor", "1a86:7523"]


def create_plugin() -> SDS011DevicePlugin:
    """A new SDS011 plugin."""
    return SDS011DevicePlugin()