"""SDS011 PM2.5/PM10 sensor plugin."""

from __future__ import annotations

import os
import termios
from dataclasses import dataclass, field
from datetime import datetime

from .app_utils import format_float
from .reader import SDS011Reader
from .sensor_plugin import SensorData, SensorPlugin

_GOOD_LIMIT = 15.0
_MODERATE_LIMIT = 25.0


def classify_pm25(pm25: float) -> tuple[int, str]:
    """Return ``(color_code, quality)`` for a PM2.5 value, after WHO guidelines."""
    if pm25 <= _GOOD_LIMIT:
        return 1, "Good"
    if pm25 <= _MODERATE_LIMIT:
        return 2, "Moderate"
    return 3, "Poor"


@dataclass
class SDS011Data(SensorData):
    """One PM2.5/PM10 reading with the local time it was taken."""

    pm25: float
    pm10: float
    timestamp: datetime = field(default_factory=datetime.now)

    def to_string(self) -> str:
        return (
            f"PM2.5: {format_float(self.pm25)} µg/m³, "
            f"PM10: {format_float(self.pm10)} µg/m³"
        )

    def display_string(self) -> str:
        # Value columns are padded with '0' to a width of eight.
        return (
            f"{self.timestamp:%H:%M:%S}"
            f"   {format_float(self.pm25).ljust(8, '0')}"
            f"   {format_float(self.pm10).ljust(8, '0')}"
        )


class SDS011Plugin(SensorPlugin):
    """Plugin for the SDS011 particulate matter sensor."""

    def __init__(self) -> None:
        self._reader: SDS011Reader | None = None
        self._port = ""

    @property
    def type_name(self) -> str:
        return "SDS011"

    @property
    def description(self) -> str:
        return "SDS011 PM2.5/PM10 Particulate Matter Sensor"

    def is_available(self, port: str) -> bool:
        try:
            fd = os.open(port, os.O_RDONLY | os.O_NOCTTY | os.O_NONBLOCK)
        except OSError:
            return False
        try:
            termios.tcgetattr(fd)
        except termios.error:
            return False
        finally:
            os.close(fd)
        return True

    def initialize(self, port: str) -> None:
        self.cleanup()
        self._port = port
        reader = SDS011Reader(port)
        reader.initialize()
        self._reader = reader

    def read_data(self) -> SDS011Data | None:
        if self._reader is None:
            return None
        values = self._reader.read_pm_data()
        if values is None:
            return None
        return SDS011Data(*values)

    @property
    def current_port(self) -> str:
        return self._port

    @property
    def display_headers(self) -> list[str]:
        return ["Time", "PM2.5 (µg/m³)", "PM10 (µg/m³)", "Quality"]

    def color_code(self, data: SensorData) -> int:
        if not isinstance(data, SDS011Data):
            return 1
        return classify_pm25(data.pm25)[0]

    def quality_description(self, data: SensorData) -> str:
        if not isinstance(data, SDS011Data):
            return "Unknown"
        return classify_pm25(data.pm25)[1]

    def cleanup(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None
        self._port = ""