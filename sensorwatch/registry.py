"""Registry of sensor plugins and discovery of sensors on serial ports."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from dataclasses import dataclass

from .sensor_plugin import SensorPlugin

_UNKNOWN_TYPE = "Unknown"
_UNKNOWN_DESCRIPTION = "Unidentified device"


@dataclass(frozen=True)
class SensorInfo:
    """A port found during discovery and what, if anything, answers on it."""

    port: str
    type: str
    description: str
    available: bool


def common_ports(platform: str | None = None) -> list[str]:
    """Serial ports worth probing on ``platform`` (defaults to the running one)."""
    platform = platform or sys.platform
    ports: list[str] = []
    if platform == "darwin":
        for i in range(4):
            ports.append(f"/dev/cu.usbserial-{i}")
            ports.append(f"/dev/cu.usbmodem{i}")
            ports.append(f"/dev/cu.SLAB_USBtoUART{i}")
        ports += ["/dev/cu.usbserial", "/dev/cu.usbmodem", "/dev/cu.SLAB_USBtoUART"]
    elif platform.startswith("linux"):
        for i in range(4):
            ports.append(f"/dev/ttyUSB{i}")
            ports.append(f"/dev/ttyACM{i}")
        ports += ["/dev/ttyS0", "/dev/ttyS1"]
    else:
        ports += ["/dev/ttyUSB0", "/dev/ttyACM0"]
    return ports


class SensorRegistry:
    """Holds one prototype plugin per sensor type, keyed by type name."""

    def __init__(self, ports: Sequence[str] | None = None) -> None:
        self._plugins: dict[str, SensorPlugin] = {}
        self._ports = list(ports) if ports is not None else None

    def register_plugin(self, plugin: SensorPlugin | None) -> None:
        """Register ``plugin`` under its type name, replacing any earlier one."""
        if plugin is not None:
            self._plugins[plugin.type_name] = plugin

    def available_types(self) -> list[str]:
        """Registered type names in sorted order."""
        return sorted(self._plugins)

    def create_plugin(self, type_name: str) -> SensorPlugin | None:
        """Create a fresh plugin of a registered type, or None if it is unknown."""
        prototype = self._plugins.get(type_name)
        if prototype is None:
            return None
        return type(prototype)()

    def discover_sensors(self) -> list[SensorInfo]:
        """Probe every existing port with each plugin type in turn.

        A port that no plugin recognises is still listed, as unavailable.
        """
        ports = self._ports if self._ports is not None else common_ports()
        sensors: list[SensorInfo] = []
        for port in ports:
            if not os.path.exists(port):
                continue
            for type_name in self.available_types():
                plugin = self.create_plugin(type_name)
                if plugin is not None and plugin.is_available(port):
                    sensors.append(SensorInfo(port, type_name, plugin.description, True))
                    break
            else:
                sensors.append(
                    SensorInfo(port, _UNKNOWN_TYPE, _UNKNOWN_DESCRIPTION, False)
                )
        return sensors