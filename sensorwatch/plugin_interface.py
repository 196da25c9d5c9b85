"""Interfaces for self-contained sensor plugins: detection, sensor access and display."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import IntEnum


@dataclass(frozen=True)
class DeviceInfo:
    """A device found by a plugin.

    Two devices are the same when port, vendor id and product id match;
    description and accessibility do not take part in the comparison.
    """

    port: str
    vendor_id: str = ""
    product_id: str = ""
    description: str = field(default="", compare=False)
    accessible: bool = field(default=False, compare=False)


class InputAction(IntEnum):
    """What a key press in a plugin display asks for."""

    CONTINUE = 0
    QUIT = 1
    BACK = 2
    CLEAR = 3
    RESIZE = 4


class PluginData(ABC):
    """One reading produced by a plugin sensor."""

    @abstractmethod
    def display_string(self) -> str:
        """Format the reading as a table row."""

    @abstractmethod
    def quality_description(self) -> str:
        """Word describing the quality of the reading."""

    @abstractmethod
    def color_code(self) -> int:
        """Colour pair for the reading: 1 green, 2 yellow, 3 red."""

    def __str__(self) -> str:
        return self.display_string()


class PluginUI(ABC):
    """A display for one kind of sensor."""

    @abstractmethod
    def initialize(self, max_y: int, max_x: int) -> None:
        """Prepare the display for a screen of the given size."""

    @abstractmethod
    def cleanup(self) -> None:
        """Release the display's windows."""

    @abstractmethod
    def create_windows(self) -> None:
        """(Re)create the display's windows."""

    @abstractmethod
    def resize(self, max_y: int, max_x: int) -> None:
        """Adapt the display to a new screen size."""

    @abstractmethod
    def show_header(self, port: str, status: str) -> None:
        """Draw the title line with the port and a status word."""

    @abstractmethod
    def update_data_display(self, readings: Sequence[PluginData]) -> None:
        """Draw the most recent readings."""

    @abstractmethod
    def update_statistics(self, readings: Sequence[PluginData]) -> None:
        """Draw summary statistics of the readings."""

    @abstractmethod
    def show_error(self, message: str) -> None:
        """Show an error message."""

    @abstractmethod
    def show_status(self, status: str) -> None:
        """Show a status message."""

    @abstractmethod
    def handle_input(self) -> InputAction:
        """Read one key press and say what it asks for."""

    @property
    @abstractmethod
    def plugin_name(self) -> str:
        """Name of the display."""

    @property
    @abstractmethod
    def version(self) -> str:
        """Version of the display."""


class PluginSensor(ABC):
    """Connection to one sensor device."""

    @abstractmethod
    def initialize(self, port: str) -> None:
        """Connect to the sensor on ``port``; raises OSError on failure."""

    @abstractmethod
    def cleanup(self) -> None:
        """Close the connection."""

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Whether the sensor is connected."""

    @abstractmethod
    def read_data(self) -> PluginData | None:
        """Read one value, or None if nothing valid could be read."""

    @abstractmethod
    def calibrate(self) -> bool:
        """Calibrate the sensor; return whether it succeeded."""

    @abstractmethod
    def reset(self) -> None:
        """Reset the sensor."""

    @property
    @abstractmethod
    def sensor_name(self) -> str:
        """Name of the sensor."""

    @property
    @abstractmethod
    def version(self) -> str:
        """Version of the sensor driver."""

    @property
    @abstractmethod
    def supported_devices(self) -> list[str]:
        """Device models this sensor driver handles."""

    def __enter__(self) -> PluginSensor:
        return self

    def __exit__(self, *args: object) -> None:
        self.cleanup()


class Plugin(ABC):
    """A sensor plugin: detects devices and creates sensors and displays for them."""

    _initialized: bool = False

    @property
    def initialized(self) -> bool:
        """Whether the plugin has been initialized and not yet cleaned up."""
        return self._initialized

    def initialize(self) -> None:
        """Prepare the plugin; raise if it cannot be used."""
        self._initialized = True

    def cleanup(self) -> None:
        """Release whatever the plugin holds."""
        self._initialized = False

    @abstractmethod
    def detect_devices(self) -> list[DeviceInfo]:
        """Devices this plugin can see right now."""

    @abstractmethod
    def can_handle_device(self, device: DeviceInfo) -> bool:
        """Whether this plugin can drive ``device``."""

    @abstractmethod
    def device_match_score(self, device: DeviceInfo) -> float:
        """How well ``device`` matches this plugin; higher is better."""

    @abstractmethod
    def create_sensor(self) -> PluginSensor:
        """A new, unconnected sensor."""

    @abstractmethod
    def create_ui(self) -> PluginUI:
        """A new display."""

    @property
    @abstractmethod
    def plugin_name(self) -> str:
        """Name of the plugin."""

    @property
    @abstractmethod
    def version(self) -> str:
        """Version of the plugin."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description."""

    @property
    @abstractmethod
    def supported_device_patterns(self) -> list[str]:
        """Patterns naming the devices this plugin supports."""

    def __enter__(self) -> Plugin:
        self.initialize()
        return self

    def __exit__(self, *args: object) -> None:
        self.cleanup()