"""Abstract interfaces for sensor readings and sensor plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod


class SensorData(ABC):
    """One reading taken from a sensor."""

    @abstractmethod
    def to_string(self) -> str:
        """Describe the reading in plain text."""

    @abstractmethod
    def display_string(self) -> str:
        """Format the reading as a table row for display."""

    def __str__(self) -> str:
        return self.to_string()


class SensorPlugin(ABC):
    """A kind of sensor that can be probed, connected to and read."""

    @property
    @abstractmethod
    def type_name(self) -> str:
        """Short sensor type name."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description."""

    @abstractmethod
    def is_available(self, port: str) -> bool:
        """Whether the sensor can be reached on ``port``."""

    @abstractmethod
    def initialize(self, port: str) -> None:
        """Connect to the sensor on ``port``; raises OSError on failure."""

    @abstractmethod
    def read_data(self) -> SensorData | None:
        """Read one value, or None if nothing valid could be read."""

    @property
    @abstractmethod
    def current_port(self) -> str:
        """The port currently connected, or an empty string."""

    @property
    @abstractmethod
    def display_headers(self) -> list[str]:
        """Column headers for the data table."""

    @abstractmethod
    def color_code(self, data: SensorData) -> int:
        """Colour pair for a reading: 1 green, 2 yellow, 3 red."""

    @abstractmethod
    def quality_description(self, data: SensorData) -> str:
        """Word describing the quality of a reading."""

    @abstractmethod
    def cleanup(self) -> None:
        """Release the connection."""

    def __enter__(self) -> SensorPlugin:
        return self

    def __exit__(self, *args: object) -> None:
        self.cleanup()