"""Serial reader for the SDS011 particulate matter sensor."""

from __future__ import annotations

import logging
import time

import serial

logger = logging.getLogger(__name__)

HEADER = 0xAA
TAIL = 0xAB
CMD_ID = 0xC0
PACKET_LENGTH = 10
BAUD_RATE = 9600

_MAX_ATTEMPTS = 10
_RETRY_DELAY = 0.1
_READ_TIMEOUT = 0.5


class PacketError(ValueError):
    """Raised when bytes received from the sensor are not a valid data packet."""


def parse_packet(packet: bytes) -> tuple[float, float]:
    """Decode a 10-byte data packet into ``(pm25, pm10)`` in µg/m³."""
    data = bytes(packet)
    if len(data) != PACKET_LENGTH:
        raise PacketError(f"expected {PACKET_LENGTH} bytes, got {len(data)}")
    if data[0] != HEADER or data[9] != TAIL or data[1] != CMD_ID:
        raise PacketError("bad packet framing")
    if sum(data[2:8]) & 0xFF != data[8]:
        raise PacketError("checksum mismatch")
    pm25_raw = int.from_bytes(data[2:4], "little")
    pm10_raw = int.from_bytes(data[4:6], "little")
    return pm25_raw / 10.0, pm10_raw / 10.0


def packet_hex(packet: bytes) -> str:
    """Render a packet as hexadecimal bytes for debugging."""
    return "Raw packet: " + "".join(f"{byte:02x} " for byte in bytes(packet))


class SDS011Reader:
    """Reads PM2.5 and PM10 values from an SDS011 on a serial port."""

    def __init__(self, port: str = "/dev/ttyUSB0") -> None:
        self.port = port
        self._serial: serial.Serial | None = None

    def initialize(self) -> None:
        """Open and configure the serial port (9600 8N1, 0.5 s timeout).

        Raises OSError if the port cannot be opened.
        """
        self.close()
        try:
            self._serial = serial.Serial(
                port=self.port,
                baudrate=BAUD_RATE,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=_READ_TIMEOUT,
                xonxoff=False,
                rtscts=False,
            )
        except (serial.SerialException, OSError) as exc:
            raise OSError(f"Error opening serial port: {self.port}") from exc
        logger.info("Serial port %s initialized successfully", self.port)

    def read_pm_data(self) -> tuple[float, float] | None:
        """Return ``(pm25, pm10)``, or None if no valid packet arrived in ten attempts."""
        if self._serial is None:
            return None
        for _ in range(_MAX_ATTEMPTS):
            packet = self._serial.read(PACKET_LENGTH)
            try:
                return parse_packet(packet)
            except PacketError:
                time.sleep(_RETRY_DELAY)
        return None

    def close(self) -> None:
        """Close the serial port if it is open."""
        if self._serial is not None:
            self._serial.close()
            self._serial = None

    def __enter__(self) -> SDS011Reader:
        if self._serial is None:
            self.initialize()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()