"""Serial device discovery and a diagnostic command for sensor detection."""

from __future__ import annotations

import argparse
import logging
import os
import stat
import sys
from collections.abc import Sequence

from .registry import SensorRegistry, common_ports
from .sds011 import SDS011Plugin

logger = logging.getLogger(__name__)

_USB_SERIAL_MARKERS = (
    "usbserial",
    "usbmodem",
    "SLAB_USBtoUART",
    "wchusbserial",
    "CH34",
    "CP210",
    "FT",
    "PL2303",
    "Bluetooth",
)


def is_serial_device_name(name: str, platform: str | None = None) -> bool:
    """Whether a ``/dev`` entry name looks like a USB serial device.

    Only macOS names (``cu.*`` and ``tty.*``) are recognised.
    """
    platform = platform or sys.platform
    if platform != "darwin":
        return False
    if not name.startswith(("cu.", "tty.")):
        return False
    if any(marker in name for marker in _USB_SERIAL_MARKERS):
        return True
    return name.startswith(("cu.usb", "tty.usb")) and len(name) > 6


def _is_char_device(path: str) -> bool:
    try:
        return stat.S_ISCHR(os.stat(path).st_mode)
    except OSError:
        return False


def discover_serial_devices(
    dev_dir: str | os.PathLike[str] = "/dev", platform: str | None = None
) -> list[str]:
    """List serial character devices in ``dev_dir``, sorted.

    Falls back to the common ports for ``platform`` when none are found.
    """
    directory = os.fspath(dev_dir)
    devices: list[str] = []
    try:
        names = os.listdir(directory)
    except OSError:
        logger.warning("Could not open %s directory", directory)
        names = []

    for name in names:
        if not is_serial_device_name(name, platform):
            continue
        full_path = os.path.join(directory, name)
        if _is_char_device(full_path):
            logger.debug("Adding to list: %s", full_path)
            devices.append(full_path)
        else:
            logger.debug("Not a character device or stat failed: %s", full_path)

    devices.sort()
    logger.debug("Total devices found: %d", len(devices))
    if not devices:
        logger.debug("No devices found, falling back to common ports")
        return common_ports(platform)
    return devices


def main(argv: Sequence[str] | None = None) -> int:
    """Print what sensor discovery finds on this machine."""
    parser = argparse.ArgumentParser(description="Diagnose sensor discovery.")
    parser.add_argument(
        "--detailed", action="store_true", help="also scan /dev with verbose output"
    )
    args = parser.parse_args(argv)

    print("Testing sensor discovery...")
    registry = SensorRegistry()
    registry.register_plugin(SDS011Plugin())

    types = registry.available_types()
    print(f"Registered plugins: {len(types)}")
    for type_name in types:
        print(f"  - {type_name}")

    print("Testing /dev/ttyUSB0 directly...")
    available = SDS011Plugin().is_available("/dev/ttyUSB0")
    print(f'SDS011Plugin.is_available("/dev/ttyUSB0") = {int(available)}')

    print("Discovering sensors...")
    sensors = registry.discover_sensors()
    print(f"Found {len(sensors)} sensors:")
    for sensor in sensors:
        print(
            f"  Port: {sensor.port}, Type: {sensor.type}, "
            f"Available: {'Yes' if sensor.available else 'No'}, "
            f"Description: {sensor.description}"
        )

    if args.detailed:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s")
        print("Debug discovery with detailed output...")
        devices = discover_serial_devices()
        print("\nFinal result:")
        for device in devices:
            print(f"  {device}")

    return 0


if __name__ == "__main__":
    sys.exit(main())