from datetime import datetime
from unittest.mock import patch

import pytest

from sensorwatch.sds011 import SDS011Data, SDS011Plugin, classify_pm25
from sensorwatch.sensor_plugin import SensorData


def make_packet(pm25_raw, pm10_raw):
    body = [pm25_raw & 0xFF, pm25_raw >> 8, pm10_raw & 0xFF, pm10_raw >> 8, 0x12, 0x34]
    return bytes([0xAA, 0xC0, *body, sum(body) & 0xFF, 0xAB])


class FakeSerial:
    def __init__(self, chunks):
        self.chunks = list(chunks)
        self.closed = False

    def read(self, size):
        return self.chunks.pop(0) if self.chunks else b""

    def close(self):
        self.closed = True


class Other(SensorData):
    def to_string(self):
        return "other"

    def display_string(self):
        return "other"


@pytest.mark.parametrize(
    "pm25, expected",
    [
        (0.0, (1, "Good")),
        (15.0, (1, "Good")),
        (15.1, (2, "Moderate")),
        (25.0, (2, "Moderate")),
        (25.1, (3, "Poor")),
    ],
)
def test_classify_pm25(pm25, expected):
    assert classify_pm25(pm25) == expected


def test_to_string():
    data = SDS011Data(12.3, 45.6)
    assert data.to_string() == "PM2.5: 12.3 µg/m³, PM10: 45.6 µg/m³"
    assert str(data) == data.to_string()


def test_display_string_pads_values_with_zeroes():
    data = SDS011Data(12.3, 45.6, datetime(2024, 1, 1, 8, 5, 9))
    assert data.display_string() == "08:05:09   12.30000   45.60000"


def test_plugin_identity():
    plugin = SDS011Plugin()
    assert plugin.type_name == "SDS011"
    assert plugin.description == "SDS011 PM2.5/PM10 Particulate Matter Sensor"
    assert plugin.display_headers == ["Time", "PM2.5 (µg/m³)", "PM10 (µg/m³)", "Quality"]
    assert plugin.current_port == ""


def test_color_and_quality_follow_pm25():
    plugin = SDS011Plugin()
    poor = SDS011Data(30.0, 10.0)
    assert plugin.color_code(poor) == classify_pm25(30.0)[0]
    assert plugin.quality_description(poor) == "Poor"


def test_foreign_data_is_unknown():
    plugin = SDS011Plugin()
    assert plugin.color_code(Other()) == 1
    assert plugin.quality_description(Other()) == "Unknown"


def test_missing_port_is_not_available(tmp_path):
    assert SDS011Plugin().is_available(str(tmp_path / "missing")) is False


def test_regular_file_is_not_available(tmp_path):
    path = tmp_path / "plain"
    path.write_bytes(b"")
    assert SDS011Plugin().is_available(str(path)) is False


def test_read_before_initialize_is_none():
    assert SDS011Plugin().read_data() is None


def test_initialize_failure_raises(tmp_path):
    plugin = SDS011Plugin()
    with pytest.raises(OSError):
        plugin.initialize(str(tmp_path / "missing"))
    assert plugin.read_data() is None


def test_initialize_read_and_cleanup():
    fake = FakeSerial([make_packet(123, 456)])
    plugin = SDS011Plugin()
    with patch("serial.Serial", return_value=fake):
        plugin.initialize("/dev/fake")
    assert plugin.current_port == "/dev/fake"
    data = plugin.read_data()
    assert isinstance(data, SDS011Data)
    assert data.pm25 == pytest.approx(12.3)
    assert data.pm10 == pytest.approx(45.6)
    plugin.cleanup()
    assert fake.closed is True
    assert plugin.current_port == ""
    assert plugin.read_data() is None


def test_read_failure_returns_none():
    fake = FakeSerial([])
    plugin = SDS011Plugin()
    with patch("serial.Serial", return_value=fake), patch("time.sleep"):
        plugin.initialize("/dev/fake")
        assert plugin.read_data() is None