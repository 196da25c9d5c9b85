from unittest.mock import patch

import pytest
import serial

from sensorwatch.reader import PacketError, SDS011Reader, packet_hex, parse_packet


def make_packet(pm25_raw, pm10_raw):
    body = [pm25_raw & 0xFF, pm25_raw >> 8, pm10_raw & 0xFF, pm10_raw >> 8, 0x12, 0x34]
    return bytes([0xAA, 0xC0, *body, sum(body) & 0xFF, 0xAB])


class FakeSerial:
    def __init__(self, chunks):
        self.chunks = list(chunks)
        self.reads = 0
        self.closed = False

    def read(self, size):
        self.reads += 1
        return self.chunks.pop(0) if self.chunks else b""

    def close(self):
        self.closed = True


def test_parse_packet_decodes_little_endian_tenths():
    pm25, pm10 = parse_packet(make_packet(123, 456))
    assert pm25 == pytest.approx(12.3)
    assert pm10 == pytest.approx(45.6)


def test_parse_packet_high_bytes():
    pm25, pm10 = parse_packet(make_packet(1236, 2618))
    assert pm25 == pytest.approx(123.6)
    assert pm10 == pytest.approx(261.8)


def test_parse_packet_rejects_short_packet():
    with pytest.raises(PacketError):
        parse_packet(make_packet(1, 2)[:9])


@pytest.mark.parametrize("index", [0, 1, 9])
def test_parse_packet_rejects_bad_framing(index):
    packet = bytearray(make_packet(10, 20))
    packet[index] ^= 0xFF
    with pytest.raises(PacketError):
        parse_packet(packet)


def test_parse_packet_rejects_bad_checksum():
    packet = bytearray(make_packet(10, 20))
    packet[8] = (packet[8] + 1) & 0xFF
    with pytest.raises(PacketError):
        parse_packet(packet)


def test_packet_error_is_value_error():
    with pytest.raises(ValueError):
        parse_packet(b"")


def test_packet_hex():
    assert packet_hex(bytes([0xAA, 0xC0])) == "Raw packet: aa c0 "


def test_read_retries_until_valid_packet():
    fake = FakeSerial([b"\x00" * 10, b"\xaa", make_packet(50, 70)])
    with patch("serial.Serial", return_value=fake), patch("time.sleep") as sleep:
        reader = SDS011Reader("/dev/fake")
        reader.initialize()
        result = reader.read_pm_data()
    assert result == (pytest.approx(5.0), pytest.approx(7.0))
    assert fake.reads == 3
    assert sleep.call_count == 2


def test_read_gives_up_after_ten_attempts():
    fake = FakeSerial([])
    with patch("serial.Serial", return_value=fake), patch("time.sleep"):
        reader = SDS011Reader("/dev/fake")
        reader.initialize()
        assert reader.read_pm_data() is None
    assert fake.reads == 10


def test_read_without_initialize_returns_none():
    assert SDS011Reader("/dev/fake").read_pm_data() is None


def test_initialize_failure_raises_oserror():
    with patch("serial.Serial", side_effect=serial.SerialException("nope")):
        reader = SDS011Reader("/dev/missing")
        with pytest.raises(OSError, match="/dev/missing"):
            reader.initialize()


def test_context_manager_opens_and_closes():
    fake = FakeSerial([make_packet(1, 2)])
    with patch("serial.Serial", return_value=fake) as opener:
        with SDS011Reader("/dev/fake") as reader:
            assert reader.read_pm_data() == (pytest.approx(0.1), pytest.approx(0.2))
    assert opener.call_args.kwargs["port"] == "/dev/fake"
    assert opener.call_args.kwargs["baudrate"] == 9600
    assert fake.closed is True