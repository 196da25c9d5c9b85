from datetime import datetime, timedelta

from sensorwatch.legacy_tui import SDS011TUI, SensorReading, summarize


def test_summarize_empty():
    assert summarize([]) is None


def test_summarize_single_reading():
    stats = summarize([SensorReading(12.5, 30.0)])
    assert stats.count == 1
    assert stats.avg_pm25 == stats.min_pm25 == stats.max_pm25 == 12.5
    assert stats.avg_pm10 == stats.min_pm10 == stats.max_pm10 == 30.0


def test_summarize_bounds():
    values = [(8.0, 12.0), (40.5, 60.0), (15.5, 20.3), (22.0, 18.0)]
    stats = summarize(SensorReading(a, b) for a, b in values)
    assert stats.count == len(values)
    assert stats.min_pm25 == min(a for a, _ in values)
    assert stats.max_pm25 == max(a for a, _ in values)
    assert stats.min_pm10 == min(b for _, b in values)
    assert stats.max_pm10 == max(b for _, b in values)
    assert stats.min_pm25 <= stats.avg_pm25 <= stats.max_pm25
    assert stats.min_pm10 <= stats.avg_pm10 <= stats.max_pm10


def test_reading_timestamp_defaults_to_now():
    before = datetime.now()
    reading = SensorReading(1.0, 2.0)
    assert before <= reading.timestamp <= before + timedelta(seconds=5)


def test_add_reading_keeps_last_hundred():
    tui = SDS011TUI()
    for i in range(105):
        tui.add_reading(float(i), float(i) * 2)
    assert len(tui.readings) == 100
    assert tui.readings[0].pm25 == 5.0
    assert tui.readings[-1].pm10 == 208.0


def test_clear_data_empties_readings():
    tui = SDS011TUI()
    tui.add_reading(15.5, 20.3)
    tui.clear_data()
    assert list(tui.readings) == []


def test_handle_input_without_screen_does_not_quit():
    tui = SDS011TUI()
    assert tui.handle_input() is False